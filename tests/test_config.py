"""Tests for docsync.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from docsync.config import DocsyncConfig, load_config
from docsync.errors import ConfigurationError
from docsync.generator import DEFAULT_CONCURRENCY


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path, environ={})

    assert isinstance(config, DocsyncConfig)
    assert config.workspace == tmp_path.resolve()
    assert config.project_root == (tmp_path / ".." / "playwright").resolve()
    assert config.source_root == config.project_root / "docs" / "src"
    assert config.languages == []
    assert config.api_file is None
    assert config.concurrency == DEFAULT_CONCURRENCY == 8
    assert config.exclude_paths == []
    assert config.link_template is None
    assert config.stars.enabled is True
    assert config.stars.repository == "microsoft/playwright"
    assert config.stars.target == tmp_path.resolve() / "src" / "components" / "GitHubStarButton" / "index.tsx"


def test_environment_overrides_project_root(tmp_path: Path) -> None:
    (tmp_path / ".docsync.yml").write_text("project_root: configured\n", encoding="utf-8")
    project = tmp_path / "from-env"

    config = load_config(tmp_path, environ={"DOCSYNC_SRC_DIR": str(project)})

    assert config.project_root == project.resolve()


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    (tmp_path / "api.yml").write_text("Client: {}\n", encoding="utf-8")
    config_file = tmp_path / ".docsync.yml"
    config_file.write_text(
        """
project_root: ../sdk
languages: [python, csharp]
api_file: api.yml
concurrency: 2
exclude_paths:
  - drafts/
  - "*.tmp"
link_template: "[{{ text }}](/api/{{ symbol }})"
stars:
  enabled: false
  repository: acme/sdk
  target: web/stars.tsx
  request_timeout: 5
""",
        encoding="utf-8",
    )

    config = load_config(config_file, environ={})

    assert config.project_root == (tmp_path / ".." / "sdk").resolve()
    assert config.languages == ["python", "csharp"]
    assert config.api_file == (tmp_path / "api.yml").resolve()
    assert config.concurrency == 2
    assert config.exclude_paths == ["drafts/", "*.tmp"]
    assert config.link_template == "[{{ text }}](/api/{{ symbol }})"
    assert config.stars.enabled is False
    assert config.stars.repository == "acme/sdk"
    assert config.stars.target == tmp_path.resolve() / "web" / "stars.tsx"
    assert config.stars.request_timeout == 5.0


def test_default_api_file_is_picked_up_from_project(tmp_path: Path) -> None:
    project = tmp_path / "project"
    (project / "docs").mkdir(parents=True)
    (project / "docs" / "api.yml").write_text("{}\n", encoding="utf-8")

    config = load_config(tmp_path, environ={"DOCSYNC_SRC_DIR": str(project)})

    assert config.api_file == project.resolve() / "docs" / "api.yml"


def test_missing_configured_api_file_raises(tmp_path: Path) -> None:
    (tmp_path / ".docsync.yml").write_text("api_file: nope.yml\n", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="api_file not found"):
        load_config(tmp_path, environ={})


def test_invalid_yaml_raises(tmp_path: Path) -> None:
    (tmp_path / ".docsync.yml").write_text("languages: [python\n", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="Failed to parse .docsync.yml"):
        load_config(tmp_path, environ={})


def test_non_mapping_root_raises(tmp_path: Path) -> None:
    (tmp_path / ".docsync.yml").write_text("- python\n- java\n", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="mapping at the root"):
        load_config(tmp_path, environ={})


def test_concurrency_must_be_positive(tmp_path: Path) -> None:
    (tmp_path / ".docsync.yml").write_text("concurrency: 0\n", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="concurrency"):
        load_config(tmp_path, environ={})
