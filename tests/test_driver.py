"""Tests for docsync.driver."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from docsync.driver import LANGUAGE_FOLDERS, Driver, resolve_targets
from docsync.errors import ConfigurationError, GenerationError
from tests._fixtures.doc_tree import DocTreeBuilder


def test_language_table_is_read_only() -> None:
    assert dict(LANGUAGE_FOLDERS) == {"js": "nodejs", "python": "python", "java": "java", "csharp": "dotnet"}
    with pytest.raises(TypeError):
        LANGUAGE_FOLDERS["ruby"] = "ruby"  # type: ignore[index]


def test_resolve_targets_maps_destination_roots(tmp_path: Path) -> None:
    targets = resolve_targets(tmp_path, ["csharp"])
    assert len(targets) == 1
    assert targets[0].folder == "dotnet"
    assert targets[0].destination_root == tmp_path / "dotnet" / "docs"


def test_resolve_targets_rejects_unknown_language(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="ruby"):
        resolve_targets(tmp_path, ["js", "ruby"])


def test_generate_all_fans_out_to_every_language(doc_tree: DocTreeBuilder) -> None:
    doc_tree.write({"guides/connect.md": "```sample\nclient = create_client(timeout=30)\n```\n"})
    driver = Driver(doc_tree.config())

    reports = asyncio.run(driver.generate_all())

    assert sorted(report.language for report in reports) == ["csharp", "java", "js", "python"]
    outputs = {
        folder: (doc_tree.destination(folder) / "guides" / "connect.md").read_text(encoding="utf-8")
        for folder in LANGUAGE_FOLDERS.values()
    }
    assert "createClient({ timeout: 30 })" in outputs["nodejs"]
    assert "create_client(timeout=30)" in outputs["python"]
    assert "new CreateClientOptions().setTimeout(30)" in outputs["java"]
    assert "CreateClient(new() { Timeout = 30 })" in outputs["dotnet"]


def test_generate_all_aggregates_failures_across_languages(doc_tree: DocTreeBuilder) -> None:
    doc_tree.write(
        {
            "ok.md": "# Fine\n",
            "spread.md": "```sample\nlaunch(**options)\n```\n",
        }
    )
    driver = Driver(doc_tree.config())

    with pytest.raises(GenerationError) as excinfo:
        asyncio.run(driver.generate_all())

    assert sorted(failure.path for failure in excinfo.value.failures) == ["csharp:spread.md", "java:spread.md"]
    for folder in LANGUAGE_FOLDERS.values():
        assert (doc_tree.destination(folder) / "ok.md").exists()
    assert (doc_tree.destination("nodejs") / "spread.md").exists()


def test_generate_all_raises_configuration_error_for_missing_source(tmp_path: Path) -> None:
    builder = DocTreeBuilder(tmp_path)
    driver = Driver(builder.config(project_root=tmp_path / "nowhere"))

    with pytest.raises(ConfigurationError):
        asyncio.run(driver.generate_all())


def test_driver_honours_language_subset_and_api_file(doc_tree: DocTreeBuilder) -> None:
    api_file = doc_tree.project_root / "docs" / "api.yml"
    api_file.write_text("Client:\n  members:\n    close: {}\n", encoding="utf-8")
    doc_tree.write({"refs.md": "[`method: Client.close`] and [`method: Client.open`]\n"})
    driver = Driver(doc_tree.config(languages=["python"], api_file=api_file))

    assert list(driver.generators) == ["python"]
    with pytest.raises(GenerationError, match="Client.open is not part of the API surface"):
        asyncio.run(driver.generate_all())


def test_target_for_folder(doc_tree: DocTreeBuilder) -> None:
    driver = Driver(doc_tree.config())
    assert driver.target_for_folder("dotnet").language == "csharp"
    assert driver.target_for_folder("python").destination_root == doc_tree.destination("python")
    with pytest.raises(ConfigurationError):
        driver.target_for_folder("ruby")


def test_invalid_link_template_fails_before_any_write(doc_tree: DocTreeBuilder) -> None:
    doc_tree.write({"a.md": "# Plain\n", "b.md": "See [`class: Client`].\n"})

    with pytest.raises(ConfigurationError, match="Invalid link_template"):
        Driver(doc_tree.config(link_template="[{{ text }}]({{ nope }})"))

    assert not doc_tree.destination("nodejs").exists()
