"""CLI behaviour tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from docsync import cli
from docsync.cli import _build_parser, main
from docsync.errors import NetworkError
from tests._fixtures.doc_tree import DocTreeBuilder


def _write_config(doc_tree: DocTreeBuilder, stars: str = "stars:\n  enabled: false\n") -> None:
    (doc_tree.workspace / ".docsync.yml").write_text(
        f"project_root: {doc_tree.project_root.as_posix()}\n{stars}", encoding="utf-8"
    )


@pytest.fixture(autouse=True)
def _clear_src_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DOCSYNC_SRC_DIR", raising=False)


def test_parser_defaults_to_batch_mode() -> None:
    args = _build_parser().parse_args([])
    assert args.watch is None
    assert args.verbose is False
    assert args.config == "."


def test_parser_accepts_bare_watch() -> None:
    args = _build_parser().parse_args(["--watch"])
    assert args.watch == ""


def test_parser_accepts_watch_with_mirror_folder() -> None:
    args = _build_parser().parse_args(["--watch", "python", "--verbose"])
    assert args.watch == "python"
    assert args.verbose is True


def test_main_generates_every_language(doc_tree: DocTreeBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    doc_tree.write({"intro.md": "# Hello %%LANG%%\n", "logo.png": b"\x89PNG"})
    _write_config(doc_tree)

    main(["--config", str(doc_tree.workspace)])

    out = capsys.readouterr().out
    assert "Generated docs for 4 language(s): 4 written, 0 unchanged, 4 assets copied" in out
    assert (doc_tree.destination("dotnet") / "intro.md").read_text(encoding="utf-8") == "# Hello .NET\n"


def test_main_exits_non_zero_on_document_failure(doc_tree: DocTreeBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    doc_tree.write({"broken.md": "```sample\nclose()\n"})
    _write_config(doc_tree)

    with pytest.raises(SystemExit) as excinfo:
        main(["--config", str(doc_tree.workspace)])

    assert excinfo.value.code == 1
    assert "unterminated code block" in capsys.readouterr().err


def test_main_exits_non_zero_when_source_is_missing(tmp_path: Path) -> None:
    (tmp_path / ".docsync.yml").write_text(
        f"project_root: {(tmp_path / 'missing').as_posix()}\nstars:\n  enabled: false\n", encoding="utf-8"
    )

    with pytest.raises(SystemExit) as excinfo:
        main(["--config", str(tmp_path)])

    assert excinfo.value.code == 1


def test_main_rejects_unknown_language(doc_tree: DocTreeBuilder) -> None:
    _write_config(doc_tree, stars="languages: [ruby]\n")

    with pytest.raises(SystemExit) as excinfo:
        main(["--config", str(doc_tree.workspace)])

    assert excinfo.value.code == 1


def test_stars_failure_does_not_fail_the_run(
    doc_tree: DocTreeBuilder, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    doc_tree.write({"intro.md": "# Hello\n"})
    _write_config(doc_tree, stars="stars:\n  enabled: true\n")
    attempts = []

    class FailingUpdater:
        def __init__(self, repository, target, *, request_timeout):
            attempts.append((repository, target))

        async def update(self) -> int:
            raise NetworkError("Request failed with status code 500: boom")

    monkeypatch.setattr(cli, "StarsUpdater", FailingUpdater)

    main(["--config", str(doc_tree.workspace)])

    assert attempts == [
        ("microsoft/playwright", doc_tree.workspace.resolve() / "src" / "components" / "GitHubStarButton" / "index.tsx")
    ]
    assert "Generated docs for 4 language(s)" in capsys.readouterr().out


def test_main_exits_non_zero_on_invalid_link_template(
    doc_tree: DocTreeBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    doc_tree.write({"intro.md": "# Hello\n"})
    _write_config(doc_tree, stars="link_template: '[{{ text ](x)'\nstars:\n  enabled: false\n")

    with pytest.raises(SystemExit) as excinfo:
        main(["--config", str(doc_tree.workspace)])

    assert excinfo.value.code == 1
    assert "Invalid link_template" in capsys.readouterr().err
    assert not doc_tree.destination("python").exists()
