"""Tests for docsync.parser."""

from __future__ import annotations

import textwrap

import pytest

from docsync.errors import ParseError
from docsync.models import ApiReference, CodeSample, Prose
from docsync.parser import parse_document


def _doc(text: str) -> str:
    return textwrap.dedent(text).lstrip("\n")


def test_parse_document_splits_blocks() -> None:
    content = _doc(
        """
        # Connecting

        Use [`method: Client.create_client`] to connect.

        ```sample
        client = create_client(timeout=30)
        ```

        ```bash
        npm i [`method: not parsed here
        ```
        """
    )

    node = parse_document("guides/connect.md", content)

    assert node.path == "guides/connect.md"
    assert [type(block) for block in node.blocks] == [Prose, ApiReference, Prose, CodeSample, Prose]
    assert node.blocks[0] == Prose(text="# Connecting\n\nUse ")
    assert node.blocks[1] == ApiReference(kind="method", symbol="Client", member_path=("create_client",), line=3)
    sample = node.blocks[3]
    assert isinstance(sample, CodeSample)
    assert sample.line == 5
    assert len(sample.snippet.statements) == 1
    assert "npm i [`method: not parsed here" in node.blocks[4].text  # type: ignore[union-attr]


def test_prose_round_trips_when_document_has_no_markers() -> None:
    content = "# Title\r\n\r\nPlain text with a [link](./other.md).\r\n"
    node = parse_document("plain.md", content)
    assert node.blocks == [Prose(text=content)]


def test_markdown_links_with_code_text_are_not_references() -> None:
    content = "See [`note: details`](./notes.md) for more.\n"
    node = parse_document("links.md", content)
    assert node.blocks == [Prose(text=content)]


def test_reference_kinds_and_member_paths() -> None:
    content = "[`class: Client`] [`option: Client.create_client.timeout`]\n"
    node = parse_document("refs.md", content)
    references = [block for block in node.blocks if isinstance(block, ApiReference)]
    assert references[0].member is None
    assert references[1].member == "create_client"
    assert references[1].argument == "timeout"


def test_language_regions_and_fences_are_tagged() -> None:
    content = _doc(
        """
        Shared.
        <!-- langs: js, python -->
        Scripting languages only.
        ```java
        System.out.println("hidden");
        ```
        <!-- /langs -->
        ```python async
        await page.goto("https://example.com")
        ```
        """
    )

    node = parse_document("regions.md", content)

    assert node.blocks[0] == Prose(text="Shared.\n")
    assert node.blocks[1] == Prose(text="Scripting languages only.\n", langs=frozenset({"js", "python"}))
    assert node.blocks[2].langs == frozenset()  # type: ignore[union-attr]
    assert node.blocks[3].langs == frozenset({"python"})  # type: ignore[union-attr]
    assert node.blocks[3].text.startswith("```python async\n")  # type: ignore[union-attr]


@pytest.mark.parametrize(
    "content, message, line",
    [
        ("Intro\n```sample\nclient = create_client()\n", "unterminated code block", 2),
        ("```js\nconsole.log(1)\n", "unterminated code block", 1),
        ("See [`method: Client.create_client for details.\n", "unterminated API reference", 1),
        ("\n[`methd: Client.close`]\n", "unknown API reference kind 'methd'", 2),
        ("[`class: Client.close`]\n", "class reference must look like 'Class'", 1),
        ("[`method: Client`]\n", "method reference must look like 'Class.member'", 1),
        ("[`event: Client.on-close`]\n", "malformed API reference", 1),
        ("<!-- langs: js, ruby -->\nx\n<!-- /langs -->\n", "unknown language(s) in region: ruby", 1),
        ("<!-- langs: js -->\nnever closed\n", "unterminated language region", 1),
        ("text\n<!-- /langs -->\n", "closed but never opened", 2),
        ("<!-- langs: js -->\n<!-- langs: python -->\n", "still open", 2),
        ("```sample\nok()\nbad(,)\n```\n", "unexpected ','", 3),
    ],
)
def test_malformed_documents_raise_parse_error(content: str, message: str, line: int) -> None:
    with pytest.raises(ParseError) as excinfo:
        parse_document("broken.md", content)
    assert message in str(excinfo.value)
    assert excinfo.value.path == "broken.md"
    assert excinfo.value.line == line
    assert str(excinfo.value).startswith(f"broken.md:{line}: ")
