"""Shared test fixtures for logsidian."""

from __future__ import annotations

from pathlib import Path

import pytest

from logsidian.config.models import LogsidianConfig
from logsidian.index import IdentifierIndex, IndexEntry

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image-bytes"

FOO_PAGE = """\
- Hello
  id:: abc-123
- Second block
\t- Nested with id
\t  id:: nested-1
"""

BAR_PAGE = """\
alias:: Bar Alias
tags:: reference

- See ((abc-123))
- Missing ((zzz-999))
- ![pic](../assets/pic.png)
- **Definition** #definition
\t- It is X
- Link to [[Foo]]
"""


@pytest.fixture
def sample_config():
    return LogsidianConfig()


@pytest.fixture
def sample_index():
    return IdentifierIndex(
        entries={
            "abc-123": IndexEntry(page="Foo", path=(0,)),
            "nested-1": IndexEntry(page="Foo", path=(1, 0)),
        }
    )


@pytest.fixture
def graph_dir(tmp_path: Path) -> Path:
    """A Logseq graph: pages/Foo.md, pages/Bar.md and assets/pic.png."""
    graph = tmp_path / "graph"
    pages = graph / "pages"
    pages.mkdir(parents=True)
    (graph / "assets").mkdir()
    (graph / "assets" / "pic.png").write_bytes(PNG_BYTES)
    (pages / "Foo.md").write_text(FOO_PAGE)
    (pages / "Bar.md").write_text(BAR_PAGE)
    return graph


@pytest.fixture
def vault(tmp_path: Path) -> Path:
    """An Obsidian vault with its asset directory in place."""
    v = tmp_path / "vault"
    (v / "assets").mkdir(parents=True)
    return v
