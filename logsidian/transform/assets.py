"""Finds asset links in block content, copies the files into the vault."""

from __future__ import annotations

import logging
import os
import re
import shutil
import tempfile
from pathlib import Path, PurePosixPath
from urllib.parse import quote, unquote

from logsidian.errors import FileAccessError, MissingAssetDirectoryError
from logsidian.outline import Block, Page

from .models import AssetCopy
from .pipeline import BlockTransform, map_outside_code

logger = logging.getLogger(__name__)

# ![alt](path) or [label](path), optional "title", optional Logseq size map
_ASSET_LINK_RE = re.compile(
    r"(?P<bang>!?)\[(?P<label>[^\]\n]*)\]\((?P<target><[^>\n]+>|[^)\s]+)(?P<title>\s+\"[^\"\n]*\")?\)"
    r"(?P<size>\{[^}\n]*\})?"
)
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")


def is_asset_target(target: str) -> bool:
    """Relative file paths with an extension; never URLs, anchors or pages."""
    if not target or _SCHEME_RE.match(target) or target.startswith(("#", "/", "[[", "((")):
        return False
    suffix = PurePosixPath(target).suffix.lower()
    return bool(suffix) and suffix != ".md"


class AssetRelocator(BlockTransform):
    """Rewrites asset links to *link_prefix*/<name> and plans the copies.

    Nothing touches the filesystem until copy_assets() runs, so a page that
    fails later in the convert pass leaves the vault unchanged.
    """

    def __init__(self, page_dir: Path, asset_dir: Path, link_prefix: str = "assets"):
        self.page_dir = Path(page_dir)
        self.asset_dir = Path(asset_dir)
        self.link_prefix = link_prefix.strip("/")
        self.planned: dict[str, AssetCopy] = {}

    def ensure_destination(self) -> None:
        if not self.asset_dir.is_dir():
            raise MissingAssetDirectoryError(self.asset_dir)

    def apply(self, block: Block, page: Page) -> None:
        block.content = self.rewrite(block.content)

    def rewrite(self, content: str) -> str:
        return map_outside_code(content, lambda text: _ASSET_LINK_RE.sub(self._rewrite_match, text))

    def _rewrite_match(self, m: re.Match) -> str:
        raw = m.group("target")
        target = unquote(raw[1:-1] if raw.startswith("<") else raw)
        if not is_asset_target(target):
            return m.group(0)

        name = PurePosixPath(target).name
        link = quote(f"{self.link_prefix}/{name}")
        source = (self.page_dir / target).resolve()
        self.planned[str(source)] = AssetCopy(
            source=str(source),
            destination=str(self.asset_dir / name),
            link=link,
        )
        title = m.group("title") or ""
        return f"{m.group('bang')}[{m.group('label')}]({link}{title})"

    def copy_assets(self) -> list[AssetCopy]:
        """Copy every planned asset; all sources are checked before any copy."""
        self.ensure_destination()
        copies = list(self.planned.values())
        for copy in copies:
            if not Path(copy.source).is_file():
                raise FileAccessError(
                    copy.source, "read asset", FileNotFoundError(f"no such file: {copy.source}")
                )
        for copy in copies:
            _atomic_copy(Path(copy.source), Path(copy.destination))
            logger.info("Copied asset %s -> %s", copy.source, copy.destination)
        return copies


def _atomic_copy(src: Path, dest: Path) -> None:
    """Copy via a temp file in the destination directory, then replace."""
    tmp_name: str | None = None
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{dest.name}.", dir=dest.parent)
        with os.fdopen(fd, "wb") as out, open(src, "rb") as inp:
            shutil.copyfileobj(inp, out)
        shutil.copymode(src, tmp_name)
        os.replace(tmp_name, dest)
        tmp_name = None
    except OSError as e:
        raise FileAccessError(dest, f"copy asset {src} to", e) from e
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
