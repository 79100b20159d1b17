"""VaultWriter: writes rendered pages into the destination vault."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from logsidian.errors import FileAccessError

from .emitter import page_filename

logger = logging.getLogger(__name__)


class VaultWriter:
    """Writes one markdown file per page title.

    Files are written to a temporary name and moved into place, so a page
    is either fully written or not written at all.
    """

    def __init__(self, vault_path: str | Path) -> None:
        self.vault_path = Path(vault_path)

    def destination_for(self, title: str) -> Path:
        dest = self.vault_path / page_filename(title)
        # Guard against path traversal escaping the vault
        if not dest.resolve().is_relative_to(self.vault_path.resolve()):
            raise ValueError(f"Page title escapes the vault: {title!r}")
        return dest

    def write(self, title: str, text: str, *, dry_run: bool = False) -> Path:
        """Write a rendered page. Returns the Path of the written (or would-be) file."""
        dest = self.destination_for(title)

        if dry_run:
            logger.debug("dry-run: would write %s", dest)
            return dest

        tmp_name: str | None = None
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{dest.name}.", dir=dest.parent)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp_name, dest)
            tmp_name = None
        except OSError as e:
            raise FileAccessError(dest, "write page", e) from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)

        logger.info("wrote %s (%d bytes)", dest, len(text.encode("utf-8")))
        return dest
