"""Convert pass: one Logseq page in, one Obsidian page (plus assets) out."""

from __future__ import annotations

import logging
import time
from pathlib import Path

from logsidian.config.models import LogsidianConfig
from logsidian.errors import FileAccessError
from logsidian.index import IdentifierIndex, iter_page_files, read_page
from logsidian.output import Emitter, VaultWriter
from logsidian.transform import (
    AssetRelocator,
    ReferenceResolver,
    TagTransformer,
    TransformPipeline,
)

from .models import BatchReport, ConversionResult, PageError

logger = logging.getLogger(__name__)


class PageConverter:
    """Runs the convert pass against a previously built identifier index.

    The index is only read. Each call to convert() owns the page tree it
    parses, so independent calls do not share mutable state apart from the
    vault's asset directory.
    """

    def __init__(
        self,
        vault_path: str | Path,
        index: IdentifierIndex,
        config: LogsidianConfig | None = None,
    ) -> None:
        self.config = config or LogsidianConfig()
        self.vault_path = Path(vault_path)
        self.index = index
        self.asset_dir = self.vault_path / self.config.assets.directory
        self.writer = VaultWriter(self.vault_path)
        self.emitter = Emitter(self.config.output)

    def convert(self, source: str | Path, *, dry_run: bool = False) -> ConversionResult:
        """Convert one page file.

        Raises:
            MissingAssetDirectoryError: the vault has no asset directory.
                Checked before anything is read or written.
            FileAccessError: the page or one of its assets could not be read,
                or the output could not be written.
        """
        source = Path(source)
        relocator = AssetRelocator(
            page_dir=source.parent,
            asset_dir=self.asset_dir,
            link_prefix=self.config.assets.directory,
        )
        relocator.ensure_destination()

        page = read_page(source)
        tags = TagTransformer(self.config.callouts.tags)
        resolver = ReferenceResolver(self.index, block_anchors=self.config.output.block_anchors)
        TransformPipeline([tags, resolver, relocator]).apply(page)

        text = self.emitter.render(page)
        dest = self.writer.destination_for(page.title)

        if dry_run:
            assets = list(relocator.planned.values())
        else:
            assets = relocator.copy_assets()
            dest = self.writer.write(page.title, text)

        logger.info(
            "Converted %s -> %s (%d unresolved, %d assets)",
            source,
            dest,
            len(resolver.unresolved),
            len(assets),
        )
        return ConversionResult(
            source_path=str(source),
            destination=str(dest),
            title=page.title,
            unresolved=resolver.unresolved,
            assets=assets,
            callouts=tags.converted,
            dry_run=dry_run,
        )


def convert_directory(
    source_dir: str | Path,
    vault_path: str | Path,
    index: IdentifierIndex,
    config: LogsidianConfig | None = None,
    *,
    dry_run: bool = False,
) -> BatchReport:
    """Convert every page below *source_dir*.

    A missing asset directory aborts before the first page. Per-page I/O
    failures are recorded in the report and the batch moves on.
    """
    config = config or LogsidianConfig()
    converter = PageConverter(vault_path, index, config)
    start = time.monotonic()
    report = BatchReport()

    AssetRelocator(Path(source_dir), converter.asset_dir).ensure_destination()

    for source in iter_page_files(Path(source_dir), config.index.ignore):
        try:
            result = converter.convert(source, dry_run=dry_run)
        except (FileAccessError, ValueError) as exc:
            report.errors.append(PageError(file=str(source), error=str(exc)))
            logger.error("Error converting %s: %s", source, exc)
            continue
        report.converted += 1
        report.unresolved += len(result.unresolved)
        report.assets += len(result.assets)

    report.duration = time.monotonic() - start
    return report
