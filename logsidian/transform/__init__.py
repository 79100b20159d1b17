"""Transform pipeline for converting Logseq blocks to Obsidian-flavored markdown."""

from .assets import AssetRelocator, is_asset_target
from .callouts import TagTransformer, strip_tag
from .link_rewriter import ReferenceResolver, page_link, resolve_references
from .models import AssetCopy, ResolvedText
from .pipeline import BlockTransform, TransformPipeline, map_outside_code

__all__ = [
    "AssetCopy",
    "AssetRelocator",
    "BlockTransform",
    "ReferenceResolver",
    "ResolvedText",
    "TagTransformer",
    "TransformPipeline",
    "is_asset_target",
    "map_outside_code",
    "page_link",
    "resolve_references",
    "strip_tag",
]
