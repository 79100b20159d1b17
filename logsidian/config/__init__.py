from .loader import load_config
from .log import configure_logging
from .models import (
    DEFAULT_CALLOUT_TAGS,
    AssetConfig,
    CalloutConfig,
    IndexConfig,
    LogsidianConfig,
    OutputConfig,
)

__all__ = [
    "DEFAULT_CALLOUT_TAGS",
    "AssetConfig",
    "CalloutConfig",
    "IndexConfig",
    "LogsidianConfig",
    "OutputConfig",
    "configure_logging",
    "load_config",
]
