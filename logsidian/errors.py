"""Fatal error kinds raised by the conversion engine."""

from __future__ import annotations

from pathlib import Path


class ConversionError(Exception):
    """Base class for conditions that abort an index build or convert pass."""

    def __init__(self, path: str | Path, message: str) -> None:
        self.path = Path(path)
        super().__init__(message)


class MissingAssetDirectoryError(ConversionError):
    """The destination vault has no asset directory to copy into."""

    def __init__(self, path: str | Path) -> None:
        super().__init__(
            path,
            f"Asset directory does not exist: {path} (create it before converting)",
        )


class FileAccessError(ConversionError):
    """A source or destination file could not be read or written."""

    def __init__(self, path: str | Path, operation: str, cause: OSError) -> None:
        self.operation = operation
        super().__init__(path, f"Could not {operation} '{path}': {cause}")
        self.__cause__ = cause


class IndexFileError(ConversionError):
    """The persisted identifier index is malformed."""

    def __init__(self, path: str | Path, reason: str) -> None:
        super().__init__(path, f"Invalid identifier index {path}: {reason}")
