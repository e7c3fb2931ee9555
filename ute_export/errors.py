"""Exceptions raised while exporting visualisation data."""


class DataExportError(Exception):
    """Base class for export failures."""


class ContainerIOError(DataExportError):
    """Opening, writing or renaming an output file failed."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"IO error writing {path}: {message}")
        self.path = path


class NotFoundError(DataExportError):
    """A lookup the export depends on has no result."""

    def __init__(self, kind: str, id_: object) -> None:
        super().__init__(f"{kind} not found: {id_!r}")
        self.kind = kind
        self.id = id_


class TooLargeError(DataExportError):
    """Container does not fit in 32-bit offsets."""

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(f"Container size {size} exceeds limit of {limit} bytes")
        self.size = size
        self.limit = limit


class ContainerFormatError(DataExportError, ValueError):
    """A container file is truncated or violates the layout."""
