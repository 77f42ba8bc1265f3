"""Exceptions for relay app."""


class RelayError(Exception):
    """Base class for failures inside the cache-and-transcode pipeline."""


class AssetNotFoundError(RelayError):
    """Raised when an asset is absent from the remote store."""

    def __init__(self, key: str) -> None:
        """Initialize AssetNotFoundError.

        Args:
            key: Remote key or identity that could not be found.
        """
        self.key = key
        super().__init__(f'Asset not found: {key}')


class StoreError(RelayError):
    """Raised when a put or get against the remote store fails."""


class InvalidExtensionError(RelayError):
    """Raised when an uploaded filename carries an unusable extension."""

    def __init__(self, filename: str) -> None:
        """Initialize InvalidExtensionError.

        Args:
            filename: Client-supplied filename.
        """
        self.filename = filename
        super().__init__(f'Unsupported file extension: {filename!r}')


class OptimizationError(RelayError):
    """Raised when the optimized tier cannot be produced."""


class TranscodeError(OptimizationError):
    """Raised when the external codec fails or terminates abnormally."""


class MetadataError(OptimizationError):
    """Raised when descriptive metadata cannot be sanitized."""


class MetadataReadError(MetadataError):
    """Raised when metadata cannot be read from either file."""


class MetadataSaveError(MetadataError):
    """Raised when sanitized metadata cannot be written back."""
