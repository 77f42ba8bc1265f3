"""Business logic for the local raw and optimized cache tiers.

Both tiers mirror remote keys on local disk:
- `<cache-root>/images/<identity>`: raw bytes fetched from the bucket
- `<cache-root>/optimized/<identity>`: transcoded rendition of the raw file

Entries are published with an atomic rename, so an existing path is
always a complete file. Work for a single identity is serialized so
concurrent requests fetch or transcode it once.
"""

import logging
import os
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Final

from django.conf import settings

from server.apps.relay.exceptions import AssetNotFoundError, TranscodeError
from server.apps.relay.infrastructure.jpeg import optimize_jpeg
from server.apps.relay.infrastructure.metadata import get_file_extension
from server.apps.relay.infrastructure.storage import get_storage
from server.apps.relay.logic.locks import KeyedLock
from server.apps.relay.logic.upload_operations import remote_key

logger = logging.getLogger(__name__)

RAW_DIR: Final = 'images'
OPTIMIZED_DIR: Final = 'optimized'

# Temp files start with a dot, which sanitized identities never do
_PARTIAL_PREFIX: Final = '.partial-'

Transcoder = Callable[[Path, Path], None]

# Lower-cased extension -> function writing an optimized rendition
_TRANSCODERS: Final[dict[str, Transcoder]] = {
    'jpg': optimize_jpeg,
    'jpeg': optimize_jpeg,
}

_raw_locks = KeyedLock()
_optimized_locks = KeyedLock()


def cache_root() -> Path:
    """Get the configured cache root directory."""
    return Path(settings.RELAY_CACHE_PATH)


def raw_path(identity: str) -> Path:
    """Get the raw tier path for an identity."""
    return cache_root() / RAW_DIR / identity


def optimized_path(identity: str) -> Path:
    """Get the optimized tier path for an identity."""
    return cache_root() / OPTIMIZED_DIR / identity


def ensure_cache_dirs() -> None:
    """Create both cache tier directories if missing."""
    for tier in (RAW_DIR, OPTIMIZED_DIR):
        (cache_root() / tier).mkdir(parents=True, exist_ok=True)


def get_transcoder(identity: str) -> Transcoder | None:
    """Find the transcoder registered for an identity's extension.

    Args:
        identity: Asset identity.

    Returns:
        Transcoder function, or None if the type is served raw.
    """
    return _TRANSCODERS.get(get_file_extension(identity))


def _publish(path: Path, build: Callable[[Path], None]) -> None:
    """Build a file next to its final path and rename it into place.

    Args:
        path: Final cache path.
        build: Callable writing the complete file to the given temp path.

    Raises:
        Exception: Whatever build raises; the temp file is removed.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, partial_name = tempfile.mkstemp(
        prefix=_PARTIAL_PREFIX,
        dir=path.parent,
    )
    os.close(fd)
    partial = Path(partial_name)
    try:
        build(partial)
        os.replace(partial, path)
    except Exception:
        partial.unlink(missing_ok=True)
        raise


def _fetch_remote(identity: str) -> Callable[[Path], None]:
    def build(partial: Path) -> None:  # noqa: WPS430
        with partial.open('wb') as writer:
            get_storage().get_to_writer(remote_key(identity), writer)

    return build


def resolve_raw(identity: str) -> Path:
    """Either the raw file is cached so we can return it, or it isn't.

    If not, download it from the remote store into the cache first.
    Once present, a raw entry is trusted indefinitely.

    Args:
        identity: Sanitized asset identity.

    Returns:
        Path to a complete copy of the remote object.

    Raises:
        AssetNotFoundError: If the identity is empty or not in the store.
        StoreError: If the remote fetch fails.
    """
    if not identity:
        raise AssetNotFoundError(identity)

    path = raw_path(identity)
    if path.is_file():
        return path

    with _raw_locks.hold(identity):
        # Another request may have fetched it while we waited
        if not path.is_file():
            logger.info('Raw cache miss, fetching: %s', identity)
            _publish(path, _fetch_remote(identity))
    return path


def resolve_optimized(identity: str) -> Path:
    """Get the path of the optimized rendition, creating it if needed.

    For types without a registered transcoder the raw path is returned
    and nothing is written to the optimized tier.

    Args:
        identity: Sanitized asset identity.

    Returns:
        Path to the optimized file, or to the raw file.

    Raises:
        AssetNotFoundError: If the asset is not in the store.
        StoreError: If the remote fetch fails.
        OptimizationError: If transcoding or metadata sanitizing fails.
    """
    path = optimized_path(identity)
    if path.is_file():
        return path

    source = resolve_raw(identity)
    transcoder = get_transcoder(identity)
    if transcoder is None:
        # If we can't optimize an asset, just serve the raw file
        return source

    with _optimized_locks.hold(identity):
        if not path.is_file():
            logger.info('Optimized cache miss, transcoding: %s', identity)
            _publish(path, lambda partial: transcoder(source, partial))
    return path


def resolve_servable(identity: str) -> Path:
    """Get the best file to serve for an identity.

    Prefers the optimized tier and falls back to the raw file when the
    asset cannot be decoded. A later request tries to optimize again.
    Metadata failures are not masked: the raw file still carries the
    original EXIF, GPS position included.

    Args:
        identity: Sanitized asset identity.

    Returns:
        Path to the file to stream.

    Raises:
        AssetNotFoundError: If the asset is not in the store.
        StoreError: If the remote fetch fails.
        MetadataError: If the optimized rendition cannot be sanitized.
    """
    try:
        return resolve_optimized(identity)
    except TranscodeError as error:
        logger.warning(
            'Could not optimize %s, serving original: %s',
            identity,
            error,
        )
        return raw_path(identity)
