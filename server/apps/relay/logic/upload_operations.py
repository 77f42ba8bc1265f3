"""Business logic for uploading assets."""

import logging
from typing import BinaryIO, Final

from django.conf import settings

from server.apps.relay.exceptions import InvalidExtensionError
from server.apps.relay.infrastructure.metadata import (
    calculate_checksum,
    extract_extension,
    is_allowed_extension,
)
from server.apps.relay.infrastructure.storage import get_storage

logger = logging.getLogger(__name__)

# Prefix shared by every asset key in the bucket
REMOTE_PREFIX: Final = 'images'


def remote_key(identity: str) -> str:
    """Build the bucket key for an asset identity.

    Args:
        identity: Asset identity ('<sha256>.<extension>').

    Returns:
        Namespaced key (e.g., 'images/<identity>').
    """
    return f'{REMOTE_PREFIX}/{identity}'


def derive_identity(file_obj: BinaryIO, filename: str) -> str:
    """Name an asset after its content.

    foo.jpg -> <sha256 of content>.jpg

    Args:
        file_obj: File-like object with the asset bytes.
        filename: Client-supplied original filename.

    Returns:
        Identity string '<hex digest>.<extension>'.

    Raises:
        InvalidExtensionError: If the extension is missing or unknown.
    """
    extension = extract_extension(filename)
    if not extension or not is_allowed_extension(extension):
        raise InvalidExtensionError(filename)

    return f'{calculate_checksum(file_obj)}.{extension}'


def upload_asset(file_obj: BinaryIO, filename: str) -> str:
    """Upload an asset to the remote store under its content identity.

    Uploading the same bytes again overwrites the object with itself.

    Args:
        file_obj: File-like object with the asset bytes.
        filename: Client-supplied original filename.

    Returns:
        Identity the asset was stored under.

    Raises:
        InvalidExtensionError: If the extension is missing or unknown.
        StoreError: If the remote put fails.
    """
    logger.info('Uploading asset: %s', filename)
    identity = derive_identity(file_obj, filename)
    get_storage().put_object(remote_key(identity), file_obj)
    logger.info('Asset stored: %s -> %s', filename, identity)
    return identity


def build_asset_url(identity: str) -> str:
    """Build the public URL an asset is downloaded from.

    Args:
        identity: Asset identity.

    Returns:
        URL of the form '<base-url>/i/<identity>'.
    """
    base_url = settings.RELAY_BASE_URL.rstrip('/')
    return f'{base_url}/i/{identity}'
