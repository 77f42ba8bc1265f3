"""Custom storage backend for S3-compatible storage."""

import logging
from typing import IO, Any, Final, final

from boto3.exceptions import Boto3Error
from botocore.exceptions import BotoCoreError, ClientError
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from storages.backends.s3 import S3Storage
from storages.utils import clean_name
from typing_extensions import override

from server.apps.relay.exceptions import AssetNotFoundError, StoreError

logger = logging.getLogger(__name__)

# S3 error codes that mean the key is absent
_MISSING_KEY_CODES: Final = frozenset(('404', 'NoSuchKey', 'NotFound'))


@final
class RelayStorage(S3Storage):
    """S3 storage backend for relayed assets.

    Extends django-storages S3Storage with:
    - Put and get-to-writer operations addressed by raw keys
    - Translation of boto errors into relay exceptions
    - Enhanced error logging
    """

    @override
    def save(  # noqa: WPS211
        self,
        name: str,
        content: Any,
        max_length: int | None = None,
    ) -> str:
        """Save file to S3 with error handling and logging.

        Args:
            name: Storage path for the file.
            content: File content (file-like object).
            max_length: Optional maximum length for the filename.

        Returns:
            Actual storage path used.

        Raises:
            Exception: If S3 upload fails.
        """
        try:
            logger.info('Uploading file to storage: %s', name)
            saved_name = super().save(name, content, max_length)
            logger.info('Successfully uploaded file: %s', saved_name)
        except Exception:
            logger.exception('Failed to upload file to storage: %s', name)
            raise
        else:
            return saved_name

    def put_object(self, key: str, content: bytes | IO[bytes]) -> str:
        """Store an object under the given key, overwriting any existing one.

        Args:
            key: Namespaced object key (e.g., 'images/<identity>').
            content: Raw bytes or a file-like object to upload.

        Returns:
            Key the object was stored under.

        Raises:
            StoreError: If the upload fails.
        """
        if isinstance(content, bytes):
            content = ContentFile(content)
        try:
            return self.save(key, content)
        except (Boto3Error, BotoCoreError, ClientError) as error:
            raise StoreError(f'Failed to store {key}: {error}') from error

    def get_to_writer(self, key: str, writer: IO[bytes]) -> None:
        """Stream an object's bytes into a writable file object.

        Args:
            key: Namespaced object key.
            writer: Binary file object receiving the content.

        Raises:
            AssetNotFoundError: If no object exists under the key.
            StoreError: If the download fails for any other reason.
        """
        try:
            logger.info('Fetching file from storage: %s', key)
            name = self._normalize_name(clean_name(key))
            self.bucket.Object(name).download_fileobj(writer)
        except ClientError as error:
            code = error.response.get('Error', {}).get('Code')
            if code in _MISSING_KEY_CODES:
                logger.warning('File not found in storage: %s', key)
                raise AssetNotFoundError(key) from error
            logger.exception('Failed to fetch file from storage: %s', key)
            raise StoreError(f'Failed to fetch {key}: {error}') from error
        except (Boto3Error, BotoCoreError) as error:
            logger.exception('Failed to fetch file from storage: %s', key)
            raise StoreError(f'Failed to fetch {key}: {error}') from error
        logger.info('Successfully fetched file: %s', key)


def get_storage() -> RelayStorage:
    """Get the configured default storage backend.

    Returns:
        RelayStorage instance with proper S3 configuration.
    """
    return default_storage  # type: ignore[return-value]
