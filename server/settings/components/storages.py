"""Django storage configuration for the S3-compatible asset bucket.

This module configures django-storages to work with:
- AWS S3 in production
- MinIO or Cloudflare R2 through a custom endpoint

All of them use the same S3Storage backend.
"""

from typing import Any, Final

from server.settings.components import config

AWS_STORAGE_BUCKET_NAME = config('AWS_STORAGE_BUCKET_NAME', default='')
AWS_S3_REGION_NAME = config('AWS_S3_REGION_NAME', default=None)

# Storage configuration dictionary
# Uses S3-compatible storage for assets, local storage for static files
STORAGES: Final[dict[str, dict[str, Any]]] = {
    'default': {
        'BACKEND': 'server.apps.relay.infrastructure.storage.RelayStorage',
        'OPTIONS': {
            'bucket_name': AWS_STORAGE_BUCKET_NAME,
            # Falls back to the boto3 credential chain when unset
            'access_key': config('AWS_ACCESS_KEY_ID', default=None),
            'secret_key': config('AWS_SECRET_ACCESS_KEY', default=None),
            'endpoint_url': config(
                'AWS_S3_ENDPOINT_URL',
                default=None,
            ),
            'region_name': AWS_S3_REGION_NAME,
            # Keys are content hashes, overwriting is a no-op
            'file_overwrite': True,
            'default_acl': None,  # Inherit bucket ACL
        },
    },
    'staticfiles': {
        'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
    },
}
