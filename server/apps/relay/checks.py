"""System checks for required relay configuration.

Management commands run these before doing any work, so a server
started without credentials or a bucket stops before serving traffic.
"""

from typing import Any

from django.conf import settings
from django.core.checks import Error, register

_REQUIRED_SETTINGS = (
    ('RELAY_API_SECRET', 'relay.E001', 'Please set RELAY_API_SECRET'),
    ('RELAY_BASE_URL', 'relay.E002', 'Please set RELAY_BASE_URL'),
    (
        'AWS_STORAGE_BUCKET_NAME',
        'relay.E003',
        'Please set AWS_STORAGE_BUCKET_NAME',
    ),
    ('AWS_S3_REGION_NAME', 'relay.E004', 'Please set AWS_S3_REGION_NAME'),
)


@register()
def check_required_settings(app_configs: Any, **kwargs: Any) -> list[Error]:
    """Report every required relay setting that is missing or empty.

    Args:
        app_configs: App configs to check (unused).
        kwargs: Extra keyword arguments from the check framework.

    Returns:
        List of errors, empty when configuration is complete.
    """
    errors = []
    for setting_name, error_id, hint in _REQUIRED_SETTINGS:
        if not getattr(settings, setting_name, None):
            errors.append(
                Error(
                    f'{setting_name} is not configured.',
                    hint=hint,
                    id=error_id,
                ),
            )
    return errors
