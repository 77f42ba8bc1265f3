"""Django app configuration for relay app."""

from django.apps import AppConfig
from typing_extensions import override


class RelayConfig(AppConfig):
    """Configuration for relay app."""

    name = 'server.apps.relay'
    verbose_name = 'Media relay'

    @override
    def ready(self) -> None:
        """Register system checks when app is ready."""
        from server.apps.relay import checks  # noqa: F401
