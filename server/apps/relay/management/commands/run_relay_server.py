"""Django management command to run the media relay server."""

import logging
from typing import Any, final

from cheroot.wsgi import Server as WSGIServer
from django.conf import settings
from django.core.management.base import BaseCommand
from django.core.wsgi import get_wsgi_application
from typing_extensions import override

from server.apps.relay.logic.cache_operations import (
    cache_root,
    ensure_cache_dirs,
)

logger = logging.getLogger(__name__)


@final
class Command(BaseCommand):
    """Serve uploads and downloads from a cheroot thread pool.

    Each request holds one worker thread, so a slow fetch or transcode
    only delays its own response. System checks run before `handle`,
    which keeps a misconfigured relay from ever binding its port.
    """

    help = 'Run the media relay upload/download server'

    @override
    def add_arguments(self, parser: Any) -> None:
        """Add command arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            '--host',
            type=str,
            default=None,
            help='Interface to listen on (default: RELAY_HOST)',
        )
        parser.add_argument(
            '--port',
            type=int,
            default=None,
            help='Port to listen on (default: RELAY_PORT)',
        )
        parser.add_argument(
            '--threads',
            type=int,
            default=None,
            help='Size of the request thread pool (default: RELAY_THREADS)',
        )

    def build_server(self, options: dict[str, Any]) -> WSGIServer:
        """Create the cheroot server wrapping the Django application.

        Args:
            options: Command options.

        Returns:
            Configured, not yet started, WSGI server.
        """
        server = WSGIServer(
            bind_addr=(
                options['host'] or settings.RELAY_HOST,
                options['port'] or settings.RELAY_PORT,
            ),
            wsgi_app=get_wsgi_application(),
            numthreads=options['threads'] or settings.RELAY_THREADS,
        )
        server.server_name = 'MediaRelay'
        return server

    @override
    def handle(self, *args: Any, **options: Any) -> None:
        """Prepare the cache tiers and serve until interrupted.

        Args:
            args: Positional arguments.
            options: Keyword arguments from command line.
        """
        ensure_cache_dirs()
        server = self.build_server(options)
        host, port = server.bind_addr

        self.stdout.write(
            self.style.SUCCESS(f'Media relay listening on {host}:{port}'),
        )
        logger.info(
            'Serving on %s:%d with %d threads, cache at %s',
            host,
            port,
            server.numthreads,
            cache_root(),
        )

        try:
            server.start()
        except KeyboardInterrupt:
            self.stdout.write(self.style.WARNING('\nShutting down...'))
        finally:
            server.stop()
            self.stdout.write(self.style.SUCCESS('Media relay stopped'))
