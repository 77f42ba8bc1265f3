"""Media relay settings."""

from typing import Final

from server.settings.components import config

# Shared secret expected in the `Authorization` header of uploads
RELAY_API_SECRET = config('RELAY_API_SECRET', default='')

# Public base URL used to build links returned from uploads
RELAY_BASE_URL = config('RELAY_BASE_URL', default='')

# Root of the raw (`images/`) and optimized (`optimized/`) cache tiers
RELAY_CACHE_PATH = config('RELAY_CACHE_PATH', default='./cache')

# HTTP server host, port and worker thread pool size
RELAY_HOST = config('RELAY_HOST', default='0.0.0.0')  # noqa: S104
RELAY_PORT = config('RELAY_PORT', cast=int, default=3000)
RELAY_THREADS = config('RELAY_THREADS', cast=int, default=10)

# 100mb. Some camera JPEGs can be really big!
RELAY_MAX_UPLOAD_SIZE: Final = config(
    'RELAY_MAX_UPLOAD_SIZE',
    cast=int,
    default=100 * 1024 * 1024,
)
