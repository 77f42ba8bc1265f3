"""Django settings shared by every environment."""

from typing import Final

from server.settings.components import config

SECRET_KEY = config('DJANGO_SECRET_KEY', default='insecure-development-key')

INSTALLED_APPS: Final = (
    'server.apps.relay',
)

MIDDLEWARE: Final = (
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
)

ROOT_URLCONF = 'server.urls'

WSGI_APPLICATION = 'server.wsgi.application'

# Assets live in S3 and on the local cache disk, nothing is kept in a DB
DATABASES: Final[dict[str, dict[str, str]]] = {}

# https://docs.djangoproject.com/en/5.1/ref/settings/#append-slash
# Upload clients post to `/upload` exactly, never redirect them
APPEND_SLASH = False

USE_TZ = True
TIME_ZONE = 'UTC'
