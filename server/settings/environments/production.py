"""This file contains all the settings used in production.

This file is required and if development.py is present these
values are overridden.
"""

from server.settings.components import config

DEBUG = False

ALLOWED_HOSTS = [
    # Relay serves whatever hostname the reverse proxy forwards
    config('DOMAIN_NAME', default='*'),
]

SECURE_CONTENT_TYPE_NOSNIFF = True
