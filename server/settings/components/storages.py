"""Django storage configuration for the local file store.

Uploaded files and their resized derivatives live under ``MEDIA_ROOT``.
Paths handed out to callers are relative to it and start with ``/``::

    /{FILE_STORE_PATH}/{content hash}/photo.jpg
    /{FILE_STORE_PATH}/{width}x{height}/{path hash}/photo.jpg
"""

from typing import Any, Final

from decouple import Csv

from server.settings.components import BASE_DIR, config

# Public root every stored path resolves against
MEDIA_ROOT = BASE_DIR.joinpath(config('DJANGO_MEDIA_ROOT', default='public'))
MEDIA_URL = '/'

# Store root, relative to MEDIA_ROOT
FILE_STORE_PATH = config('FILE_STORE_PATH', default='uploads')

# Length of the hash fragment used for directory names
FILE_STORE_HASH_LENGTH = config('FILE_STORE_HASH_LENGTH', cast=int, default=3)

ALLOWED_FILE_TYPES = config(
    'ALLOWED_FILE_TYPES',
    cast=Csv(post_process=frozenset),
    default='image/jpeg,image/png,image/gif,image/webp',
)

STORAGES: Final[dict[str, dict[str, Any]]] = {
    'default': {
        'BACKEND': 'django.core.files.storage.FileSystemStorage',
    },
    'files': {
        'BACKEND': 'server.apps.files.infrastructure.storage.FileStorage',
        'OPTIONS': {
            # Callers own the target name, same name means same file
            'allow_overwrite': True,
        },
    },
}
