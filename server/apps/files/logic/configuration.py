"""Access to file store settings with their defaults."""

from typing import Final

from django.conf import settings
from django.core.files.storage import storages

from server.apps.files.infrastructure.metadata import DEFAULT_HASH_LENGTH
from server.apps.files.infrastructure.storage import FileStorage

_DEFAULT_STORE_PATH: Final = 'uploads'
_DEFAULT_ALLOWED_FILE_TYPES: Final = frozenset((
    'image/gif',
    'image/jpeg',
    'image/png',
    'image/webp',
))
_STORAGE_ALIAS: Final = 'files'


def get_storage() -> FileStorage:
    """Get the storage backend configured for stored files.

    Returns:
        FileStorage instance registered under the ``files`` alias.
    """
    return storages[_STORAGE_ALIAS]  # type: ignore[return-value]


def get_store_path() -> str:
    """Get the store root relative to the storage root.

    Returns:
        Store path from settings without surrounding slashes,
        or 'uploads' by default.
    """
    store_path = getattr(settings, 'FILE_STORE_PATH', _DEFAULT_STORE_PATH)
    return str(store_path).replace('\\', '/').strip('/')


def get_hash_length() -> int:
    """Get the number of hash characters used for directory names.

    Returns:
        Hash length from settings or default of 3.
    """
    return getattr(settings, 'FILE_STORE_HASH_LENGTH', DEFAULT_HASH_LENGTH)


def get_allowed_file_types() -> frozenset[str]:
    """Get the content types accepted for upload.

    Returns:
        Allowed types from settings or a default set of web image types.
    """
    allowed_types = getattr(
        settings,
        'ALLOWED_FILE_TYPES',
        _DEFAULT_ALLOWED_FILE_TYPES,
    )
    return frozenset(allowed_types)
