"""Metadata extraction utilities for files."""

import hashlib
import mimetypes
import re
from pathlib import PurePosixPath
from typing import BinaryIO, Final

from django.core.exceptions import ValidationError

from server.apps.files.infrastructure.images import sniff_mime_type

_CHUNK_SIZE: Final = 8192  # 8KB chunks for hash calculation

# Three hex characters keep directory fan-out at 4096 per level
DEFAULT_HASH_LENGTH: Final = 3

# Store subdirectories holding resized images, e.g. '100x50'
_SIZE_DIRECTORY_PATTERN: Final = re.compile(r'\d+x\d+')


def hash_fragment(value: bytes | str, length: int = DEFAULT_HASH_LENGTH) -> str:
    """Build a short directory name from content or a path string.

    Args:
        value: Bytes to hash. Strings are hashed as UTF-8.
        length: Number of hex characters to keep.

    Returns:
        Leading ``length`` characters of the MD5 hex digest.
    """
    if isinstance(value, str):
        value = value.encode('utf-8')
    digest = hashlib.md5(value, usedforsecurity=False).hexdigest()
    return digest[:length]


def calculate_content_hash(
    file_obj: BinaryIO,
    length: int = DEFAULT_HASH_LENGTH,
) -> str:
    """Calculate the hash fragment of a file's full content.

    Reads file in chunks to handle large files efficiently.
    Resets file pointer to beginning after calculation.

    Args:
        file_obj: File-like object to hash.
        length: Number of hex characters to keep.

    Returns:
        Leading ``length`` characters of the MD5 hex digest.
    """
    md5_hash = hashlib.md5(usedforsecurity=False)

    file_obj.seek(0)

    for chunk in iter(lambda: file_obj.read(_CHUNK_SIZE), b''):
        md5_hash.update(chunk)

    # Reset file pointer to beginning for subsequent operations
    file_obj.seek(0)

    return md5_hash.hexdigest()[:length]


def detect_mime_type(file_obj: BinaryIO, filename: str) -> str:
    """Detect MIME type from file.

    Sniffs the content with the image backend first, then falls back
    to guessing from the filename extension.

    Args:
        file_obj: File-like object to sniff.
        filename: Filename with extension.

    Returns:
        MIME type string (e.g., 'image/jpeg', 'application/pdf').
        Returns 'application/octet-stream' if type cannot be determined.
    """
    mime_type = sniff_mime_type(file_obj)
    if mime_type is not None:
        return mime_type

    mime_type, _ = mimetypes.guess_type(filename)
    if mime_type is None:
        return 'application/octet-stream'
    return mime_type


def extract_filename(storage_path: str) -> str:
    """Extract filename from storage path.

    Args:
        storage_path: Full path (e.g., 'uploads/1ab/photo.jpg').

    Returns:
        Filename (e.g., 'photo.jpg').
    """
    return PurePosixPath(storage_path).name


def is_size_directory_name(name: str) -> bool:
    """Check whether a name is reserved for resized image buckets.

    Example: '100x50' -> True, 'photos' -> False

    Args:
        name: Single path segment directly under the store.

    Returns:
        True if the name has the ``{width}x{height}`` form.
    """
    return _SIZE_DIRECTORY_PATTERN.fullmatch(name) is not None


def to_public_path(storage_name: str) -> str:
    """Turn a storage name into the path handed out to callers.

    Args:
        storage_name: Name relative to the storage root.

    Returns:
        Path with a single leading slash and ``/`` separators only.
    """
    normalized = storage_name.replace('\\', '/').strip('/')
    return f'/{normalized}'


def to_storage_name(public_path: str) -> str:
    """Turn a public path back into a storage name.

    Args:
        public_path: Path as stored in ``File.path`` (e.g., '/uploads/1ab/a.jpg').

    Returns:
        Name relative to the storage root (e.g., 'uploads/1ab/a.jpg').

    Raises:
        ValidationError: If path is empty or climbs out of the storage root.
    """
    storage_name = public_path.replace('\\', '/').strip('/')
    if not storage_name:
        raise ValidationError('Storage path cannot be empty')

    if '..' in PurePosixPath(storage_name).parts:
        raise ValidationError(
            f'Storage path must stay inside the store: {public_path}',
        )

    return storage_name
