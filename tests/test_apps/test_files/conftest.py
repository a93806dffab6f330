"""Shared fixtures for files app tests."""

from io import BytesIO

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from PIL import Image

from server.apps.files.logic.file_operations import save_uploaded_file


def _render_image(
    image_format: str = 'JPEG',
    size: tuple[int, int] = (64, 48),
    color: tuple[int, int, int] = (200, 30, 30),
) -> bytes:
    buffer = BytesIO()
    Image.new('RGB', size, color).save(buffer, format=image_format)
    return buffer.getvalue()


@pytest.fixture
def make_image_bytes():
    """Factory rendering solid color images.

    Returns:
        Callable taking format, size and color, returning encoded bytes.
    """
    return _render_image


@pytest.fixture
def store_root(settings, tmp_path):
    """Point the file store at a temporary directory.

    Returns:
        Public root directory used by the storage backend.
    """
    settings.MEDIA_ROOT = tmp_path
    settings.FILE_STORE_PATH = 'uploads'
    settings.FILE_STORE_HASH_LENGTH = 3
    settings.ALLOWED_FILE_TYPES = frozenset(('image/jpeg', 'image/png'))
    return tmp_path


@pytest.fixture
def jpeg_upload():
    """JPEG upload as received from a form.

    Returns:
        SimpleUploadedFile with a 64x48 JPEG.
    """
    return SimpleUploadedFile(
        'photo.jpg',
        _render_image(),
        content_type='image/jpeg',
    )


@pytest.fixture
def stored_image(db, store_root, jpeg_upload):
    """Stored 64x48 JPEG.

    Returns:
        File instance for the stored image.
    """
    return save_uploaded_file(jpeg_upload)


@pytest.fixture
def stored_fake_image(db, store_root):
    """Stored file declared as JPEG that no decoder recognises.

    Returns:
        File instance for the stored file.
    """
    upload = SimpleUploadedFile(
        'notes.jpg',
        b'plain text pretending to be a photo',
        content_type='image/jpeg',
    )
    return save_uploaded_file(upload)
