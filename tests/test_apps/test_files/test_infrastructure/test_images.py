"""Tests for the Pillow image backend."""

from io import BytesIO

import pytest
from PIL import Image

from server.apps.files.exceptions import (
    ImageDecodeError,
    UnsupportedImageFormatError,
)
from server.apps.files.infrastructure.images import (
    encode_image,
    open_image,
    read_image_size,
    resize_image,
    sniff_mime_type,
)


@pytest.fixture
def jpeg_path(tmp_path, make_image_bytes):
    """Write a 64x48 JPEG to disk.

    Returns:
        Path of the JPEG as string.
    """
    path = tmp_path / 'photo.jpg'
    path.write_bytes(make_image_bytes('JPEG', (64, 48)))
    return str(path)


def test_open_image_decodes(jpeg_path):
    """Test opened images are decoded and expose their size."""
    with open_image(jpeg_path) as image:
        assert image.size == (64, 48)
        assert image.format == 'JPEG'


def test_open_image_unsupported_format(tmp_path):
    """Test content without a decoder raises UnsupportedImageFormatError."""
    path = tmp_path / 'notes.jpg'
    path.write_bytes(b'plain text pretending to be a photo')

    with pytest.raises(UnsupportedImageFormatError) as exc_info:
        with open_image(str(path)):
            pytest.fail('Unsupported image must not be yielded')

    assert exc_info.value.path == str(path)


def test_open_image_truncated(tmp_path):
    """Test broken pixel data raises ImageDecodeError."""
    gradient = Image.linear_gradient('L').convert('RGB')
    buffer = BytesIO()
    gradient.save(buffer, format='JPEG', quality=95)
    content = buffer.getvalue()

    path = tmp_path / 'broken.jpg'
    path.write_bytes(content[: len(content) // 2])

    with pytest.raises(ImageDecodeError):
        with open_image(str(path)):
            pytest.fail('Broken image must not be yielded')


def test_open_image_corrupt_header(tmp_path):
    """Test a known signature with a broken header raises ImageDecodeError."""
    path = tmp_path / 'bad.jpg'
    path.write_bytes(b'\xff\xd8\xff\xe0' + b'\x00garbage' * 20)

    with pytest.raises(ImageDecodeError) as exc_info:
        with open_image(str(path)):
            pytest.fail('Broken image must not be yielded')

    assert exc_info.value.path == str(path)


def test_open_image_empty_file(tmp_path):
    """Test empty files are treated as having no decoder."""
    path = tmp_path / 'empty.png'
    path.write_bytes(b'')

    with pytest.raises(UnsupportedImageFormatError):
        with open_image(str(path)):
            pytest.fail('Empty file must not be yielded')


def test_open_image_missing_file(tmp_path):
    """Test missing files surface as filesystem errors."""
    with pytest.raises(FileNotFoundError):
        with open_image(str(tmp_path / 'missing.jpg')):
            pytest.fail('Missing image must not be yielded')


def test_read_image_size(jpeg_path):
    """Test native dimensions are read from the header."""
    assert read_image_size(jpeg_path) == (64, 48)


def test_read_image_size_unsupported_format(tmp_path):
    """Test reading size of a non-image raises UnsupportedImageFormatError."""
    path = tmp_path / 'notes.txt'
    path.write_bytes(b'plain text')

    with pytest.raises(UnsupportedImageFormatError):
        read_image_size(str(path))


def test_read_image_size_corrupt_header(tmp_path):
    """Test reading size of a broken PNG header raises ImageDecodeError."""
    path = tmp_path / 'bad.png'
    path.write_bytes(b'\x89PNG\r\n\x1a\n' + b'\x00' * 8)

    with pytest.raises(ImageDecodeError):
        read_image_size(str(path))


def test_resize_image_exact_dimensions(jpeg_path):
    """Test resize ignores aspect ratio and hits exact dimensions."""
    with open_image(jpeg_path) as image:
        resized = resize_image(image, 100, 10)

    assert resized.size == (100, 10)


def test_encode_image_keeps_format(make_image_bytes):
    """Test encoding in the source format."""
    image = Image.open(BytesIO(make_image_bytes('PNG')))

    content = encode_image(image, 'PNG')

    assert Image.open(BytesIO(content)).format == 'PNG'


def test_encode_image_without_format():
    """Test images of unknown format are encoded as PNG."""
    content = encode_image(Image.new('RGB', (4, 4)), None)

    assert Image.open(BytesIO(content)).format == 'PNG'


def test_sniff_mime_type(make_image_bytes):
    """Test sniffing image and non-image content."""
    png_file = BytesIO(make_image_bytes('PNG'))

    assert sniff_mime_type(png_file) == 'image/png'
    assert png_file.tell() == 0
    assert sniff_mime_type(BytesIO(b'plain text')) is None
