"""Image codec and resize backend built on Pillow."""

import logging
import struct
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from io import BytesIO
from typing import BinaryIO, Final

from PIL import Image, UnidentifiedImageError

from server.apps.files.exceptions import (
    ImageDecodeError,
    UnsupportedImageFormatError,
)

logger = logging.getLogger(__name__)

# Closest Pillow filter to a windowed Bessel, applied without blur
RESAMPLING_FILTER: Final = Image.Resampling.LANCZOS

# Used when the source format is unknown to the encoder
_FALLBACK_FORMAT: Final = 'PNG'

# Pillow identifies formats from the same number of leading bytes
_SIGNATURE_LENGTH: Final = 16


def _accepts(accept: Callable[[bytes], object], prefix: bytes) -> bool:
    # Signature checks index into the prefix, short files fail them
    try:
        return bool(accept(prefix))
    except (IndexError, TypeError, struct.error):
        return False


def _has_decoder_for(path: str) -> bool:
    """Check whether a registered decoder claims the file's signature.

    Args:
        path: Filesystem path of the image.

    Returns:
        True if any Pillow plugin recognises the leading bytes.
    """
    Image.init()
    with open(path, 'rb') as image_file:
        prefix = image_file.read(_SIGNATURE_LENGTH)

    return any(
        accept is not None and _accepts(accept, prefix)
        for _factory, accept in (Image.OPEN[format_id] for format_id in Image.ID)
    )


def _open(path: str) -> Image.Image:
    """Open an image lazily, mapping Pillow errors to ours.

    Args:
        path: Filesystem path of the image.

    Returns:
        Opened, not yet decoded, Pillow image.

    Raises:
        UnsupportedImageFormatError: If no decoder recognises the file.
        ImageDecodeError: If the header of a known format is broken or
            the file is rejected as a decompression bomb.
    """
    try:
        return Image.open(path)
    except UnidentifiedImageError as error:
        if _has_decoder_for(path):
            raise ImageDecodeError(path, str(error)) from error
        raise UnsupportedImageFormatError(path) from error
    except Image.DecompressionBombError as error:
        raise ImageDecodeError(path, str(error)) from error


@contextmanager
def open_image(path: str) -> Iterator[Image.Image]:
    """Open and decode an image, releasing it on exit.

    Args:
        path: Filesystem path of the image.

    Yields:
        Fully decoded Pillow image.

    Raises:
        UnsupportedImageFormatError: If no decoder recognises the file.
        ImageDecodeError: If decoding the pixel data fails.
    """
    image = _open(path)
    try:
        try:
            image.load()
        except OSError as error:
            raise ImageDecodeError(path, str(error)) from error
        yield image
    finally:
        image.close()


def read_image_size(path: str) -> tuple[int, int]:
    """Read native pixel dimensions without decoding pixel data.

    Args:
        path: Filesystem path of the image.

    Returns:
        Tuple of (width, height).
    """
    with _open(path) as image:
        return image.size


def resize_image(image: Image.Image, width: int, height: int) -> Image.Image:
    """Resize to exact dimensions with a high-quality filter.

    Args:
        image: Decoded source image.
        width: Target width in pixels.
        height: Target height in pixels.

    Returns:
        New resized image, the source is left untouched.
    """
    logger.debug(
        'Resizing image from %dx%d to %dx%d',
        image.width,
        image.height,
        width,
        height,
    )
    return image.resize((width, height), resample=RESAMPLING_FILTER)


def encode_image(image: Image.Image, image_format: str | None) -> bytes:
    """Encode an image into bytes.

    Args:
        image: Image to encode.
        image_format: Pillow format name of the source (e.g., 'JPEG').

    Returns:
        Encoded image bytes.
    """
    buffer = BytesIO()
    image.save(buffer, format=image_format or _FALLBACK_FORMAT)
    return buffer.getvalue()


def sniff_mime_type(file_obj: BinaryIO) -> str | None:
    """Sniff the MIME type of image content.

    Args:
        file_obj: File-like object, rewound before and after sniffing.

    Returns:
        MIME type reported by the matching decoder, or None if the
        content is not a recognised image.
    """
    file_obj.seek(0)
    try:
        with Image.open(file_obj) as image:
            return image.get_format_mimetype()
    except (OSError, Image.DecompressionBombError):
        return None
    finally:
        file_obj.seek(0)
