"""Business logic for resized image variants.

Resized images are cached on disk, one directory per target size
and source path::

    {store}/{width}x{height}/{hash of source path}/{source filename}

A derivative is computed on the first request and served from disk
afterwards. The key is the source *path*, so a file replaced at the
same path keeps its old derivatives until ``clear_resize_cache``
removes them.
"""

import logging
import shutil
from collections.abc import Iterator
from pathlib import Path, PurePosixPath

from server.apps.files.exceptions import UnsupportedImageFormatError
from server.apps.files.infrastructure.images import (
    encode_image,
    open_image,
    read_image_size,
    resize_image,
)
from server.apps.files.infrastructure.metadata import (
    extract_filename,
    hash_fragment,
    is_size_directory_name,
    to_public_path,
    to_storage_name,
)
from server.apps.files.logic.configuration import (
    get_hash_length,
    get_storage,
    get_store_path,
)
from server.apps.files.models import File

logger = logging.getLogger(__name__)

VariantSet = dict[str, str]


def get_resize_cache_directory(image_path: str, width: int, height: int) -> str:
    """Build the cache directory for one source path and target size.

    Args:
        image_path: Public path of the source image.
        width: Target width in pixels.
        height: Target height in pixels.

    Returns:
        Storage name of the cache directory.
    """
    relative_image_path = to_storage_name(image_path)
    path_hash = hash_fragment(relative_image_path, get_hash_length())
    return str(
        PurePosixPath(get_store_path(), f'{width}x{height}', path_hash),
    )


def get_resized_image_path(image: File, width: int, height: int) -> str:
    """Get the path of an image resized to exact dimensions.

    Returns the cached derivative when it exists. Otherwise the source
    is decoded, resized and written to the cache first, so the resize
    runs once per source path and size.

    Formats without a decoder are not resized: the source path is
    returned instead, callers must accept the original resolution.

    Args:
        image: Stored source image.
        width: Target width in pixels.
        height: Target height in pixels.

    Returns:
        Public path of the resized image, or of the source image
        when its format cannot be decoded.

    Raises:
        ValueError: If width or height is not a positive integer.
        ImageDecodeError: If the source image is broken.
        OSError: If the source is missing or the cache can't be written.
    """
    # bool is an int subclass but never a pixel count
    if any(
        not isinstance(dimension, int) or isinstance(dimension, bool)
        for dimension in (width, height)
    ):
        raise ValueError(
            f'Image dimensions must be integers, got {width!r}x{height!r}',
        )
    if width < 1 or height < 1:
        raise ValueError(
            f'Image dimensions must be positive, got {width}x{height}',
        )

    source_name = to_storage_name(image.path)
    cache_directory = get_resize_cache_directory(image.path, width, height)
    cached_name = str(
        PurePosixPath(cache_directory, extract_filename(source_name)),
    )

    storage = get_storage()
    if storage.has_file(cached_name):
        logger.debug('Resize cache hit: %s', cached_name)
        return to_public_path(cached_name)

    logger.info(
        'Resize cache miss, resizing %s to %dx%d',
        source_name,
        width,
        height,
    )
    try:
        with open_image(storage.path(source_name)) as source:
            resized = resize_image(source, width, height)
            content = encode_image(resized, source.format)
    except UnsupportedImageFormatError:
        logger.warning(
            'No decoder for image, serving original: %s',
            image.path,
        )
        return image.path
    except Exception:
        logger.exception('Failed to resize image: %s', source_name)
        raise

    storage.ensure_directory(cache_directory)
    storage.replace(cached_name, content)
    return to_public_path(cached_name)


def resize_to_set(
    image: File | None,
    width: int,
    height: int,
) -> VariantSet | None:
    """Resize an image into a standard and a double-density variant.

    Args:
        image: Stored source image or None.
        width: Display width of the 1x variant.
        height: Display height of the 1x variant.

    Returns:
        Mapping with 'raw', '1x' and '2x' paths, None without an image.
    """
    if image is None:
        return None

    return {
        'raw': image.path,
        '1x': get_resized_image_path(image, width, height),
        '2x': get_resized_image_path(image, width * 2, height * 2),
    }


def resize_to_retina_set(image: File | None) -> VariantSet | None:
    """Build a variant set from an image stored at double resolution.

    The stored image is served as the 2x variant as is, only the 1x
    variant is produced by halving its dimensions. Callers must only
    pass images that really are double-resolution masters.

    Args:
        image: Stored double-resolution image or None.

    Returns:
        Mapping with 'raw', '1x' and '2x' paths, None without an image.
    """
    if image is None:
        return None

    storage = get_storage()
    try:
        width, height = read_image_size(
            storage.path(to_storage_name(image.path)),
        )
    except UnsupportedImageFormatError:
        logger.warning(
            'No decoder for image, serving original: %s',
            image.path,
        )
        return {'raw': image.path, '1x': image.path, '2x': image.path}

    return {
        'raw': image.path,
        '1x': get_resized_image_path(
            image,
            max(1, width // 2),
            max(1, height // 2),
        ),
        '2x': image.path,
    }


def _iter_size_directories(store_root: Path) -> Iterator[Path]:
    """Yield the per-size cache directories of the store."""
    if not store_root.is_dir():
        return
    for entry in sorted(store_root.iterdir()):
        if entry.is_dir() and is_size_directory_name(entry.name):
            yield entry


def clear_resize_cache(
    image: File | None = None,
    *,
    dry_run: bool = False,
) -> list[str]:
    """Delete cached resized images.

    Args:
        image: Only clear derivatives of this image. All derivatives
            are cleared when omitted.
        dry_run: Only report what would be deleted.

    Returns:
        Public paths of the deleted (or deletable) derivatives.
    """
    storage = get_storage()
    storage_root = Path(storage.location)
    store_root = Path(storage.path(get_store_path()))

    removed: list[str] = []
    for size_directory in _iter_size_directories(store_root):
        if image is None:
            cached_files = sorted(
                path for path in size_directory.rglob('*') if path.is_file()
            )
        else:
            width, height = size_directory.name.split('x')
            cache_directory = get_resize_cache_directory(
                image.path,
                int(width),
                int(height),
            )
            cached_file = Path(storage.path(cache_directory)) / (
                extract_filename(image.path)
            )
            cached_files = [cached_file] if cached_file.is_file() else []

        for cached_file in cached_files:
            relative_name = cached_file.relative_to(storage_root).as_posix()
            removed.append(to_public_path(relative_name))
            if not dry_run:
                cached_file.unlink(missing_ok=True)
                logger.info('Deleted resized image: %s', relative_name)

        if image is None and not dry_run:
            shutil.rmtree(size_directory)

    return removed
