"""Business logic for storing uploaded files."""

import logging
from pathlib import PurePosixPath
from typing import BinaryIO

from django.core.exceptions import ValidationError
from django.core.files.base import File as DjangoFile
from django.core.files.uploadedfile import UploadedFile
from django.db import transaction
from django.utils.datastructures import MultiValueDict

from server.apps.files.infrastructure.metadata import (
    calculate_content_hash,
    is_size_directory_name,
    to_public_path,
    to_storage_name,
)
from server.apps.files.logic.configuration import (
    get_hash_length,
    get_storage,
    get_store_path,
)
from server.apps.files.logic.validation import validate_file_type
from server.apps.files.models import File

logger = logging.getLogger(__name__)


def store_uploaded_file(
    file_obj: BinaryIO | DjangoFile,
    content_type: str | None,
    file_name: str,
    *,
    save_to_root: bool = False,
) -> str:
    """Validate an upload and put its bytes into the file store.

    Files land in ``{store}/{content hash}/{file_name}``, or directly in
    the store root with ``save_to_root``. An existing file with the same
    name in that directory is overwritten.

    Args:
        file_obj: File-like object to store.
        content_type: Content type reported by the client.
        file_name: Name the file gets in the store.
        save_to_root: Store in the store root instead of a hash directory.

    Returns:
        Public path of the stored file (e.g., '/uploads/1ab/photo.jpg').

    Raises:
        DisallowedFileTypeError: If content type is not allowed.
        ValidationError: If a root-level name would land in a directory
            reserved for resized images.
        OSError: If writing to disk fails.
    """
    # Nothing touches the disk before the type is accepted
    validate_file_type(content_type)

    name_parts = PurePosixPath(file_name).parts
    if save_to_root and name_parts and is_size_directory_name(name_parts[0]):
        logger.warning('Rejected upload into resize cache: %s', file_name)
        raise ValidationError(
            f'File name is reserved for resized images: {file_name}',
        )

    store_dir = PurePosixPath(get_store_path())
    if not save_to_root:
        store_dir /= calculate_content_hash(file_obj, get_hash_length())

    storage = get_storage()
    storage.ensure_directory(str(store_dir))

    storage_name = str(store_dir / file_name)
    saved_name = storage.save(storage_name, file_obj)

    return to_public_path(saved_name)


def save_uploaded_file(
    uploaded_file: UploadedFile,
    *,
    file_name: str | None = None,
    save_to_root: bool = False,
) -> File:
    """Store an upload and create its database record.

    Transaction safety: Write to storage first, then create DB record.
    If DB transaction fails, the stored file is deleted again
    (rollback).

    Args:
        uploaded_file: Upload received by the request layer.
        file_name: Name to store under, the client's filename by default.
        save_to_root: Store in the store root instead of a hash directory.

    Returns:
        Created File instance.

    Raises:
        DisallowedFileTypeError: If content type is not allowed.
        Exception: If storage or DB operation fails.
    """
    file_name = file_name or uploaded_file.name
    public_path = store_uploaded_file(
        uploaded_file,
        uploaded_file.content_type,
        file_name,
        save_to_root=save_to_root,
    )

    try:
        with transaction.atomic():
            file_instance = File.objects.create(
                name=file_name,
                path=public_path,
            )
            logger.info(
                'File record created in database: %s (ID: %d)',
                public_path,
                file_instance.id,
            )
            return file_instance
    except Exception:
        logger.exception(
            'Database transaction failed, rolling back storage upload: %s',
            public_path,
        )
        get_storage().rollback_upload(to_storage_name(public_path))
        raise


def save_uploaded_files(files: MultiValueDict[str, UploadedFile]) -> File:
    """Store the first file of a multi-file upload.

    Args:
        files: Uploads keyed by form field, e.g. ``request.FILES``.

    Returns:
        Created File instance.

    Raises:
        ValueError: If no file was uploaded.
    """
    # values() would give the last upload of each field
    uploaded_file = next(
        (uploads[0] for _field, uploads in files.lists() if uploads),
        None,
    )
    if uploaded_file is None:
        raise ValueError('No uploaded files to save')
    return save_uploaded_file(uploaded_file)


def get_file_by_id(file_id: int) -> File:
    """Fetch a stored file record.

    Args:
        file_id: ID of the file.

    Returns:
        File instance.

    Raises:
        File.DoesNotExist: If file doesn't exist.
    """
    try:
        return File.objects.get(id=file_id)
    except File.DoesNotExist:
        logger.exception('File not found: ID=%s', file_id)
        raise
