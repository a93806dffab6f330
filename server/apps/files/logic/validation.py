"""Content type validation for uploads."""

import logging
from collections.abc import Collection
from typing import BinaryIO

from server.apps.files.exceptions import DisallowedFileTypeError
from server.apps.files.infrastructure.metadata import detect_mime_type
from server.apps.files.logic.configuration import get_allowed_file_types

logger = logging.getLogger(__name__)


def validate_file_type(
    file_type: str | None,
    allowed_types: Collection[str] | None = None,
) -> None:
    """Check a content type against the allow-list.

    Args:
        file_type: Content type reported by the client or sniffed.
        allowed_types: Optional override of the allow-list. When omitted
            or empty, the configured ALLOWED_FILE_TYPES are used.

    Raises:
        DisallowedFileTypeError: If file_type is not allowed.
    """
    if not allowed_types:
        allowed_types = get_allowed_file_types()

    if file_type not in allowed_types:
        logger.warning('Rejected file of type: %s', file_type)
        raise DisallowedFileTypeError(file_type)


def check_file_mime_type(
    file_obj: BinaryIO,
    filename: str,
    mime_types: Collection[str] | None = None,
) -> str:
    """Validate a file by its sniffed MIME type.

    Unlike the declared content type, the sniffed type comes from
    the file content itself.

    Args:
        file_obj: File-like object to sniff.
        filename: Filename used when the content is not recognised.
        mime_types: Optional override of the allow-list.

    Returns:
        The detected MIME type.

    Raises:
        DisallowedFileTypeError: If the detected type is not allowed.
    """
    mime_type = detect_mime_type(file_obj, filename)
    validate_file_type(mime_type, mime_types)
    return mime_type
