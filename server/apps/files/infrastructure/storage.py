"""Custom storage backend for the local file store."""

import logging
import os
import tempfile
from pathlib import Path
from typing import Any, final, override

from django.core.files.storage import FileSystemStorage

logger = logging.getLogger(__name__)


@final
class FileStorage(FileSystemStorage):
    """Local filesystem storage for uploads and resized images.

    Extends Django's FileSystemStorage with:
    - Enhanced error logging
    - Idempotent directory creation
    - Atomic writes for cached derivatives
    - Rollback support for failed DB operations
    """

    @override
    def save(  # noqa: WPS211
        self,
        name: str,
        content: Any,
        max_length: int | None = None,
    ) -> str:
        """Save file to disk with error handling and logging.

        Temporary uploads are moved into place, everything else is
        copied in chunks.

        Args:
            name: Storage path for the file.
            content: File content (file-like object).
            max_length: Optional maximum length for the filename.

        Returns:
            Actual storage path used.

        Raises:
            OSError: If writing to disk fails.
        """
        try:
            logger.info('Writing file to storage: %s', name)
            saved_name = super().save(name, content, max_length)
            logger.info('Successfully wrote file: %s', saved_name)
        except Exception:
            logger.exception('Failed to write file to storage: %s', name)
            raise
        else:
            return saved_name

    def has_file(self, name: str) -> bool:
        """Check whether a regular file exists under the given name.

        Args:
            name: Storage path to check.

        Returns:
            True if a regular file exists at that path.
        """
        return Path(self.path(name)).is_file()

    def ensure_directory(self, name: str) -> None:
        """Create a directory and its parents if missing.

        Args:
            name: Storage path of the directory.
        """
        Path(self.path(name)).mkdir(parents=True, exist_ok=True)

    def replace(self, name: str, content: bytes) -> str:
        """Write bytes so readers never see a partially written file.

        Content goes to a temporary file in the target directory,
        which is then renamed over the target. Concurrent writers of
        the same name end with the last complete write.

        Args:
            name: Storage path for the file.
            content: Bytes to write.

        Returns:
            The storage path written.

        Raises:
            OSError: If writing or renaming fails.
        """
        full_path = Path(self.path(name))
        full_path.parent.mkdir(parents=True, exist_ok=True)

        fd, temp_path = tempfile.mkstemp(
            dir=full_path.parent,
            prefix=f'.{full_path.name}.',
            suffix='.tmp',
        )
        try:
            with os.fdopen(fd, 'wb') as temp_file:
                temp_file.write(content)
            if self.file_permissions_mode is not None:
                os.chmod(temp_path, self.file_permissions_mode)
            os.replace(temp_path, full_path)
        except Exception:
            logger.exception('Failed to write file to storage: %s', name)
            Path(temp_path).unlink(missing_ok=True)
            raise

        logger.info('Successfully wrote file: %s', name)
        return name

    def rollback_upload(self, name: str) -> None:
        """Delete stored file for DB transaction rollback.

        This is a best-effort operation - if deletion fails, the error
        is logged but not raised, as the DB rollback has already occurred.

        Args:
            name: Storage path of file to delete.
        """
        try:
            logger.warning('Rolling back upload, deleting file: %s', name)
            self.delete(name)
            logger.info('Successfully rolled back file upload: %s', name)
        except Exception:
            # The file stays on disk without a database record
            logger.exception(
                'Failed to rollback upload, orphaned file: %s',
                name,
            )
