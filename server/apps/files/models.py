"""Database models for files app."""

from typing import ClassVar, Final, final, override

from django.db import models

# Constants for field max lengths
_NAME_MAX_LENGTH: Final = 255
_PATH_MAX_LENGTH: Final = 1024


@final
class File(models.Model):
    """File stored in the local file store.

    The path is relative to the public root and always starts
    with ``/``, following the pattern: /{store}/{hash}/filename.ext

    Records are created once after the bytes are on disk and are
    not updated afterwards.
    """

    name = models.CharField(
        max_length=_NAME_MAX_LENGTH,
        help_text='Original filename',
    )

    path = models.CharField(
        max_length=_PATH_MAX_LENGTH,
        help_text='Public path: /{store}/{hash}/file.ext',
        db_index=True,
    )

    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'File'  # type: ignore[mutable-override]
        verbose_name_plural = 'Files'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['-uploaded_at']

    @override
    def __str__(self) -> str:
        """String representation."""
        return self.path
