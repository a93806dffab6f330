"""Exceptions for files app."""


class DisallowedFileTypeError(Exception):
    """Raised when a file's content type is not in the allow-list."""

    def __init__(self, file_type: str | None) -> None:
        """Initialize DisallowedFileTypeError.

        Args:
            file_type: Declared or sniffed content type that was rejected.
        """
        self.file_type = file_type
        super().__init__(f'File of type "{file_type}" cannot be uploaded')


class UnsupportedImageFormatError(Exception):
    """Raised when the image backend has no decoder for a file."""

    def __init__(self, path: str) -> None:
        """Initialize UnsupportedImageFormatError.

        Args:
            path: Filesystem path of the undecodable file.
        """
        self.path = path
        super().__init__(f'No image decoder available for: {path}')


class ImageDecodeError(Exception):
    """Raised when a recognised image cannot be decoded."""

    def __init__(self, path: str, reason: str) -> None:
        """Initialize ImageDecodeError.

        Args:
            path: Filesystem path of the broken image.
            reason: Error reported by the image backend.
        """
        self.path = path
        self.reason = reason
        super().__init__(f'Failed to decode image {path}: {reason}')
