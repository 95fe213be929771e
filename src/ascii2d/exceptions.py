"""Custom exceptions for ascii2d search operations."""


class Ascii2dError(Exception):
    """Base exception for ascii2d client errors."""

    pass


class UnsupportedImageTypeError(Ascii2dError, TypeError):
    """Exception raised when a search is given an image of an unknown type."""

    def __init__(self, image: object):
        """Initialize with the offending image object.

        Args:
            image: The value that could not be classified
        """
        self.image_type = type(image)
        super().__init__(f"Unsupported image type: {self.image_type.__name__}")


class ImageReadError(Ascii2dError):
    """Exception raised when a local image cannot be opened or read."""

    pass


class Ascii2dConnectionError(Ascii2dError):
    """Raised when a request to ascii2d fails at the transport level."""

    pass


class UploadError(Ascii2dError):
    """Raised when the file search endpoint answers with anything but a redirect."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class RedirectError(Ascii2dError):
    """Raised when the file search redirect carries no result location."""

    pass


class ParseError(Ascii2dError):
    """Raised when a result page cannot be parsed as HTML."""

    pass


class ResultNotFoundError(Ascii2dError):
    """Raised when a result page holds no entry with a title."""

    def __init__(self, document_text: str):
        """Initialize with the rendered page text.

        Args:
            document_text: Text content of the page, kept for diagnosis
        """
        self.document_text = document_text
        super().__init__(f"Failed to parse a detail entry: {document_text}")
