"""Classification of the image references accepted by a search."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from ascii2d.exceptions import ImageReadError, UnsupportedImageTypeError


@dataclass(frozen=True)
class RemoteURL:
    """Image hosted elsewhere, searched through the URL endpoint."""

    url: str


@dataclass(frozen=True)
class LocalPath:
    """Image file on the local filesystem."""

    path: Path


@dataclass(frozen=True)
class ImageBytes:
    """Image already held in memory."""

    data: bytes


@dataclass(frozen=True)
class ImageStream:
    """Readable binary stream holding the image."""

    stream: BinaryIO

    def read_all(self) -> bytes:
        """Read the stream to the end.

        Raises:
            ImageReadError: If reading fails
        """
        try:
            data = self.stream.read()
        except (OSError, ValueError) as e:
            raise ImageReadError(f"Failed to read image stream: {e}") from e
        if isinstance(data, str):
            raise ImageReadError("Image stream must be opened in binary mode")
        return bytes(data)


ImageSource = RemoteURL | LocalPath | ImageBytes | ImageStream


def classify_image(image: object) -> ImageSource:
    """Resolve a caller-supplied image reference into an ImageSource.

    Strings starting with ``http`` are remote URLs and any other string (or
    path-like object) is a local path. Byte buffers and objects with a
    ``read`` method are uploaded directly.

    Args:
        image: URL, path, bytes-like object or binary stream

    Returns:
        ImageSource: The classified reference

    Raises:
        UnsupportedImageTypeError: If the reference fits none of the above
    """
    if isinstance(image, str):
        if image.startswith("http"):
            return RemoteURL(image)
        return LocalPath(Path(image))
    if isinstance(image, os.PathLike):
        return LocalPath(Path(image))
    if isinstance(image, (bytes, bytearray, memoryview)):
        return ImageBytes(bytes(image))
    if callable(getattr(image, "read", None)):
        return ImageStream(image)
    raise UnsupportedImageTypeError(image)
