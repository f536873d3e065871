"""Encoder — turns a source file into a base64 payload for the remote service."""
import asyncio
import base64
import binascii
import logging
import mimetypes
from abc import ABC, abstractmethod
from pathlib import Path

from image_insight.constants import (
    DATA_URI_BASE64_MARKER,
    DATA_URI_SCHEME,
    DEFAULT_MEDIA_TYPE,
    IMAGE_MEDIA_PREFIX,
    MSG_BAD_DATA_URI,
    MSG_NOT_AN_IMAGE,
    MSG_READ_FAILED,
)
from image_insight.errors import ReadError, ValidationError
from image_insight.models import EncodedPayload

logger = logging.getLogger(__name__)


# ── source files ──────────────────────────────────────────────────────────────


class SourceFile(ABC):
    """A binary blob with a declared media type, readable without blocking the loop."""

    media_type: str
    size: int | None

    @abstractmethod
    async def read(self) -> bytes:
        """Return the whole file contents. Must not consume or mutate the source."""
        ...


class BytesSourceFile(SourceFile):

    def __init__(self, content: bytes, media_type: str) -> None:
        self._content = content
        self.media_type = media_type
        self.size = len(content)

    async def read(self) -> bytes:
        return self._content


class PathSourceFile(SourceFile):

    def __init__(self, path: Path | str, media_type: str | None = None) -> None:
        self._path = Path(path)
        guessed, _ = mimetypes.guess_type(self._path.name)
        self.media_type = media_type or guessed or DEFAULT_MEDIA_TYPE
        self.size = None

    async def read(self) -> bytes:
        content = await asyncio.to_thread(self._path.read_bytes)
        self.size = len(content)
        return content


# ── pure helpers ──────────────────────────────────────────────────────────────


def is_image_type(media_type: str | None) -> bool:
    return bool(media_type) and media_type.startswith(IMAGE_MEDIA_PREFIX)


def validate_media_type(media_type: str | None) -> None:
    match is_image_type(media_type):
        case True:
            pass
        case False:
            raise ValidationError(MSG_NOT_AN_IMAGE % (media_type or ""))


def strip_data_uri_prefix(text: str) -> str:
    """'data:image/png;base64,AAAA' → 'AAAA'. Plain base64 passes through."""
    match text.startswith(DATA_URI_SCHEME):
        case True:
            _, _, body = text.partition(",")
            return body
        case False:
            return text


def parse_data_uri(uri: str) -> EncodedPayload:
    """Parse a base64 data URI (as produced by FileReader.readAsDataURL)."""
    header, sep, body = uri.strip().partition(",")
    match (header.startswith(DATA_URI_SCHEME), sep, header.endswith(DATA_URI_BASE64_MARKER)):
        case (True, ",", True):
            pass
        case _:
            raise ValidationError(MSG_BAD_DATA_URI)

    mime_type = header[len(DATA_URI_SCHEME):-len(DATA_URI_BASE64_MARKER)]
    data = strip_data_uri_prefix(body).strip()
    try:
        base64.b64decode(data, validate=True)
    except binascii.Error as exc:
        raise ValidationError(MSG_BAD_DATA_URI) from exc
    return EncodedPayload(data=data, mime_type=mime_type)


# ── encoder ───────────────────────────────────────────────────────────────────


async def encode(source: SourceFile) -> EncodedPayload:
    """Read the whole source and return its base64 payload with the declared type.

    Raises ReadError when the bytes cannot be obtained. The media type is carried
    through verbatim; checking that it is an image is the caller's job.
    """
    try:
        content = await source.read()
    except Exception as exc:
        logger.warning("Source read failed: %s", exc)
        raise ReadError(MSG_READ_FAILED % (str(exc) or type(exc).__name__)) from exc

    data = base64.standard_b64encode(content).decode("ascii")
    return EncodedPayload(data=data, mime_type=source.media_type)
