"""Conversion between base64 data URLs and raw bytes."""

import base64
import binascii
import re

from .errors import DecodeError

PDF_MEDIA_TYPE = "application/pdf"
ZIP_MEDIA_TYPE = "application/zip"

_DATA_URL_PREFIX = re.compile(r"^data:[^,]*?;base64,")
_IMAGE_DATA_URL = re.compile(r"^data:image/(\w+);")


def decode_data_url(payload: str) -> bytes:
    """Decode base64 content, supporting an optional data URL prefix.

    Whitespace anywhere in the payload is ignored. The remaining text must
    be valid base64 (alphabet and padding); anything else is rejected
    instead of being decoded into truncated bytes.

    Raises:
        DecodeError: If the payload is not a string or not valid base64
    """
    if not isinstance(payload, str):
        raise DecodeError(f"Expected a base64 string, got {type(payload).__name__}")

    data = _DATA_URL_PREFIX.sub("", payload.strip(), count=1)
    data = re.sub(r"\s+", "", data)

    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"Base64 decode failed: {str(e)}") from e


def encode_data_url(data: bytes, media_type: str = PDF_MEDIA_TYPE) -> str:
    """Encode bytes as a single-line ``data:<media_type>;base64,`` URL."""
    return f"data:{media_type};base64,{base64.b64encode(data).decode('ascii')}"


def image_extension(payload: str, default: str = "png") -> str:
    """Return the image subtype of an ``image/<ext>`` data URL, else ``default``."""
    match = _IMAGE_DATA_URL.match(payload.strip()) if isinstance(payload, str) else None
    return match.group(1).lower() if match else default
