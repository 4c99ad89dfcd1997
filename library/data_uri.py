"""
Data URI encoding and decoding.
Pure utility functions without UI dependencies.
"""

import re
import base64
import binascii
from typing import NamedTuple, Optional
from urllib.parse import unquote_to_bytes

DEFAULT_MIME_TYPE = "application/octet-stream"

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[^;,]*)(?P<params>(?:;[^;,]*)*),(?P<payload>.*)$", re.DOTALL)


class DataUriError(ValueError):
    """Raised when a string is not a well-formed data URI."""
    pass


class DataUri(NamedTuple):
    mime_type: str
    data: bytes


def encode(data: bytes, mime_type: str) -> str:
    """Encode bytes as `data:<mime>;base64,<payload>`."""
    payload = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type or DEFAULT_MIME_TYPE};base64,{payload}"


def is_data_uri(value: Optional[str]) -> bool:
    return bool(value) and value.startswith("data:")


def decode(uri: str) -> DataUri:
    """
    Decode a data URI into its MIME type and raw bytes.

    Args:
        uri: A `data:` URI, base64 or percent-encoded

    Returns:
        DataUri with the MIME type and payload bytes

    Raises:
        DataUriError: If the string is not a data URI or the payload is corrupt
    """
    match = _DATA_URI_RE.match(uri or "")
    if match is None:
        raise DataUriError("Not a data URI")

    mime_type = match.group("mime") or "text/plain"
    params = [p.strip().lower() for p in match.group("params").split(";") if p]
    payload = match.group("payload")

    if "base64" in params:
        try:
            data = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise DataUriError(f"Invalid base64 payload: {e}") from e
    else:
        data = unquote_to_bytes(payload)

    return DataUri(mime_type=mime_type, data=data)


def mime_type_of(uri: str) -> str:
    """Return the MIME type of a data URI without decoding the payload."""
    match = _DATA_URI_RE.match(uri or "")
    if match is None:
        raise DataUriError("Not a data URI")
    return match.group("mime") or "text/plain"


def download_filename(uri: str, stem: str = "vismesh", default: Optional[str] = None) -> str:
    """Pick a download file name for a data URI based on its MIME type."""
    try:
        mime_type = mime_type_of(uri)
    except DataUriError:
        return default or f"{stem}-output.dat"

    if mime_type == "model/obj":
        return f"{stem}-model.obj"
    if mime_type == "model/gltf+json":
        return f"{stem}-model.gltf"
    if mime_type == "model/gltf-binary":
        return f"{stem}-model.glb"

    subtype = mime_type.split("/", 1)[1] if "/" in mime_type else ""
    subtype = subtype.split("+", 1)[0] or ("mp4" if mime_type.startswith("video") else "dat")
    if mime_type.startswith("video/"):
        return f"{stem}-animation.{subtype}"
    return f"{stem}-output.{subtype}"
