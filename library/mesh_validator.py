"""
Structural checks for generated mesh payloads.
"""

import json
import struct

from library import data_uri
from library.errors import InvalidMeshError

GLB_MAGIC = b"glTF"
GLB_HEADER = struct.Struct("<4sII")


def validate_obj(data: bytes) -> None:
    text = data.decode("utf-8", errors="replace")
    has_vertex = has_face = False
    for line in text.splitlines():
        stripped = line.strip()
        if stripped.startswith("v "):
            has_vertex = True
        elif stripped.startswith("f "):
            has_face = True
        if has_vertex and has_face:
            return
    if not has_vertex:
        raise InvalidMeshError("The generated OBJ mesh has no vertices.")
    raise InvalidMeshError("The generated OBJ mesh has no faces.")


def validate_gltf_json(data: bytes) -> None:
    try:
        document = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as e:
        raise InvalidMeshError(f"The generated glTF mesh is not valid JSON: {e}") from e
    if not isinstance(document, dict):
        raise InvalidMeshError("The generated glTF mesh is not a JSON object.")
    asset = document.get("asset")
    if not isinstance(asset, dict) or "version" not in asset:
        raise InvalidMeshError("The generated glTF mesh has no asset version.")


def validate_glb(data: bytes) -> None:
    if len(data) < GLB_HEADER.size:
        raise InvalidMeshError("The generated GLB mesh is truncated.")
    magic, version, length = GLB_HEADER.unpack_from(data)
    if magic != GLB_MAGIC:
        raise InvalidMeshError("The generated GLB mesh has no glTF header.")
    if version != 2:
        raise InvalidMeshError(f"Unsupported GLB container version {version}.")
    if length != len(data):
        raise InvalidMeshError(f"GLB length mismatch: header says {length}, payload has {len(data)}.")


_VALIDATORS = {
    "model/obj": validate_obj,
    "model/gltf+json": validate_gltf_json,
    "model/gltf-binary": validate_glb,
}


def validate_mesh(uri: str) -> None:
    """Check a mesh data URI; other model/* types pass through."""
    try:
        decoded = data_uri.decode(uri)
    except data_uri.DataUriError as e:
        raise InvalidMeshError(f"The generated mesh is not a valid data URI: {e}") from e

    if not decoded.data:
        raise InvalidMeshError("The generated mesh is empty.")

    validator = _VALIDATORS.get(decoded.mime_type.lower())
    if validator is not None:
        validator(decoded.data)
