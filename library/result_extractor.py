"""Locate wanted media kinds among the parts of a completed operation."""

from typing import Callable, Dict, Iterable, List

from library.errors import MissingPartError
from library.models import MediaKind, MediaPart


def _is_mesh(content_type: str) -> bool:
    return content_type == "model/obj" or content_type.startswith("model/gltf")


_PREDICATES: Dict[MediaKind, Callable[[str], bool]] = {
    MediaKind.MESH: _is_mesh,
    MediaKind.PREVIEW_IMAGE: lambda content_type: content_type.startswith("image/"),
    MediaKind.VIDEO: lambda content_type: content_type.startswith("video/"),
}


def matches(kind: MediaKind, part: MediaPart) -> bool:
    return _PREDICATES[kind]((part.content_type or "").lower())


def extract(parts: List[MediaPart], wanted: Iterable[MediaKind]) -> Dict[MediaKind, MediaPart]:
    """
    Pick the first part matching each wanted kind.

    Raises:
        MissingPartError: For the first wanted kind with no matching part
    """
    found = {}
    for kind in wanted:
        part = next((p for p in parts if matches(kind, p)), None)
        if part is None:
            raise MissingPartError(kind.value)
        found[kind] = part
    return found
