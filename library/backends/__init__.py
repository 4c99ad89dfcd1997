"""Generation backends over the google-genai SDK."""

from .base import GenerationBackend
from .gemini_backend import GeminiBackend
from .veo_backend import VeoBackend
from .composite_backend import PreviewVideoBackend
from library.models import Capability

BACKEND_NAMES = ("gemini", "gemini-image", "veo", "gemini-veo")


def create_backend(name: str, client, settings) -> GenerationBackend:
    """Build a backend by its configured name."""
    if name == "gemini":
        return GeminiBackend(client, settings.mesh_model, frozenset({Capability.MESH_ONLY}), name=name)
    if name == "gemini-image":
        return GeminiBackend(client, settings.image_model, frozenset({Capability.PREVIEW_IMAGE}), name=name)
    if name == "veo":
        return VeoBackend(client, settings.video_model, name=name)
    if name == "gemini-veo":
        return PreviewVideoBackend(
            GeminiBackend(client, settings.mesh_model, frozenset({Capability.MESH_ONLY})),
            VeoBackend(client, settings.video_model),
            name=name,
        )
    raise ValueError(f"Unknown backend {name!r}; expected one of {', '.join(BACKEND_NAMES)}")


__all__ = [
    'GenerationBackend', 'GeminiBackend', 'VeoBackend', 'PreviewVideoBackend',
    'create_backend', 'BACKEND_NAMES'
]
