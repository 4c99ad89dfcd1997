"""
Data models for VisMesh.
Pure data structures with no business logic.
"""

from enum import Enum
from typing import Any, List, Optional, Tuple
from dataclasses import dataclass, field


class StylePreset(str, Enum):
    """Style presets offered for mesh generation."""
    REALISTIC = "realistic"
    CARTOONISH = "cartoonish"
    LOW_POLY = "low-poly"
    SCULPTURE = "sculpture"


class AnimationStyle(str, Enum):
    """Animation styles offered for a generated mesh."""
    TURNTABLE = "turntable"
    BOUNCE = "bounce"
    CRUMBLE = "crumble"
    DISMANTLE = "dismantle"
    CUSTOM = "custom"


class Capability(str, Enum):
    """What a generation backend produces alongside the mesh."""
    MESH_ONLY = "produces-mesh-only"
    PREVIEW_IMAGE = "produces-preview-image"
    PREVIEW_VIDEO = "produces-preview-video"


class MediaKind(str, Enum):
    """Kinds of media looked up in a completed operation."""
    MESH = "mesh"
    PREVIEW_IMAGE = "preview-image"
    VIDEO = "video"


@dataclass(frozen=True)
class Preset:
    """A selectable option shown in the control panel."""
    id: str
    label: str
    description: str


STYLE_PRESETS: Tuple[Preset, ...] = (
    Preset(StylePreset.REALISTIC.value, "Realistic", "Aims for a photorealistic representation."),
    Preset(StylePreset.CARTOONISH.value, "Cartoonish", "Stylized, with exaggerated features."),
    Preset(StylePreset.LOW_POLY.value, "Low Poly", "A minimalistic, geometric art style."),
    Preset(StylePreset.SCULPTURE.value, "Sculpture", "Looks like a classical stone sculpture."),
)

ANIMATION_PRESETS: Tuple[Preset, ...] = (
    Preset(AnimationStyle.TURNTABLE.value, "Turntable", "A smooth 360-degree spin."),
    Preset(AnimationStyle.BOUNCE.value, "Bounce", "A playful bouncing motion."),
    Preset(AnimationStyle.CRUMBLE.value, "Crumble", "The model slowly crumbles into dust."),
    Preset(AnimationStyle.DISMANTLE.value, "Dismantle", "Parts float apart, then reassemble."),
    Preset(AnimationStyle.CUSTOM.value, "Custom", "Describe the animation yourself."),
)


@dataclass(frozen=True)
class MediaPart:
    """One tagged payload of a model response.

    `url` is either a remote URL or an inline `data:` URI.
    """
    content_type: str
    url: str


@dataclass
class AsyncOperation:
    """A remote generation job, possibly still running."""
    name: str
    done: bool = False
    error: Optional[str] = None
    parts: List[MediaPart] = field(default_factory=list)
    handle: Any = None  # vendor operation object, re-submitted on refresh


@dataclass(frozen=True)
class GenerationPrompt:
    """Instruction text plus ordered media attachments for one remote call."""
    text: str
    attachments: Tuple[MediaPart, ...]
    duration_seconds: Optional[int] = None
    aspect_ratio: Optional[str] = None


@dataclass(frozen=True)
class GenerationResult:
    """Data URIs produced by one request."""
    mesh_data_uri: Optional[str] = None
    preview_image_uri: Optional[str] = None
    video_data_uri: Optional[str] = None


@dataclass(frozen=True)
class ActionOutcome:
    """What the UI receives from a controller action: a result or a message."""
    result: Optional[GenerationResult] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None
