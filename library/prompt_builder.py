"""
Prompt construction for mesh and animation requests.
Deterministic text building, no I/O.
"""

from typing import FrozenSet, Iterable, Optional

from library.models import AnimationStyle, Capability, GenerationPrompt, MediaPart

DEFAULT_MODEL_PROMPT = "A standard 3D model of the object in the image."

PREVIEW_VIDEO_SECONDS = 5
ANIMATION_VIDEO_SECONDS = 5
VIDEO_ASPECT_RATIO = "16:9"

ANIMATION_PROMPTS = {
    AnimationStyle.TURNTABLE.value: "Create a smooth, 360-degree turntable animation of the provided 3D model.",
    AnimationStyle.BOUNCE.value: "Create a playful bouncing animation for the provided 3D model.",
    AnimationStyle.CRUMBLE.value: "Animate the provided 3D model to look like it is slowly crumbling into dust.",
    AnimationStyle.DISMANTLE.value: (
        "Create an animation where the provided 3D model gracefully disassembles into its core "
        "components, which then float apart before reassembling back into the original model."
    ),
}

_OUTPUT_INSTRUCTIONS = {
    Capability.MESH_ONLY: (
        "Return only the 3D mesh data as Wavefront OBJ text (a 'model/obj' part). "
        "Do not return any explanation."
    ),
    Capability.PREVIEW_IMAGE: (
        "Also generate a single preview image of the finished model. "
        "Return both the 3D mesh data (as a downloadable 'model/obj' part) "
        "and the preview image (as an 'image/png' part). Do not return text."
    ),
    Capability.PREVIEW_VIDEO: (
        "Also generate a very short, static, 1-second video of the model from a "
        "three-quarter view to serve as a preview. Return both the 3D mesh data "
        "(as a downloadable 'model/obj' part) and the preview video (as a "
        "'video/mp4' part). Do not return text."
    ),
}


def _value(option) -> str:
    return option.value if hasattr(option, "value") else str(option)


def _output_capability(capabilities: Iterable[Capability]) -> Capability:
    caps = frozenset(capabilities)
    if Capability.PREVIEW_VIDEO in caps:
        return Capability.PREVIEW_VIDEO
    if Capability.PREVIEW_IMAGE in caps:
        return Capability.PREVIEW_IMAGE
    return Capability.MESH_ONLY


def build_model_prompt(
    image: MediaPart,
    style,
    prompt: Optional[str] = None,
    capabilities: FrozenSet[Capability] = frozenset({Capability.MESH_ONLY}),
) -> GenerationPrompt:
    """
    Build the mesh generation prompt for one image.

    Args:
        image: The source photo as a data-URI part
        style: Style preset id, interpolated verbatim
        prompt: Optional user guidance; a neutral default is used when empty
        capabilities: What the target backend produces besides the mesh

    Returns:
        GenerationPrompt with the photo as its only attachment
    """
    guidance = prompt.strip() if prompt and prompt.strip() else DEFAULT_MODEL_PROMPT
    output = _output_capability(capabilities)

    text = (
        "From the provided image, generate a basic 3D mesh model suitable as a base for animation. "
        f'Use the following prompt to guide the generation: "{guidance}". '
        f'Apply the following style: "{_value(style)}". '
        f"{_OUTPUT_INSTRUCTIONS[output]}"
    )

    if output is Capability.PREVIEW_VIDEO:
        return GenerationPrompt(
            text=text,
            attachments=(image,),
            duration_seconds=PREVIEW_VIDEO_SECONDS,
            aspect_ratio=VIDEO_ASPECT_RATIO,
        )
    return GenerationPrompt(text=text, attachments=(image,))


def animation_text(animation_style, prompt: Optional[str] = None) -> str:
    """
    Fixed text for a known style; the user's prompt otherwise, else turntable.
    The style id is always appended verbatim.
    """
    style_id = _value(animation_style)
    if style_id in ANIMATION_PROMPTS:
        body = ANIMATION_PROMPTS[style_id]
    elif prompt and prompt.strip():
        body = prompt.strip()
    else:
        body = ANIMATION_PROMPTS[AnimationStyle.TURNTABLE.value]
    return f'{body} Animation style: "{style_id}".'


def build_animation_prompt(
    mesh: MediaPart,
    animation_style,
    prompt: Optional[str] = None,
    source_image: Optional[MediaPart] = None,
) -> GenerationPrompt:
    """Build the animation prompt; attachments are the source image (if any) then the mesh."""
    attachments = (source_image, mesh) if source_image is not None else (mesh,)
    return GenerationPrompt(
        text=animation_text(animation_style, prompt),
        attachments=attachments,
        duration_seconds=ANIMATION_VIDEO_SECONDS,
        aspect_ratio=VIDEO_ASPECT_RATIO,
    )
