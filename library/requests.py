"""
Request schemas, validated before any network call.
"""

from typing import Optional

from pydantic import BaseModel, ValidationError, field_validator

from library import data_uri
from library.errors import InputValidationError
from library.models import AnimationStyle, StylePreset

_MESSAGES = {
    "image": "An image is required.",
    "image_mime_type": "Only image files are allowed.",
    "style": "A style must be selected.",
    "style_unknown": "Unknown style.",
    "mesh_data_uri": "A 3D model is required to generate an animation.",
    "animation_style": "Unknown animation style.",
}


class ModelRequest(BaseModel):
    image: bytes
    image_mime_type: str
    prompt: Optional[str] = None
    style: StylePreset

    @field_validator("image")
    @classmethod
    def image_not_empty(cls, v: bytes) -> bytes:
        if not v:
            raise ValueError(_MESSAGES["image"])
        return v

    @field_validator("image_mime_type")
    @classmethod
    def image_mime(cls, v: str) -> str:
        if not v or not v.lower().startswith("image/"):
            raise ValueError(_MESSAGES["image_mime_type"])
        return v.lower()

    @field_validator("style", mode="before")
    @classmethod
    def style_preset(cls, v) -> StylePreset:
        if isinstance(v, StylePreset):
            return v
        value = str(v or "").strip()
        if not value:
            raise ValueError(_MESSAGES["style"])
        try:
            return StylePreset(value)
        except ValueError:
            raise ValueError(_MESSAGES["style_unknown"]) from None

    @property
    def image_data_uri(self) -> str:
        return data_uri.encode(self.image, self.image_mime_type)


class AnimationRequest(BaseModel):
    mesh_data_uri: str
    preview_image_uri: Optional[str] = None
    source_image_uri: Optional[str] = None
    animation_style: AnimationStyle = AnimationStyle.TURNTABLE
    prompt: Optional[str] = None

    @property
    def conditioning_image_uri(self) -> Optional[str]:
        """Image sent alongside the mesh: the preview if there is one, else the source photo."""
        for uri in (self.preview_image_uri, self.source_image_uri):
            if not data_uri.is_data_uri(uri):
                continue
            try:
                if data_uri.mime_type_of(uri).startswith("image/"):
                    return uri
            except data_uri.DataUriError:
                continue
        return None

    @field_validator("mesh_data_uri")
    @classmethod
    def mesh_is_data_uri(cls, v: str) -> str:
        if not data_uri.is_data_uri(v):
            raise ValueError(_MESSAGES["mesh_data_uri"])
        try:
            data_uri.mime_type_of(v)
        except data_uri.DataUriError:
            raise ValueError(_MESSAGES["mesh_data_uri"]) from None
        return v


def _to_input_error(error: ValidationError) -> InputValidationError:
    first = error.errors()[0]
    field = str(first["loc"][0]) if first.get("loc") else "request"
    # validators raise ValueError with the user-facing text already set
    raised = (first.get("ctx") or {}).get("error")
    if isinstance(raised, ValueError):
        return InputValidationError(field, str(raised))
    return InputValidationError(field, _MESSAGES.get(field, first.get("msg", "Invalid request.")))


def validate_model_request(image: Optional[bytes], image_mime_type: Optional[str],
                           style, prompt: Optional[str] = None) -> ModelRequest:
    """Build a ModelRequest, raising InputValidationError on the first bad field."""
    if not image:
        raise InputValidationError("image", _MESSAGES["image"])
    if not style:
        raise InputValidationError("style", _MESSAGES["style"])
    try:
        return ModelRequest(image=image, image_mime_type=image_mime_type or "", prompt=prompt, style=style)
    except ValidationError as e:
        raise _to_input_error(e) from e


def validate_animation_request(mesh_data_uri: Optional[str], animation_style=AnimationStyle.TURNTABLE,
                               prompt: Optional[str] = None,
                               preview_image_uri: Optional[str] = None,
                               source_image_uri: Optional[str] = None) -> AnimationRequest:
    """Build an AnimationRequest, raising InputValidationError on the first bad field."""
    if not mesh_data_uri:
        raise InputValidationError("mesh_data_uri", _MESSAGES["mesh_data_uri"])
    try:
        return AnimationRequest(
            mesh_data_uri=mesh_data_uri,
            preview_image_uri=preview_image_uri,
            source_image_uri=source_image_uri,
            animation_style=animation_style or AnimationStyle.TURNTABLE,
            prompt=prompt,
        )
    except ValidationError as e:
        raise _to_input_error(e) from e
