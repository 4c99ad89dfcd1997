"""
Veo generate_videos backend with long-running operations.
"""

import logging
from typing import List, Optional

from google.genai import types

from library import data_uri
from library.models import AsyncOperation, Capability, GenerationPrompt, MediaPart
from library.backends.base import GenerationBackend

logger = logging.getLogger(__name__)

DEFAULT_VIDEO_MIME = "video/mp4"


def error_message(error) -> Optional[str]:
    if not error:
        return None
    if isinstance(error, dict):
        return error.get("message") or str(error)
    return getattr(error, "message", None) or str(error)


def video_parts(operation) -> List[MediaPart]:
    response = getattr(operation, "response", None) or getattr(operation, "result", None)
    parts = []
    for generated in (getattr(response, "generated_videos", None) or []):
        video = getattr(generated, "video", None)
        if video is None:
            continue
        mime_type = getattr(video, "mime_type", None) or DEFAULT_VIDEO_MIME
        if getattr(video, "video_bytes", None):
            parts.append(MediaPart(mime_type, data_uri.encode(video.video_bytes, mime_type)))
        elif getattr(video, "uri", None):
            parts.append(MediaPart(mime_type, video.uri))
    return parts


def filtered_reason(operation) -> Optional[str]:
    response = getattr(operation, "response", None) or getattr(operation, "result", None)
    reasons = getattr(response, "rai_media_filtered_reasons", None)
    if reasons:
        return "; ".join(reasons)
    return None


class VeoBackend(GenerationBackend):
    """Video generation through client.models.generate_videos."""

    capabilities = frozenset({Capability.PREVIEW_VIDEO})
    supports_animation = True
    produces_mesh = False

    def __init__(self, client, model: str, name: str = "veo"):
        self.client = client
        self.model = model
        self.name = name

    def submit(self, prompt: GenerationPrompt) -> Optional[AsyncOperation]:
        # Only one conditioning image is accepted; other attachments are dropped.
        image = None
        for attachment in prompt.attachments:
            if attachment.content_type.startswith("image/") and data_uri.is_data_uri(attachment.url):
                decoded = data_uri.decode(attachment.url)
                image = types.Image(image_bytes=decoded.data, mime_type=attachment.content_type)
                break

        config = types.GenerateVideosConfig(
            number_of_videos=1,
            duration_seconds=prompt.duration_seconds,
            aspect_ratio=prompt.aspect_ratio,
        )
        logger.info(f"Submitting {self.model} video job (image={'yes' if image else 'no'})")
        operation = self.client.models.generate_videos(
            model=self.model,
            prompt=prompt.text,
            image=image,
            config=config,
        )
        if operation is None:
            return None
        return self._to_operation(operation)

    def refresh(self, operation: AsyncOperation) -> AsyncOperation:
        return self._to_operation(self.client.operations.get(operation.handle))

    def _to_operation(self, operation) -> AsyncOperation:
        done = bool(getattr(operation, "done", False))
        error = error_message(getattr(operation, "error", None))
        parts = video_parts(operation) if done and not error else []
        if done and not error and not parts:
            error = filtered_reason(operation)
        return AsyncOperation(
            name=getattr(operation, "name", None) or "veo-operation",
            done=done,
            error=error,
            parts=parts,
            handle=operation,
        )
