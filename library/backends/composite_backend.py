"""
Mesh plus preview video from two backends.

Gemini answers with the mesh right away; Veo then renders a short turntable
clip from the same photo. The combined operation finishes when the video does.
"""

import logging
from dataclasses import replace
from typing import Optional

from library.models import AnimationStyle, AsyncOperation, Capability, GenerationPrompt
from library.prompt_builder import PREVIEW_VIDEO_SECONDS, animation_text
from library.backends.base import GenerationBackend

logger = logging.getLogger(__name__)


class PreviewVideoBackend(GenerationBackend):
    """Pairs a mesh backend with a video backend to offer preview-video output."""

    capabilities = frozenset({Capability.PREVIEW_VIDEO})

    def __init__(self, mesh_backend: GenerationBackend, video_backend: GenerationBackend,
                 name: str = "gemini-veo"):
        if not mesh_backend.produces_mesh:
            raise ValueError(f"Backend {mesh_backend.name!r} does not produce meshes")
        self.mesh_backend = mesh_backend
        self.video_backend = video_backend
        self.name = name

    def submit(self, prompt: GenerationPrompt) -> Optional[AsyncOperation]:
        mesh_operation = self.mesh_backend.submit(prompt)
        if mesh_operation is None:
            return None
        # The mesh backend answers synchronously
        if not mesh_operation.done or mesh_operation.error:
            return mesh_operation

        video_prompt = replace(
            prompt,
            text=animation_text(AnimationStyle.TURNTABLE),
            duration_seconds=prompt.duration_seconds or PREVIEW_VIDEO_SECONDS,
        )
        logger.info(f"Mesh ready from {self.mesh_backend.name}; rendering preview with {self.video_backend.name}")
        video_operation = self.video_backend.submit(video_prompt)
        if video_operation is None:
            return None
        return self._combine(mesh_operation, video_operation)

    def refresh(self, operation: AsyncOperation) -> AsyncOperation:
        mesh_operation, video_operation = operation.handle
        return self._combine(mesh_operation, self.video_backend.refresh(video_operation))

    def _combine(self, mesh_operation: AsyncOperation, video_operation: AsyncOperation) -> AsyncOperation:
        return AsyncOperation(
            name=video_operation.name,
            done=video_operation.done,
            error=video_operation.error,
            parts=list(mesh_operation.parts) + list(video_operation.parts),
            handle=(mesh_operation, video_operation),
        )
