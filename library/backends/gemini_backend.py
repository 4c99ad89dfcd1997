"""
Gemini generate_content backend.

Gemini answers synchronously, so each response is wrapped in an operation
that is already done. Mesh data arrives as OBJ (or glTF JSON) text, images
as inline data.
"""

import re
import uuid
import logging
from typing import FrozenSet, List, Optional

from google.genai import types

from library import data_uri
from library.models import AsyncOperation, Capability, GenerationPrompt, MediaPart
from library.backends.base import GenerationBackend

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```[a-zA-Z0-9_+-]*\s*\n(.*?)```", re.DOTALL)
_OBJ_LINE_RE = re.compile(r"^\s*(v|f)\s", re.MULTILINE)


def strip_code_fences(text: str) -> str:
    """Return the body of the first fenced block, or the text unchanged."""
    match = _FENCE_RE.search(text)
    return match.group(1) if match else text


def mesh_part_from_text(text: str) -> Optional[MediaPart]:
    """Recognise OBJ or glTF JSON text and wrap it as a data-URI part."""
    body = strip_code_fences(text).strip()
    if not body:
        return None
    if body.startswith("{") and '"asset"' in body:
        return MediaPart("model/gltf+json", data_uri.encode(body.encode("utf-8"), "model/gltf+json"))
    if _OBJ_LINE_RE.search(body):
        return MediaPart("model/obj", data_uri.encode(body.encode("utf-8") + b"\n", "model/obj"))
    return None


def attachment_to_part(attachment: MediaPart) -> types.Part:
    if data_uri.is_data_uri(attachment.url):
        decoded = data_uri.decode(attachment.url)
        return types.Part.from_bytes(data=decoded.data, mime_type=attachment.content_type or decoded.mime_type)
    return types.Part.from_uri(file_uri=attachment.url, mime_type=attachment.content_type)


class GeminiBackend(GenerationBackend):
    """Single-shot mesh generation through client.models.generate_content."""

    def __init__(self, client, model: str,
                 capabilities: FrozenSet[Capability] = frozenset({Capability.MESH_ONLY}),
                 name: str = "gemini"):
        self.client = client
        self.model = model
        self.capabilities = frozenset(capabilities)
        self.name = name

    def _config(self) -> types.GenerateContentConfig:
        if Capability.PREVIEW_IMAGE in self.capabilities:
            return types.GenerateContentConfig(response_modalities=["TEXT", "IMAGE"])
        return types.GenerateContentConfig(response_modalities=["TEXT"])

    def submit(self, prompt: GenerationPrompt) -> Optional[AsyncOperation]:
        contents = [attachment_to_part(a) for a in prompt.attachments]
        contents.append(prompt.text)

        logger.info(f"Calling {self.model} with {len(prompt.attachments)} attachment(s)")
        response = self.client.models.generate_content(
            model=self.model,
            contents=contents,
            config=self._config(),
        )
        if response is None:
            return None
        return self._to_operation(response)

    def refresh(self, operation: AsyncOperation) -> AsyncOperation:
        return operation

    def _to_operation(self, response) -> AsyncOperation:
        name = getattr(response, "response_id", None) or f"{self.name}-{uuid.uuid4().hex[:12]}"
        candidates = getattr(response, "candidates", None) or []

        if not candidates:
            feedback = getattr(response, "prompt_feedback", None)
            reason = getattr(feedback, "block_reason", None) if feedback else None
            if reason:
                return AsyncOperation(name=name, done=True, error=f"The request was blocked: {reason}")
            return AsyncOperation(name=name, done=True)

        content = getattr(candidates[0], "content", None)
        parts: List[MediaPart] = []
        texts: List[str] = []

        for part in (getattr(content, "parts", None) or []):
            inline = getattr(part, "inline_data", None)
            file_data = getattr(part, "file_data", None)
            if inline is not None and inline.data:
                mime_type = inline.mime_type or data_uri.DEFAULT_MIME_TYPE
                parts.append(MediaPart(mime_type, data_uri.encode(inline.data, mime_type)))
            elif file_data is not None and file_data.file_uri:
                parts.append(MediaPart(file_data.mime_type or "", file_data.file_uri))
            elif getattr(part, "text", None):
                texts.append(part.text)

        mesh = mesh_part_from_text("\n".join(texts)) if texts else None
        if mesh is not None:
            parts.insert(0, mesh)

        logger.info(f"{self.model} returned {len(parts)} media part(s)")
        return AsyncOperation(name=name, done=True, parts=parts, handle=response)
