"""
Generation flow: prompt -> submit -> poll -> extract -> materialize -> validate.
One sequence for every backend; what gets extracted depends on its capabilities.
"""

import logging
from typing import Callable, Dict, List, Optional

from library import data_uri
from library.backends.base import GenerationBackend
from library.errors import MissingOperationError
from library.media_fetcher import MediaFetcher
from library.mesh_validator import validate_mesh
from library.models import Capability, GenerationPrompt, GenerationResult, MediaKind, MediaPart
from library.operation_poller import CancellationToken, OperationPoller, POLL_INTERVAL
from library.prompt_builder import build_animation_prompt, build_model_prompt
from library.requests import AnimationRequest, ModelRequest
from library.result_extractor import extract

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float, str], None]


def wanted_kinds(capabilities) -> List[MediaKind]:
    """Media kinds to pull out of a mesh generation result."""
    kinds = [MediaKind.MESH]
    if Capability.PREVIEW_IMAGE in capabilities:
        kinds.append(MediaKind.PREVIEW_IMAGE)
    if Capability.PREVIEW_VIDEO in capabilities:
        kinds.append(MediaKind.VIDEO)
    return kinds


def _as_part(uri: str) -> MediaPart:
    return MediaPart(data_uri.mime_type_of(uri), uri)


class GenerationFlow:
    """Runs mesh and animation requests against the configured backends."""

    def __init__(
        self,
        model_backend: GenerationBackend,
        animation_backend: GenerationBackend,
        fetcher: MediaFetcher,
        poll_interval: float = POLL_INTERVAL,
        max_attempts: Optional[int] = 120,
        timeout: Optional[float] = None,
        validate_meshes: bool = True,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        self.model_backend = model_backend
        self.animation_backend = animation_backend
        self.fetcher = fetcher
        self.poll_interval = poll_interval
        self.max_attempts = max_attempts
        self.timeout = timeout
        self.validate_meshes = validate_meshes
        self._sleep = sleep

    def _poller(self, backend: GenerationBackend) -> OperationPoller:
        return OperationPoller(
            backend.refresh,
            poll_interval=self.poll_interval,
            max_attempts=self.max_attempts,
            timeout=self.timeout,
            sleep=self._sleep,
        )

    def _run(
        self,
        backend: GenerationBackend,
        prompt: GenerationPrompt,
        wanted: List[MediaKind],
        cancel_token: Optional[CancellationToken],
        progress_callback: Optional[ProgressCallback],
    ) -> Dict[MediaKind, str]:
        def report(fraction: float, message: str) -> None:
            if progress_callback:
                progress_callback(fraction, message)

        report(0.05, "Submitting request...")
        operation = backend.submit(prompt)
        if operation is None:
            raise MissingOperationError()
        logger.info(f"{backend.name} started operation {operation.name}")

        def on_poll(attempts: int, elapsed: float) -> None:
            report(min(0.1 + attempts * 0.02, 0.8), f"Waiting for the model ({elapsed:.0f}s)...")

        report(0.1, "Waiting for the model...")
        operation = self._poller(backend).await_completion(operation, cancel_token, on_poll)

        found = extract(operation.parts, wanted)

        uris = {}
        for i, kind in enumerate(wanted):
            report(0.8 + 0.15 * i / len(wanted), f"Fetching {kind.value}...")
            uris[kind] = self.fetcher.materialize(found[kind])

        if MediaKind.MESH in uris and self.validate_meshes:
            validate_mesh(uris[MediaKind.MESH])

        report(1.0, "Done")
        return uris

    def generate_model(
        self,
        request: ModelRequest,
        cancel_token: Optional[CancellationToken] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> GenerationResult:
        """
        Generate a mesh (plus any preview the backend produces) from a photo.

        Args:
            request: Validated model request
            cancel_token: Optional cancellation token
            progress_callback: Called with (fraction, message)

        Returns:
            GenerationResult with the mesh and optional preview data URIs
        """
        backend = self.model_backend
        image = MediaPart(request.image_mime_type, request.image_data_uri)
        prompt = build_model_prompt(image, request.style, request.prompt, backend.capabilities)
        logger.info(f"Generating model with {backend.name} (style={request.style.value})")

        uris = self._run(backend, prompt, wanted_kinds(backend.capabilities), cancel_token, progress_callback)
        return GenerationResult(
            mesh_data_uri=uris[MediaKind.MESH],
            preview_image_uri=uris.get(MediaKind.PREVIEW_IMAGE),
            video_data_uri=uris.get(MediaKind.VIDEO),
        )

    def generate_animation(
        self,
        request: AnimationRequest,
        cancel_token: Optional[CancellationToken] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> GenerationResult:
        """Animate an existing mesh; the mesh and preview pass through unchanged."""
        backend = self.animation_backend
        mesh = _as_part(request.mesh_data_uri)
        conditioning = request.conditioning_image_uri
        source = _as_part(conditioning) if conditioning else None
        prompt = build_animation_prompt(mesh, request.animation_style, request.prompt, source)
        logger.info(f"Generating {request.animation_style.value} animation with {backend.name}")

        uris = self._run(backend, prompt, [MediaKind.VIDEO], cancel_token, progress_callback)
        return GenerationResult(
            mesh_data_uri=request.mesh_data_uri,
            preview_image_uri=request.preview_image_uri,
            video_data_uri=uris[MediaKind.VIDEO],
        )
