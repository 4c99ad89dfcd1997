"""
Generation controller for VisMesh.
Builds the backends and the generation flow, then runs requests through it.
"""

import logging
from typing import Any, Optional

from google import genai

from library.backends import create_backend
from library.generation_flow import GenerationFlow, ProgressCallback
from library.media_fetcher import MediaFetcher
from library.models import GenerationResult
from library.operation_poller import CancellationToken
from library.requests import AnimationRequest, ModelRequest
from library.settings import AppSettings

logger = logging.getLogger(__name__)


class GenerationController:
    """Handles the coordination of generation workflows."""

    def __init__(self, settings: AppSettings, client: Optional[Any] = None,
                 flow: Optional[GenerationFlow] = None):
        """Initialize the generation controller.

        Args:
            settings: Application settings
            client: google-genai client, created on first use when omitted
            flow: Prebuilt flow, built from settings on first use when omitted
        """
        self.settings = settings
        self._client = client
        self._flow = flow

    def get_client(self) -> Any:
        """Get or create the google-genai client."""
        if self._client is None:
            if not self.settings.api_key:
                raise RuntimeError("GEMINI_API_KEY is not set.")
            logger.info("Creating google-genai client")
            self._client = genai.Client(api_key=self.settings.api_key)
        return self._client

    def get_flow(self) -> GenerationFlow:
        """Get or build the generation flow for the configured backends."""
        if self._flow is None:
            settings = self.settings
            client = self.get_client()

            model_backend = create_backend(settings.model_backend, client, settings)
            animation_backend = create_backend(settings.animation_backend, client, settings)
            if not model_backend.produces_mesh:
                raise ValueError(f"Backend {settings.model_backend!r} cannot generate 3D models")
            if not animation_backend.supports_animation:
                raise ValueError(f"Backend {settings.animation_backend!r} cannot generate animations")

            logger.info(f"Using {model_backend.name} for models and {animation_backend.name} for animations")
            self._flow = GenerationFlow(
                model_backend=model_backend,
                animation_backend=animation_backend,
                fetcher=MediaFetcher(settings.api_key, settings.download_timeout),
                poll_interval=settings.poll_interval,
                max_attempts=settings.poll_max_attempts,
                timeout=settings.poll_timeout,
                validate_meshes=settings.validate_mesh,
            )
        return self._flow

    def generate_model(
        self,
        request: ModelRequest,
        cancel_token: Optional[CancellationToken] = None,
        progress_callback: Optional[ProgressCallback] = None
    ) -> GenerationResult:
        return self.get_flow().generate_model(request, cancel_token, progress_callback)

    def generate_animation(
        self,
        request: AnimationRequest,
        cancel_token: Optional[CancellationToken] = None,
        progress_callback: Optional[ProgressCallback] = None
    ) -> GenerationResult:
        return self.get_flow().generate_animation(request, cancel_token, progress_callback)
