"""
Main application controller for VisMesh.
Coordinates all business logic and turns failures into user-facing messages.
"""

import logging
from typing import Any, Optional, Tuple

from .request_controller import ANIMATION_REQUEST, MODEL_REQUEST, RequestController
from .generation_controller import GenerationController
from library.errors import ErrorKind, GenerationError, InputValidationError
from library.generation_flow import GenerationFlow, ProgressCallback
from library.models import (
    ANIMATION_PRESETS, STYLE_PRESETS, ActionOutcome, AnimationStyle, Preset
)
from library.requests import validate_animation_request, validate_model_request
from library.settings import AppSettings

logger = logging.getLogger(__name__)


class AppController:
    """Main application controller coordinating all operations."""

    def __init__(self, settings: Optional[AppSettings] = None, client: Optional[Any] = None,
                 flow: Optional[GenerationFlow] = None):
        """Initialize the application controller."""
        self.settings = settings or AppSettings()
        self.request_controller = RequestController()
        self.generation_controller = GenerationController(self.settings, client=client, flow=flow)

    @property
    def style_presets(self) -> Tuple[Preset, ...]:
        return STYLE_PRESETS

    @property
    def animation_presets(self) -> Tuple[Preset, ...]:
        return ANIMATION_PRESETS

    def check_credentials(self) -> Optional[str]:
        """
        Check that an API key is configured.

        Returns:
            Warning text when the key is missing, None otherwise
        """
        if not self.settings.api_key:
            return "No API key found. Set GEMINI_API_KEY (or GOOGLE_API_KEY) before generating."
        return None

    def cancel_request(self, action: str = MODEL_REQUEST) -> bool:
        """Cancel the in-flight request for one action; other actions keep running."""
        return self.request_controller.cancel(action)

    @staticmethod
    def _failure(prefix: str, error: Exception) -> ActionOutcome:
        if isinstance(error, InputValidationError):
            return ActionOutcome(error=error.message, error_kind=error.kind.value)
        if isinstance(error, GenerationError):
            return ActionOutcome(error=f"{prefix}: {error.message}", error_kind=error.kind.value)
        return ActionOutcome(
            error=f"{prefix}: {error or 'An unknown error occurred.'}",
            error_kind=ErrorKind.OPERATION_ERROR.value,
        )

    def generate_model(
        self,
        image: Optional[bytes],
        image_mime_type: Optional[str],
        style: Any,
        prompt: Optional[str] = None,
        progress_callback: Optional[ProgressCallback] = None
    ) -> ActionOutcome:
        """
        Generate a 3D model from an uploaded or captured photo.

        Args:
            image: Raw image bytes
            image_mime_type: MIME type of the image
            style: Style preset id
            prompt: Optional guidance text
            progress_callback: Called with (fraction, message)

        Returns:
            ActionOutcome with the result or a single error message
        """
        token = self.request_controller.begin(MODEL_REQUEST)
        try:
            request = validate_model_request(image, image_mime_type, style, prompt)
            result = self.generation_controller.generate_model(request, token, progress_callback)
            logger.info("Model generation finished")
            return ActionOutcome(result=result)
        except GenerationError as e:
            logger.warning(f"Model generation failed ({e.kind.value}): {e.message}")
            return self._failure("Generation failed", e)
        except Exception as e:
            logger.exception("Unexpected error during model generation")
            return self._failure("Generation failed", e)
        finally:
            self.request_controller.end(MODEL_REQUEST, token)

    def generate_animation(
        self,
        mesh_data_uri: Optional[str],
        animation_style: Any = AnimationStyle.TURNTABLE,
        prompt: Optional[str] = None,
        preview_image_uri: Optional[str] = None,
        source_image_uri: Optional[str] = None,
        progress_callback: Optional[ProgressCallback] = None
    ) -> ActionOutcome:
        """
        Generate an animation video for an existing mesh.

        Returns:
            ActionOutcome carrying the mesh and preview through with the new video
        """
        token = self.request_controller.begin(ANIMATION_REQUEST)
        try:
            request = validate_animation_request(
                mesh_data_uri, animation_style, prompt, preview_image_uri, source_image_uri
            )
            result = self.generation_controller.generate_animation(request, token, progress_callback)
            logger.info("Animation generation finished")
            return ActionOutcome(result=result)
        except GenerationError as e:
            logger.warning(f"Animation failed ({e.kind.value}): {e.message}")
            return self._failure("Animation failed", e)
        except Exception as e:
            logger.exception("Unexpected error during animation generation")
            return self._failure("Animation failed", e)
        finally:
            self.request_controller.end(ANIMATION_REQUEST, token)
