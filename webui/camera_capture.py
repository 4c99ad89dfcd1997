"""
Camera capture for VisMesh.

The browser camera stays live while the camera widget has state, so every
way out of the capture dialog has to drop that state.
"""

import logging
from types import TracebackType
from typing import Any, Callable, MutableMapping, Optional, Type

import streamlit as st

logger = logging.getLogger(__name__)

CAMERA_WIDGET_KEY = "camera_capture_input"
SESSION_OPEN_KEY = "_camera_session_open"


class CameraSession:
    """
    Context manager around one opening of the camera dialog.

    The capture is released (widget state dropped) when the block exits via
    close(), or when it raises an error. Script reruns triggered by widget
    interaction leave the capture in place.
    """

    def __init__(self, state: Optional[MutableMapping[str, Any]] = None,
                 widget_key: str = CAMERA_WIDGET_KEY):
        self.state = state if state is not None else st.session_state
        self.widget_key = widget_key
        self._closing = False

    @classmethod
    def reset(cls, state: Optional[MutableMapping[str, Any]] = None,
              widget_key: str = CAMERA_WIDGET_KEY) -> None:
        """Drop leftovers from a dialog that was dismissed without closing."""
        cls(state, widget_key).release()

    @property
    def is_open(self) -> bool:
        return bool(self.state.get(SESSION_OPEN_KEY))

    def __enter__(self) -> "CameraSession":
        self.state[SESSION_OPEN_KEY] = True
        return self

    def capture(self, label: str = "Take a photo") -> Any:
        return st.camera_input(label, key=self.widget_key)

    def close(self) -> None:
        """Mark the dialog as closing; the capture is released on exit."""
        self._closing = True

    def release(self) -> None:
        for key in (self.widget_key, SESSION_OPEN_KEY):
            if key in self.state:
                del self.state[key]
        logger.debug("Camera capture released")

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType]
    ) -> bool:
        failed = exc_type is not None and issubclass(exc_type, Exception)
        if failed:
            logger.warning(f"Camera dialog failed: {exc_val}")
        if self._closing or failed:
            self.release()
        return False


@st.dialog("Capture a photo")
def camera_dialog(on_capture: Callable[[bytes, str], None]) -> None:
    """Camera dialog; calls on_capture(bytes, mime_type) with the accepted photo."""
    with CameraSession() as session:
        photo = session.capture()

        col_use, col_cancel = st.columns(2)
        with col_use:
            use_photo = st.button("Use photo", type="primary", disabled=photo is None,
                                  use_container_width=True)
        with col_cancel:
            cancel = st.button("Cancel", use_container_width=True)

        if use_photo and photo is not None:
            on_capture(photo.getvalue(), photo.type or "image/jpeg")
            session.close()
        elif cancel:
            session.close()

    if not session.is_open:
        st.rerun()
