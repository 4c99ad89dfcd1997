"""
Photo preview for the input column: the current photo (or a placeholder),
a clear button and an optional info expander.
"""

import hashlib
from io import BytesIO
from typing import NamedTuple, Optional

import streamlit as st
from PIL import Image, UnidentifiedImageError

from webui.ui_components import placeholder_card


class ImageInfo(NamedTuple):
    width: int
    height: int
    format: str
    mode: str


def describe_image(data: Optional[bytes]) -> Optional[ImageInfo]:
    """Read image dimensions and format, or None if the bytes are not an image."""
    if not data:
        return None
    try:
        with Image.open(BytesIO(data)) as img:
            return ImageInfo(img.width, img.height, img.format or "Unknown", img.mode)
    except (UnidentifiedImageError, OSError):
        return None


def _get_image_hash(data: Optional[bytes]) -> str:
    if not data:
        return "none"
    return hashlib.md5(data).hexdigest()


class ImagePreview:
    """Preview of one photo slot, keyed so its clear button survives reruns."""

    def __init__(self, component_id: str, title: str = "Image Preview",
                 show_clear: bool = False, show_info: bool = False,
                 placeholder_text: str = "No image"):
        self.component_id = component_id
        self.title = title
        self.show_clear = show_clear
        self.show_info = show_info
        self.placeholder_text = placeholder_text

    def _clear_key(self, data: bytes) -> str:
        # A new photo gets a fresh button, so a stale click cannot clear it
        return f"{self.component_id}_clear_{_get_image_hash(data)[:12]}"

    def _render_info(self, data: bytes) -> None:
        info = describe_image(data)
        if info is None:
            return
        with st.expander("ℹ️ Image Info", expanded=False):
            col_size, col_kind = st.columns(2)
            with col_size:
                st.metric("Width", f"{info.width}px")
                st.metric("Height", f"{info.height}px")
            with col_kind:
                st.metric("Format", info.format)
                st.metric("Mode", info.mode)

    def render(self, data: Optional[bytes]) -> bool:
        """Draw the preview; returns True when the clear button was pressed."""
        col_title, col_clear = st.columns([5, 1])
        with col_title:
            st.markdown(f"**{self.title}**")

        cleared = False
        if self.show_clear and data:
            with col_clear:
                cleared = st.button("🗑️", key=self._clear_key(data), help="Clear image",
                                    use_container_width=True)

        if not data:
            st.image(placeholder_card("photo", self.placeholder_text), use_container_width=True)
            return cleared

        st.image(data, use_container_width=True)
        if self.show_info:
            self._render_info(data)
        return cleared


def image_preview(data: Optional[bytes], component_id: str, title: str = "Image Preview",
                  show_clear: bool = False, show_info: bool = False) -> bool:
    """Functional wrapper for ImagePreview; returns True if cleared."""
    return ImagePreview(component_id, title=title, show_clear=show_clear, show_info=show_info).render(data)
