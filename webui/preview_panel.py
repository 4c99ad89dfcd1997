"""
Preview panel view for VisMesh.
Shows the generated mesh, preview and animation, with downloads and the animation form.
"""

import streamlit as st

from library import data_uri
from webui.state_manager import StateManager
from webui.controllers import AppController, ANIMATION_REQUEST
from webui.ui_components import (
    download_data_uri_button, notify_error, show_3d_model_viewer,
    show_progress, show_video_preview
)


class PreviewPanel:
    """Handles the output side of the UI."""

    @staticmethod
    def render(controller: AppController) -> None:
        """Render the preview panel for the current state."""
        st.subheader("Preview")

        if StateManager.last_error.value:
            notify_error(StateManager.last_error.value, StateManager.last_error_kind.value)

        mesh = StateManager.mesh_data_uri.value
        video = StateManager.video_data_uri.value

        if StateManager.is_generating.value:
            show_3d_model_viewer(None, show_progress_bar=True, progress_text="Generating 3D model...")
            return

        if video:
            PreviewPanel._render_video(video)

        if mesh:
            PreviewPanel._render_model(controller, mesh)
        else:
            show_3d_model_viewer(None)

    @staticmethod
    def _render_video(video: str) -> None:
        show_video_preview(video)
        download_data_uri_button(video, "📥 Download Animation", key="download_video", primary=True)
        st.markdown("---")

    @staticmethod
    def _render_model(controller: AppController, mesh: str) -> None:
        st.success("✅ 3D Model Ready!")
        show_3d_model_viewer(mesh)

        preview = StateManager.preview_image_uri.value
        col_mesh, col_preview = st.columns(2)
        with col_mesh:
            download_data_uri_button(mesh, "📥 Download 3D Model", key="download_mesh", primary=True)
        with col_preview:
            if preview:
                download_data_uri_button(preview, "📥 Download Preview", key="download_preview")

        if preview:
            with st.expander("🖼️ Preview Image", expanded=False):
                st.image(data_uri.decode(preview).data, use_container_width=True)

        PreviewPanel._render_animation_form(controller, mesh, preview)

    @staticmethod
    def _render_animation_form(controller: AppController, mesh: str, preview) -> None:
        presets = controller.animation_presets
        labels = {p.id: p.label for p in presets}
        descriptions = {p.id: p.description for p in presets}
        busy = bool(StateManager.is_animating.value)

        with st.form("animation_form"):
            st.markdown("**🎬 Animate your model**")
            st.caption("Your 3D model is ready. You can now generate an animation.")
            animation_style = st.selectbox(
                "Animation style",
                options=[p.id for p in presets],
                format_func=lambda preset_id: f"{labels[preset_id]} - {descriptions[preset_id]}",
                key="animation_style"
            )
            animation_prompt = st.text_input(
                "Animation prompt",
                key="animation_prompt",
                placeholder="Used with the Custom style, e.g. 'make it slowly spin and glow'"
            )
            submitted = st.form_submit_button(
                "🎬 Generate Animation", type="primary", disabled=busy, use_container_width=True
            )

        if not submitted:
            return

        image = StateManager.uploaded_image.value
        source_image = data_uri.encode(image, StateManager.uploaded_image_type.value) if image else None

        st.button("Cancel", key="cancel_animation", on_click=controller.cancel_request,
                  args=(ANIMATION_REQUEST,))
        progress = st.empty()
        StateManager.is_animating = True
        try:
            outcome = controller.generate_animation(
                mesh_data_uri=mesh,
                animation_style=animation_style,
                prompt=animation_prompt,
                preview_image_uri=preview,
                source_image_uri=source_image,
                progress_callback=lambda fraction, message: show_progress(fraction, message, progress)
            )
        finally:
            StateManager.is_animating = False
            progress.empty()

        if outcome.ok:
            st.toast("✅ Animation complete!")
        else:
            notify_error(outcome.error, outcome.error_kind, inline=False)
        with StateManager.observe():
            StateManager.apply_animation_outcome(outcome)
