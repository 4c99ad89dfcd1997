"""
Control panel view for VisMesh.
Pure view that handles photo input, prompt, style choice and generation.
"""

import streamlit as st

from webui.state_manager import StateManager
from webui.controllers import AppController, MODEL_REQUEST
from webui.camera_capture import CameraSession, camera_dialog
from webui.image_preview import describe_image, image_preview
from webui.ui_components import notify_error, show_progress

UPLOAD_NONCE_KEY = "_upload_nonce"
LAST_UPLOAD_ID_KEY = "_last_upload_id"


class ControlPanel:
    """Handles the input side of the UI."""

    @staticmethod
    def render(controller: AppController) -> None:
        """Render the control panel."""
        st.subheader("1. Provide a photo")
        ControlPanel._render_image_input()

        st.subheader("2. Guide the model")
        prompt = st.text_area(
            "Custom prompt (optional)",
            key="model_prompt",
            placeholder="e.g. 'a wooden chair with curved legs'",
            help="Leave empty for a standard 3D model of the object in the photo."
        )

        st.subheader("3. Pick a style")
        presets = controller.style_presets
        labels = {p.id: p.label for p in presets}
        style = st.radio(
            "Style",
            options=[p.id for p in presets],
            format_func=lambda preset_id: labels.get(preset_id, preset_id),
            captions=[p.description for p in presets],
            key="style_preset",
            label_visibility="collapsed"
        )

        ControlPanel._render_generate_button(controller, style, prompt)

    @staticmethod
    def _render_image_input() -> None:
        tab_upload, tab_camera = st.tabs(["Upload", "Camera"])

        with tab_upload:
            nonce = st.session_state.get(UPLOAD_NONCE_KEY, 0)
            uploaded_file = st.file_uploader(
                "Upload Image",
                type=["png", "jpg", "jpeg", "webp"],
                key=f"photo_upload_{nonce}"
            )
            # Only a newly chosen file replaces the current photo
            if uploaded_file is not None and uploaded_file.file_id != st.session_state.get(LAST_UPLOAD_ID_KEY):
                st.session_state[LAST_UPLOAD_ID_KEY] = uploaded_file.file_id
                data = uploaded_file.getvalue()
                if describe_image(data) is None:
                    st.error("Only image files are allowed.")
                else:
                    StateManager.set_upload(data, uploaded_file.type, uploaded_file.name)

        with tab_camera:
            if st.button("📷 Open camera", use_container_width=True, disabled=bool(StateManager.is_generating.value)):
                CameraSession.reset()
                camera_dialog(on_capture=lambda data, mime: StateManager.set_upload(data, mime, "camera.jpg"))

        if image_preview(StateManager.uploaded_image.value, "input_photo", title="📷 Photo",
                         show_clear=True, show_info=True):
            StateManager.clear_upload()
            st.session_state[UPLOAD_NONCE_KEY] = st.session_state.get(UPLOAD_NONCE_KEY, 0) + 1
            st.session_state.pop(LAST_UPLOAD_ID_KEY, None)
            st.rerun()

    @staticmethod
    def _render_generate_button(controller: AppController, style: str, prompt: str) -> None:
        busy = bool(StateManager.is_generating.value)
        has_image = bool(StateManager.uploaded_image.value)
        has_model = bool(StateManager.mesh_data_uri.value)

        button_label = "🔄 Regenerate 3D Model" if has_model else "Generate 3D Model"
        if not st.button(button_label, type="primary", key="generate_model",
                         use_container_width=True, disabled=busy or not has_image):
            return

        st.button("Cancel", key="cancel_model", on_click=controller.cancel_request, args=(MODEL_REQUEST,),
                  use_container_width=True)
        progress = st.empty()
        StateManager.is_generating = True
        try:
            outcome = controller.generate_model(
                image=StateManager.uploaded_image.value,
                image_mime_type=StateManager.uploaded_image_type.value,
                style=style,
                prompt=prompt,
                progress_callback=lambda fraction, message: show_progress(fraction, message, progress)
            )
        finally:
            StateManager.is_generating = False
            progress.empty()

        if outcome.ok:
            st.toast("✅ 3D model complete!")
        else:
            notify_error(outcome.error, outcome.error_kind, inline=False)
        with StateManager.observe():
            StateManager.apply_model_outcome(outcome)
