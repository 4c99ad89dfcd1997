"""
Main application UI for VisMesh.
Orchestrates the UI components and manages application flow.
"""

import streamlit as st

from webui.controllers import AppController
from webui.state_manager import StateManager
from webui.control_panel import ControlPanel
from webui.preview_panel import PreviewPanel


class VisMeshApp:
    """Main application UI orchestrator."""

    def __init__(self, controller: AppController):
        """Initialize the VisMesh application UI."""
        self.controller = controller
        self._configure_page()

    @staticmethod
    def _configure_page() -> None:
        """Configure Streamlit page settings and styles."""
        st.set_page_config(
            page_title="VisMesh",
            page_icon="🧊",
            layout="wide",
            initial_sidebar_state="collapsed"
        )

        # Tight top padding; viewer iframes and videos get the same rounded frame
        st.markdown("""
            <style>
            .block-container { padding-top: 1.5rem !important; max-width: 100%; }
            header { background-color: transparent !important; }
            iframe, video { border-radius: 10px; }
            div[data-testid="stForm"] { border-radius: 10px; }
            </style>
        """, unsafe_allow_html=True)

    def _render_header(self) -> None:
        st.title("VisMesh")
        st.markdown("""
        * **Photo to 3D**: Upload or capture a photo and pick a style to generate a 3D mesh
        * **Animate**: Turn the generated mesh into a short animation video
        * Every result can be downloaded as a file
        """)

        warning = self.controller.check_credentials()
        if warning:
            st.warning(warning)

    def run(self) -> None:
        """Run the main application."""
        StateManager.initialize()

        self._render_header()

        col_controls, col_preview = st.columns([1, 2])

        with col_controls:
            ControlPanel.render(self.controller)

        with col_preview:
            PreviewPanel.render(self.controller)
