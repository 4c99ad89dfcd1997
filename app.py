"""
VisMesh - Main Application Entry Point
Clean layered architecture with separation of concerns.
"""

import streamlit as st
from pydantic import ValidationError

# Application components
from library.settings import AppSettings, setup_logging
from webui.controllers import AppController
from webui.app_ui import VisMeshApp

CONTROLLER_KEY = "_vismesh_controller"


def get_controller(settings: AppSettings) -> AppController:
    """One controller per browser session, so its in-flight request can be cancelled."""
    if CONTROLLER_KEY not in st.session_state:
        st.session_state[CONTROLLER_KEY] = AppController(settings)
    return st.session_state[CONTROLLER_KEY]


def main():
    """Main application entry point."""
    try:
        settings = AppSettings()
    except ValidationError as e:
        st.error(f"Invalid configuration: {e}")
        return
    setup_logging(settings.log_level)

    controller = get_controller(settings)

    # Create and run the UI
    app = VisMeshApp(controller)
    app.run()


if __name__ == "__main__":
    main()
