"""VisMesh Web UI Components"""

from .image_preview import image_preview
from .ui_components import show_video_preview, show_3d_model_viewer
from .state_manager import StateManager
from .camera_capture import CameraSession
from .control_panel import ControlPanel
from .preview_panel import PreviewPanel
from .app_ui import VisMeshApp
