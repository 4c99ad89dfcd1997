"""
Controllers for VisMesh.
Handles business logic coordination without touching UI state.
"""

from .app_controller import AppController
from .request_controller import ANIMATION_REQUEST, MODEL_REQUEST, RequestController
from .generation_controller import GenerationController

__all__ = ['AppController', 'RequestController', 'GenerationController',
           'MODEL_REQUEST', 'ANIMATION_REQUEST']
