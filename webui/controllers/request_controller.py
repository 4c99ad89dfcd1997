"""
Request lifecycle controller for VisMesh.
Tracks in-flight requests per action so each can be cancelled on its own.
"""

import logging
import threading
from typing import Dict, Optional

from library.operation_poller import CancellationToken

logger = logging.getLogger(__name__)

MODEL_REQUEST = "model"
ANIMATION_REQUEST = "animation"


class RequestController:
    """
    Owns one cancellation token per action.

    Requests for different actions are independent: a model request and an
    animation request may be in flight at the same time, and cancelling one
    never touches the other. Starting a request for an action that already has
    one in flight supersedes (cancels) only that earlier request.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._active: Dict[str, CancellationToken] = {}

    def is_active(self, action: Optional[str] = None) -> bool:
        with self._lock:
            if action is None:
                return bool(self._active)
            return action in self._active

    def begin(self, action: str) -> CancellationToken:
        """
        Start tracking a new request for `action`.

        Returns:
            Token for the new request
        """
        token = CancellationToken()
        with self._lock:
            previous = self._active.get(action)
            self._active[action] = token
        if previous is not None:
            logger.info(f"Superseding the previous {action} request")
            previous.cancel()
        return token

    def cancel(self, action: str) -> bool:
        """Cancel the in-flight request for `action`, if any."""
        with self._lock:
            token = self._active.pop(action, None)
        if token is None:
            return False
        logger.info(f"{action.capitalize()} request cancelled by user")
        token.cancel()
        return True

    def end(self, action: str, token: CancellationToken) -> None:
        """Stop tracking a finished request."""
        with self._lock:
            if self._active.get(action) is token:
                del self._active[action]
