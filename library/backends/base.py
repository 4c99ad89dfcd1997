"""
Common interface for generation backends.
"""

from abc import ABC, abstractmethod
from typing import FrozenSet, Optional

from library.models import AsyncOperation, Capability, GenerationPrompt


class GenerationBackend(ABC):
    """A remote model that turns a prompt into an operation with media parts."""

    name: str = "backend"
    capabilities: FrozenSet[Capability] = frozenset({Capability.MESH_ONLY})
    supports_animation: bool = False
    produces_mesh: bool = True

    @abstractmethod
    def submit(self, prompt: GenerationPrompt) -> Optional[AsyncOperation]:
        """Start a job; None means the service returned no operation."""

    @abstractmethod
    def refresh(self, operation: AsyncOperation) -> AsyncOperation:
        """Fetch the current state of a running job."""
