"""
State manager for VisMesh UI.
Reactive observable pattern backed by Streamlit session state.

Usage:
    StateManager.mesh_data_uri = uri      # Stored in the current session
    uri = StateManager.mesh_data_uri.value
    with StateManager.observe(StateManager.mesh_data_uri):
        # Script re-runs when mesh_data_uri changes
        pass
"""

from contextlib import contextmanager
from typing import (
    Any, Callable, ClassVar, Generic, Iterator, List,
    MutableMapping, Optional, TypeVar
)

import streamlit as st

from library.models import ActionOutcome

T = TypeVar('T')


class Observable(Generic[T]):
    """Observable value stored under a key in a backing mapping."""

    def __init__(self, key: str, initial_value: Optional[T] = None) -> None:
        self.key: str = key
        self.initial_value: Optional[T] = initial_value
        self._backend: MutableMapping[str, Any] = {}
        self._observing: int = 0
        self._dirty: bool = False
        self._on_change: Optional[Callable[[], None]] = None

    def bind(self, backend: MutableMapping[str, Any], on_change: Optional[Callable[[], None]] = None) -> None:
        """Attach the observable to a backing mapping (e.g. session state)."""
        self._backend = backend
        self._on_change = on_change
        if self.key not in backend:
            backend[self.key] = self.initial_value

    @property
    def value(self) -> Optional[T]:
        return self._backend.get(self.key, self.initial_value)

    def set(self, value: Optional[T]) -> None:
        """Set the value; marks it dirty when it changed inside an observe() block."""
        if self.value != value and self._observing:
            self._dirty = True
        self._backend[self.key] = value

    def __bool__(self) -> bool:
        return bool(self.value)

    def __repr__(self) -> str:
        return f"Observable({self.key!r}, {self.value!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Observable):
            return self.value == other.value
        return self.value == other

    __hash__ = object.__hash__


Subscriptable = ClassVar[Observable[T]]


class StoreMeta(type):
    """Metaclass routing class attribute assignment to observables."""

    def __setattr__(cls, name: str, value: object) -> None:
        attr = cls.__dict__.get(name)
        if attr is None:
            for base in cls.__mro__[1:]:
                if name in base.__dict__:
                    attr = base.__dict__[name]
                    break
        if isinstance(attr, Observable):
            attr.set(value)
            return
        super().__setattr__(name, value)


class Store(metaclass=StoreMeta):
    """Base store with observable management and context observation."""

    @classmethod
    def observables(cls) -> List[Observable]:
        return [getattr(cls, name) for name in dir(cls) if isinstance(getattr(cls, name), Observable)]

    @classmethod
    def bind(cls, backend: MutableMapping[str, Any], on_change: Optional[Callable[[], None]] = None) -> None:
        for obs in cls.observables():
            obs.bind(backend, on_change)

    @classmethod
    @contextmanager
    def observe(cls, *observables: Observable) -> Iterator[None]:
        """
        Context manager that notifies once, on exit, if any of the given
        observables changed inside the block.
        """
        watched = observables or tuple(cls.observables())
        changed = False
        for obs in watched:
            obs._observing += 1
        try:
            yield
        finally:
            for obs in watched:
                obs._observing -= 1
                changed = changed or obs._dirty
                obs._dirty = False
        if changed and watched[0]._on_change is not None:
            watched[0]._on_change()


class StreamlitStore(Store):
    """Store bound to Streamlit session state; observed changes trigger a rerun."""

    @classmethod
    def initialize(cls) -> None:
        # st.session_state is a per-session proxy, so binding once per run is enough
        cls.bind(st.session_state, st.rerun)


class StateManager(StreamlitStore):
    """Manages Streamlit session state with type safety and observable pattern."""

    uploaded_image: Subscriptable[bytes] = Observable("uploaded_image")
    uploaded_image_type: Subscriptable[str] = Observable("uploaded_image_type")
    uploaded_image_name: Subscriptable[str] = Observable("uploaded_image_name")
    mesh_data_uri: Subscriptable[str] = Observable("mesh_data_uri")
    preview_image_uri: Subscriptable[str] = Observable("preview_image_uri")
    video_data_uri: Subscriptable[str] = Observable("video_data_uri")
    is_generating: Subscriptable[bool] = Observable("is_generating", False)
    is_animating: Subscriptable[bool] = Observable("is_animating", False)
    last_error: Subscriptable[str] = Observable("last_error")
    last_error_kind: Subscriptable[str] = Observable("last_error_kind")

    @classmethod
    def set_upload(cls, data: Optional[bytes], mime_type: Optional[str], name: Optional[str] = None) -> bool:
        """Store a new input photo; returns True if it differs from the current one."""
        if data == cls.uploaded_image.value and mime_type == cls.uploaded_image_type.value:
            return False
        cls.uploaded_image = data
        cls.uploaded_image_type = mime_type
        cls.uploaded_image_name = name
        cls.clear_generated_content()
        return True

    @classmethod
    def clear_upload(cls) -> None:
        cls.set_upload(None, None)

    @classmethod
    def clear_generated_content(cls) -> None:
        """Clear all generated content and the last error."""
        cls.mesh_data_uri = None
        cls.preview_image_uri = None
        cls.video_data_uri = None
        cls.clear_error()

    @classmethod
    def clear_error(cls) -> None:
        cls.last_error = None
        cls.last_error_kind = None

    @classmethod
    def apply_model_outcome(cls, outcome: ActionOutcome) -> None:
        """A failed generation clears the previous result."""
        if outcome.ok:
            cls.mesh_data_uri = outcome.result.mesh_data_uri
            cls.preview_image_uri = outcome.result.preview_image_uri
            cls.video_data_uri = outcome.result.video_data_uri
            cls.clear_error()
        else:
            cls.mesh_data_uri = None
            cls.preview_image_uri = None
            cls.video_data_uri = None
            cls.last_error = outcome.error
            cls.last_error_kind = outcome.error_kind

    @classmethod
    def apply_animation_outcome(cls, outcome: ActionOutcome) -> None:
        """A failed animation keeps the model and drops any stale video."""
        if outcome.ok:
            cls.mesh_data_uri = outcome.result.mesh_data_uri
            cls.preview_image_uri = outcome.result.preview_image_uri
            cls.video_data_uri = outcome.result.video_data_uri
            cls.clear_error()
        else:
            cls.video_data_uri = None
            cls.last_error = outcome.error
            cls.last_error_kind = outcome.error_kind
