"""
Test configuration and utilities.

Provides fake backends, sample payloads and a recorded sleep so the
generation pipeline can be exercised without network access.
"""

import os
from io import BytesIO
from typing import List, Optional

import pytest
from PIL import Image

from library import data_uri
from library.backends.base import GenerationBackend
from library.models import AsyncOperation, Capability, MediaPart

SAMPLE_OBJ = b"""# cube corner
v 0.0 0.0 0.0
v 1.0 0.0 0.0
v 0.0 1.0 0.0
f 1 2 3
"""


class FakeBackend(GenerationBackend):
    """Backend that replays a scripted sequence of operation states."""

    def __init__(self, states: List[Optional[AsyncOperation]],
                 capabilities=frozenset({Capability.MESH_ONLY}), supports_animation=False,
                 name="fake"):
        self.states = list(states)
        self.capabilities = frozenset(capabilities)
        self.supports_animation = supports_animation
        self.name = name
        self.submitted = []
        self.refresh_calls = 0

    def submit(self, prompt):
        self.submitted.append(prompt)
        return self.states.pop(0)

    def refresh(self, operation):
        self.refresh_calls += 1
        return self.states.pop(0)


class RecordingSleep:
    """Stand-in for time.sleep that records requested delays."""

    def __init__(self, on_sleep=None):
        self.calls = []
        self.on_sleep = on_sleep

    def __call__(self, seconds):
        self.calls.append(seconds)
        if self.on_sleep:
            self.on_sleep(len(self.calls))


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep the developer's own keys and VISMESH_* overrides out of settings."""
    for name in list(os.environ):
        if name.startswith("VISMESH_") or name in ("GEMINI_API_KEY", "GOOGLE_API_KEY"):
            monkeypatch.delenv(name)


@pytest.fixture
def png_bytes():
    """A small real PNG image."""
    buffer = BytesIO()
    Image.new("RGB", (8, 6), color="#336699").save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def jpeg_bytes():
    """A small real JPEG, as a phone photo would arrive."""
    buffer = BytesIO()
    Image.new("RGB", (16, 12), color="#aa7744").save(buffer, format="JPEG")
    return buffer.getvalue()


@pytest.fixture
def obj_uri():
    return data_uri.encode(SAMPLE_OBJ, "model/obj")


@pytest.fixture
def mesh_part(obj_uri):
    return MediaPart("model/obj", obj_uri)


@pytest.fixture
def video_uri():
    return data_uri.encode(b"\x00\x00\x00\x18ftypmp42", "video/mp4")


@pytest.fixture
def recorded_sleep():
    return RecordingSleep()
