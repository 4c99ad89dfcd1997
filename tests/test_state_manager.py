"""Tests for the observable session store."""

import pytest

from library.models import ActionOutcome, GenerationResult
from webui.state_manager import Observable, Store, StateManager


@pytest.fixture
def session():
    """Bind StateManager to a plain dict standing in for session state."""
    state = {}
    reruns = []
    StateManager.bind(state, lambda: reruns.append(True))
    return state, reruns


def result(mesh="data:model/obj;base64,dg==", preview=None, video=None):
    return GenerationResult(mesh_data_uri=mesh, preview_image_uri=preview, video_data_uri=video)


class TestObservable:

    def test_assignment_goes_to_the_backing_state(self, session):
        state, _ = session
        StateManager.mesh_data_uri = "data:model/obj,x"
        assert state["mesh_data_uri"] == "data:model/obj,x"
        assert StateManager.mesh_data_uri.value == "data:model/obj,x"
        assert isinstance(StateManager.__dict__["mesh_data_uri"], Observable)

    def test_initial_values(self, session):
        state, _ = session
        assert state["is_generating"] is False
        assert StateManager.mesh_data_uri.value is None
        assert state["is_animating"] is False

    def test_change_notifies_only_while_observed(self, session):
        _, reruns = session
        StateManager.last_error = "first"
        assert reruns == []

        with StateManager.observe(StateManager.last_error):
            StateManager.last_error = "first"
            assert reruns == []
            StateManager.last_error = "second"
        assert reruns == [True]

    def test_separate_sessions_do_not_share_values(self):
        class Demo(Store):
            value = Observable("value", 0)

        first, second = {}, {}
        Demo.bind(first)
        Demo.value = 1
        Demo.bind(second)
        assert Demo.value.value == 0
        Demo.value = 2
        assert first["value"] == 1
        assert second["value"] == 2

    def test_observed_block_notifies_once_on_exit(self, session):
        _, reruns = session
        with StateManager.observe():
            StateManager.apply_model_outcome(ActionOutcome(result=result(preview="data:image/png,p")))
            assert reruns == []
        assert reruns == [True]

    def test_unchanged_block_does_not_notify(self, session):
        _, reruns = session
        with StateManager.observe():
            StateManager.apply_model_outcome(ActionOutcome(error="Generation failed: x", error_kind="timeout"))
        reruns.clear()
        with StateManager.observe():
            StateManager.apply_model_outcome(ActionOutcome(error="Generation failed: x", error_kind="timeout"))
        assert reruns == []

    def test_failed_block_does_not_notify(self, session):
        _, reruns = session
        with pytest.raises(RuntimeError):
            with StateManager.observe(StateManager.last_error):
                StateManager.last_error = "half-applied"
                raise RuntimeError("boom")
        assert reruns == []
        with StateManager.observe(StateManager.last_error):
            pass
        assert reruns == []


class TestStateManager:

    def test_new_upload_clears_results(self, session):
        StateManager.mesh_data_uri = "data:model/obj,x"
        StateManager.last_error = "old"

        assert StateManager.set_upload(b"img", "image/png", "mug.png") is True

        assert StateManager.uploaded_image.value == b"img"
        assert StateManager.uploaded_image_name.value == "mug.png"
        assert StateManager.mesh_data_uri.value is None
        assert StateManager.last_error.value is None

    def test_same_upload_is_ignored(self, session):
        StateManager.set_upload(b"img", "image/png")
        StateManager.mesh_data_uri = "data:model/obj,x"
        assert StateManager.set_upload(b"img", "image/png") is False
        assert StateManager.mesh_data_uri.value == "data:model/obj,x"

    def test_model_success(self, session):
        StateManager.last_error = "old"
        StateManager.apply_model_outcome(ActionOutcome(result=result(preview="data:image/png,p")))
        assert StateManager.mesh_data_uri.value == "data:model/obj;base64,dg=="
        assert StateManager.preview_image_uri.value == "data:image/png,p"
        assert StateManager.last_error.value is None

    def test_model_failure_clears_previous_result(self, session):
        StateManager.apply_model_outcome(ActionOutcome(result=result(video="data:video/mp4,v")))
        StateManager.apply_model_outcome(ActionOutcome(error="Generation failed: boom", error_kind="operation-error"))
        assert StateManager.mesh_data_uri.value is None
        assert StateManager.video_data_uri.value is None
        assert StateManager.last_error.value == "Generation failed: boom"
        assert StateManager.last_error_kind.value == "operation-error"

    def test_animation_failure_keeps_model(self, session):
        StateManager.apply_model_outcome(ActionOutcome(result=result(video="data:video/mp4,old")))
        StateManager.apply_animation_outcome(ActionOutcome(error="Animation failed: x", error_kind="timeout"))
        assert StateManager.mesh_data_uri.value == "data:model/obj;base64,dg=="
        assert StateManager.video_data_uri.value is None
        assert StateManager.last_error_kind.value == "timeout"

    def test_animation_success(self, session):
        StateManager.apply_animation_outcome(ActionOutcome(result=result(video="data:video/mp4,new")))
        assert StateManager.video_data_uri.value == "data:video/mp4,new"
