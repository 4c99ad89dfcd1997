"""Tests for the generation flow with scripted backends and a mock transport."""

import httpx
import pytest

from library import data_uri
from library.errors import (
    InputValidationError, InvalidMeshError, MissingOperationError, MissingPartError, OperationError
)
from library.generation_flow import GenerationFlow, wanted_kinds
from library.media_fetcher import MediaFetcher
from library.models import AnimationStyle, AsyncOperation, Capability, MediaKind, MediaPart
from library.prompt_builder import DEFAULT_MODEL_PROMPT
from library.requests import validate_animation_request, validate_model_request

from tests.conftest import FakeBackend, SAMPLE_OBJ


def offline_fetcher(downloads=None):
    """Fetcher whose transport serves the given url -> bytes mapping."""
    served = {}
    for url, content in (downloads or {}).items():
        parsed = httpx.URL(url)
        served[(parsed.host, parsed.path)] = content

    def handler(request):
        assert request.url.params["key"] == "test-key"
        content = served.get((request.url.host, request.url.path))
        if content is None:
            return httpx.Response(404)
        return httpx.Response(200, content=content)

    return MediaFetcher("test-key", client=httpx.Client(transport=httpx.MockTransport(handler)))


def flow_for(model_backend, animation_backend=None, fetcher=None, recorded_sleep=None, **kwargs):
    return GenerationFlow(
        model_backend,
        animation_backend or FakeBackend([], supports_animation=True),
        fetcher or offline_fetcher(),
        sleep=recorded_sleep or (lambda seconds: None),
        **kwargs,
    )


def done(*parts, error=None):
    return AsyncOperation(name="op-1", done=True, error=error, parts=list(parts))


class TestWantedKinds:

    @pytest.mark.parametrize("capability, kinds", [
        (Capability.MESH_ONLY, [MediaKind.MESH]),
        (Capability.PREVIEW_IMAGE, [MediaKind.MESH, MediaKind.PREVIEW_IMAGE]),
        (Capability.PREVIEW_VIDEO, [MediaKind.MESH, MediaKind.VIDEO]),
    ])
    def test_kinds_follow_capability(self, capability, kinds):
        assert wanted_kinds({capability}) == kinds


class TestGenerateModel:

    def test_photo_to_obj_mesh(self, png_bytes, mesh_part):
        backend = FakeBackend([done(MediaPart("text/plain", "data:,note"), mesh_part)])
        request = validate_model_request(png_bytes, "image/png", "low-poly")

        result = flow_for(backend).generate_model(request)

        assert result.mesh_data_uri.startswith("data:model/obj;base64,")
        assert data_uri.decode(result.mesh_data_uri).data == SAMPLE_OBJ
        assert result.preview_image_uri is None
        assert result.video_data_uri is None

        prompt = backend.submitted[0]
        assert '"low-poly"' in prompt.text
        assert prompt.attachments[0].content_type == "image/png"
        assert data_uri.decode(prompt.attachments[0].url).data == png_bytes

    def test_jpeg_photo_with_empty_prompt(self, jpeg_bytes, mesh_part):
        backend = FakeBackend([done(mesh_part)])
        request = validate_model_request(jpeg_bytes, "image/jpeg", "low-poly", "")

        result = flow_for(backend).generate_model(request)

        assert result.mesh_data_uri.startswith("data:model/obj;base64,")
        assert len(data_uri.decode(result.mesh_data_uri).data) > 0
        prompt = backend.submitted[0]
        assert DEFAULT_MODEL_PROMPT in prompt.text
        assert '"low-poly"' in prompt.text
        assert prompt.attachments[0].content_type == "image/jpeg"

    def test_unknown_style_never_reaches_the_backend(self, png_bytes):
        backend = FakeBackend([])
        with pytest.raises(InputValidationError):
            flow_for(backend).generate_model(validate_model_request(png_bytes, "image/png", "claymation"))
        assert backend.submitted == []

    def test_remote_preview_image_is_downloaded(self, png_bytes, mesh_part):
        backend = FakeBackend(
            [done(mesh_part, MediaPart("image/png", "https://media.example/preview.png"))],
            capabilities={Capability.PREVIEW_IMAGE},
        )
        fetcher = offline_fetcher({"https://media.example/preview.png": png_bytes})

        result = flow_for(backend, fetcher=fetcher).generate_model(
            validate_model_request(png_bytes, "image/png", "realistic")
        )

        assert data_uri.decode(result.preview_image_uri) == ("image/png", png_bytes)
        assert result.video_data_uri is None

    def test_video_preview_polls_until_done(self, png_bytes, mesh_part, video_uri, recorded_sleep):
        pending = AsyncOperation(name="op-1", done=False)
        backend = FakeBackend(
            [pending, pending, done(mesh_part, MediaPart("video/mp4", video_uri))],
            capabilities={Capability.PREVIEW_VIDEO},
        )
        progress = []

        result = flow_for(backend, recorded_sleep=recorded_sleep).generate_model(
            validate_model_request(png_bytes, "image/png", "cartoonish"),
            progress_callback=lambda fraction, message: progress.append(fraction),
        )

        assert result.video_data_uri == video_uri
        assert backend.refresh_calls == 2
        assert recorded_sleep.calls == [5.0, 5.0]
        assert backend.submitted[0].duration_seconds == 5
        assert progress[-1] == 1.0
        assert progress == sorted(progress)

    def test_no_operation(self, png_bytes):
        with pytest.raises(MissingOperationError) as exc:
            flow_for(FakeBackend([None])).generate_model(validate_model_request(png_bytes, "image/png", "realistic"))
        assert exc.value.message == "Expected the model to return an operation."

    def test_operation_error(self, png_bytes):
        backend = FakeBackend([done(error="model overloaded")])
        with pytest.raises(OperationError, match="model overloaded"):
            flow_for(backend).generate_model(validate_model_request(png_bytes, "image/png", "realistic"))

    def test_missing_preview_part(self, png_bytes, mesh_part):
        backend = FakeBackend([done(mesh_part)], capabilities={Capability.PREVIEW_IMAGE})
        with pytest.raises(MissingPartError) as exc:
            flow_for(backend).generate_model(validate_model_request(png_bytes, "image/png", "realistic"))
        assert exc.value.media_kind == "preview-image"

    def test_invalid_mesh_is_rejected(self, png_bytes):
        broken = MediaPart("model/obj", data_uri.encode(b"no geometry here", "model/obj"))
        with pytest.raises(InvalidMeshError):
            flow_for(FakeBackend([done(broken)])).generate_model(
                validate_model_request(png_bytes, "image/png", "realistic")
            )

    def test_validation_can_be_disabled(self, png_bytes):
        broken = MediaPart("model/obj", data_uri.encode(b"no geometry here", "model/obj"))
        result = flow_for(FakeBackend([done(broken)]), validate_meshes=False).generate_model(
            validate_model_request(png_bytes, "image/png", "realistic")
        )
        assert result.mesh_data_uri == broken.url


class TestGenerateAnimation:

    def test_mesh_and_preview_pass_through(self, obj_uri, png_bytes, video_uri):
        preview = data_uri.encode(png_bytes, "image/png")
        animator = FakeBackend([done(MediaPart("video/mp4", video_uri))], supports_animation=True)
        request = validate_animation_request(obj_uri, AnimationStyle.BOUNCE, preview_image_uri=preview)

        result = flow_for(FakeBackend([]), animation_backend=animator).generate_animation(request)

        assert result.mesh_data_uri == obj_uri
        assert result.preview_image_uri == preview
        assert result.video_data_uri == video_uri

        prompt = animator.submitted[0]
        assert prompt.text.startswith("Create a playful bouncing animation")
        assert [a.url for a in prompt.attachments] == [preview, obj_uri]

    def test_source_photo_conditions_when_no_preview(self, obj_uri, png_bytes, video_uri):
        photo = data_uri.encode(png_bytes, "image/png")
        animator = FakeBackend([done(MediaPart("video/mp4", video_uri))], supports_animation=True)
        request = validate_animation_request(obj_uri, AnimationStyle.TURNTABLE, source_image_uri=photo)

        result = flow_for(FakeBackend([]), animation_backend=animator).generate_animation(request)

        assert result.preview_image_uri is None
        assert animator.submitted[0].attachments[0].url == photo

    def test_remote_video_is_downloaded(self, obj_uri):
        animator = FakeBackend(
            [done(MediaPart("video/mp4", "https://media.example/files/v:download"))],
            supports_animation=True,
        )
        fetcher = offline_fetcher({"https://media.example/files/v:download": b"mp4-bytes"})

        result = flow_for(FakeBackend([]), animation_backend=animator, fetcher=fetcher).generate_animation(
            validate_animation_request(obj_uri, AnimationStyle.CRUMBLE)
        )

        assert data_uri.decode(result.video_data_uri) == ("video/mp4", b"mp4-bytes")

    def test_missing_video(self, obj_uri, png_bytes):
        animator = FakeBackend([done(MediaPart("image/png", data_uri.encode(png_bytes, "image/png")))],
                               supports_animation=True)
        with pytest.raises(MissingPartError) as exc:
            flow_for(FakeBackend([]), animation_backend=animator).generate_animation(
                validate_animation_request(obj_uri, AnimationStyle.TURNTABLE)
            )
        assert exc.value.media_kind == "video"
