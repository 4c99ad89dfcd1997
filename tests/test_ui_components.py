"""Tests for viewer markup and image helpers."""

import json

import pytest

from library import data_uri
from webui.image_preview import describe_image
from webui.ui_components import MODEL_VIEWER_SCRIPT, build_viewer_html, placeholder_card

from tests.conftest import SAMPLE_OBJ


def test_gltf_uses_model_viewer():
    uri = data_uri.encode(b"glTF....", "model/gltf-binary")
    html = build_viewer_html(uri)
    assert "<model-viewer" in html
    assert f'src="{uri}"' in html
    assert MODEL_VIEWER_SCRIPT in html


def test_obj_is_embedded_in_three_scene():
    html = build_viewer_html(data_uri.encode(SAMPLE_OBJ, "model/obj"))
    assert "OBJLoader" in html
    assert json.dumps(SAMPLE_OBJ.decode()) in html
    assert "__THREE__" not in html


def test_obj_text_cannot_close_the_script():
    html = build_viewer_html(data_uri.encode(b"v 0 0 0\n# </script><b>\nf 1 1 1\n", "model/obj"))
    assert "</script><b>" not in html


def test_unsupported_format():
    assert build_viewer_html(data_uri.encode(b"solid x", "model/stl")) is None


def test_describe_image(png_bytes):
    info = describe_image(png_bytes)
    assert (info.width, info.height, info.format) == (8, 6, "PNG")
    assert describe_image(b"not an image") is None
    assert describe_image(None) is None


@pytest.mark.parametrize("kind, size", [("photo", (64, 32)), ("video", (512, 288)), ("mesh", (512, 512))])
def test_placeholder_card(kind, size):
    card = placeholder_card(kind, "empty", size)
    assert card.size == size
    assert card.getpixel((size[0] // 2, 2)) == (232, 232, 232)
