"""UI components for VisMesh."""

import json
import logging
from typing import Optional, Tuple

import streamlit as st
import streamlit.components.v1 as components
from PIL import Image, ImageDraw

from library import data_uri
from library.errors import ErrorKind

logger = logging.getLogger(__name__)

MODEL_VIEWER_SCRIPT = "https://unpkg.com/@google/model-viewer/dist/model-viewer.min.js"
THREE_VERSION = "0.160.0"

_GLTF_TEMPLATE = """
<div style="width: 100%; height: 480px; border-radius: 10px; overflow: hidden;">
    <model-viewer src="__SRC__"
                 camera-controls
                 auto-rotate
                 shadow-intensity="1"
                 style="width: 100%; height: 100%; background-color: #f0f0f0;">
    </model-viewer>
    <script type="module" src="__SCRIPT__"></script>
</div>
"""

_OBJ_TEMPLATE = """
<div id="viewer" style="width: 100%; height: 480px; border-radius: 10px; overflow: hidden; background: #f0f0f0;"></div>
<script type="importmap">
{"imports": {"three": "https://unpkg.com/three@__THREE__/build/three.module.js",
             "three/addons/": "https://unpkg.com/three@__THREE__/examples/jsm/"}}
</script>
<script type="module">
import * as THREE from 'three';
import { OBJLoader } from 'three/addons/loaders/OBJLoader.js';
import { OrbitControls } from 'three/addons/controls/OrbitControls.js';

const container = document.getElementById('viewer');
const scene = new THREE.Scene();
scene.background = new THREE.Color(0xf0f0f0);
const camera = new THREE.PerspectiveCamera(45, container.clientWidth / container.clientHeight, 0.01, 1000);
const renderer = new THREE.WebGLRenderer({ antialias: true });
renderer.setSize(container.clientWidth, container.clientHeight);
container.appendChild(renderer.domElement);

scene.add(new THREE.HemisphereLight(0xffffff, 0x444444, 2.0));
const light = new THREE.DirectionalLight(0xffffff, 1.5);
light.position.set(3, 5, 4);
scene.add(light);

const object = new OBJLoader().parse(__OBJ_TEXT__);
object.traverse((child) => {
    if (child.isMesh) {
        child.material = new THREE.MeshStandardMaterial({ color: 0x9aa7c7, flatShading: true });
    }
});
const box = new THREE.Box3().setFromObject(object);
const size = box.getSize(new THREE.Vector3()).length() || 1;
object.position.sub(box.getCenter(new THREE.Vector3()));
scene.add(object);
camera.position.set(0, size * 0.4, size * 1.2);

const controls = new OrbitControls(camera, renderer.domElement);
controls.autoRotate = true;
controls.enableDamping = true;
(function animate() {
    requestAnimationFrame(animate);
    controls.update();
    renderer.render(scene, camera);
})();
</script>
"""


PLACEHOLDER_BACKGROUND = '#E8E8E8'
PLACEHOLDER_INK = '#999999'


def _draw_photo_glyph(draw, cx, cy, r):
    # Sun over a hill
    draw.ellipse([(cx + r // 3, cy - r), (cx + r, cy - r // 3)], outline=PLACEHOLDER_INK, width=3)
    draw.line([(cx - r, cy + r), (cx - r // 4, cy), (cx + r // 4, cy + r // 2), (cx + r, cy + r)],
              fill=PLACEHOLDER_INK, width=3)


def _draw_video_glyph(draw, cx, cy, r):
    draw.polygon([(cx - r // 2, cy - r), (cx - r // 2, cy + r), (cx + r, cy)], outline=PLACEHOLDER_INK, width=3)


def _draw_mesh_glyph(draw, cx, cy, r):
    # Wireframe cube: front square, back square, connecting edges
    d = r // 2
    front = [(cx - r, cy - r + d), (cx + r - d, cy - r + d), (cx + r - d, cy + r), (cx - r, cy + r)]
    back = [(x + d, y - d) for x, y in front]
    draw.polygon(front, outline=PLACEHOLDER_INK, width=3)
    draw.polygon(back, outline=PLACEHOLDER_INK, width=2)
    for a, b in zip(front, back):
        draw.line([a, b], fill=PLACEHOLDER_INK, width=2)


_GLYPHS = {
    "photo": _draw_photo_glyph,
    "video": _draw_video_glyph,
    "mesh": _draw_mesh_glyph,
}


def placeholder_card(kind: str, text: str, size: Tuple[int, int] = (512, 512)) -> Image.Image:
    """Grey card with a line glyph for the empty photo, video or mesh slot."""
    width, height = size
    img = Image.new('RGB', size, color=PLACEHOLDER_BACKGROUND)
    draw = ImageDraw.Draw(img)
    draw.rounded_rectangle([(8, 8), (width - 8, height - 8)], radius=12, outline='#CCCCCC', width=2)

    radius = max(min(width, height) // 8, 4)
    cx, cy = width // 2, height // 2 - radius // 2
    _GLYPHS[kind](draw, cx, cy, radius)
    draw.text((cx, cy + radius + 16), text, fill=PLACEHOLDER_INK, anchor='mt')
    return img


def build_viewer_html(mesh_data_uri: str) -> Optional[str]:
    """
    Build the embedded viewer markup for a mesh data URI.

    glTF (binary or JSON) goes to <model-viewer>, OBJ to a three.js scene.
    Returns None for formats neither viewer can show.
    """
    mime_type = data_uri.mime_type_of(mesh_data_uri)
    if mime_type.startswith("model/gltf"):
        return _GLTF_TEMPLATE.replace("__SRC__", mesh_data_uri).replace("__SCRIPT__", MODEL_VIEWER_SCRIPT)
    if mime_type == "model/obj":
        text = data_uri.decode(mesh_data_uri).data.decode("utf-8", errors="replace")
        literal = json.dumps(text).replace("</", "<\\/")
        return _OBJ_TEMPLATE.replace("__THREE__", THREE_VERSION).replace("__OBJ_TEXT__", literal)
    return None


def show_progress(fraction: float, text: str, placeholder=None):
    """Show or update a progress bar."""
    target = placeholder if placeholder is not None else st
    return target.progress(max(0.0, min(fraction, 1.0)), text=text)


def show_video_preview(video_data_uri: Optional[str], title: str = "### 🎬 Animation",
                       show_progress_bar: bool = False, progress_text: Optional[str] = None) -> None:
    """Display a looping video, or a placeholder."""
    st.markdown(title)
    if video_data_uri:
        video = data_uri.decode(video_data_uri)
        st.video(video.data, format=video.mime_type, loop=True, autoplay=True)
    else:
        st.image(placeholder_card("video", "No video yet", (512, 288)), use_container_width=True)
        if show_progress_bar and progress_text:
            st.progress(0.5, text=progress_text)


def show_3d_model_viewer(mesh_data_uri: Optional[str], show_progress_bar: bool = False,
                         progress_text: Optional[str] = None) -> None:
    """Display interactive 3D model viewer."""
    st.markdown("### 🎯 Interactive 3D Viewer")

    if not mesh_data_uri:
        st.image(placeholder_card("mesh", "Your 3D model will appear here"), use_container_width=True)
        if show_progress_bar and progress_text:
            st.progress(0.5, text=progress_text)
        return

    try:
        html = build_viewer_html(mesh_data_uri)
    except (data_uri.DataUriError, UnicodeDecodeError) as e:
        logger.warning(f"Could not build 3D viewer: {e}")
        html = None

    if html is None:
        st.warning("3D viewer not available. Download the model to view it in external 3D software.")
        return

    components.html(html, height=500)
    st.caption("🖱️ Click and drag to rotate • Scroll to zoom • Right-click and drag to pan")


def download_data_uri_button(uri: str, label: str, key: str, stem: str = "vismesh",
                             primary: bool = False) -> bool:
    """Offer a data URI as a file download named after its MIME type."""
    decoded = data_uri.decode(uri)
    return st.download_button(
        label=label,
        data=decoded.data,
        file_name=data_uri.download_filename(uri, stem=stem),
        mime=decoded.mime_type,
        type="primary" if primary else "secondary",
        key=key,
        use_container_width=True
    )


def notify_error(message: str, kind: Optional[str] = None, inline: bool = True) -> None:
    """Show a failure inline, or as a toast when inline is False. Cancellations show as info."""
    if kind == ErrorKind.CANCELLED.value:
        if inline:
            st.info(message)
        return
    if not inline:
        st.toast(f"Generation Error: {message}", icon="🚨")
        return
    st.error(f"❌ {message}")
