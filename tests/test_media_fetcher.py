"""Tests for remote media download and re-encoding."""

import httpx
import pytest

from library import data_uri
from library.errors import DownloadError, ErrorKind
from library.media_fetcher import MediaFetcher
from library.models import MediaPart


def fetcher_for(handler, api_key="secret-key"):
    return MediaFetcher(api_key, timeout=5.0, client=httpx.Client(transport=httpx.MockTransport(handler)))


class TestMediaFetcher:

    def test_inline_part_returned_unchanged(self):
        def handler(request):
            raise AssertionError("no request expected")

        uri = data_uri.encode(b"mesh", "model/obj")
        assert fetcher_for(handler).materialize(MediaPart("model/obj", uri)) == uri

    def test_downloads_with_key_and_reencodes(self):
        seen = []

        def handler(request):
            seen.append(request.url)
            return httpx.Response(200, content=b"video-bytes", headers={"content-type": "application/octet-stream"})

        result = fetcher_for(handler).materialize(MediaPart("video/mp4", "https://media.example/v1/files/abc:download?alt=media"))

        assert seen[0].params["key"] == "secret-key"
        assert seen[0].params["alt"] == "media"
        decoded = data_uri.decode(result)
        assert decoded.mime_type == "video/mp4"
        assert decoded.data == b"video-bytes"

    def test_falls_back_to_response_content_type(self):
        def handler(request):
            return httpx.Response(200, content=b"png", headers={"content-type": "image/png; charset=binary"})

        result = fetcher_for(handler).materialize(MediaPart("", "https://media.example/p"))
        assert data_uri.mime_type_of(result) == "image/png"

    def test_falls_back_to_octet_stream(self):
        def handler(request):
            return httpx.Response(200, content=b"raw")

        result = fetcher_for(handler).materialize(MediaPart("", "https://media.example/p"))
        assert data_uri.mime_type_of(result) == "application/octet-stream"

    def test_non_success_status_raises(self):
        def handler(request):
            return httpx.Response(403, content=b"denied")

        with pytest.raises(DownloadError) as exc:
            fetcher_for(handler).materialize(MediaPart("video/mp4", "https://media.example/v"))
        assert exc.value.status_code == 403
        assert exc.value.kind is ErrorKind.DOWNLOAD_ERROR

    def test_empty_body_raises(self):
        def handler(request):
            return httpx.Response(200, content=b"")

        with pytest.raises(DownloadError):
            fetcher_for(handler).materialize(MediaPart("video/mp4", "https://media.example/v"))

    def test_transport_failure_raises(self):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        with pytest.raises(DownloadError) as exc:
            fetcher_for(handler).materialize(MediaPart("video/mp4", "https://media.example/v"))
        assert exc.value.status_code is None

    def test_not_found_is_not_retried(self):
        seen = []

        def handler(request):
            seen.append(request.url)
            return httpx.Response(404, content=b"gone")

        with pytest.raises(DownloadError) as exc:
            fetcher_for(handler).materialize(MediaPart("video/mp4", "https://media.example/files/v:download"))
        assert exc.value.status_code == 404
        assert exc.value.kind is ErrorKind.DOWNLOAD_ERROR
        assert len(seen) == 1
