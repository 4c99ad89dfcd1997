"""
Remote media download and re-encoding to data URIs.
"""

import logging
from typing import Optional

import httpx

from library import data_uri
from library.errors import DownloadError
from library.models import MediaPart

logger = logging.getLogger(__name__)

DEFAULT_DOWNLOAD_TIMEOUT = 120.0


class MediaFetcher:
    """Turns media parts into self-contained data URIs."""

    def __init__(self, api_key: Optional[str], timeout: float = DEFAULT_DOWNLOAD_TIMEOUT,
                 client: Optional[httpx.Client] = None):
        self.api_key = api_key
        self.timeout = timeout
        self._client = client

    def _get_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(timeout=self.timeout, follow_redirects=True)
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def materialize(self, part: MediaPart) -> str:
        """
        Return the part's content as a data URI.

        Inline parts are returned unchanged. Remote parts are downloaded once,
        with the API key appended as the `key` query parameter.

        Raises:
            DownloadError: Non-2xx status, empty body or transport failure
        """
        if data_uri.is_data_uri(part.url):
            return part.url

        params = {"key": self.api_key} if self.api_key else None
        logger.info(f"Downloading {part.content_type or 'media'} part")

        try:
            response = self._get_client().get(part.url, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Download failed: {type(e).__name__}")
            raise DownloadError(f"Failed to download the generated media: {e}", url=part.url) from e

        if not response.is_success:
            logger.error(f"Download failed with status {response.status_code}")
            raise DownloadError(
                f"Failed to download the generated media: HTTP {response.status_code}",
                url=part.url,
                status_code=response.status_code,
            )

        content = response.content
        if not content:
            raise DownloadError("The generated media download was empty.", url=part.url,
                                status_code=response.status_code)

        mime_type = part.content_type
        if not mime_type:
            header = response.headers.get("content-type", "")
            mime_type = header.split(";", 1)[0].strip() or data_uri.DEFAULT_MIME_TYPE

        logger.info(f"Downloaded {len(content)} bytes ({mime_type})")
        return data_uri.encode(content, mime_type)
