"""Downloads stored document blobs for the document chat."""

import logging

import httpx

from ..exceptions import ExternalServiceError, ServiceFailure

logger = logging.getLogger(__name__)


class BlobFetcher:
    """GETs a blob by URL. One short-lived client per fetch, safe across threads."""

    def __init__(self, timeout: float = 20.0, max_bytes: int = 50 * 1024 * 1024):
        self.timeout = timeout
        self.max_bytes = max_bytes

    def fetch(self, url: str) -> bytes:
        try:
            with httpx.Client(timeout=self.timeout, follow_redirects=True) as client:
                response = client.get(url)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ExternalServiceError(
                "storage", f"Blob download returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise ExternalServiceError(
                "storage", "Could not download blob", category=ServiceFailure.UNREACHABLE
            ) from e

        if len(response.content) > self.max_bytes:
            raise ExternalServiceError("storage", "Blob exceeds the download size limit")
        return response.content
