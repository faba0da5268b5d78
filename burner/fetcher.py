"""
Source Video Fetcher

Downloads the source video for a job over HTTP(S), streaming it to disk.
"""

import logging
from pathlib import Path
from typing import Optional

import httpx

from burner.errors import SourceFetchError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


class SourceFetcher:
    """
    Streams a remote video into a local file.

    A non-success response or any transport failure raises
    SourceFetchError; no retries are attempted.
    """

    def __init__(self, timeout: Optional[float] = 300.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize fetcher.

        Args:
            timeout: Overall request timeout in seconds (None for unbounded)
            transport: Optional httpx transport (tests inject httpx.MockTransport)
        """
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            follow_redirects=True,
            transport=self.transport,
        )

    async def fetch(self, url: str, dest: Path) -> int:
        """
        Download url into dest.

        Args:
            url: Source URL
            dest: Destination file path

        Returns:
            Number of bytes written

        Raises:
            SourceFetchError: On non-2xx responses, timeouts or transport errors
        """
        written = 0
        try:
            async with self._client() as client:
                async with client.stream("GET", url) as response:
                    if not response.is_success:
                        raise SourceFetchError(
                            f"Failed to download video: {response.status_code} {response.reason_phrase}",
                            url=url,
                            status_code=response.status_code,
                        )
                    with open(dest, "wb") as f:
                        async for chunk in response.aiter_bytes(CHUNK_SIZE):
                            f.write(chunk)
                            written += len(chunk)
        except httpx.TimeoutException as e:
            raise SourceFetchError(f"Failed to download video: timed out ({e})", url=url) from e
        except httpx.HTTPError as e:
            reason = str(e) or type(e).__name__
            raise SourceFetchError(f"Failed to download video: {reason}", url=url) from e

        if written == 0:
            raise SourceFetchError("Failed to download video: empty response body", url=url)

        logger.info(
            f"Downloaded {written} bytes from {url}",
            extra={"metadata": {"url": url, "bytes": written, "path": str(dest)}},
        )
        return written
