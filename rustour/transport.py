"""HTTP transport for the RusTour API."""

import json
import httpx
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .config import TransportConfig

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """Network-level failure: no HTTP response was received."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class ResponseDecodeError(Exception):
    """A response arrived but its body could not be decoded (e.g. bad gzip)."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


@dataclass
class TransportResponse:
    """Raw HTTP response, uninterpreted."""
    status_code: int
    body: bytes = b""
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


class HttpTransport:
    """
    Issues HTTP requests and hands back raw responses.

    Any status code is a response; only DNS, connection, timeout and
    protocol failures become a TransportError. There are no retries.
    """

    def __init__(
        self,
        config: Optional[TransportConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the transport.

        Args:
            config: Transport settings (loads defaults if not provided)
            transport: Optional httpx transport, e.g. httpx.MockTransport in tests
        """
        self.config = config or TransportConfig()
        self._client = httpx.AsyncClient(timeout=self.config.timeout_seconds, transport=transport)

    def _get_common_headers(self) -> dict:
        """Get common headers for API requests."""
        return {
            "accept": "application/json",
            "accept-encoding": "gzip",
            "user-agent": "RusTour/1.0",
        }

    async def send(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[bytes] = None
    ) -> TransportResponse:
        """
        Send a request.

        Raises:
            TransportError: If no response was received
            ResponseDecodeError: If the response body could not be decoded
        """
        request_headers = self._get_common_headers()
        if headers:
            request_headers.update(headers)

        logger.debug(f"{method} {url}")
        try:
            response = await self._client.request(method, url, headers=request_headers, content=body)
        except httpx.TransportError as e:
            logger.warning(f"{method} {url} failed: {e!r}")
            raise TransportError(str(e) or e.__class__.__name__, cause=e) from e
        except httpx.DecodingError as e:
            logger.warning(f"{method} {url} returned an undecodable body: {e!r}")
            raise ResponseDecodeError(str(e) or e.__class__.__name__, cause=e) from e

        return TransportResponse(
            status_code=response.status_code,
            body=response.content,
            headers=dict(response.headers)
        )

    async def post_json(self, url: str, payload: Any) -> TransportResponse:
        """POST a JSON-serialized payload."""
        body = json.dumps(payload).encode("utf-8")
        return await self.send(
            "POST",
            url,
            headers={"content-type": "application/json"},
            body=body
        )

    async def close(self):
        """Close the HTTP client."""
        await self._client.aclose()
