"""Stirling PDF API client - one multipart POST per tool call.

Each call opens its own httpx client, so the connection and the request
buffer are released as soon as the call returns, fails or times out.
No retries are attempted.
"""

import logging
import mimetypes
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union
from urllib.parse import urlparse

import httpx

from .config import LOGGER_NAME, Settings, running_in_docker
from .errors import TransportError, UpstreamError
from .logging_utils import RequestContext

logger = logging.getLogger(LOGGER_NAME)

API_KEY_HEADER = "X-API-KEY"


@dataclass(frozen=True)
class FilePart:
    field_name: str
    filename: str
    content: bytes
    content_type: str


@dataclass
class MultipartRequest:
    """Ordered text fields and binary attachments for one request."""

    fields: List[Tuple[str, str]] = field(default_factory=list)
    files: List[FilePart] = field(default_factory=list)

    def add_field(self, name: str, value: str) -> None:
        self.fields.append((name, value))

    def add_file(self, name: str, filename: str, content: bytes, content_type: Optional[str] = None) -> None:
        if content_type is None:
            content_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"
        self.files.append(FilePart(name, filename, content, content_type))

    def field_values(self, name: str) -> List[str]:
        return [value for key, value in self.fields if key == name]

    @property
    def size_bytes(self) -> int:
        return sum(len(part.content) for part in self.files)

    def httpx_data(self) -> Dict[str, Union[str, List[str]]]:
        """Text fields as httpx ``data``; repeated names become lists."""
        data: Dict[str, Union[str, List[str]]] = {}
        for name, value in self.fields:
            if name not in data:
                data[name] = value
            else:
                existing = data[name]
                data[name] = (existing if isinstance(existing, list) else [existing]) + [value]
        return data

    def httpx_files(self) -> List[Tuple[str, Tuple[str, bytes, str]]]:
        return [(part.field_name, (part.filename, part.content, part.content_type)) for part in self.files]


def _sanitize_url(raw: str) -> str:
    parsed = urlparse(raw)
    if not parsed.scheme or not parsed.netloc:
        return raw.split("?", 1)[0].split("#", 1)[0]
    return f"{parsed.scheme}://{parsed.netloc}{parsed.path}"


def _connection_hint(api_url: str) -> str:
    host = urlparse(api_url).hostname or ""
    if running_in_docker() and host in ("localhost", "127.0.0.1"):
        return (
            "inside a container localhost is the container itself; if Stirling PDF runs on "
            "the host, set STIRLING_PDF_URL to http://host.docker.internal:8080 or put both "
            "services on the same docker network"
        )
    return ""


class StirlingClient:
    """Thin async gateway to the Stirling PDF REST API."""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self.settings.api_url.rstrip("/")

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "*/*"}
        if self.settings.api_key:
            headers[API_KEY_HEADER] = self.settings.api_key
        return headers

    def _transport_error(self, err: httpx.RequestError, url: str) -> TransportError:
        timed_out = isinstance(err, httpx.TimeoutException)
        if timed_out:
            parts = [f"Stirling PDF API request timed out after {self.settings.timeout_seconds:g} seconds"]
        else:
            parts = ["Could not connect to Stirling PDF API"]
        parts.append(f"url={_sanitize_url(url)}")
        parts.append(f"error_type={err.__class__.__name__}")
        if str(err):
            parts.append(f"error={str(err)}")
        hint = _connection_hint(self.base_url)
        if hint:
            parts.append(f"hint={hint}")
        return TransportError("; ".join(parts), timed_out=timed_out)

    async def call(
        self,
        endpoint: str,
        request: MultipartRequest,
        ctx: Optional[RequestContext] = None,
    ) -> bytes:
        """POST ``request`` to ``endpoint`` and return the raw response body.

        Raises:
            TransportError: Connection refused, DNS failure or timeout
            UpstreamError: The API answered with a non-2xx status
        """
        url = f"{self.base_url}{endpoint}"
        if ctx is not None:
            ctx.log_upstream_call(endpoint, parts=len(request.fields) + len(request.files),
                                  size_bytes=request.size_bytes)
        else:
            logger.info(f"Calling Stirling PDF API: {endpoint}")

        timeout = httpx.Timeout(self.settings.timeout_seconds)
        async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
            try:
                response = await client.post(
                    url,
                    data=request.httpx_data(),
                    files=request.httpx_files(),
                    headers=self._headers(),
                )
            except httpx.RequestError as e:
                raise self._transport_error(e, url) from e

        if not response.is_success:
            raise UpstreamError(response.status_code, response.reason_phrase, response.text)

        if ctx is not None:
            ctx.log_upstream_response(len(response.content))
        return response.content
