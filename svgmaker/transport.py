"""Single-call HTTP transport for the SVGMaker API.

Builds the URL and headers for an ``Operation``, issues it through
``httpx.AsyncClient`` and turns the response into either a decoded body or
an ``SVGMakerError``. Retries and rate limiting happen above this layer.
"""

import json
import time
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

import httpx
import structlog

from svgmaker.error_mapper import (
    is_error_envelope,
    is_success_envelope,
    map_response_error,
)
from svgmaker.errors import SVGMakerError
from svgmaker.responses import ApiResult, ResponseMetadata
from svgmaker.version import __version__

__all__ = [
    "Operation",
    "Transport",
    "build_url",
]

if TYPE_CHECKING:
    from svgmaker.config import ClientConfig

logger = structlog.get_logger()

USER_AGENT = f"svgmaker-python/{__version__}"

# (filename, content, content type) as accepted by httpx multipart uploads.
FilePart = tuple[str, bytes, str]


@dataclass(frozen=True)
class Operation:
    """Description of one network call. Immutable once issued.

    Attributes:
        method: HTTP method.
        path: Path joined to the configured base URL.
        params: Query parameters. ``None`` values are dropped, booleans are
            sent as "true"/"false" and list values repeat the key.
        json: JSON request body.
        data: Form fields for multipart requests.
        files: Multipart file parts as (field, (filename, content, type)).
        headers: Extra headers; they override the defaults.
        timeout: Per-call timeout override in seconds.
    """

    method: str
    path: str
    params: Mapping[str, Any] | None = None
    json: Any = None
    data: Mapping[str, str] | None = None
    files: tuple[tuple[str, FilePart], ...] | None = None
    headers: Mapping[str, str] | None = None
    timeout: float | None = None


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_url(base_url: str, path: str, params: Mapping[str, Any] | None = None) -> str:
    """Join ``path`` to ``base_url`` and append encoded query parameters."""
    if path.startswith(("http://", "https://")):
        url = path
    else:
        url = f"{base_url.rstrip('/')}/{path.lstrip('/')}"

    if not params:
        return url

    pairs: list[tuple[str, str]] = []
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, list | tuple):
            pairs.extend((key, _query_value(item)) for item in value)
        else:
            pairs.append((key, _query_value(value)))

    if not pairs:
        return url
    return f"{url}?{urlencode(pairs)}"


def _parse_body(response: httpx.Response) -> Any:
    """Decode a response body as JSON when declared so, else as text."""
    content_type = response.headers.get("content-type", "")
    text = response.text
    if "json" in content_type:
        try:
            return json.loads(text) if text else None
        except json.JSONDecodeError:
            return text
    return text


class Transport:
    """Issues ``Operation`` objects against the service."""

    def __init__(self, http_client: httpx.AsyncClient):
        """Initialize the transport.

        Args:
            http_client: Client used for all calls. The owner is
                responsible for closing it.
        """
        self.http_client = http_client

    @staticmethod
    def build_headers(
        operation: Operation,
        config: "ClientConfig",
        *,
        accept: str = "application/json",
    ) -> dict[str, str]:
        headers = {
            "Accept": accept,
            "User-Agent": USER_AGENT,
            "x-api-key": config.api_key,
        }
        if operation.headers:
            headers.update(operation.headers)
        return headers

    def _build_request(
        self,
        operation: Operation,
        config: "ClientConfig",
        *,
        accept: str = "application/json",
    ) -> httpx.Request:
        timeout = operation.timeout or config.timeout
        return self.http_client.build_request(
            operation.method,
            build_url(config.base_url, operation.path, operation.params),
            headers=self.build_headers(operation, config, accept=accept),
            json=operation.json,
            data=dict(operation.data) if operation.data else None,
            files=list(operation.files) if operation.files else None,
            timeout=timeout,
        )

    async def send(self, operation: Operation, config: "ClientConfig") -> Any:
        """Perform one call and decode the result.

        Args:
            operation: The call to make.
            config: Configuration snapshot for this call.

        Returns:
            ``ApiResult`` for success envelopes, otherwise the parsed JSON
            body or the raw text (legacy responses).

        Raises:
            SVGMakerError: TIMEOUT, NETWORK, or the mapped service error.
        """
        timeout = operation.timeout or config.timeout
        request = self._build_request(operation, config)

        logger.debug(
            "svgmaker_request_start",
            method=operation.method,
            path=operation.path,
        )
        start_time = time.monotonic()

        try:
            response = await self.http_client.send(request)
        except httpx.TimeoutException as e:
            logger.warning(
                "svgmaker_request_timeout", path=operation.path, timeout=timeout
            )
            raise SVGMakerError.timed_out(timeout) from e
        except httpx.RequestError as e:
            logger.warning(
                "svgmaker_request_failed",
                path=operation.path,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise SVGMakerError.network(e) from e

        latency_ms = (time.monotonic() - start_time) * 1000
        body = _parse_body(response)

        if not response.is_success:
            error = map_response_error(body, response.status_code, response.headers)
            logger.info(
                "svgmaker_request_error_response",
                path=operation.path,
                status=response.status_code,
                kind=error.kind.value,
                code=error.code,
                request_id=error.request_id,
            )
            raise error

        logger.debug(
            "svgmaker_request_complete",
            path=operation.path,
            status=response.status_code,
            latency_ms=latency_ms,
        )

        if is_success_envelope(body):
            return ApiResult(
                data=body["data"],
                metadata=ResponseMetadata.from_dict(body.get("metadata")),
            )
        if is_error_envelope(body):
            raise map_response_error(body, response.status_code, response.headers)
        return body

    @asynccontextmanager
    async def stream(
        self, operation: Operation, config: "ClientConfig"
    ) -> AsyncIterator[AsyncIterator[bytes]]:
        """Open a streaming call and expose its body chunks.

        The status is checked before anything is yielded: a non-success
        response raises the mapped error. The response is closed when the
        context exits, including when the consumer stops early.

        Raises:
            SVGMakerError: TIMEOUT, NETWORK, or the mapped service error.
        """
        timeout = operation.timeout or config.timeout
        request = self._build_request(
            operation, config, accept="application/x-ndjson, application/json"
        )
        logger.debug(
            "svgmaker_stream_start", method=operation.method, path=operation.path
        )

        try:
            response = await self.http_client.send(request, stream=True)
        except httpx.TimeoutException as e:
            raise SVGMakerError.timed_out(timeout) from e
        except httpx.RequestError as e:
            raise SVGMakerError.network(e) from e

        try:
            if not response.is_success:
                await response.aread()
                raise map_response_error(
                    _parse_body(response), response.status_code, response.headers
                )
            yield self._iter_chunks(response, timeout)
        finally:
            await response.aclose()

    @staticmethod
    async def _iter_chunks(
        response: httpx.Response, timeout: float
    ) -> AsyncIterator[bytes]:
        try:
            async for chunk in response.aiter_bytes():
                yield chunk
        except httpx.TimeoutException as e:
            raise SVGMakerError.timed_out(timeout) from e
        except httpx.RequestError as e:
            raise SVGMakerError.network(e) from e
