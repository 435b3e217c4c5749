"""Translate service error responses into ``SVGMakerError``.

This is the only place that classifies service failures. Resolution order
is fixed and first match wins:

1. Service ``code`` field, looked up in ``CODE_KINDS``.
2. HTTP status fallback (401, 402, 413, 429).
3. Message heuristic for file format problems.
4. Generic API error carrying status, code, details and request id.
"""

import time
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from svgmaker.errors import ErrorKind, SVGMakerError

__all__ = [
    "CODE_KINDS",
    "ErrorInfo",
    "error_info_from_body",
    "is_error_envelope",
    "is_success_envelope",
    "map_error",
    "map_response_error",
]

DEFAULT_RETRY_AFTER_SECONDS = 60.0
# Reset header values above this are Unix timestamps, not delays.
_EPOCH_THRESHOLD = 10**9

CODE_KINDS: dict[str, ErrorKind] = {
    "INVALID_API_KEY": ErrorKind.AUTH,
    "MISSING_API_KEY": ErrorKind.AUTH,
    "UNAUTHORIZED": ErrorKind.AUTH,
    "INSUFFICIENT_CREDITS": ErrorKind.INSUFFICIENT_CREDITS,
    "RATE_LIMIT_EXCEEDED": ErrorKind.RATE_LIMIT,
    "CONTENT_POLICY": ErrorKind.CONTENT_POLICY,
    "CONTENT_SAFETY": ErrorKind.CONTENT_POLICY,
    "ENDPOINT_DISABLED": ErrorKind.ENDPOINT_DISABLED,
    "FILE_TOO_LARGE": ErrorKind.FILE_SIZE,
    "INVALID_FILE_FORMAT": ErrorKind.FILE_FORMAT,
    "UNSUPPORTED_FILE_TYPE": ErrorKind.FILE_FORMAT,
    "VALIDATION_ERROR": ErrorKind.VALIDATION,
    "INVALID_PARAMETERS": ErrorKind.VALIDATION,
}

STATUS_KINDS: dict[int, ErrorKind] = {
    401: ErrorKind.AUTH,
    402: ErrorKind.INSUFFICIENT_CREDITS,
    413: ErrorKind.FILE_SIZE,
    429: ErrorKind.RATE_LIMIT,
}

_FILE_FORMAT_MARKERS = ("file format", "already in vector format")

# Legacy bodies flag content safety through errorType instead of code.
_LEGACY_ERROR_TYPES = {"content_safety": "CONTENT_POLICY"}


@dataclass(frozen=True)
class ErrorInfo:
    """Normalized error description extracted from a response."""

    code: str | None = None
    status: int | None = None
    message: str | None = None
    details: Any = None


def is_success_envelope(body: Any) -> bool:
    return isinstance(body, Mapping) and body.get("success") is True and "data" in body


def is_error_envelope(body: Any) -> bool:
    return (
        isinstance(body, Mapping)
        and body.get("success") is False
        and isinstance(body.get("error"), Mapping)
    )


def _request_id(body: Any) -> str | None:
    if isinstance(body, Mapping):
        metadata = body.get("metadata")
        if isinstance(metadata, Mapping) and metadata.get("requestId") is not None:
            return str(metadata["requestId"])
    return None


def error_info_from_body(body: Any, status: int | None) -> tuple[ErrorInfo, str | None]:
    """Extract ``ErrorInfo`` and the request id from a response body.

    Accepts the error envelope, the legacy ``{"error": "...", "errorType": ...}``
    shape, plain text, or anything else (malformed bodies fall back to a
    message derived from the status).

    Returns:
        Tuple of (error info, request id or None).
    """
    fallback_message = f"HTTP Error {status}" if status else "Unknown API error"

    if is_error_envelope(body):
        error = body["error"]
        env_status = error.get("status")
        return (
            ErrorInfo(
                code=_as_str(error.get("code")),
                status=env_status if isinstance(env_status, int) else status,
                message=_as_str(error.get("message")) or fallback_message,
                details=error.get("details"),
            ),
            _request_id(body),
        )

    if isinstance(body, Mapping):
        raw_error = body.get("error")
        message = raw_error if isinstance(raw_error, str) else None
        if message is None and isinstance(raw_error, Mapping):
            message = _as_str(raw_error.get("message"))
        if message is None and isinstance(body.get("message"), str):
            message = body["message"]
        if message is None and isinstance(body.get("details"), str):
            message = body["details"]

        code = _as_str(body.get("code"))
        error_type = body.get("errorType") or body.get("error_type")
        if code is None and isinstance(error_type, str):
            code = _LEGACY_ERROR_TYPES.get(error_type, error_type)

        details = body.get("details")
        if "creditsRequired" in body:
            details = {
                **(details if isinstance(details, Mapping) else {}),
                "creditsRequired": body["creditsRequired"],
            }

        return (
            ErrorInfo(
                code=code,
                status=status,
                message=message or fallback_message,
                details=details,
            ),
            _request_id(body),
        )

    if isinstance(body, str) and body.strip():
        return ErrorInfo(status=status, message=body.strip()), None

    return ErrorInfo(status=status, message=fallback_message), None


def map_error(
    info: ErrorInfo,
    request_id: str | None = None,
    headers: Mapping[str, str] | None = None,
) -> SVGMakerError:
    """Convert normalized error info into an ``SVGMakerError``.

    Args:
        info: Error code, status, message and details.
        request_id: Service request id, attached to the error.
        headers: Response headers, consulted for rate limit reset hints.

    Returns:
        The mapped error (not raised).
    """
    message = info.message or (
        f"HTTP Error {info.status}" if info.status else "Unknown API error"
    )
    api_fields: dict[str, Any] = {
        "code": info.code,
        "details": info.details,
        "request_id": request_id,
    }
    if info.status is not None:
        api_fields["status_code"] = info.status

    kind = CODE_KINDS.get(info.code.upper()) if info.code else None
    if kind is None and info.status is not None:
        kind = STATUS_KINDS.get(info.status)
    if kind is None and _mentions_file_format(message):
        kind = ErrorKind.FILE_FORMAT

    match kind:
        case ErrorKind.AUTH:
            return SVGMakerError.auth(message, **api_fields)
        case ErrorKind.INSUFFICIENT_CREDITS:
            return SVGMakerError.insufficient_credits(
                message, _credits_required(info.details), **api_fields
            )
        case ErrorKind.RATE_LIMIT:
            return SVGMakerError.rate_limit(
                message, _retry_after(headers), **api_fields
            )
        case ErrorKind.CONTENT_POLICY:
            return SVGMakerError.content_policy(message, **api_fields)
        case ErrorKind.ENDPOINT_DISABLED:
            return SVGMakerError.endpoint_disabled(message, **api_fields)
        case ErrorKind.FILE_SIZE:
            return SVGMakerError.file_size(message, **api_fields)
        case ErrorKind.FILE_FORMAT:
            return SVGMakerError.file_format(message, **api_fields)
        case ErrorKind.VALIDATION:
            return SVGMakerError(ErrorKind.VALIDATION, message, **api_fields)
        case _:
            return SVGMakerError.api(message, **api_fields)


def map_response_error(
    body: Any,
    status: int | None,
    headers: Mapping[str, str] | None = None,
) -> SVGMakerError:
    """Map a raw response body and status in one step."""
    info, request_id = error_info_from_body(body, status)
    return map_error(info, request_id, headers)


def _as_str(value: Any) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def _mentions_file_format(message: str) -> bool:
    lowered = message.lower()
    return any(marker in lowered for marker in _FILE_FORMAT_MARKERS)


def _credits_required(details: Any) -> int | None:
    if not isinstance(details, Mapping):
        return None
    for key in ("creditsRequired", "required", "credits_required"):
        value = details.get(key)
        if value is None:
            continue
        try:
            return int(value)
        except (TypeError, ValueError):
            return None
    return None


def _retry_after(headers: Mapping[str, str] | None) -> float:
    """Seconds to wait, from rate limit headers or the default."""
    if not headers:
        return DEFAULT_RETRY_AFTER_SECONDS

    reset = _header(headers, "x-ratelimit-reset")
    if reset is not None:
        try:
            value = float(reset)
        except ValueError:
            value = None
        if value is not None:
            # Epoch timestamps are converted to a delta from now.
            if value > _EPOCH_THRESHOLD:
                return max(0.0, value - time.time())
            return max(0.0, value)

    retry_after = _header(headers, "retry-after")
    if retry_after is not None:
        try:
            return max(0.0, float(retry_after))
        except ValueError:
            pass

    return DEFAULT_RETRY_AFTER_SECONDS


def _header(headers: Mapping[str, str], name: str) -> str | None:
    value = headers.get(name)
    if value is not None:
        return value
    # Plain dicts are case-sensitive; httpx.Headers is not.
    for key, candidate in headers.items():
        if key.lower() == name:
            return candidate
    return None
