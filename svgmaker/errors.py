"""SVGMaker error taxonomy.

Every failure raised by the library is a single exception type,
``SVGMakerError``, tagged with an ``ErrorKind``. Callers branch on
``error.kind`` instead of on exception subclasses:

    try:
        result = await client.generate.configure(prompt="a fox").execute()
    except SVGMakerError as e:
        match e.kind:
            case ErrorKind.RATE_LIMIT:
                await asyncio.sleep(e.retry_after)
            case ErrorKind.INSUFFICIENT_CREDITS:
                notify_billing(e.credits_required)
            case _:
                raise
"""

from enum import Enum
from typing import Any

__all__ = [
    "ErrorKind",
    "SVGMakerError",
]


class ErrorKind(Enum):
    """Closed set of error kinds surfaced by the client."""

    VALIDATION = "validation"
    AUTH = "auth"
    INSUFFICIENT_CREDITS = "insufficient_credits"
    RATE_LIMIT = "rate_limit"
    CONTENT_POLICY = "content_policy"
    ENDPOINT_DISABLED = "endpoint_disabled"
    FILE_SIZE = "file_size"
    FILE_FORMAT = "file_format"
    TIMEOUT = "timeout"
    NETWORK = "network"
    API = "api"

    @property
    def is_transient(self) -> bool:
        """True for kinds that are retried regardless of status code."""
        return self in (ErrorKind.TIMEOUT, ErrorKind.NETWORK)


class SVGMakerError(Exception):
    """Error raised by the SVGMaker client.

    Attributes:
        kind: Which member of the taxonomy this error is.
        status_code: HTTP status of the failed response, when one exists.
        code: Service-defined error code (e.g. "INSUFFICIENT_CREDITS").
        details: Service-provided details payload, passed through verbatim.
        request_id: Service request id for support correlation.
        retry_after: Seconds to wait before retrying (RATE_LIMIT only).
        credits_required: Credits needed for the operation
            (INSUFFICIENT_CREDITS only).
        timeout: Timeout that elapsed, in seconds (TIMEOUT only).
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        status_code: int | None = None,
        code: str | None = None,
        details: Any = None,
        request_id: str | None = None,
        retry_after: float | None = None,
        credits_required: int | None = None,
        timeout: float | None = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details
        self.request_id = request_id
        self.retry_after = retry_after
        self.credits_required = credits_required
        self.timeout = timeout

    def __repr__(self) -> str:
        return (
            f"SVGMakerError(kind={self.kind.name}, message={self.message!r}, "
            f"status_code={self.status_code!r}, code={self.code!r}, "
            f"request_id={self.request_id!r})"
        )

    @property
    def is_transient(self) -> bool:
        return self.kind.is_transient

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def validation(cls, message: str, *, details: Any = None) -> "SVGMakerError":
        """Caller-side validation failure. Never retried."""
        return cls(ErrorKind.VALIDATION, message, details=details)

    @classmethod
    def auth(cls, message: str, **api_fields: Any) -> "SVGMakerError":
        api_fields.setdefault("status_code", 401)
        return cls(ErrorKind.AUTH, message, **api_fields)

    @classmethod
    def insufficient_credits(
        cls,
        message: str,
        credits_required: int | None = None,
        **api_fields: Any,
    ) -> "SVGMakerError":
        api_fields.setdefault("status_code", 402)
        return cls(
            ErrorKind.INSUFFICIENT_CREDITS,
            message,
            credits_required=credits_required,
            **api_fields,
        )

    @classmethod
    def rate_limit(
        cls,
        message: str,
        retry_after: float | None = None,
        **api_fields: Any,
    ) -> "SVGMakerError":
        api_fields.setdefault("status_code", 429)
        return cls(ErrorKind.RATE_LIMIT, message, retry_after=retry_after, **api_fields)

    @classmethod
    def content_policy(cls, message: str, **api_fields: Any) -> "SVGMakerError":
        api_fields.setdefault("status_code", 422)
        api_fields.setdefault("code", "CONTENT_POLICY")
        return cls(ErrorKind.CONTENT_POLICY, message, **api_fields)

    @classmethod
    def endpoint_disabled(cls, message: str, **api_fields: Any) -> "SVGMakerError":
        api_fields.setdefault("status_code", 503)
        api_fields.setdefault("code", "ENDPOINT_DISABLED")
        return cls(ErrorKind.ENDPOINT_DISABLED, message, **api_fields)

    @classmethod
    def file_size(cls, message: str, **api_fields: Any) -> "SVGMakerError":
        api_fields.setdefault("status_code", 413)
        return cls(ErrorKind.FILE_SIZE, message, **api_fields)

    @classmethod
    def file_format(cls, message: str, **api_fields: Any) -> "SVGMakerError":
        api_fields.setdefault("status_code", 400)
        return cls(ErrorKind.FILE_FORMAT, message, **api_fields)

    @classmethod
    def timed_out(cls, timeout: float) -> "SVGMakerError":
        return cls(
            ErrorKind.TIMEOUT,
            f"Request timed out after {timeout:g}s",
            timeout=timeout,
        )

    @classmethod
    def network(cls, cause: BaseException) -> "SVGMakerError":
        """Network failure. Raise with ``from cause`` to keep the chain."""
        error = cls(ErrorKind.NETWORK, f"Network error: {cause}")
        error.__cause__ = cause
        return error

    @classmethod
    def api(cls, message: str, **api_fields: Any) -> "SVGMakerError":
        """Generic API error carrying status, code, details and request id."""
        return cls(ErrorKind.API, message, **api_fields)
