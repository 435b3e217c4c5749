"""Response types returned by the client."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

__all__ = [
    "ApiResult",
    "ResponseMetadata",
    "SVGResult",
]


@dataclass(frozen=True)
class ResponseMetadata:
    """Metadata attached to every enveloped service response.

    Attributes:
        request_id: Unique identifier for the request.
        credits_used: Credits consumed by this request.
        credits_remaining: Credits left on the account.
        extra: Any additional metadata keys, passed through verbatim.
    """

    request_id: str | None = None
    credits_used: float | None = None
    credits_remaining: float | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Any) -> "ResponseMetadata | None":
        if not isinstance(raw, Mapping):
            return None
        known = {"requestId", "creditsUsed", "creditsRemaining"}
        return cls(
            request_id=raw.get("requestId"),
            credits_used=raw.get("creditsUsed"),
            credits_remaining=raw.get("creditsRemaining"),
            extra={k: v for k, v in raw.items() if k not in known},
        )


@dataclass(frozen=True)
class ApiResult:
    """Unwrapped success envelope: the ``data`` payload plus metadata."""

    data: Any
    metadata: ResponseMetadata | None = None

    def __getitem__(self, key: str) -> Any:
        return self.data[key]

    def get(self, key: str, default: Any = None) -> Any:
        if isinstance(self.data, Mapping):
            return self.data.get(key, default)
        return default


@dataclass(frozen=True)
class SVGResult:
    """Result of an SVG-producing operation (generate, edit, ai-vectorize).

    Attributes:
        svg_url: URL of the produced SVG.
        credit_cost: Credits charged for the operation.
        message: Human-readable status message.
        svg_url_expires_in: Lifetime of ``svg_url`` (e.g. "24h").
        generation_id: Identifier of the stored generation.
        svg_text: Raw SVG markup, when requested.
        png_image_data: PNG preview bytes, when requested.
        quality: Quality level used (generate only).
        metadata: Response metadata.
    """

    svg_url: str | None = None
    credit_cost: float | None = None
    message: str = ""
    svg_url_expires_in: str | None = None
    generation_id: str | None = None
    svg_text: str | None = None
    png_image_data: bytes | None = None
    quality: str | None = None
    metadata: ResponseMetadata | None = None

    @classmethod
    def from_payload(
        cls,
        payload: Mapping[str, Any],
        metadata: ResponseMetadata | None = None,
        *,
        default_quality: str | None = None,
    ) -> "SVGResult":
        """Build from a normalized payload (``svgText`` and ``pngImageData``
        already decoded)."""
        if metadata is None:
            metadata = ResponseMetadata.from_dict(payload.get("metadata"))
        return cls(
            svg_url=payload.get("svgUrl"),
            credit_cost=payload.get("creditCost"),
            message=payload.get("message") or "",
            svg_url_expires_in=payload.get("svgUrlExpiresIn"),
            generation_id=payload.get("generationId"),
            svg_text=payload.get("svgText"),
            png_image_data=payload.get("pngImageData"),
            quality=payload.get("quality") or default_quality,
            metadata=metadata,
        )
