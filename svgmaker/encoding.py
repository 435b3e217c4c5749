"""Payload decoding helpers for image fields returned by the service."""

import base64
import binascii
import re

__all__ = [
    "decode_base64_png",
    "looks_like_svg",
    "normalize_svg_content",
]

_DATA_URL_PREFIX = re.compile(r"^data:image/[a-z0-9.+-]+;base64,", re.IGNORECASE)
_BASE64_BODY = re.compile(r"^[A-Za-z0-9+/]+={0,2}$")
_SVG_OPEN = re.compile(r"<svg[\s>/]", re.IGNORECASE)
_SVG_CLOSE = re.compile(r"</svg\s*>", re.IGNORECASE)


def decode_base64_png(value: str) -> bytes:
    """Decode a base64 PNG payload, with or without a ``data:`` URL prefix.

    Raises:
        ValueError: If the payload is not valid base64.
    """
    payload = _DATA_URL_PREFIX.sub("", value.strip())
    try:
        return base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 image payload: {e}") from e


def looks_like_svg(text: str) -> bool:
    """True if ``text`` has an ``<svg ...>`` opening tag and a ``</svg>`` close."""
    opening = _SVG_OPEN.search(text)
    if opening is None:
        return False
    return _SVG_CLOSE.search(text, opening.end()) is not None


def normalize_svg_content(content: str) -> str:
    """Return SVG markup as raw text.

    Raw SVG is returned unchanged. Otherwise the content is treated as
    possibly base64-encoded SVG: the decoded text is used only when it is
    itself SVG markup. Anything else is returned unchanged, so applying
    this twice gives the same result as applying it once.

    Content that is valid base64 and also resembles a truncated SVG tag
    (``<svg`` without ``</svg>``) is not SVG by this definition; it is
    decoded if possible and otherwise left as is.
    """
    if looks_like_svg(content):
        return content

    candidate = "".join(content.split())
    if not candidate or len(candidate) % 4 or not _BASE64_BODY.match(candidate):
        return content

    try:
        decoded = base64.b64decode(candidate, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return content

    return decoded if looks_like_svg(decoded) else content
