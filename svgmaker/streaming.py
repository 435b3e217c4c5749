"""Decoder for newline-delimited JSON progress streams.

Streaming endpoints answer with one JSON object per line (no SSE
``data:`` framing). Progress records (``processing``, ``generated``,
``storing``, ...) are yielded as they arrive and their fields are
accumulated; the terminal record (``complete`` or ``error``) is yielded
with the accumulated fields merged underneath its own and ends the
sequence.
"""

import codecs
import json
from collections.abc import AsyncIterable, AsyncIterator, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

import structlog

from svgmaker.encoding import decode_base64_png, normalize_svg_content
from svgmaker.error_mapper import map_response_error
from svgmaker.errors import SVGMakerError

__all__ = [
    "StreamEvent",
    "TERMINAL_STATUSES",
    "collect_terminal",
    "decode_event_stream",
    "normalize_record",
]

logger = structlog.get_logger()

TERMINAL_STATUSES = frozenset({"complete", "error"})

# Fields that describe a single event and are never carried forward.
_NOT_ACCUMULATED = frozenset({"status", "message"})

_LOGGED_LINE_LIMIT = 200


@dataclass(frozen=True, eq=False)
class StreamEvent(Mapping[str, Any]):
    """One decoded record from a progress stream.

    Behaves as a read-only mapping over all of the record's fields,
    including ``status`` and ``message``.

    Attributes:
        status: Event status, e.g. "processing", "generated", "complete".
        message: Human-readable progress message, if any.
        fields: Remaining fields (svgUrl, creditCost, pngImageData, ...).
    """

    status: str | None
    message: str | None = None
    fields: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "StreamEvent":
        status = record.get("status")
        message = record.get("message")
        return cls(
            status=status if isinstance(status, str) else None,
            message=message if isinstance(message, str) else None,
            fields={k: v for k, v in record.items() if k not in _NOT_ACCUMULATED},
        )

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def is_error(self) -> bool:
        return self.status == "error"

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.status is not None:
            data["status"] = self.status
        if self.message is not None:
            data["message"] = self.message
        data.update(self.fields)
        return data

    def raise_for_error(self) -> None:
        """Raise the ``SVGMakerError`` described by an ``error`` event.

        Raises:
            SVGMakerError: If this is an error event.
        """
        if not self.is_error:
            return
        body = dict(self.fields)
        if "error" not in body and self.message:
            body["error"] = self.message
        raise map_response_error(body, body.get("statusCode"))

    def __getitem__(self, key: str) -> Any:
        if key in ("status", "message"):
            value = getattr(self, key)
            if value is None:
                raise KeyError(key)
            return value
        return self.fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.to_dict())

    def __len__(self) -> int:
        return len(self.to_dict())


def normalize_record(record: dict[str, Any]) -> dict[str, Any]:
    """Decode embedded payloads in a parsed record.

    ``base64Png`` is replaced by ``pngImageData`` (bytes); an undecodable
    payload is dropped. ``svgText`` is normalized to raw SVG text.
    """
    normalized = dict(record)

    png = normalized.pop("base64Png", None)
    if isinstance(png, str) and png:
        try:
            normalized["pngImageData"] = decode_base64_png(png)
        except ValueError:
            logger.warning("stream_png_decode_failed", length=len(png))

    svg_text = normalized.get("svgText")
    if isinstance(svg_text, str):
        normalized["svgText"] = normalize_svg_content(svg_text)

    return normalized


def _parse_line(line: str) -> dict[str, Any] | None:
    stripped = line.strip()
    if not stripped:
        return None
    try:
        record = json.loads(stripped)
    except json.JSONDecodeError as e:
        logger.warning(
            "stream_line_unparseable",
            error=str(e),
            line=stripped[:_LOGGED_LINE_LIMIT],
        )
        return None
    if not isinstance(record, dict):
        logger.warning(
            "stream_line_not_object", line=stripped[:_LOGGED_LINE_LIMIT]
        )
        return None
    return normalize_record(record)


def _accumulate(accumulated: dict[str, Any], record: Mapping[str, Any]) -> None:
    for key, value in record.items():
        if key not in _NOT_ACCUMULATED:
            accumulated[key] = value


async def decode_event_stream(
    chunks: AsyncIterable[bytes],
) -> AsyncIterator[StreamEvent]:
    """Decode a byte stream into ``StreamEvent`` objects.

    Args:
        chunks: Raw response body chunks, in arrival order. Chunk
            boundaries may fall anywhere, including inside a JSON record
            or a multi-byte character.

    Yields:
        Progress events as they complete, then at most one terminal event
        with accumulated progress fields merged in (its own fields win).
        Lines after the terminal event are never read.
    """
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    accumulated: dict[str, Any] = {}
    buffer = ""

    async for chunk in chunks:
        buffer += decoder.decode(chunk)
        *lines, buffer = buffer.split("\n")
        for line in lines:
            record = _parse_line(line)
            if record is None:
                continue
            event = _to_event(record, accumulated)
            yield event
            if event.is_terminal:
                return

    buffer += decoder.decode(b"", final=True)
    record = _parse_line(buffer)
    if record is not None:
        yield _to_event(record, accumulated)


def _to_event(record: dict[str, Any], accumulated: dict[str, Any]) -> StreamEvent:
    if record.get("status") in TERMINAL_STATUSES:
        return StreamEvent.from_record({**accumulated, **record})
    _accumulate(accumulated, record)
    return StreamEvent.from_record(record)


async def collect_terminal(events: AsyncIterable[StreamEvent]) -> StreamEvent:
    """Drain ``events`` and return the terminal event.

    Raises:
        SVGMakerError: If the stream ended without a terminal event, or the
            terminal event is an error event.
    """
    terminal: StreamEvent | None = None
    async for event in events:
        if event.is_terminal:
            terminal = event
    if terminal is None:
        raise SVGMakerError.api("Stream ended without a terminal event")
    terminal.raise_for_error()
    return terminal
