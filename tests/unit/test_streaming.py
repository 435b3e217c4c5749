"""Tests for the newline-delimited JSON stream decoder."""

import base64
import json

import pytest

from svgmaker.errors import ErrorKind, SVGMakerError
from svgmaker.streaming import (
    StreamEvent,
    collect_terminal,
    decode_event_stream,
    normalize_record,
)


async def chunks_of(*parts):
    for part in parts:
        yield part.encode() if isinstance(part, str) else part


async def decode(*parts):
    return [event async for event in decode_event_stream(chunks_of(*parts))]


def line(record):
    return json.dumps(record, ensure_ascii=False) + "\n"


class TestFraming:
    """Line reassembly across chunk boundaries."""

    @pytest.mark.asyncio
    async def test_record_split_across_chunks(self):
        events = await decode('{"status":"comp', 'lete","svgUrl":"x"}\n')

        assert len(events) == 1
        assert events[0].status == "complete"
        assert events[0]["svgUrl"] == "x"

    @pytest.mark.asyncio
    async def test_many_records_in_one_chunk(self):
        events = await decode(
            line({"status": "processing"})
            + line({"status": "generated", "creditCost": 2})
            + line({"status": "complete"})
        )

        assert [e.status for e in events] == ["processing", "generated", "complete"]

    @pytest.mark.asyncio
    async def test_multibyte_character_split_across_chunks(self):
        payload = line({"status": "complete", "message": "café ✓"}).encode()
        split = payload.index("✓".encode()) + 1

        events = await decode(payload[:split], payload[split:])

        assert events[0].message == "café ✓"

    @pytest.mark.asyncio
    async def test_trailing_record_without_newline_is_flushed(self):
        events = await decode(line({"status": "processing"}), '{"status":"complete"}')

        assert [e.status for e in events] == ["processing", "complete"]

    @pytest.mark.asyncio
    async def test_blank_lines_ignored(self):
        events = await decode("\n\n", line({"status": "complete"}), "\n")
        assert len(events) == 1


class TestEventSequence:
    """Progress accumulation and termination."""

    @pytest.mark.asyncio
    async def test_terminal_event_merges_accumulated_fields(self):
        events = await decode(
            line({"status": "processing", "message": "Starting"}),
            line({"status": "generated", "svgUrl": "u", "creditCost": 1}),
            line({"status": "complete", "message": "Done", "generationId": "g"}),
        )

        assert len(events) == 3
        assert events[0] == {"status": "processing", "message": "Starting"}
        assert events[1] == {"status": "generated", "svgUrl": "u", "creditCost": 1}
        assert events[2] == {
            "status": "complete",
            "message": "Done",
            "svgUrl": "u",
            "creditCost": 1,
            "generationId": "g",
        }

    @pytest.mark.asyncio
    async def test_terminal_fields_win_over_accumulated(self):
        events = await decode(
            line({"status": "generated", "svgUrl": "old"}),
            line({"status": "complete", "svgUrl": "new"}),
        )

        assert events[-1]["svgUrl"] == "new"

    @pytest.mark.asyncio
    async def test_status_and_message_not_carried_forward(self):
        events = await decode(
            line({"status": "processing", "message": "Working"}),
            line({"status": "complete"}),
        )

        assert events[-1].message is None
        assert "message" not in events[-1]

    @pytest.mark.asyncio
    async def test_null_overwrites_accumulated_value(self):
        events = await decode(
            line({"status": "generated", "svgUrl": "u"}),
            line({"status": "storing", "svgUrl": None}),
            line({"status": "complete"}),
        )

        assert events[-1]["svgUrl"] is None

    @pytest.mark.asyncio
    async def test_stops_after_terminal_event(self):
        events = await decode(
            line({"status": "error", "error": "bad"}),
            line({"status": "complete"}),
        )

        assert [e.status for e in events] == ["error"]

    @pytest.mark.asyncio
    async def test_unparseable_line_skipped(self):
        events = await decode(
            line({"status": "processing"}),
            "{not json}\n",
            "[1, 2]\n",
            line({"status": "complete"}),
        )

        assert [e.status for e in events] == ["processing", "complete"]

    @pytest.mark.asyncio
    async def test_empty_stream_yields_nothing(self):
        assert await decode() == []


class TestPayloadDecoding:
    """Embedded base64 payloads are decoded."""

    @pytest.mark.asyncio
    async def test_base64_png_becomes_bytes(self):
        png = base64.b64encode(b"\x89PNG").decode()

        events = await decode(line({"status": "complete", "base64Png": png}))

        assert events[0]["pngImageData"] == b"\x89PNG"
        assert "base64Png" not in events[0]

    @pytest.mark.asyncio
    async def test_base64_svg_text_decoded(self):
        svg = "<svg><rect/></svg>"
        encoded = base64.b64encode(svg.encode()).decode()

        events = await decode(line({"status": "complete", "svgText": encoded}))

        assert events[0]["svgText"] == svg

    def test_invalid_png_dropped(self):
        record = normalize_record({"status": "complete", "base64Png": "%%%"})
        assert "pngImageData" not in record
        assert "base64Png" not in record


class TestStreamEvent:
    def test_raise_for_error_maps_error_event(self):
        event = StreamEvent.from_record(
            {"status": "error", "error": "Not enough credits", "statusCode": 402}
        )

        with pytest.raises(SVGMakerError) as exc_info:
            event.raise_for_error()

        assert exc_info.value.kind is ErrorKind.INSUFFICIENT_CREDITS
        assert exc_info.value.message == "Not enough credits"

    def test_raise_for_error_uses_message(self):
        event = StreamEvent.from_record({"status": "error", "message": "Failed"})

        with pytest.raises(SVGMakerError, match="Failed"):
            event.raise_for_error()

    def test_raise_for_error_noop_for_success(self):
        StreamEvent.from_record({"status": "complete"}).raise_for_error()

    def test_mapping_interface(self):
        event = StreamEvent.from_record({"status": "generated", "svgUrl": "u"})
        assert dict(event) == {"status": "generated", "svgUrl": "u"}
        assert event.get("creditCost") is None
        assert not event.is_terminal

    def test_missing_status_not_added(self):
        event = StreamEvent.from_record({"svgUrl": "u"})

        assert dict(event) == {"svgUrl": "u"}
        assert "status" not in event
        assert event.status is None


class TestCollectTerminal:
    @pytest.mark.asyncio
    async def test_returns_terminal_event(self):
        events = decode_event_stream(
            chunks_of(line({"status": "processing"}), line({"status": "complete"}))
        )

        terminal = await collect_terminal(events)

        assert terminal.status == "complete"

    @pytest.mark.asyncio
    async def test_missing_terminal_raises(self):
        events = decode_event_stream(chunks_of(line({"status": "processing"})))

        with pytest.raises(SVGMakerError) as exc_info:
            await collect_terminal(events)

        assert exc_info.value.kind is ErrorKind.API

    @pytest.mark.asyncio
    async def test_error_terminal_raises(self):
        events = decode_event_stream(
            chunks_of(
                line(
                    {
                        "status": "error",
                        "error": "Prompt rejected",
                        "code": "CONTENT_POLICY",
                    }
                )
            )
        )

        with pytest.raises(SVGMakerError) as exc_info:
            await collect_terminal(events)

        assert exc_info.value.kind is ErrorKind.CONTENT_POLICY
