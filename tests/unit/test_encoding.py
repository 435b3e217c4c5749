"""Tests for SVG and PNG payload decoding."""

import base64

import pytest

from svgmaker.encoding import decode_base64_png, looks_like_svg, normalize_svg_content

SVG = '<svg xmlns="http://www.w3.org/2000/svg"><circle r="4"/></svg>'
SVG_B64 = base64.b64encode(SVG.encode()).decode()
PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00"


class TestNormalizeSvgContent:
    def test_raw_svg_unchanged(self):
        assert normalize_svg_content(SVG) == SVG

    def test_raw_svg_with_xml_prolog_unchanged(self):
        content = '<?xml version="1.0"?>\n' + SVG
        assert normalize_svg_content(content) == content

    def test_base64_svg_decoded(self):
        assert normalize_svg_content(SVG_B64) == SVG

    def test_base64_with_line_breaks_decoded(self):
        wrapped = "\n".join(SVG_B64[i : i + 16] for i in range(0, len(SVG_B64), 16))
        assert normalize_svg_content(wrapped) == SVG

    @pytest.mark.parametrize(
        "content",
        [
            "hello world",
            "abcd",  # valid base64, decodes to non-SVG bytes
            base64.b64encode(b"just text").decode(),
            "",
            "<svg",
        ],
    )
    def test_non_svg_content_unchanged(self, content):
        assert normalize_svg_content(content) == content

    @pytest.mark.parametrize("content", [SVG, SVG_B64, "plain", "abcd", ""])
    def test_idempotent(self, content):
        once = normalize_svg_content(content)
        assert normalize_svg_content(once) == once


class TestLooksLikeSvg:
    def test_requires_open_and_close(self):
        assert looks_like_svg("<svg></svg>")
        assert looks_like_svg("<SVG viewBox='0 0 1 1'>\n</SVG >")
        assert not looks_like_svg("<svg viewBox='0 0 1 1'>")
        assert not looks_like_svg("</svg><svg>")
        assert not looks_like_svg("<svgfoo></svg>")


class TestDecodeBase64Png:
    def test_plain_base64(self):
        encoded = base64.b64encode(PNG_BYTES).decode()
        assert decode_base64_png(encoded) == PNG_BYTES

    def test_data_url_prefix_stripped(self):
        encoded = "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode()
        assert decode_base64_png(encoded) == PNG_BYTES

    def test_invalid_payload_raises(self):
        with pytest.raises(ValueError, match="Invalid base64"):
            decode_base64_png("not base64!!")
