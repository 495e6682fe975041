"""Tests for data URL encoding/decoding."""

import base64

import pytest

from mcp_stirling_pdf.codec import (
    PDF_MEDIA_TYPE,
    ZIP_MEDIA_TYPE,
    decode_data_url,
    encode_data_url,
    image_extension,
)
from mcp_stirling_pdf.errors import DecodeError

SAMPLES = [b"", b"a", b"ab", b"abc", bytes(range(256)), b"%PDF-1.7\n" * 500]


class TestRoundTrip:

    @pytest.mark.parametrize("content", SAMPLES)
    def test_default_media_type(self, content):
        encoded = encode_data_url(content)
        assert encoded.startswith("data:application/pdf;base64,")
        assert decode_data_url(encoded) == content

    @pytest.mark.parametrize("media_type", [ZIP_MEDIA_TYPE, "image/png", "image/jpeg"])
    def test_explicit_media_type(self, media_type):
        content = bytes(range(256)) * 3
        encoded = encode_data_url(content, media_type)
        assert encoded.startswith(f"data:{media_type};base64,")
        assert decode_data_url(encoded) == content

    def test_encoded_payload_has_no_line_breaks(self):
        encoded = encode_data_url(b"x" * 10_000, PDF_MEDIA_TYPE)
        assert "\n" not in encoded


class TestDecode:

    def test_bare_base64(self):
        assert decode_data_url(base64.b64encode(b"Hello World").decode()) == b"Hello World"

    def test_whitespace_is_ignored(self):
        encoded = base64.b64encode(b"Test content for whitespace").decode()
        with_spaces = f"  data:application/pdf;base64,{encoded[:10]} \n {encoded[10:]}\n"
        assert decode_data_url(with_spaces) == b"Test content for whitespace"

    def test_invalid_alphabet(self):
        with pytest.raises(DecodeError, match="Base64 decode failed"):
            decode_data_url("not-valid-base64!@#$%")

    def test_invalid_padding(self):
        with pytest.raises(DecodeError):
            decode_data_url("data:application/pdf;base64,abc")

    def test_non_string(self):
        with pytest.raises(DecodeError, match="Expected a base64 string"):
            decode_data_url(b"YWJj")


class TestImageExtension:

    def test_from_data_url(self):
        assert image_extension("data:image/jpeg;base64,AAAA") == "jpeg"
        assert image_extension("data:image/PNG;base64,AAAA") == "png"

    def test_defaults_without_image_prefix(self):
        assert image_extension("AAAA") == "png"
        assert image_extension("data:application/pdf;base64,AAAA") == "png"


def test_data_url_with_parameters():
    encoded = base64.b64encode(b"named").decode()
    assert decode_data_url(f"data:application/pdf;name=report.pdf;base64,{encoded}") == b"named"
