"""Tests for argument validation and coercion."""

import pytest

from mcp_stirling_pdf.errors import ValidationError
from mcp_stirling_pdf.validators import (
    coerce_string,
    coerce_string_list,
    require_choice,
    require_hex_color,
    require_min_count,
    require_non_empty,
    split_csv,
)


def test_require_non_empty_trims():
    assert require_non_empty("  2,4  ", "pageNumbers") == "2,4"


@pytest.mark.parametrize("value", [None, "", "   ", "\n\t"])
def test_require_non_empty_rejects_blank(value):
    with pytest.raises(ValidationError, match="pdfFile is required"):
        require_non_empty(value, "pdfFile")


def test_require_min_count():
    require_min_count(["a", "b"], 2, "pdfFiles", "PDF file")
    with pytest.raises(ValidationError, match="At least 2 PDF files are required"):
        require_min_count(["a"], 2, "pdfFiles", "PDF file")
    with pytest.raises(ValidationError, match="At least 1 image file is required"):
        require_min_count([], 1, "imageFiles", "image file")


def test_coerce_string():
    assert coerce_string(None, "dpi") is None
    assert coerce_string("  ", "dpi") is None
    assert coerce_string(" 300 ", "dpi") == "300"
    assert coerce_string(300, "dpi") == "300"
    assert coerce_string(0.5, "opacity") == "0.5"
    assert coerce_string(True, "deskew") == "true"
    assert coerce_string(False, "deskew") == "false"


def test_coerce_string_rejects_containers():
    with pytest.raises(ValidationError, match="dpi must be a string"):
        coerce_string(["300"], "dpi")


def test_coerce_string_list():
    assert coerce_string_list(None, "pdfFiles") == []
    assert coerce_string_list("abc", "pdfFiles") == ["abc"]
    assert coerce_string_list(("a", "b"), "pdfFiles") == ["a", "b"]
    with pytest.raises(ValidationError, match=r"pdfFiles\[2\] must be a string"):
        coerce_string_list(["a", 1], "pdfFiles")
    with pytest.raises(ValidationError, match="must be an array of strings"):
        coerce_string_list({"a": 1}, "pdfFiles")


def test_choice_and_color():
    assert require_choice("90", ("90", "180"), "angle") == "90"
    with pytest.raises(ValidationError, match="angle must be one of: 90, 180"):
        require_choice("45", ("90", "180"), "angle")

    assert require_hex_color("#ff00AA", "customColor") == "#ff00AA"
    for bad in ("red", "#fff", "ff00aa", "#ff00aa00"):
        with pytest.raises(ValidationError, match="customColor must be a hex color"):
            require_hex_color(bad, "customColor")


def test_split_csv():
    assert split_csv("eng, spa") == ["eng", "spa"]
    assert split_csv(" eng ,, fra ,") == ["eng", "fra"]
    assert split_csv(" , ") == []
