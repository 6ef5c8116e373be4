"""
HexNet — Converter Service Unit Tests
=======================================

What:  Tests for ConverterService line classification and row building.

What we test:
    ✅ Pair lines are encoded, single tokens are decoded
    ✅ Blank lines skipped, other token counts reported per line
    ✅ Errors stay on their own row and never abort the batch
    ✅ Partial records are kept when a stream is truncated
    ✅ Line and size limits raise ValidationError
"""

import pytest

from hexnet.exceptions import ValidationError
from hexnet.schemas.route import ConversionRow


class TestConvertLines:
    """Tests for ConverterService.convert_lines()."""

    def test_pair_line_is_encoded(self, converter):
        rows = converter.convert_lines("192.168.0.0/24 192.168.0.1")
        assert rows == [
            ConversionRow(target="192.168.0.0/24", route="192.168.0.1", hex="0x18c0a800c0a80001")
        ]

    def test_single_token_is_decoded(self, converter, sample_blob):
        rows = converter.convert_lines(sample_blob["blob"])
        assert [(r.target, r.route, r.hex, r.error) for r in rows] == [
            (t, r, h, "") for t, r, h in sample_blob["records"]
        ]

    def test_mixed_lines_keep_order(self, converter):
        text = (
            "0x000a000001\n"
            "\n"
            "   \n"
            "192.168.0.0/24\t192.168.0.1\r\n"
            "  10.0.0.0/8   10.0.0.254  \n"
        )
        rows = converter.convert_lines(text)
        assert [(r.target, r.hex) for r in rows] == [
            ("0.0.0.0/0", "0x000a000001"),
            ("192.168.0.0/24", "0x18c0a800c0a80001"),
            ("10.0.0.0/8", "0x080a0a0000fe"),
        ]

    def test_too_many_tokens(self, converter):
        rows = converter.convert_lines("10.0.0.0/8 10.0.0.1 extra")
        assert rows == [ConversionRow(error="line format invalid: 10.0.0.0/8 10.0.0.1 extra")]

    def test_empty_input_gives_no_rows(self, converter):
        assert converter.convert_lines("") == []
        assert converter.convert_lines("\n  \n") == []

    def test_encode_error_stays_on_its_row(self, converter):
        rows = converter.convert_lines("not-a-cidr 10.0.0.1\n10.0.0.0/8 10.0.0.1")

        assert len(rows) == 2
        assert rows[0].target == "not-a-cidr"
        assert rows[0].route == "10.0.0.1"
        assert rows[0].hex == ""
        assert rows[0].error.startswith("invalid target CIDR")
        assert rows[1].error == ""
        assert rows[1].hex == "0x080a0a000001"

    def test_bad_gateway(self, converter):
        rows = converter.convert_lines("10.0.0.0/8 10.0.0.999")
        assert rows[0].error.startswith("invalid route IP")

    def test_invalid_hex_row(self, converter):
        rows = converter.convert_lines("0xzz")
        assert len(rows) == 1
        assert rows[0].hex == "0xzz"
        assert rows[0].error.startswith("invalid hex string")

    def test_truncated_stream_keeps_decoded_records(self, converter, sample_blob):
        truncated = sample_blob["blob"][:-2]
        rows = converter.convert_lines(truncated)

        assert len(rows) == 2
        assert (rows[0].target, rows[0].route, rows[0].hex) == sample_blob["records"][0]
        assert rows[0].error == ""
        assert rows[1] == ConversionRow(hex=truncated, error="not enough data for record")


class TestLimits:
    """Request-level limits."""

    def test_line_limit(self, converter):
        text = "\n".join(["0x000a000001"] * 6)
        with pytest.raises(ValidationError, match="Too many lines") as exc_info:
            converter.convert_lines(text)
        assert exc_info.value.field == "data"
        assert exc_info.value.context["max_lines"] == 5

    def test_blank_lines_do_not_count(self, converter):
        text = "\n\n".join(["0x000a000001"] * 5)
        assert len(converter.convert_lines(text)) == 5

    def test_size_limit(self, converter):
        with pytest.raises(ValidationError, match="too large"):
            converter.convert_lines("0" * 2049)

    def test_validate_size_names_the_field(self, converter):
        with pytest.raises(ValidationError) as exc_info:
            converter.validate_size("f" * 2049, field="hex")
        assert exc_info.value.field == "hex"
        assert exc_info.value.context == {"size": 2049, "max_bytes": 2048, "field": "hex"}

    def test_validate_size_counts_utf8_bytes(self, converter):
        converter.validate_size("f" * 2048)
        with pytest.raises(ValidationError):
            converter.validate_size("é" * 1025)
