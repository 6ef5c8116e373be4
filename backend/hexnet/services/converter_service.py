"""
HexNet — Converter Service (Line Dispatch)
============================================

What:  Turns the free-form text a user submits into conversion table rows.
How:   Each non-blank line is classified by token count and routed to the
       route codec:

           "192.168.0.0/24 192.168.0.1"   2 tokens → encode_route()
           "0x18c0a800c0a80001"           1 token  → decode_stream()
           anything else                           → "line format invalid"

Who:   Called by the HTML page route and POST /api/convert.

Error Handling:
    Lines are independent. A failing line becomes a row with its error text
    and the batch carries on. A stream that fails part-way contributes the
    records decoded before the failure, followed by one error row holding
    the original hex. Only a request that is too large as a whole raises
    (ValidationError → 400).
"""

import logging
from typing import List, Optional

from hexnet.config import settings
from hexnet.exceptions import RouteCodecError, ValidationError
from hexnet.schemas.route import ConversionRow
from hexnet.services.route_codec import decode_stream, encode_route

logger = logging.getLogger(__name__)


class ConverterService:
    """
    Stateless dispatcher from input lines to ConversionRows.

    Args:
        max_lines: Non-blank line limit per call (default: settings.max_input_lines)
        max_bytes: UTF-8 size limit of the text (default: settings.max_input_bytes)
    """

    def __init__(self, max_lines: Optional[int] = None, max_bytes: Optional[int] = None):
        self.max_lines = max_lines or settings.max_input_lines
        self.max_bytes = max_bytes or settings.max_input_bytes

    def validate_size(self, text: str, field: str = "data") -> None:
        """
        Raises:
            ValidationError: text is larger than max_bytes once UTF-8 encoded.
        """
        size = len(text.encode("utf-8"))
        if size > self.max_bytes:
            raise ValidationError(
                message=f"Input is too large ({size} bytes). Maximum is {self.max_bytes} bytes.",
                field=field,
                context={"size": size, "max_bytes": self.max_bytes},
            )

    def _split_lines(self, text: str) -> List[str]:
        lines = [line.strip() for line in text.strip().splitlines()]
        lines = [line for line in lines if line]
        if len(lines) > self.max_lines:
            raise ValidationError(
                message=f"Too many lines ({len(lines)}). Maximum is {self.max_lines} per request.",
                field="data",
                context={"lines": len(lines), "max_lines": self.max_lines},
            )
        return lines

    def encode_pair(self, target: str, route: str) -> ConversionRow:
        """Encode one "target route" line; codec errors become the row's error."""
        row = ConversionRow(target=target, route=route)
        try:
            row.hex = encode_route(target, route)
        except RouteCodecError as e:
            row.error = e.message
        return row

    def decode_line(self, hex_blob: str) -> List[ConversionRow]:
        """Decode one hex stream line into one row per record, plus an error row on failure."""
        result = decode_stream(hex_blob)
        rows = [ConversionRow.from_record(record) for record in result.records]
        if result.error is not None:
            rows.append(ConversionRow(hex=hex_blob, error=result.error.message))
        return rows

    def convert_line(self, line: str) -> List[ConversionRow]:
        parts = line.split()
        if len(parts) == 1:
            return self.decode_line(parts[0])
        if len(parts) == 2:
            return [self.encode_pair(parts[0], parts[1])]
        return [ConversionRow(error=f"line format invalid: {line}")]

    def convert_lines(self, text: str) -> List[ConversionRow]:
        """
        Convert every non-blank line of text, preserving input order.

        Raises:
            ValidationError: Text exceeds max_bytes or max_lines.
        """
        self.validate_size(text)
        lines = self._split_lines(text)

        rows: List[ConversionRow] = []
        for line in lines:
            line_rows = self.convert_line(line)
            for row in line_rows:
                if row.error:
                    logger.debug("Line %r failed: %s", line, row.error)
            rows.extend(line_rows)

        error_count = sum(1 for row in rows if row.error)
        logger.info(
            "Converted %d lines into %d rows (%d errors)",
            len(lines),
            len(rows),
            error_count,
        )
        return rows


converter_service = ConverterService()
