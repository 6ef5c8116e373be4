"""
HexNet — Pydantic Request/Response Schemas
============================================

What:  Pydantic models defining the JSON API contract.
How:   FastAPI validates request bodies against these models, serializes
       responses through them, and builds the OpenAPI docs from them.
Who:   Used by routes/api.py and routes/health.py; ConversionRow is also the
       row type ConverterService produces for the HTML page.

The codec itself works with plain dataclasses (DecodedRoute, DecodeResult);
the from_* helpers below convert them at the API boundary.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from hexnet.exceptions import RouteCodecError
from hexnet.services.route_codec import DecodedRoute


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class EncodeRequest(BaseModel):
    """Body of POST /api/encode."""
    target: str = Field(description="Destination network in CIDR form", examples=["192.168.0.0/24"])
    route: str = Field(description="Gateway IPv4 address", examples=["192.168.0.1"])


class DecodeRequest(BaseModel):
    """Body of POST /api/decode."""
    hex: str = Field(
        description="Hex stream of one or more records, optional 0x prefix",
        examples=["0x18c0a800c0a80001"],
    )


class ConvertRequest(BaseModel):
    """
    Body of POST /api/convert.

    data holds the same text the HTML form accepts: one conversion per line,
    either "targetCIDR routeIP" or a single hex stream.
    """
    data: str = Field(
        description="Newline-separated conversion lines",
        examples=["192.168.0.0/24 192.168.0.1\n0x18c0a800c0a80001"],
    )


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ConversionRow(BaseModel):
    """
    One row of the conversion table.

    Fields are empty strings rather than null so the HTML template can print
    them directly; error is non-empty only for a failed line.
    """
    target: str = Field(default="", description="Destination network, CIDR form")
    route: str = Field(default="", description="Gateway address")
    hex: str = Field(default="", description="Single-record hex, 0x-prefixed")
    error: str = Field(default="", description="Error text for this line, if any")

    @classmethod
    def from_record(cls, record: DecodedRoute) -> "ConversionRow":
        return cls(target=record.target, route=record.route, hex=record.hex)


class EncodeResponse(BaseModel):
    """Result of POST /api/encode."""
    target: str
    route: str
    hex: str = Field(description="Encoded record, 0x-prefixed lowercase hex")


class RouteRecord(BaseModel):
    """A decoded record, including the wire-level fields."""
    target: str = Field(description="Destination network with zero-filled trailing bytes")
    route: str = Field(description="Gateway address")
    hex: str = Field(description="This record re-encoded; matches its slice of the input")
    prefix_length: int = Field(description="Value of the record's length byte (0-255)")
    network_bytes: str = Field(description="Significant network bytes as stored, lowercase hex")

    @classmethod
    def from_record(cls, record: DecodedRoute) -> "RouteRecord":
        return cls(
            target=record.target,
            route=record.route,
            hex=record.hex,
            prefix_length=record.prefix_length,
            network_bytes=record.network_bytes.hex(),
        )


class CodecErrorDetail(BaseModel):
    """Why decoding stopped."""
    code: str = Field(description="Error kind, e.g. truncated_record")
    message: str
    details: dict = Field(default_factory=dict)

    @classmethod
    def from_error(cls, error: RouteCodecError) -> "CodecErrorDetail":
        return cls(code=error.code, message=error.message, details=error.context)


class DecodeResponse(BaseModel):
    """
    Result of POST /api/decode.

    A truncated stream is still a 200: records holds everything decoded before
    the truncation and error says where it stopped.
    """
    records: List[RouteRecord] = Field(default_factory=list)
    error: Optional[CodecErrorDetail] = Field(
        default=None,
        description="Set when the stream ended mid-record; null on full success",
    )


class ConvertResponse(BaseModel):
    """Result of POST /api/convert; rows in the order lines were submitted."""
    rows: List[ConversionRow]
    error_count: int = Field(description="Number of rows carrying an error")


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "invalid_cidr",
            "message": "invalid target CIDR: not-a-cidr",
            "details": {"target": "not-a-cidr"},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health."""
    status: str = Field(description="Overall service status")
    version: str = Field(description="Application version")
    uptime_seconds: float = Field(description="Seconds since service started")
