"""
HexNet — Custom Exception Hierarchy
=====================================

What:  Application-specific exceptions for request and codec failures.
How:   Each exception carries a human-readable message and an optional context
       dict. Global handlers registered in main.py turn them into structured
       JSON error responses with the right HTTP status code.
Who:   Raised by the route codec, ConverterService, and middleware.

Exception Hierarchy:
    HexNetError (base)
    ├── ValidationError            → 400 Bad Request (request-level input)
    ├── RateLimitExceededError     → 429 Too Many Requests
    └── RouteCodecError            (code: machine-readable error kind)
        ├── InvalidCIDRError       → 400  "invalid_cidr"
        ├── InvalidGatewayError    → 400  "invalid_gateway"
        ├── InvalidHexError        → 400  "invalid_hex"
        ├── TruncatedStreamError   → returned in DecodeResult, "truncated_stream"
        └── TruncatedRecordError   → returned in DecodeResult, "truncated_record"

The encoder raises codec errors. The stream decoder catches them and hands
them back inside a DecodeResult so records decoded before the failure are
not lost.
"""

from typing import Any, Dict, Optional


class HexNetError(Exception):
    """
    Base exception for all HexNet application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info for logs and the error "details" field
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(HexNetError):
    """
    Raised when a request is unusable as a whole.

    When:    Too many lines or too many bytes submitted for conversion.
    HTTP:    400 Bad Request

    Per-line problems (a bad CIDR on line 3) are not ValidationErrors; they
    are reported in that line's result row.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class RateLimitExceededError(HexNetError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP:    429 Too Many Requests, with a Retry-After header.
    """

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after


# ══════════════════════════════════════════════════════════════════════════
# Route Codec Errors
# ══════════════════════════════════════════════════════════════════════════


class RouteCodecError(HexNetError):
    """
    Base for errors raised while encoding or decoding route records.

    Attributes:
        code: Machine-readable error kind, used as the "error" field in
              API responses.
    """

    code = "route_codec_error"


class InvalidCIDRError(RouteCodecError):
    """Target is not an IPv4 CIDR such as 192.168.0.0/24."""

    code = "invalid_cidr"

    def __init__(self, target: str, reason: Optional[str] = None):
        message = f"invalid target CIDR: {target}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message=message, context={"target": target})
        self.target = target


class InvalidGatewayError(RouteCodecError):
    """Gateway is not an IPv4 address."""

    code = "invalid_gateway"

    def __init__(self, route: str, reason: Optional[str] = None):
        message = f"invalid route IP: {route}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message=message, context={"route": route})
        self.route = route


class InvalidHexError(RouteCodecError):
    """Blob has odd length or non-hex characters after the optional 0x."""

    code = "invalid_hex"

    def __init__(self, hex_blob: str, reason: Optional[str] = None):
        message = "invalid hex string"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message=message, context={"hex": hex_blob})


class TruncatedStreamError(RouteCodecError):
    """No byte left for the next record's length field."""

    code = "truncated_stream"

    def __init__(self, offset: int, decoded: int = 0):
        super().__init__(
            message="unexpected end of data",
            context={"offset": offset, "decoded_records": decoded},
        )
        self.offset = offset


class TruncatedRecordError(RouteCodecError):
    """
    Fewer bytes remain than the record's length byte declares.

    Attributes:
        offset:        Byte offset of the record's length byte.
        prefix_length: Value of that length byte.
        needed:        Network + gateway bytes the record requires.
        available:     Bytes actually left after the length byte.
    """

    code = "truncated_record"

    def __init__(
        self,
        offset: int,
        prefix_length: int,
        needed: int,
        available: int,
        decoded: int = 0,
    ):
        super().__init__(
            message="not enough data for record",
            context={
                "offset": offset,
                "prefix_length": prefix_length,
                "needed": needed,
                "available": available,
                "decoded_records": decoded,
            },
        )
        self.offset = offset
        self.prefix_length = prefix_length
        self.needed = needed
        self.available = available
