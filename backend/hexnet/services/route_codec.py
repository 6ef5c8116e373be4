"""
HexNet — Classless Static Route Codec
======================================

What:  Converts between CIDR routes and the packed byte form used by DHCP
       options 121 (RFC 3442) and 249 (Microsoft legacy), shown as hex.
How:   Two pure functions: encode_route() for one (CIDR, gateway) pair and
       decode_stream() for a blob holding any number of concatenated records.
Who:   Called by ConverterService and the JSON API routes.

Wire Format:
    record := prefix_length (1 byte)
              network_bytes (ceil(prefix_length / 8) bytes, 0-4)
              gateway_bytes (4 bytes)
    stream := record*                      (no delimiter between records)
    blob   := ("0x" | "0X")? hex(stream)   (output is always lowercase "0x...")

    Example: 192.168.0.0/24 via 192.168.0.1

        18        c0 a8 00     c0 a8 00 01
        ──        ────────     ───────────
        /24       192.168.0    192.168.0.1

Decoding is partial-success: records decoded before a truncation are returned
together with the error in a DecodeResult, since an exception alone cannot
carry them back to the caller.
"""

import ipaddress
import logging
import string
from dataclasses import dataclass, field
from typing import List, Optional

from hexnet.exceptions import (
    InvalidCIDRError,
    InvalidGatewayError,
    InvalidHexError,
    RouteCodecError,
    TruncatedRecordError,
    TruncatedStreamError,
)

logger = logging.getLogger(__name__)

IPV4_LENGTH = 4
GATEWAY_LENGTH = 4
HEX_PREFIXES = ("0x", "0X")
HEX_DIGITS = frozenset(string.hexdigits)


# ══════════════════════════════════════════════════════════════════════════
# Record Format Helpers
# ══════════════════════════════════════════════════════════════════════════


def prefix_byte_length(prefix_length: int) -> int:
    """
    Number of significant network bytes for a prefix length.

    0 for prefix_length <= 0, otherwise ceil(prefix_length / 8):
    1 → 1, 8 → 1, 9 → 2, 24 → 3, 25 → 4, 32 → 4, 255 → 32.
    """
    if prefix_length <= 0:
        return 0
    return (prefix_length + 7) // 8


def pack_record(prefix_length: int, network_bytes: bytes, gateway_bytes: bytes) -> bytes:
    """Concatenate one record: length byte, significant network bytes, gateway."""
    return bytes([prefix_length]) + network_bytes + gateway_bytes


def to_hex_blob(data: bytes) -> str:
    """Lowercase hex with the 0x prefix."""
    return "0x" + data.hex()


def strip_hex_prefix(hex_blob: str) -> str:
    hex_blob = hex_blob.strip()
    if hex_blob.startswith(HEX_PREFIXES):
        return hex_blob[2:]
    return hex_blob


def format_ipv4(raw: bytes) -> str:
    return str(ipaddress.IPv4Address(raw[:IPV4_LENGTH]))


# ══════════════════════════════════════════════════════════════════════════
# Data Types
# ══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class DecodedRoute:
    """
    One record recovered from a stream.

    target and route are the display forms (network zero-filled to 4 bytes);
    network_bytes keeps the wire bytes exactly as they appeared, so hex is
    always the byte-for-byte slice of the input blob.
    """

    target: str
    route: str
    hex: str
    prefix_length: int
    network_bytes: bytes
    gateway_bytes: bytes


@dataclass
class DecodeResult:
    """
    Outcome of decode_stream().

    Attributes:
        records: Records decoded in input order, up to the failure point.
        error:   The codec error that stopped decoding, or None.
    """

    records: List[DecodedRoute] = field(default_factory=list)
    error: Optional[RouteCodecError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> List[DecodedRoute]:
        """Return the records, or raise the stored error if decoding failed."""
        if self.error is not None:
            raise self.error
        return self.records


# ══════════════════════════════════════════════════════════════════════════
# Encoder
# ══════════════════════════════════════════════════════════════════════════


def parse_cidr(target_cidr: str) -> ipaddress.IPv4Interface:
    """
    Parse "a.b.c.d/len" keeping the address as written.

    Host bits are not cleared: 192.168.1.7/24 yields address 192.168.1.7 with
    prefix 24. A bare address or a netmask after the slash is rejected.

    Raises:
        InvalidCIDRError: Malformed, not IPv4, or prefix outside 0-32.
    """
    text = target_cidr.strip()
    address, sep, prefix = text.partition("/")
    if not sep or not prefix.isdigit():
        raise InvalidCIDRError(target_cidr)
    try:
        return ipaddress.IPv4Interface(f"{address}/{int(prefix)}")
    except ValueError as e:
        raise InvalidCIDRError(target_cidr, reason=str(e)) from e


def parse_gateway(route_ip: str) -> ipaddress.IPv4Address:
    """
    Parse a gateway address.

    IPv4-mapped IPv6 ("::ffff:10.0.0.1") is accepted and reduced to its IPv4
    address; any other IPv6 address is rejected.

    Raises:
        InvalidGatewayError: Malformed, or IPv6 without an IPv4 mapping.
    """
    text = route_ip.strip()
    try:
        return ipaddress.IPv4Address(text)
    except ValueError as e:
        error = e

    try:
        mapped = ipaddress.IPv6Address(text).ipv4_mapped
    except ValueError:
        mapped = None
    if mapped is None:
        raise InvalidGatewayError(route_ip, reason=str(error)) from error
    return mapped


def encode_route(target_cidr: str, route_ip: str) -> str:
    """
    Encode one route as a single-record hex blob.

    Example:
        >>> encode_route("192.168.0.0/24", "192.168.0.1")
        '0x18c0a800c0a80001'
        >>> encode_route("10.0.0.0/0", "10.0.0.1")
        '0x000a000001'

    Raises:
        InvalidCIDRError:    target_cidr cannot be parsed as IPv4 CIDR.
        InvalidGatewayError: route_ip cannot be parsed as IPv4.
    """
    interface = parse_cidr(target_cidr)
    prefix_length = interface.network.prefixlen
    network_bytes = interface.ip.packed[:prefix_byte_length(prefix_length)]

    gateway = parse_gateway(route_ip)

    return to_hex_blob(pack_record(prefix_length, network_bytes, gateway.packed))


# ══════════════════════════════════════════════════════════════════════════
# Stream Decoder
# ══════════════════════════════════════════════════════════════════════════


def _hex_to_bytes(hex_blob: str) -> bytes:
    digits = strip_hex_prefix(hex_blob)
    # Checked by hand: bytes.fromhex() would accept inner whitespace
    bad = next((c for c in digits if c not in HEX_DIGITS), None)
    if bad is not None:
        raise InvalidHexError(hex_blob, reason=f"invalid byte: {bad!r}")
    if len(digits) % 2:
        raise InvalidHexError(hex_blob, reason="odd length hex string")
    return bytes.fromhex(digits)


def _decode_records(data: bytes, records: List[DecodedRoute]) -> None:
    """
    Walk data record by record, appending to records as each one completes.

    Appending in place means the caller still holds every finished record
    when a truncation error escapes.
    """
    i = 0
    while i < len(data):
        if i + 1 > len(data):
            raise TruncatedStreamError(offset=i, decoded=len(records))

        prefix_length = data[i]
        i += 1

        bytes_needed = prefix_byte_length(prefix_length)
        if i + bytes_needed + GATEWAY_LENGTH > len(data):
            raise TruncatedRecordError(
                offset=i - 1,
                prefix_length=prefix_length,
                needed=bytes_needed + GATEWAY_LENGTH,
                available=len(data) - i,
                decoded=len(records),
            )

        network_bytes = data[i:i + bytes_needed]
        i += bytes_needed
        gateway_bytes = data[i:i + GATEWAY_LENGTH]
        i += GATEWAY_LENGTH

        network = network_bytes[:IPV4_LENGTH].ljust(IPV4_LENGTH, b"\x00")

        records.append(
            DecodedRoute(
                target=f"{format_ipv4(network)}/{prefix_length}",
                route=format_ipv4(gateway_bytes),
                hex=to_hex_blob(pack_record(prefix_length, network_bytes, gateway_bytes)),
                prefix_length=prefix_length,
                network_bytes=network_bytes,
                gateway_bytes=gateway_bytes,
            )
        )


def decode_stream(hex_blob: str) -> DecodeResult:
    """
    Decode a hex blob of zero or more concatenated records.

    Never raises for bad input: the error, if any, is returned in the result
    alongside the records decoded before it. An empty blob ("" or "0x")
    decodes to no records and no error.

    Prefix lengths above 32 are not rejected. Their byte count follows the
    same ceiling rule, so they almost always end in TruncatedRecordError.

    Example:
        >>> result = decode_stream("0x18c0a800c0a80001")
        >>> result.records[0].target, result.records[0].route
        ('192.168.0.0/24', '192.168.0.1')
    """
    result = DecodeResult()
    try:
        data = _hex_to_bytes(hex_blob)
        _decode_records(data, result.records)
    except RouteCodecError as e:
        logger.debug("Stream decode stopped after %d records: %s", len(result.records), e.message)
        result.error = e
    return result
