"""
HexNet — JSON API Route Handlers
==================================

What:  JSON endpoints for encoding, decoding and batch conversion.
How:   Thin wrappers over the route codec and ConverterService. Every field
       is held to settings.max_input_bytes before any decoding. Errors are
       raised and formatted by the global exception handlers in main.py.
Who:   Scripts and provisioning tools that build DHCP option payloads.

Route Inventory:
    POST /api/encode    {target, route} → single-record hex
    POST /api/decode    {hex}           → records (+ error on truncation)
    POST /api/convert   {data}          → rows, same as the HTML form
"""

import logging

from fastapi import APIRouter

from hexnet.exceptions import InvalidHexError
from hexnet.schemas.route import (
    CodecErrorDetail,
    ConvertRequest,
    ConvertResponse,
    DecodeRequest,
    DecodeResponse,
    EncodeRequest,
    EncodeResponse,
    ErrorResponse,
    RouteRecord,
)
from hexnet.services.converter_service import converter_service
from hexnet.services.route_codec import decode_stream, encode_route

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Codec"])


@router.post(
    "/encode",
    response_model=EncodeResponse,
    responses={
        400: {"description": "Invalid CIDR or gateway, or input too large", "model": ErrorResponse},
    },
    summary="Encode one route",
    description=(
        "Encodes a destination CIDR and gateway into one classless static route "
        "record, returned as 0x-prefixed lowercase hex."
    ),
)
async def encode(body: EncodeRequest) -> EncodeResponse:
    converter_service.validate_size(body.target, field="target")
    converter_service.validate_size(body.route, field="route")

    # InvalidCIDRError / InvalidGatewayError propagate to the 400 handler
    hex_blob = encode_route(body.target, body.route)
    return EncodeResponse(target=body.target, route=body.route, hex=hex_blob)


@router.post(
    "/decode",
    response_model=DecodeResponse,
    responses={
        400: {"description": "Not a hex string, or input too large", "model": ErrorResponse},
    },
    summary="Decode a hex stream",
    description=(
        "Decodes zero or more concatenated records. If the stream is truncated, "
        "the records before the truncation are returned together with an error."
    ),
)
async def decode(body: DecodeRequest) -> DecodeResponse:
    """
    Decode a record stream.

    InvalidHex means nothing could be read, so it is raised as a 400.
    Truncation still yields a 200 with the partial records and the error.
    """
    converter_service.validate_size(body.hex, field="hex")

    result = decode_stream(body.hex)
    if isinstance(result.error, InvalidHexError):
        raise result.error

    if result.error is not None:
        logger.info(
            "Partial decode: %d records before %s",
            len(result.records),
            result.error.code,
        )

    return DecodeResponse(
        records=[RouteRecord.from_record(record) for record in result.records],
        error=CodecErrorDetail.from_error(result.error) if result.error else None,
    )


@router.post(
    "/convert",
    response_model=ConvertResponse,
    responses={
        400: {"description": "Input too large", "model": ErrorResponse},
    },
    summary="Convert lines like the web form",
)
async def convert(body: ConvertRequest) -> ConvertResponse:
    rows = converter_service.convert_lines(body.data)
    return ConvertResponse(rows=rows, error_count=sum(1 for row in rows if row.error))
