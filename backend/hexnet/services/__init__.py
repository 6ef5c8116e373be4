# Services package init
"""
HexNet — Services Layer
=========================

What:  Conversion logic, independent of HTTP.

Service Inventory:
    - route_codec: encode_route() / decode_stream(), the pure wire codec
    - ConverterService: classifies input lines and dispatches them to the codec
"""
