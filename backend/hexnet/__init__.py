"""
HexNet — Application Package Initializer
==========================================

What:  Converter between CIDR routes and DHCP classless static route hex
       streams (options 121 and 249), with a small web UI and JSON API.

Architecture Note:
    The package follows a layered layout:

    ┌─────────────────────────────────────┐
    │           Routes (HTTP Layer)       │  ← HTML page, JSON API, health
    ├─────────────────────────────────────┤
    │     Services (Conversion Logic)     │  ← line handling, route codec
    ├─────────────────────────────────────┤
    │           Schemas (Contracts)       │  ← Pydantic request/response models
    └─────────────────────────────────────┘

    The route codec in services/route_codec.py is pure and has no HTTP or
    framework imports; everything above it is a thin wrapper.
"""

__version__ = "1.0.0"
