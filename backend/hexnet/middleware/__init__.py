# Middleware package init
"""
HexNet — Middleware Package
=============================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Rate Limit] → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Rate Limit first: reject abusive clients before any processing
    2. Request ID: set the correlation ID used by logs and error bodies
    3. Logging: one access line per request, with the request ID
    4. CORS: FastAPI's CORSMiddleware (handles preflight)

    Responses pass back through the chain in reverse, which is where the
    X-Request-ID header is added and the request duration is measured.
"""
