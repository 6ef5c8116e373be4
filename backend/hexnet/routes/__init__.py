# Routes package init
"""
HexNet — Routes Package
=========================

What:  HTTP route handlers.

Route Inventory:
    - page.py:    GET  /              (converter form)
                  POST /              (convert form input, render table)
    - api.py:     POST /api/encode    (one route → hex)
                  POST /api/decode    (hex stream → routes)
                  POST /api/convert   (lines → rows, JSON twin of the form)
    - health.py:  GET  /health        (service health check)

Routes stay thin: parse the request, call a service, shape the response.
"""
