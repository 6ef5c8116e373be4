"""
HexNet — Converter Page Route Handlers
========================================

What:  Serves the HTML converter at "/" (GET shows the form, POST converts).
How:   The form's "data" textarea goes through ConverterService and the rows
       are rendered into templates/index.html with Jinja2.
Who:   Browsers.

Other methods on "/" get FastAPI's 405.
"""

import logging
from pathlib import Path

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from hexnet.exceptions import ValidationError
from hexnet.services.converter_service import converter_service

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

router = APIRouter(tags=["Page"])


@router.get("/", response_class=HTMLResponse, summary="Converter page")
async def show_page(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(request, "index.html", {"data": "", "rows": []})


@router.post("/", response_class=HTMLResponse, summary="Convert submitted lines")
async def convert_page(request: Request, data: str = Form(default="")) -> HTMLResponse:
    """
    Convert the submitted lines and render the result table.

    An oversized submission is shown on the page with status 400 instead of
    the JSON error body the API routes return.
    """
    try:
        rows = converter_service.convert_lines(data)
    except ValidationError as e:
        logger.warning("Rejected form submission: %s", e.message)
        return templates.TemplateResponse(
            request,
            "index.html",
            {"data": data, "rows": [], "page_error": e.message},
            status_code=400,
        )

    return templates.TemplateResponse(request, "index.html", {"data": data, "rows": rows})
