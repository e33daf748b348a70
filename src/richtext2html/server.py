"""FastAPI web service for rich-text rendering.

Endpoints::

    POST /render           Send rich-text JSON blocks, receive HTML or text.
    POST /render/markdown  Send raw Markdown text, receive HTML.
    GET  /health           Health check.
    GET  /presets          List available markup presets.

Run::

    uvicorn richtext2html.server:app --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from fastapi import FastAPI, Form, HTTPException
from fastapi.responses import HTMLResponse, PlainTextResponse, Response
from pydantic import BaseModel, Field

from richtext2html import __version__
from richtext2html.converter import Converter
from richtext2html.markup import MarkupManager
from richtext2html.parser import DocumentError

app = FastAPI(
    title="richtext2html",
    description="Rich-text to HTML rendering service",
    version=__version__,
)


class RenderRequest(BaseModel):
    blocks: list[dict[str, Any]] = Field(default_factory=list)
    # A typed field (SliceZone, Group, Image...) rendered instead of blocks
    fragment: Optional[dict[str, Any]] = None
    preset: str = "default"
    format: Literal["html", "text"] = "html"


def _converter(preset: str) -> Converter:
    try:
        return Converter(preset=preset)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


@app.get("/presets")
async def list_presets() -> dict[str, list[str]]:
    """List available markup presets."""
    return {"presets": MarkupManager.PRESETS}


@app.post("/render")
async def render(request: RenderRequest) -> Response:
    """Render rich-text blocks.

    - **blocks**: the rich-text block list
    - **fragment**: a typed document field, used instead of blocks when set
    - **preset**: markup preset name (default, xhtml)
    - **format**: ``html`` or ``text``
    """
    converter = _converter(request.preset)
    data = request.fragment if request.fragment is not None else request.blocks
    try:
        if request.format == "text":
            return PlainTextResponse(converter.convert_text(data))
        return HTMLResponse(converter.convert_json(data))
    except DocumentError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@app.post("/render/markdown", response_class=HTMLResponse)
async def render_markdown(
    markdown: str = Form(...),
    preset: str = Form("default"),
) -> HTMLResponse:
    """Send raw Markdown text and receive HTML.

    - **markdown**: Markdown source text
    - **preset**: markup preset name
    """
    converter = _converter(preset)
    return HTMLResponse(converter.convert_markdown(markdown))
