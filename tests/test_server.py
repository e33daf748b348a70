"""Tests for the FastAPI web service."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

try:
    from httpx import AsyncClient, ASGITransport
    _HAS_HTTPX = True
except ImportError:
    _HAS_HTTPX = False

from richtext2html.server import app

FIXTURE_DIR = Path(__file__).parent / "fixtures"
SAMPLE_JSON = FIXTURE_DIR / "sample.json"
SAMPLE_MD = FIXTURE_DIR / "sample.md"
SLICES_JSON = FIXTURE_DIR / "slices.json"

pytestmark = pytest.mark.skipif(not _HAS_HTTPX, reason="httpx not installed")


@pytest.fixture
def client():
    """Create an async test client."""
    transport = ASGITransport(app=app)
    return AsyncClient(transport=transport, base_url="http://test")


@pytest.fixture
def blocks():
    return json.loads(SAMPLE_JSON.read_text(encoding="utf-8"))


@pytest.mark.asyncio
class TestHealthEndpoint:

    async def test_health(self, client):
        resp = await client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ok"
        assert "version" in data


@pytest.mark.asyncio
class TestPresetsEndpoint:

    async def test_list_presets(self, client):
        resp = await client.get("/presets")
        assert resp.status_code == 200
        data = resp.json()
        assert data["presets"] == ["default", "xhtml"]


@pytest.mark.asyncio
class TestRenderEndpoint:

    async def test_render_html(self, client, blocks):
        resp = await client.post("/render", json={"blocks": blocks})
        assert resp.status_code == 200
        assert "text/html" in resp.headers["content-type"]
        assert resp.text.startswith("<h1>Release notes</h1>")
        assert '<a href="/page/changelog">full changelog</a>' in resp.text

    async def test_render_text(self, client, blocks):
        resp = await client.post("/render", json={"blocks": blocks, "format": "text"})
        assert resp.status_code == 200
        assert "text/plain" in resp.headers["content-type"]
        assert resp.text.startswith("Release notes Read the full changelog")

    async def test_render_xhtml(self, client):
        resp = await client.post(
            "/render",
            json={"blocks": [{"type": "paragraph", "text": "a\nb", "spans": []}], "preset": "xhtml"},
        )
        assert resp.status_code == 200
        assert resp.text == "<p>a<br />b</p>"

    async def test_unknown_preset(self, client, blocks):
        resp = await client.post("/render", json={"blocks": blocks, "preset": "academic"})
        assert resp.status_code == 400
        assert "Unknown preset" in resp.json()["detail"]

    async def test_unknown_format(self, client, blocks):
        resp = await client.post("/render", json={"blocks": blocks, "format": "pdf"})
        assert resp.status_code == 422

    async def test_render_fragment(self, client):
        fragment = json.loads(SLICES_JSON.read_text(encoding="utf-8"))
        resp = await client.post("/render", json={"fragment": fragment})
        assert resp.status_code == 200
        assert resp.text.startswith('<div data-slicetype="intro" class="slice hero">')

    async def test_render_fragment_text(self, client):
        fragment = json.loads(SLICES_JSON.read_text(encoding="utf-8"))
        resp = await client.post("/render", json={"fragment": fragment, "format": "text"})
        assert resp.status_code == 200
        assert resp.text.startswith("Welcome Start here.\nAda")

    async def test_unsupported_fragment(self, client):
        resp = await client.post("/render", json={"fragment": {"type": "Color", "value": "#fff"}})
        assert resp.status_code == 422

    async def test_empty_blocks(self, client):
        resp = await client.post("/render", json={"blocks": []})
        assert resp.status_code == 200
        assert resp.text == ""


@pytest.mark.asyncio
class TestRenderMarkdownEndpoint:

    async def test_render_markdown(self, client):
        resp = await client.post(
            "/render/markdown",
            data={"markdown": "# Hello\n\nParagraph."},
        )
        assert resp.status_code == 200
        assert resp.text == "<h1>Hello</h1><p>Paragraph.</p>"

    async def test_render_sample_fixture(self, client):
        resp = await client.post(
            "/render/markdown",
            data={"markdown": SAMPLE_MD.read_text(encoding="utf-8"), "preset": "xhtml"},
        )
        assert resp.status_code == 200
        assert '<img src="https://images.example.com/banner.png" alt="Banner" />' in resp.text

    async def test_unknown_preset(self, client):
        resp = await client.post(
            "/render/markdown",
            data={"markdown": "# Hello", "preset": "business"},
        )
        assert resp.status_code == 400
