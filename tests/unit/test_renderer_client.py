"""Tests for the content renderer HTTP client."""

import json

import httpx
import pytest

from gtm_assistant.core.dialogue.renderer import (
    HttpContentRenderer,
    RenderResult,
    RendererError,
)
from gtm_assistant.core.dialogue.manager import DialogueManager
from gtm_assistant.core.intelligence.session.models import StructuredCommand
from gtm_assistant.core.intelligence.session.state import Stage
from gtm_assistant.core.intelligence.session.store import SessionStore

BASE_URL = "http://renderer.test"


@pytest.fixture
def command():
    return StructuredCommand(
        subject="business solution",
        domain="retail",
        elements=["office_building", "retail_store"],
    )


def _renderer(handler) -> HttpContentRenderer:
    return HttpContentRenderer(
        base_url=BASE_URL,
        timeout=5.0,
        transport=httpx.MockTransport(handler),
    )


class TestHttpContentRenderer:
    """Test renderer client against a mock transport."""

    @pytest.mark.asyncio
    async def test_render_success(self, command):
        """Test successful render posts command and prompt."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"artifact_handle": "https://cdn.test/a.png"})

        renderer = _renderer(handler)
        result = await renderer.render(command)
        await renderer.close()

        assert result.success
        assert result.artifact_handle == "https://cdn.test/a.png"
        assert seen["path"] == "/api/render"
        assert seen["body"]["domain"] == "retail"
        assert seen["body"]["prompt"] == command.to_prompt()

    @pytest.mark.asyncio
    async def test_render_accepts_image_url(self, command):
        renderer = _renderer(
            lambda request: httpx.Response(201, json={"image_url": "https://cdn.test/b.png"})
        )

        result = await renderer.render(command)

        assert result.success
        assert result.artifact_handle == "https://cdn.test/b.png"

    @pytest.mark.asyncio
    async def test_render_http_error_status(self, command):
        renderer = _renderer(
            lambda request: httpx.Response(500, json={"error": "GPU out of memory"})
        )

        result = await renderer.render(command)

        assert not result.success
        assert result.error_detail == "GPU out of memory"

    @pytest.mark.asyncio
    async def test_render_non_json_error(self, command):
        renderer = _renderer(lambda request: httpx.Response(502, text="Bad Gateway"))

        result = await renderer.render(command)

        assert not result.success
        assert result.error_detail == "HTTP 502"

    @pytest.mark.asyncio
    async def test_render_connection_error(self, command):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        renderer = _renderer(handler)
        result = await renderer.render(command)

        assert not result.success
        assert "connection refused" in result.error_detail

    @pytest.mark.asyncio
    async def test_render_without_artifact(self, command):
        renderer = _renderer(lambda request: httpx.Response(200, json={"success": True}))

        result = await renderer.render(command)

        assert not result.success
        assert result.error_detail == "Renderer response carried no artifact"

    @pytest.mark.parametrize("body", [["x"], "done", 42, None])
    @pytest.mark.asyncio
    async def test_render_non_object_body(self, command, body):
        renderer = _renderer(lambda request: httpx.Response(200, json=body))

        result = await renderer.render(command)

        assert not result.success
        assert result.error_detail == "Malformed renderer response"

    @pytest.mark.asyncio
    async def test_render_non_object_error_body(self, command):
        renderer = _renderer(lambda request: httpx.Response(503, json=["overloaded"]))

        result = await renderer.render(command)

        assert not result.success
        assert result.error_detail == "HTTP 503"

    @pytest.mark.asyncio
    async def test_malformed_body_through_manager(self):
        """Test a malformed renderer reply degrades to the apology."""
        store = SessionStore()
        manager = DialogueManager(
            store=store,
            renderer=_renderer(lambda request: httpx.Response(200, json=["x"])),
        )

        response = await manager.process_turn("s1", "generate an image for retail")

        assert response.message == manager.responses.render_failed()
        assert (await store.get("s1")).stage == Stage.INITIAL

    def test_requires_base_url(self):
        with pytest.raises(RendererError):
            HttpContentRenderer(base_url="")


class TestRenderResult:
    """Test RenderResult parsing."""

    def test_from_dict_success(self):
        result = RenderResult.from_dict({"artifact_handle": "h1"})

        assert result.success
        assert result.error_detail is None

    def test_from_dict_explicit_failure(self):
        result = RenderResult.from_dict({"success": False, "url": "h1", "error": "quota"})

        assert not result.success
        assert result.error_detail == "quota"
