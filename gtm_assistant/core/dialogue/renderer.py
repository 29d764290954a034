"""
Content renderer contract and HTTP client.

The renderer runs separately and turns a StructuredCommand into an
artifact (image, document). The dialogue manager only looks at the
success flag and the returned handle.

Renderer API:
- POST /api/render - Render a command, returns {artifact_handle} or {error}
"""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

import httpx

from gtm_assistant.config import get_settings
from gtm_assistant.core.intelligence.session.models import StructuredCommand

logger = logging.getLogger(__name__)


class RendererError(Exception):
    """Raised when the renderer cannot be reached or misbehaves."""
    pass


@dataclass
class RenderResult:
    """Outcome of one render call."""

    success: bool
    artifact_handle: str = ""

    # Diagnostic text for logs only; never shown to users
    error_detail: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "RenderResult":
        """Create from API response dict."""
        handle = data.get("artifact_handle") or data.get("url") or data.get("image_url") or ""
        success = data.get("success", bool(handle))
        return cls(
            success=bool(success) and bool(handle),
            artifact_handle=handle,
            error_detail=data.get("error_detail", data.get("error")),
        )


class ContentRenderer(Protocol):
    """Anything that can render a StructuredCommand."""

    async def render(self, command: StructuredCommand) -> RenderResult:
        ...


class HttpContentRenderer:
    """HTTP client for the content renderer API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize client.

        Args:
            base_url: Renderer base URL (defaults to settings)
            timeout: Request timeout in seconds (defaults to settings)
            transport: Optional httpx transport (for testing)
        """
        settings = get_settings()
        self.base_url = base_url or settings.renderer_url
        self.timeout = timeout if timeout is not None else settings.renderer_timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

        if not self.base_url:
            raise RendererError("Renderer base URL is not configured")

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def render(self, command: StructuredCommand) -> RenderResult:
        """Render a command.

        Args:
            command: Renderer-ready command

        Returns:
            RenderResult; transport and HTTP errors become success=False
        """
        client = await self._get_client()

        payload = command.to_dict()
        payload["prompt"] = command.to_prompt()

        try:
            response = await client.post("/api/render", json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Renderer request failed: {e}")
            return RenderResult(success=False, error_detail=str(e))

        try:
            data = response.json()
        except ValueError:
            data = None

        if response.status_code not in (200, 201):
            body = data if isinstance(data, dict) else {}
            detail = body.get("error") or body.get("message") or f"HTTP {response.status_code}"
            logger.error(f"Renderer returned {response.status_code}: {detail}")
            return RenderResult(success=False, error_detail=detail)

        if not isinstance(data, dict):
            logger.error(f"Renderer returned a non-object body: {type(data).__name__}")
            return RenderResult(success=False, error_detail="Malformed renderer response")

        result = RenderResult.from_dict(data)
        if not result.success and result.error_detail is None:
            result.error_detail = "Renderer response carried no artifact"
        return result
