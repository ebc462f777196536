"""
Test suite for TableRendererNotifier.

Uses httpx.MockTransport in place of the renderer service.

System role: Verification of the best-effort table notification
"""

import json
import uuid

import httpx
import pytest

from legal_pipeline.boundary.notifications import TableRendererNotifier
from legal_pipeline.configs.notifications import NotificationSettings

RENDERER_URL = "https://renderer.internal/render-tables"


def _notifier(handler, url: str | None = RENDERER_URL, internal_key: str | None = "test-key"):
    return TableRendererNotifier(
        NotificationSettings(url=url, timeout_seconds=1.0),
        internal_key=internal_key,
        transport=httpx.MockTransport(handler),
    )


class TestNotify:
    """Test suite for TableRendererNotifier.notify()."""

    @pytest.mark.asyncio
    async def test_posts_document_and_indices(self) -> None:
        """Test the payload and internal key header are sent."""
        # Arrange
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(202)

        document_id = uuid.uuid4()

        # Act
        sent = await _notifier(handler).notify(document_id, [0, 4])

        # Assert
        assert sent is True
        assert len(requests) == 1
        assert str(requests[0].url) == RENDERER_URL
        assert requests[0].headers["x-internal-key"] == "test-key"
        assert json.loads(requests[0].content) == {
            "document_id": str(document_id),
            "chunk_indices": [0, 4],
        }

    @pytest.mark.asyncio
    async def test_no_key_header_without_key(self) -> None:
        """Test the header is omitted when no internal key is configured."""
        # Arrange
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200)

        # Act
        await _notifier(handler, internal_key=None).notify(uuid.uuid4(), [1])

        # Assert
        assert "x-internal-key" not in requests[0].headers

    @pytest.mark.asyncio
    async def test_disabled_without_url(self) -> None:
        """Test nothing is sent when no renderer URL is configured."""
        # Arrange
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("renderer must not be called")

        notifier = _notifier(handler, url=None)

        # Act
        sent = await notifier.notify(uuid.uuid4(), [0])

        # Assert
        assert notifier.enabled is False
        assert sent is False

    @pytest.mark.asyncio
    async def test_error_status_is_swallowed(self) -> None:
        """Test a 5xx from the renderer returns False instead of raising."""
        # Arrange
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503)

        # Act & Assert
        assert await _notifier(handler).notify(uuid.uuid4(), [0]) is False

    @pytest.mark.asyncio
    async def test_connection_error_is_swallowed(self) -> None:
        """Test a transport failure returns False instead of raising."""
        # Arrange
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        # Act & Assert
        assert await _notifier(handler).notify(uuid.uuid4(), [0]) is False
