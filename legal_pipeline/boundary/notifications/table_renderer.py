"""
Best-effort notification to the table renderer service.

Ingestion calls this when a new chunk set contains table chunks. A
failed notification never fails the ingestion.

Dependencies: httpx, legal_pipeline.configs
System role: Outbound webhook for table rendering
"""

import logging
from uuid import UUID

import httpx

from legal_pipeline.configs.notifications import NotificationSettings
from legal_pipeline.observability import get_logger, log_with_context

logger = get_logger(__name__)


class TableRendererNotifier:
    """POSTs {document_id, chunk_indices} to the configured renderer URL."""

    def __init__(
        self,
        settings: NotificationSettings,
        internal_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self.internal_key = internal_key
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.settings.url)

    async def notify(self, document_id: UUID, chunk_indices: list[int]) -> bool:
        """
        Send the notification.

        Returns:
            True on a 2xx response, False when disabled or on any HTTP failure
        """
        if not self.enabled:
            return False

        headers = {"content-type": "application/json"}
        if self.internal_key:
            headers["x-internal-key"] = self.internal_key
        payload = {"document_id": str(document_id), "chunk_indices": chunk_indices}

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(self.settings.url, json=payload, headers=headers)
                response.raise_for_status()
        except httpx.HTTPError as e:
            log_with_context(
                logger,
                logging.WARNING,
                "Table renderer notification failed",
                document_id=str(document_id),
                error=str(e),
            )
            return False

        log_with_context(
            logger,
            logging.INFO,
            "Table renderer notified",
            document_id=str(document_id),
            tables=len(chunk_indices),
        )
        return True
