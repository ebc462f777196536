"""Outbound notifications."""

from legal_pipeline.boundary.notifications.table_renderer import TableRendererNotifier

__all__ = ["TableRendererNotifier"]
