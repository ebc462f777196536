"""
Tests for the worker trigger endpoints.

Dependencies: pytest, fastapi.testclient
System role: Worker HTTP contract validation
"""

from unittest.mock import AsyncMock

import pytest

from legal_pipeline.api.deps import get_chunk_worker, get_embed_worker
from legal_pipeline.application.services import ChunkWorkerReport, EmbedWorkerReport


@pytest.fixture
def mock_chunk_worker(client):
    worker = AsyncMock()
    worker.run.return_value = ChunkWorkerReport(
        picked=2,
        processed_ok=1,
        processed_failed=1,
        total_chunks_inserted=3,
        pending_remaining=4,
        duration_ms=12,
        chunker_version="2.2.0",
        errors=["doc-1: Document not found: doc-1"],
    )
    client.app.dependency_overrides[get_chunk_worker] = lambda: worker
    return worker


@pytest.fixture
def mock_embed_worker(client):
    worker = AsyncMock()
    worker.run.return_value = EmbedWorkerReport(
        picked=1,
        processed_ok=1,
        processed_failed=0,
        pending_remaining=0,
        duration_ms=40,
        chunks_embedded=3,
        model="models/gemini-embedding-001",
    )
    client.app.dependency_overrides[get_embed_worker] = lambda: worker
    return worker


def test_chunk_worker_report(client, auth_headers, mock_chunk_worker):
    response = client.post(
        "/api/v1/workers/chunk",
        json={"concurrency_docs": 5, "source_table": "legal_documents"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["picked"] == 2
    assert data["total_chunks_inserted"] == 3
    assert data["errors"] == ["doc-1: Document not found: doc-1"]
    mock_chunk_worker.run.assert_awaited_once_with(concurrency_docs=5, source_table="legal_documents")


def test_chunk_worker_without_body(client, auth_headers, mock_chunk_worker):
    response = client.post("/api/v1/workers/chunk", headers=auth_headers)

    assert response.status_code == 200
    mock_chunk_worker.run.assert_awaited_once_with(concurrency_docs=None, source_table=None)


def test_chunk_worker_rejects_zero_concurrency(client, auth_headers, mock_chunk_worker):
    response = client.post("/api/v1/workers/chunk", json={"concurrency_docs": 0}, headers=auth_headers)

    assert response.status_code == 400
    mock_chunk_worker.run.assert_not_awaited()


def test_chunk_worker_requires_key(client, mock_chunk_worker):
    response = client.post("/api/v1/workers/chunk")

    assert response.status_code == 401


def test_embed_worker_report(client, auth_headers, mock_embed_worker):
    response = client.post("/api/v1/workers/embed", json={"concurrency_docs": 10}, headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["chunks_embedded"] == 3
    assert data["model"] == "models/gemini-embedding-001"
    mock_embed_worker.run.assert_awaited_once_with(concurrency_docs=10)
