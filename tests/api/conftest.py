"""
Fixtures for API endpoint tests.

Provides: TestClient bound to the settings fixture and the internal key
header
Dependencies: fastapi.testclient
System role: HTTP layer test infrastructure
"""

import pytest
from fastapi.testclient import TestClient

from legal_pipeline.api.deps import get_settings_dependency
from legal_pipeline.main import create_app


@pytest.fixture
def client(settings):
    app = create_app()
    app.dependency_overrides[get_settings_dependency] = lambda: settings
    return TestClient(app)


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"x-internal-key": "test-key"}
