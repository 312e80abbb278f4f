import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, MagicMock

from src.api.main import app

STATE_COMPONENTS = ("alert_repo", "call_repo", "config_repo", "materializer")


@pytest.fixture
def client():
    """Create test client (lifespan not run; components are set per test)."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def reset_app_state():
    yield
    for name in STATE_COMPONENTS:
        if hasattr(app.state, name):
            delattr(app.state, name)


@pytest.fixture
def mock_alert_repo():
    repo = MagicMock()
    repo.list_for_company = AsyncMock()
    repo.count_unread = AsyncMock(return_value=0)
    repo.mark_read = AsyncMock(return_value=True)
    app.state.alert_repo = repo
    return repo


@pytest.fixture
def mock_config_repo():
    repo = MagicMock()
    repo.get_for_company = AsyncMock()
    repo.update_for_company = AsyncMock()
    app.state.config_repo = repo
    return repo


@pytest.fixture
def mock_materializer():
    materializer = MagicMock()
    materializer.evaluate_call_by_id = AsyncMock(return_value=[])
    materializer.backfill_company = AsyncMock()
    app.state.materializer = materializer
    return materializer
