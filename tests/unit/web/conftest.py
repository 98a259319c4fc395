"""
Fixtures for API tests: the FastAPI app wired to a SQLite session factory
and a mocked language model.
"""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from core.llm.interfaces import LLMProvider
from web.backend import dependencies
from web.backend.app import app
from web.backend.routers.preferences import limiter
from web.backend.services import swipe_service


@pytest.fixture
def llm():
    mock = MagicMock(spec=LLMProvider)
    mock.model_name = "test-model"
    mock.generate_text.return_value = "You prefer remote Python roles."
    return mock


@pytest.fixture
def client(session_factory, llm):
    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[dependencies.get_session_factory] = lambda: session_factory
    app.dependency_overrides[dependencies.get_db] = _get_db
    app.dependency_overrides[dependencies.get_ai_service] = lambda: llm
    swipe_service._swipe_manager = None
    limiter.reset()

    yield TestClient(app)

    app.dependency_overrides.clear()
    swipe_service._swipe_manager = None
