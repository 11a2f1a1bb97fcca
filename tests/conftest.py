# FILE: tests/conftest.py

import sys
from pathlib import Path
from datetime import datetime, timezone

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest
from fastapi.testclient import TestClient

from iep_backend.config import Settings, get_settings
from iep_backend.app import create_app
from iep_backend.services.duplicate_suppressor import DuplicateSuppressor
from iep_backend.services.memory_pipeline import MemoryQueryPipeline, get_pipeline
from iep_backend.services.store import IEPStore


class FakeClock:
    """Manually advanced clock for window tests"""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture(scope="session")
def settings():
    """Provide settings for tests"""
    return get_settings()


@pytest.fixture
def now():
    """Fixed reference instant"""
    return datetime(2025, 9, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(tmp_path):
    """Empty store in a temporary directory"""
    return IEPStore(str(tmp_path / "store"))


@pytest.fixture
def suppressor(clock):
    return DuplicateSuppressor(window_seconds=60.0, clock=clock)


@pytest.fixture
def pipeline(store, suppressor):
    return MemoryQueryPipeline(store, suppressor)


@pytest.fixture
def app(tmp_path, pipeline):
    """Application wired to the test pipeline"""
    test_settings = Settings(
        data_dir=str(tmp_path / "data"),
        store_dir=str(tmp_path / "data" / "store"),
        rate_limit_enabled=False,
        seed_demo_data=False
    )
    application = create_app(test_settings)
    application.dependency_overrides[get_pipeline] = lambda: pipeline
    return application


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def sample_question():
    """Sample question for testing"""
    return "What goals are set?"
