import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from core.config import Settings


@pytest.fixture
def settings(tmp_path):
    return Settings(
        data_dir=str(tmp_path / "data"),
        files_dir=str(tmp_path / "storage"),
        reconstruction_delay_s=0.0,
        model_poll_interval_s=0.0,
        model_poll_max_attempts=3,
        stl_conversion_delay_s=0.0,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    return TestClient(app)
