import os

# Must be set before importing kivy
os.environ.setdefault("KIVY_WINDOW", "mock")
os.environ.setdefault("KIVY_GL_BACKEND", "mock")
os.environ.setdefault("KIVY_NO_ARGS", "1")

import pytest  # noqa: E402
from doubles import FakeCounterClient  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from sharedcounter.api_client import CounterClient  # noqa: E402
from sharedcounter.core.services import CounterService  # noqa: E402
from sharedcounter.server.api import create_app  # noqa: E402


@pytest.fixture(autouse=True, scope="session")
def headless_kivy():
    # Ensure tests don't try to open a real window.
    os.environ.setdefault("KIVY_WINDOW", "mock")
    os.environ.setdefault("KIVY_GL_BACKEND", "mock")
    os.environ.setdefault("KIVY_NO_ARGS", "1")
    yield


@pytest.fixture
def clean_env(monkeypatch):
    """Ensure no env vars interfere with tests."""
    for name in ("SHAREDCOUNTER_HOST", "SHAREDCOUNTER_SERVER_HOST", "SHAREDCOUNTER_SERVER_PORT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def mock_cfg(clean_env, monkeypatch, tmp_path):
    from sharedcounter import config

    monkeypatch.setattr(config, "USER_CONFIG_PATH", tmp_path / "doesnotexist.ini")
    monkeypatch.setattr(config, "GLOBAL_CONFIG_PATH", tmp_path / "alsodoesnotexist.ini")

    cfg = config.load_config()

    return cfg


@pytest.fixture
def service():
    return CounterService()


@pytest.fixture
def api(mock_cfg, service):
    app = create_app(mock_cfg, service=service)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def counter_client(api):
    # TestClient is an httpx.Client, so the real client talks to the app in-process
    with CounterClient("http://testserver/", client=api) as c:
        yield c


@pytest.fixture
def fake_client():
    return FakeCounterClient()
