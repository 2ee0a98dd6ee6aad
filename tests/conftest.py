from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import firebase_admin
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from firebase_admin import credentials, messaging

from push_daemon.core.config import Settings
from push_daemon.main import create_app


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings isolated to a temporary directory."""
    return Settings(
        FIREBASE_CREDENTIALS_PATH=str(tmp_path / "auth.json"),
        PID_FILE=tmp_path / "push-daemon.pid",
        UNIT_DIR=tmp_path / "units",
        PORT=18080,
    )


@pytest.fixture
def firebase(monkeypatch) -> SimpleNamespace:
    """Replace the Firebase SDK entry points used by the notification service."""
    certificate = MagicMock(name="Certificate")
    initialize_app = MagicMock(
        name="initialize_app",
        side_effect=lambda cred, name: SimpleNamespace(name=name, project_id="test-project"),
    )
    delete_app = MagicMock(name="delete_app")
    send = MagicMock(name="send", return_value="projects/test-project/messages/1")

    monkeypatch.setattr(credentials, "Certificate", certificate)
    monkeypatch.setattr(firebase_admin, "initialize_app", initialize_app)
    monkeypatch.setattr(firebase_admin, "delete_app", delete_app)
    monkeypatch.setattr(messaging, "send", send)

    return SimpleNamespace(
        certificate=certificate,
        initialize_app=initialize_app,
        delete_app=delete_app,
        send=send,
    )


@pytest.fixture
def app(test_settings: Settings) -> FastAPI:
    return create_app(test_settings)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    with TestClient(app) as test_client:
        yield test_client
