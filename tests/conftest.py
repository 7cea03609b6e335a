"""Common fixtures for the authinator tests."""

from types import SimpleNamespace

import pytest

from authinator.backend import create_app
from authinator.core import otp_core
from authinator.database import SecretStore


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "totp.json"


@pytest.fixture
def store(data_file):
    return SecretStore(data_file)


@pytest.fixture
def app(data_file):
    app = create_app(str(data_file))
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def frozen_time(monkeypatch):
    """Pin the clock seen by otp_core.derive(); call it with the Unix time to use."""

    def freeze(now):
        monkeypatch.setattr(otp_core, "time", SimpleNamespace(time=lambda: now))

    return freeze
