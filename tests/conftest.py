import json
import sys
from pathlib import Path

import pytest
import requests

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True)
def _zoom_env(monkeypatch):
    monkeypatch.setenv("ACCOUNT_ID", "account-123456789")
    monkeypatch.setenv("CLIENT_ID", "client-123456789")
    monkeypatch.setenv("CLIENT_SECRET", "secret")
    monkeypatch.delenv("ZOOM_TIMEZONE", raising=False)


@pytest.fixture
def make_response():
    def _make(status_code, payload=None, url="https://api.zoom.us/v2/test"):
        response = requests.Response()
        response.status_code = status_code
        response.url = url
        response._content = json.dumps(payload).encode() if payload is not None else b""
        return response

    return _make


@pytest.fixture
def http_error(make_response):
    def _error(status_code, payload=None):
        try:
            make_response(status_code, payload).raise_for_status()
        except requests.HTTPError as e:
            return e
        raise AssertionError(f"status {status_code} is not an error")

    return _error
