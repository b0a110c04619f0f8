# tests/conftest.py

import json

import pytest
import requests


class FakeResponse:
    def __init__(self, text, status_code=200, content_type="application/json"):
        self.text = text
        self.status_code = status_code
        self.headers = {"Content-Type": content_type}

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error", response=self)


@pytest.fixture
def fake_get(monkeypatch):
    """Replace requests.get; register bodies in fake_get.responses, inspect fake_get.calls."""
    responses = {}
    calls = []

    def get(url, timeout=None):
        calls.append((url, timeout))
        result = responses[url]
        if isinstance(result, Exception):
            raise result
        if isinstance(result, (dict, list)):
            return FakeResponse(json.dumps(result))
        return result

    monkeypatch.setattr(requests, "get", get)
    get.responses = responses
    get.calls = calls
    return get
