"""
Pytest configuration and fixtures
"""
import base64

import pytest
import requests

from pixel_genie.core.engine import GenerationPipeline


PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image-body"
PNG_B64 = base64.b64encode(PNG_BYTES).decode("ascii")
PNG_DATA_URI = f"data:image/png;base64,{PNG_B64}"


class RecordingCapability:
    """Synchronous stand-in for a remote capability."""

    def __init__(self, result=None, error=None, hook=None):
        self.result = result
        self.error = error
        self.hook = hook
        self.calls = []

    def __call__(self, argument):
        self.calls.append(argument)
        if self.hook is not None:
            self.hook(argument)
        if self.error is not None:
            raise self.error
        return self.result


class FakeResponse:
    """Minimal `requests.Response` replacement."""

    def __init__(self, status_code=200, payload=None, content=b"", text=""):
        self.status_code = status_code
        self._payload = payload
        self.content = content
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} error", response=self)


class RequestRecorder:
    """Callable replacing `requests.post`/`requests.get` that replays responses."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def __call__(self, url, **kwargs):
        self.calls.append({"url": url, **kwargs})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def refiner():
    return RecordingCapability(result="8-bit pixel art of a cat, limited palette")


@pytest.fixture
def generator():
    return RecordingCapability(result=PNG_DATA_URI)


@pytest.fixture
def pipeline(refiner, generator):
    return GenerationPipeline(refiner=refiner, generator=generator)


@pytest.fixture(autouse=True)
def no_network(monkeypatch):
    """Fail loudly if a test reaches the real network."""
    def blocked(*args, **kwargs):
        raise AssertionError("Network access attempted in tests")

    monkeypatch.setattr(requests, "post", blocked)
    monkeypatch.setattr(requests, "get", blocked)
