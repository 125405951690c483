import pytest
import requests

from tide_events.errors import AdmiraltyApiError
from tide_events.settings import Settings
from tide_events.utils import _AdmiraltyApi


class FakeResponse:
    def __init__(self, status_code: int, content: bytes):
        self.status_code = status_code
        self.content = content
        self.closed = False

    @property
    def ok(self):
        return self.status_code < 400

    @property
    def text(self):
        return self.content.decode()

    def iter_content(self, chunk_size):
        for i in range(0, len(self.content), chunk_size):
            yield self.content[i : i + chunk_size]

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.closed = True


@pytest.fixture
def api():
    settings = Settings(
        api_url="https://example.com/api/",
        subscription_key="secret",
        chunk_size=4,
        request_timeout=5,
    )
    return _AdmiraltyApi.from_settings(settings)


def test_stream_tidal_events(api, monkeypatch):
    requests_made = []
    response = FakeResponse(200, b'[{"Height": 1}]')

    def get(url, **kwargs):
        requests_made.append((url, kwargs))
        return response

    monkeypatch.setattr(requests, "get", get)
    chunks = list(api.stream_tidal_events("0113", 3))

    assert b"".join(chunks) == b'[{"Height": 1}]'
    assert chunks[0] == b'[{"H'
    assert response.closed

    url, kwargs = requests_made[0]
    assert url == "https://example.com/api/Stations/0113/TidalEvents?duration=3"
    assert kwargs["headers"] == {"Ocp-Apim-Subscription-Key": "secret"}
    assert kwargs["stream"] is True
    assert kwargs["timeout"] == 5


def test_stream_tidal_events_error(api, monkeypatch):
    monkeypatch.setattr(
        requests, "get", lambda url, **kwargs: FakeResponse(404, b"Station not found")
    )

    with pytest.raises(AdmiraltyApiError) as e:
        list(api.stream_tidal_events("9999", 1))
    assert e.value.status_code == 404
    assert e.value.text == "Station not found"


def test_no_subscription_key(monkeypatch):
    api = _AdmiraltyApi("https://example.com")
    requests_made = []

    def get(url, **kwargs):
        requests_made.append(kwargs)
        return FakeResponse(200, b"[]")

    monkeypatch.setattr(requests, "get", get)
    list(api.stream_tidal_events("0001", 1))

    assert requests_made[0]["headers"] == {}
