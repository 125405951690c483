import pytest
from fastapi.testclient import TestClient

from tide_events.errors import AdmiraltyApiError
from tide_events.main import app
from tide_events.utils import admiralty_api

SAMPLE = (
    b'[{"EventType":"HighWater","DateTime":"2018-10-17T05:12:00","Height":"4.2"},'
    b' {"EventType":"LowWater","DateTime":"2018-10-17T11:30:00","Height":"1.1"}]'
)


@pytest.fixture
def calls():
    return []


@pytest.fixture
def client(monkeypatch, calls):
    def stream_tidal_events(station_id, days):
        calls.append((station_id, days))
        yield SAMPLE

    monkeypatch.setattr(admiralty_api, "stream_tidal_events", stream_tidal_events)
    return TestClient(app)


def test_list_tidal_events(client, calls):
    res = client.get("/tides/events/0001", params={"days": 3})

    assert res.status_code == 200
    events = res.json()
    assert [e["is_high_tide"] for e in events] == [True, False]
    assert events[0]["epoch_time"] == 1539753120
    assert events[0]["time"].startswith("2018-10-17T05:12:00")
    assert calls == [("0001", 3)]


def test_previous_and_next(client):
    params = {"time": "2018-10-17T08:00:00Z"}

    previous = client.get("/tides/events/0001/previous", params=params).json()
    assert previous["event"]["raw_timestamp"] == "2018-10-17T05:12:00"
    assert previous["time_from"]["hours"] == 2
    assert previous["time_from"]["minutes"] == 48

    following = client.get("/tides/events/0001/next", params=params).json()
    assert following["event"]["raw_timestamp"] == "2018-10-17T11:30:00"
    assert following["time_from"]["total_minutes"] == 210


def test_no_next_event(client):
    res = client.get("/tides/events/0001/next", params={"time": "2018-10-18T00:00:00"})

    assert res.status_code == 200
    assert res.json()["event"]["is_valid"] is False
    assert res.json()["time_from"] is None


def test_days_out_of_range(client):
    assert client.get("/tides/events/0001", params={"days": 8}).status_code == 422


def test_upstream_error(monkeypatch):
    def stream_tidal_events(station_id, days):
        raise AdmiraltyApiError(401, "Access denied due to invalid subscription key")
        yield

    monkeypatch.setattr(admiralty_api, "stream_tidal_events", stream_tidal_events)
    res = TestClient(app).get("/tides/events/0001")

    assert res.status_code == 502
    assert "401" in res.json()["detail"]


def test_redirect_to_docs(client):
    res = client.get("/", follow_redirects=False)
    assert res.status_code in (302, 307)
