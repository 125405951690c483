import calendar
from datetime import datetime, timezone

import arrow
import pytest

from tide_events.errors import MalformedTimestamp
from tide_events.timestamps import convert_from_iso8601, parse_timestamp, to_epoch


def test_convert_from_iso8601():
    elements = convert_from_iso8601("2018-10-17T17:25:00")

    assert elements.year == 2018
    assert elements.month == 10
    assert elements.day == 17
    assert elements.hour == 17
    assert elements.minute == 25
    assert elements.second == 0

    assert elements.to_epoch() == calendar.timegm((2018, 10, 17, 17, 25, 0))
    assert elements.to_epoch() == 1539797100


def test_fractional_seconds_are_ignored():
    assert parse_timestamp("2018-10-17T17:25:59.987") == parse_timestamp(
        "2018-10-17T17:25:59"
    )


def test_leap_day():
    assert parse_timestamp("2020-02-29T00:00:00") == calendar.timegm(
        (2020, 2, 29, 0, 0, 0)
    )
    assert parse_timestamp("1970-01-01T00:00:00") == 0


@pytest.mark.parametrize(
    "text",
    [
        "",
        "2018-10-17",
        "2018-10-17T17:25",
        "2018-1O-17T17:25:00",
        "2018-10-17T17:25: 0",
        "2018-13-17T17:25:00",
        "2019-02-29T00:00:00",
        "2018-10-17T25:00:00",
    ],
)
def test_malformed_timestamps(text):
    with pytest.raises(MalformedTimestamp):
        convert_from_iso8601(text)


def test_to_epoch():
    assert to_epoch(1539797100) == 1539797100
    assert to_epoch(1539797100.9) == 1539797100
    assert to_epoch(-0.5) == -1
    assert to_epoch(datetime(2018, 10, 17, 17, 25)) == 1539797100
    assert to_epoch(datetime(2018, 10, 17, 17, 25, tzinfo=timezone.utc)) == 1539797100
    assert to_epoch(arrow.get("2018-10-17T18:25:00+01:00")) == 1539797100
    assert to_epoch("2018-10-17T17:25:00Z") == 1539797100

    with pytest.raises(TypeError):
        to_epoch(True)
