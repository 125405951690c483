"""Conversion between the API's ISO8601 timestamps and epoch seconds.

The Admiralty API reports times as ``2018-10-17T17:25:00`` optionally followed
by fractional seconds. Fields are read at fixed character offsets and the
suffix is ignored. Times are treated as UTC.
"""
import math
from datetime import datetime

import arrow
import dateutil.tz
from pydantic import BaseModel

from tide_events.errors import MalformedTimestamp

TIMESTAMP_LENGTH = 19

# (field, start, end) character offsets in YYYY-MM-DDTHH:MM:SS
FIELD_OFFSETS = (
    ("year", 0, 4),
    ("month", 5, 7),
    ("day", 8, 10),
    ("hour", 11, 13),
    ("minute", 14, 16),
    ("second", 17, 19),
)


class TimeElements(BaseModel):
    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0
    second: int = 0

    def to_arrow(self) -> arrow.Arrow:
        return arrow.Arrow(
            self.year,
            self.month,
            self.day,
            self.hour,
            self.minute,
            self.second,
            tzinfo=dateutil.tz.UTC,
        )

    def to_epoch(self) -> int:
        return self.to_arrow().int_timestamp


def convert_from_iso8601(text: str) -> TimeElements:
    """Split a timestamp string into calendar fields.

    Raises MalformedTimestamp when the string is too short, a field is not
    numeric or the fields do not form a real calendar instant.
    """
    if len(text) < TIMESTAMP_LENGTH:
        raise MalformedTimestamp(text, f"shorter than {TIMESTAMP_LENGTH} characters")

    fields = {}
    for name, start, end in FIELD_OFFSETS:
        part = text[start:end]
        if not (part.isascii() and part.isdigit()):
            raise MalformedTimestamp(text, f"{name} {part!r} is not numeric")
        fields[name] = int(part)

    elements = TimeElements(**fields)
    try:
        elements.to_arrow()
    except ValueError as e:
        raise MalformedTimestamp(text, str(e)) from e
    return elements


def parse_timestamp(text: str) -> int:
    return convert_from_iso8601(text).to_epoch()


def to_epoch(time: int | float | str | datetime | arrow.Arrow) -> int:
    """Normalise a query time to epoch seconds.

    Floats are rounded down to the whole second. Naive datetimes are taken
    to be UTC.
    """
    if isinstance(time, bool):
        raise TypeError("Time must be a number, string or datetime")
    if isinstance(time, int):
        return time
    if isinstance(time, float):
        return math.floor(time)
    return arrow.get(time).int_timestamp
