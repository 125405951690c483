from datetime import datetime
from typing import Optional

import arrow
from pydantic import BaseModel, computed_field

from tide_events.timestamps import to_epoch


class TimeSpan(BaseModel):
    hours: int
    minutes: int

    @computed_field
    @property
    def total_minutes(self) -> int:
        return self.hours * 60 + self.minutes


class TidalEvent(BaseModel):
    """A high or low water extremum.

    The default instance is invalid and is what queries return when no event
    matches, so check ``is_valid`` before trusting the other fields.
    """

    epoch_time: int = 0
    is_high_tide: bool = False
    height_m: float = 0.0
    raw_timestamp: str = ""
    is_valid: bool = False

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "epoch_time": 1539753120,
                    "is_high_tide": True,
                    "height_m": 4.2,
                    "raw_timestamp": "2018-10-17T05:12:00",
                    "is_valid": True,
                    "time": "2018-10-17T05:12:00Z",
                }
            ]
        },
    }

    @computed_field
    @property
    def time(self) -> datetime:
        return arrow.get(self.epoch_time).datetime

    def time_from(self, time: int | float | datetime | arrow.Arrow) -> TimeSpan:
        """Hours and minutes between this event and ``time``, in either direction."""
        diff = abs(self.epoch_time - to_epoch(time))
        hours, remainder = divmod(diff, 60 * 60)
        return TimeSpan(hours=hours, minutes=remainder // 60)


class TidalEventQuery(BaseModel):
    event: TidalEvent
    time_from: Optional[TimeSpan] = None
