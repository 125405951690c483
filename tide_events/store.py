import logging
from datetime import datetime
from typing import Iterator

import arrow

from tide_events.consts import MAX_EVENTS
from tide_events.models import TidalEvent
from tide_events.timestamps import to_epoch

logger = logging.getLogger(__name__)


class TidalEventStore:
    """Fixed capacity, chronologically ordered table of valid tidal events.

    Records are expected in time order from the upstream feed. The store does
    not sort: an event earlier than the last one held is refused, as is any
    event once the store is full.
    """

    def __init__(self, capacity: int = MAX_EVENTS):
        if capacity < 1:
            raise ValueError("Capacity must be at least 1")
        self.capacity = capacity
        self._events: list[TidalEvent] = []

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[TidalEvent]:
        return iter(self._events)

    def __getitem__(self, index: int) -> TidalEvent:
        return self._events[index]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(count={self.count}, capacity={self.capacity})"

    @property
    def count(self) -> int:
        return len(self._events)

    @property
    def is_full(self) -> bool:
        return len(self._events) >= self.capacity

    @property
    def events(self) -> list[TidalEvent]:
        return list(self._events)

    def reset(self):
        self._events.clear()

    def append(self, event: TidalEvent) -> bool:
        """Add a finalised event. Returns False if the event was discarded."""
        if not event.is_valid:
            raise ValueError("Only valid events can be stored")
        if self.is_full:
            logger.warning(
                "Store full (%d events), discarding event at %s",
                self.capacity,
                event.raw_timestamp,
            )
            return False
        if self._events and event.epoch_time < self._events[-1].epoch_time:
            logger.warning(
                "Event at %s is earlier than %s, discarding",
                event.raw_timestamp,
                self._events[-1].raw_timestamp,
            )
            return False
        self._events.append(event)
        return True

    def previous_event(self, time: int | float | datetime | arrow.Arrow) -> TidalEvent:
        """Latest event at or before ``time``, or an invalid event if there is none."""
        time = to_epoch(time)
        return next(
            (e for e in reversed(self._events) if e.epoch_time <= time), TidalEvent()
        )

    def next_event(self, time: int | float | datetime | arrow.Arrow) -> TidalEvent:
        """First event strictly after ``time``, or an invalid event if there is none."""
        time = to_epoch(time)
        return next((e for e in self._events if e.epoch_time > time), TidalEvent())

    @property
    def high_tides(self) -> list[TidalEvent]:
        return [e for e in self._events if e.is_high_tide]

    @property
    def low_tides(self) -> list[TidalEvent]:
        return [e for e in self._events if not e.is_high_tide]
