import logging
from datetime import datetime
from typing import BinaryIO, Iterable

import arrow

from tide_events.assembler import EventAssembler
from tide_events.consts import MAX_DAYS, MAX_EVENTS
from tide_events.errors import ParseError
from tide_events.models import TidalEvent, TidalEventQuery
from tide_events.store import TidalEventStore
from tide_events.tokenizer import DEFAULT_CHUNK_SIZE, iter_tokens
from tide_events.utils import admiralty_api

logger = logging.getLogger(__name__)


def load_tidal_events(
    stream: bytes | BinaryIO | Iterable[bytes],
    capacity: int = MAX_EVENTS,
    strict: bool = False,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> TidalEventStore:
    """Run one parse session over ``stream`` into a new store.

    If the stream is malformed or cut short, the events completed before the
    fault are kept and the error is logged, unless ``strict`` is set, in
    which case the ParseError is raised.
    """
    store = TidalEventStore(capacity)
    assembler = EventAssembler(store)
    try:
        assembler.consume(iter_tokens(stream, chunk_size=chunk_size))
    except ParseError as e:
        if strict:
            raise
        logger.warning(
            "Tidal event stream is malformed, keeping %d events: %s", store.count, e
        )
    return store


class StationTidalEvents:
    def __init__(
        self,
        station_id: str,
        days: int = MAX_DAYS,
        max_events: int = MAX_EVENTS,
        api=admiralty_api,
    ):
        if not 1 <= days <= MAX_DAYS:
            raise ValueError(f"Days must be between 1 and {MAX_DAYS}")
        if max_events < 1:
            raise ValueError("Max events must be at least 1")

        self.station_id = station_id
        self.days = days
        self.max_events = max_events
        self.api = api

        # Lazy loaded by the store property below
        self._store = None

    @property
    def store(self) -> TidalEventStore:
        if self._store is None:
            self.refresh()
        return self._store

    @property
    def events(self) -> list[TidalEvent]:
        return self.store.events

    @property
    def high_tides(self) -> list[TidalEvent]:
        return self.store.high_tides

    @property
    def low_tides(self) -> list[TidalEvent]:
        return self.store.low_tides

    def refresh(self) -> TidalEventStore:
        """Fetch the forecast again and swap in the newly assembled store."""
        logger.info(
            "Fetching %d days of tidal events for station %s",
            self.days,
            self.station_id,
        )
        store = load_tidal_events(
            self.api.stream_tidal_events(self.station_id, self.days),
            capacity=self.max_events,
        )
        self._store = store
        return store

    def previous_event(self, time: int | float | datetime | arrow.Arrow) -> TidalEvent:
        return self.store.previous_event(time)

    def next_event(self, time: int | float | datetime | arrow.Arrow) -> TidalEvent:
        return self.store.next_event(time)

    def previous_event_query(
        self, time: int | float | datetime | arrow.Arrow
    ) -> TidalEventQuery:
        return make_query(self.previous_event(time), time)

    def next_event_query(
        self, time: int | float | datetime | arrow.Arrow
    ) -> TidalEventQuery:
        return make_query(self.next_event(time), time)


def make_query(
    event: TidalEvent, time: int | float | datetime | arrow.Arrow
) -> TidalEventQuery:
    if not event.is_valid:
        return TidalEventQuery(event=event)
    return TidalEventQuery(event=event, time_from=event.time_from(time))


def describe_event(
    event: TidalEvent, time: int | float | datetime | arrow.Arrow
) -> str:
    if not event.is_valid:
        return "No tidal event"
    span = event.time_from(time)
    kind = "High water" if event.is_high_tide else "Low water"
    when = arrow.get(event.time).isoformat(timespec="minutes")
    away = f"{span.hours}h {span.minutes}m away"
    return f"{kind} {event.height_m:.2f}m at {when} ({away})"


if __name__ == "__main__":
    from tide_events.settings import get_settings

    settings = get_settings()
    logging.basicConfig(level=settings.log_level)

    station_events = StationTidalEvents(
        settings.station_id, days=settings.days, max_events=settings.max_events
    )
    now = arrow.utcnow()
    print(describe_event(station_events.previous_event(now), now))
    print(describe_event(station_events.next_event(now), now))
