from datetime import datetime
from typing import Annotated

import arrow
from fastapi import APIRouter
from fastapi.params import Path, Query

from tide_events.consts import ISO8601_TIME_EXAMPLES, MAX_DAYS
from tide_events.lib import StationTidalEvents
from tide_events.models import TidalEvent, TidalEventQuery
from tide_events.settings import get_settings

router = APIRouter(
    prefix="/tides/events",
    tags=["Tide Events"],
)

StationId = Annotated[str, Path(description="The Admiralty station id, e.g. 0001")]
Days = Annotated[
    int, Query(ge=1, le=MAX_DAYS, description="Number of days of forecast to fetch")
]
QueryTime = Annotated[
    datetime | None,
    Query(
        description="The time in ISO8601 format. Defaults to now (UTC).",
        openapi_examples=ISO8601_TIME_EXAMPLES,
    ),
]


def station_tidal_events(station_id: str, days: int) -> StationTidalEvents:
    return StationTidalEvents(
        station_id, days=days, max_events=get_settings().max_events
    )


def query_time(time: datetime | None) -> arrow.Arrow:
    return arrow.utcnow() if time is None else arrow.get(time)


@router.get(
    "/{station_id}",
    operation_id="list_tidal_events",
    summary="List tidal events",
)
def list_tidal_events(station_id: StationId, days: Days = MAX_DAYS) -> list[TidalEvent]:
    """List the high and low water events forecast for a station."""
    return station_tidal_events(station_id, days).events


@router.get(
    "/{station_id}/previous",
    operation_id="previous_tidal_event",
    summary="Get the previous tidal event",
)
def previous_tidal_event(
    station_id: StationId, time: QueryTime = None, days: Days = MAX_DAYS
) -> TidalEventQuery:
    """Get the latest tidal event at or before a time.

    The event is marked invalid if the forecast has no event that early.
    """
    t = query_time(time)
    return station_tidal_events(station_id, days).previous_event_query(t)


@router.get(
    "/{station_id}/next",
    operation_id="next_tidal_event",
    summary="Get the next tidal event",
)
def next_tidal_event(
    station_id: StationId, time: QueryTime = None, days: Days = MAX_DAYS
) -> TidalEventQuery:
    """Get the first tidal event strictly after a time.

    The event is marked invalid if the forecast has no event that late.
    """
    t = query_time(time)
    return station_tidal_events(station_id, days).next_event_query(t)
