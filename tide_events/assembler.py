"""Assemble tidal events from a JSON token stream.

The Admiralty API returns an array of objects such as::

    {"EventType": "HighWater", "DateTime": "2018-10-17T05:12:00", "Height": 4.2}

Each top-level object becomes one TidalEvent once its closing brace is seen.
"""
import logging
import math
from typing import Iterable, Optional

from pydantic import BaseModel

from tide_events.consts import DATE_TIME_KEY, EVENT_TYPE_KEY, HEIGHT_KEY, HIGH_WATER
from tide_events.errors import MalformedTimestamp
from tide_events.models import TidalEvent
from tide_events.store import TidalEventStore
from tide_events.timestamps import TimeElements, convert_from_iso8601
from tide_events.tokenizer import Token, TokenType

logger = logging.getLogger(__name__)


class SessionState(BaseModel):
    """State for one parse session: the current key and the record being built."""

    current_key: Optional[str] = None
    depth: int = 0
    is_high_tide: Optional[bool] = None
    raw_timestamp: Optional[str] = None
    time: Optional[TimeElements] = None
    height_m: Optional[float] = None
    finished: bool = False

    def reset(self):
        for name, field in type(self).model_fields.items():
            setattr(self, name, field.default)

    def start_record(self):
        self.current_key = None
        self.is_high_tide = None
        self.raw_timestamp = None
        self.time = None
        self.height_m = None

    @property
    def record_complete(self) -> bool:
        return (
            self.is_high_tide is not None
            and self.time is not None
            and self.height_m is not None
        )


def parse_height(text: str) -> float:
    """Height in metres; anything unparseable reads as 0.0."""
    try:
        height = float(text)
    except ValueError:
        height = math.nan
    if not math.isfinite(height):
        logger.warning("Invalid height %r, using 0.0", text)
        return 0.0
    return height


class EventAssembler:
    """Fold a token stream into a TidalEventStore.

    Only keys and values of the outermost objects are used; anything nested
    deeper, in an object or an array, is skipped.
    """

    def __init__(self, store: TidalEventStore):
        self.store = store
        self.session = SessionState()
        self._handlers = {
            TokenType.DOCUMENT_START: self._document_start,
            TokenType.OBJECT_START: self._object_start,
            TokenType.ARRAY_START: self._array_start,
            TokenType.KEY: self._key,
            TokenType.VALUE: self._value,
            TokenType.OBJECT_END: self._object_end,
            TokenType.ARRAY_END: self._array_end,
            TokenType.DOCUMENT_END: self._document_end,
        }

    def feed(self, token: Token):
        logger.debug("%s %s", token.type.value, token.text or "")
        handler = self._handlers.get(token.type)
        if handler is not None:
            handler(token.text)

    def consume(self, tokens: Iterable[Token]) -> TidalEventStore:
        for token in tokens:
            self.feed(token)
        return self.store

    def _document_start(self, _):
        self.session.reset()
        self.store.reset()

    def _object_start(self, _):
        self.session.depth += 1
        if self.session.depth == 1:
            self.session.start_record()

    def _array_start(self, _):
        # Arrays inside a record count towards its nesting
        if self.session.depth > 0:
            self.session.depth += 1

    def _array_end(self, _):
        if self.session.depth > 1:
            self.session.depth -= 1

    def _key(self, name: str):
        if self.session.depth == 1:
            self.session.current_key = name

    def _value(self, value: str):
        if self.session.depth != 1:
            return

        key = self.session.current_key
        if key == EVENT_TYPE_KEY:
            self.session.is_high_tide = value == HIGH_WATER
        elif key == DATE_TIME_KEY:
            self.session.raw_timestamp = value
            try:
                self.session.time = convert_from_iso8601(value)
            except MalformedTimestamp as e:
                logger.warning("%s, event will be skipped", e)
                self.session.time = None
        elif key == HEIGHT_KEY:
            self.session.height_m = parse_height(value)

    def _object_end(self, _):
        if self.session.depth == 1:
            self._finalize_record()
        self.session.depth -= 1

    def _finalize_record(self):
        session = self.session
        if not session.record_complete:
            logger.warning(
                "Skipping incomplete event (EventType=%s, DateTime=%s, Height=%s)",
                session.is_high_tide,
                session.raw_timestamp,
                session.height_m,
            )
            return

        event = TidalEvent(
            epoch_time=session.time.to_epoch(),
            is_high_tide=session.is_high_tide,
            height_m=session.height_m,
            raw_timestamp=session.raw_timestamp,
            is_valid=True,
        )
        self.store.append(event)

    def _document_end(self, _):
        self.session.finished = True
        logger.info("Assembled %d tidal events", self.store.count)
