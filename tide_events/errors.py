class TideEventsError(Exception):
    """Base class for errors raised by tide_events."""


class MalformedTimestamp(TideEventsError, ValueError):
    def __init__(self, text: str, reason: str):
        super().__init__(f"Malformed timestamp {text!r}: {reason}")
        self.text = text
        self.reason = reason


class ParseError(TideEventsError, ValueError):
    def __init__(self, message: str, offset: int):
        super().__init__(f"{message} at offset {offset}")
        self.offset = offset


class AdmiraltyApiError(TideEventsError):
    def __init__(self, status_code: int, text: str):
        super().__init__(f"Failed to get tidal events ({status_code}): {text}")
        self.status_code = status_code
        self.text = text
