import logging
from typing import Optional

import requests
from ratelimit import limits, sleep_and_retry

from tide_events.consts import SUBSCRIPTION_KEY_HEADER
from tide_events.errors import AdmiraltyApiError
from tide_events.settings import Settings, get_settings

logger = logging.getLogger(__name__)


class _AdmiraltyApi:
    def __init__(
        self,
        base_url: str,
        subscription_key: Optional[str] = None,
        timeout: float = 10.0,
        chunk_size: int = 512,
    ):
        self.base_url = base_url.rstrip("/")
        self.subscription_key = subscription_key
        self.timeout = timeout
        self.chunk_size = chunk_size

    @classmethod
    def from_settings(cls, settings: Settings) -> "_AdmiraltyApi":
        key = settings.subscription_key
        return cls(
            settings.api_url,
            subscription_key=key.get_secret_value() if key else None,
            timeout=settings.request_timeout,
            chunk_size=settings.chunk_size,
        )

    @staticmethod
    @sleep_and_retry
    @limits(calls=10, period=1)
    def _rate_limit():
        """Check Admiralty API rate limit."""
        return

    def get(self, url: str) -> requests.Response:
        self._rate_limit()
        headers = {}
        if self.subscription_key:
            headers[SUBSCRIPTION_KEY_HEADER] = self.subscription_key
        logger.debug("GET %s%s", self.base_url, url)
        return requests.get(
            f"{self.base_url}{url}", headers=headers, stream=True, timeout=self.timeout
        )

    def stream_tidal_events(self, station_id: str, days: int):
        """Yield the raw body of a station's TidalEvents response in chunks."""
        with self.get(f"/Stations/{station_id}/TidalEvents?duration={days}") as req:
            if not req.ok:
                raise AdmiraltyApiError(req.status_code, req.text)
            yield from req.iter_content(chunk_size=self.chunk_size)


admiralty_api = _AdmiraltyApi.from_settings(get_settings())
