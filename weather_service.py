import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from models import UpstreamConfig

logger = logging.getLogger(__name__)


class UpstreamError(Exception):
    """The upstream call failed before a usable response was read."""


def _reject_constant(name: str):
    # NaN/Infinity parse in Python but cannot be relayed as JSON
    raise ValueError(f"Non-standard JSON constant {name!r} in upstream body")


@dataclass(frozen=True)
class UpstreamResponse:
    status_code: int
    body: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code <= 299


class WeatherService:
    def __init__(self, config: UpstreamConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self.transport = transport

    @property
    def forecast_url(self) -> str:
        return f"{self.config.base_url.rstrip('/')}/forecast.json"

    def build_params(self, query: str) -> dict:
        """Query parameters for the upstream forecast resource."""
        return {
            "key": self.config.api_key,
            "q": query,
            "days": self.config.forecast_days,
            "aqi": "yes" if self.config.aqi else "no",
        }

    def redact(self, message: str) -> str:
        """Strip the credential out of anything headed for a log or a client."""
        if self.config.api_key:
            message = message.replace(self.config.api_key, "***")
        return message

    def _client(self) -> httpx.AsyncClient:
        kwargs = {}
        if self.transport is not None:
            kwargs["transport"] = self.transport
        if self.config.timeout_seconds is not None:
            kwargs["timeout"] = self.config.timeout_seconds
        return httpx.AsyncClient(**kwargs)

    async def get_forecast(self, query: str) -> UpstreamResponse:
        """
        Fetch the forecast for a location query.

        Returns the upstream status and decoded JSON body whatever the
        status is. Raises UpstreamError on transport or decode failure.
        """
        logger.info(f"Fetching forecast for {query!r}")
        try:
            async with self._client() as client:
                response = await client.get(self.forecast_url, params=self.build_params(query))
            body = response.json(parse_constant=_reject_constant)
        except (httpx.HTTPError, ValueError) as e:
            message = self.redact(str(e)) or type(e).__name__
            logger.error(f"Upstream request for {query!r} failed: {message}")
            raise UpstreamError(message) from e

        upstream = UpstreamResponse(status_code=response.status_code, body=body)
        if upstream.ok:
            logger.info(f"Upstream returned {upstream.status_code} for {query!r}")
        else:
            logger.warning(f"Upstream rejected {query!r} with {upstream.status_code}")
        return upstream
