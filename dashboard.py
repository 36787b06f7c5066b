"""
Dashboard client: location lookup, forecast fetching and the display clock.

The flow is an explicit state machine over idle/loading/success/error.
`transition` is pure: it takes a state and an event and returns the next
state plus the effects to run. `Dashboard` owns the event loop side: it
runs those effects (geolocation, HTTP calls to the proxy, the clock) and
feeds their outcomes back in as events.

Overlapping fetches: every fetch gets a new request id and only the
completion carrying the latest id is applied, so the last search issued
is the one displayed regardless of which response arrives first.
"""

import asyncio
import logging
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional, Protocol, Set, Tuple, Union

import httpx
from pydantic import ValidationError

from background_tasks import ClockTask
from models import DashboardConfig, ForecastResponse
from presentation import DashboardView, build_view

logger = logging.getLogger(__name__)

DEFAULT_CITY = "Nairobi"
CONFIRM_KEY = "Enter"

NOT_FOUND_MESSAGE = "City not found"
UNREACHABLE_MESSAGE = "Unable to reach the weather service"


class Status(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class UIState:
    status: Status = Status.IDLE
    search_text: str = ""
    query: Optional[str] = None
    weather: Optional[ForecastResponse] = None
    error: Optional[str] = None
    now: Optional[datetime] = None
    request_id: int = 0

    @property
    def loading(self) -> bool:
        return self.status is Status.LOADING


# Events


@dataclass(frozen=True)
class Mounted:
    pass


@dataclass(frozen=True)
class PositionGranted:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class PositionUnavailable:
    reason: str = "unsupported"


@dataclass(frozen=True)
class InputChanged:
    text: str


@dataclass(frozen=True)
class SearchSubmitted:
    pass


@dataclass(frozen=True)
class KeyPressed:
    key: str


@dataclass(frozen=True)
class FetchSucceeded:
    request_id: int
    weather: ForecastResponse


@dataclass(frozen=True)
class FetchFailed:
    request_id: int
    message: str


@dataclass(frozen=True)
class Ticked:
    now: datetime


Event = Union[
    Mounted,
    PositionGranted,
    PositionUnavailable,
    InputChanged,
    SearchSubmitted,
    KeyPressed,
    FetchSucceeded,
    FetchFailed,
    Ticked,
]


# Effects


@dataclass(frozen=True)
class StartClock:
    pass


@dataclass(frozen=True)
class RequestPosition:
    pass


@dataclass(frozen=True)
class FetchForecast:
    request_id: int
    query: str


Effect = Union[StartClock, RequestPosition, FetchForecast]


def _begin_fetch(state: UIState, query: str) -> Tuple[UIState, List[Effect]]:
    request_id = state.request_id + 1
    new_state = replace(
        state,
        status=Status.LOADING,
        query=query,
        error=None,
        request_id=request_id,
    )
    return new_state, [FetchForecast(request_id=request_id, query=query)]


def transition(
    state: UIState, event: Event, default_city: str = DEFAULT_CITY
) -> Tuple[UIState, List[Effect]]:
    """Next state and effects for `event`. Never mutates `state`."""
    if isinstance(event, Mounted):
        if state.status is not Status.IDLE or state.request_id:
            return state, []
        return state, [StartClock(), RequestPosition()]

    if isinstance(event, PositionGranted):
        return _begin_fetch(state, f"{event.latitude},{event.longitude}")

    if isinstance(event, PositionUnavailable):
        return _begin_fetch(state, default_city)

    if isinstance(event, InputChanged):
        return replace(state, search_text=event.text), []

    if isinstance(event, KeyPressed):
        if event.key != CONFIRM_KEY:
            return state, []
        return transition(state, SearchSubmitted(), default_city)

    if isinstance(event, SearchSubmitted):
        if not state.search_text.strip():
            return state, []
        return _begin_fetch(state, state.search_text)

    if isinstance(event, FetchSucceeded):
        if event.request_id != state.request_id:
            return state, []
        return replace(state, status=Status.SUCCESS, weather=event.weather, error=None), []

    if isinstance(event, FetchFailed):
        if event.request_id != state.request_id:
            return state, []
        return replace(state, status=Status.ERROR, weather=None, error=event.message), []

    if isinstance(event, Ticked):
        return replace(state, now=event.now), []

    raise TypeError(f"Unknown dashboard event: {event!r}")


# Geolocation


class GeolocationUnavailable(Exception):
    """Position denied, unsupported or failed."""


@dataclass(frozen=True)
class Position:
    latitude: float
    longitude: float


class Geolocation(Protocol):
    async def current_position(self) -> Position: ...


class StaticGeolocation:
    """A position known up front; None behaves like a platform without geolocation."""

    def __init__(self, position: Optional[Position] = None):
        self.position = position

    async def current_position(self) -> Position:
        if self.position is None:
            raise GeolocationUnavailable("geolocation not supported")
        return self.position


class Dashboard:
    def __init__(
        self,
        config: DashboardConfig = DashboardConfig(),
        geolocation: Optional[Geolocation] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        now: Callable[[], datetime] = datetime.now,
        on_change: Optional[Callable[[UIState], None]] = None,
    ):
        self.config = config
        self.geolocation = geolocation or StaticGeolocation()
        self.now = now
        self.on_change = on_change
        self.state = UIState(now=now())
        self.client = httpx.AsyncClient(transport=transport) if transport else httpx.AsyncClient()
        self.clock = ClockTask(
            lambda tick: self.dispatch(Ticked(tick)),
            interval=config.clock_interval_seconds,
            now=now,
        )
        self.closed = False
        self._tasks: Set[asyncio.Task] = set()

    def view(self) -> DashboardView:
        return build_view(
            self.state.weather,
            self.state.now or self.now(),
            loading=self.state.loading,
            error=self.state.error,
        )

    async def mount(self):
        self.dispatch(Mounted())

    def search(self, text: str):
        """Type `text` into the search box and press the search button."""
        self.dispatch(InputChanged(text))
        self.dispatch(SearchSubmitted())

    def dispatch(self, event: Event):
        if self.closed:
            return
        new_state, effects = transition(self.state, event, self.config.default_city)
        if new_state is not self.state:
            if new_state.status is not self.state.status:
                logger.info(f"Dashboard {self.state.status.value} -> {new_state.status.value} ({new_state.query!r})")
            self.state = new_state
            if self.on_change is not None:
                self.on_change(new_state)
        for effect in effects:
            self._run(effect)

    def _run(self, effect: Effect):
        if isinstance(effect, StartClock):
            self.clock.start()
        elif isinstance(effect, RequestPosition):
            self._spawn(self._locate())
        elif isinstance(effect, FetchForecast):
            self._spawn(self._fetch(effect))

    def _spawn(self, coro):
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _locate(self):
        try:
            position = await self.geolocation.current_position()
        except GeolocationUnavailable as e:
            logger.info(f"No position ({e}); using {self.config.default_city}")
            self.dispatch(PositionUnavailable(reason=str(e)))
            return
        except Exception as e:
            # Any lookup failure counts as "no position", never as a dead dashboard
            logger.warning(f"Position lookup failed ({e!r}); using {self.config.default_city}")
            self.dispatch(PositionUnavailable(reason=type(e).__name__))
            return
        self.dispatch(PositionGranted(position.latitude, position.longitude))

    async def _fetch(self, effect: FetchForecast):
        logger.info(f"Fetching forecast for {effect.query!r}")
        try:
            response = await self.client.get(self.config.proxy_url, params={"query": effect.query})
            if not response.is_success:
                logger.warning(f"Proxy answered {response.status_code} for {effect.query!r}")
                self.dispatch(FetchFailed(effect.request_id, NOT_FOUND_MESSAGE))
                return
            weather = ForecastResponse.model_validate(response.json())
        except httpx.HTTPError as e:
            logger.error(f"Proxy request for {effect.query!r} failed: {e}")
            self.dispatch(FetchFailed(effect.request_id, UNREACHABLE_MESSAGE))
            return
        except (ValueError, ValidationError) as e:
            logger.error(f"Unreadable forecast for {effect.query!r}: {e}")
            self.dispatch(FetchFailed(effect.request_id, UNREACHABLE_MESSAGE))
            return
        self.dispatch(FetchSucceeded(effect.request_id, weather))

    async def settle(self):
        """Wait until no location lookup or fetch is in flight."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def teardown(self):
        """Stop the clock, drop in-flight work and release the HTTP client."""
        self.closed = True
        await self.clock.stop()
        for task in list(self._tasks):
            task.cancel()
        await asyncio.gather(*list(self._tasks), return_exceptions=True)
        await self.client.aclose()
        logger.info("Dashboard torn down")
