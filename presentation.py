"""
Derived display values for the dashboard.

Everything here is a pure function of a forecast payload (or its absence)
and, for the clock, the current time. Renderers read the `DashboardView`
built by `build_view` and never look at the raw payload themselves.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import FrozenSet, List, Optional, Tuple

from models import Condition, ForecastResponse, Number


class Icon(str, Enum):
    CLEAR = "clear"
    CLOUDY = "cloudy"
    RAIN = "rain"
    SNOW = "snow"
    DRIZZLE = "drizzle"
    THUNDERSTORM = "thunderstorm"


class Theme(str, Enum):
    DEFAULT = "default"
    RAINY = "rainy"
    NIGHT = "night"


CLEAR_CODES = frozenset({1000})
CLOUDY_CODES = frozenset({1003, 1006, 1009})
RAIN_CODES = frozenset({1063, 1180, 1183, 1186, 1189, 1192, 1195, 1240, 1243, 1246})
SNOW_CODES = frozenset({1066, 1210, 1213, 1216, 1219, 1222, 1225, 1255, 1258})
DRIZZLE_CODES = frozenset({1150, 1153, 1168, 1171})
THUNDERSTORM_CODES = frozenset({1087, 1273, 1276, 1279, 1282})

# Checked in order; first match wins
ICON_TABLE: Tuple[Tuple[FrozenSet[int], Icon], ...] = (
    (CLEAR_CODES, Icon.CLEAR),
    (CLOUDY_CODES, Icon.CLOUDY),
    (RAIN_CODES, Icon.RAIN),
    (SNOW_CODES, Icon.SNOW),
    (DRIZZLE_CODES, Icon.DRIZZLE),
    (THUNDERSTORM_CODES, Icon.THUNDERSTORM),
)

# Only the plain rain codes darken the daytime background, not the showers
RAIN_THEME_CODES = frozenset({1063, 1180, 1183, 1186, 1189, 1192, 1195})

DEFAULT_CODE = 1000

WEEKDAY_ABBR = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def condition_code(condition: Optional[Condition]) -> int:
    """Code of a condition block; a missing block or a zero code reads as clear."""
    if condition is None or not condition.code:
        return DEFAULT_CODE
    return condition.code


def icon_for_code(code: int) -> Icon:
    for codes, icon in ICON_TABLE:
        if code in codes:
            return icon
    return Icon.CLOUDY


def icon_for_condition(condition: Optional[Condition]) -> Icon:
    return icon_for_code(condition_code(condition))


def theme_for(has_forecast: bool, is_day: bool, code: int) -> Theme:
    """Background theme from whether a forecast is loaded, day/night and condition code."""
    if not has_forecast:
        return Theme.DEFAULT
    if not is_day:
        return Theme.NIGHT
    if code in CLEAR_CODES or code in CLOUDY_CODES:
        return Theme.DEFAULT
    if code in RAIN_THEME_CODES:
        return Theme.RAINY
    return Theme.DEFAULT


def theme_for_weather(weather: Optional[ForecastResponse]) -> Theme:
    if weather is None:
        return theme_for(False, True, DEFAULT_CODE)
    current = weather.current
    return theme_for(True, bool(current.is_day), condition_code(current.condition))


def round_temperature(value: float) -> int:
    """Round to the nearest degree, halves towards +inf (so -0.5 gives 0)."""
    return int(math.floor(value + 0.5))


def day_label(index: int, day_date: str) -> str:
    """'Today' for the first forecast day, abbreviated weekday after that."""
    if index == 0:
        return "Today"
    return WEEKDAY_ABBR[date.fromisoformat(day_date).weekday()]


def format_long_date(now: datetime) -> str:
    """e.g. 'Monday, October 19, 2026'"""
    return f"{WEEKDAY_NAMES[now.weekday()]}, {MONTH_NAMES[now.month - 1]} {now.day}, {now.year}"


def format_clock(now: datetime) -> str:
    """e.g. '09:05 AM'"""
    hour = now.hour % 12 or 12
    suffix = "AM" if now.hour < 12 else "PM"
    return f"{hour:02d}:{now.minute:02d} {suffix}"


def local_time(localtime: str) -> str:
    """Time part of the provider's 'YYYY-MM-DD H:MM' local timestamp."""
    parts = localtime.split(" ")
    return parts[1] if len(parts) > 1 else ""


@dataclass(frozen=True)
class DayView:
    label: str
    icon: Icon
    text: str
    max_temp: int
    min_temp: int
    chance_of_rain: Optional[Number]


@dataclass(frozen=True)
class CurrentView:
    place: str
    local_time: str
    icon: Icon
    temperature: int
    feels_like: Optional[int]
    text: str
    wind_kph: Optional[Number]
    wind_dir: Optional[str]
    humidity: Optional[Number]
    vis_km: Optional[Number]
    pressure_mb: Optional[Number]
    sunrise: str
    sunset: str


@dataclass(frozen=True)
class DashboardView:
    theme: Theme
    date_line: str
    clock: str
    loading: bool
    error: Optional[str]
    current: Optional[CurrentView]
    days: Tuple[DayView, ...]


def build_days(weather: ForecastResponse) -> List[DayView]:
    return [
        DayView(
            label=day_label(index, forecast_day.date),
            icon=icon_for_condition(forecast_day.day.condition),
            text=forecast_day.day.condition.text if forecast_day.day.condition else "",
            max_temp=round_temperature(forecast_day.day.maxtemp_c),
            min_temp=round_temperature(forecast_day.day.mintemp_c),
            chance_of_rain=forecast_day.day.daily_chance_of_rain,
        )
        for index, forecast_day in enumerate(weather.forecast.forecastday)
    ]


def build_current(weather: ForecastResponse) -> CurrentView:
    current = weather.current
    days = weather.forecast.forecastday
    astro = days[0].astro if days else None
    return CurrentView(
        place=f"{weather.location.name}, {weather.location.country}",
        local_time=local_time(weather.location.localtime),
        icon=icon_for_condition(current.condition),
        temperature=round_temperature(current.temp_c),
        feels_like=round_temperature(current.feelslike_c) if current.feelslike_c is not None else None,
        text=current.condition.text if current.condition else "",
        wind_kph=current.wind_kph,
        wind_dir=current.wind_dir,
        humidity=current.humidity,
        vis_km=current.vis_km,
        pressure_mb=current.pressure_mb,
        sunrise=astro.sunrise if astro else "",
        sunset=astro.sunset if astro else "",
    )


def build_view(
    weather: Optional[ForecastResponse],
    now: datetime,
    loading: bool = False,
    error: Optional[str] = None,
) -> DashboardView:
    return DashboardView(
        theme=theme_for_weather(weather),
        date_line=format_long_date(now),
        clock=format_clock(now),
        loading=loading,
        error=error,
        current=build_current(weather) if weather is not None else None,
        days=tuple(build_days(weather)) if weather is not None else (),
    )
