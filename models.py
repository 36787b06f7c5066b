from pydantic import BaseModel, ConfigDict
from typing import List, Optional, Union


class ServerConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    host: str = "0.0.0.0"
    port: int = 8000


class UpstreamConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    base_url: str = "https://api.weatherapi.com/v1"
    api_key: str = ""
    forecast_days: int = 5
    aqi: bool = True
    timeout_seconds: Optional[float] = None  # None keeps the httpx default


class DashboardConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    proxy_url: str = "http://localhost:8000/api/weather"
    default_city: str = "Nairobi"
    clock_interval_seconds: float = 1.0


class Config(BaseModel):
    model_config = ConfigDict(frozen=True)

    server: ServerConfig = ServerConfig()
    upstream: UpstreamConfig = UpstreamConfig()
    dashboard: DashboardConfig = DashboardConfig()


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None


Number = Union[int, float]


# Forecast payload as read by the dashboard. The proxy never touches these;
# unknown upstream fields are kept as-is.


class _Upstream(BaseModel):
    model_config = ConfigDict(extra="allow")


class Condition(_Upstream):
    text: str = ""
    code: Optional[int] = None


class Location(_Upstream):
    name: str
    country: str = ""
    localtime: str = ""


class Current(_Upstream):
    temp_c: float
    feelslike_c: Optional[float] = None
    condition: Optional[Condition] = None
    wind_kph: Optional[Number] = None
    wind_dir: Optional[str] = None
    humidity: Optional[Number] = None
    vis_km: Optional[Number] = None
    pressure_mb: Optional[Number] = None
    is_day: int = 1


class Astro(_Upstream):
    sunrise: str = ""
    sunset: str = ""


class Day(_Upstream):
    maxtemp_c: float
    mintemp_c: float
    condition: Optional[Condition] = None
    daily_chance_of_rain: Optional[Number] = None


class ForecastDay(_Upstream):
    date: str
    day: Day
    astro: Astro = Astro()


class Forecast(_Upstream):
    forecastday: List[ForecastDay] = []


class ForecastResponse(_Upstream):
    location: Location
    current: Current
    forecast: Forecast = Forecast()
