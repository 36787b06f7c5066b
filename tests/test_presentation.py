import json
from datetime import datetime

import pytest

from models import Condition, ForecastResponse
from presentation import (
    CLEAR_CODES,
    CLOUDY_CODES,
    DRIZZLE_CODES,
    RAIN_CODES,
    SNOW_CODES,
    THUNDERSTORM_CODES,
    Icon,
    Theme,
    build_view,
    day_label,
    format_clock,
    format_long_date,
    icon_for_code,
    icon_for_condition,
    local_time,
    round_temperature,
    theme_for,
    theme_for_weather,
)

NOW = datetime(2026, 10, 19, 9, 5, 30)


@pytest.mark.parametrize(
    "codes,icon",
    [
        (CLEAR_CODES, Icon.CLEAR),
        (CLOUDY_CODES, Icon.CLOUDY),
        (RAIN_CODES, Icon.RAIN),
        (SNOW_CODES, Icon.SNOW),
        (DRIZZLE_CODES, Icon.DRIZZLE),
        (THUNDERSTORM_CODES, Icon.THUNDERSTORM),
    ],
)
def test_icon_table(codes, icon):
    for code in codes:
        assert icon_for_code(code) == icon


def test_code_tables():
    assert CLEAR_CODES == {1000}
    assert CLOUDY_CODES == {1003, 1006, 1009}
    assert RAIN_CODES == {1063, 1180, 1183, 1186, 1189, 1192, 1195, 1240, 1243, 1246}
    assert SNOW_CODES == {1066, 1210, 1213, 1216, 1219, 1222, 1225, 1255, 1258}
    assert DRIZZLE_CODES == {1150, 1153, 1168, 1171}
    assert THUNDERSTORM_CODES == {1087, 1273, 1276, 1279, 1282}


@pytest.mark.parametrize("code", [1030, 1135, 1147, 1201, 0, -1, 99999])
def test_unknown_codes_are_cloudy(code):
    assert icon_for_code(code) == Icon.CLOUDY


def test_missing_condition_reads_as_clear():
    assert icon_for_condition(None) == Icon.CLEAR
    assert icon_for_condition(Condition(text="?")) == Icon.CLEAR
    assert icon_for_condition(Condition(text="Snow", code=1225)) == Icon.SNOW


@pytest.mark.parametrize("is_day", [True, False])
@pytest.mark.parametrize("code", [1000, 1063, 1225, 1087])
def test_theme_without_forecast_is_default(is_day, code):
    assert theme_for(False, is_day, code) == Theme.DEFAULT


@pytest.mark.parametrize("code", [1000, 1003, 1063, 1195, 1225, 1087, 12345])
def test_theme_at_night_ignores_condition(code):
    assert theme_for(True, False, code) == Theme.NIGHT


@pytest.mark.parametrize(
    "code,theme",
    [
        (1000, Theme.DEFAULT),
        (1003, Theme.DEFAULT),
        (1009, Theme.DEFAULT),
        (1063, Theme.RAINY),
        (1180, Theme.RAINY),
        (1195, Theme.RAINY),
        (1240, Theme.DEFAULT),
        (1225, Theme.DEFAULT),
        (1087, Theme.DEFAULT),
    ],
)
def test_daytime_theme(code, theme):
    assert theme_for(True, True, code) == theme


def test_theme_for_weather(forecast_payload):
    assert theme_for_weather(None) == Theme.DEFAULT
    forecast_payload["current"]["is_day"] = 0
    assert theme_for_weather(ForecastResponse.model_validate(forecast_payload)) == Theme.NIGHT


@pytest.mark.parametrize(
    "value,expected",
    [(21.4, 21), (21.5, 22), (21.6, 22), (-0.5, 0), (-1.5, -1), (-2.6, -3), (0.0, 0)],
)
def test_round_temperature(value, expected):
    assert round_temperature(value) == expected


def test_day_labels():
    assert day_label(0, "2026-10-23") == "Today"
    assert day_label(1, "2026-10-20") == "Tue"
    assert day_label(4, "2026-10-25") == "Sun"


def test_time_formatting():
    assert format_long_date(NOW) == "Monday, October 19, 2026"
    assert format_clock(NOW) == "09:05 AM"
    assert format_clock(datetime(2026, 10, 19, 0, 7)) == "12:07 AM"
    assert format_clock(datetime(2026, 10, 19, 12, 0)) == "12:00 PM"
    assert format_clock(datetime(2026, 10, 19, 23, 59)) == "11:59 PM"
    assert local_time("2026-10-19 9:05") == "9:05"
    assert local_time("") == ""


def test_build_view(forecast_payload):
    view = build_view(ForecastResponse.model_validate(forecast_payload), NOW)

    assert view.theme == Theme.DEFAULT
    assert view.date_line == "Monday, October 19, 2026"
    assert view.current.place == "Nairobi, Kenya"
    assert view.current.local_time == "9:05"
    assert view.current.icon == Icon.CLOUDY
    assert view.current.temperature == 22
    assert view.current.feels_like == 20
    assert view.current.humidity == 64
    assert view.current.wind_kph == 13.7
    assert view.current.pressure_mb == 1021.0
    assert view.current.sunrise == "06:17 AM"
    assert [d.label for d in view.days] == ["Today", "Tue", "Wed", "Thu", "Fri"]
    assert [d.icon for d in view.days] == [
        Icon.RAIN,
        Icon.CLEAR,
        Icon.RAIN,
        Icon.THUNDERSTORM,
        Icon.CLOUDY,
    ]
    assert [(d.max_temp, d.min_temp) for d in view.days] == [
        (27, 14),
        (25, 14),
        (23, 15),
        (24, 14),
        (24, 14),
    ]
    assert [d.chance_of_rain for d in view.days] == [20, 0, 87, 45, 10]


def test_build_view_without_weather():
    view = build_view(None, NOW, loading=True)

    assert view.theme == Theme.DEFAULT
    assert view.current is None
    assert view.days == ()
    assert view.loading


def test_derived_values_survive_json_round_trip(forecast_payload):
    weather = ForecastResponse.model_validate(forecast_payload)
    first = build_view(weather, NOW)

    reparsed = ForecastResponse.model_validate(json.loads(json.dumps(forecast_payload)))
    assert build_view(reparsed, NOW) == first
    assert build_view(reparsed, NOW) == first
