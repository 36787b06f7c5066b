import copy

import pytest

FORECAST_PAYLOAD = {
    "location": {
        "name": "Nairobi",
        "region": "Nairobi Area",
        "country": "Kenya",
        "lat": -1.28,
        "lon": 36.82,
        "localtime": "2026-10-19 9:05",
    },
    "current": {
        "temp_c": 21.5,
        "feelslike_c": 20.4,
        "is_day": 1,
        "condition": {"text": "Partly cloudy", "code": 1003},
        "wind_kph": 13.7,
        "wind_dir": "ENE",
        "humidity": 64,
        "vis_km": 10.0,
        "pressure_mb": 1021.0,
        "air_quality": {"pm2_5": 7.4},
    },
    "forecast": {
        "forecastday": [
            {
                "date": "2026-10-19",
                "day": {
                    "maxtemp_c": 26.5,
                    "mintemp_c": 14.4,
                    "daily_chance_of_rain": 20,
                    "condition": {"text": "Patchy rain nearby", "code": 1063},
                },
                "astro": {"sunrise": "06:17 AM", "sunset": "06:23 PM"},
            },
            {
                "date": "2026-10-20",
                "day": {
                    "maxtemp_c": 25.1,
                    "mintemp_c": 13.9,
                    "daily_chance_of_rain": 0,
                    "condition": {"text": "Sunny", "code": 1000},
                },
                "astro": {"sunrise": "06:17 AM", "sunset": "06:23 PM"},
            },
            {
                "date": "2026-10-21",
                "day": {
                    "maxtemp_c": 22.8,
                    "mintemp_c": 15.2,
                    "daily_chance_of_rain": 87,
                    "condition": {"text": "Moderate rain", "code": 1189},
                },
                "astro": {"sunrise": "06:16 AM", "sunset": "06:23 PM"},
            },
            {
                "date": "2026-10-22",
                "day": {
                    "maxtemp_c": 24.0,
                    "mintemp_c": 14.0,
                    "daily_chance_of_rain": 45,
                    "condition": {"text": "Thundery outbreaks possible", "code": 1087},
                },
                "astro": {"sunrise": "06:16 AM", "sunset": "06:23 PM"},
            },
            {
                "date": "2026-10-23",
                "day": {
                    "maxtemp_c": 23.5,
                    "mintemp_c": 13.5,
                    "daily_chance_of_rain": 10,
                    "condition": {"text": "Mist", "code": 1030},
                },
                "astro": {"sunrise": "06:16 AM", "sunset": "06:24 PM"},
            },
        ]
    },
}


@pytest.fixture
def forecast_payload():
    return copy.deepcopy(FORECAST_PAYLOAD)
