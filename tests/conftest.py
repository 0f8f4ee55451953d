"""Pytest configuration and fixtures."""

from datetime import date

import pytest

from weather_search.core.config import settings

GEOCODING_URL = "https://api.openweathermap.org/geo/1.0/direct"
FORECAST_URL = "https://api.met.no/weatherapi/locationforecast/2.0/compact"

OSLO = {"name": "Oslo", "lat": 59.91, "lon": 10.75, "country": "NO"}

# Monday
REFERENCE_DATE = date(2026, 1, 19)


def make_entry(
    time: str,
    temperature: float = 1.0,
    humidity: float = 80.0,
    wind: float = 3.0,
    symbol: str | None = "cloudy",
    precipitation: float | None = 0.4,
) -> dict:
    """Build one locationforecast timeseries entry."""
    data: dict = {
        "instant": {
            "details": {
                "air_pressure_at_sea_level": 1012.3,
                "air_temperature": temperature,
                "cloud_area_fraction": 90.1,
                "relative_humidity": humidity,
                "wind_from_direction": 210.4,
                "wind_speed": wind,
            }
        }
    }
    if symbol is not None:
        data["next_1_hours"] = {
            "summary": {"symbol_code": symbol},
            "details": {"precipitation_amount": 0.0},
        }
    if precipitation is not None:
        data["next_6_hours"] = {
            "summary": {"symbol_code": "rain"},
            "details": {"precipitation_amount": precipitation},
        }
    return {"time": time, "data": data}


def make_payload(entries: list[dict]) -> dict:
    """Wrap timeseries entries in a full locationforecast document."""
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [10.75, 59.91, 14]},
        "properties": {
            "meta": {
                "updated_at": "2026-01-19T10:12:54Z",
                "units": {
                    "air_pressure_at_sea_level": "hPa",
                    "air_temperature": "celsius",
                    "cloud_area_fraction": "%",
                    "precipitation_amount": "mm",
                    "relative_humidity": "%",
                    "wind_from_direction": "degrees",
                    "wind_speed": "m/s",
                },
            },
            "timeseries": entries,
        },
    }


def hourly_entries(count: int) -> list[dict]:
    return [
        make_entry(f"2026-01-19T{hour:02d}:00:00Z", temperature=float(hour))
        for hour in range(count)
    ]


@pytest.fixture(autouse=True)
def api_key(monkeypatch):
    """Configure a fake OpenWeather key for every test."""
    monkeypatch.setattr(settings, "OPENWEATHER_API_KEY", "test-key")
    return "test-key"


@pytest.fixture
def forecast_payload() -> dict:
    """Seven entries; the first has neither next_1_hours nor next_6_hours."""
    entries = hourly_entries(7)
    entries[0] = make_entry(
        "2026-01-19T00:00:00Z",
        temperature=-2.5,
        humidity=91.0,
        wind=4.2,
        symbol=None,
        precipitation=None,
    )
    return make_payload(entries)
