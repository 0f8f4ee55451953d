"""Tests for forecast normalization."""

from datetime import date

import pytest

from conftest import REFERENCE_DATE, hourly_entries, make_entry, make_payload
from weather_search.models.weather import ForecastResponse
from weather_search.services.normalizer import ForecastNormalizer, day_label


def decode(entries: list[dict]) -> ForecastResponse:
    return ForecastResponse.model_validate(make_payload(entries))


class TestDayLabel:
    """Test weekday labels."""

    def test_labels_follow_reference_date(self):
        labels = [day_label(REFERENCE_DATE, offset) for offset in range(7)]

        assert labels == ["MON", "TUE", "WED", "THU", "FRI", "SAT", "SUN"]

    def test_wraps_across_weeks_and_months(self):
        assert day_label(date(2026, 1, 31), 1) == "SUN"  # 1 February 2026
        assert day_label(date(2026, 12, 31), 1) == "FRI"  # 1 January 2027


class TestForecastNormalizer:
    """Test ForecastNormalizer.normalize."""

    @pytest.mark.parametrize("count, expected", [(0, 0), (1, 1), (4, 4), (5, 5), (7, 5), (48, 5)])
    def test_length_is_capped_and_never_padded(self, count, expected):
        """Test that exactly min(5, len(timeseries)) days are returned."""
        days = ForecastNormalizer().normalize(decode(hourly_entries(count)), REFERENCE_DATE)

        assert len(days) == expected

    def test_takes_leading_entries_in_order(self):
        days = ForecastNormalizer().normalize(decode(hourly_entries(7)), REFERENCE_DATE)

        assert [day.temperatureC for day in days] == [0.0, 1.0, 2.0, 3.0, 4.0]

    def test_labels_by_position_not_timestamp(self):
        """Test that hourly entries of a single day still get consecutive weekdays."""
        days = ForecastNormalizer().normalize(decode(hourly_entries(5)), REFERENCE_DATE)

        assert [day.dayLabel for day in days] == ["MON", "TUE", "WED", "THU", "FRI"]

    def test_maps_instant_details(self):
        entry = make_entry(
            "2026-01-19T12:00:00Z",
            temperature=-7.3,
            humidity=64.2,
            wind=11.8,
            symbol="heavysnow",
            precipitation=3.6,
        )

        (day,) = ForecastNormalizer().normalize(decode([entry]), REFERENCE_DATE)

        assert day.temperatureC == -7.3
        assert day.humidityPercent == 64.2
        assert day.windSpeedMs == 11.8
        assert day.precipitationMm == 3.6
        assert day.symbolCode == "heavysnow"

    def test_missing_next_6_hours_means_no_precipitation(self):
        entry = make_entry("2026-01-19T12:00:00Z", precipitation=None)

        (day,) = ForecastNormalizer().normalize(decode([entry]), REFERENCE_DATE)

        assert day.precipitationMm == 0
        assert day.symbolCode == "cloudy"

    def test_missing_next_1_hours_uses_fallback_symbol(self):
        entry = make_entry("2026-01-19T12:00:00Z", symbol=None, precipitation=1.5)

        (day,) = ForecastNormalizer().normalize(decode([entry]), REFERENCE_DATE)

        assert day.symbolCode == "cloud.sun.fill"
        assert day.precipitationMm == 1.5

    def test_seven_entry_payload(self, forecast_payload):
        """Test the first day of a payload whose first entry lacks both optional blocks."""
        payload = ForecastResponse.model_validate(forecast_payload)

        days = ForecastNormalizer().normalize(payload, REFERENCE_DATE)

        assert len(days) == 5
        assert days[0].precipitationMm == 0
        assert days[0].symbolCode == "cloud.sun.fill"
        assert days[0].temperatureC == -2.5
        assert days[1].symbolCode == "cloudy"
        assert days[1].precipitationMm == 0.4

    def test_deterministic_for_fixed_reference_date(self, forecast_payload):
        """Test that decoding and normalizing the same document twice gives equal days."""
        normalizer = ForecastNormalizer()

        first = normalizer.normalize(ForecastResponse.model_validate(forecast_payload), REFERENCE_DATE)
        second = normalizer.normalize(ForecastResponse.model_validate(forecast_payload), REFERENCE_DATE)

        assert first == second

    def test_limit_never_exceeds_five(self):
        """Test that a larger requested limit still yields at most five days."""
        normalizer = ForecastNormalizer(limit=10)

        days = normalizer.normalize(decode(hourly_entries(8)), REFERENCE_DATE)

        assert normalizer.limit == 5
        assert len(days) == 5

    def test_custom_limit_and_fallback(self):
        normalizer = ForecastNormalizer(limit=2, fallback_symbol="fair_day")
        entries = [make_entry("2026-01-19T00:00:00Z", symbol=None)] * 4

        days = normalizer.normalize(decode(entries), REFERENCE_DATE)

        assert len(days) == 2
        assert {day.symbolCode for day in days} == {"fair_day"}

    def test_defaults_to_today(self, monkeypatch):
        """Test that the reference date defaults to the local date."""

        class FixedDate(date):
            @classmethod
            def today(cls):
                return cls(2026, 1, 22)  # Thursday

        monkeypatch.setattr("weather_search.services.normalizer.date", FixedDate)

        days = ForecastNormalizer().normalize(decode(hourly_entries(2)))

        assert [day.dayLabel for day in days] == ["THU", "FRI"]


class TestTimestampLabels:
    """Test labelling from each entry's own timestamp."""

    def test_labels_from_entry_time(self):
        entries = [
            make_entry("2026-01-19T06:00:00Z"),
            make_entry("2026-01-19T18:00:00Z"),
            make_entry("2026-01-21T00:00:00Z"),
        ]

        days = ForecastNormalizer(label_from_timestamp=True).normalize(decode(entries), REFERENCE_DATE)

        assert [day.dayLabel for day in days] == ["MON", "MON", "WED"]

    def test_unparseable_time_falls_back_to_position(self):
        entries = [make_entry("2026-01-19T06:00:00Z"), make_entry("not a timestamp")]

        days = ForecastNormalizer(label_from_timestamp=True).normalize(decode(entries), REFERENCE_DATE)

        assert [day.dayLabel for day in days] == ["MON", "TUE"]

    def test_enabled_from_settings(self, monkeypatch):
        from weather_search.core.config import settings

        monkeypatch.setattr(settings, "FORECAST_LABEL_FROM_TIMESTAMP", True)

        assert ForecastNormalizer().label_from_timestamp is True
        assert ForecastNormalizer(label_from_timestamp=False).label_from_timestamp is False
