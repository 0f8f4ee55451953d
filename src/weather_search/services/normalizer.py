"""Normalization of the raw forecast timeseries into presentation days."""

from datetime import date, datetime, timedelta

from loguru import logger

from ..core.config import settings
from ..models.weather import ForecastDay, ForecastResponse, TimeseriesEntry

MAX_FORECAST_DAYS = 5

WEEKDAY_ABBREVIATIONS = ("MON", "TUE", "WED", "THU", "FRI", "SAT", "SUN")


def day_label(reference_date: date, offset: int) -> str:
    """Uppercase weekday abbreviation of ``reference_date + offset`` days.

    Locale independent.

    Example:
        >>> day_label(date(2026, 1, 19), 0)
        'MON'
        >>> day_label(date(2026, 1, 19), 6)
        'SUN'
    """
    return WEEKDAY_ABBREVIATIONS[(reference_date + timedelta(days=offset)).weekday()]


def _parse_entry_date(timestamp: str) -> date | None:
    try:
        return datetime.fromisoformat(timestamp.replace("Z", "+00:00")).date()
    except ValueError:
        return None


class ForecastNormalizer:
    """Turns a locationforecast payload into at most ``FORECAST_DAYS`` entries.

    The limit is clamped to five whatever the caller passes.

    By default entry ``i`` is labelled with the weekday of today + ``i`` days,
    regardless of the entry's own timestamp. This assumes the timeseries starts
    now and is sampled about once a day, which MET Norway's hourly series is
    not. Setting ``label_from_timestamp`` labels each entry from its ``time``
    field instead.

    Missing optional blocks fall back to zero precipitation and the configured
    fallback symbol, so normalization never fails.

    Example:
        >>> normalizer = ForecastNormalizer()
        >>> normalizer.limit
        5
    """

    def __init__(
        self,
        limit: int | None = None,
        fallback_symbol: str | None = None,
        label_from_timestamp: bool | None = None,
    ):
        limit = limit if limit is not None else settings.FORECAST_DAYS
        self.limit = min(limit, MAX_FORECAST_DAYS)
        self.fallback_symbol = fallback_symbol or settings.FALLBACK_SYMBOL_CODE
        self.label_from_timestamp = (
            label_from_timestamp
            if label_from_timestamp is not None
            else settings.FORECAST_LABEL_FROM_TIMESTAMP
        )

    def normalize(
        self,
        payload: ForecastResponse,
        reference_date: date | None = None,
    ) -> list[ForecastDay]:
        """Normalize the first entries of the payload's timeseries.

        Args:
            payload: Decoded forecast payload
            reference_date: Date treated as "today"; defaults to the local date

        Returns:
            ``min(limit, len(timeseries))`` forecast days, in upstream order
        """
        if reference_date is None:
            reference_date = date.today()

        entries = payload.properties.timeseries[: self.limit]
        days = [
            self._normalize_entry(entry, self._label(entry, reference_date, index))
            for index, entry in enumerate(entries)
        ]

        logger.debug(
            "Normalized forecast",
            available=len(payload.properties.timeseries),
            days=len(days),
        )
        return days

    def _label(self, entry: TimeseriesEntry, reference_date: date, index: int) -> str:
        if self.label_from_timestamp:
            entry_date = _parse_entry_date(entry.time)
            if entry_date is not None:
                return day_label(entry_date, 0)
            logger.warning("Unparseable timeseries timestamp, labelling by position")
        return day_label(reference_date, index)

    def _normalize_entry(self, entry: TimeseriesEntry, label: str) -> ForecastDay:
        details = entry.data.instant.details
        next_1_hours = entry.data.next_1_hours
        next_6_hours = entry.data.next_6_hours

        return ForecastDay(
            dayLabel=label,
            temperatureC=details.air_temperature,
            humidityPercent=details.relative_humidity,
            windSpeedMs=details.wind_speed,
            precipitationMm=(
                next_6_hours.details.precipitation_amount if next_6_hours is not None else 0.0
            ),
            symbolCode=(
                next_1_hours.summary.symbol_code
                if next_1_hours is not None
                else self.fallback_symbol
            ),
        )
