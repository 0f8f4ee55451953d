"""Location, forecast payload, and presentation models."""

from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


class Location(BaseModel):
    """A candidate location returned by the geocoding API.

    The wire keys are ``lat``/``lon``; the model exposes them as
    ``latitude``/``longitude``. Every instance gets a fresh ``id`` so that
    identical names from different searches can be told apart in a list.

    Example:
        >>> oslo = Location.model_validate(
        ...     {"name": "Oslo", "lat": 59.91, "lon": 10.75, "country": "NO"}
        ... )
        >>> oslo.latitude, oslo.longitude
        (59.91, 10.75)
        >>> oslo.display_name
        'Oslo, NO'
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: UUID = Field(default_factory=uuid4, description="Identifier for list rendering")
    name: str = Field(..., description="Location name")
    latitude: float = Field(
        ...,
        alias="lat",
        description="Latitude in decimal degrees",
        ge=-90.0,
        le=90.0,
    )
    longitude: float = Field(
        ...,
        alias="lon",
        description="Longitude in decimal degrees",
        ge=-180.0,
        le=180.0,
    )
    country: str | None = Field(default=None, description="ISO 3166 country code")

    @property
    def display_name(self) -> str:
        if self.country is not None:
            return f"{self.name}, {self.country}"
        return self.name


class Geometry(BaseModel):
    """GeoJSON point of the forecast location."""

    type: str
    coordinates: list[float]


class Meta(BaseModel):
    """Forecast metadata: update time and units per field."""

    updated_at: str
    units: dict[str, str]


class InstantDetails(BaseModel):
    """Instantaneous values at the entry's timestamp.

    All three are required; a payload missing any of them does not decode.
    """

    air_temperature: float
    relative_humidity: float
    wind_speed: float


class InstantData(BaseModel):
    details: InstantDetails


class Summary(BaseModel):
    symbol_code: str


class NextOneHours(BaseModel):
    """Summary for the hour following the entry."""

    summary: Summary


class PrecipitationDetails(BaseModel):
    precipitation_amount: float


class NextSixHours(BaseModel):
    """Accumulated values for the six hours following the entry."""

    details: PrecipitationDetails


class EntryData(BaseModel):
    instant: InstantData
    next_1_hours: NextOneHours | None = None
    next_6_hours: NextSixHours | None = None


class TimeseriesEntry(BaseModel):
    """One timestamped record of the locationforecast timeseries.

    Example:
        >>> entry = TimeseriesEntry.model_validate({
        ...     "time": "2026-01-20T12:00:00Z",
        ...     "data": {"instant": {"details": {
        ...         "air_temperature": -3.1,
        ...         "relative_humidity": 81.0,
        ...         "wind_speed": 2.4,
        ...     }}},
        ... })
        >>> entry.data.next_1_hours is None
        True
    """

    time: str
    data: EntryData


class Properties(BaseModel):
    meta: Meta
    timeseries: list[TimeseriesEntry]


class ForecastResponse(BaseModel):
    """Full response from the MET Norway locationforecast compact endpoint."""

    type: str
    geometry: Geometry
    properties: Properties


class ForecastDay(BaseModel):
    """One presentation-ready forecast entry.

    Example:
        >>> day = ForecastDay(
        ...     dayLabel="MON",
        ...     temperatureC=4.2,
        ...     humidityPercent=70.0,
        ...     windSpeedMs=3.1,
        ...     symbolCode="cloudy",
        ... )
        >>> day.precipitationMm
        0.0
    """

    model_config = ConfigDict(frozen=True)

    dayLabel: str = Field(..., description="Uppercase three-letter weekday")
    temperatureC: float = Field(..., description="Air temperature in Celsius")
    humidityPercent: float = Field(..., description="Relative humidity in percent")
    windSpeedMs: float = Field(..., description="Wind speed in m/s")
    precipitationMm: float = Field(
        default=0.0,
        description="Precipitation over the next six hours in mm (0 if unknown)",
    )
    symbolCode: str = Field(..., description="Weather symbol identifier")


class SessionSnapshot(BaseModel):
    """Point-in-time copy of the observable session state."""

    searchText: str = Field(default="", description="Raw text of the search field")
    searchResults: list[Location] = Field(default_factory=list)
    selectedLocation: Location | None = None
    weatherData: list[ForecastDay] = Field(
        default_factory=list,
        description="Normalized forecast, at most five entries",
    )
    errorMessage: str | None = None
