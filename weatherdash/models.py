"""Pydantic models for places, favorites and the Open-Meteo forecast payload."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Place(BaseModel):
    """A named geographic point; transient unless saved as a favorite."""
    name: str
    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)


class Favorite(BaseModel):
    """A persisted place."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    lat: float
    lon: float
    created_at: datetime = Field(alias="createdAt")


class FavoriteCreate(BaseModel):
    """Incoming favorite payload; coordinates must be JSON numbers."""
    name: str
    lat: float = Field(strict=True)
    lon: float = Field(strict=True)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name must not be blank")
        return v


class DeleteResponse(BaseModel):
    ok: bool = True


class ForecastCurrent(BaseModel):
    """Point-in-time metrics; every value may be missing upstream."""
    model_config = ConfigDict(extra="allow")

    time: Optional[str] = None
    interval: Optional[int] = None
    temperature_2m: Optional[float] = None
    relative_humidity_2m: Optional[float] = None
    apparent_temperature: Optional[float] = None
    wind_speed_10m: Optional[float] = None
    precipitation: Optional[float] = None


class ForecastDaily(BaseModel):
    """Parallel arrays indexed by day offset."""
    model_config = ConfigDict(extra="allow")

    time: list[str]
    weather_code: Optional[list[Optional[int]]] = None
    temperature_2m_max: list[Optional[float]]
    temperature_2m_min: list[Optional[float]]
    precipitation_sum: list[Optional[float]]
    uv_index_max: Optional[list[Optional[float]]] = None
    wind_speed_10m_max: Optional[list[Optional[float]]] = None


class ForecastResult(BaseModel):
    """Open-Meteo forecast response; unknown fields are passed through untouched."""
    model_config = ConfigDict(extra="allow")

    latitude: Optional[float] = None
    longitude: Optional[float] = None
    timezone: Optional[str] = None
    timezone_abbreviation: Optional[str] = None
    utc_offset_seconds: Optional[int] = None
    elevation: Optional[float] = None
    current_units: Optional[dict[str, str]] = None
    current: Optional[ForecastCurrent] = None
    daily_units: Optional[dict[str, str]] = None
    daily: Optional[ForecastDaily] = None


class SearchWeatherResponse(BaseModel):
    place: Place
    forecast: ForecastResult
