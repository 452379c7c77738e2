"""HTTP API for the weather dashboard."""

from typing import Optional

from fastapi import APIRouter, Depends, Request

from weatherdash.context import AppContext
from weatherdash.models import (
    DeleteResponse,
    Favorite,
    FavoriteCreate,
    ForecastResult,
    Place,
    SearchWeatherResponse,
)
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="weatherdash/api")


def get_context(request: Request) -> AppContext:
    """Return the context the app was built with."""
    return request.app.state.context


router = APIRouter()


@router.get("/geocode", response_model=list[Place])
def geocode(q: Optional[str] = None, ctx: AppContext = Depends(get_context)):
    """Place suggestions for free text; blank text yields []."""
    return ctx.weather.geocode(q)


@router.get("/forecast", response_model=ForecastResult)
def forecast(
    lat: Optional[str] = None,
    lon: Optional[str] = None,
    tz: Optional[str] = None,
    ctx: AppContext = Depends(get_context),
):
    """Current conditions and 7-day forecast for a coordinate pair."""
    return ctx.weather.forecast(lat, lon, tz)


@router.get("/searchWeather", response_model=SearchWeatherResponse)
def search_weather(q: Optional[str] = None, tz: Optional[str] = None, ctx: AppContext = Depends(get_context)):
    """Best geocoding match for `q` together with its forecast."""
    return ctx.weather.search_weather(q, tz)


@router.get("/favorites", response_model=list[Favorite])
def list_favorites(ctx: AppContext = Depends(get_context)):
    """All favorites, newest first."""
    return ctx.favorites.list_favorites()


@router.post("/favorites", response_model=Favorite)
def create_favorite(body: FavoriteCreate, ctx: AppContext = Depends(get_context)):
    """Save a favorite; re-saving known coordinates returns the stored record."""
    return ctx.favorites.create_favorite(body.name, body.lat, body.lon)


@router.delete("/favorites/{favorite_id}", response_model=DeleteResponse)
def delete_favorite(favorite_id: str, ctx: AppContext = Depends(get_context)):
    """Delete a favorite; unknown ids are not an error."""
    ctx.favorites.delete_favorite(favorite_id)
    logger.info(f"Deleted favorite {favorite_id}")
    return DeleteResponse(ok=True)
