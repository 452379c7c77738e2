"""Blocking HTTP client for the WeatherDash API, used by the dashboard controller."""
from __future__ import annotations

from typing import Any, List, Optional, Type, TypeVar

import requests
from pydantic import BaseModel, ValidationError as PydanticValidationError

from weatherdash.models import Favorite, ForecastResult, Place, SearchWeatherResponse
from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="dashboard/api_client")

ModelT = TypeVar("ModelT", bound=BaseModel)


class DashboardApiError(Exception):
    """A failed API call; `message` is the server's `error` text when it sent one."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class DashboardApiClient:
    """Thin wrapper over the `/api` endpoints returning typed models."""

    def __init__(self, base_url: str, *, timeout: float = 10, session: requests.Session | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            logger.warning(f"{method} {path} failed: {exc}")
            raise DashboardApiError("Network error") from exc

        try:
            data = resp.json()
        except ValueError:
            data = None

        if isinstance(data, dict) and data.get("error"):
            raise DashboardApiError(str(data["error"]), resp.status_code)
        if resp.status_code >= 400:
            raise DashboardApiError(f"Request failed with status {resp.status_code}", resp.status_code)
        return data

    @staticmethod
    def _parse(model: Type[ModelT], data: Any) -> ModelT:
        try:
            return model.model_validate(data)
        except PydanticValidationError as exc:
            logger.warning(f"Unexpected {model.__name__} payload: {exc}")
            raise DashboardApiError("Invalid response") from exc

    def _parse_list(self, model: Type[ModelT], data: Any) -> List[ModelT]:
        if data is None:
            return []
        if not isinstance(data, list):
            logger.warning(f"Expected a list of {model.__name__}, got {type(data).__name__}")
            raise DashboardApiError("Invalid response")
        return [self._parse(model, item) for item in data]

    def geocode(self, query: str) -> List[Place]:
        data = self._request("GET", "/api/geocode", params={"q": query})
        return self._parse_list(Place, data)

    def forecast(self, place: Place, timezone: str = "auto") -> ForecastResult:
        data = self._request(
            "GET", "/api/forecast", params={"lat": place.lat, "lon": place.lon, "tz": timezone}
        )
        return self._parse(ForecastResult, data)

    def search_weather(self, query: str, timezone: str = "auto") -> SearchWeatherResponse:
        data = self._request("GET", "/api/searchWeather", params={"q": query, "tz": timezone})
        return self._parse(SearchWeatherResponse, data)

    def list_favorites(self) -> List[Favorite]:
        data = self._request("GET", "/api/favorites")
        return self._parse_list(Favorite, data)

    def save_favorite(self, place: Place) -> Favorite:
        data = self._request(
            "POST", "/api/favorites", json={"name": place.name, "lat": place.lat, "lon": place.lon}
        )
        return self._parse(Favorite, data)

    def delete_favorite(self, favorite_id: str) -> None:
        self._request("DELETE", f"/api/favorites/{favorite_id}")
