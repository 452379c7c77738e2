"""Dashboard controller: turns user actions into API calls and state updates."""
from __future__ import annotations

import asyncio
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from weatherdash.config import DashboardSettings
from weatherdash.dashboard.api_client import DashboardApiClient, DashboardApiError
from weatherdash.dashboard.debounce import Debouncer
from weatherdash.dashboard.state import DashboardState
from weatherdash.dashboard.view import map_click_place
from weatherdash.models import Favorite, Place
from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="dashboard/controller")


class DashboardController:
    """
    Owns a DashboardState and mutates it in response to user actions.

    Blocking API calls run in worker threads so the event loop stays free for
    input. Forecast and search requests carry a sequence number and only the
    newest one may write its result; older responses are dropped.
    """

    def __init__(
        self,
        api: DashboardApiClient,
        *,
        timezone: str = "auto",
        debounce_seconds: float = 0.35,
        state: Optional[DashboardState] = None,
    ) -> None:
        self.api = api
        self.timezone = timezone
        self.state = state or DashboardState()
        self.suggestions = Debouncer(debounce_seconds, self._fetch_suggestions)
        self._request_seq = 0

    @classmethod
    def from_settings(cls, settings: DashboardSettings | None = None) -> "DashboardController":
        settings = settings or DashboardSettings()
        api = DashboardApiClient(settings.api_base_url, timeout=settings.http_timeout_seconds)
        return cls(api, timezone=settings.timezone, debounce_seconds=settings.debounce_seconds)

    async def start(self) -> None:
        """Load favorites once; a failure leaves the list empty."""
        try:
            self.state.favorites = await asyncio.to_thread(self.api.list_favorites)
        except DashboardApiError as exc:
            logger.warning(f"Could not load favorites: {exc.message}")

    def close(self) -> None:
        self.suggestions.cancel()

    # search box

    def set_query(self, text: str) -> None:
        """Record typed text and (re)schedule the suggestion lookup."""
        self.state.query = text
        if not text.strip():
            self.suggestions.cancel()
            self.state.suggestions = []
            return
        self.suggestions.trigger(text)

    async def _fetch_suggestions(self, text: str) -> None:
        try:
            self.state.suggestions = await asyncio.to_thread(self.api.geocode, text)
        except DashboardApiError:
            self.state.suggestions = []

    async def select_suggestion(self, place: Place) -> None:
        self.set_query(place.name)
        await self.show_place(place)

    async def select_favorite(self, favorite: Favorite) -> None:
        self.set_query(favorite.name)
        try:
            place = Place(name=favorite.name, lat=favorite.lat, lon=favorite.lon)
        except PydanticValidationError:
            logger.warning(f"Favorite {favorite.id} has out-of-range coordinates ({favorite.lat}, {favorite.lon})")
            self.state.error = "Invalid favorite location"
            return
        await self.show_place(place)

    async def click_map(self, lat: float, lon: float) -> None:
        await self.show_place(map_click_place(lat, lon))

    # forecast requests

    def _begin_request(self) -> int:
        self._request_seq += 1
        self.state.loading = True
        self.state.error = ""
        return self._request_seq

    def _is_current(self, seq: int) -> bool:
        return seq == self._request_seq

    async def show_place(self, place: Place) -> None:
        """Fetch the forecast for `place` and select it."""
        seq = self._begin_request()
        try:
            forecast = await asyncio.to_thread(self.api.forecast, place, self.timezone)
        except DashboardApiError as exc:
            if self._is_current(seq):
                self.state.error = exc.message or "Failed to load forecast"
            return
        finally:
            if self._is_current(seq):
                self.state.loading = False

        if not self._is_current(seq):
            logger.debug(f"Dropping stale forecast for {place.name!r}")
            return
        self.state.selected = place
        self.state.forecast = forecast

    async def submit_search(self) -> None:
        """One-shot search for the current query (search button or Enter)."""
        query = self.state.query.strip()
        if not query:
            return
        seq = self._begin_request()
        try:
            result = await asyncio.to_thread(self.api.search_weather, query, self.timezone)
        except DashboardApiError as exc:
            if self._is_current(seq):
                self.state.error = exc.message or "Search failed"
            return
        finally:
            if self._is_current(seq):
                self.state.loading = False

        if not self._is_current(seq):
            logger.debug(f"Dropping stale search result for {query!r}")
            return
        self.state.selected = result.place
        self.state.forecast = result.forecast

    # favorites

    async def save_favorite(self) -> None:
        """Save the selected place; the list changes only after the server confirms."""
        place = self.state.selected
        if place is None:
            return
        try:
            favorite = await asyncio.to_thread(self.api.save_favorite, place)
        except DashboardApiError as exc:
            self.state.error = exc.message
            return
        if not any(f.id == favorite.id for f in self.state.favorites):
            self.state.favorites.insert(0, favorite)

    async def delete_favorite(self, favorite_id: str) -> None:
        try:
            await asyncio.to_thread(self.api.delete_favorite, favorite_id)
        except DashboardApiError as exc:
            self.state.error = exc.message
            return
        self.state.favorites = [f for f in self.state.favorites if f.id != favorite_id]
