"""Place search against the OpenStreetMap Nominatim API."""
from __future__ import annotations

from typing import List

import requests

from weatherdash.models import Place
from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="nominatim_client")

session = requests.Session()

NOMINATIM_SEARCH_URL = "https://nominatim.openstreetmap.org/search"
DEFAULT_USER_AGENT = "WeatherDash/1.0 (weather dashboard)"


def geocode_nominatim(query: str,
                      *,
                      limit: int = 5,
                      url: str = NOMINATIM_SEARCH_URL,
                      user_agent: str = DEFAULT_USER_AGENT,
                      timeout: float = 10,
                      ) -> List[Place]:
    """
    Resolve free text to at most `limit` places, in Nominatim's relevance order.

    Nominatim rejects anonymous clients, so every request carries a User-Agent.
    Transport errors, non-2xx statuses and malformed records propagate to the caller.
    """
    params = {
        "q": query,
        "format": "json",
        "addressdetails": 1,
        "limit": limit,
    }

    resp = session.get(url, params=params, headers={"User-Agent": user_agent}, timeout=timeout)
    resp.raise_for_status()
    data = resp.json()

    out: List[Place] = []
    for record in data[:limit]:
        out.append(
            Place(
                name=record["display_name"],
                lat=float(record["lat"]),
                lon=float(record["lon"]),
            )
        )
    logger.debug("Nominatim results", extra={"query": query, "count": len(out)})
    return out
