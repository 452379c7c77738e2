"""Local UI state of the dashboard."""

from dataclasses import dataclass, field
from typing import List, Optional

from weatherdash.models import Favorite, ForecastResult, Place


@dataclass
class DashboardState:
    """Everything the dashboard renders from; views never keep state of their own."""
    query: str = ""
    suggestions: List[Place] = field(default_factory=list)
    selected: Optional[Place] = None
    forecast: Optional[ForecastResult] = None
    loading: bool = False
    error: str = ""
    favorites: List[Favorite] = field(default_factory=list)
