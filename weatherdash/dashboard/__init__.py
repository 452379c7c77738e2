"""Dashboard client: state, debounced search and derived display values."""

from .api_client import DashboardApiClient, DashboardApiError
from .controller import DashboardController
from .debounce import Debouncer
from .state import DashboardState

__all__ = [
    "DashboardApiClient",
    "DashboardApiError",
    "DashboardController",
    "DashboardState",
    "Debouncer",
]
