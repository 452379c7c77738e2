"""Error taxonomy shared by the gateways, the favorites store and the API layer."""


class WeatherDashError(Exception):
    """Base error carrying a short, client-safe message and its HTTP status."""
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(WeatherDashError):
    """Bad or missing input; raised before any upstream call."""
    status_code = 400


class NotFoundError(WeatherDashError):
    """A search produced no place."""
    status_code = 404


class UpstreamError(WeatherDashError):
    """Network or service failure while calling geocoding or forecast services."""
    status_code = 500


class StoreError(WeatherDashError):
    """Favorites database operation failed."""
    status_code = 500
