"""WeatherDash: place search, forecasts and favorite locations."""
