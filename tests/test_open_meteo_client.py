import unittest

import requests

from weatherdash.data_sources import open_meteo_client


class DummyResp:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self._payload


class RecordingSession:
    def __init__(self, resp):
        self.resp = resp
        self.calls = []

    def get(self, url, params=None, **kwargs):
        self.calls.append((url, params, kwargs))
        return self.resp


def _make_forecast_payload():
    days = [f"2024-06-0{i}" for i in range(1, 8)]
    return {
        "latitude": 16.75,
        "longitude": 74.25,
        "timezone": "Asia/Kolkata",
        "timezone_abbreviation": "IST",
        "utc_offset_seconds": 19800,
        "elevation": 550.0,
        "generationtime_ms": 0.12,
        "current_units": {
            "time": "iso8601",
            "interval": "seconds",
            "temperature_2m": "°C",
            "relative_humidity_2m": "%",
            "apparent_temperature": "°C",
            "wind_speed_10m": "km/h",
            "precipitation": "mm",
        },
        "current": {
            "time": "2024-06-01T12:00",
            "interval": 900,
            "temperature_2m": 27.4,
            "relative_humidity_2m": 70,
            "apparent_temperature": 30.1,
            "wind_speed_10m": 12.3,
            "precipitation": 0.2,
        },
        "daily_units": {"time": "iso8601", "temperature_2m_max": "°C"},
        "daily": {
            "time": days,
            "weather_code": [61, 3, 3, 80, 95, 2, 1],
            "temperature_2m_max": [30.1, 29.8, 28.0, 27.5, 26.9, 29.0, 30.5],
            "temperature_2m_min": [21.0, 21.5, 20.8, 20.1, 19.9, 20.5, 21.2],
            "precipitation_sum": [4.2, 0.0, 0.0, 12.5, 30.0, 0.1, 0.0],
            "uv_index_max": [8.1, 9.0, 9.2, 6.5, 5.0, 8.8, 9.5],
            "wind_speed_10m_max": [18.0, 15.2, 14.1, 22.3, 30.4, 16.0, 12.2],
        },
    }


class TestFetchForecast(unittest.TestCase):
    def setUp(self):
        self._orig_session = open_meteo_client.session

    def tearDown(self):
        open_meteo_client.session = self._orig_session

    def test_requests_fixed_variables_and_window(self):
        session = RecordingSession(DummyResp(_make_forecast_payload()))
        open_meteo_client.session = session

        open_meteo_client.fetch_forecast(16.7, 74.24, timezone="Asia/Kolkata")
        url, params, kwargs = session.calls[0]
        self.assertEqual(url, open_meteo_client.OPEN_METEO_FORECAST_URL)
        self.assertEqual(params["latitude"], 16.7)
        self.assertEqual(params["longitude"], 74.24)
        self.assertEqual(params["timezone"], "Asia/Kolkata")
        self.assertEqual(params["forecast_days"], 7)
        self.assertEqual(
            params["current"],
            "temperature_2m,relative_humidity_2m,apparent_temperature,wind_speed_10m,precipitation",
        )
        self.assertEqual(
            params["daily"],
            "weather_code,temperature_2m_max,temperature_2m_min,precipitation_sum,uv_index_max,wind_speed_10m_max",
        )
        self.assertNotIn("hourly", params)
        self.assertIn("timeout", kwargs)

    def test_parses_payload_and_keeps_unknown_fields(self):
        open_meteo_client.session = RecordingSession(DummyResp(_make_forecast_payload()))

        result = open_meteo_client.fetch_forecast(16.7, 74.24)
        self.assertEqual(result.current.temperature_2m, 27.4)
        self.assertEqual(len(result.daily.time), 7)
        self.assertEqual(result.daily.precipitation_sum[4], 30.0)
        dumped = result.model_dump()
        self.assertEqual(dumped["generationtime_ms"], 0.12)

    def test_missing_optional_daily_fields_are_null(self):
        payload = _make_forecast_payload()
        del payload["daily"]["uv_index_max"]
        del payload["daily"]["wind_speed_10m_max"]
        open_meteo_client.session = RecordingSession(DummyResp(payload))

        result = open_meteo_client.fetch_forecast(0, 0)
        self.assertIsNone(result.daily.uv_index_max)
        self.assertIsNone(result.model_dump()["daily"]["wind_speed_10m_max"])

    def test_malformed_daily_raises(self):
        payload = _make_forecast_payload()
        del payload["daily"]["time"]
        open_meteo_client.session = RecordingSession(DummyResp(payload))

        with self.assertRaises(ValueError):
            open_meteo_client.fetch_forecast(0, 0)

    def test_http_error_propagates(self):
        open_meteo_client.session = RecordingSession(DummyResp({"error": True}, status_code=400))
        with self.assertRaises(requests.HTTPError):
            open_meteo_client.fetch_forecast(91, 0)

    def test_unexpected_units_only_warn(self):
        payload = _make_forecast_payload()
        payload["current_units"]["temperature_2m"] = "°F"
        open_meteo_client.session = RecordingSession(DummyResp(payload))

        with self.assertLogs("weatherdash.data_sources.open_meteo_client", level="WARNING"):
            result = open_meteo_client.fetch_forecast(0, 0)
        self.assertEqual(result.current.temperature_2m, 27.4)


class TestGeocodeOpenMeteo(unittest.TestCase):
    def setUp(self):
        self._orig_session = open_meteo_client.session

    def tearDown(self):
        open_meteo_client.session = self._orig_session

    def test_builds_display_label(self):
        payload = {
            "results": [
                {"name": "Kolhapur", "admin1": "Maharashtra", "country": "India",
                 "latitude": 16.69563, "longitude": 74.23167},
                {"name": "Kolhapur", "country": "India", "latitude": 16.7, "longitude": 74.2},
            ]
        }
        session = RecordingSession(DummyResp(payload))
        open_meteo_client.session = session

        places = open_meteo_client.geocode_open_meteo("Kolhapur", limit=5)
        self.assertEqual(places[0].name, "Kolhapur, Maharashtra, India")
        self.assertEqual(places[1].name, "Kolhapur, India")
        self.assertEqual(session.calls[0][1]["count"], 5)

    def test_no_results_key_means_empty(self):
        open_meteo_client.session = RecordingSession(DummyResp({"generationtime_ms": 0.3}))
        self.assertEqual(open_meteo_client.geocode_open_meteo("ZZZNotAPlaceZZZ"), [])

    def test_malformed_payload_raises_value_error(self):
        for payload in ([{"oops": 1}], None, {"results": ["Kolhapur"]}):
            open_meteo_client.session = RecordingSession(DummyResp(payload))
            with self.assertRaises(ValueError):
                open_meteo_client.geocode_open_meteo("x")


if __name__ == "__main__":
    unittest.main()
