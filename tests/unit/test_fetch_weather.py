"""
Unit tests for the Open-Meteo download script (network calls are faked).
"""

import pytest

import pandas as pd

import fetch_weather
from coursekit.data_loader import TEMPERATURE_HISTORY_FILE


class FakeResponse:
    def __init__(self, params):
        start = pd.Timestamp(params["start_date"])
        dates = pd.date_range(start, periods=3, freq="D")
        self._payload = {
            "daily": {
                "time": [d.strftime("%Y-%m-%d") for d in dates],
                "temperature_2m_mean": [0.0, 100.0, None],
            }
        }

    def raise_for_status(self):
        pass

    def json(self):
        return self._payload


@pytest.fixture
def fake_api(monkeypatch):
    """Record every request and answer with three days per chunk."""
    calls = []

    def fake_get(url, params=None, timeout=None):
        calls.append(params)
        return FakeResponse(params)

    monkeypatch.setattr(fetch_weather.requests, "get", fake_get)
    monkeypatch.setattr(fetch_weather.time, "sleep", lambda seconds: None)
    return calls


class TestConversions:
    """Test unit conversion and merging."""

    def test_celsius_to_fahrenheit(self):
        assert fetch_weather.celsius_to_fahrenheit(0) == 32.0
        assert fetch_weather.celsius_to_fahrenheit(100) == 212.0
        assert fetch_weather.celsius_to_fahrenheit(-40) == -40.0

    def test_merge_without_existing(self):
        fresh = pd.DataFrame({"city": ["NYC"], "date": ["2014-01-01"], "temperature": [30.0]})
        assert fetch_weather.merge_history(None, fresh) is fresh

    def test_merge_replaces_city(self):
        existing = pd.DataFrame({
            "city": ["NYC", "Atlanta"],
            "date": ["2014-01-01", "2014-01-01"],
            "temperature": [1.0, 2.0],
        })
        fresh = pd.DataFrame({"city": ["NYC"], "date": ["2014-01-01"], "temperature": [30.0]})
        merged = fetch_weather.merge_history(existing, fresh)
        assert sorted(merged["city"]) == ["Atlanta", "NYC"]
        assert merged.loc[merged["city"] == "NYC", "temperature"].tolist() == [30.0]


class TestFetch:
    """Test the chunked download."""

    def test_chunks_by_five_years(self, fake_api):
        df = fetch_weather.fetch_city_daily("NYC", 40.7, -74.0, 1995, 2006)
        assert [(c["start_date"], c["end_date"]) for c in fake_api] == [
            ("1995-01-01", "1999-12-31"),
            ("2000-01-01", "2004-12-31"),
            ("2005-01-01", "2006-12-31"),
        ]
        assert fake_api[0]["daily"] == "temperature_2m_mean"
        # the missing third day of every chunk is dropped
        assert len(df) == 6
        assert df["temperature"].tolist() == [32.0, 212.0] * 3

    def test_main_writes_history(self, fake_api, data_dir, clean_logger):
        fetch_weather.main(["--city", "Atlanta", "--start-year", "2010", "--end-year", "2010"])
        written = pd.read_csv(data_dir / TEMPERATURE_HISTORY_FILE)
        assert list(written.columns) == ["city", "date", "temperature"]
        assert set(written["city"]) == {"Atlanta"}
        assert len(written) == 2

    def test_main_rejects_unknown_city(self, fake_api):
        with pytest.raises(SystemExit):
            fetch_weather.main(["--city", "Gotham"])
