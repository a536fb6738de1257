"""Download daily mean temperatures for the Tufte weather chapter (Open-Meteo archive)."""
import argparse
import logging
import time

import pandas as pd
import requests

from coursekit.config import get_data_dir
from coursekit.constants import CITIES, OPEN_METEO_ARCHIVE_URL
from coursekit.data_loader import TEMPERATURE_HISTORY_FILE
from coursekit.logging_config import setup_logging

logger = logging.getLogger("coursekit.fetch_weather")

# Open-Meteo is happiest with requests spanning a few years at a time
CHUNK_YEARS = 5


def celsius_to_fahrenheit(c):
    return c * 9.0 / 5.0 + 32.0


def fetch_city_daily(city_name, lat, lon, start_year, end_year):
    """Fetch daily mean temperature (°F) for one city, chunked by years."""
    frames = []
    for chunk_start in range(start_year, end_year + 1, CHUNK_YEARS):
        chunk_end = min(chunk_start + CHUNK_YEARS - 1, end_year)
        params = {
            "latitude": lat,
            "longitude": lon,
            "start_date": f"{chunk_start}-01-01",
            "end_date": f"{chunk_end}-12-31",
            "daily": "temperature_2m_mean",
            "timezone": "auto",
        }
        logger.info("Fetching %s %d-%d", city_name, chunk_start, chunk_end)
        resp = requests.get(OPEN_METEO_ARCHIVE_URL, params=params, timeout=120)
        resp.raise_for_status()
        daily = resp.json()["daily"]
        frames.append(pd.DataFrame({
            "city": city_name,
            "date": daily["time"],
            "temperature": daily["temperature_2m_mean"],
        }))
        time.sleep(1)  # be polite to the free API

    df = pd.concat(frames, ignore_index=True).dropna(subset=["temperature"])
    df["temperature"] = celsius_to_fahrenheit(df["temperature"]).round(1)
    return df


def merge_history(existing, fresh):
    """Replace the rows of the fetched city, keep other cities."""
    if existing is None:
        return fresh
    cities = set(fresh["city"])
    return pd.concat([existing[~existing["city"].isin(cities)], fresh], ignore_index=True)


def main(argv=None):
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--city", default="NYC", choices=sorted(CITIES))
    parser.add_argument("--start-year", type=int, default=1995)
    parser.add_argument("--end-year", type=int, default=2024)
    args = parser.parse_args(argv)

    setup_logging()
    lat, lon = CITIES[args.city]
    fresh = fetch_city_daily(args.city, lat, lon, args.start_year, args.end_year)

    out_path = get_data_dir() / TEMPERATURE_HISTORY_FILE
    out_path.parent.mkdir(parents=True, exist_ok=True)
    existing = pd.read_csv(out_path) if out_path.exists() else None
    merged = merge_history(existing, fresh)
    merged.to_csv(out_path, index=False)
    logger.info("Wrote %s rows (%s for %s) to %s", f"{len(merged):,}", f"{len(fresh):,}", args.city, out_path)


if __name__ == "__main__":
    main()
