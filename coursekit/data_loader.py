"""Cached dataset loaders, seeded stand-ins for unavailable data, sidebar filters."""
import io
import logging

import numpy as np
import pandas as pd
import requests
import streamlit as st
from sklearn.datasets import load_iris as sk_load_iris

from coursekit.config import bundled_data_path, get_data_dir, is_offline
from coursekit.constants import (
    BMI_ORDER, CHIS_RACES, DATASET_URLS, DAYTON_MISSING, DIAMOND_CLARITY,
    DIAMOND_COLORS, DIAMOND_CUTS, IRIS_FEATURES,
)
from coursekit.errors import DatasetUnavailableError

logger = logging.getLogger(__name__)

TEMPERATURE_HISTORY_FILE = "daily_temperature_history.csv"


# ── Toy datasets ─────────────────────────────────────────────────────────────

@st.cache_data
def load_mtcars():
    """Load the bundled mtcars table with factor-style label columns."""
    df = pd.read_csv(bundled_data_path("mtcars.csv"))
    df["cyl_f"] = pd.Categorical(df["cyl"].astype(str), categories=["4", "6", "8"], ordered=True)
    df["am_f"] = pd.Categorical(
        df["am"].map({0: "automatic", 1: "manual"}),
        categories=["automatic", "manual"],
    )
    df["gear_f"] = df["gear"].astype(str)
    df["vs_f"] = df["vs"].map({0: "V-shaped", 1: "straight"})
    return df


@st.cache_data
def load_iris():
    """Load iris from scikit-learn with snake_case column names and species labels."""
    bunch = sk_load_iris(as_frame=True)
    df = bunch.frame.copy()
    df.columns = IRIS_FEATURES + ["target"]
    df["species"] = pd.Categorical.from_codes(df["target"], categories=list(bunch.target_names))
    return df.drop(columns="target")


def office_edges():
    """Bundled edge list of a small fictional office relationship network."""
    return pd.read_csv(bundled_data_path("office_edges.csv"))


# ── Diamonds ─────────────────────────────────────────────────────────────────

def _as_diamond_categories(df):
    df["cut"] = pd.Categorical(df["cut"], categories=DIAMOND_CUTS, ordered=True)
    df["color"] = pd.Categorical(df["color"], categories=DIAMOND_COLORS, ordered=True)
    df["clarity"] = pd.Categorical(df["clarity"], categories=DIAMOND_CLARITY, ordered=True)
    return df


def _download(name, url, dest, timeout=60):
    if is_offline():
        raise DatasetUnavailableError(name, f"{dest.name} not found and offline mode is on")
    logger.info("Downloading %s from %s", name, url)
    try:
        resp = requests.get(url, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as exc:
        raise DatasetUnavailableError(name, f"download failed ({exc})") from exc
    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_text(resp.text, encoding="utf-8")
    logger.info("Saved %s to %s", name, dest)
    return resp.text


@st.cache_data
def load_diamonds():
    """Load ggplot2's diamonds table, downloading it into the data directory once."""
    path = get_data_dir() / "diamonds.csv"
    if not path.exists():
        _download("diamonds", DATASET_URLS["diamonds"], path)
    df = pd.read_csv(path)
    return _as_diamond_categories(df)


def simulate_diamonds(n=5000, seed=42):
    """Seeded stand-in for diamonds: carat, cut, color, clarity and a plausible price."""
    rng = np.random.RandomState(seed)
    carat = np.round(np.clip(rng.lognormal(mean=-0.4, sigma=0.55, size=n), 0.2, 5.0), 2)
    cut = rng.choice(DIAMOND_CUTS, size=n, p=[0.03, 0.09, 0.22, 0.26, 0.40])
    color = rng.choice(DIAMOND_COLORS, size=n, p=[0.12, 0.18, 0.18, 0.21, 0.15, 0.10, 0.06])
    clarity = rng.choice(DIAMOND_CLARITY, size=n, p=[0.01, 0.17, 0.24, 0.23, 0.15, 0.09, 0.07, 0.04])
    cut_effect = pd.Series(cut).map(dict(zip(DIAMOND_CUTS, [-0.15, -0.05, 0.0, 0.05, 0.08]))).to_numpy()
    log_price = 8.4 + 1.7 * np.log(carat) + cut_effect + rng.normal(0, 0.25, size=n)
    df = pd.DataFrame({
        "carat": carat,
        "cut": cut,
        "color": color,
        "clarity": clarity,
        "price": np.round(np.exp(log_price)).astype(int),
    })
    return _as_diamond_categories(df)


# ── CHIS survey extract ──────────────────────────────────────────────────────

def simulate_chis(n=10000, seed=42):
    """Seeded CHIS-like adult survey: BMI category mix shifts with age and race."""
    rng = np.random.RandomState(seed)
    age = rng.randint(18, 86, size=n)
    race = rng.choice(CHIS_RACES, size=n, p=[0.25, 0.13, 0.07, 0.55])
    sex = rng.choice(["Male", "Female"], size=n)

    # Logits for Underweight, Normal, Overweight, Obese; obesity peaks around 55
    mid_age = (age - 55) / 20.0
    logits = np.column_stack([
        -2.2 - 0.8 * (age - 18) / 30.0,
        0.8 - 0.4 * (1 - mid_age ** 2),
        0.6 + 0.2 * (1 - mid_age ** 2),
        0.1 + 0.6 * (1 - mid_age ** 2),
    ])
    race_shift = pd.Series(race).map({
        "Latino": 0.35, "Asian": -0.6, "African American": 0.45, "White": 0.0,
    }).to_numpy()
    logits[:, 3] += race_shift
    logits[:, 1] -= race_shift / 2
    probs = np.exp(logits)
    probs /= probs.sum(axis=1, keepdims=True)
    draws = rng.uniform(size=(n, 1))
    idx = (draws > np.cumsum(probs, axis=1)).sum(axis=1)
    idx = np.minimum(idx, len(BMI_ORDER) - 1)

    return pd.DataFrame({
        "age": age,
        "bmi_category": pd.Categorical(np.array(BMI_ORDER)[idx], categories=BMI_ORDER, ordered=True),
        "race": race,
        "sex": sex,
    })


# ── Daily temperature history ────────────────────────────────────────────────

def read_dayton_temperatures(source):
    """Parse the Dayton archive layout (month day year temp); -99 marks missing days."""
    df = pd.read_csv(source, sep=r"\s+", header=None,
                     names=["month", "day", "year", "temperature"])
    missing = df["temperature"] == DAYTON_MISSING
    if missing.any():
        logger.info("Dropping %d missing temperature readings", int(missing.sum()))
    df = df[~missing].copy()
    df["date"] = pd.to_datetime(df[["year", "month", "day"]])
    return df[["date", "year", "month", "day", "temperature"]].reset_index(drop=True)


@st.cache_data
def load_temperature_history(city="NYC"):
    """Load daily temperatures (°F) written by fetch_weather.py for one city."""
    path = get_data_dir() / TEMPERATURE_HISTORY_FILE
    if not path.exists():
        raise DatasetUnavailableError(
            "temperature history", f"run `python fetch_weather.py --city \"{city}\"` to create {path.name}",
        )
    df = pd.read_csv(path, parse_dates=["date"])
    df = df[df["city"] == city].copy()
    if df.empty:
        raise DatasetUnavailableError(
            "temperature history", f"{path.name} has no rows for {city}; re-run fetch_weather.py",
        )
    df["year"] = df["date"].dt.year
    df["month"] = df["date"].dt.month
    df["day"] = df["date"].dt.day
    return df[["date", "year", "month", "day", "temperature"]].reset_index(drop=True)


def simulate_temperature_history(start_year=1995, end_year=2014, seed=42):
    """Seeded daily temperatures (°F): seasonal cycle, slow warming and AR(1) weather noise."""
    rng = np.random.RandomState(seed)
    dates = pd.date_range(f"{start_year}-01-01", f"{end_year}-12-31", freq="D")
    doy = dates.dayofyear.to_numpy()
    years = dates.year.to_numpy()
    seasonal = 55.0 + 22.0 * np.sin(2 * np.pi * (doy - 105) / 365.25)
    trend = 0.04 * (years - start_year)

    noise = np.empty(len(dates))
    noise[0] = rng.normal(0, 6)
    shocks = rng.normal(0, 6 * np.sqrt(1 - 0.7 ** 2), size=len(dates))
    for i in range(1, len(dates)):
        noise[i] = 0.7 * noise[i - 1] + shocks[i]

    return pd.DataFrame({
        "date": dates,
        "year": years,
        "month": dates.month,
        "day": dates.day,
        "temperature": np.round(seasonal + trend + noise, 1),
    })


# ── Atlanta temps (wide) ─────────────────────────────────────────────────────

@st.cache_data
def load_atlanta_temps():
    """Load the wide Atlanta July-October temperature table (DAY + one column per year)."""
    path = get_data_dir() / "temps.txt"
    if path.exists():
        return pd.read_table(path, sep=r"\s+")
    text = _download("Atlanta temps", DATASET_URLS["atlanta_temps"], path)
    return pd.read_table(io.StringIO(text), sep=r"\s+")


def simulate_atlanta_temps(first_year=1996, last_year=2015, seed=42):
    """Seeded wide table in the layout read.table produces: DAY, X1996 ... X2015."""
    rng = np.random.RandomState(seed)
    days = pd.date_range("2001-07-01", "2001-10-31", freq="D")
    day_labels = [f"{d.day}-{d.strftime('%b')}" for d in days]
    base = 89 - 25 * np.clip((np.arange(len(days)) - 45) / len(days), 0, None) ** 1.3
    data = {"DAY": day_labels}
    for year in range(first_year, last_year + 1):
        data[f"X{year}"] = np.round(base + rng.normal(0, 4, size=len(days))).astype(int)
    return pd.DataFrame(data)


# ── Sidebar filters ──────────────────────────────────────────────────────────

def sidebar_filters(df, column, label=None):
    """Render a sidebar multiselect over one categorical column; return the filtered copy."""
    options = [str(v) for v in pd.unique(df[column].dropna())]
    state_key = f"selected_{column}"
    if state_key not in st.session_state:
        st.session_state[state_key] = options.copy()
    st.sidebar.header("Filters")
    selected = st.sidebar.multiselect(
        label or column, options,
        default=[o for o in st.session_state[state_key] if o in options],
        key=f"{column}_filter",
    )
    st.session_state[state_key] = selected
    return df[df[column].astype(str).isin(selected)].copy()
