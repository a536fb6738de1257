"""Tufte-style daily temperature chart: past records, normal range, present year."""
import logging

import numpy as np
import pandas as pd
import plotly.graph_objects as go
from scipy import stats

from coursekit.constants import MONTH_ABBR, MONTH_STARTS, TUFTE_COLORS
from coursekit.errors import InsufficientDataError

logger = logging.getLogger(__name__)


def add_day_of_year(df, date_col="date"):
    """Add a 1..365 day_of_year column; February 29 is dropped so years line up."""
    out = df.copy()
    dates = pd.to_datetime(out[date_col])
    leap_day = (dates.dt.month == 2) & (dates.dt.day == 29)
    out = out[~leap_day].copy()
    dates = dates[~leap_day]
    shift = (dates.dt.is_leap_year & (dates.dt.month > 2)).astype(int)
    out["day_of_year"] = dates.dt.dayofyear - shift
    return out


def split_past_present(df, present_year=None):
    """Split into all years before present_year and present_year itself (default: latest)."""
    if "day_of_year" not in df.columns:
        df = add_day_of_year(df)
    if present_year is None:
        present_year = int(df["year"].max())
    past = df[df["year"] < present_year].copy()
    present = df[df["year"] == present_year].copy()
    if past.empty:
        raise InsufficientDataError(f"no years before {present_year} to build records from")
    if present.empty:
        raise InsufficientDataError(f"no observations for {present_year}")
    return past, present


def present_year_options(df, min_past_years=1):
    """Years (latest first) that have at least min_past_years earlier years in df."""
    years = sorted(int(y) for y in df["year"].unique())
    return [y for i, y in enumerate(years) if i >= min_past_years][::-1]


def past_summary(past, value="temperature", t_crit=None, level=0.95):
    """Per-day record high/low, mean and a t-based band around the mean.

    t_crit defaults to the t quantile for (number of past years - 1) degrees
    of freedom; pass T_CRITICAL_TUFTE to reproduce the classic chart exactly.
    """
    n_years = past["year"].nunique()
    if t_crit is None:
        if n_years < 2:
            raise InsufficientDataError("need at least 2 past years for a confidence band")
        t_crit = stats.t.ppf((1 + level) / 2, df=n_years - 1)

    summary = (
        past.groupby("day_of_year")[value]
        .agg(upper="max", lower="min", avg="mean", sd="std", n="count")
        .reset_index()
    )
    summary["se"] = (summary["sd"] / np.sqrt(summary["n"])).fillna(0.0)
    summary["avg_upper"] = summary["avg"] + t_crit * summary["se"]
    summary["avg_lower"] = summary["avg"] - t_crit * summary["se"]
    logger.debug("Summarised %d past years with t=%.3f", n_years, t_crit)
    return summary.drop(columns="sd")


def present_records(present, summary, value="temperature"):
    """Days of the present year that beat the past record high or low."""
    merged = present.merge(summary[["day_of_year", "upper", "lower"]], on="day_of_year", how="inner")
    highs = merged[merged[value] > merged["upper"]].copy()
    lows = merged[merged[value] < merged["lower"]].copy()
    return highs, lows


def record_counts(highs, lows, present):
    """Headline numbers for the chart subtitle."""
    return {
        "days": int(len(present)),
        "record_highs": int(len(highs)),
        "record_lows": int(len(lows)),
    }


def _month_ticks():
    ends = MONTH_STARTS[1:] + [366]
    mids = [(s + e) / 2 for s, e in zip(MONTH_STARTS, ends)]
    return mids, MONTH_ABBR


def tufte_chart(summary, present, highs, lows, title=None, value="temperature", unit="°F", height=550):
    """Layered bars and lines in the style of Tufte's New York weather chart."""
    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=summary["day_of_year"], y=summary["upper"] - summary["lower"], base=summary["lower"],
        marker_color=TUFTE_COLORS["record_range"], width=1.0, name="Past record range",
        hovertemplate="Day %{x}<br>Low %{base:.0f}" + unit + "<extra></extra>",
    ))
    fig.add_trace(go.Bar(
        x=summary["day_of_year"], y=summary["avg_upper"] - summary["avg_lower"], base=summary["avg_lower"],
        marker_color=TUFTE_COLORS["normal_range"], width=1.0, name="Normal range (95% CI)",
        hoverinfo="skip",
    ))
    fig.add_trace(go.Scatter(
        x=present["day_of_year"], y=present[value], mode="lines",
        line=dict(color=TUFTE_COLORS["present"], width=1.5), name="Present year",
    ))
    fig.add_trace(go.Scatter(
        x=highs["day_of_year"], y=highs[value], mode="markers",
        marker=dict(color=TUFTE_COLORS["record_high"], size=6), name="New record high",
    ))
    fig.add_trace(go.Scatter(
        x=lows["day_of_year"], y=lows[value], mode="markers",
        marker=dict(color=TUFTE_COLORS["record_low"], size=6), name="New record low",
    ))

    for start in MONTH_STARTS[1:]:
        fig.add_vline(x=start - 0.5, line=dict(color="#BBBBBB", width=0.6, dash="dot"))

    mids, labels = _month_ticks()
    fig.update_layout(
        template="plotly_white",
        barmode="overlay",
        bargap=0,
        height=height,
        title=title,
        title_x=0.5,
        plot_bgcolor=TUFTE_COLORS["background"],
        xaxis=dict(tickvals=mids, ticktext=labels, range=[0, 366], showgrid=False),
        yaxis=dict(title=f"Temperature ({unit})", gridcolor=TUFTE_COLORS["grid"]),
        legend=dict(orientation="h", y=-0.12),
        margin=dict(t=60, b=60, l=60, r=40),
    )
    return fig
