"""Mosaic (Marimekko) plot geometry built from a two-way contingency table."""
import numpy as np
import pandas as pd
from scipy import stats


def _levels(series):
    if isinstance(series.dtype, pd.CategoricalDtype):
        return list(series.cat.categories)
    return sorted(series.dropna().unique())


def contingency_table(df, x, fill):
    """Counts of every (x, fill) pair, including empty cells of categorical levels."""
    table = pd.crosstab(df[x], df[fill])
    return table.reindex(index=_levels(df[x]), columns=_levels(df[fill]), fill_value=0)


def mosaic_data(df, x, fill):
    """One rectangle per (x, fill) cell, in percent coordinates.

    Column widths are proportional to the x margin; heights are the share of
    each fill level within its column. Rectangles are coloured later by the
    Pearson residual (observed - expected) / sqrt(expected).
    """
    table = contingency_table(df, x, fill)
    total = table.to_numpy().sum()
    row_tot = table.sum(axis=1)
    col_tot = table.sum(axis=0)

    xmax = row_tot.cumsum() / total * 100
    xmin = xmax - row_tot / total * 100

    rows = []
    for x_level, counts in table.iterrows():
        n_x = row_tot[x_level]
        props = counts / n_x * 100 if n_x > 0 else counts * 0.0
        ymax = props.cumsum()
        for fill_level, count in counts.items():
            expected = n_x * col_tot[fill_level] / total
            residual = (count - expected) / np.sqrt(expected) if expected > 0 else 0.0
            rows.append({
                x: x_level,
                fill: fill_level,
                "count": int(count),
                "expected": expected,
                "residual": residual,
                "xmin": xmin[x_level],
                "xmax": xmax[x_level],
                "ymin": ymax[fill_level] - props[fill_level],
                "ymax": ymax[fill_level],
            })

    out = pd.DataFrame(rows)
    out["xtext"] = (out["xmin"] + out["xmax"]) / 2
    out["ytext"] = (out["ymin"] + out["ymax"]) / 2
    return out


def chi_square(df, x, fill):
    """Pearson chi-squared test of independence (no continuity correction)."""
    table = contingency_table(df, x, fill)
    table = table.loc[table.sum(axis=1) > 0, table.sum(axis=0) > 0]
    stat, p, dof, _ = stats.chi2_contingency(table.to_numpy(), correction=False)
    return {"chi2": stat, "dof": dof, "p_value": p}


def bin_numeric(series, bins, labels=None, right=False):
    """Cut a numeric column into ordered intervals (e.g. age groups)."""
    return pd.cut(series, bins=bins, labels=labels, right=right, include_lowest=True, ordered=True)
