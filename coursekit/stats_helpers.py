"""Reusable statistics computation helpers."""
import logging

import numpy as np
import pandas as pd
from scipy import stats

from coursekit.errors import InsufficientDataError

logger = logging.getLogger(__name__)


def descriptive_stats(series):
    """Compute comprehensive descriptive statistics for a numeric series."""
    return {
        "count": len(series),
        "mean": series.mean(),
        "median": series.median(),
        "std": series.std(),
        "min": series.min(),
        "max": series.max(),
        "q25": series.quantile(0.25),
        "q75": series.quantile(0.75),
        "iqr": series.quantile(0.75) - series.quantile(0.25),
        "skewness": series.skew(),
        "kurtosis": series.kurtosis(),
    }


def mean_ci(x, level=0.95):
    """t-based confidence interval for the mean; missing values are dropped."""
    x = pd.Series(x, dtype=float).dropna()
    n = len(x)
    if n < 2:
        raise InsufficientDataError(f"need at least 2 non-missing values for a CI, got {n}")
    se = x.std(ddof=1) / np.sqrt(n)
    t = stats.t.ppf((1 + level) / 2, df=n - 1)
    return x.mean() - t * se, x.mean() + t * se


def bootstrap_ci(data, stat_func=np.mean, n_boot=1000, ci=95, seed=42):
    """Compute bootstrap confidence interval."""
    rng = np.random.RandomState(seed)
    boot_stats = []
    for _ in range(n_boot):
        sample = rng.choice(data, size=len(data), replace=True)
        boot_stats.append(stat_func(sample))
    lower = np.percentile(boot_stats, (100 - ci) / 2)
    upper = np.percentile(boot_stats, 100 - (100 - ci) / 2)
    return lower, upper, boot_stats


def mean_sd_summary(df, group, value, mult=1):
    """Per-group mean ± mult * sd, the data behind a dynamite plot."""
    out = (
        df.groupby(group, observed=True)[value]
        .agg(["mean", "std", "count"])
        .rename(columns={"std": "sd", "count": "n"})
        .reset_index()
    )
    out["ymin"] = out["mean"] - mult * out["sd"]
    out["ymax"] = out["mean"] + mult * out["sd"]
    return out


def proportion_table(df, x, fill):
    """Counts of fill within each x, plus the within-x proportion (position = 'fill')."""
    counts = df.groupby([x, fill], observed=True).size().rename("count").reset_index()
    counts["prop"] = counts["count"] / counts.groupby(x, observed=True)["count"].transform("sum")
    return counts


def group_densities(df, value, group, bw=None, weighted=False, grid_size=256):
    """Gaussian KDE of value for every group, evaluated on one shared grid.

    With weighted=True each curve is multiplied by its group's share of rows,
    so the curves add up to the density of the pooled data.
    """
    clean = df[[value, group]].dropna()
    lo, hi = clean[value].min(), clean[value].max()
    pad = 0.1 * (hi - lo) if hi > lo else 1.0
    grid = np.linspace(lo - pad, hi + pad, grid_size)
    n_total = len(clean)

    frames = []
    for name, sub in clean.groupby(group, observed=True):
        values = sub[value].to_numpy()
        if np.unique(values).size < 2:
            logger.warning("Skipping group %r: fewer than 2 distinct values", name)
            continue
        kde = stats.gaussian_kde(values, bw_method=bw)
        density = kde(grid)
        if weighted:
            density = density * len(values) / n_total
        frames.append(pd.DataFrame({value: grid, "density": density, group: name}))

    if not frames:
        return pd.DataFrame(columns=[value, "density", group])
    return pd.concat(frames, ignore_index=True)


def cohens_d(group1, group2):
    """Compute Cohen's d effect size."""
    n1, n2 = len(group1), len(group2)
    var1, var2 = group1.var(), group2.var()
    pooled_std = np.sqrt(((n1 - 1) * var1 + (n2 - 1) * var2) / (n1 + n2 - 2))
    return (group1.mean() - group2.mean()) / pooled_std


def correlation_matrix(df, method="pearson"):
    """Compute correlation matrix for numeric columns."""
    numeric = df.select_dtypes(include=[np.number])
    return numeric.corr(method=method)


def perform_ttest(group1, group2, equal_var=False):
    """Perform independent samples t-test."""
    stat, p = stats.ttest_ind(group1, group2, equal_var=equal_var)
    d = cohens_d(group1, group2)
    return {"t_stat": stat, "p_value": p, "cohens_d": d}


def perform_anova(*groups):
    """Perform one-way ANOVA."""
    stat, p = stats.f_oneway(*groups)
    return {"f_stat": stat, "p_value": p}


def ks_test(data1, data2):
    """Perform Kolmogorov-Smirnov two-sample test."""
    stat, p = stats.ks_2samp(data1, data2)
    return {"ks_stat": stat, "p_value": p}
