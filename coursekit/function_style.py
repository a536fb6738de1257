"""Small functions from the function-writing chapter, and the refactors they motivate."""
import builtins
import keyword
import logging
import re

import numpy as np
import pandas as pd

from coursekit.errors import LengthMismatchError

logger = logging.getLogger(__name__)

_SNAKE_CASE = re.compile(r"^[a-z_][a-z0-9_]*$")

COMMON_VERBS = {
    "add", "build", "calc", "check", "clean", "compute", "count", "create", "drop",
    "extract", "fetch", "filter", "find", "fit", "format", "get", "is", "has", "load",
    "make", "map", "parse", "plot", "read", "remove", "replace", "rescale", "run",
    "save", "select", "set", "summarise", "summarize", "to", "transform", "update",
    "validate", "write",
}


def rescale01(x, finite=True):
    """Rescale to [0, 1] using the range of the finite values.

    With finite=True, -inf maps to 0 and inf maps to 1; missing values stay
    missing. A constant input has no range and rescales to all zeros.
    """
    x = np.asarray(x, dtype=float)
    mask = np.isfinite(x) if finite else ~np.isnan(x)
    if not mask.any():
        return np.full(x.shape, np.nan)
    lo, hi = x[mask].min(), x[mask].max()
    if hi == lo:
        out = np.where(np.isnan(x), np.nan, 0.0)
    else:
        with np.errstate(invalid="ignore"):
            out = (x - lo) / (hi - lo)
    if finite:
        out = np.where(x == np.inf, 1.0, out)
        out = np.where(x == -np.inf, 0.0, out)
    return out


def both_na(x, y):
    """Number of positions where x and y are both missing."""
    if len(x) != len(y):
        raise LengthMismatchError(
            f"x and y must have the same length: x has length {len(x)}, y has length {len(y)}"
        )
    return int(np.sum(pd.isna(np.asarray(x, dtype=object)) & pd.isna(np.asarray(y, dtype=object))))


def replace_missings(x, replacement):
    """Replace missing values and report how many were replaced."""
    x = pd.Series(x)
    n_missing = int(x.isna().sum())
    if n_missing:
        logger.info("%d missing value(s) replaced by %r", n_missing, replacement)
    return x.fillna(replacement)


def col_summary(df, fun):
    """Apply fun to every numeric column; always returns a float Series."""
    numeric = df.select_dtypes(include=[np.number])
    return pd.Series({col: float(fun(numeric[col])) for col in numeric.columns}, dtype=float)


# The copy-and-paste versions col_summary replaces

def col_median(df):
    return col_summary(df, lambda s: s.median())


def col_mean(df):
    return col_summary(df, lambda s: s.mean())


def col_sd(df):
    return col_summary(df, lambda s: s.std())


def naming_issues(name, kind="function"):
    """Style problems with a proposed identifier; an empty list means it reads well."""
    issues = []
    if not name.isidentifier() or keyword.iskeyword(name):
        return [f"{name!r} is not a valid Python identifier"]
    if not _SNAKE_CASE.match(name):
        issues.append("use snake_case (lower case words joined by underscores)")
    if name in dir(builtins):
        issues.append(f"shadows the built-in {name!r}")
    if len(name.strip("_")) < 2:
        issues.append("single-letter names say nothing about what the object holds")
    if kind == "function" and name.strip("_").split("_")[0] not in COMMON_VERBS:
        issues.append("function names usually start with a verb")
    return issues
