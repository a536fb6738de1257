"""Robust function habits: fail fast, stay type-stable, avoid hidden arguments."""
import logging
import numbers

import numpy as np
import pandas as pd

from coursekit.errors import CourseError, InputTypeError
from coursekit.functional import safely

logger = logging.getLogger(__name__)


def stop_if_not(condition, message, error=CourseError):
    """Raise error(message) unless condition holds."""
    if not condition:
        raise error(message)


def check_numeric(x, name="x"):
    """Fail fast unless x is a number or a numeric array/Series."""
    if isinstance(x, (bool, np.bool_)):
        raise InputTypeError(f"`{name}` must be numeric, not bool")
    if isinstance(x, numbers.Number):
        return x
    if isinstance(x, (np.ndarray, pd.Series)) and np.issubdtype(x.dtype, np.number):
        return x
    kind = getattr(x, "dtype", type(x).__name__)
    raise InputTypeError(f"`{name}` must be numeric, not {kind}")


def big_x(df, threshold):
    """Rows where column x exceeds threshold.

    DataFrame.query resolves bare names to columns first, so a column called
    'threshold' would silently win over the argument; '@threshold' pins the
    local variable.
    """
    stop_if_not("x" in df.columns, "`df` must contain a column called `x`", InputTypeError)
    check_numeric(threshold, "threshold")
    return df.query("x > @threshold")


def unstable_quantiles(df, probs):
    """Mirror of sapply(df, quantile): the output type depends on the input."""
    numeric = df.select_dtypes(include=[np.number])
    if numeric.empty:
        return []
    result = numeric.apply(lambda s: s.quantile(probs))
    if np.ndim(probs) == 0:
        return result
    return result.T


def type_stable_quantiles(df, probs):
    """Quantiles of every numeric column, always as a DataFrame (column x prob)."""
    probs = list(np.atleast_1d(probs))
    labels = [f"{p * 100:g}%" for p in probs]
    if len(set(labels)) != len(labels):
        raise ValueError(f"probabilities must be distinct, got {probs}")
    numeric = df.select_dtypes(include=[np.number])
    if numeric.empty:
        return pd.DataFrame(columns=labels, dtype=float)
    rows = {col: numeric[col].quantile(probs).to_numpy() for col in numeric.columns}
    return pd.DataFrame.from_dict(rows, orient="index", columns=labels)


def format_mean_global(x):
    """Formats the mean with the pandas display.precision option: a hidden argument."""
    digits = pd.get_option("display.precision")
    return f"{np.mean(x):.{digits}f}"


def format_mean(x, digits=2):
    """Formats the mean; the result depends only on the arguments."""
    return f"{np.mean(x):.{digits}f}"


def batch_run(inputs, f):
    """Run f over every input without letting one failure abort the batch."""
    safe_f = safely(f)
    successes, failures = {}, {}
    for key, value in (inputs.items() if isinstance(inputs, dict) else enumerate(inputs)):
        res = safe_f(value)
        if res.error is None:
            successes[key] = res.result
        else:
            failures[key] = res.error
            logger.warning("Input %r failed: %s", key, res.error)
    return successes, failures
