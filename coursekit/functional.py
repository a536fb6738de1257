"""The map family and adverbs (safely, possibly, quietly) in plain Python."""
import contextlib
import functools
import io
import itertools
import logging
import numbers
import warnings
from collections import namedtuple

import numpy as np
import pandas as pd

from coursekit.errors import InputTypeError, LengthMismatchError

logger = logging.getLogger(__name__)

Result = namedtuple("Result", ["result", "error"])
Captured = namedtuple("Captured", ["result", "output", "warnings", "messages"])


def _items(x):
    """(names, values) of a list, dict or Series; names is None for plain sequences."""
    if isinstance(x, dict):
        return list(x.keys()), list(x.values())
    if isinstance(x, pd.Series):
        return list(x.index), list(x.to_numpy())
    if isinstance(x, pd.DataFrame):
        return list(x.columns), [x[c] for c in x.columns]
    return None, list(x)


def _wrap(names, values, dtype=None):
    if names is not None:
        return pd.Series(values, index=names, dtype=dtype)
    return np.asarray(values, dtype=dtype) if dtype is not None else list(values)


def map_list(x, f, *args, **kwargs):
    """Apply f to every element; always returns a list."""
    _, values = _items(x)
    return [f(v, *args, **kwargs) for v in values]


def _typed(x, f, check, typename, dtype, args, kwargs):
    names, values = _items(x)
    out = []
    for i, v in enumerate(values):
        res = f(v, *args, **kwargs)
        if not check(res):
            label = names[i] if names is not None else i + 1
            raise InputTypeError(
                f"result {label!r} must be a single {typename}, not {type(res).__name__}"
            )
        out.append(res)
    return _wrap(names, out, dtype)


def _is_double(v):
    return isinstance(v, (numbers.Real, np.bool_)) and not isinstance(v, str)


def _is_int(v):
    if isinstance(v, (bool, np.bool_, numbers.Integral)):
        return True
    return isinstance(v, numbers.Real) and float(v).is_integer()


def map_dbl(x, f, *args, **kwargs):
    """Apply f and insist every result is a single number; returns floats."""
    return _typed(x, f, _is_double, "number", float, args, kwargs)


def map_int(x, f, *args, **kwargs):
    """Apply f and insist every result is a whole number; returns ints."""
    return _typed(x, f, _is_int, "integer", int, args, kwargs)


def map_chr(x, f, *args, **kwargs):
    """Apply f and insist every result is a string."""
    return _typed(x, f, lambda v: isinstance(v, str), "string", object, args, kwargs)


def map_lgl(x, f, *args, **kwargs):
    """Apply f and insist every result is a boolean."""
    return _typed(x, f, lambda v: isinstance(v, (bool, np.bool_)), "boolean", bool, args, kwargs)


def map_df(x, f, *args, id_col=None, **kwargs):
    """Apply f and row-bind the results (dicts, Series or DataFrames) into one DataFrame."""
    names, values = _items(x)
    frames = []
    for i, v in enumerate(values):
        res = f(v, *args, **kwargs)
        if isinstance(res, pd.DataFrame):
            frame = res.copy()
        elif isinstance(res, (dict, pd.Series)):
            frame = pd.DataFrame([dict(res)])
        else:
            raise InputTypeError(f"map_df needs dict, Series or DataFrame results, not {type(res).__name__}")
        if id_col is not None:
            frame.insert(0, id_col, names[i] if names is not None else i + 1)
        frames.append(frame)
    if not frames:
        return pd.DataFrame()
    return pd.concat(frames, ignore_index=True)


def map2(x, y, f, *args, **kwargs):
    """Apply f to pairs of elements of x and y."""
    _, xs = _items(x)
    _, ys = _items(y)
    if len(xs) != len(ys):
        raise LengthMismatchError(f"map2 needs equal lengths, got {len(xs)} and {len(ys)}")
    return [f(a, b, *args, **kwargs) for a, b in zip(xs, ys)]


def pmap(lists, f):
    """Apply f to parallel elements of several lists (or to the columns named in a dict)."""
    if isinstance(lists, dict):
        keys = list(lists.keys())
        columns = [list(v) for v in lists.values()]
    else:
        keys = None
        columns = [list(v) for v in lists]
    lengths = {len(c) for c in columns}
    if len(lengths) > 1:
        raise LengthMismatchError(f"pmap needs equal lengths, got {sorted(lengths)}")
    if keys is not None:
        return [f(**dict(zip(keys, row))) for row in zip(*columns)]
    return [f(*row) for row in zip(*columns)]


# ── Adverbs ──────────────────────────────────────────────────────────────────

def safely(f, otherwise=None):
    """Wrap f so it returns Result(result, error) instead of raising."""
    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return Result(f(*args, **kwargs), None)
        except Exception as exc:
            logger.debug("safely(%s) captured %r", getattr(f, "__name__", f), exc)
            return Result(otherwise, exc)
    return wrapper


def possibly(f, otherwise):
    """Wrap f so any exception yields otherwise."""
    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except Exception as exc:
            logger.debug("possibly(%s) replaced %r", getattr(f, "__name__", f), exc)
            return otherwise
    return wrapper


def quietly(f):
    """Wrap f so printed output, warnings and stderr messages are captured, not shown."""
    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        out, err = io.StringIO(), io.StringIO()
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
                result = f(*args, **kwargs)
        return Captured(
            result=result,
            output=out.getvalue(),
            warnings=[str(w.message) for w in caught],
            messages=err.getvalue(),
        )
    return wrapper


def transpose(results):
    """Turn a list of Result tuples inside out: {'result': [...], 'error': [...]}."""
    return {
        "result": [r.result for r in results],
        "error": [r.error for r in results],
    }


# ── Predicates, reduce and friends ───────────────────────────────────────────

def keep(x, predicate):
    return [v for v in _items(x)[1] if predicate(v)]


def discard(x, predicate):
    return [v for v in _items(x)[1] if not predicate(v)]


def compact(x):
    """Drop None and empty elements."""
    def is_empty(v):
        if v is None:
            return True
        try:
            return len(v) == 0
        except TypeError:
            return False
    return [v for v in _items(x)[1] if not is_empty(v)]


def reduce(x, f, init=None):
    _, values = _items(x)
    if init is None:
        return functools.reduce(f, values)
    return functools.reduce(f, values, init)


def accumulate(x, f, init=None):
    """Every intermediate value of reduce."""
    _, values = _items(x)
    if init is None:
        return list(itertools.accumulate(values, f))
    return list(itertools.accumulate(values, f, initial=init))


def walk(x, f):
    """Call f for its side effect on every element and hand x back unchanged."""
    for v in _items(x)[1]:
        f(v)
    return x


def compose(*funcs):
    """compose(f, g)(x) == f(g(x))."""
    if not funcs:
        raise ValueError("compose needs at least one function")

    def composed(*args, **kwargs):
        result = funcs[-1](*args, **kwargs)
        for fn in reversed(funcs[:-1]):
            result = fn(result)
        return result
    return composed
