"""Wide <-> long reshaping (gather / spread) with step-by-step traces for animation."""
from dataclasses import dataclass, field

import numpy as np
import pandas as pd


@dataclass
class ReshapeStep:
    step: int
    description: str
    source_cell: tuple
    result: pd.DataFrame = field(repr=False)


def _value_columns(df, columns=None, exclude=None):
    if columns is None:
        exclude = set(exclude or [])
        columns = [c for c in df.columns if c not in exclude]
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise KeyError(f"columns not found: {missing}")
    return list(columns)


def gather(df, key, value, columns=None, exclude=None):
    """Stack the given columns into key/value pairs (wide -> long).

    Either name the columns to gather, or the columns to keep as identifiers
    via exclude; by default every column is gathered.
    """
    columns = _value_columns(df, columns, exclude)
    id_vars = [c for c in df.columns if c not in columns]
    return pd.melt(df, id_vars=id_vars, value_vars=columns, var_name=key, value_name=value)


def spread(df, key, value):
    """Spread a key/value pair across columns (long -> wide)."""
    id_vars = [c for c in df.columns if c not in (key, value)]
    dupes = df.duplicated(subset=id_vars + [key])
    if dupes.any():
        raise ValueError(
            f"each output row must be identified by a unique combination of keys; "
            f"{int(dupes.sum())} duplicate row(s) found"
        )
    if not id_vars:
        wide = df.set_index(key)[value].to_frame().T.reset_index(drop=True)
    else:
        wide = df.pivot(index=id_vars, columns=key, values=value).reset_index()
    wide.columns.name = None
    return wide


def gather_steps(df, key, value, columns):
    """Every intermediate state of gather, one moved cell per step."""
    columns = _value_columns(df, columns)
    id_vars = [c for c in df.columns if c not in columns]
    rows = []
    steps = []
    for col in columns:
        for idx, record in df.iterrows():
            row = {c: record[c] for c in id_vars}
            row[key] = col
            row[value] = record[col]
            rows.append(row)
            steps.append(ReshapeStep(
                step=len(steps) + 1,
                description=f"'{col}' of row {idx} -> ({key}={col!r}, {value}={record[col]!r})",
                source_cell=(idx, col),
                result=pd.DataFrame(rows, columns=id_vars + [key, value]),
            ))
    return steps


def spread_steps(df, key, value):
    """Every intermediate state of spread, one filled cell per step."""
    id_vars = [c for c in df.columns if c not in (key, value)]
    final = spread(df, key, value)
    keys = [c for c in final.columns if c not in id_vars]
    wide = final[id_vars].copy()
    for k in keys:
        wide[k] = np.nan
    wide = wide.astype({k: "object" for k in keys})

    steps = []
    for idx, record in df.iterrows():
        if id_vars:
            match = (wide[id_vars] == record[id_vars].to_numpy()).all(axis=1)
            target = wide.index[match][0]
        else:
            target = wide.index[0]
        wide.at[target, record[key]] = record[value]
        steps.append(ReshapeStep(
            step=len(steps) + 1,
            description=f"row {idx}: {value}={record[value]!r} -> column {record[key]!r}",
            source_cell=(idx, value),
            result=wide.copy(),
        ))
    return steps


def tidy_temps(wide, plot_year=2001):
    """Tidy the Atlanta temps table into DAY / YEAR / TEMP.

    Year columns read by R carry an 'X' prefix, which is stripped. DAY values
    like '1-Jul' are parsed into dates of one non-leap plotting year so every
    year shares the same x axis.
    """
    df = wide.copy()
    df.columns = [str(c) for c in df.columns]
    df.columns = [c[1:] if c.startswith("X") and c[1:].isdigit() else c for c in df.columns]
    tidy = gather(df, "YEAR", "TEMP", exclude=["DAY"])
    tidy["YEAR"] = tidy["YEAR"].astype(int)
    tidy["DAY"] = pd.to_datetime(tidy["DAY"] + f"-{plot_year}", format="%d-%b-%Y")
    return tidy


def toy_scores(wide=True):
    """Tiny score table used in the animated gather/spread walk-through."""
    scores = pd.DataFrame({
        "Name": ["Ana", "Ben", "Cleo"],
        "English": [78, 62, 91],
        "Maths": [85, 70, 66],
    })
    if wide:
        return scores
    return gather(scores, "Subject", "Score", columns=["English", "Maths"])
