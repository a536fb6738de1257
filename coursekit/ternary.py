"""Three-part compositions: closure, triangle coordinates, simulated soil samples."""
import numpy as np
import pandas as pd
from scipy import stats

from coursekit.constants import SOIL_PARTS

SOIL_REGIONS = {
    # Dirichlet concentration for Sand, Silt, Clay
    "Coastal": (12.0, 3.0, 2.0),
    "Floodplain": (3.0, 8.0, 4.0),
    "Highland": (4.0, 4.0, 7.0),
}


def close_composition(df, cols):
    """Rescale each row of cols to sum to 1."""
    parts = df[cols].astype(float)
    totals = parts.sum(axis=1)
    if (totals <= 0).any():
        raise ValueError(f"{int((totals <= 0).sum())} row(s) have a non-positive total and cannot be closed")
    out = df.copy()
    out[cols] = parts.div(totals, axis=0)
    return out


def ternary_to_cartesian(a, b, c):
    """Map closed (a, b, c) to the equilateral triangle with a at the top vertex."""
    a, b, c = (np.asarray(v, dtype=float) for v in (a, b, c))
    total = a + b + c
    a, b, c = a / total, b / total, c / total
    x = 0.5 * (2 * c + a)
    y = (np.sqrt(3) / 2) * a
    return x, y


def simulate_soil(n=300, seed=42):
    """Seeded Sand/Silt/Clay percentages from three soil regions."""
    rng = np.random.RandomState(seed)
    regions = rng.choice(list(SOIL_REGIONS), size=n)
    comps = np.vstack([rng.dirichlet(SOIL_REGIONS[r]) for r in regions])
    df = pd.DataFrame(np.round(comps * 100, 1), columns=SOIL_PARTS)
    df["region"] = regions
    return df


def composition_density(df, cols=SOIL_PARTS, bw=None):
    """Kernel density of every composition, estimated in triangle coordinates."""
    x, y = ternary_to_cartesian(*(df[c] for c in cols))
    xy = np.vstack([x, y])
    return stats.gaussian_kde(xy, bw_method=bw)(xy)
