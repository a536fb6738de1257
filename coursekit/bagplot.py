"""Bag plot statistics: halfspace depth, depth median and the hull/bag/loop layers.

A bag plot is the two-dimensional cousin of the box plot. The *bag* holds the
inner half of the data (by halfspace depth), the *fence* is the bag inflated
by a constant factor around the depth median, points beyond the fence are
outliers, and the *loop* is the convex hull of everything inside the fence.
"""
import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd
from scipy.spatial import ConvexHull

from coursekit.errors import InsufficientDataError

logger = logging.getLogger(__name__)

_EPS = 1e-9


@dataclass
class BagPlot:
    center: np.ndarray
    hull: np.ndarray
    bag: np.ndarray
    fence: np.ndarray
    loop: np.ndarray
    outliers: np.ndarray
    depth: np.ndarray
    data: np.ndarray

    @property
    def n_outliers(self):
        return len(self.outliers)

    def inside(self, points, region="bag"):
        """Boolean mask of points lying inside the bag or the fence."""
        polygon = {"bag": self.bag, "fence": self.fence}[region]
        return _inside_star(np.atleast_2d(points), polygon, self.center)


def _as_points(data):
    if isinstance(data, pd.DataFrame):
        data = data.iloc[:, :2].to_numpy()
    pts = np.asarray(data, dtype=float)
    if pts.ndim != 2 or pts.shape[1] != 2:
        raise ValueError(f"expected an (n, 2) array of points, got shape {pts.shape}")
    return pts[~np.isnan(pts).any(axis=1)]


def _directions(n_directions):
    # Half circle is enough: both closed sides are counted per direction
    angles = np.linspace(0.0, np.pi, n_directions, endpoint=False)
    return np.column_stack([np.cos(angles), np.sin(angles)])


def halfspace_depth(points, data=None, n_directions=360):
    """Approximate Tukey (halfspace) depth of points with respect to data.

    The depth of p is the smallest number of data points in any closed
    half-plane whose boundary passes through p, minimised over n_directions.
    """
    pts = _as_points(points)
    ref = pts if data is None else _as_points(data)
    dirs = _directions(n_directions)
    proj_ref = ref @ dirs.T
    proj_pts = pts @ dirs.T

    depth = np.full(len(pts), len(ref), dtype=int)
    for j in range(len(dirs)):
        s = np.sort(proj_ref[:, j])
        n_le = np.searchsorted(s, proj_pts[:, j], side="right")
        n_ge = len(s) - np.searchsorted(s, proj_pts[:, j], side="left")
        depth = np.minimum(depth, np.minimum(n_le, n_ge))
    return depth


def depth_median(data, depth=None, n_directions=360):
    """Centroid of the deepest points, the two-dimensional analogue of the median."""
    pts = _as_points(data)
    if depth is None:
        depth = halfspace_depth(pts, n_directions=n_directions)
    return pts[depth == depth.max()].mean(axis=0)


def _check_spread(pts):
    if len(pts) < 3:
        raise InsufficientDataError(f"a bag plot needs at least 3 points, got {len(pts)}")
    if np.linalg.matrix_rank(pts - pts.mean(axis=0)) < 2:
        raise InsufficientDataError("all points are collinear; the bag plot is undefined")


def _hull_polygon(pts):
    """Convex hull vertices in counter-clockwise order, or None when degenerate."""
    if len(pts) < 3 or np.linalg.matrix_rank(pts - pts.mean(axis=0)) < 2:
        return None
    return pts[ConvexHull(pts).vertices]


def _cross(ax, ay, bx, by):
    return ax * by - ay * bx


def _radial_profile(polygon, center, angles):
    """Distance from center to the polygon boundary along each angle."""
    angles = np.atleast_1d(angles)
    if polygon is None:
        return np.zeros(len(angles))
    dx, dy = np.cos(angles)[:, None], np.sin(angles)[:, None]
    p1 = polygon
    p2 = np.roll(polygon, -1, axis=0)
    ex, ey = (p2 - p1)[:, 0][None, :], (p2 - p1)[:, 1][None, :]
    wx, wy = (p1 - center)[:, 0][None, :], (p1 - center)[:, 1][None, :]

    denom = _cross(dx, dy, ex, ey)
    with np.errstate(divide="ignore", invalid="ignore"):
        t = _cross(wx, wy, ex, ey) / denom
        s = _cross(wx, wy, dx, dy) / denom
    valid = (np.abs(denom) > _EPS) & (t >= -_EPS) & (s >= -_EPS) & (s <= 1 + _EPS)
    t = np.where(valid, t, -np.inf).max(axis=1)
    return np.where(np.isfinite(t), np.maximum(t, 0.0), 0.0)


def _inside_star(points, polygon, center):
    offsets = points - center
    dist = np.hypot(offsets[:, 0], offsets[:, 1])
    radius = _radial_profile(polygon, center, np.arctan2(offsets[:, 1], offsets[:, 0]))
    return dist <= radius * (1 + 1e-7) + _EPS


def _bag_polygon(pts, depth, center, n_angles):
    n = len(pts)
    half = n / 2.0
    levels = np.unique(depth)
    counts = np.array([(depth >= lv).sum() for lv in levels])

    # Outer region: deepest level still holding more than half of the points
    i = np.nonzero(counts > half)[0].max()
    outer_pts = pts[depth >= levels[i]]
    angles = np.linspace(-np.pi, np.pi, n_angles, endpoint=False)
    r_outer = _radial_profile(_hull_polygon(outer_pts), center, angles)

    if i + 1 < len(levels):
        inner_pts = pts[depth >= levels[i + 1]]
        n_inner, n_outer = counts[i + 1], counts[i]
        lam = (half - n_inner) / float(n_outer - n_inner)
        r_inner = _radial_profile(_hull_polygon(inner_pts), center, angles)
    else:
        lam, r_inner = 1.0, r_outer

    radius = r_inner + lam * (r_outer - r_inner)
    logger.debug("Bag between depth %s and %s (lambda=%.3f)", levels[i],
                 levels[min(i + 1, len(levels) - 1)], lam)
    return center + radius[:, None] * np.column_stack([np.cos(angles), np.sin(angles)])


def compute_bagplot(data, factor=3.0, n_directions=360, n_angles=180):
    """Compute center, hull, bag, fence, loop and outliers for 2-D data."""
    pts = _as_points(data)
    _check_spread(pts)

    depth = halfspace_depth(pts, n_directions=n_directions)
    center = pts[depth == depth.max()].mean(axis=0)
    hull = pts[ConvexHull(pts).vertices]
    bag = _bag_polygon(pts, depth, center, n_angles)
    fence = center + factor * (bag - center)

    inside = _inside_star(pts, fence, center)
    outliers = pts[~inside]
    kept = pts[inside]
    loop = _hull_polygon(kept)
    if loop is None:
        loop = kept

    logger.info("Bag plot: n=%d, max depth=%d, outliers=%d", len(pts), depth.max(), len(outliers))
    return BagPlot(center=center, hull=hull, bag=bag, fence=fence, loop=loop,
                   outliers=outliers, depth=depth, data=pts)


def _frame(arr):
    return pd.DataFrame(np.asarray(arr).reshape(-1, 2), columns=["x", "y"])


# The four statistical layers of the bag plot, one data frame each

def stat_hull(data):
    pts = _as_points(data)
    _check_spread(pts)
    return _frame(pts[ConvexHull(pts).vertices])


def stat_bag(data, factor=3.0):
    return _frame(compute_bagplot(data, factor=factor).bag)


def stat_loop(data, factor=3.0):
    return _frame(compute_bagplot(data, factor=factor).loop)


def stat_outliers(data, factor=3.0):
    return _frame(compute_bagplot(data, factor=factor).outliers)
