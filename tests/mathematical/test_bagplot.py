"""
Mathematical property tests for halfspace depth and the bag plot layers.
"""

import pytest

import numpy as np
import pandas as pd
from scipy.spatial import ConvexHull

from coursekit.bagplot import (
    compute_bagplot,
    depth_median,
    halfspace_depth,
    stat_bag,
    stat_hull,
    stat_loop,
    stat_outliers,
)
from coursekit.errors import InsufficientDataError

SQUARE = np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0], [1.0, 1.0], [0.5, 0.5]])


class TestHalfspaceDepth:
    """Test depth values on known configurations."""

    def test_square_with_center(self):
        assert halfspace_depth(SQUARE).tolist() == [1, 1, 1, 1, 3]

    def test_hull_vertices_are_shallow(self, normal_cloud):
        depth = halfspace_depth(normal_cloud)
        assert (depth[ConvexHull(normal_cloud).vertices] <= 2).all()

    def test_depth_bounds(self, normal_cloud):
        depth = halfspace_depth(normal_cloud)
        assert depth.min() >= 1
        assert depth.max() <= len(normal_cloud) // 2 + 1

    def test_outside_point_has_depth_zero(self):
        assert halfspace_depth([[5.0, 5.0]], data=SQUARE).tolist() == [0]

    def test_accepts_dataframe_and_drops_missing(self):
        df = pd.DataFrame({"x": [0.0, 1.0, 0.0, 1.0, 0.5, np.nan], "y": [0.0, 0.0, 1.0, 1.0, 0.5, 2.0]})
        assert halfspace_depth(df).tolist() == [1, 1, 1, 1, 3]

    def test_depth_median(self):
        assert depth_median(SQUARE) == pytest.approx([0.5, 0.5])


class TestBagPlot:
    """Test the bag, fence, loop and outliers."""

    def test_bag_holds_about_half(self, normal_cloud):
        bag = compute_bagplot(normal_cloud)
        share = bag.inside(bag.data).mean()
        assert 0.3 <= share <= 0.7

    def test_center_inside_bag(self, normal_cloud):
        bag = compute_bagplot(normal_cloud)
        assert bag.inside(bag.center)[0]

    def test_far_point_is_outlier(self, normal_cloud):
        data = np.vstack([normal_cloud, [[50.0, 50.0]]])
        bag = compute_bagplot(data)
        assert any(np.allclose(p, [50.0, 50.0]) for p in bag.outliers)
        assert not bag.inside([[50.0, 50.0]], region="fence")[0]

    def test_fence_partitions_data(self, normal_cloud):
        bag = compute_bagplot(normal_cloud)
        inside = bag.inside(bag.data, region="fence")
        assert inside.sum() + bag.n_outliers == len(bag.data)

    def test_larger_factor_fewer_outliers(self, normal_cloud):
        data = np.vstack([normal_cloud, [[6.0, -6.0], [50.0, 50.0]]])
        tight = compute_bagplot(data, factor=1.5)
        loose = compute_bagplot(data, factor=4.0)
        assert loose.n_outliers <= tight.n_outliers

    def test_bag_within_hull(self, normal_cloud):
        bag = compute_bagplot(normal_cloud)
        lo, hi = normal_cloud.min(axis=0), normal_cloud.max(axis=0)
        assert (bag.bag >= lo - 1e-9).all() and (bag.bag <= hi + 1e-9).all()

    def test_hull_contains_every_point(self, normal_cloud):
        bag = compute_bagplot(normal_cloud)
        eq = ConvexHull(bag.hull).equations
        assert (bag.data @ eq[:, :2].T + eq[:, 2] <= 1e-9).all()

    @pytest.mark.parametrize("seed", [0, 1, 2, 3])
    def test_loop_contains_bag(self, seed):
        heavy = np.random.RandomState(seed).standard_t(3, size=(150, 2))
        bag = compute_bagplot(heavy)
        eq = ConvexHull(bag.loop).equations
        assert (bag.bag @ eq[:, :2].T + eq[:, 2] <= 1e-7).all()

    def test_loop_contains_bag_mtcars(self, mtcars):
        bag = compute_bagplot(mtcars[["wt", "mpg"]])
        eq = ConvexHull(bag.loop).equations
        assert (bag.bag @ eq[:, :2].T + eq[:, 2] <= 1e-7).all()

    def test_too_few_points(self):
        with pytest.raises(InsufficientDataError):
            compute_bagplot([[0.0, 0.0], [1.0, 1.0]])

    def test_collinear_points(self):
        line = np.column_stack([np.arange(10.0), 2 * np.arange(10.0)])
        with pytest.raises(InsufficientDataError, match="collinear"):
            compute_bagplot(line)

    def test_bad_shape(self):
        with pytest.raises(ValueError):
            compute_bagplot(np.zeros((5, 3)))


class TestLayers:
    """Test the per-layer tables."""

    def test_layer_frames(self, normal_cloud):
        for layer in (stat_hull(normal_cloud), stat_bag(normal_cloud), stat_loop(normal_cloud)):
            assert list(layer.columns) == ["x", "y"]
            assert len(layer) >= 3

    def test_outlier_layer(self, normal_cloud):
        data = np.vstack([normal_cloud, [[50.0, 50.0]]])
        outliers = stat_outliers(data)
        assert list(outliers.columns) == ["x", "y"]
        assert ((outliers["x"] == 50.0) & (outliers["y"] == 50.0)).any()

    def test_hull_of_square(self):
        assert len(stat_hull(SQUARE)) == 4

    def test_hull_degenerate(self):
        with pytest.raises(InsufficientDataError):
            stat_hull([[0.0, 0.0], [1.0, 1.0], [2.0, 2.0]])
