"""Test module for pathortho.base_direction

The tests are run using pytest.
"""

import math

import numpy as np
import pytest

from pathortho.base_direction import BaseDirectionEstimator, FoldVariant
from pathortho.errors import DegenerateDirectionError, NotClosedError, TooFewNodesError
from pathortho.path import ClosedPath


def rotated_rectangle(width: float, height: float, degrees: float) -> ClosedPath:
    """Closed rectangle with one corner in the origin, rotated by degrees."""
    angle = math.radians(degrees)
    rot = np.array([[math.cos(angle), -math.sin(angle)], [math.sin(angle), math.cos(angle)]])
    corners = np.array([[0.0, 0.0], [width, 0.0], [width, height], [0.0, height], [0.0, 0.0]])
    return ClosedPath(corners @ rot.T)


###############################################################################
# Folding
###############################################################################


class TestFolding:
    """Test the folding of edge vectors into canonical ranges."""

    def test_weighted_vectors_scale_by_squared_length(self):
        """Vectors are multiplied by their squared length."""
        weighted = BaseDirectionEstimator.weighted_vectors(np.array([[0.0, 2.0], [1.0, 1.0]]))
        assert np.allclose(weighted, [[0.0, 8.0], [2.0, 2.0]])

    def test_weighted_vectors_flip_negative_x(self):
        """Vectors pointing left are flipped to the right."""
        weighted = BaseDirectionEstimator.weighted_vectors(np.array([[-1.0, 0.5]]))
        assert np.allclose(weighted, [[1.25, -0.625]])

    def test_fold_0_90(self):
        """Vectors below the x-axis are rotated by +90 degrees."""
        folded = BaseDirectionEstimator.fold_0_90(np.array([[1.0, -1.0], [2.0, 1.0], [0.0, 3.0]]))
        assert np.allclose(folded, [[1.0, 1.0], [2.0, 1.0], [0.0, 3.0]])

    def test_fold_pm45(self):
        """Vectors are rotated towards the x-axis if they are steeper than 45 degrees."""
        folded = BaseDirectionEstimator.fold_pm45(
            np.array([[2.0, 1.0], [2.0, -1.0], [1.0, 2.0], [1.0, -2.0], [0.0, 3.0]])
        )
        assert np.allclose(folded, [[2.0, 1.0], [2.0, -1.0], [2.0, -1.0], [2.0, 1.0], [3.0, 0.0]])

    def test_fold_pm45_diagonals_swap(self):
        """Exact diagonals are rotated too, +45 degrees lands on -45 degrees and vice versa."""
        folded = BaseDirectionEstimator.fold_pm45(np.array([[1.0, 1.0], [1.0, -1.0]]))
        assert np.allclose(folded, [[1.0, -1.0], [1.0, 1.0]])

    def test_normalize_zero(self):
        """A zero vector cannot be normalized."""
        assert BaseDirectionEstimator.normalize(np.array([0.0, 0.0])) is None

    def test_normalize(self):
        """Normalized vectors have unit length."""
        assert BaseDirectionEstimator.normalize(np.array([3.0, 4.0])) == pytest.approx((0.6, 0.8))


###############################################################################
# Residual
###############################################################################


class TestResidual:
    """Test the squared error of edges against a base frame."""

    def test_perfect_fit(self):
        """Edges parallel or perpendicular to base have no residual."""
        edges = np.array([[10.0, 0.0], [0.0, 5.0], [-10.0, 0.0], [0.0, -5.0]])
        assert BaseDirectionEstimator.residual(edges, (1.0, 0.0)) == 0.0

    def test_smaller_component_counts(self):
        """The smaller of both squared components is the error of an edge."""
        edges = np.array([[10.0, 1.0], [-2.0, 7.0]])
        assert BaseDirectionEstimator.residual(edges, (1.0, 0.0)) == pytest.approx(1.0 + 4.0)


###############################################################################
# Estimation
###############################################################################


class TestBaseDirectionEstimator:
    """Test the estimation of the base vector."""

    def test_axis_aligned_rectangle(self):
        """An axis-aligned rectangle is best described by the [-45, 45] fold."""
        base = BaseDirectionEstimator.estimate(rotated_rectangle(10.0, 5.0, 0.0))
        assert base.variant == FoldVariant.RANGE_PM45
        assert np.allclose(base.vector, (1.0, 0.0))
        assert base.residual == pytest.approx(0.0, abs=1e-12)
        assert base.rejected_residual > 0.0

    def test_rotated_rectangle_30_degrees(self):
        """The base vector follows a rotated rectangle."""
        base = BaseDirectionEstimator.estimate(rotated_rectangle(10.0, 5.0, 30.0))
        angle = math.radians(30.0)
        assert np.allclose(base.vector, (math.cos(angle), math.sin(angle)), atol=1e-9)
        assert base.angle_degrees == pytest.approx(30.0)

    def test_rotated_rectangle_60_degrees(self):
        """For 60 degrees either the edge direction or its perpendicular is found."""
        path = rotated_rectangle(10.0, 5.0, 60.0)
        base = BaseDirectionEstimator.estimate(path)
        angle = math.radians(60.0)
        dot = abs(base.xbase * math.cos(angle) + base.ybase * math.sin(angle))
        assert dot == pytest.approx(1.0, abs=1e-9) or dot == pytest.approx(0.0, abs=1e-9)
        assert base.residual == pytest.approx(0.0, abs=1e-9)

    def test_unit_length(self):
        """The base vector is normalized."""
        path = ClosedPath([(0.0, 0.0), (10.0, 0.1), (10.1, 10.0), (0.0, 9.9), (0.0, 0.0)])
        base = BaseDirectionEstimator.estimate(path)
        assert math.hypot(*base.vector) == pytest.approx(1.0)
        assert base.perpendicular == (base.ybase, -base.xbase)

    def test_lower_residual_wins(self):
        """The chosen candidate never has a larger residual than the rejected one."""
        path = ClosedPath([(0.0, 0.0), (10.0, 1.0), (20.0, 0.0), (10.0, 11.0), (0.0, 0.0)])
        base = BaseDirectionEstimator.estimate(path)
        assert base.residual <= base.rejected_residual
        # both 45 degree diagonals fit better than the x-axis
        assert base.variant == FoldVariant.RANGE_0_90
        assert base.angle_degrees == pytest.approx(45.0)

    def test_zero_length_edges(self):
        """A path collapsed into a single point has no direction."""
        with pytest.raises(DegenerateDirectionError):
            BaseDirectionEstimator.estimate(ClosedPath([(1.0, 1.0)] * 5))

    def test_rejects_short_path(self):
        """Paths with fewer than five nodes are rejected before estimation."""
        with pytest.raises(TooFewNodesError):
            BaseDirectionEstimator.estimate(ClosedPath([(0.0, 0.0), (1.0, 0.0), (0.0, 1.0), (0.0, 0.0)]))

    def test_rejects_open_path(self):
        """Open paths are rejected before estimation."""
        with pytest.raises(NotClosedError):
            BaseDirectionEstimator.estimate(ClosedPath([(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0), (0.0, 0.5)]))
