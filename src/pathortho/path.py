"""Closed polygonal path handling for orthogonalization."""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import List, Optional

import numpy as np
import shapely.geometry
from numpy.typing import NDArray

from pathortho.common import MIN_NODES, Point2D, PointsLike
from pathortho.errors import NotClosedError, TooFewNodesError
from pathortho.geom import BoundingBox

###############################################################################
# PathValidator
###############################################################################


class PathValidator:
    """Validates a path before it enters the orthogonalization."""

    @staticmethod
    def validate_closed(points: NDArray[np.float64], min_nodes: int = MIN_NODES) -> None:
        """Validate node count and closing state.

        Args:
            points: Array of path points, shape (n, 2).
            min_nodes: Minimum number of nodes including the closing duplicate.

        Raises:
            TooFewNodesError: If the path has fewer than min_nodes points.
            NotClosedError: If first and last point differ.
        """
        num_nodes = points.shape[0]
        if num_nodes < min_nodes:
            raise TooFewNodesError(num_nodes, min_nodes)
        if points[0, 0] != points[-1, 0] or points[0, 1] != points[-1, 1]:
            raise NotClosedError(points[0], points[-1])


###############################################################################
# ClosedPath
###############################################################################


@dataclass
class ClosedPath:
    """Ordered sequence of 2D points describing a polygon.

    A path counts as closed if its first and last point are coordinate-equal;
    the closing point is stored explicitly. The points are kept in a read-only
    numpy array, so a path never changes after creation.

    Attributes:
        _points: Array of 2D points (shape: n_points, 2)
    """

    _points: NDArray[np.float64]  # shape (n_points, 2)

    def __init__(self, points: Optional[PointsLike] = None):
        """
        Initialize a ClosedPath from 2D points.

        Args:
            points: a sequence of (x, y) or an array of shape (n, 2).
        """
        if points is None:
            arr = np.empty((0, 2), dtype=np.float64)
        elif isinstance(points, np.ndarray):
            arr = points.astype(np.float64, copy=True)
        else:
            arr = np.asarray(points, dtype=np.float64)

        if arr.size == 0:
            arr = arr.reshape(0, 2)
        if arr.ndim != 2:
            raise ValueError(f"points must have 2 dimensions, got {arr.ndim}")
        if arr.shape[1] != 2:
            raise ValueError(f"points must have shape (n, 2), got {arr.shape}")

        arr.setflags(write=False)
        self._points = arr

    @property
    def points(self) -> NDArray[np.float64]:
        """
        The points of this path as a read-only numpy array of shape (n_points, 2).
        """
        return self._points

    @property
    def num_nodes(self) -> int:
        """Number of nodes including the closing duplicate."""
        return int(self._points.shape[0])

    @property
    def num_edges(self) -> int:
        """Number of edges, i.e. vectors from one node to the next."""
        return max(self.num_nodes - 1, 0)

    @property
    def is_closed(self) -> bool:
        """
        Return True if the path has at least one node and the first and last point are equal.
        """
        if self.num_nodes == 0:
            return False
        return bool(np.array_equal(self._points[0], self._points[-1]))

    @cached_property
    def edge_vectors(self) -> NDArray[np.float64]:
        """Vectors from each node to the next one, shape (num_edges, 2)."""
        return np.diff(self._points, axis=0)

    @cached_property
    def edge_lengths(self) -> NDArray[np.float64]:
        """Euclidean length of each edge."""
        return np.hypot(self.edge_vectors[:, 0], self.edge_vectors[:, 1])

    @cached_property
    def bounding_box(self) -> BoundingBox:
        """Axis-aligned bounding box of all nodes."""
        return BoundingBox.from_points(self._points)

    @cached_property
    def area(self) -> float:
        """
        Return the area enclosed by this path.

        Uses the shoelace formula on the distinct nodes.

        Returns:
            float: The area of the path. Returns 0.0 if path has fewer than 3 distinct points.
        """
        pts = self.distinct_points()
        if pts.shape[0] < 3:
            return 0.0
        x = pts[:, 0]
        y = pts[:, 1]
        x_next = np.roll(x, -1)
        y_next = np.roll(y, -1)
        cross = x * y_next - x_next * y
        cross_sum = cross.sum()
        if np.isclose(cross_sum, 0.0):
            return 0.0
        return float(0.5 * abs(cross_sum))

    @cached_property
    def is_simple(self) -> bool:
        """
        Return True if the path describes a valid polygon without self-intersections.

        Paths with fewer than 3 distinct points are never simple.
        """
        if self.distinct_points().shape[0] < 3:
            return False
        return bool(self.to_shapely().is_valid)

    def distinct_points(self) -> NDArray[np.float64]:
        """Nodes without the closing duplicate (all nodes if the path is not closed)."""
        if self.is_closed and self.num_nodes > 1:
            return self._points[:-1]
        return self._points

    def to_shapely(self) -> shapely.geometry.Polygon:
        """Convert into a shapely Polygon."""
        return shapely.geometry.Polygon(self.distinct_points())

    def to_list(self) -> List[Point2D]:
        """Nodes as list of (x, y) tuples."""
        return [(float(x), float(y)) for x, y in self._points]

    def approx_equal(self, other: ClosedPath, rtol: float = 1e-9, atol: float = 1e-9) -> bool:
        """Return True if both paths have the same number of nodes at approximately equal positions."""
        if not isinstance(other, ClosedPath):
            return False
        if self._points.shape != other.points.shape:
            return False
        return bool(np.allclose(self._points, other.points, rtol=rtol, atol=atol))

    def validate_closed(self, min_nodes: int = MIN_NODES) -> None:
        """Raise if this path cannot be orthogonalized, see PathValidator.validate_closed."""
        PathValidator.validate_closed(self._points, min_nodes)

    def to_dict(self) -> dict:
        """Convert the path to a dictionary for serialization."""
        return {"points": self._points.tolist()}

    @classmethod
    def from_dict(cls, data: dict) -> ClosedPath:
        """Create a ClosedPath from a dictionary."""
        return cls(data.get("points", []))

    @classmethod
    def from_polygon(cls, polygon: shapely.geometry.Polygon) -> ClosedPath:
        """Create a ClosedPath from the exterior ring of a shapely Polygon.

        The ring coordinates of shapely already repeat the first point at the end.
        """
        coords = np.asarray(polygon.exterior.coords, dtype=np.float64)[:, :2]
        return cls(coords)

    def __len__(self) -> int:
        return self.num_nodes

    def __eq__(self, other) -> bool:
        if not isinstance(other, ClosedPath):
            return NotImplemented
        return bool(np.array_equal(self._points, other.points))

    def __str__(self):
        """Returns a string representation of the ClosedPath instance."""
        return f"ClosedPath(num_nodes={self.num_nodes}, closed={self.is_closed})"
