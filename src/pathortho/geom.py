"""Handling geometries"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np
from numpy.typing import NDArray


###############################################################################
# GeomMath
###############################################################################
class GeomMath:
    """Class to provide various static methods related to geometry handling."""

    @staticmethod
    def cyclic_index(index: int, length: int) -> int:
        """
        Reduce an unbounded index onto a cyclic sequence of the given length.

        Negative indices wrap from the end, i.e. cyclic_index(-1, n) == n - 1.

        Args:
            index (int): index, may exceed the sequence bounds in both directions
            length (int): length of the cyclic sequence, must be positive

        Returns:
            int: index in range [0, length)
        """
        if length <= 0:
            raise ValueError(f"length of cyclic sequence must be positive, got {length}")
        return index % length

    @staticmethod
    def cyclic_range(start: int, stop: int, length: int) -> NDArray[np.intp]:
        """
        Indices of the cyclic half-open range [start, stop) on a sequence of the given length.

        If stop <= start the range runs over the seam, i.e. it continues at index 0
        after reaching the end of the sequence. start == stop denotes the full cycle.

        Args:
            start (int): first index of the range
            stop (int): exclusive end of the range
            length (int): length of the cyclic sequence

        Returns:
            NDArray[np.intp]: reduced indices in visiting order
        """
        if length <= 0:
            raise ValueError(f"length of cyclic sequence must be positive, got {length}")
        start = start % length
        stop = stop % length
        if stop <= start:
            stop += length
        return np.arange(start, stop) % length

    @staticmethod
    def project_onto_base(vectors: NDArray[np.float64], base: Tuple[float, float]) -> NDArray[np.float64]:
        """
        Express vectors in the orthonormal frame (base, perpendicular of base).

        The perpendicular component uses the same convention as the line constants,
        i.e. perp = x * ybase - y * xbase.

        Args:
            vectors (NDArray): array of shape (n, 2)
            base (Tuple[float, float]): unit base vector (xbase, ybase)

        Returns:
            NDArray[np.float64]: array of shape (n, 2) with columns (along, perp)
        """
        xbase, ybase = base
        vectors = np.asarray(vectors, dtype=np.float64).reshape(-1, 2)
        along = vectors[:, 0] * xbase + vectors[:, 1] * ybase
        perp = vectors[:, 0] * ybase - vectors[:, 1] * xbase
        return np.column_stack([along, perp])

    @staticmethod
    def intersect_base_lines(along_offset: float, perp_offset: float, base: Tuple[float, float]) -> Tuple[float, float]:
        """
        Intersection of two perpendicular lines given in the base frame.

        The lines are
            x * ybase - y * xbase = along_offset   (line running along base)
            x * xbase + y * ybase = perp_offset    (line running perpendicular to base)
        As (xbase, ybase) is a unit vector the equations form an orthonormal system
        and the intersection is just the rotation of both constants back into (x, y).

        Args:
            along_offset (float): constant of the line running along base
            perp_offset (float): constant of the line running perpendicular to base
            base (Tuple[float, float]): unit base vector (xbase, ybase)

        Returns:
            Tuple[float, float]: intersection point (x, y)
        """
        xbase, ybase = base
        x = xbase * perp_offset + ybase * along_offset
        y = ybase * perp_offset - xbase * along_offset
        return (float(x), float(y))


###############################################################################
# BoundingBox
###############################################################################
@dataclass
class BoundingBox:
    """
    Represents a rectangular, axis-aligned box.

    Attributes:
        xmin (float): The minimum x-coordinate.
        ymin (float): The minimum y-coordinate.
        xmax (float): The maximum x-coordinate.
        ymax (float): The maximum y-coordinate.
    """

    _xmin: float
    _ymin: float
    _xmax: float
    _ymax: float

    def __init__(self, xmin: float, ymin: float, xmax: float, ymax: float):
        """Initialize BoundingBox with coordinates.

        Args:
            xmin: The minimum x-coordinate
            ymin: The minimum y-coordinate
            xmax: The maximum x-coordinate
            ymax: The maximum y-coordinate
        """
        self._xmin = xmin
        self._ymin = ymin
        self._xmax = xmax
        self._ymax = ymax

        # Normalize coordinates to ensure xmin <= xmax and ymin <= ymax
        if self._xmin > self._xmax:
            self._xmin, self._xmax = self._xmax, self._xmin
        if self._ymin > self._ymax:
            self._ymin, self._ymax = self._ymax, self._ymin

    @property
    def xmin(self) -> float:
        """float: The minimum x-coordinate."""
        return self._xmin

    @property
    def ymin(self) -> float:
        """float: The minimum y-coordinate."""
        return self._ymin

    @property
    def xmax(self) -> float:
        """float: The maximum x-coordinate."""
        return self._xmax

    @property
    def ymax(self) -> float:
        """float: The maximum y-coordinate."""
        return self._ymax

    @property
    def extent(self) -> Tuple[float, float, float, float]:
        """The extent of the box as Tuple (xmin, ymin, xmax, ymax)."""
        return self._xmin, self._ymin, self._xmax, self._ymax

    @property
    def width(self) -> float:
        """float: The width of the box (difference between xmax and xmin)."""
        return self._xmax - self._xmin

    @property
    def height(self) -> float:
        """float: The height of the box (difference between ymax and ymin)."""
        return self._ymax - self._ymin

    def union(self, other: BoundingBox) -> BoundingBox:
        """Smallest box containing this and the other box."""
        return BoundingBox(
            xmin=min(self._xmin, other.xmin),
            ymin=min(self._ymin, other.ymin),
            xmax=max(self._xmax, other.xmax),
            ymax=max(self._ymax, other.ymax),
        )

    def expanded(self, margin: float) -> BoundingBox:
        """Box grown by margin on every side."""
        return BoundingBox(
            xmin=self._xmin - margin,
            ymin=self._ymin - margin,
            xmax=self._xmax + margin,
            ymax=self._ymax + margin,
        )

    @classmethod
    def from_points(cls, points: NDArray[np.float64]) -> BoundingBox:
        """Create the bounding box of an (n, 2) point array. Empty arrays give a zero box."""
        points = np.asarray(points, dtype=np.float64)
        if points.shape[0] == 0:
            return cls(0.0, 0.0, 0.0, 0.0)
        mins = points[:, :2].min(axis=0)
        maxs = points[:, :2].max(axis=0)
        return cls(float(mins[0]), float(mins[1]), float(maxs[0]), float(maxs[1]))

    def __str__(self):
        """Returns a string representation of the BoundingBox instance."""
        return (
            f"BoundingBox(xmin={self.xmin}, ymin={self.ymin}, "
            f"xmax={self.xmax}, ymax={self.ymax}, "
            f"width={self.width}, height={self.height})"
        )
