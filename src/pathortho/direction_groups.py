"""Grouping of consecutive equally labeled edges into straight lines."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from pathortho.common import EdgeDirection
from pathortho.geom import GeomMath

logger = logging.getLogger(__name__)


###############################################################################
# DirectionGroup
###############################################################################


@dataclass(frozen=True)
class DirectionGroup:
    """Maximal cyclic run of edges sharing one direction label.

    All edges of a group are meant to lie on one straight line, described by
    the line equation A*x + B*y = offset with (A, B) perpendicular to the line.

    Attributes:
        direction: Label shared by all edges of the group.
        start: Index of the first edge, 0 <= start < num_edges.
        end: Exclusive end index, not reduced, i.e. it may pass the seam of the closed path.
        offset: Averaged line constant of the group.
    """

    direction: EdgeDirection
    start: int
    end: int
    offset: float

    @property
    def num_edges(self) -> int:
        """Number of edges in this group."""
        return self.end - self.start

    def edge_indices(self, num_edges: int) -> NDArray[np.intp]:
        """Reduced indices of the edges of this group on a path with num_edges edges."""
        return np.arange(self.start, self.end) % num_edges


###############################################################################
# GroupAggregator
###############################################################################


class GroupAggregator:
    """Merges cyclic runs of equal labels into groups with averaged line constants."""

    @staticmethod
    def line_constants(points: NDArray[np.float64], direction: EdgeDirection, base: Tuple[float, float]) -> NDArray:
        """
        Line constant C of each point for lines of the given direction.

        ALONG lines use the perpendicular of base as normal, C = x*ybase - y*xbase.
        PERPENDICULAR lines use base itself as normal, C = x*xbase + y*ybase.
        """
        xbase, ybase = base
        if direction == EdgeDirection.ALONG:
            return points[:, 0] * ybase - points[:, 1] * xbase
        return points[:, 0] * xbase + points[:, 1] * ybase

    @classmethod
    def make_group(
        cls,
        direction: EdgeDirection,
        start: int,
        end: int,
        points: NDArray[np.float64],
        base: Tuple[float, float],
    ) -> DirectionGroup:
        """Create the group of edges [start, end) and average the constants of its end points.

        Both end points of every edge are sampled, so the group covers
        end - start + 1 points.
        """
        num_edges = points.shape[0] - 1
        indices = np.arange(start, end + 1) % num_edges
        offset = float(cls.line_constants(points[indices], direction, base).mean())
        return DirectionGroup(EdgeDirection(int(direction)), int(start), int(end), offset)

    @classmethod
    def aggregate(
        cls,
        labels: Union[Sequence[int], NDArray[np.int8]],
        points: NDArray[np.float64],
        base: Tuple[float, float],
    ) -> List[DirectionGroup]:
        """
        Split the cyclic label sequence into groups.

        The scan is seeded with the label of the last edge and runs over more
        than one full cycle, so a run crossing the closing node becomes one
        group. The first group starts at the first label change; scanning stops
        as soon as a group ends at or behind the seam.

        Args:
            labels: One EdgeDirection value per edge.
            points: Nodes of the closed source path, shape (num_edges + 1, 2).
            base: Unit base vector.

        Returns:
            List[DirectionGroup]: groups in path order. Empty if all labels are equal.
        """
        labels = np.asarray(labels)
        num_edges = labels.shape[0]
        if points.shape[0] != num_edges + 1:
            raise ValueError(f"got {labels.shape[0]} labels for a path with {points.shape[0]} nodes")

        groups: List[DirectionGroup] = []
        start = -1  # no group started yet
        previous = labels[num_edges - 1]

        for i in range(2 * (num_edges + 1)):
            current = labels[GeomMath.cyclic_index(i, num_edges)]
            if current == previous:
                continue
            if start >= 0:
                groups.append(cls.make_group(EdgeDirection(int(previous)), start, i, points, base))
                if i >= num_edges:
                    break
            previous = current
            start = i

        logger.debug("Aggregated %d labels into %d groups", num_edges, len(groups))
        return groups

    @staticmethod
    def membership(groups: Sequence[DirectionGroup], num_edges: int) -> NDArray[np.intp]:
        """Index of the owning group for every edge, -1 for edges outside all groups."""
        owner = np.full(num_edges, -1, dtype=np.intp)
        for group_index, group in enumerate(groups):
            owner[group.edge_indices(num_edges)] = group_index
        return owner
