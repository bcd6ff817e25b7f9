"""Reconstruction of path nodes from the lines of direction groups."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from pathortho.common import EdgeDirection
from pathortho.direction_groups import DirectionGroup
from pathortho.errors import DegenerateDirectionError
from pathortho.geom import GeomMath
from pathortho.path import ClosedPath


@dataclass(frozen=True)
class NodeOffsets:
    """Line constants of the two lines meeting at one output node.

    Attributes:
        along_offset: Constant of the line of the ALONG group at this node.
        perp_offset: Constant of the line of the PERPENDICULAR group at this node.
    """

    along_offset: float
    perp_offset: float


class NodeReconstructor:
    """Intersects the lines of consecutive groups to get the nodes of the orthogonal path."""

    @staticmethod
    def node_offsets(groups: Sequence[DirectionGroup]) -> List[NodeOffsets]:
        """
        Collect the line constants for each output node.

        Node k is the first node of group k, so it lies on the line of group k
        and on the line of the preceding group k-1 (cyclic).

        Raises:
            DegenerateDirectionError: If there are fewer than two groups or
                two neighbouring groups share a direction.
        """
        if len(groups) < 2:
            raise DegenerateDirectionError(f"degenerate direction: {len(groups)} direction groups, need at least 2")

        offsets: List[NodeOffsets] = []
        for k, group in enumerate(groups):
            previous = groups[k - 1]
            if previous.direction == group.direction:
                raise DegenerateDirectionError(
                    f"degenerate direction: groups {k - 1} and {k} share direction {group.direction.name}"
                )
            if group.direction == EdgeDirection.ALONG:
                offsets.append(NodeOffsets(along_offset=group.offset, perp_offset=previous.offset))
            else:
                offsets.append(NodeOffsets(along_offset=previous.offset, perp_offset=group.offset))
        return offsets

    @classmethod
    def reconstruct(cls, groups: Sequence[DirectionGroup], base: Tuple[float, float]) -> ClosedPath:
        """
        Build the closed output path, one node per group plus the closing duplicate.

        Args:
            groups: Groups in path order with alternating directions.
            base: Unit base vector.

        Returns:
            ClosedPath: path with len(groups) + 1 nodes.
        """
        offsets = cls.node_offsets(groups)
        points = np.empty((len(offsets) + 1, 2), dtype=np.float64)
        for k, node in enumerate(offsets):
            points[k] = GeomMath.intersect_base_lines(node.along_offset, node.perp_offset, base)
        points[-1] = points[0]
        return ClosedPath(points)
