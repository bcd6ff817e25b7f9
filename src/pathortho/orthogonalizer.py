"""Orthogonalization of closed paths with collapse of short edges."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from pathortho.base_direction import BaseDirection, BaseDirectionEstimator
from pathortho.common import PointsLike
from pathortho.direction_groups import DirectionGroup, GroupAggregator
from pathortho.edge_classifier import EdgeClassifier
from pathortho.errors import CollapseLimitError, DegenerateDirectionError
from pathortho.geom import GeomMath
from pathortho.node_reconstructor import NodeReconstructor
from pathortho.path import ClosedPath

logger = logging.getLogger(__name__)

###############################################################################
# OrthoSettings
###############################################################################


@dataclass(frozen=True)
class OrthoSettings:
    """Settings of one orthogonalization run.

    Attributes:
        collapse_length: Minimal edge length of the result, shorter edges get collapsed.
            Zero or negative disables collapsing.
        max_iterations: Upper bound for collapse passes. None means one pass per source edge.
    """

    collapse_length: float = 0.0
    max_iterations: Optional[int] = None

    def __post_init__(self):
        if math.isnan(self.collapse_length):
            raise ValueError("collapse_length must be a number")
        if self.max_iterations is not None and self.max_iterations <= 0:
            raise ValueError(f"max_iterations must be positive, got {self.max_iterations}")

    @property
    def collapse_enabled(self) -> bool:
        """True if short edges get collapsed."""
        return self.collapse_length > 0

    def iteration_limit(self, num_edges: int) -> int:
        """Collapse passes allowed for a source path with num_edges edges."""
        if self.max_iterations is not None:
            return self.max_iterations
        return max(num_edges, 1)

    def to_dict(self) -> dict:
        """Convert settings to a dictionary for serialization."""
        return {
            "collapse_length": self.collapse_length,
            "max_iterations": self.max_iterations,
        }

    @classmethod
    def from_dict(cls, data: dict) -> OrthoSettings:
        """Create OrthoSettings from a dictionary."""
        return cls(
            collapse_length=float(data.get("collapse_length", 0.0)),
            max_iterations=data.get("max_iterations"),
        )


DEFAULT_SETTINGS = OrthoSettings()


###############################################################################
# OrthoResult
###############################################################################


@dataclass(frozen=True, eq=False)
class OrthoResult:
    """Outcome of an orthogonalization.

    Attributes:
        path: The orthogonalized closed path.
        base: Base direction used for the whole run.
        groups: Direction groups the path was reconstructed from.
        labels: Final edge labels of the source path (read-only).
        passes: Number of collapse passes that changed the labels.
        collapsed_groups: Number of groups merged into their predecessor over all passes.
        degenerate: True if collapsing stopped because only two groups (one distinct node) were left.
    """

    path: ClosedPath
    base: BaseDirection
    groups: Tuple[DirectionGroup, ...]
    labels: NDArray[np.int8] = field(repr=False)
    passes: int = 0
    collapsed_groups: int = 0
    degenerate: bool = False


###############################################################################
# PathOrthogonalizer
###############################################################################


class PathOrthogonalizer:
    """Turns a closed path into a path whose edges alternate between two perpendicular directions.

    Steps:
        1. estimate the base vector of the source path
        2. label every source edge as along or perpendicular to the base vector
        3. merge runs of equal labels into groups, each with one averaged line
        4. intersect the lines of neighbouring groups to get the new nodes
        5. if enabled, merge groups producing too short edges into their
           predecessor and repeat from step 3
    """

    def __init__(self, settings: Optional[OrthoSettings] = None):
        self.settings = settings if settings is not None else DEFAULT_SETTINGS

    @staticmethod
    def short_edges(path: ClosedPath, collapse_length: float) -> NDArray[np.intp]:
        """Indices of edges of path shorter than collapse_length (compared on squares)."""
        vectors = path.edge_vectors
        sq_len = vectors[:, 0] * vectors[:, 0] + vectors[:, 1] * vectors[:, 1]
        return np.flatnonzero(sq_len < collapse_length * collapse_length)

    @staticmethod
    def collapse_groups(
        labels: NDArray[np.int8],
        groups: Sequence[DirectionGroup],
        short_edges: Sequence[int],
    ) -> int:
        """
        Relabel the groups producing the given output edges, in place.

        Output edge k runs from node k to node k+1 and lies on the line of group k.
        Its edges [start of group k, start of group k+1) take the label of the
        source edge just before the group. Flipping the label instead would not
        work for consecutive short groups: those must collapse together, which
        happens because later groups read the labels already changed by earlier ones.

        Args:
            labels: Edge labels of the source path, modified in place.
            groups: Groups the current output path was built from.
            short_edges: Indices of too short output edges, ascending.

        Returns:
            int: number of groups whose labels changed.
        """
        num_edges = labels.shape[0]
        changed = 0
        for k in short_edges:
            group = groups[k]
            next_start = groups[k + 1].start if k + 1 < len(groups) else groups[0].start
            indices = GeomMath.cyclic_range(group.start, next_start, num_edges)
            predecessor = labels[GeomMath.cyclic_index(group.start - 1, num_edges)]
            if np.any(labels[indices] != predecessor):
                labels[indices] = predecessor
                changed += 1
        return changed

    def run(self, source: Union[ClosedPath, PointsLike]) -> OrthoResult:
        """
        Orthogonalize source.

        Args:
            source: Closed path with at least 5 nodes.

        Returns:
            OrthoResult: the orthogonalized path with the intermediate data.

        Raises:
            TooFewNodesError: If source has fewer than 5 nodes.
            NotClosedError: If first and last node of source differ.
            DegenerateDirectionError: If no base vector or no groups can be derived,
                also when collapsing would merge all edges into a single direction.
            CollapseLimitError: If collapsing does not settle within the iteration limit.
        """
        if not isinstance(source, ClosedPath):
            source = ClosedPath(source)
        source.validate_closed()

        base = BaseDirectionEstimator.estimate_vectors(source.edge_vectors)
        labels = EdgeClassifier.classify(source, base.vector)
        groups = GroupAggregator.aggregate(labels, source.points, base.vector)
        path = NodeReconstructor.reconstruct(groups, base.vector)

        passes = 0
        collapsed_groups = 0
        degenerate = False
        collapse_length = self.settings.collapse_length
        max_iterations = self.settings.iteration_limit(source.num_edges)

        while self.settings.collapse_enabled:
            short = self.short_edges(path, collapse_length)
            if short.size == 0:
                break
            if len(groups) <= 2:
                logger.warning("Collapse stopped: path degenerated to %d groups", len(groups))
                degenerate = True
                break
            if passes >= max_iterations:
                raise CollapseLimitError(max_iterations)

            candidate = labels.copy()
            changed = self.collapse_groups(candidate, groups, short)
            if changed == 0:
                break
            new_groups = GroupAggregator.aggregate(candidate, source.points, base.vector)
            if len(new_groups) < 2:
                raise DegenerateDirectionError(
                    f"degenerate direction: collapsing {changed} groups leaves {len(new_groups)} direction groups"
                )

            logger.debug(
                "Collapse pass %d: %d short edges, %d groups collapsed, %d -> %d groups",
                passes + 1,
                short.size,
                changed,
                len(groups),
                len(new_groups),
            )
            labels = candidate
            groups = new_groups
            path = NodeReconstructor.reconstruct(groups, base.vector)
            passes += 1
            collapsed_groups += changed

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Orthogonalized %d nodes into %d nodes (base %.6f deg), area %.6g -> %.6g, simple=%s",
                source.num_nodes,
                path.num_nodes,
                base.angle_degrees,
                source.area,
                path.area,
                path.is_simple,
            )

        labels.setflags(write=False)
        return OrthoResult(
            path=path,
            base=base,
            groups=tuple(groups),
            labels=labels,
            passes=passes,
            collapsed_groups=collapsed_groups,
            degenerate=degenerate,
        )


def orthogonalize(
    source: Union[ClosedPath, PointsLike],
    collapse_length: float = 0.0,
    max_iterations: Optional[int] = None,
) -> ClosedPath:
    """Orthogonalize a closed path, see PathOrthogonalizer.run."""
    settings = OrthoSettings(collapse_length=collapse_length, max_iterations=max_iterations)
    return PathOrthogonalizer(settings).run(source).path


def main():
    """Main"""
    logging.basicConfig(level=logging.DEBUG)
    source = ClosedPath([(0.0, 0.0), (10.0, 0.1), (10.1, 10.0), (0.0, 9.9), (0.0, 0.0)])
    result = PathOrthogonalizer(OrthoSettings(collapse_length=1.0)).run(source)
    print(result.path.to_list())


if __name__ == "__main__":
    main()
