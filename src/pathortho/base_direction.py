"""Estimation of the dominant rectilinear direction of a closed path."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from pathortho.errors import DegenerateDirectionError
from pathortho.geom import GeomMath
from pathortho.path import ClosedPath

logger = logging.getLogger(__name__)


class FoldVariant(Enum):
    """Canonical angle range the edge vectors are folded into."""

    RANGE_0_90 = auto()  # [0, 90) degrees
    RANGE_PM45 = auto()  # [-45, 45] degrees, exact diagonals swap sides


###############################################################################
# BaseDirection
###############################################################################


@dataclass(frozen=True)
class BaseDirection:
    """Unit vector describing the dominant orientation of a path.

    Attributes:
        xbase: x-component of the unit base vector.
        ybase: y-component of the unit base vector.
        variant: Folding variant the vector was derived from.
        residual: Summed squared deviation of all edges from the base frame.
        rejected_residual: Residual of the competing candidate (inf if it was unusable).
    """

    xbase: float
    ybase: float
    variant: FoldVariant
    residual: float
    rejected_residual: float = math.inf

    @property
    def vector(self) -> Tuple[float, float]:
        """The base vector as tuple (xbase, ybase)."""
        return (self.xbase, self.ybase)

    @property
    def perpendicular(self) -> Tuple[float, float]:
        """The perpendicular of the base vector as used for line constants, i.e. (ybase, -xbase)."""
        return (self.ybase, -self.xbase)

    @property
    def angle_degrees(self) -> float:
        """Angle of the base vector against the x-axis in degrees."""
        return math.degrees(math.atan2(self.ybase, self.xbase))


###############################################################################
# BaseDirectionEstimator
###############################################################################


class BaseDirectionEstimator:
    """Derives the base vector from the statistical tendency of the path edges.

    Every edge vector is scaled by its squared length, so long edges dominate
    the estimate and short jittery edges hardly count. The scaled vectors are
    folded into a canonical angle range and summed up. Folding into [0, 90)
    is ambiguous for outlines close to the 0/90 degree boundary, so a second
    sum folded into [-45, 45] is computed as well. The candidate whose frame
    fits the unscaled edges best (least squared residual) wins.
    """

    @staticmethod
    def weighted_vectors(edge_vectors: NDArray[np.float64]) -> NDArray[np.float64]:
        """Scale each edge vector by its squared length and flip it into the half plane x >= 0."""
        vectors = np.asarray(edge_vectors, dtype=np.float64).reshape(-1, 2)
        sq_len = vectors[:, 0] * vectors[:, 0] + vectors[:, 1] * vectors[:, 1]
        weighted = vectors * sq_len[:, np.newaxis]
        flip = weighted[:, 0] < 0
        weighted[flip] = -weighted[flip]
        return weighted

    @staticmethod
    def fold_0_90(weighted: NDArray[np.float64]) -> NDArray[np.float64]:
        """Fold sign-normalized vectors into [0, 90) degrees by rotating those with y < 0 by +90 degrees."""
        x = weighted[:, 0]
        y = weighted[:, 1]
        below = y < 0
        folded_x = np.where(below, -y, x)
        folded_y = np.where(below, x, y)
        return np.column_stack([folded_x, folded_y])

    @staticmethod
    def fold_pm45(weighted: NDArray[np.float64]) -> NDArray[np.float64]:
        """Fold sign-normalized vectors into [-45, 45] degrees by rotating towards the nearer axis.

        Only vectors strictly inside (-45, 45) stay unchanged, so an exact +45 degree
        vector ends up at -45 degrees and an exact -45 degree vector at +45 degrees.
        """
        x = weighted[:, 0]
        y = weighted[:, 1]
        keep = x > np.abs(y)
        # [-90, -45] -> rotate +90 degrees, [45, 90] -> rotate -90 degrees
        rotate_ccw = ~keep & (y < 0)
        folded_x = np.where(keep, x, np.where(rotate_ccw, -y, y))
        folded_y = np.where(keep, y, np.where(rotate_ccw, x, -x))
        return np.column_stack([folded_x, folded_y])

    @staticmethod
    def normalize(summed: NDArray[np.float64]) -> Optional[Tuple[float, float]]:
        """Normalize a summed vector to unit length, None if it has zero length."""
        norm = math.hypot(float(summed[0]), float(summed[1]))
        if norm == 0.0 or not math.isfinite(norm):
            return None
        return (float(summed[0]) / norm, float(summed[1]) / norm)

    @staticmethod
    def residual(edge_vectors: NDArray[np.float64], base: Tuple[float, float]) -> float:
        """
        Squared error of the edges against the frame of base.

        Each edge is assumed to be either purely along or purely perpendicular
        to base, whichever fits better, and the squared length of the other
        component counts as error.

        Args:
            edge_vectors: Edge vectors, shape (n, 2).
            base: Unit base vector.

        Returns:
            float: Summed squared residual.
        """
        components = GeomMath.project_onto_base(edge_vectors, base)
        squared = components * components
        return float(np.minimum(squared[:, 0], squared[:, 1]).sum())

    @classmethod
    def estimate_vectors(cls, edge_vectors: NDArray[np.float64]) -> BaseDirection:
        """Estimate the base direction from raw edge vectors.

        Raises:
            DegenerateDirectionError: If both candidate sums have zero length.
        """
        edge_vectors = np.asarray(edge_vectors, dtype=np.float64).reshape(-1, 2)
        weighted = cls.weighted_vectors(edge_vectors)

        candidate_0_90 = cls.normalize(cls.fold_0_90(weighted).sum(axis=0))
        candidate_pm45 = cls.normalize(cls.fold_pm45(weighted).sum(axis=0))

        if candidate_0_90 is None and candidate_pm45 is None:
            raise DegenerateDirectionError("degenerate direction: edge vectors cancel out, no base vector")

        residual_0_90 = math.inf if candidate_0_90 is None else cls.residual(edge_vectors, candidate_0_90)
        residual_pm45 = math.inf if candidate_pm45 is None else cls.residual(edge_vectors, candidate_pm45)

        logger.debug(
            "Base candidates: [0,90) %s residual %s, [-45,45] %s residual %s",
            candidate_0_90,
            residual_0_90,
            candidate_pm45,
            residual_pm45,
        )

        # ties keep the [0,90) candidate
        if candidate_pm45 is not None and residual_0_90 > residual_pm45:
            return BaseDirection(
                candidate_pm45[0], candidate_pm45[1], FoldVariant.RANGE_PM45, residual_pm45, residual_0_90
            )
        return BaseDirection(
            candidate_0_90[0], candidate_0_90[1], FoldVariant.RANGE_0_90, residual_0_90, residual_pm45
        )

    @classmethod
    def estimate(cls, path: ClosedPath) -> BaseDirection:
        """Estimate the base direction of a closed path.

        Args:
            path: Closed path with at least the minimum number of nodes.

        Returns:
            BaseDirection: The chosen base vector.

        Raises:
            TooFewNodesError: If the path has too few nodes.
            NotClosedError: If the path is not closed.
            DegenerateDirectionError: If no base vector can be derived.
        """
        path.validate_closed()
        return cls.estimate_vectors(path.edge_vectors)
