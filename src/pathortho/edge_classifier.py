"""Classification of path edges relative to the base vector."""

from __future__ import annotations

from typing import Tuple

import numpy as np
from numpy.typing import NDArray

from pathortho.common import LABEL_DTYPE, EdgeDirection
from pathortho.geom import GeomMath
from pathortho.path import ClosedPath


class EdgeClassifier:
    """Labels each edge as running along or perpendicular to the base vector."""

    @staticmethod
    def classify_vectors(edge_vectors: NDArray[np.float64], base: Tuple[float, float]) -> NDArray[np.int8]:
        """
        Label edge vectors by their dominant component in the base frame.

        An edge is ALONG only if its component along base is strictly larger than
        its perpendicular component; equal components give PERPENDICULAR.

        Args:
            edge_vectors: Edge vectors, shape (n, 2).
            base: Unit base vector (xbase, ybase).

        Returns:
            NDArray[np.int8]: one EdgeDirection value per edge.
        """
        components = np.abs(GeomMath.project_onto_base(edge_vectors, base))
        along = components[:, 0] > components[:, 1]
        return np.where(along, EdgeDirection.ALONG, EdgeDirection.PERPENDICULAR).astype(LABEL_DTYPE)

    @classmethod
    def classify(cls, path: ClosedPath, base: Tuple[float, float]) -> NDArray[np.int8]:
        """Label all edges of path, see classify_vectors."""
        return cls.classify_vectors(path.edge_vectors, base)
