"""Central module containing constants and definitions for path orthogonalization."""

from __future__ import annotations

from enum import IntEnum
from typing import Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

###############################################################################
# Types
###############################################################################


Point2D = Tuple[float, float]

PointsLike = Union[  # Type-Definition for anything that can be turned into an (n, 2) point array
    Sequence[Tuple[float, float]],
    Sequence[Sequence[float]],
    NDArray[np.float64],
]


###############################################################################
# Enums and Consts
###############################################################################


class EdgeDirection(IntEnum):
    """Classification of an edge relative to the base vector.

    The integer values are stored in numpy label arrays (dtype int8).
    """

    ALONG = 0
    PERPENDICULAR = 1


LABEL_DTYPE = np.int8  # dtype of edge label arrays

MIN_NODES = 5  # closed path: 4 distinct vertices plus closing duplicate

MAX_ACCURACY = 20  # decimals accepted for formatted output
