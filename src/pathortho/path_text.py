"""Textual representation of paths: "x y, x y, ..." """

from __future__ import annotations

import logging
from typing import List

from pathortho.common import MAX_ACCURACY, Point2D
from pathortho.errors import PathFormatError
from pathortho.path import ClosedPath

logger = logging.getLogger(__name__)

NODE_SEPARATOR = ","


###############################################################################
# PathTextParser
###############################################################################


class PathTextParser:
    """Parses paths given as text.

    Format: x y (, x y)*
        - whitespace delimits coordinates, a comma delimits nodes
        - sequential delimiters count as one
        - nodes with fewer than two coordinates are ignored
        - third and further coordinates of a node are ignored
    """

    @staticmethod
    def parse_number(token: str, position: int) -> float:
        """Convert one coordinate token into a float."""
        try:
            return float(token)
        except ValueError as e:
            raise PathFormatError(f"invalid coordinate '{token}' in node {position}") from e

    @classmethod
    def parse_points(cls, text: str) -> List[Point2D]:
        """Parse text into a list of (x, y) tuples."""
        points: List[Point2D] = []
        for position, chunk in enumerate(text.split(NODE_SEPARATOR)):
            tokens = chunk.split()
            if len(tokens) < 2:
                if tokens:
                    logger.debug("Ignoring node %d with a single coordinate '%s'", position, tokens[0])
                continue
            if len(tokens) > 2:
                logger.debug("Ignoring %d extra coordinates of node %d", len(tokens) - 2, position)
            points.append((cls.parse_number(tokens[0], position), cls.parse_number(tokens[1], position)))
        return points

    @classmethod
    def parse(cls, text: str) -> ClosedPath:
        """
        Parse text into a path.

        The path is returned as given, i.e. not checked for closure or node count.

        Args:
            text (str): path data, e.g. "6218 8805, 6295 8675, 6501 8798, 6425 8927, 6218 8805"

        Returns:
            ClosedPath: the parsed path

        Raises:
            PathFormatError: If a coordinate is not a number.
        """
        return ClosedPath(cls.parse_points(text))


###############################################################################
# PathTextFormatter
###############################################################################


class PathTextFormatter:
    """Formats paths in the same text format the parser reads."""

    @staticmethod
    def clamp_accuracy(accuracy: int) -> int:
        """Limit accuracy to the range 0..MAX_ACCURACY."""
        return min(max(int(accuracy), 0), MAX_ACCURACY)

    @classmethod
    def format(cls, path: ClosedPath, accuracy: int = 0) -> str:
        """
        Format path as text with accuracy decimals per coordinate.

        Paths with fewer than two nodes have nothing to show and give an empty string.
        """
        if path.num_nodes < 2:
            return ""
        decimals = cls.clamp_accuracy(accuracy)
        return ", ".join(f"{x:.{decimals}f} {y:.{decimals}f}" for x, y in path.points)
