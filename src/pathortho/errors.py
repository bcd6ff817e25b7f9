"""Exceptions raised while orthogonalizing paths."""

from __future__ import annotations


class OrthogonalizeError(ValueError):
    """Base class for all input-validation failures of the orthogonalization."""


class TooFewNodesError(OrthogonalizeError):
    """Closed path has fewer nodes than required and would just collapse."""

    def __init__(self, num_nodes: int, min_nodes: int):
        super().__init__(f"closed path with {num_nodes} nodes (less than {min_nodes}) will just collapse")
        self.num_nodes = num_nodes
        self.min_nodes = min_nodes


class NotClosedError(OrthogonalizeError):
    """First and last points of the path differ."""

    def __init__(self, first, last):
        super().__init__(f"path must be closed (first point {tuple(first)} != last point {tuple(last)})")
        self.first = tuple(first)
        self.last = tuple(last)


class DegenerateDirectionError(OrthogonalizeError):
    """No usable base direction or direction groups could be derived from the path."""


class CollapseLimitError(OrthogonalizeError):
    """The short-edge collapse loop did not settle within the allowed iterations."""

    def __init__(self, max_iterations: int):
        super().__init__(f"collapse of short edges did not settle within {max_iterations} iterations")
        self.max_iterations = max_iterations


class PathFormatError(ValueError):
    """Textual path data could not be parsed."""
