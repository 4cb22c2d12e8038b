"""Exceptions raised by the network store, the solvers and the loader."""

from __future__ import annotations

from typing import Optional


class NetworkError(Exception):
    """Base class for every error raised by this package."""


class GraphStructureError(NetworkError, ValueError):
    """Malformed graph input detected while building the store."""


class InvalidArc(GraphStructureError):
    pass


class InvalidNodeCount(GraphStructureError):
    pass


class EmptyInput(GraphStructureError):
    pass


class NodeOutOfRange(NetworkError, IndexError):
    def __init__(self, node, num_nodes: int):
        super().__init__(f"Node {node} is outside [0, {num_nodes}).")
        self.node = node
        self.num_nodes = num_nodes


class SourceOutOfRange(NodeOutOfRange):
    pass


class InvalidParameter(NetworkError, ValueError):
    pass


class InvalidTeleportProbability(InvalidParameter):
    pass


class NegativeCost(NetworkError, ValueError):
    def __init__(self, tail: int, head: int, cost: float):
        super().__init__(f"Arc {tail}->{head} has negative cost {cost}.")
        self.tail = tail
        self.head = head
        self.cost = cost


class RankMassInvariantViolated(NetworkError, RuntimeError):
    """Sum of the rank vector drifted away from 1.0."""

    def __init__(self, mass: float, iteration: int, tolerance: float):
        super().__init__(
            f"Rank mass {mass!r} left [1 - {tolerance:g}, 1 + {tolerance:g}] "
            f"after iteration {iteration}."
        )
        self.mass = mass
        self.iteration = iteration
        self.tolerance = tolerance


class InputFormatError(NetworkError, ValueError):
    def __init__(self, message: str, line_number: Optional[int] = None):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number
