"""Compact forward-star storage for static directed networks.

All arcs live in one set of parallel arrays (``tail``, ``head``, ``cost``,
``capacity``) grouped by tail node. The arcs leaving node ``v`` occupy the
index range ``[point[v], point[v+1])``. A reverse star (``rpoint``/``trace``)
gives the same access to incoming arcs without copying arc data.

See Ahuja, Magnanti, Orlin: "Network Flows", section 2.2.
"""

from __future__ import annotations

import logging
import math
import operator
from collections.abc import Sequence as SequenceABC
from typing import Iterable, Iterator, NamedTuple, Optional, Sequence, Tuple, Union

import numpy as np

from .exceptions import EmptyInput, InvalidArc, InvalidNodeCount, NodeOutOfRange

logger = logging.getLogger(__name__)

ArcTuple = Union[
    Tuple[int, int],
    Tuple[int, int, float],
    Tuple[int, int, float, float],
]


class Arc(NamedTuple):
    to: int
    cost: float
    capacity: float


class InArc(NamedTuple):
    tail: int
    cost: float
    capacity: float


def _readonly(a: np.ndarray) -> np.ndarray:
    a.setflags(write=False)
    return a


class _ArcRange(SequenceABC):
    """Lazy view over a contiguous slice of arc indices.

    Iterating it twice reads the store twice; nothing is materialised.
    """

    __slots__ = ("_star", "_index", "_incoming")

    def __init__(self, star: "CompactStar", index: np.ndarray, incoming: bool = False):
        self._star = star
        self._index = index
        self._incoming = incoming

    def __len__(self) -> int:
        return len(self._index)

    def __getitem__(self, k):
        if isinstance(k, slice):
            return _ArcRange(self._star, self._index[k], self._incoming)
        e = int(self._index[k])
        s = self._star
        if self._incoming:
            return InArc(int(s.tail[e]), float(s.costs[e]), float(s.capacities[e]))
        return Arc(int(s.head[e]), float(s.costs[e]), float(s.capacities[e]))

    def __iter__(self) -> Iterator:
        for k in range(len(self._index)):
            yield self[k]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self)!r})"


class CompactStar:
    """Immutable compact forward-star network.

    Build instances with :func:`compact_star_from_arcs`; the constructor
    trusts its arguments.
    """

    __slots__ = (
        "_point", "_rpoint", "_tail", "_head", "_trace",
        "_costs", "_capacities", "_cost_sum", "_num_nodes",
    )

    def __init__(
        self,
        point: np.ndarray,
        tail: np.ndarray,
        head: np.ndarray,
        costs: np.ndarray,
        capacities: np.ndarray,
        rpoint: np.ndarray,
        trace: np.ndarray,
    ):
        self._point = _readonly(point)
        self._tail = _readonly(tail)
        self._head = _readonly(head)
        self._costs = _readonly(costs)
        self._capacities = _readonly(capacities)
        self._rpoint = _readonly(rpoint)
        self._trace = _readonly(trace)
        self._cost_sum = float(costs.sum()) if len(costs) else 0.0
        self._num_nodes = len(point) - 1

    # -- read-only arrays ---------------------------------------------------

    @property
    def point(self) -> np.ndarray:
        return self._point

    @property
    def rpoint(self) -> np.ndarray:
        return self._rpoint

    @property
    def tail(self) -> np.ndarray:
        return self._tail

    @property
    def head(self) -> np.ndarray:
        return self._head

    @property
    def trace(self) -> np.ndarray:
        return self._trace

    @property
    def costs(self) -> np.ndarray:
        return self._costs

    @property
    def capacities(self) -> np.ndarray:
        return self._capacities

    @property
    def cost_sum(self) -> float:
        return self._cost_sum

    # -- size ---------------------------------------------------------------

    @property
    def num_nodes(self) -> int:
        return self._num_nodes

    @property
    def num_arcs(self) -> int:
        return len(self.head)

    def __len__(self) -> int:
        return self._num_nodes

    def __repr__(self) -> str:
        return f"CompactStar(num_nodes={self.num_nodes}, num_arcs={self.num_arcs})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, CompactStar):
            return NotImplemented
        return all(
            np.array_equal(getattr(self, name), getattr(other, name))
            for name in ("point", "rpoint", "tail", "head", "trace", "costs", "capacities")
        )

    __hash__ = None

    # -- adjacency ----------------------------------------------------------

    def check_node(self, node, error=NodeOutOfRange) -> int:
        """Return ``node`` as a plain int or raise ``error`` if it is not a node id."""
        try:
            i = operator.index(node)
        except TypeError:
            raise error(node, self._num_nodes) from None
        if i < 0 or i >= self._num_nodes:
            raise error(node, self._num_nodes)
        return i

    def arc_range(self, node: int) -> Tuple[int, int]:
        i = self.check_node(node)
        return int(self.point[i]), int(self.point[i + 1])

    def outgoing_arcs(self, node: int) -> Sequence[Arc]:
        """Arcs ``(to, cost, capacity)`` leaving ``node``, in insertion order."""
        lo, hi = self.arc_range(node)
        return _ArcRange(self, np.arange(lo, hi))

    def incoming_arcs(self, node: int) -> Sequence[InArc]:
        """Arcs ``(tail, cost, capacity)`` entering ``node``, via the reverse star."""
        i = self.check_node(node)
        return _ArcRange(self, self.trace[self.rpoint[i]:self.rpoint[i + 1]], incoming=True)

    def adjacent(self, node: int) -> np.ndarray:
        lo, hi = self.arc_range(node)
        return self.head[lo:hi]

    def predecessors(self, node: int) -> np.ndarray:
        i = self.check_node(node)
        return self.tail[self.trace[self.rpoint[i]:self.rpoint[i + 1]]]

    def out_degree(self, node: Optional[int] = None):
        if node is None:
            return np.diff(self.point)
        lo, hi = self.arc_range(node)
        return hi - lo

    def in_degree(self, node: Optional[int] = None):
        if node is None:
            return np.diff(self.rpoint)
        i = self.check_node(node)
        return int(self.rpoint[i + 1] - self.rpoint[i])

    def arcs(self) -> Iterator[Tuple[int, int, float, float]]:
        for e in range(self.num_arcs):
            yield (int(self.tail[e]), int(self.head[e]),
                   float(self.costs[e]), float(self.capacities[e]))

    # -- lookup by (from, to) -----------------------------------------------

    def find_arc(self, i: int, j: int) -> Optional[int]:
        """Index of the first arc ``i -> j`` or None."""
        lo, hi = self.arc_range(i)
        hits = np.flatnonzero(self.head[lo:hi] == j)
        if len(hits) == 0:
            return None
        return lo + int(hits[0])

    def cost(self, i: int, j: int) -> Optional[float]:
        e = self.find_arc(i, j)
        return None if e is None else float(self.costs[e])

    def capacity(self, i: int, j: int) -> Optional[float]:
        e = self.find_arc(i, j)
        return None if e is None else float(self.capacities[e])

    def has_negative_costs(self) -> bool:
        return bool(self.num_arcs) and bool((self.costs < 0).any())


def _as_node(value, num_nodes: int, position: int) -> int:
    try:
        i = operator.index(value)
    except TypeError:
        raise InvalidArc(f"Arc #{position}: node id {value!r} is not an integer.") from None
    if i < 0 or i >= num_nodes:
        raise InvalidArc(f"Arc #{position}: node {i} is outside [0, {num_nodes}).")
    return i


def _as_number(value, what: str, position: int) -> float:
    try:
        x = float(value)
    except (TypeError, ValueError):
        raise InvalidArc(f"Arc #{position}: {what} {value!r} is not a number.") from None
    if not math.isfinite(x):
        raise InvalidArc(f"Arc #{position}: {what} {value!r} is not finite.")
    return x


def compact_star_from_arcs(
    num_nodes: int,
    arcs: Iterable[ArcTuple],
    *,
    require_arcs: bool = False,
) -> CompactStar:
    """Build a :class:`CompactStar` from ``(from, to[, cost[, capacity]])`` tuples.

    Parameters
    ----------
    num_nodes:
        Number of nodes. Ids must be ``0 .. num_nodes - 1`` without gaps.
    arcs:
        Arc tuples in any order. They are bucketed by tail node with a stable
        sort, so arcs of one node keep their relative input order.
    require_arcs:
        If True, an empty arc sequence raises :class:`EmptyInput`.

    Returns
    -------
    CompactStar
    """
    try:
        n = operator.index(num_nodes)
    except TypeError:
        raise InvalidNodeCount(f"Node count {num_nodes!r} is not an integer.") from None
    if n < 0:
        raise InvalidNodeCount(f"Node count must be non-negative, got {n}.")

    tails, heads, costs, caps = [], [], [], []
    for k, arc in enumerate(arcs):
        try:
            size = len(arc)
        except TypeError:
            raise InvalidArc(f"Arc #{k}: {arc!r} is not a tuple.") from None
        if size not in (2, 3, 4):
            raise InvalidArc(f"Arc #{k}: expected 2 to 4 fields, got {size}.")
        tails.append(_as_node(arc[0], n, k))
        heads.append(_as_node(arc[1], n, k))
        costs.append(_as_number(arc[2], "cost", k) if size > 2 else 0.0)
        cap = _as_number(arc[3], "capacity", k) if size > 3 else 0.0
        if cap < 0:
            raise InvalidArc(f"Arc #{k}: capacity {cap} is negative.")
        caps.append(cap)

    if require_arcs and not tails:
        raise EmptyInput("No arcs given.")

    tail = np.asarray(tails, dtype=np.int64)
    head = np.asarray(heads, dtype=np.int64)
    cost = np.asarray(costs, dtype=np.float64)
    cap = np.asarray(caps, dtype=np.float64)

    # every distance is a sum of arc costs, so their total must be representable
    with np.errstate(over="ignore"):
        total = float(np.abs(cost).sum())
    if not math.isfinite(total):
        raise InvalidArc("Sum of arc costs overflows the float range.")

    # forward star: stable counting sort on the tail node
    order = np.argsort(tail, kind="stable")
    tail, head, cost, cap = tail[order], head[order], cost[order], cap[order]
    point = np.zeros(n + 1, dtype=np.int64)
    np.cumsum(np.bincount(tail, minlength=n), out=point[1:])

    # reverse star: arc indices grouped by head, forward-star order inside a group
    trace = np.argsort(head, kind="stable").astype(np.int64)
    rpoint = np.zeros(n + 1, dtype=np.int64)
    np.cumsum(np.bincount(head, minlength=n), out=rpoint[1:])

    star = CompactStar(point, tail, head, cost, cap, rpoint, trace)
    logger.debug("Built %r", star)
    return star
