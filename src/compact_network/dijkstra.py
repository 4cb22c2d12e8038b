from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional
import heapq
import logging
import operator

import numpy as np

from .compact_star import CompactStar
from .exceptions import NegativeCost, NodeOutOfRange, SourceOutOfRange

logger = logging.getLogger(__name__)

NO_PREDECESSOR = -1


@dataclass(frozen=True)
class ShortestPaths:
    """Labels produced by a single-source shortest-path run.

    ``distances[v]`` is ``inf`` and ``predecessors[v]`` is ``NO_PREDECESSOR``
    for every node not reachable from ``source``. ``settle_order`` lists the
    nodes in the order they were permanently labeled.
    """

    source: int
    distances: np.ndarray
    predecessors: np.ndarray
    settle_order: np.ndarray

    def _check_target(self, target) -> int:
        n = len(self.distances)
        try:
            t = operator.index(target)
        except TypeError:
            raise NodeOutOfRange(target, n) from None
        if t < 0 or t >= n:
            raise NodeOutOfRange(target, n)
        return t

    def is_reachable(self, target: int) -> bool:
        return bool(np.isfinite(self.distances[self._check_target(target)]))

    def path_to(self, target: int) -> Optional[List[int]]:
        """Node sequence ``source .. target`` or None if ``target`` is unreachable."""
        t = self._check_target(target)
        if not np.isfinite(self.distances[t]):
            return None
        path = [t]
        while path[-1] != self.source:
            path.append(int(self.predecessors[path[-1]]))
        path.reverse()
        return path


def _check_costs(network: CompactStar) -> None:
    if not network.has_negative_costs():
        return
    e = int(np.flatnonzero(network.costs < 0)[0])
    raise NegativeCost(int(network.tail[e]), int(network.head[e]), float(network.costs[e]))


def heap_dijkstra(network: CompactStar, source: int) -> ShortestPaths:
    """Label-setting Dijkstra with a binary heap, O((N + E) log N).

    Heap entries are ``(distance, node)`` so equal distances settle in node-id
    order. Stale entries are skipped on pop.
    """
    s = network.check_node(source, SourceOutOfRange)
    _check_costs(network)

    n = network.num_nodes
    point, head, costs = network.point, network.head, network.costs
    dist = np.full(n, np.inf, dtype=np.float64)
    pred = np.full(n, NO_PREDECESSOR, dtype=np.int64)
    settled = np.zeros(n, dtype=bool)
    order = []

    dist[s] = 0.0
    heap = [(0.0, s)]
    while heap:
        d, i = heapq.heappop(heap)
        if settled[i]:
            continue
        settled[i] = True
        order.append(i)

        for e in range(point[i], point[i + 1]):
            j = int(head[e])
            cand = d + float(costs[e])
            if cand < dist[j]:
                dist[j] = cand
                pred[j] = i
                heapq.heappush(heap, (cand, j))

    return ShortestPaths(s, dist, pred, np.asarray(order, dtype=np.int64))


def scan_dijkstra(network: CompactStar, source: int) -> ShortestPaths:
    """Dijkstra selecting the next node by scanning all temporary labels, O(N^2).

    Produces the same labels and settle order as :func:`heap_dijkstra`.
    """
    s = network.check_node(source, SourceOutOfRange)
    _check_costs(network)

    n = network.num_nodes
    point, head, costs = network.point, network.head, network.costs
    dist = np.full(n, np.inf, dtype=np.float64)
    pred = np.full(n, NO_PREDECESSOR, dtype=np.int64)
    # settled nodes carry an infinite key so argmin skips them
    key = np.full(n, np.inf, dtype=np.float64)
    order = []

    dist[s] = 0.0
    key[s] = 0.0
    while len(order) < n:
        i = int(np.argmin(key))  # first minimum, i.e. lowest node id on ties
        if not np.isfinite(key[i]):
            break
        key[i] = np.inf
        order.append(i)

        d = dist[i]
        for e in range(point[i], point[i + 1]):
            j = int(head[e])
            cand = d + float(costs[e])
            if cand < dist[j]:
                dist[j] = cand
                pred[j] = i
                key[j] = cand

    return ShortestPaths(s, dist, pred, np.asarray(order, dtype=np.int64))


def shortest_paths(network: CompactStar, source: int, *, use_heap: bool = True) -> ShortestPaths:
    """Single-source shortest paths over non-negative arc costs.

    Raises
    ------
    SourceOutOfRange
        ``source`` is not a node id.
    NegativeCost
        Some arc of the network has a negative cost. All arcs are checked
        before the search starts, reachable or not.
    """
    result = heap_dijkstra(network, source) if use_heap else scan_dijkstra(network, source)
    logger.debug(
        "Dijkstra from %d (%s): settled %d of %d nodes",
        result.source, "heap" if use_heap else "scan",
        len(result.settle_order), network.num_nodes,
    )
    return result


dijkstra = shortest_paths
