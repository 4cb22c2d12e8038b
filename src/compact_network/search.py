from __future__ import annotations

from collections import deque
from dataclasses import dataclass

import numpy as np

from .compact_star import CompactStar

NOT_VISITED = -1


@dataclass(frozen=True)
class SearchResult:
    start: int
    predecessors: np.ndarray  # -1 for the start node and unreached nodes
    order: np.ndarray         # visit rank, -1 if unreached

    def visited(self) -> np.ndarray:
        """Nodes in visit order."""
        reached = np.flatnonzero(self.order >= 0)
        return reached[np.argsort(self.order[reached], kind="stable")]


def _search(network: CompactStar, start: int, fifo: bool) -> SearchResult:
    s = network.check_node(start)
    n = network.num_nodes
    pred = np.full(n, -1, dtype=np.int64)
    order = np.full(n, NOT_VISITED, dtype=np.int64)
    # next arc to inspect, per node
    cursor = network.point[:-1].copy()
    stop = network.point[1:]
    head = network.head

    order[s] = 0
    nxt = 0
    pending = deque([s])
    while pending:
        i = pending[0] if fifo else pending[-1]
        j = -1
        while cursor[i] < stop[i]:
            cand = int(head[cursor[i]])
            cursor[i] += 1
            if order[cand] == NOT_VISITED:
                j = cand
                break
        if j >= 0:
            nxt += 1
            order[j] = nxt
            pred[j] = i
            pending.append(j)
        elif fifo:
            pending.popleft()
        else:
            pending.pop()

    return SearchResult(start=s, predecessors=pred, order=order)


def breadth_first_search(network: CompactStar, start: int) -> SearchResult:
    """Breadth-first search from ``start`` (queue discipline)."""
    return _search(network, start, fifo=True)


def depth_first_search(network: CompactStar, start: int) -> SearchResult:
    """Depth-first search from ``start`` (stack discipline)."""
    return _search(network, start, fifo=False)
