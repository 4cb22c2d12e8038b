from __future__ import annotations

from typing import List, Tuple
import numpy as np

from .compact_star import CompactStar


def scc_kosaraju(network: CompactStar) -> Tuple[np.ndarray, List[List[int]]]:
    """Kosaraju's two-pass component labelling on a compact star.

    Pass one runs a depth-first walk that advances an arc cursor through each
    node's ``[point[u], point[u+1])`` range and records finishing times. Pass
    two visits nodes by decreasing finishing time and grows each component
    over the incoming arcs listed by the reverse star.

    Returns ``(comp_id, comps)``: the component number of every node and,
    per component, its nodes in ascending id order.
    """
    n = network.num_nodes
    point, head = network.point, network.head
    rpoint, trace, tail = network.rpoint, network.trace, network.tail

    visited = np.zeros(n, dtype=bool)
    order: List[int] = []

    # arc cursor per stack frame; a node finishes when its range is exhausted
    for start in range(n):
        if visited[start]:
            continue
        stack = [(start, int(point[start]))]
        visited[start] = True
        while stack:
            u, e = stack[-1]
            if e < point[u + 1]:
                v = int(head[e])
                stack[-1] = (u, e + 1)
                if not visited[v]:
                    visited[v] = True
                    stack.append((v, int(point[v])))
            else:
                stack.pop()
                order.append(u)

    # label components by pulling tails of incoming arcs
    comp_id = np.full(n, -1, dtype=np.int64)
    comps: List[List[int]] = []

    for start in reversed(order):
        if comp_id[start] != -1:
            continue
        cid = len(comps)
        comps.append([])
        stack = [start]
        comp_id[start] = cid
        while stack:
            u = stack.pop()
            comps[cid].append(u)
            for e in trace[rpoint[u]:rpoint[u + 1]]:
                v = int(tail[e])
                if comp_id[v] == -1:
                    comp_id[v] = cid
                    stack.append(v)
        comps[cid].sort()

    return comp_id, comps


def find_spider_traps(network: CompactStar) -> List[List[int]]:
    """Closed strongly connected components that contain at least one arc.

    A spider trap has no arc leaving it, so without teleportation it absorbs
    all rank mass. Lone dead-end nodes are not reported.
    """
    comp_id, comps = scc_kosaraju(network)
    m = len(comps)
    if m == 0:
        return []
    src_c = comp_id[network.tail]
    dst_c = comp_id[network.head]
    leaves = np.zeros(m, dtype=bool)
    leaves[src_c[src_c != dst_c]] = True
    has_internal = np.zeros(m, dtype=bool)
    has_internal[src_c[src_c == dst_c]] = True

    traps = [comps[c] for c in range(m) if has_internal[c] and not leaves[c]]
    traps.sort(key=lambda c: c[0])
    return traps
