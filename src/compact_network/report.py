"""Tabular views of solver results."""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np
import pandas as pd

from .dijkstra import NO_PREDECESSOR, ShortestPaths
from .pagerank import PageRankResult
from .search import SearchResult

MISSING_NODE = "NONE"


def _names(n: int, id_to_node: Optional[Sequence[str]]) -> np.ndarray:
    if id_to_node is None:
        return np.array([str(i) for i in range(n)], dtype=object)
    return np.asarray(id_to_node, dtype=object)


def _pred_names(pred: np.ndarray, names: np.ndarray) -> np.ndarray:
    out = np.full(len(pred), MISSING_NODE, dtype=object)
    has = pred != NO_PREDECESSOR
    out[has] = names[pred[has]]
    return out


def shortest_paths_frame(
    result: ShortestPaths,
    id_to_node: Optional[Sequence[str]] = None,
    limit: Optional[int] = None,
) -> pd.DataFrame:
    """One row per node: predecessor, node, cumulative cost (inf if unreachable)."""
    names = _names(len(result.distances), id_to_node)
    df = pd.DataFrame({
        "from": _pred_names(result.predecessors, names),
        "to": names,
        "cost": result.distances,
    })
    return df.head(limit) if limit is not None else df


def search_frame(result: SearchResult, id_to_node: Optional[Sequence[str]] = None) -> pd.DataFrame:
    """Visited nodes in visit order with their search-tree predecessor."""
    names = _names(len(result.order), id_to_node)
    visited = result.visited()
    return pd.DataFrame({
        "order": result.order[visited],
        "from": _pred_names(result.predecessors[visited], names),
        "to": names[visited],
    })


def pagerank_frame(result: PageRankResult, id_to_node: Optional[Sequence[str]] = None) -> pd.DataFrame:
    """Ranks sorted descending; ties keep node-id order."""
    n = len(result.ranks)
    names = _names(n, id_to_node)
    order = np.lexsort((np.arange(n), -result.ranks))
    return pd.DataFrame({
        "node": names[order],
        "rank": result.ranks[order],
    }).reset_index(drop=True)


def format_rank(name: str, value: float) -> str:
    return f"Rank of node {name}: {value} ({value:e})"
