"""Network algorithms on a compact forward-star graph.

This package provides:
- an immutable compact forward-star store with a reverse star,
- single-source shortest paths (Dijkstra, heap and label-scan variants),
- PageRank by power iteration with dead-end redistribution,
- breadth-first / depth-first search and SCC-based spider-trap detection,
- a regex arc-list loader, pandas reports and a command-line front end.
"""

__version__ = "0.2.0"

from .exceptions import (
    NetworkError,
    GraphStructureError,
    InvalidArc,
    InvalidNodeCount,
    EmptyInput,
    NodeOutOfRange,
    SourceOutOfRange,
    InvalidParameter,
    InvalidTeleportProbability,
    NegativeCost,
    RankMassInvariantViolated,
    InputFormatError,
)
from .compact_star import Arc, InArc, CompactStar, compact_star_from_arcs
from .dijkstra import NO_PREDECESSOR, ShortestPaths, dijkstra, heap_dijkstra, scan_dijkstra, shortest_paths
from .pagerank import MASS_TOLERANCE, PageRankResult, pagerank
from .search import SearchResult, breadth_first_search, depth_first_search
from .scc import scc_kosaraju, find_spider_traps
from .loader import EdgeList, edges_from_file, edges_from_lines, load_network

__all__ = [
    "CompactStar",
    "Arc",
    "InArc",
    "compact_star_from_arcs",
    "ShortestPaths",
    "NO_PREDECESSOR",
    "shortest_paths",
    "dijkstra",
    "heap_dijkstra",
    "scan_dijkstra",
    "PageRankResult",
    "MASS_TOLERANCE",
    "pagerank",
    "SearchResult",
    "breadth_first_search",
    "depth_first_search",
    "scc_kosaraju",
    "find_spider_traps",
    "EdgeList",
    "edges_from_file",
    "edges_from_lines",
    "load_network",
    "NetworkError",
    "GraphStructureError",
    "InvalidArc",
    "InvalidNodeCount",
    "EmptyInput",
    "NodeOutOfRange",
    "SourceOutOfRange",
    "InvalidParameter",
    "InvalidTeleportProbability",
    "NegativeCost",
    "RankMassInvariantViolated",
    "InputFormatError",
]
