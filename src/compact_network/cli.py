from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import pandas as pd

from . import __version__
from .compact_star import CompactStar
from .config import (
    ALGORITHMS,
    DEFAULT_BETA,
    DEFAULT_EPS,
    DEFAULT_MAX_ITER,
    DEFAULT_PATTERN,
    DEFAULT_REPORT_LIMIT,
    DEFAULT_SKIP,
    DEFAULT_START_ID,
    RunConfig,
)
from .dijkstra import shortest_paths
from .exceptions import NetworkError
from .loader import EdgeList, load_network
from .pagerank import pagerank
from .report import format_rank, pagerank_frame, search_frame, shortest_paths_frame
from .scc import find_spider_traps
from .search import breadth_first_search, depth_first_search

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="compact-network",
        description="Run shortest-path, PageRank or graph search on an arc-list file.",
    )
    ap.add_argument("algorithm", choices=ALGORITHMS, help="Algorithm to run.")
    ap.add_argument("filename", help="Arc-list text file.")
    ap.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")

    ap.add_argument("--pattern", default=DEFAULT_PATTERN,
                    help="Regular expression for body lines. Must define (?P<from>...) and (?P<to>...); "
                         "(?P<cost>...) and (?P<cap>...) are optional.")
    ap.add_argument("--skip", type=int, default=DEFAULT_SKIP, help="Number of header lines to skip.")
    ap.add_argument("--undirected", action="store_true",
                    help="Treat the graph as undirected: two arcs are added per line.")

    ap.add_argument("--no-heap", action="store_true",
                    help="Use the O(n^2) label scan instead of a binary heap for Dijkstra.")
    ap.add_argument("--start-node", default=None,
                    help=f"Start node name for dijkstra/bfs/dfs (default: node id {DEFAULT_START_ID}).")

    ap.add_argument("--beta", type=float, default=DEFAULT_BETA,
                    help="PageRank link-following probability in (0, 1].")
    ap.add_argument("--eps", type=float, default=DEFAULT_EPS, help="PageRank L1 convergence tolerance.")
    ap.add_argument("--max-iter", type=int, default=DEFAULT_MAX_ITER, help="Max power iterations.")
    ap.add_argument("--target-node", default=None, help="Print the rank of this node only.")
    ap.add_argument("--top", type=int, default=10, help="Number of top-ranked nodes to print.")
    ap.add_argument("--progress", action="store_true", help="Show a progress bar for PageRank.")

    ap.add_argument("--limit", type=int, default=DEFAULT_REPORT_LIMIT,
                    help="Max rows of shortest-path output (0 = all).")
    ap.add_argument("--output", default=None, help="Also write the full result table to this CSV file.")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    return ap


def _start_id(cfg: RunConfig, edges: EdgeList) -> int:
    if cfg.start_node is None:
        return DEFAULT_START_ID
    return edges.node_id(cfg.start_node)


def _export(df: pd.DataFrame, cfg: RunConfig) -> None:
    if cfg.output:
        out = Path(cfg.output)
        out.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(out, index=False)
        print("Saved:", out)


def run_dijkstra(network: CompactStar, edges: EdgeList, cfg: RunConfig) -> None:
    result = shortest_paths(network, _start_id(cfg, edges), use_heap=cfg.use_heap)
    df = shortest_paths_frame(result, edges.id_to_node)
    print(df.head(cfg.limit).to_string(index=False) if cfg.limit else df.to_string(index=False))
    _export(df, cfg)


def run_search(network: CompactStar, edges: EdgeList, cfg: RunConfig) -> None:
    search = breadth_first_search if cfg.algorithm == "bfs" else depth_first_search
    df = search_frame(search(network, _start_id(cfg, edges)), edges.id_to_node)
    print(df.to_string(index=False))
    _export(df, cfg)


def run_pagerank(network: CompactStar, edges: EdgeList, cfg: RunConfig) -> None:
    traps = find_spider_traps(network)
    if traps:
        logger.info("Network has %d spider trap(s); largest has %d nodes",
                    len(traps), max(len(t) for t in traps))

    result = pagerank(network, cfg.beta, cfg.eps, cfg.max_iter, progress=cfg.progress)
    if result.did_not_converge:
        print(f"Warning: PageRank did not converge after {result.iterations} iterations "
              f"(residual {result.residual:e}).", file=sys.stderr)

    df = pagerank_frame(result, edges.id_to_node)
    if cfg.target_node is not None:
        i = edges.node_id(cfg.target_node)
        print(format_rank(cfg.target_node, float(result.ranks[i])))
    else:
        print(df.head(cfg.top).to_string(index=False))
    _export(df, cfg)


RUNNERS = {
    "dijkstra": run_dijkstra,
    "pagerank": run_pagerank,
    "bfs": run_search,
    "dfs": run_search,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    cfg = RunConfig.from_args(args)
    logging.basicConfig(
        level=logging.DEBUG if cfg.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        network, edges = load_network(cfg.filename, cfg.pattern, skip=cfg.skip, undirected=cfg.undirected)
        RUNNERS[cfg.algorithm](network, edges, cfg)
    except NetworkError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
