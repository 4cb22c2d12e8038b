"""Defaults shared by the loader and the command-line front end."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

# Edge lines look like "<from> <to> [<cost> [<capacity>]]", separated by blanks.
DEFAULT_PATTERN = (
    r"^\s*(?P<from>\S+)\s+(?P<to>\S+)"
    r"(?:\s+(?P<cost>[-+0-9.eE]+)(?:\s+(?P<cap>[-+0-9.eE]+))?)?\s*$"
)
DEFAULT_SKIP = 0

DEFAULT_BETA = 0.85
DEFAULT_EPS = 1e-8
DEFAULT_MAX_ITER = 100
DEFAULT_START_ID = 0

# Rows printed for a shortest-path table unless --limit says otherwise.
DEFAULT_REPORT_LIMIT = 100

ALGORITHMS = ("dijkstra", "pagerank", "bfs", "dfs")


@dataclass
class RunConfig:
    algorithm: str
    filename: str
    pattern: str = DEFAULT_PATTERN
    skip: int = DEFAULT_SKIP
    undirected: bool = False

    # dijkstra / bfs / dfs
    use_heap: bool = True
    start_node: Optional[str] = None

    # pagerank
    beta: float = DEFAULT_BETA
    eps: float = DEFAULT_EPS
    max_iter: int = DEFAULT_MAX_ITER
    target_node: Optional[str] = None
    top: int = 10
    progress: bool = False

    # reporting
    limit: Optional[int] = DEFAULT_REPORT_LIMIT
    output: Optional[str] = None
    verbose: bool = False

    @classmethod
    def from_args(cls, args) -> "RunConfig":
        return cls(
            algorithm=args.algorithm,
            filename=args.filename,
            pattern=args.pattern,
            skip=args.skip,
            undirected=args.undirected,
            use_heap=not args.no_heap,
            start_node=args.start_node,
            beta=args.beta,
            eps=args.eps,
            max_iter=args.max_iter,
            target_node=args.target_node,
            top=args.top,
            progress=args.progress,
            limit=args.limit if args.limit > 0 else None,
            output=args.output,
            verbose=args.verbose,
        )
