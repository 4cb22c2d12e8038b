"""Read arc lists from text files.

Every body line must match a regular expression with the named groups
``from`` and ``to`` and, optionally, ``cost`` and ``cap``. Node names are
mapped to dense ids in the order they are first seen.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Pattern, Tuple, Union
import logging
import re

from .compact_star import CompactStar, compact_star_from_arcs
from .config import DEFAULT_PATTERN, DEFAULT_SKIP
from .exceptions import InputFormatError

logger = logging.getLogger(__name__)

Edge = Tuple[int, int, float, float]


@dataclass
class EdgeList:
    arcs: List[Edge] = field(default_factory=list)
    node_to_id: Dict[str, int] = field(default_factory=dict)

    @property
    def num_nodes(self) -> int:
        return len(self.node_to_id)

    @property
    def id_to_node(self) -> List[str]:
        names = [""] * len(self.node_to_id)
        for name, i in self.node_to_id.items():
            names[i] = name
        return names

    def node_id(self, name: str) -> int:
        try:
            return self.node_to_id[name]
        except KeyError:
            raise InputFormatError(f"Unknown node {name!r}.") from None

    def _intern(self, name: str) -> int:
        i = self.node_to_id.get(name)
        if i is None:
            i = len(self.node_to_id)
            self.node_to_id[name] = i
        return i


def compile_pattern(pattern: Union[str, Pattern]) -> Pattern:
    if isinstance(pattern, re.Pattern):
        regex = pattern
    else:
        try:
            regex = re.compile(pattern)
        except re.error as exc:
            raise InputFormatError(f"Couldn't compile pattern {pattern!r}: {exc}") from exc
    missing = {"from", "to"} - set(regex.groupindex)
    if missing:
        raise InputFormatError(f"Pattern lacks named group(s): {', '.join(sorted(missing))}.")
    return regex


def _number(text: Optional[str]) -> float:
    # absent or unparseable numbers count as 0.0
    if text is None:
        return 0.0
    try:
        return float(text)
    except ValueError:
        return 0.0


def parse_line(line: str, regex: Pattern, line_number: Optional[int] = None) -> Tuple[str, str, float, float]:
    """Split one body line into ``(from_name, to_name, cost, capacity)``."""
    m = regex.search(line)
    if m is None:
        raise InputFormatError(f"{line!r} does not match the pattern.", line_number)
    groups = m.groupdict()
    src, dst = groups.get("from"), groups.get("to")
    if not src or not dst:
        raise InputFormatError(f"{line!r} has no from/to node.", line_number)
    return src, dst, _number(groups.get("cost")), _number(groups.get("cap"))


def edges_from_lines(
    lines: Iterable[str],
    pattern: Union[str, Pattern] = DEFAULT_PATTERN,
    *,
    skip: int = DEFAULT_SKIP,
    undirected: bool = False,
) -> EdgeList:
    """Parse arc lines, skipping ``skip`` header lines.

    Blank lines are only accepted at the very end of the input. With
    ``undirected`` every line yields the arc and its reverse.
    """
    if skip < 0:
        raise InputFormatError(f"skip must be non-negative, got {skip}.")
    regex = compile_pattern(pattern)
    edges = EdgeList()
    blank_at = None

    for number, raw in enumerate(lines, start=1):
        if number <= skip:
            continue
        line = raw.rstrip("\r\n")
        if not line.strip():
            if blank_at is None:
                blank_at = number
            continue
        if blank_at is not None:
            raise InputFormatError("empty line inside the arc list.", blank_at)

        src, dst, cost, cap = parse_line(line, regex, number)
        i = edges._intern(src)
        j = edges._intern(dst)
        edges.arcs.append((i, j, cost, cap))
        if undirected:
            edges.arcs.append((j, i, cost, cap))

    logger.debug("Parsed %d arcs over %d nodes", len(edges.arcs), edges.num_nodes)
    return edges


def edges_from_file(
    filename: Union[str, Path],
    pattern: Union[str, Pattern] = DEFAULT_PATTERN,
    *,
    skip: int = DEFAULT_SKIP,
    undirected: bool = False,
) -> EdgeList:
    path = Path(filename)
    with path.open("r", encoding="utf-8") as f:
        try:
            edges = edges_from_lines(f, pattern, skip=skip, undirected=undirected)
        except UnicodeDecodeError as exc:
            raise InputFormatError(f"{path} is not valid UTF-8: {exc.reason} at byte {exc.start}.") from exc
    logger.info("Loaded %s: %d nodes, %d arcs", path, edges.num_nodes, len(edges.arcs))
    return edges


def load_network(
    filename: Union[str, Path],
    pattern: Union[str, Pattern] = DEFAULT_PATTERN,
    *,
    skip: int = DEFAULT_SKIP,
    undirected: bool = False,
) -> Tuple[CompactStar, EdgeList]:
    """Read ``filename`` and build its compact star."""
    edges = edges_from_file(filename, pattern, skip=skip, undirected=undirected)
    return compact_star_from_arcs(edges.num_nodes, edges.arcs), edges
