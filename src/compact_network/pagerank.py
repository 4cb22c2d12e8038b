from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple
import logging

import numpy as np
from tqdm.auto import tqdm

from .compact_star import CompactStar
from .exceptions import (
    InvalidParameter,
    InvalidTeleportProbability,
    RankMassInvariantViolated,
)

logger = logging.getLogger(__name__)

# Allowed drift of sum(ranks) away from 1.0 after any iteration.
MASS_TOLERANCE = 1e-6


@dataclass(frozen=True)
class PageRankResult:
    ranks: np.ndarray
    iterations: int
    converged: bool
    residual: float  # L1 distance between the last two rank vectors

    @property
    def did_not_converge(self) -> bool:
        return not self.converged

    def top(self, k: int) -> List[Tuple[int, float]]:
        """Deterministic top-k by sorting on (-rank, node_id)."""
        ids = np.arange(len(self.ranks))
        order = np.lexsort((ids, -self.ranks))[: max(int(k), 0)]
        return [(int(i), float(self.ranks[i])) for i in order]


def _teleport_vector(n: int, teleport) -> np.ndarray:
    if teleport is None:
        return np.full(n, 1.0 / n, dtype=np.float64)
    u = np.asarray(teleport, dtype=np.float64)
    if u.shape != (n,):
        raise InvalidParameter(f"Teleport vector must have length {n}, got shape {u.shape}.")
    if not np.isfinite(u).all() or (u < 0).any():
        raise InvalidParameter("Teleport vector entries must be finite and non-negative.")
    s = float(u.sum())
    if s <= 0:
        raise InvalidParameter("Teleport vector must have positive sum.")
    return u / s


def pagerank(
    network: CompactStar,
    beta: float = 0.85,
    epsilon: float = 1e-8,
    max_iterations: int = 100,
    *,
    teleport: Optional[np.ndarray] = None,
    progress: bool = False,
) -> PageRankResult:
    """Compute PageRank by power iteration over the forward star.

    Arc costs and capacities are ignored; parallel arcs count once each.

    Parameters
    ----------
    network:
        The network to rank.
    beta:
        Probability of following an outgoing arc, in (0, 1]. The remaining
        ``1 - beta`` is teleported. ``beta == 0`` is rejected: without
        link-following mass the ranks carry no information and rounding can
        push their sum above one.
    epsilon:
        L1 convergence threshold on successive rank vectors.
    max_iterations:
        Iteration bound. Reaching it is not an error; the result then has
        ``converged == False``.
    teleport:
        Teleportation distribution (length n). If None, uniform. Dead-end
        mass is redistributed with the same distribution.
    progress:
        Show a tqdm progress bar over iterations.

    Returns
    -------
    PageRankResult
        ``ranks`` sums to 1 within ``MASS_TOLERANCE``.

    Raises
    ------
    InvalidTeleportProbability
        ``beta`` is not in (0, 1].
    RankMassInvariantViolated
        The rank mass drifted outside tolerance. The ranks are never
        renormalised to hide this.
    """
    beta = float(beta)
    if not 0.0 < beta <= 1.0:
        raise InvalidTeleportProbability(f"beta must be in (0, 1], got {beta!r}.")
    epsilon = float(epsilon)
    if not epsilon > 0.0:
        raise InvalidParameter(f"epsilon must be positive, got {epsilon!r}.")
    if int(max_iterations) < 1:
        raise InvalidParameter(f"max_iterations must be at least 1, got {max_iterations!r}.")

    n = network.num_nodes
    if n == 0:
        return PageRankResult(np.array([], dtype=np.float64), 0, True, 0.0)

    u = _teleport_vector(n, teleport)

    out_deg = network.out_degree().astype(np.float64)
    dangling = out_deg == 0
    inv_out_deg = np.zeros(n, dtype=np.float64)
    inv_out_deg[~dangling] = 1.0 / out_deg[~dangling]
    tail, head = network.tail, network.head

    p = np.full(n, 1.0 / n, dtype=np.float64)
    residual = np.inf
    iterations = 0
    converged = False

    for iterations in tqdm(range(1, int(max_iterations) + 1), desc="pagerank",
                           unit="it", disable=not progress):
        # push along arcs; bincount sums in arc order, so results are reproducible
        inbound = np.bincount(head, weights=(p * inv_out_deg)[tail], minlength=n)

        # dead-end mass redistributed according to u
        dm = float(p[dangling].sum())
        new = beta * (inbound + dm * u) + (1.0 - beta) * u

        mass = float(new.sum())
        if abs(mass - 1.0) > MASS_TOLERANCE:
            raise RankMassInvariantViolated(mass, iterations, MASS_TOLERANCE)

        residual = float(np.abs(new - p).sum())
        p = new
        if residual < epsilon:
            converged = True
            break

    if converged:
        logger.debug("PageRank converged after %d iterations (residual %.3e)", iterations, residual)
    else:
        logger.warning(
            "PageRank did not converge within %d iterations (residual %.3e, epsilon %.3e)",
            iterations, residual, epsilon,
        )
    return PageRankResult(p, iterations, converged, residual)
