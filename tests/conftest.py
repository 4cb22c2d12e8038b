import numpy as np
import pytest

from compact_network import compact_star_from_arcs


@pytest.fixture
def sample_arcs():
    # (from, to, cost, capacity); example network from Ahuja, Magnanti, Orlin
    return [
        (0, 1, 25.0, 30.0),
        (0, 2, 35.0, 50.0),
        (1, 3, 15.0, 40.0),
        (2, 1, 45.0, 10.0),
        (3, 2, 15.0, 30.0),
        (3, 4, 45.0, 60.0),
        (4, 2, 25.0, 20.0),
        (4, 3, 35.0, 50.0),
    ]


@pytest.fixture
def sample_star(sample_arcs):
    return compact_star_from_arcs(5, sample_arcs)


@pytest.fixture
def six_node_star():
    arcs = [
        (0, 1, 6.0, 0.0),
        (0, 2, 4.0, 0.0),
        (1, 2, 2.0, 0.0),
        (1, 3, 2.0, 0.0),
        (2, 3, 1.0, 0.0),
        (2, 4, 2.0, 0.0),
        (3, 5, 7.0, 0.0),
        (4, 3, 1.0, 0.0),
        (4, 5, 3.0, 0.0),
    ]
    return compact_star_from_arcs(6, arcs)


def random_arcs(seed, n, m, low=0, high=10, integer=True):
    """Random arc list on n nodes; costs in [low, high)."""
    rng = np.random.default_rng(seed)
    tails = rng.integers(0, n, size=m)
    heads = rng.integers(0, n, size=m)
    if integer:
        costs = rng.integers(low, high, size=m).astype(float)
    else:
        costs = rng.uniform(low, high, size=m)
    return [(int(u), int(v), float(c)) for u, v, c in zip(tails, heads, costs)]
