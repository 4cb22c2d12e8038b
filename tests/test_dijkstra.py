import math

import numpy as np
import pytest

from compact_network import (
    NO_PREDECESSOR,
    NegativeCost,
    NodeOutOfRange,
    SourceOutOfRange,
    compact_star_from_arcs,
    heap_dijkstra,
    scan_dijkstra,
    shortest_paths,
)

from conftest import random_arcs

VARIANTS = [True, False]


def brute_force_distances(n, arcs, source):
    """Minimum cost over all simple paths, by exhaustive DFS."""
    out = [[] for _ in range(n)]
    for u, v, c in arcs:
        out[u].append((v, c))
    best = [math.inf] * n
    best[source] = 0.0

    def walk(u, cost, on_path):
        for v, c in out[u]:
            if v in on_path:
                continue
            best[v] = min(best[v], cost + c)
            on_path.add(v)
            walk(v, cost + c, on_path)
            on_path.remove(v)

    walk(source, 0.0, {source})
    return best


@pytest.mark.parametrize("use_heap", VARIANTS)
def test_three_node_scenario(use_heap):
    star = compact_star_from_arcs(3, [(0, 1, 1.0), (1, 2, 1.0), (0, 2, 5.0)])
    res = shortest_paths(star, 0, use_heap=use_heap)
    assert res.distances.tolist() == [0.0, 1.0, 2.0]
    assert res.predecessors[2] == 1
    assert res.predecessors[1] == 0
    assert res.predecessors[0] == NO_PREDECESSOR
    assert res.path_to(2) == [0, 1, 2]
    assert res.path_to(0) == [0]


@pytest.mark.parametrize("use_heap", VARIANTS)
def test_reference_network(six_node_star, use_heap):
    res = shortest_paths(six_node_star, 0, use_heap=use_heap)
    assert res.predecessors.tolist() == [-1, 0, 0, 2, 2, 4]
    assert res.distances.tolist() == [0.0, 6.0, 4.0, 5.0, 6.0, 9.0]
    assert res.settle_order.tolist() == [0, 2, 3, 1, 4, 5]


@pytest.mark.parametrize("use_heap", VARIANTS)
def test_isolated_source(use_heap):
    star = compact_star_from_arcs(3, [(1, 2, 1.0)])
    res = shortest_paths(star, 0, use_heap=use_heap)
    assert res.distances[0] == 0.0
    assert np.isinf(res.distances[1:]).all()
    assert (res.predecessors == NO_PREDECESSOR).all()
    assert res.settle_order.tolist() == [0]
    assert not res.is_reachable(2)
    assert res.path_to(2) is None


@pytest.mark.parametrize("use_heap", VARIANTS)
def test_parallel_arcs_and_self_loops(use_heap):
    star = compact_star_from_arcs(2, [(0, 0, 1.0), (0, 1, 5.0), (0, 1, 2.0)])
    res = shortest_paths(star, 0, use_heap=use_heap)
    assert res.distances.tolist() == [0.0, 2.0]


@pytest.mark.parametrize("seed", range(25))
def test_matches_brute_force_on_small_graphs(seed):
    n = 2 + seed % 7
    arcs = random_arcs(seed, n, 3 * n, low=0, high=5, integer=(seed % 2 == 0))
    star = compact_star_from_arcs(n, arcs)
    for source in range(n):
        expected = brute_force_distances(n, arcs, source)
        for use_heap in VARIANTS:
            res = shortest_paths(star, source, use_heap=use_heap)
            np.testing.assert_allclose(res.distances, expected, rtol=0, atol=1e-12)


@pytest.mark.parametrize("seed", range(10))
def test_settles_each_node_once_in_distance_order(seed):
    n = 30
    star = compact_star_from_arcs(n, random_arcs(seed, n, 90))
    res = heap_dijkstra(star, 0)
    order = res.settle_order
    assert len(set(order.tolist())) == len(order)
    assert set(order.tolist()) == set(np.flatnonzero(np.isfinite(res.distances)).tolist())
    assert (np.diff(res.distances[order]) >= 0).all()


@pytest.mark.parametrize("seed", range(10))
def test_heap_and_scan_variants_agree(seed):
    n = 40
    star = compact_star_from_arcs(n, random_arcs(seed, n, 120, high=4))
    a = heap_dijkstra(star, seed % n)
    b = scan_dijkstra(star, seed % n)
    np.testing.assert_array_equal(a.distances, b.distances)
    np.testing.assert_array_equal(a.predecessors, b.predecessors)
    np.testing.assert_array_equal(a.settle_order, b.settle_order)


def test_predecessors_form_shortest_path_tree():
    n = 50
    arcs = random_arcs(7, n, 200, low=1, high=20, integer=False)
    star = compact_star_from_arcs(n, arcs)
    res = shortest_paths(star, 3)
    for v in range(n):
        p = res.predecessors[v]
        if p == NO_PREDECESSOR:
            continue
        assert res.distances[v] == pytest.approx(res.distances[p] + min(
            a.cost for a in star.outgoing_arcs(p) if a.to == v
        ))


def test_matches_scipy_csgraph():
    sparse = pytest.importorskip("scipy.sparse")
    csgraph = pytest.importorskip("scipy.sparse.csgraph")
    n = 60
    rng = np.random.default_rng(11)
    pairs = {(int(u), int(v)) for u, v in rng.integers(0, n, size=(240, 2)) if u != v}
    arcs = [(u, v, float(rng.uniform(1.0, 10.0))) for u, v in sorted(pairs)]
    star = compact_star_from_arcs(n, arcs)

    mat = sparse.csr_matrix(
        (star.costs, (star.tail, star.head)), shape=(n, n)
    )
    expected = csgraph.dijkstra(mat, directed=True, indices=0)
    np.testing.assert_allclose(shortest_paths(star, 0).distances, expected)


@pytest.mark.parametrize("use_heap", VARIANTS)
def test_negative_cost_fails(use_heap):
    star = compact_star_from_arcs(3, [(0, 1, 1.0), (1, 2, -1.0)])
    with pytest.raises(NegativeCost) as info:
        shortest_paths(star, 0, use_heap=use_heap)
    assert (info.value.tail, info.value.head, info.value.cost) == (1, 2, -1.0)


def test_negative_cost_detected_before_search():
    # the negative arc is unreachable from the source; costs are pre-validated
    star = compact_star_from_arcs(4, [(0, 1, 1.0), (2, 3, -5.0)])
    with pytest.raises(NegativeCost):
        shortest_paths(star, 0)


def test_zero_costs_are_allowed():
    star = compact_star_from_arcs(3, [(0, 1, 0.0), (1, 2, 0.0)])
    assert shortest_paths(star, 0).distances.tolist() == [0.0, 0.0, 0.0]


@pytest.mark.parametrize("use_heap", VARIANTS)
@pytest.mark.parametrize("source", [-1, 3, 1.0, "0"])
def test_source_out_of_range(use_heap, source):
    star = compact_star_from_arcs(3, [(0, 1, 1.0)])
    with pytest.raises(SourceOutOfRange):
        shortest_paths(star, source, use_heap=use_heap)


def test_source_checked_before_costs():
    star = compact_star_from_arcs(2, [(0, 1, -1.0)])
    with pytest.raises(NodeOutOfRange):
        shortest_paths(star, 9)


def test_repeated_runs_are_identical():
    n = 40
    star = compact_star_from_arcs(n, random_arcs(3, n, 150, integer=False))
    a = shortest_paths(star, 0)
    b = shortest_paths(star, 0)
    assert a.distances.tobytes() == b.distances.tobytes()
    assert a.predecessors.tobytes() == b.predecessors.tobytes()
    assert a.settle_order.tobytes() == b.settle_order.tobytes()


@pytest.mark.parametrize("target", [-1, 3, 2.0, None])
def test_path_queries_reject_unknown_targets(target):
    star = compact_star_from_arcs(3, [(0, 1, 1.0), (1, 2, 1.0)])
    res = shortest_paths(star, 0)
    with pytest.raises(NodeOutOfRange):
        res.path_to(target)
    with pytest.raises(NodeOutOfRange):
        res.is_reachable(target)
    assert res.path_to(np.int64(2)) == [0, 1, 2]
