from compact_network import compact_star_from_arcs, find_spider_traps, scc_kosaraju


def test_components(sample_star):
    comp_id, comps = scc_kosaraju(sample_star)
    assert sorted(comps) == [[0], [1, 2, 3, 4]]
    assert comp_id[1] == comp_id[4]
    assert comp_id[0] != comp_id[1]


def test_every_node_belongs_to_one_component():
    star = compact_star_from_arcs(6, [(0, 1), (1, 0), (1, 2), (2, 3), (3, 2), (4, 4)])
    comp_id, comps = scc_kosaraju(star)
    assert sorted(n for c in comps for n in c) == list(range(6))
    assert (comp_id >= 0).all()
    assert sorted(comps) == [[0, 1], [2, 3], [4], [5]]


def test_spider_traps():
    star = compact_star_from_arcs(6, [(0, 1), (1, 0), (1, 2), (2, 3), (3, 2), (4, 4)])
    # {2, 3} and the self-loop {4} are closed; {5} is a plain dead end
    assert find_spider_traps(star) == [[2, 3], [4]]


def test_dead_ends_are_not_traps():
    assert find_spider_traps(compact_star_from_arcs(2, [(0, 1)])) == []
    assert find_spider_traps(compact_star_from_arcs(0, [])) == []


def test_whole_graph_strongly_connected():
    star = compact_star_from_arcs(3, [(0, 1), (1, 2), (2, 0)])
    assert find_spider_traps(star) == [[0, 1, 2]]
