"""
Tests for graph views, cross-checked against networkx and scipy.
"""

import math

import networkx as nx
import numpy as np
import pytest
from scipy.sparse.csgraph import connected_components

from fgcore.structure.factor import TableFactor
from fgcore.structure.factor_graph import FactorGraph
from fgcore.topology.incidence import (
    build_factor_adjacency,
    factor_node,
    incidence_matrix,
    to_networkx,
    variable_node,
)


def make_graph(cards, scopes):
    fg = FactorGraph(cards)
    for scope in scopes:
        fg.add_factor(TableFactor(scope, [cards[v] for v in scope]))
    return fg


def random_graph(rng, n, m):
    scopes = []
    for _ in range(m):
        k = int(rng.integers(1, 4))
        scopes.append([int(v) for v in rng.choice(n, size=k, replace=False)])
    return make_graph([2] * n, scopes)


class TestToNetworkx:
    def test_bipartite_structure(self):
        fg = make_graph([2, 3, 2], [(0, 1), (1, 2), (2,)])

        g = to_networkx(fg)

        assert g.number_of_nodes() == 6
        assert g.number_of_edges() == 5
        assert g.nodes[variable_node(1)]["cardinality"] == 3
        assert g.nodes[factor_node(0)]["scope"] == (0, 1)
        assert g.has_edge(factor_node(1), variable_node(2))

    def test_out_of_range_raises(self):
        fg = FactorGraph([2])
        fg.add_factor(TableFactor([0, 1], [2, 2]))

        with pytest.raises(IndexError):
            to_networkx(fg)

    @pytest.mark.parametrize("seed", range(5))
    def test_topology_agrees_with_networkx(self, seed):
        rng = np.random.default_rng(seed)
        fg = random_graph(rng, n=8, m=6)
        fg.connect_components()

        g = to_networkx(fg)

        assert fg.is_acyclic_graph() == nx.is_forest(g)
        assert fg.is_connected_graph() == nx.is_connected(g)

    def test_triangle_has_cycle(self):
        fg = make_graph([2, 2, 2], [(0, 1), (1, 2), (0, 2)])

        g = to_networkx(fg)

        assert not nx.is_forest(g)


class TestIncidenceMatrix:
    def test_shape_and_entries(self):
        fg = make_graph([2, 2, 2], [(0, 1), (1, 2)])

        M = incidence_matrix(fg)

        assert M.shape == (3, 2)
        assert M.toarray().tolist() == [[1, 0], [1, 1], [0, 1]]

    def test_empty_graph(self):
        M = incidence_matrix(FactorGraph([2, 2]))

        assert M.shape == (2, 0)
        assert M.nnz == 0

    @pytest.mark.parametrize("seed", range(5))
    def test_components_agree_with_scipy(self, seed):
        rng = np.random.default_rng(100 + seed)
        fg = random_graph(rng, n=10, m=5)
        fg.connect_components()

        M = incidence_matrix(fg).astype(np.int32)
        n_components, labels = connected_components(M @ M.T, directed=False)

        assert n_components == fg.get_num_components()
        ours = fg.get_component_labels()
        for x in range(fg.num_variables):
            for y in range(fg.num_variables):
                assert (labels[x] == labels[y]) == (ours[x] == ours[y])


class TestFactorAdjacency:
    def test_triangle(self):
        fg = make_graph([2, 3, 2], [(0, 1), (1, 2), (0, 2)])

        g = build_factor_adjacency(fg)

        assert g.number_of_edges() == 3
        assert g.edges[0, 1]["interface"] == (1,)
        assert g.edges[0, 1]["weight"] == pytest.approx(math.log(3))

    def test_disjoint_factors(self):
        fg = make_graph([2, 2, 2, 2], [(0, 1), (2, 3)])

        g = build_factor_adjacency(fg)

        assert g.number_of_nodes() == 2
        assert g.number_of_edges() == 0
