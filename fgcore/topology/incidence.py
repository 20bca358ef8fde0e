"""
fgcore/topology/incidence.py

Graph views of a factor graph's variable-factor incidences.

- to_networkx: bipartite graph with variable nodes ("v", i) and factor
  nodes ("f", j), one edge per incidence
- incidence_matrix: sparse (num_variables, num_factors) 0/1 matrix
- build_factor_adjacency: factors joined when their scopes intersect,
  labeled with the shared variables
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import networkx as nx
import numpy as np
from scipy import sparse

if TYPE_CHECKING:
    from fgcore.structure.factor_graph import FactorGraph


def variable_node(i: int):
    return ("v", i)


def factor_node(j: int):
    return ("f", j)


def to_networkx(fg: "FactorGraph") -> nx.Graph:
    """
    Build the bipartite variable-factor graph.

    Variable nodes carry a ``cardinality`` attribute, factor nodes carry
    their ``scope``.
    """
    g = nx.Graph()
    cards = fg.get_cardinalities()
    for i in range(fg.num_variables):
        g.add_node(variable_node(i), bipartite=0, cardinality=int(cards[i]))

    for j, factor in enumerate(fg.get_factors()):
        scope = tuple(int(v) for v in factor.get_variables())
        g.add_node(factor_node(j), bipartite=1, scope=scope)
        for v in scope:
            if not 0 <= v < fg.num_variables:
                raise IndexError(f"Factor {j} references variable {v} outside the graph")
            g.add_edge(factor_node(j), variable_node(v))

    return g


def incidence_matrix(fg: "FactorGraph") -> sparse.csr_matrix:
    """Sparse variable-by-factor incidence matrix."""
    rows = []
    cols = []
    for j, factor in enumerate(fg.get_factors()):
        for v in factor.get_variables():
            if not 0 <= v < fg.num_variables:
                raise IndexError(f"Factor {j} references variable {v} outside the graph")
            rows.append(int(v))
            cols.append(j)

    data = np.ones(len(rows), dtype=np.int8)
    return sparse.csr_matrix(
        (data, (rows, cols)),
        shape=(fg.num_variables, fg.num_factors),
    )


def build_factor_adjacency(fg: "FactorGraph") -> nx.Graph:
    """
    Build the factor adjacency graph.

    Returns:
        NetworkX graph with:
        - Nodes: factor indices
        - Edges: pairs of factors with shared variables
        - Edge attrs: interface (sorted shared variables), weight (log interface size)
    """
    cards = fg.get_cardinalities()
    scopes = [set(int(v) for v in f.get_variables()) for f in fg.get_factors()]

    g = nx.Graph()
    g.add_nodes_from(range(len(scopes)))

    for a in range(len(scopes)):
        for b in range(a + 1, len(scopes)):
            inter = tuple(sorted(scopes[a].intersection(scopes[b])))
            if not inter:
                continue
            w = 0.0
            for v in inter:
                w += math.log(max(int(cards[v]), 1))
            g.add_edge(a, b, interface=inter, weight=w)

    return g
