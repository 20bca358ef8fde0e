"""
fgcore/structure/factor_graph.py

Factor graph over discrete variables.

A factor graph consists of:
- Variables with domains (cardinalities), indexed 0..N-1
- Factors with ordered scopes, shared with any other holder
- Shared factor data sources, stored verbatim

Topology (connectivity, acyclicity) is derived by linking the variables of
each factor in a disjoint set. The result is kept as an explicit
TopologyState that is dropped whenever the structure changes, so it must
be rebuilt with connect_components() before it is queried again.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

import numpy as np

from fgcore.structure.factor import Factor, FactorDataSource
from fgcore.topology.disjoint_set import DisjointSet

logger = logging.getLogger(__name__)


class TopologyNotAnalyzedError(RuntimeError):
    """Raised when topology is queried before connect_components()."""


@dataclass(frozen=True)
class TopologyState:
    """
    Result of one union-find pass over the factor graph.

    Attributes:
        disjoint_set: Variables linked through shared factors
        has_cycle: Whether some factor closed a loop
        num_edges: Number of factor-variable links attempted
    """
    disjoint_set: DisjointSet
    has_cycle: bool
    num_edges: int


def _as_cardinalities(cards: Sequence[int]) -> np.ndarray:
    arr = np.asarray(cards)
    if arr.size == 0:
        return np.zeros(0, dtype=np.int64)
    if arr.ndim != 1 or not np.issubdtype(arr.dtype, np.integer):
        raise ValueError(f"Cardinalities must be a 1-D integer vector, got {cards!r}")
    if np.any(arr <= 0):
        raise ValueError(f"Cardinalities must be positive: {arr.tolist()}")
    return arr.astype(np.int64)


class FactorGraph:
    """
    Structured input made of variables and the factors over them.

    Factors and data sources are appended, never removed. Both are shared
    by reference, also with duplicates of this graph.
    """

    def __init__(self, cardinalities: Optional[Sequence[int]] = None):
        self._cardinalities = _as_cardinalities(() if cardinalities is None else cardinalities)
        self._factors: List[Factor] = []
        self._datasources: List[FactorDataSource] = []
        self._topology: Optional[TopologyState] = None

    # ------------------------------------------------------------------ #
    # Structure
    # ------------------------------------------------------------------ #

    @property
    def num_variables(self) -> int:
        return int(self._cardinalities.size)

    @property
    def num_factors(self) -> int:
        return len(self._factors)

    def __len__(self) -> int:
        return len(self._factors)

    def _invalidate(self, reason: str) -> None:
        if self._topology is not None:
            logger.debug("Discarding topology of %r: %s", self, reason)
            self._topology = None

    def add_factor(self, factor: Factor) -> None:
        """Append a factor. Its scope is checked later, at analysis or evaluation."""
        self._factors.append(factor)
        self._invalidate("factor added")

    def add_data_source(self, datasource: Any) -> None:
        self._datasources.append(datasource)

    def get_factors(self) -> List[Factor]:
        return list(self._factors)

    def get_factor_data_sources(self) -> List[Any]:
        return list(self._datasources)

    def get_cardinalities(self) -> np.ndarray:
        return self._cardinalities

    def set_cardinalities(self, cards: Sequence[int]) -> None:
        """
        Replace all cardinalities.

        Factors already added are not revalidated against the new vector.
        """
        cards = _as_cardinalities(cards)
        if self._factors:
            logger.warning(
                "Replacing cardinalities of a graph with %d factors; factors are not revalidated",
                len(self._factors),
            )
        self._cardinalities = cards
        self._invalidate("cardinalities replaced")

    def get_num_vectors(self) -> int:
        """Number of factors (one feature vector per factor)."""
        return len(self._factors)

    def validate(self) -> None:
        """Check every factor's scope and domains against the cardinalities."""
        cards = self._cardinalities
        for i, factor in enumerate(self._factors):
            check = getattr(factor, "is_consistent_with", None)
            if check is not None:
                ok = check(cards)
            else:
                ok = all(0 <= v < cards.size and cards[v] == c
                         for v, c in zip(factor.get_variables(), factor.get_cardinalities()))
            if not ok:
                raise ValueError(
                    f"Factor {i} over {tuple(factor.get_variables())} is inconsistent "
                    f"with cardinalities {cards.tolist()}"
                )

    def same_structure(self, other: "FactorGraph") -> bool:
        """Equal cardinalities and the very same factors in the same order."""
        if not np.array_equal(self._cardinalities, other._cardinalities):
            return False
        if len(self._factors) != len(other._factors):
            return False
        return all(a is b for a, b in zip(self._factors, other._factors))

    def duplicate(self) -> "FactorGraph":
        """
        Copy the graph structure.

        Cardinalities are copied, factors and data sources are shared,
        topology is not carried over.
        """
        fg = FactorGraph(self._cardinalities.copy())
        fg._factors = list(self._factors)
        fg._datasources = list(self._datasources)
        return fg

    # ------------------------------------------------------------------ #
    # Topology
    # ------------------------------------------------------------------ #

    def connect_components(self) -> None:
        """
        Link graph nodes by running union-find over all factors.

        The first variable of each factor is linked with each other variable
        of that factor. A link whose endpoints are already connected means
        another path joins them, so a cycle exists.
        """
        dset = DisjointSet(self.num_variables)
        has_cycle = False
        num_edges = 0

        for factor in self._factors:
            scope = tuple(factor.get_variables())
            if not scope:
                continue
            dset.find_set(scope[0])
            for v in scope[1:]:
                num_edges += 1
                if not dset.union_set(scope[0], v):
                    has_cycle = True

        dset.set_connected(True)
        self._topology = TopologyState(disjoint_set=dset, has_cycle=has_cycle, num_edges=num_edges)
        logger.debug(
            "Connected %d variables through %d factors: edges=%d, cycle=%s",
            self.num_variables, len(self._factors), num_edges, has_cycle,
        )

    @property
    def topology(self) -> Optional[TopologyState]:
        return self._topology

    def is_analyzed(self) -> bool:
        return self._topology is not None

    def _require_topology(self) -> TopologyState:
        if self._topology is None:
            raise TopologyNotAnalyzedError(
                "Topology is not available; call connect_components() first"
            )
        return self._topology

    def get_disjoint_set(self) -> DisjointSet:
        return self._require_topology().disjoint_set

    def get_num_edges(self) -> int:
        return self._require_topology().num_edges

    def is_acyclic_graph(self) -> bool:
        return not self._require_topology().has_cycle

    def is_connected_graph(self) -> bool:
        return self.get_disjoint_set().get_num_sets() == 1

    def is_tree_graph(self) -> bool:
        return self.is_acyclic_graph() and self.is_connected_graph()

    def get_component_labels(self) -> np.ndarray:
        """Dense connected-component label of each variable."""
        labels = np.zeros(self.num_variables, dtype=np.int64)
        self.get_disjoint_set().get_unique_labeling(labels)
        return labels

    def get_num_components(self) -> int:
        return self.get_disjoint_set().get_num_sets()

    # ------------------------------------------------------------------ #
    # Energies
    # ------------------------------------------------------------------ #

    def compute_energies(self) -> None:
        """(Re)build the energy table of every factor from its parameters."""
        for factor in self._factors:
            factor.compute_energy_table()
        logger.debug("Computed energy tables for %d factors", len(self._factors))

    def _as_state(self, state: Sequence[int]) -> np.ndarray:
        arr = np.asarray(state)
        if arr.size and not np.issubdtype(arr.dtype, np.integer):
            raise ValueError(f"State must contain integers, got dtype {arr.dtype}")
        if arr.ndim != 1 or arr.size != self.num_variables:
            raise ValueError(
                f"State has shape {arr.shape}, expected ({self.num_variables},)"
            )
        return arr.astype(np.int64)

    def _restrict(self, state: np.ndarray, factor: Factor) -> np.ndarray:
        scope = np.asarray(factor.get_variables(), dtype=np.int64)
        if scope.size and (scope.min() < 0 or scope.max() >= state.size):
            raise IndexError(
                f"Factor scope {scope.tolist()} out of range for {state.size} variables"
            )
        return state[scope]

    def evaluate_energy(self, state: Any) -> float:
        """
        Total energy of a full assignment.

        Args:
            state: Value of every variable, or an observation providing one
                through get_assignment()

        Returns:
            Sum of the factor energies of the assignment restricted to
            each factor's scope
        """
        if hasattr(state, "get_assignment"):
            state = state.get_assignment()
        state = self._as_state(state)

        energy = 0.0
        for factor in self._factors:
            energy += factor.evaluate_energy(self._restrict(state, factor))
        return float(energy)

    def evaluate_energies(self, states: Sequence[Sequence[int]]) -> np.ndarray:
        """Energy of each row of a (num_states, num_variables) matrix."""
        states = np.asarray(states)
        if states.ndim != 2:
            raise ValueError(f"States must be a 2-D matrix, got shape {states.shape}")
        return np.array([self.evaluate_energy(row) for row in states], dtype=np.float64)

    def __repr__(self) -> str:
        return f"FactorGraph(vars={self.num_variables}, factors={len(self._factors)})"
