"""
fgcore/structure/factor.py

Factor contract consumed by the factor graph, plus a dense table factor.

A factor is a local energy function over an ordered scope of variables.
The graph only needs:
- the scope (variable indices) and the scope's cardinalities
- a trigger that (re)builds the energy table from current parameters
- energy lookup for an assignment restricted to the scope

Energy tables are stored with the first scope variable changing fastest.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol, Sequence, Tuple, Union

import numpy as np

logger = logging.getLogger(__name__)


class Factor(Protocol):
    """Protocol for anything the factor graph can hold as a factor."""

    def get_variables(self) -> Tuple[int, ...]: ...
    def get_cardinalities(self) -> Tuple[int, ...]: ...
    def compute_energy_table(self) -> None: ...
    def evaluate_energy(self, sub_state: Sequence[int]) -> float: ...


class FactorDataSource:
    """
    Shared data referenced by several factors.

    The graph stores these verbatim; factors read ``data`` when they
    compute their energy tables.
    """

    def __init__(self, data: np.ndarray):
        self.data = np.asarray(data, dtype=np.float64)

    def get_data(self) -> np.ndarray:
        return self.data

    def set_data(self, data: np.ndarray) -> None:
        self.data = np.asarray(data, dtype=np.float64)

    def __repr__(self) -> str:
        return f"FactorDataSource(shape={self.data.shape})"


class TableFactor:
    """
    Factor with a dense energy table over the joint states of its scope.

    Without data the parameters are the energy table itself. With data
    (a vector, or a FactorDataSource shared with other factors) the
    parameters are a (num_states, data_dim) weight matrix and the table
    is ``W @ data``.

    Attributes:
        variables: Ordered scope (variable indices, no duplicates)
        cardinalities: Domain size of each scope variable, same order
    """

    def __init__(
        self,
        variables: Sequence[int],
        cardinalities: Sequence[int],
        parameters: Optional[Sequence[float]] = None,
        data: Optional[Union[np.ndarray, FactorDataSource]] = None,
    ):
        variables = tuple(int(v) for v in variables)
        cardinalities = tuple(int(c) for c in cardinalities)

        if not variables:
            raise ValueError("Factor should connect to at least one variable")
        if len(set(variables)) != len(variables):
            raise ValueError(f"Factor scope has duplicates: {variables}")
        if len(cardinalities) != len(variables):
            raise ValueError(
                f"Factor scope/cardinality mismatch: {len(variables)} variables "
                f"but {len(cardinalities)} cardinalities"
            )
        if any(c <= 0 for c in cardinalities):
            raise ValueError(f"Cardinalities must be positive: {cardinalities}")

        self.variables = variables
        self.cardinalities = cardinalities
        self._data = data
        self._parameters = np.zeros(self._param_size(), dtype=np.float64)
        self._energies: Optional[np.ndarray] = None

        if parameters is not None:
            self.set_parameters(parameters)

    @property
    def num_states(self) -> int:
        return int(np.prod(self.cardinalities))

    def _data_vector(self) -> Optional[np.ndarray]:
        if self._data is None:
            return None
        if isinstance(self._data, FactorDataSource):
            return self._data.get_data().ravel()
        return np.asarray(self._data, dtype=np.float64).ravel()

    def _param_size(self) -> int:
        d = self._data_vector()
        if d is None:
            return self.num_states
        return self.num_states * d.size

    def is_data_dependent(self) -> bool:
        return self._data is not None

    def get_variables(self) -> Tuple[int, ...]:
        return self.variables

    def get_cardinalities(self) -> Tuple[int, ...]:
        return self.cardinalities

    def get_data_source(self) -> Optional[FactorDataSource]:
        if isinstance(self._data, FactorDataSource):
            return self._data
        return None

    def get_parameters(self) -> np.ndarray:
        return self._parameters

    def set_parameters(self, parameters: Sequence[float]) -> None:
        """Replace the weights; the energy table is stale until recomputed."""
        w = np.asarray(parameters, dtype=np.float64).ravel()
        expected = self._param_size()
        if w.size != expected:
            raise ValueError(f"Expected {expected} parameters, got {w.size}")
        self._parameters = w.copy()
        self._energies = None

    def is_consistent_with(self, cardinalities: Sequence[int]) -> bool:
        """Check the scope lies inside the graph and the domains agree."""
        n = len(cardinalities)
        for v, c in zip(self.variables, self.cardinalities):
            if not 0 <= v < n or int(cardinalities[v]) != c:
                return False
        return True

    def compute_energy_table(self) -> None:
        d = self._data_vector()
        if d is None:
            self._energies = self._parameters.copy()
        else:
            W = self._parameters.reshape(self.num_states, d.size)
            self._energies = W @ d
        logger.debug("Computed energy table for factor over %s", self.variables)

    def get_energies(self) -> Optional[np.ndarray]:
        return self._energies

    def state_index(self, sub_state: Sequence[int]) -> int:
        """Flat table index of an assignment to the scope."""
        sub_state = np.asarray(sub_state, dtype=np.int64)
        if sub_state.shape != (len(self.variables),):
            raise ValueError(
                f"Assignment has shape {sub_state.shape}, expected ({len(self.variables)},)"
            )
        return int(np.ravel_multi_index(tuple(sub_state), self.cardinalities, order="F"))

    def evaluate_energy(self, sub_state: Sequence[int]) -> float:
        if self._energies is None:
            raise RuntimeError(
                f"Energy table of factor over {self.variables} not computed; "
                "call compute_energy_table() first"
            )
        return float(self._energies[self.state_index(sub_state)])

    def __repr__(self) -> str:
        return f"TableFactor(variables={self.variables}, cardinalities={self.cardinalities})"
