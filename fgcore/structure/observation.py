"""
fgcore/structure/observation.py

Fully observed assignment of a factor graph, with per-variable loss weights.
"""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np


class FactorGraphObservation:
    """
    Observed state of every variable in a factor graph.

    Attributes:
        observed_state: 1-D integer vector, one value per variable
        loss_weights: 1-D float vector of the same length (default all ones)
    """

    def __init__(self, observed_state: Sequence[int], loss_weights: Optional[Sequence[float]] = None):
        state = np.asarray(observed_state, dtype=np.int64)
        if state.ndim != 1:
            raise ValueError(f"Observed state must be 1-D, got shape {state.shape}")
        self.observed_state = state
        self.loss_weights = np.ones(state.size, dtype=np.float64)
        if loss_weights is not None:
            self.set_loss_weights(loss_weights)

    def get_assignment(self) -> np.ndarray:
        return self.observed_state

    def get_num_variables(self) -> int:
        return int(self.observed_state.size)

    def get_loss_weights(self) -> np.ndarray:
        return self.loss_weights

    def set_loss_weights(self, loss_weights: Sequence[float]) -> None:
        w = np.asarray(loss_weights, dtype=np.float64)
        if w.shape != self.observed_state.shape:
            raise ValueError(
                f"Loss weights have shape {w.shape}, expected {self.observed_state.shape}"
            )
        self.loss_weights = w

    def __repr__(self) -> str:
        return f"FactorGraphObservation(state={self.observed_state.tolist()})"
