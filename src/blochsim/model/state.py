"""
Simulator State (Data Model)
============================
This module defines the central data structure for the running simulator.

Why is this file needed?
------------------------
1. State Management: It holds the qubits, the selection cursor and the gate
   history in one place.
2. Decoupling: Views read from this object; the controller writes to it.

Each qubit is stored as its own point on a Bloch sphere. There is no joint
state vector, so entangled states cannot be represented.

Classes:
    QubitState: (theta, phi) of a single qubit.
    SimulatorState: The main container class.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from blochsim.config import MAX_QUBITS, MIN_QUBITS
from blochsim.model.coordinates import (
    angles_from_vector, clamp_theta, normalize_angles, to_cartesian, wrap_phi
)
from blochsim.model.history import HistoryRecord

if TYPE_CHECKING:
    import numpy as np
    import numpy.typing as npt

logger = logging.getLogger(__name__)


@dataclass
class QubitState:
    """A qubit as a point on the Bloch sphere. Defaults to |0⟩."""
    theta: float = 0.0
    phi: float = 0.0

    @classmethod
    def from_vector(cls, vector: npt.ArrayLike) -> QubitState:
        theta, phi = angles_from_vector(vector)
        return cls(theta, phi)

    @classmethod
    def from_angles(cls, theta: float, phi: float) -> QubitState:
        """Clamp theta, wrap phi and apply the pole rule."""
        t, p = normalize_angles(clamp_theta(theta), wrap_phi(phi))
        return cls(t, p)

    def vector(self) -> npt.NDArray[np.float64]:
        return to_cartesian(self.theta, self.phi)

    def prob_one(self) -> float:
        """Probability of reading |1⟩, (1 - cos theta) / 2."""
        return (1.0 - math.cos(self.theta)) / 2.0

    def copy(self) -> QubitState:
        return QubitState(self.theta, self.phi)

    @property
    def theta_deg(self) -> float:
        return math.degrees(self.theta)

    @property
    def phi_deg(self) -> float:
        return math.degrees(self.phi)


@dataclass
class SimulatorState:
    """
    Ordered qubits (1 to MAX_QUBITS), the selected index and the history log.
    Pass this instance to the controller and the views.
    """
    qubits: list[QubitState] = field(default_factory=lambda: [QubitState()])
    selected: int = 0
    history: list[HistoryRecord] = field(default_factory=list)

    @property
    def qubit_count(self) -> int:
        return len(self.qubits)

    @property
    def selected_qubit(self) -> QubitState:
        return self.qubits[self.selected]

    def can_add(self) -> bool:
        return len(self.qubits) < MAX_QUBITS

    def can_remove(self) -> bool:
        return len(self.qubits) > MIN_QUBITS

    def select(self, index: int) -> bool:
        if not 0 <= index < len(self.qubits):
            return False
        self.selected = index
        return True

    def add_qubit(self) -> bool:
        """Append a |0⟩ qubit. Returns False at the qubit limit."""
        if not self.can_add():
            return False
        self.qubits.append(QubitState())
        return True

    def remove_selected(self) -> bool:
        """
        Remove the selected qubit and keep the cursor in bounds.
        The collection is never emptied: with one qubit left this is a no-op.
        """
        if not self.can_remove():
            return False
        del self.qubits[self.selected]
        self.selected = min(self.selected, len(self.qubits) - 1)
        return True

    def set_qubit(self, index: int, qubit: QubitState) -> None:
        self.qubits[index] = qubit

    def append_history(self, record: HistoryRecord) -> None:
        self.history.append(record)

    def reset(self) -> None:
        """Back to a single |0⟩ qubit with an empty history."""
        self.qubits = [QubitState()]
        self.selected = 0
        self.history = []
        logger.info("Simulator state has been reset.")
