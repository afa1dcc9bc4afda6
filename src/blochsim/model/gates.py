"""
Gate Catalog
============
Maps each named gate to what it does to the per-qubit Bloch vectors.

Single-qubit gates are plain rotations of one vector. The multi-qubit gates
are approximations: without a joint state vector a controlled gate cannot
act "conditionally", so the rotation of the target is scaled by the
|1⟩-probability of the control(s) instead. SWAP is exact because it only
relabels the two qubits.

Every GateDescriptor also carries the textbook matrix of the gate in the
computational basis, for display only.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import StrEnum
from typing import Optional, Sequence, Union

import numpy as np

from blochsim.config import NORM_TOLERANCE
from blochsim.model.history import GateRecord
from blochsim.model.rotation import X_AXIS, Y_AXIS, Z_AXIS, rotate_z
from blochsim.model.state import QubitState

logger = logging.getLogger(__name__)

H_AXIS = (1.0, 0.0, 1.0)

Matrix = tuple[tuple[str, ...], ...]


class UnknownGateError(KeyError):
    """Raised when a gate name is not in the catalog."""


class GateKind(StrEnum):
    ROTATION = "rotation"
    CONTROLLED_ROTATION = "controlled_rotation"
    SWAP = "swap"
    ISWAP = "iswap"
    CSWAP = "cswap"


@dataclass(frozen=True)
class GateDescriptor:
    """
    Static description of a gate.

    For ROTATION gates `operands` is empty and the gate acts on the selected
    qubit. For all others `operands` lists the fixed qubit indices, controls
    first and target(s) last.
    """
    mnemonic: str
    name: str
    arity: int
    kind: GateKind
    description: str
    matrix: Matrix
    axis: Optional[tuple[float, float, float]] = None
    angle: float = 0.0
    operands: tuple[int, ...] = ()

    @property
    def animated(self) -> bool:
        return self.kind in (GateKind.ROTATION, GateKind.CONTROLLED_ROTATION)

    @property
    def controls(self) -> tuple[int, ...]:
        if self.kind is GateKind.CONTROLLED_ROTATION:
            return self.operands[:-1]
        if self.kind is GateKind.CSWAP:
            return self.operands[:1]
        return ()

    @property
    def min_qubits(self) -> int:
        """Qubits that must exist before the gate can be applied."""
        if not self.operands:
            return self.arity
        return max(self.arity, max(self.operands) + 1)


def _permutation_matrix(size: int, swapped: tuple[int, int]) -> Matrix:
    """Identity of `size` with rows `swapped` exchanged, as display strings."""
    order = list(range(size))
    a, b = swapped
    order[a], order[b] = order[b], order[a]
    return tuple(
        tuple("1" if col == order[row] else "0" for col in range(size))
        for row in range(size)
    )


def _rotation(mnemonic: str, name: str, axis, angle: float, description: str, matrix: Matrix) -> GateDescriptor:
    return GateDescriptor(
        mnemonic=mnemonic, name=name, arity=1, kind=GateKind.ROTATION,
        description=description, matrix=matrix, axis=axis, angle=angle,
    )


GATES: dict[str, GateDescriptor] = {
    g.mnemonic: g for g in (
        _rotation("x", "X Gate (NOT)", X_AXIS, math.pi,
                  "Flips the qubit state (|0⟩ ↔ |1⟩)",
                  (("0", "1"), ("1", "0"))),
        _rotation("y", "Y Gate", Y_AXIS, math.pi,
                  "180° rotation around the Y-axis",
                  (("0", "-i"), ("i", "0"))),
        _rotation("z", "Z Gate", Z_AXIS, math.pi,
                  "180° rotation around the Z-axis",
                  (("1", "0"), ("0", "-1"))),
        _rotation("h", "H Gate (Hadamard)", H_AXIS, math.pi,
                  "Creates superposition state",
                  (("1/√2", "1/√2"), ("1/√2", "-1/√2"))),
        _rotation("s", "S Gate", Z_AXIS, math.pi / 2,
                  "90° rotation around Z-axis",
                  (("1", "0"), ("0", "i"))),
        _rotation("sdg", "S† Gate", Z_AXIS, -math.pi / 2,
                  "-90° rotation around Z-axis",
                  (("1", "0"), ("0", "-i"))),
        _rotation("t", "T Gate", Z_AXIS, math.pi / 4,
                  "45° rotation around Z-axis",
                  (("1", "0"), ("0", "e^(iπ/4)"))),
        _rotation("tdg", "T† Gate", Z_AXIS, -math.pi / 4,
                  "-45° rotation around Z-axis",
                  (("1", "0"), ("0", "e^(-iπ/4)"))),
        GateDescriptor(
            mnemonic="cx", name="CNOT Gate", arity=2, kind=GateKind.CONTROLLED_ROTATION,
            description="Controlled NOT operation",
            matrix=_permutation_matrix(4, (2, 3)),
            axis=X_AXIS, angle=math.pi, operands=(0, 1),
        ),
        GateDescriptor(
            mnemonic="cz", name="CZ Gate", arity=2, kind=GateKind.CONTROLLED_ROTATION,
            description="Controlled Z operation",
            matrix=(("1", "0", "0", "0"), ("0", "1", "0", "0"),
                    ("0", "0", "1", "0"), ("0", "0", "0", "-1")),
            axis=Z_AXIS, angle=math.pi, operands=(0, 1),
        ),
        GateDescriptor(
            mnemonic="swap", name="SWAP Gate", arity=2, kind=GateKind.SWAP,
            description="Exchanges two qubit states",
            matrix=_permutation_matrix(4, (1, 2)),
            operands=(0, 1),
        ),
        GateDescriptor(
            mnemonic="iswap", name="iSWAP Gate", arity=2, kind=GateKind.ISWAP,
            description="i times SWAP operation",
            matrix=(("1", "0", "0", "0"), ("0", "0", "i", "0"),
                    ("0", "i", "0", "0"), ("0", "0", "0", "1")),
            operands=(0, 1),
        ),
        GateDescriptor(
            mnemonic="ccx", name="CCX Gate (Toffoli)", arity=3, kind=GateKind.CONTROLLED_ROTATION,
            description="Controlled Controlled NOT: flips target qubit only when both control qubits are |1⟩",
            matrix=_permutation_matrix(8, (6, 7)),
            axis=X_AXIS, angle=math.pi, operands=(0, 1, 2),
        ),
        GateDescriptor(
            mnemonic="cswap", name="CSWAP Gate (Fredkin)", arity=3, kind=GateKind.CSWAP,
            description="Controlled SWAP: swaps target qubits only when control qubit is |1⟩",
            matrix=_permutation_matrix(8, (5, 6)),
            operands=(0, 1, 2),
        ),
    )
}

ALIASES: dict[str, str] = {
    "not": "x",
    "hadamard": "h",
    "s†": "sdg",
    "s+": "sdg",
    "t†": "tdg",
    "t+": "tdg",
    "cnot": "cx",
    "toffoli": "ccx",
    "fredkin": "cswap",
}


def resolve_gate(name: str) -> GateDescriptor:
    """Look up a gate by mnemonic or alias, case-insensitively."""
    key = name.strip().lower()
    key = ALIASES.get(key, key)
    try:
        return GATES[key]
    except KeyError:
        raise UnknownGateError(name) from None


# ------------------------------------------------------------------------------
# Gate plans
# ------------------------------------------------------------------------------

@dataclass(frozen=True)
class RotationPlan:
    """Rotate qubit `target` about `axis` by `angle`; animated."""
    target: int
    axis: tuple[float, float, float]
    angle: float


@dataclass(frozen=True)
class AssignmentPlan:
    """Replace the listed qubits with new states at once."""
    updates: dict[int, QubitState]


GatePlan = Union[RotationPlan, AssignmentPlan]


def controlled_weight(qubits: Sequence[QubitState], controls: Sequence[int]) -> float:
    """Product of the controls' |1⟩-probabilities."""
    weight = 1.0
    for c in controls:
        weight *= qubits[c].prob_one()
    return weight


def swap_states(a: QubitState, b: QubitState) -> tuple[QubitState, QubitState]:
    return b.copy(), a.copy()


def iswap_states(a: QubitState, b: QubitState) -> tuple[QubitState, QubitState]:
    """Each qubit takes the other's pre-swap vector turned by π/2 about Z."""
    new_a = QubitState.from_vector(rotate_z(b.vector(), math.pi / 2))
    new_b = QubitState.from_vector(rotate_z(a.vector(), math.pi / 2))
    return new_a, new_b


def blend_toward(source: np.ndarray, other: np.ndarray, k: float) -> np.ndarray:
    """Linear interpolation from `source` toward `other`, renormalized to unit length."""
    v = (1.0 - k) * source + k * other
    length = float(np.linalg.norm(v))
    # antipodal vectors meet at the origin halfway, keep the source direction
    if length < NORM_TOLERANCE:
        return source / float(np.linalg.norm(source))
    return v / length


def cswap_states(control: QubitState, a: QubitState, b: QubitState) -> tuple[QubitState, QubitState]:
    """Blend the two targets toward each other by the control's |1⟩-probability."""
    p = control.prob_one()
    va, vb = a.vector(), b.vector()
    return (
        QubitState.from_vector(blend_toward(va, vb, p)),
        QubitState.from_vector(blend_toward(vb, va, p)),
    )


def plan_gate(gate: GateDescriptor, qubits: Sequence[QubitState], selected: int) -> tuple[GatePlan, GateRecord]:
    """
    Work out what `gate` does to the current qubits.

    Parameters that depend on the controls are evaluated here, once.

    Raises:
        ValueError: If there are not enough qubits for the gate.
    """
    if len(qubits) < gate.min_qubits:
        raise ValueError(f"Gate '{gate.mnemonic}' needs {gate.min_qubits} qubits, have {len(qubits)}.")

    match gate.kind:
        case GateKind.ROTATION:
            plan: GatePlan = RotationPlan(selected, gate.axis, gate.angle)
            operands: tuple[int, ...] = (selected,)
        case GateKind.CONTROLLED_ROTATION:
            weight = controlled_weight(qubits, gate.controls)
            plan = RotationPlan(gate.operands[-1], gate.axis, gate.angle * weight)
            operands = gate.operands
        case GateKind.SWAP:
            i, j = gate.operands
            new_i, new_j = swap_states(qubits[i], qubits[j])
            plan = AssignmentPlan({i: new_i, j: new_j})
            operands = gate.operands
        case GateKind.ISWAP:
            i, j = gate.operands
            new_i, new_j = iswap_states(qubits[i], qubits[j])
            plan = AssignmentPlan({i: new_i, j: new_j})
            operands = gate.operands
        case GateKind.CSWAP:
            c, i, j = gate.operands
            new_i, new_j = cswap_states(qubits[c], qubits[i], qubits[j])
            plan = AssignmentPlan({i: new_i, j: new_j})
            operands = gate.operands

    logger.debug(f"Planned {gate.mnemonic} on {operands}: {plan}")
    return plan, GateRecord(gate.mnemonic, operands)
