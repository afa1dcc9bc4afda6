"""
Simulator Controller
====================
The single entry point for everything the user can do to the qubits.

Why is this file needed?
------------------------
1. Dispatch: It resolves gate names, checks preconditions and applies the
   gate through the animation scheduler (or at once for the swap family).
2. Signals: It notifies the views about state changes using Qt Signals, the
   views never write to the SimulatorState directly.

Rejected requests (unknown gate, too few qubits, animation in flight) are
no-ops: nothing changes and nothing is logged to the history.
"""
from __future__ import annotations

import logging
import math
from typing import Callable, Optional

from PySide6.QtCore import QObject, Signal

from blochsim.config import ANIMATION_DURATION_S
from blochsim.controller.animation import AnimationScheduler, BusyLock, QtAnimationScheduler
from blochsim.model.codegen import serialize
from blochsim.model.gates import (
    AssignmentPlan, GateDescriptor, RotationPlan, UnknownGateError, plan_gate, resolve_gate
)
from blochsim.model.history import GateRecord
from blochsim.model.rotation import rotate_about
from blochsim.model.state import QubitState, SimulatorState

logger = logging.getLogger(__name__)


class QubitSimulator(QObject):
    """Central controller with signals for view sync."""
    qubits_changed = Signal(object)     # list[QubitState]
    selection_changed = Signal(int)
    history_changed = Signal(object)    # list[HistoryRecord]
    busy_changed = Signal(bool)
    gate_applied = Signal(str)          # gate mnemonic

    def __init__(
        self,
        state: Optional[SimulatorState] = None,
        scheduler: Optional[AnimationScheduler] = None,
        duration: float = ANIMATION_DURATION_S,
        clipboard: Optional[Callable[[str], None]] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self.state: SimulatorState = state if state is not None else SimulatorState()
        self.scheduler: AnimationScheduler = scheduler if scheduler is not None else QtAnimationScheduler(self)
        self.duration = duration
        self.clipboard = clipboard
        self.last_gate: Optional[GateDescriptor] = None
        self._lock = BusyLock(on_change=self.busy_changed.emit)

    # ------------------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------------------

    @property
    def busy(self) -> bool:
        return self._lock.locked

    @property
    def qubits(self) -> list[QubitState]:
        return self.state.qubits

    @property
    def selected(self) -> int:
        return self.state.selected

    @property
    def history(self) -> list:
        return self.state.history

    def can_apply(self, name: str) -> bool:
        """True if `apply_gate(name)` would currently be accepted."""
        try:
            gate = resolve_gate(name)
        except UnknownGateError:
            return False
        return not self.busy and self.state.qubit_count >= gate.min_qubits

    def code(self) -> str:
        return serialize(self.state.history, self.state.qubit_count)

    # ------------------------------------------------------------------------------
    # Direct state edits
    # ------------------------------------------------------------------------------

    def set_angles(self, theta: float, phi: float) -> bool:
        """Set the selected qubit's (theta, phi) in radians."""
        if self.busy:
            logger.debug("Ignoring angle edit while a gate is animating.")
            return False
        self.state.set_qubit(self.state.selected, QubitState.from_angles(theta, phi))
        self.qubits_changed.emit(self.state.qubits)
        return True

    def set_theta(self, theta: float) -> bool:
        return self.set_angles(theta, self.state.selected_qubit.phi)

    def set_phi(self, phi: float) -> bool:
        return self.set_angles(self.state.selected_qubit.theta, phi)

    def set_angles_degrees(self, theta_deg: float, phi_deg: float) -> bool:
        return self.set_angles(math.radians(theta_deg), math.radians(phi_deg))

    def set_theta_degrees(self, theta_deg: float) -> bool:
        """Polar edit from the UI; the exact azimuth is kept."""
        return self.set_theta(math.radians(theta_deg))

    def set_phi_degrees(self, phi_deg: float) -> bool:
        return self.set_phi(math.radians(phi_deg))

    def select(self, index: int) -> bool:
        if not self.state.select(index):
            logger.debug(f"Selection index {index} out of range.")
            return False
        self.selection_changed.emit(self.state.selected)
        return True

    def add_qubit(self) -> bool:
        if self.busy or not self.state.add_qubit():
            return False
        logger.info(f"Added qubit q[{self.state.qubit_count - 1}].")
        self.qubits_changed.emit(self.state.qubits)
        return True

    def remove_selected(self) -> bool:
        if self.busy:
            return False
        removed = self.state.selected
        if not self.state.remove_selected():
            return False
        logger.info(f"Removed qubit q[{removed}].")
        self.qubits_changed.emit(self.state.qubits)
        self.selection_changed.emit(self.state.selected)
        return True

    def reset(self) -> None:
        """One |0⟩ qubit, empty history, no animation in flight."""
        self.scheduler.cancel()
        self._lock.release()
        self.state.reset()
        self.last_gate = None
        self.qubits_changed.emit(self.state.qubits)
        self.selection_changed.emit(self.state.selected)
        self.history_changed.emit(self.state.history)

    # ------------------------------------------------------------------------------
    # Gates
    # ------------------------------------------------------------------------------

    def apply_gate(self, name: str) -> bool:
        """
        Apply the named gate.

        Returns:
            True if the gate was accepted. Animated gates reach their final
            state and their history entry only when the animation completes.
        """
        try:
            gate = resolve_gate(name)
        except UnknownGateError:
            logger.warning(f"Unknown gate '{name}' ignored.")
            return False

        if self.busy:
            logger.debug(f"Gate '{gate.mnemonic}' ignored: animation in flight.")
            return False
        if self.state.qubit_count < gate.min_qubits:
            logger.debug(
                f"Gate '{gate.mnemonic}' ignored: needs {gate.min_qubits} qubits, "
                f"have {self.state.qubit_count}."
            )
            return False

        plan, record = plan_gate(gate, self.state.qubits, self.state.selected)
        self.last_gate = gate

        match plan:
            case RotationPlan():
                self._animate_rotation(plan, record)
            case AssignmentPlan():
                with self._lock.hold():
                    for index, qubit in plan.updates.items():
                        self.state.set_qubit(index, qubit)
                    self.qubits_changed.emit(self.state.qubits)
                self._commit(record)
        return True

    def _animate_rotation(self, plan: RotationPlan, record: GateRecord) -> None:
        if not self._lock.try_acquire():
            return
        # The sweep always starts from the state at dispatch time
        snapshot = self.state.qubits[plan.target].vector()
        target = plan.target

        def on_frame(alpha: float) -> None:
            v = rotate_about(snapshot, plan.axis, alpha * plan.angle)
            self.state.set_qubit(target, QubitState.from_vector(v))
            self.qubits_changed.emit(self.state.qubits)

        def on_complete() -> None:
            self._lock.release()
            self._commit(record)

        try:
            self.scheduler.start(self.duration, on_frame, on_complete)
        except Exception:
            self._lock.release()
            raise

    def _commit(self, record: GateRecord) -> None:
        self.state.append_history(record)
        logger.info(f"Applied {record.label}")
        self.history_changed.emit(self.state.history)
        self.gate_applied.emit(record.mnemonic)

    # ------------------------------------------------------------------------------
    # Export & teardown
    # ------------------------------------------------------------------------------

    def copy_code(self) -> str:
        """Serialize the history and hand it to the clipboard. Copy errors are ignored."""
        text = self.code()
        if self.clipboard is not None:
            try:
                self.clipboard(text)
            except Exception as e:
                logger.debug(f"Clipboard copy failed: {e}")
        return text

    def shutdown(self) -> None:
        """Stop any running animation in place and release the lock."""
        self.scheduler.cancel()
        self._lock.release()
