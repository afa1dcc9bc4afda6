import math

import numpy as np
import pytest

pytest.importorskip("PySide6")

from blochsim.controller.animation import ManualScheduler
from blochsim.controller.simulator import QubitSimulator
from blochsim.model.codegen import serialize
from blochsim.model.history import GateRecord
from blochsim.model.state import QubitState, SimulatorState

DT = 0.05


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def simulator(scheduler):
    return QubitSimulator(scheduler=scheduler, duration=1.0)


def run(simulator, scheduler):
    scheduler.run_to_end(DT)
    assert not simulator.busy


def with_qubits(simulator, *states):
    while simulator.state.qubit_count < len(states):
        simulator.add_qubit()
    for i, (theta, phi) in enumerate(states):
        simulator.select(i)
        simulator.set_angles(theta, phi)
    simulator.select(0)


def test_starts_with_one_default_qubit(simulator):
    assert simulator.qubits == [QubitState(0.0, 0.0)]
    assert simulator.selected == 0
    assert simulator.history == []
    assert not simulator.busy


def test_x_gate_animates_then_records(simulator, scheduler):
    assert simulator.apply_gate("x")
    assert simulator.busy
    assert simulator.history == []

    scheduler.tick(0.5)
    mid = simulator.qubits[0]
    assert 0.0 < mid.theta < math.pi

    run(simulator, scheduler)
    assert simulator.qubits[0].theta == pytest.approx(math.pi)
    assert simulator.qubits[0].phi == 0.0
    assert simulator.history == [GateRecord("x", (0,))]


def test_x_twice_restores_state(simulator, scheduler):
    simulator.set_angles(1.0, 2.0)
    simulator.apply_gate("x")
    run(simulator, scheduler)
    simulator.apply_gate("x")
    run(simulator, scheduler)
    assert simulator.qubits[0].theta == pytest.approx(1.0)
    assert simulator.qubits[0].phi == pytest.approx(2.0)


def test_hadamard_on_zero_gives_plus(simulator, scheduler):
    simulator.apply_gate("h")
    run(simulator, scheduler)
    assert np.allclose(simulator.qubits[0].vector(), (1.0, 0.0, 0.0))


def test_gate_acts_on_selected_qubit(simulator, scheduler):
    simulator.add_qubit()
    simulator.select(1)
    simulator.apply_gate("y")
    run(simulator, scheduler)
    assert simulator.qubits[0] == QubitState(0.0, 0.0)
    assert simulator.qubits[1].theta == pytest.approx(math.pi)
    assert simulator.history == [GateRecord("y", (1,))]


def test_gates_are_serialized(simulator, scheduler):
    assert simulator.apply_gate("x")
    assert not simulator.apply_gate("y")
    assert not simulator.add_qubit()
    assert not simulator.set_theta(1.0)
    run(simulator, scheduler)
    assert simulator.history == [GateRecord("x", (0,))]
    assert simulator.state.qubit_count == 1


def test_cnot_with_control_zero_leaves_target(simulator, scheduler):
    with_qubits(simulator, (0.0, 0.0), (math.pi / 2, 0.3))
    before = simulator.qubits[1].vector()
    assert simulator.apply_gate("cx")
    run(simulator, scheduler)
    assert np.allclose(simulator.qubits[1].vector(), before)
    assert simulator.history == [GateRecord("cx", (0, 1))]


def test_cnot_with_control_one_flips_target(simulator, scheduler):
    with_qubits(simulator, (math.pi, 0.0), (math.pi / 2, math.pi / 2))
    simulator.apply_gate("cnot")
    run(simulator, scheduler)
    assert np.allclose(simulator.qubits[1].vector(), (0.0, -1.0, 0.0))
    assert np.allclose(simulator.qubits[0].vector(), (0.0, 0.0, -1.0))


def test_cz_with_control_one(simulator, scheduler):
    with_qubits(simulator, (math.pi, 0.0), (math.pi / 2, 0.0))
    simulator.apply_gate("cz")
    run(simulator, scheduler)
    assert np.allclose(simulator.qubits[1].vector(), (-1.0, 0.0, 0.0))


def test_ccx_needs_both_controls(simulator, scheduler):
    with_qubits(simulator, (math.pi, 0.0), (0.0, 0.0), (0.0, 0.0))
    simulator.apply_gate("ccx")
    run(simulator, scheduler)
    assert simulator.qubits[2] == QubitState(0.0, 0.0)
    assert simulator.history == [GateRecord("ccx", (0, 1, 2))]


def test_swap_twice_restores_exactly(simulator):
    with_qubits(simulator, (0.4, 1.2), (2.5, 5.0))
    original = [q.copy() for q in simulator.qubits]
    assert simulator.apply_gate("swap")
    assert not simulator.busy
    assert simulator.qubits == original[::-1]
    assert simulator.apply_gate("swap")
    assert simulator.qubits == original
    assert simulator.history == [GateRecord("swap", (0, 1))] * 2


def test_swap_takes_and_releases_the_lock(simulator):
    simulator.add_qubit()
    changes = []
    simulator.busy_changed.connect(changes.append)
    simulator.apply_gate("swap")
    assert changes == [True, False]


def test_iswap_and_cswap_are_instant(simulator):
    with_qubits(simulator, (math.pi, 0.0), (math.pi / 2, 0.0), (math.pi / 2, math.pi / 2))
    assert simulator.apply_gate("cswap")
    assert not simulator.busy
    assert np.allclose(simulator.qubits[1].vector(), (0.0, 1.0, 0.0))
    assert np.allclose(simulator.qubits[2].vector(), (1.0, 0.0, 0.0))

    assert simulator.apply_gate("iswap")
    assert np.allclose(simulator.qubits[0].vector(), (-1.0, 0.0, 0.0))
    assert np.allclose(simulator.qubits[1].vector(), (0.0, 0.0, -1.0))
    assert [r.mnemonic for r in simulator.history] == ["cswap", "iswap"]


def test_three_qubit_gate_rejected_with_two_qubits(simulator):
    with_qubits(simulator, (1.0, 1.0), (2.0, 2.0))
    before = [q.copy() for q in simulator.qubits]
    assert not simulator.apply_gate("ccx")
    assert not simulator.apply_gate("cswap")
    assert simulator.qubits == before
    assert simulator.history == []
    assert not simulator.busy


def test_two_qubit_gate_rejected_with_one_qubit(simulator):
    assert not simulator.apply_gate("cx")
    assert not simulator.can_apply("swap")
    assert simulator.can_apply("x")


def test_unknown_gate_is_ignored(simulator):
    assert not simulator.apply_gate("rx")
    assert not simulator.can_apply("rx")
    assert simulator.history == []


def test_removing_only_qubit_is_noop(simulator):
    assert not simulator.remove_selected()
    assert simulator.qubits == [QubitState(0.0, 0.0)]


def test_remove_keeps_selection_in_bounds(simulator):
    simulator.add_qubit()
    simulator.add_qubit()
    assert not simulator.add_qubit()
    assert simulator.state.qubit_count == 3
    simulator.select(2)
    assert simulator.remove_selected()
    assert simulator.selected == 1
    assert simulator.state.qubit_count == 2


def test_select_out_of_range(simulator):
    assert not simulator.select(1)
    assert simulator.selected == 0


def test_set_angles_normalizes(simulator):
    simulator.set_angles(0.0, 1.0)
    assert simulator.qubits[0] == QubitState(0.0, 0.0)
    simulator.set_angles(4.0, 1.0)
    assert simulator.qubits[0] == QubitState(math.pi, 0.0)
    simulator.set_angles_degrees(90.0, -90.0)
    assert simulator.qubits[0].theta == pytest.approx(math.pi / 2)
    assert simulator.qubits[0].phi == pytest.approx(3 * math.pi / 2)


def test_set_theta_and_phi(simulator):
    simulator.set_theta(1.0)
    simulator.set_phi(2.0)
    assert simulator.qubits[0] == QubitState(1.0, 2.0)


def test_shutdown_stops_in_place(simulator, scheduler):
    simulator.apply_gate("x")
    scheduler.tick(0.5)
    partial = simulator.qubits[0].copy()
    simulator.shutdown()
    scheduler.tick(1.0)
    assert not simulator.busy
    assert simulator.qubits[0] == partial
    assert 0.0 < partial.theta < math.pi
    assert simulator.history == []


def test_reset_during_animation(simulator, scheduler):
    simulator.add_qubit()
    simulator.select(1)
    simulator.apply_gate("x")
    scheduler.tick(0.5)
    simulator.reset()
    scheduler.tick(1.0)
    assert not simulator.busy
    assert simulator.qubits == [QubitState(0.0, 0.0)]
    assert simulator.selected == 0
    assert simulator.history == []
    assert simulator.last_gate is None


def test_signals(simulator, scheduler):
    busy, applied, histories = [], [], []
    simulator.busy_changed.connect(busy.append)
    simulator.gate_applied.connect(applied.append)
    simulator.history_changed.connect(lambda h: histories.append(len(h)))
    simulator.apply_gate("t")
    run(simulator, scheduler)
    assert busy == [True, False]
    assert applied == ["t"]
    assert histories == [1]
    assert simulator.last_gate.mnemonic == "t"


def test_zero_duration_applies_at_once():
    simulator = QubitSimulator(scheduler=ManualScheduler(), duration=0.0)
    assert simulator.apply_gate("x")
    assert not simulator.busy
    assert simulator.qubits[0].theta == pytest.approx(math.pi)
    assert simulator.history == [GateRecord("x", (0,))]


def test_code_follows_history(simulator, scheduler):
    simulator.apply_gate("h")
    run(simulator, scheduler)
    assert simulator.code() == serialize(["h q[0]"], 1)
    assert "qc.h(0)" in simulator.code()


def test_copy_code_hands_text_to_clipboard(scheduler):
    copied = []
    simulator = QubitSimulator(scheduler=scheduler, clipboard=copied.append)
    assert simulator.copy_code() == copied[0]


def test_copy_code_swallows_clipboard_errors(scheduler):
    def broken(_text):
        raise OSError("no clipboard")

    simulator = QubitSimulator(SimulatorState(), scheduler=scheduler, clipboard=broken)
    code = simulator.copy_code()
    assert "# (no gates applied yet)" in code
    assert simulator.qubits == [QubitState(0.0, 0.0)]


def test_theta_edit_keeps_exact_phi(simulator):
    simulator.set_angles(1.0, 0.65)
    assert simulator.set_theta_degrees(60.0)
    assert simulator.qubits[0].theta == pytest.approx(math.pi / 3)
    assert simulator.qubits[0].phi == 0.65


def test_phi_edit_keeps_exact_theta(simulator):
    simulator.set_angles(1.234567, 0.5)
    assert simulator.set_phi_degrees(90.0)
    assert simulator.qubits[0].theta == 1.234567
    assert simulator.qubits[0].phi == pytest.approx(math.pi / 2)


def test_degree_edits_rejected_while_busy(simulator, scheduler):
    simulator.apply_gate("x")
    assert not simulator.set_theta_degrees(45.0)
    assert not simulator.set_phi_degrees(45.0)
    run(simulator, scheduler)
