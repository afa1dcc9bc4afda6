import pytest

from blochsim.model.codegen import NO_GATES_PLACEHOLDER, serialize
from blochsim.model.history import GateRecord, RawRecord, parse_record


def test_empty_history_has_placeholder():
    code = serialize([], 1)
    assert NO_GATES_PLACEHOLDER in code
    assert "qc = QuantumCircuit(1)" in code
    assert code.count("QuantumCircuit(") == 1


def test_single_x_gate():
    code = serialize(["x q[0]"], 1)
    assert "qc.x(0)" in code.splitlines()
    assert NO_GATES_PLACEHOLDER not in code


@pytest.mark.parametrize("count, declared", [(0, 1), (1, 1), (3, 3)])
def test_declares_at_least_one_qubit(count, declared):
    assert f"qc = QuantumCircuit({declared})" in serialize([], count)


def test_full_program():
    history = [
        GateRecord("h", (0,)),
        GateRecord("sdg", (1,)),
        GateRecord("cx", (0, 1)),
        GateRecord("cz", (0, 1)),
        GateRecord("swap", (0, 1)),
        GateRecord("iswap", (0, 1)),
        GateRecord("ccx", (0, 1, 2)),
        GateRecord("cswap", (0, 1, 2)),
    ]
    assert serialize(history, 3).splitlines() == [
        "from qiskit import QuantumCircuit",
        "from qiskit.circuit.library import iSwapGate",
        "qc = QuantumCircuit(3)",
        "qc.h(0)",
        "qc.sdg(1)",
        "qc.cx(0, 1)",
        "qc.cz(0, 1)",
        "qc.swap(0, 1)",
        "qc.append(iSwapGate(), [0, 1])",
        "qc.ccx(0, 1, 2)",
        "qc.cswap(0, 1, 2)",
        "print(qc)",
    ]


def test_iswap_import_only_when_needed():
    assert "iSwapGate" not in serialize(["x q[0]", "swap q[0],q[1]"], 2)


def test_unknown_records_become_comments():
    code = serialize(["x q[0]", "measure everything", RawRecord("note")], 1)
    lines = code.splitlines()
    assert "# measure everything" in lines
    assert "# note" in lines
    assert "qc.x(0)" in lines


def test_known_mnemonic_with_wrong_arity_becomes_comment():
    assert "# x q[0],q[1]" in serialize([GateRecord("x", (0, 1))], 2).splitlines()


def test_text_and_records_give_same_code():
    records = [GateRecord("t", (0,)), GateRecord("ccx", (0, 1, 2)), GateRecord("cswap", (2, 0, 1))]
    labels = [r.label for r in records]
    assert serialize(records, 3) == serialize(labels, 3)


def test_serialize_is_idempotent():
    history = ["h q[0]", "cx q[0],q[1]", "bogus"]
    assert serialize(history, 2) == serialize(history, 2)


@pytest.mark.parametrize("record, label", [
    (GateRecord("x", (2,)), "x q[2]"),
    (GateRecord("cx", (0, 1)), "cx q[0],q[1]"),
    (GateRecord("iswap", (0, 1)), "iswap q[0],q[1]"),
    (GateRecord("ccx", (0, 1, 2)), "ccx q[0],q[1] -> q[2]"),
    (GateRecord("cswap", (0, 1, 2)), "cswap q[0] ? swap q[1],q[2]"),
])
def test_labels(record, label):
    assert record.label == label
    assert parse_record(label) == record


def test_parse_is_case_and_space_tolerant():
    assert parse_record("  CX q[0], q[1] ") == GateRecord("cx", (0, 1))
    assert parse_record("CCX q[0],q[1]->q[2]") == GateRecord("ccx", (0, 1, 2))


def test_parse_unknown_keeps_text():
    assert parse_record("rx(0.5) q[0]") == RawRecord("rx(0.5) q[0]")
