"""
Circuit Code Export
===================
Renders the gate history as a Qiskit snippet that rebuilds the same circuit.

The output is a pure function of (history, qubit count): calling `serialize`
twice with the same arguments returns the same string.
"""
from __future__ import annotations

from typing import Iterable

from blochsim.model.history import GateRecord, HistoryRecord, as_record

SINGLE_QUBIT_MNEMONICS = frozenset({"x", "y", "z", "h", "s", "sdg", "t", "tdg"})
NO_GATES_PLACEHOLDER = "# (no gates applied yet)"


def _record_to_line(record: HistoryRecord) -> str:
    if not isinstance(record, GateRecord):
        return f"# {record.label}"

    match record.mnemonic, record.operands:
        case (m, (q,)) if m in SINGLE_QUBIT_MNEMONICS:
            return f"qc.{m}({q})"
        case ("cx" | "cz" | "swap") as m, (a, b):
            return f"qc.{m}({a}, {b})"
        case "iswap", (a, b):
            return f"qc.append(iSwapGate(), [{a}, {b}])"
        case "ccx", (c1, c2, t):
            return f"qc.ccx({c1}, {c2}, {t})"
        case "cswap", (c, a, b):
            return f"qc.cswap({c}, {a}, {b})"
        case _:
            return f"# {record.label}"


def serialize(history: Iterable[HistoryRecord | str], qubit_count: int) -> str:
    """
    Build Qiskit code for the given history.

    Args:
        history: Gate records in the order they were applied. Text labels
            ("x q[0]") are accepted and parsed.
        qubit_count: Number of qubits currently shown, the circuit declares
            at least one.

    Returns:
        The code as a single newline-joined string.
    """
    records = [as_record(entry) for entry in history]

    lines = ["from qiskit import QuantumCircuit"]
    if any(isinstance(r, GateRecord) and r.mnemonic == "iswap" and len(r.operands) == 2 for r in records):
        lines.append("from qiskit.circuit.library import iSwapGate")
    lines.append(f"qc = QuantumCircuit({max(1, qubit_count or 1)})")

    if not records:
        lines.append(NO_GATES_PLACEHOLDER)

    lines.extend(_record_to_line(r) for r in records)
    lines.append("print(qc)")
    return "\n".join(lines)
