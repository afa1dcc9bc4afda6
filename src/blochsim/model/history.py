"""
Gate History Records
====================
Every applied gate leaves one record in the history log. The record is built
when the gate is applied (mnemonic + operand indices) instead of being
re-parsed from display text later. `label` gives the canonical text form that
is shown to the user, `parse_record` turns such text back into a record.

Classes:
    GateRecord: A recognised gate invocation.
    RawRecord: Free text that could not be recognised (kept verbatim).
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class GateRecord:
    """A gate mnemonic (lower case, e.g. "cx") and its operand qubit indices."""
    mnemonic: str
    operands: tuple[int, ...]

    @property
    def label(self) -> str:
        ops = [f"q[{i}]" for i in self.operands]
        match self.mnemonic, len(ops):
            case "ccx", 3:
                return f"ccx {ops[0]},{ops[1]} -> {ops[2]}"
            case "cswap", 3:
                return f"cswap {ops[0]} ? swap {ops[1]},{ops[2]}"
            case _:
                return f"{self.mnemonic} {','.join(ops)}"

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True)
class RawRecord:
    """History entry that is not a known gate invocation."""
    text: str

    @property
    def label(self) -> str:
        return self.text

    def __str__(self) -> str:
        return self.text


HistoryRecord = Union[GateRecord, RawRecord]

_Q = r"q\[(\d+)\]"

_PATTERNS: list[tuple[re.Pattern[str], str | None]] = [
    (re.compile(rf"^(x|y|z|h|s|sdg|t|tdg)\s+{_Q}$", re.IGNORECASE), None),
    (re.compile(rf"^(cx|cz|swap|iswap)\s+{_Q}\s*,\s*{_Q}$", re.IGNORECASE), None),
    (re.compile(rf"^ccx\s+{_Q}\s*,\s*{_Q}\s*->\s*{_Q}$", re.IGNORECASE), "ccx"),
    (re.compile(rf"^cswap\s+{_Q}\s*\?\s*swap\s+{_Q}\s*,\s*{_Q}$", re.IGNORECASE), "cswap"),
]


def parse_record(text: str) -> HistoryRecord:
    """
    Parse a history label such as "cx q[0],q[1]".

    Unrecognised text is returned as a RawRecord, never raises.
    """
    stripped = text.strip()
    for pattern, fixed_mnemonic in _PATTERNS:
        m = pattern.match(stripped)
        if not m:
            continue
        groups = m.groups()
        if fixed_mnemonic is None:
            mnemonic, indices = groups[0].lower(), groups[1:]
        else:
            mnemonic, indices = fixed_mnemonic, groups
        return GateRecord(mnemonic, tuple(int(i) for i in indices))
    return RawRecord(text)


def as_record(entry: HistoryRecord | str) -> HistoryRecord:
    """Accept either a record or its text label."""
    if isinstance(entry, (GateRecord, RawRecord)):
        return entry
    return parse_record(str(entry))
