"""
Code Panel
Read-only Qiskit snippet mirroring the applied gates, with a Copy button.
"""
from __future__ import annotations

from typing import Optional

from PySide6.QtCore import Signal
from PySide6.QtGui import QFontDatabase
from PySide6.QtWidgets import QGroupBox, QHBoxLayout, QLabel, QPlainTextEdit, QPushButton, QVBoxLayout, QWidget


class CodePanel(QGroupBox):
    copy_requested = Signal()

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__("Code (IBM Quantum / Qiskit-like)", parent)

        layout = QVBoxLayout(self)

        desc = QLabel(
            "This snippet mirrors the actions you take above. "
            "Copy and paste into a Python notebook with Qiskit installed."
        )
        desc.setWordWrap(True)
        layout.addWidget(desc)

        self.editor = QPlainTextEdit()
        self.editor.setReadOnly(True)
        self.editor.setFont(QFontDatabase.systemFont(QFontDatabase.FixedFont))
        layout.addWidget(self.editor)

        row = QHBoxLayout()
        row.addStretch()
        self.btn_copy = QPushButton("Copy")
        self.btn_copy.clicked.connect(self.copy_requested.emit)
        row.addWidget(self.btn_copy)
        layout.addLayout(row)

        notes = QLabel(
            "Single-qubit gates: X, Y, Z, H, S, S†, T, T†.\n"
            "Two-qubit gates: CNOT, CZ, SWAP, iSWAP.\n"
            "Three-qubit gates: CCX (Toffoli), CSWAP (Fredkin)."
        )
        notes.setStyleSheet("color: grey;")
        layout.addWidget(notes)

    def set_code(self, code: str) -> None:
        if self.editor.toPlainText() != code:
            self.editor.setPlainText(code)
