"""
Gate Matrix Panel
Shows the computational-basis matrix of the last applied gate.
"""
from __future__ import annotations

from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QGridLayout, QGroupBox, QLabel, QVBoxLayout, QWidget

from blochsim.model.gates import GateDescriptor


class GateMatrixPanel(QGroupBox):
    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__("Gate Matrix Representation", parent)

        layout = QVBoxLayout(self)
        self.lbl_name = QLabel()
        self.lbl_name.setStyleSheet("font-weight: bold;")
        layout.addWidget(self.lbl_name)

        self.lbl_description = QLabel()
        self.lbl_description.setWordWrap(True)
        layout.addWidget(self.lbl_description)

        self._grid_host = QWidget()
        self._grid = QGridLayout(self._grid_host)
        self._grid.setSpacing(6)
        layout.addWidget(self._grid_host)

        note = QLabel("This matrix represents the quantum gate transformation in the computational basis.")
        note.setWordWrap(True)
        note.setStyleSheet("color: grey;")
        layout.addWidget(note)

        self.set_gate(None)

    def set_gate(self, gate: Optional[GateDescriptor]) -> None:
        self.setVisible(gate is not None)
        self._clear_grid()
        if gate is None:
            return

        self.lbl_name.setText(gate.name)
        self.lbl_description.setText(gate.description)
        for row, cells in enumerate(gate.matrix):
            for col, cell in enumerate(cells):
                lbl = QLabel(cell)
                lbl.setAlignment(Qt.AlignCenter)
                lbl.setStyleSheet("font-family: monospace;")
                self._grid.addWidget(lbl, row, col)

    def _clear_grid(self) -> None:
        while self._grid.count():
            item = self._grid.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()
