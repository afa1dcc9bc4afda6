"""
Main Application Window
=======================
The primary GUI container: Bloch spheres on the left, controls, gate matrix
and code export on the right.

Why is this file needed?
------------------------
1. Layout: It organizes the high-level visual structure of the application.
2. Routing: It connects buttons and sliders to the QubitSimulator controller
   and repaints whenever the controller signals a change.
"""
from __future__ import annotations

import logging

from PySide6.QtCore import Qt
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QGridLayout, QGroupBox, QHBoxLayout, QLabel, QMainWindow, QPushButton,
    QScrollArea, QSlider, QSplitter, QVBoxLayout, QWidget
)

from blochsim.config import MAX_QUBITS, VISIBLE_APP_NAME
from blochsim.controller.simulator import QubitSimulator
from blochsim.model.state import QubitState
from blochsim.view.widgets.bloch_sphere import BlochSphereWidget
from blochsim.view.widgets.code_panel import CodePanel
from blochsim.view.widgets.gate_matrix import GateMatrixPanel

logger = logging.getLogger(__name__)

# Sliders work in half-degree steps
SLIDER_STEPS_PER_DEGREE = 2

SINGLE_QUBIT_BUTTONS = [("X", "x"), ("Y", "y"), ("Z", "z"), ("H", "h"),
                        ("S", "s"), ("S†", "sdg"), ("T", "t"), ("T†", "tdg")]
TWO_QUBIT_BUTTONS = [("CNOT (q0→q1)", "cx"), ("CZ (q0→q1)", "cz"),
                     ("SWAP (q0↔q1)", "swap"), ("iSWAP (q0↔q1)", "iswap")]
THREE_QUBIT_BUTTONS = [("CCX (q0,q1→q2)", "ccx"), ("CSWAP (q0? q1↔q2)", "cswap")]


def qubit_caption(index: int, qubit: QubitState) -> str:
    return f"q[{index}] — θ {qubit.theta_deg:.1f}°, φ {qubit.phi_deg:.1f}°"


class MainWindow(QMainWindow):
    def __init__(self, simulator: QubitSimulator) -> None:
        super().__init__()
        self.simulator = simulator
        self.setWindowTitle(VISIBLE_APP_NAME)
        self.resize(1400, 900)

        self._spheres: list[BlochSphereWidget] = []
        self._sphere_buttons: list[QPushButton] = []
        self._gate_buttons: dict[str, QPushButton] = {}

        splitter = QSplitter(Qt.Horizontal)
        self.setCentralWidget(splitter)

        # --- LEFT SIDE: Bloch spheres ---
        self._sphere_host = QWidget()
        self._sphere_grid = QGridLayout(self._sphere_host)
        splitter.addWidget(self._sphere_host)

        # --- RIGHT SIDE: Controls ---
        right = QWidget()
        right_layout = QVBoxLayout(right)
        right_layout.addWidget(self._build_state_controls())
        right_layout.addWidget(self._build_gate_controls())

        self.matrix_panel = GateMatrixPanel()
        right_layout.addWidget(self.matrix_panel)

        self.code_panel = CodePanel()
        self.code_panel.copy_requested.connect(self.simulator.copy_code)
        right_layout.addWidget(self.code_panel)
        right_layout.addStretch()

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setWidget(right)
        splitter.addWidget(scroll)
        splitter.setSizes([900, 500])

        # --- Controller signals ---
        self.simulator.qubits_changed.connect(self.on_qubits_changed)
        self.simulator.selection_changed.connect(lambda _: self.on_qubits_changed())
        self.simulator.history_changed.connect(self.on_history_changed)
        self.simulator.busy_changed.connect(lambda _: self.refresh_enabled())
        self.simulator.gate_applied.connect(lambda _: self.matrix_panel.set_gate(self.simulator.last_gate))

        self.on_qubits_changed()
        self.on_history_changed()

    # ------------------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------------------

    def _build_state_controls(self) -> QGroupBox:
        grp = QGroupBox("Bloch Sphere")
        layout = QVBoxLayout(grp)

        self.lbl_active = QLabel()
        self.lbl_active.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.lbl_active)

        self.slider_theta, self.lbl_theta = self._add_slider(layout, "θ (0°–180°)", 180)
        self.slider_phi, self.lbl_phi = self._add_slider(layout, "φ (0°–360°)", 360)
        self.slider_theta.valueChanged.connect(self.on_theta_slider_changed)
        self.slider_phi.valueChanged.connect(self.on_phi_slider_changed)

        row = QHBoxLayout()
        self.btn_add = QPushButton("Add qubit")
        self.btn_add.clicked.connect(self.simulator.add_qubit)
        row.addWidget(self.btn_add)

        self.btn_remove = QPushButton("Remove selected")
        self.btn_remove.clicked.connect(self.simulator.remove_selected)
        row.addWidget(self.btn_remove)

        self.btn_reset = QPushButton("Reset |0⟩")
        self.btn_reset.clicked.connect(self.simulator.reset)
        row.addWidget(self.btn_reset)
        layout.addLayout(row)
        return grp

    @staticmethod
    def _add_slider(layout: QVBoxLayout, title: str, max_degrees: int) -> tuple[QSlider, QLabel]:
        row = QHBoxLayout()
        row.addWidget(QLabel(title))
        slider = QSlider(Qt.Horizontal)
        slider.setRange(0, max_degrees * SLIDER_STEPS_PER_DEGREE)
        row.addWidget(slider)
        value = QLabel()
        value.setMinimumWidth(60)
        row.addWidget(value)
        layout.addLayout(row)
        return slider, value

    def _build_gate_controls(self) -> QGroupBox:
        grp = QGroupBox("Gates")
        layout = QVBoxLayout(grp)
        for buttons in (SINGLE_QUBIT_BUTTONS, TWO_QUBIT_BUTTONS, THREE_QUBIT_BUTTONS):
            row = QHBoxLayout()
            for text, name in buttons:
                btn = QPushButton(text)
                btn.clicked.connect(lambda _=False, n=name: self.simulator.apply_gate(n))
                row.addWidget(btn)
                self._gate_buttons[name] = btn
            layout.addLayout(row)
        return grp

    # ------------------------------------------------------------------------------
    # Slots
    # ------------------------------------------------------------------------------

    def on_qubits_changed(self, *_args) -> None:
        qubits = self.simulator.qubits
        selected = self.simulator.selected
        self._sync_sphere_count(len(qubits))

        for i, qubit in enumerate(qubits):
            self._spheres[i].set_state(qubit.theta, qubit.phi)
            btn = self._sphere_buttons[i]
            btn.setText(qubit_caption(i, qubit))
            btn.setChecked(i == selected)

        active = qubits[selected]
        self.lbl_active.setText(f"Active: {qubit_caption(selected, active)}")
        self.lbl_theta.setText(f"{active.theta_deg:.1f}°")
        self.lbl_phi.setText(f"{active.phi_deg:.1f}°")
        for slider, degrees in ((self.slider_theta, active.theta_deg), (self.slider_phi, active.phi_deg)):
            slider.blockSignals(True)
            slider.setValue(round(degrees * SLIDER_STEPS_PER_DEGREE))
            slider.blockSignals(False)

        self.refresh_enabled()

    def on_history_changed(self, *_args) -> None:
        self.code_panel.set_code(self.simulator.code())
        if not self.simulator.history:
            self.matrix_panel.set_gate(None)

    def on_theta_slider_changed(self, value: int) -> None:
        self.simulator.set_theta_degrees(value / SLIDER_STEPS_PER_DEGREE)

    def on_phi_slider_changed(self, value: int) -> None:
        self.simulator.set_phi_degrees(value / SLIDER_STEPS_PER_DEGREE)

    def refresh_enabled(self) -> None:
        busy = self.simulator.busy
        count = len(self.simulator.qubits)
        for name, btn in self._gate_buttons.items():
            btn.setEnabled(self.simulator.can_apply(name))
        for btn in (self._gate_buttons[n] for _, n in TWO_QUBIT_BUTTONS):
            btn.setVisible(count >= 2)
        for btn in (self._gate_buttons[n] for _, n in THREE_QUBIT_BUTTONS):
            btn.setVisible(count >= 3)

        self.btn_add.setEnabled(not busy and count < MAX_QUBITS)
        self.btn_remove.setEnabled(not busy and count > 1)
        self.btn_remove.setText(f"Remove selected q[{self.simulator.selected}]")
        self.btn_reset.setEnabled(not busy)
        self.slider_theta.setEnabled(not busy)
        self.slider_phi.setEnabled(not busy)

    # ------------------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------------------

    def _sync_sphere_count(self, count: int) -> None:
        while len(self._spheres) < count:
            index = len(self._spheres)
            cell = QWidget()
            cell_layout = QVBoxLayout(cell)
            cell_layout.setContentsMargins(2, 2, 2, 2)

            btn = QPushButton()
            btn.setCheckable(True)
            btn.clicked.connect(lambda _=False, i=index: self.simulator.select(i))
            cell_layout.addWidget(btn)

            sphere = BlochSphereWidget()
            cell_layout.addWidget(sphere)

            self._sphere_grid.addWidget(cell, index // 2, index % 2)
            self._spheres.append(sphere)
            self._sphere_buttons.append(btn)
            logger.debug(f"Created Bloch sphere view {index}.")

        while len(self._spheres) > count:
            sphere = self._spheres.pop()
            self._sphere_buttons.pop()
            cell = sphere.parentWidget()
            sphere.plotter.close()
            self._sphere_grid.removeWidget(cell)
            cell.deleteLater()

    def closeEvent(self, event: QCloseEvent) -> None:
        self.simulator.shutdown()
        for sphere in self._spheres:
            sphere.plotter.close()
        super().closeEvent(event)
