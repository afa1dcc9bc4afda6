"""
Bloch Sphere Widget (PyVista Wrapper)
Draws one qubit as an arrow on a translucent unit sphere.
Read-only: it is handed (theta, phi) and never writes back.
"""
from __future__ import annotations

import logging
from typing import Optional

import numpy as np
import pyvista as pv
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import QVBoxLayout, QWidget
from pyvistaqt import QtInteractor

from blochsim.model.coordinates import to_cartesian

logger = logging.getLogger(__name__)

ARROW_LENGTH = 0.98
ARROW_COLOR = "#4f46e5"
AXIS_COLORS = {"x": "#ef4444", "y": "#10b981", "z": "#3b82f6"}


def meridian_points(phi: float, segments: int = 64) -> np.ndarray:
    thetas = np.linspace(0.0, np.pi, segments + 1)
    return np.c_[np.sin(thetas) * np.cos(phi), np.sin(thetas) * np.sin(phi), np.cos(thetas)]


def parallel_points(theta: float, segments: int = 96) -> np.ndarray:
    phis = np.linspace(0.0, 2.0 * np.pi, segments + 1)
    return np.c_[np.sin(theta) * np.cos(phis), np.sin(theta) * np.sin(phis), np.full_like(phis, np.cos(theta))]


def state_arrow(theta: float, phi: float) -> pv.PolyData:
    """Arrow from the origin to the Bloch vector, slightly inside the sphere."""
    direction = to_cartesian(theta, phi)
    return pv.Arrow(
        start=(0.0, 0.0, 0.0),
        direction=direction,
        tip_length=0.12,
        tip_radius=0.05,
        shaft_radius=0.015,
        scale=ARROW_LENGTH,
    )


class BlochSphereWidget(QWidget):
    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.plotter: QtInteractor = QtInteractor(self)
        layout.addWidget(self.plotter)

        self._arrow_actor: Optional[pv.Actor] = None
        self._arrow_mesh: Optional[pv.PolyData] = None
        self._shown: Optional[tuple[float, float]] = None

        self._init_scene()

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    def set_state(self, theta: float, phi: float) -> None:
        """Move the arrow to (theta, phi). Skips the render if nothing changed."""
        if self._shown == (theta, phi):
            return
        self._shown = (theta, phi)

        arrow = state_arrow(theta, phi)
        if self._arrow_mesh is None:
            self._arrow_mesh = arrow
            self._arrow_actor = self.plotter.add_mesh(arrow, color=ARROW_COLOR, pickable=False)
        else:
            # Update in place to prevent blinking during animations
            self._arrow_mesh.copy_from(arrow)
        self.plotter.render()

    # ------------------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------------------

    def _init_scene(self) -> None:
        p = self.plotter
        p.set_background("white")
        p.add_mesh(pv.Sphere(radius=1.0, theta_resolution=64, phi_resolution=64),
                   color="#94a3b8", opacity=0.2, pickable=False)

        for phi in np.linspace(0.0, np.pi, 6, endpoint=False):
            p.add_mesh(pv.lines_from_points(meridian_points(phi)),
                       color="#64748b", opacity=0.45, line_width=1, pickable=False)
        for theta in (np.pi / 4, np.pi / 2, 3 * np.pi / 4):
            p.add_mesh(pv.lines_from_points(parallel_points(theta)),
                       color="#94a3b8", opacity=0.35, line_width=1, pickable=False)

        for name, end in (("x", (1.2, 0, 0)), ("y", (0, 1.2, 0)), ("z", (0, 0, 1.2))):
            start = tuple(-c for c in end)
            p.add_mesh(pv.Line(start, end), color=AXIS_COLORS[name], line_width=2, pickable=False)

        p.add_point_labels(
            np.array([[0, 0, 1.3], [0, 0, -1.3], [1.3, 0, 0], [0, 1.3, 0]]),
            ["|0⟩", "|1⟩", "x", "y"],
            font_size=12, text_color="black", shape=None, show_points=False,
            always_visible=True,
        )
        p.camera_position = [(3.2, 2.2, 1.8), (0, 0, 0), (0, 0, 1)]
        self.set_state(0.0, 0.0)

    def closeEvent(self, event: QCloseEvent) -> None:
        self.plotter.close()
        super().closeEvent(event)
