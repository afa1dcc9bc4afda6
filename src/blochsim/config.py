"""
Configuration & Constants
=========================
This module serves as the central registry for global constants.

Why is this file needed?
------------------------
1. Abstraction: Tolerances, qubit limits and animation timings are read from
   one place instead of being scattered through the model and the views.
2. Deployment: The animation length can be overridden from the environment
   (BLOCHSIM_ANIMATION_DURATION, seconds) without touching the code.

Exports:
    POLE_EPS (float): Colatitude distance from a pole below which phi is reset to 0.
    MAX_QUBITS (int): Maximum number of simultaneously shown qubits.
    ANIMATION_DURATION_S (float): Length of one gate animation in seconds.
"""
import os


def _float_from_env(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value >= 0.0 else default


# Application identity
ORG_ID = "blochsim"
APP_ID = "blochsim"
VISIBLE_APP_NAME = "Bloch Sphere Qubit Simulator"

# Numerical tolerances
POLE_EPS: float = 1e-4
NORM_TOLERANCE: float = 1e-12

# Qubit collection limits
MIN_QUBITS: int = 1
MAX_QUBITS: int = 3

# Animation
ANIMATION_DURATION_S: float = _float_from_env("BLOCHSIM_ANIMATION_DURATION", 1.2)
FRAME_INTERVAL_MS: int = 16
