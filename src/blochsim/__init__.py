"""Interactive Bloch sphere visualizer for one to three qubits."""
__version__ = "0.1.0"
