"""
The MODEL layer contains pure data structures and the simulation maths.
It has NO knowledge of the GUI (Qt) or the Visualization (PyVista).
It deals with Bloch-sphere geometry, gates and the gate history.
"""
