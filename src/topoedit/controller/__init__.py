"""
The CONTROLLER layer turns user intent into reversible mutations of the arena.
"""
