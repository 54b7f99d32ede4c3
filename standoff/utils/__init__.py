"""
Utility functions and helpers for the Standoff engine.
"""

from .id_generator import IDGenerator, SHOT_ID_PREFIX

__all__ = [
    "IDGenerator",
    "SHOT_ID_PREFIX",
]
