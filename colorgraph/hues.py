"""
Helpers for cyclic hue components, measured in degrees.
"""
from __future__ import annotations

import numpy as np


def normalize_angle_positive(degrees: np.ndarray | float) -> np.ndarray:
    """
    Wraps angles into [0, 360).
    """
    degrees = np.asarray(degrees, dtype=np.float64)
    wrapped = np.mod(degrees, 360.0)
    # np.mod(-1e-17, 360) rounds to 360
    return np.where(wrapped >= 360.0, 0.0, wrapped)


def normalize_angle(degrees: np.ndarray | float) -> np.ndarray:
    """
    Wraps angles into (-180, 180].
    """
    wrapped = normalize_angle_positive(degrees)
    return np.where(wrapped > 180.0, wrapped - 360.0, wrapped)


def hue_difference(start: np.ndarray | float, end: np.ndarray | float) -> np.ndarray:
    """
    Signed difference from start to end along the shorter arc, in (-180, 180].
    """
    return normalize_angle(np.asarray(end, dtype=np.float64) - np.asarray(start, dtype=np.float64))


def to_radians(degrees: np.ndarray | float) -> np.ndarray:
    return np.radians(normalize_angle(degrees))


def from_radians(radians: np.ndarray | float) -> np.ndarray:
    return normalize_angle_positive(np.degrees(radians))
