from __future__ import annotations

import numpy as np

from typing import Optional

from .exceptions import UnsupportedComponentTypeError
from .parameters import Defaults


SUPPORTED_FLOAT_TYPES: tuple[type, ...] = (np.float32, np.float64)
"""
Component types a color value may store its channels in
"""

SUPPORTED_INTEGER_FORMATS: tuple[type, ...] = (np.uint8, np.uint16, np.uint32)
"""
Normalized integer formats accepted by into_format and from_format
"""


# region Channel
class Channel:
    """
    Describes the role of a single component within a color space: its name, its valid range and
    whether it is cyclic (hue).
    """
    def __init__(
            self,
            name: str,
            minimum: float,
            maximum: float,
            cyclic: bool = False,
            clamp_maximum: bool = True
    ):
        self.name = name
        """
        Name of the channel. Also used as the name of the generated accessor property.
        """
        self.minimum = float(minimum)
        """
        Lower bound of the channel
        """
        self.maximum = float(maximum)
        """
        Upper bound of the channel. For cyclic channels the upper bound is excluded.
        When clamp_maximum is False this is only the nominal span used by adjustments.
        """
        self.cyclic = cyclic
        """
        Cyclic channels wrap around instead of saturating
        """
        self.clamp_maximum = clamp_maximum
        """
        Whether clamping saturates at the upper bound. Chroma, for example, is only bounded below.
        """

    @property
    def span(self) -> float:
        return self.maximum - self.minimum

    def clamp(self, values: np.ndarray | float) -> np.ndarray:
        """
        Saturates out-of-range values to the nearest bound, or wraps them for cyclic channels.
        Total: never raises, and is idempotent.
        """
        values = np.asarray(values)
        if self.cyclic:
            wrapped = np.mod(values - self.minimum, self.span)
            # np.mod can round tiny negative inputs up to the span itself
            wrapped = np.where(wrapped >= self.span, 0.0, wrapped)
            return (wrapped + self.minimum).astype(values.dtype, copy=False)

        upper = self.maximum if self.clamp_maximum else None
        return np.clip(values, self.minimum, upper).astype(values.dtype, copy=False)

    def contains(self, values: np.ndarray | float) -> np.ndarray:
        """
        :returns: Boolean mask of the values that lie within the channel's range
        """
        values = np.asarray(values)
        above = values >= self.minimum
        if self.cyclic:
            return above & (values < self.maximum)
        if not self.clamp_maximum:
            return above
        return above & (values <= self.maximum)

    def __eq__(self, other):
        if not isinstance(other, Channel):
            return NotImplemented
        return (self.name, self.minimum, self.maximum, self.cyclic, self.clamp_maximum) == \
            (other.name, other.minimum, other.maximum, other.cyclic, other.clamp_maximum)

    def __hash__(self):
        return hash((self.name, self.minimum, self.maximum, self.cyclic, self.clamp_maximum))

    def __repr__(self):
        return "Channel({!r}, {}, {}{})".format(
            self.name, self.minimum, self.maximum, ", cyclic=True" if self.cyclic else ""
        )
# endregion


# region Component types
def resolve_component_type(dtype: Optional[type | np.dtype | str]) -> np.dtype:
    """
    Validates a requested component type.
    :returns: The numpy dtype of the component type
    """
    if dtype is None:
        dtype = Defaults.dtype

    try:
        resolved = np.dtype(dtype)
    except TypeError as error:
        raise UnsupportedComponentTypeError("{!r} is not a component type.".format(dtype)) from error

    if resolved.type not in SUPPORTED_FLOAT_TYPES:
        raise UnsupportedComponentTypeError(
            "Colors store floating point components ({}), not {}. "
            "Use from_format to read integer data.".format(
                ", ".join(t.__name__ for t in SUPPORTED_FLOAT_TYPES),
                resolved.name
            )
        )
    return resolved


def cast_components(values: np.ndarray, target_type: type | np.dtype | str) -> np.ndarray:
    """
    Casts component values to another component type, preserving relative magnitude rather than
    bit pattern. Floating point values are normalized to [0, 1] against the integer maximum.
    """
    values = np.asarray(values)
    source = values.dtype
    target = np.dtype(target_type)

    # Case 1: same type
    if source == target:
        return values.copy()

    source_is_integer = np.issubdtype(source, np.integer)
    target_is_integer = np.issubdtype(target, np.integer)

    for dtype in (source, target):
        if np.issubdtype(dtype, np.integer) and dtype.type not in SUPPORTED_INTEGER_FORMATS:
            raise UnsupportedComponentTypeError("{} is not a supported integer format. Use one of {}.".format(
                dtype.name, ", ".join(t.__name__ for t in SUPPORTED_INTEGER_FORMATS)
            ))
        if np.issubdtype(dtype, np.floating) and dtype.type not in SUPPORTED_FLOAT_TYPES:
            raise UnsupportedComponentTypeError("{} is not a supported component type.".format(dtype.name))

    # Case 2: float to float
    if not source_is_integer and not target_is_integer:
        return values.astype(target)

    # Case 3: float to normalized integer
    if not source_is_integer and target_is_integer:
        target_max = np.iinfo(target).max
        scaled = np.rint(np.clip(values.astype(np.float64), 0.0, 1.0) * target_max)
        return scaled.astype(target)

    # Case 4: normalized integer to float
    source_max = np.iinfo(source).max
    if not target_is_integer:
        return (values.astype(np.float64) / source_max).astype(target)

    # Case 5: integer to integer, rescaled through float64
    target_max = np.iinfo(target).max
    return np.rint(values.astype(np.float64) / source_max * target_max).astype(target)
# endregion
