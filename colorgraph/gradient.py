from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .spaces import ColorType

import bisect

import numpy as np

from typing import Iterable, Optional

from .exceptions import ColorTypeMismatchError, OperandShapeMismatchError
from .operation import mix


# region Gradient
class Gradient:
    """
    Linear interpolation between a series of color stops. Between two stops the gradient mixes them;
    outside its domain it returns the color of the closest stop.
    """
    def __init__(self, colors: Iterable[ColorType], positions: Optional[Iterable[float]] = None):
        colors = list(colors)
        if not colors:
            raise ValueError("A gradient needs at least one color.")

        color_type = colors[0].__class__
        for color in colors:
            if color.__class__ is not color_type:
                raise ColorTypeMismatchError("Gradient stops must share one color type, got {} and {}.".format(
                    color_type.__name__, color.__class__.__name__
                ))
            if color.color_shape != ():
                raise OperandShapeMismatchError("Gradient stops must be single colors.")

        # Evenly spaced over [0, 1] by default
        if positions is None:
            step = 1.0 / max(len(colors) - 1, 1)
            positions = [i * step for i in range(len(colors))]
        positions = [float(position) for position in positions]

        if len(positions) != len(colors):
            raise ValueError("Got {} positions for {} colors.".format(len(positions), len(colors)))
        if any(later < earlier for earlier, later in zip(positions, positions[1:])):
            raise ValueError("Gradient positions must be in ascending order.")

        self.colors: list[ColorType] = colors
        self.positions: list[float] = positions

    @property
    def color_type(self):
        return self.colors[0].__class__

    @property
    def domain(self) -> tuple[float, float]:
        """
        :returns: The positions of the first and the last stop
        """
        return self.positions[0], self.positions[-1]

    def get(self, position: float) -> ColorType:
        """
        Samples the gradient. Positions outside the domain return the closest stop.
        """
        minimum, maximum = self.domain
        if position <= minimum:
            return self.colors[0]
        if position >= maximum:
            return self.colors[-1]

        upper = bisect.bisect_left(self.positions, position)
        lower = upper - 1
        start, end = self.positions[lower], self.positions[upper]
        factor = (position - start) / (end - start)
        return mix(self.colors[lower], self.colors[upper], factor)

    def take(self, count: int) -> list[ColorType]:
        """
        :returns: count evenly spaced samples including both ends of the domain, or just the lower end
        when count is 1
        """
        return _take(self, count)

    def slice(self, start: Optional[float] = None, end: Optional[float] = None) -> GradientSlice:
        """
        Restricts the domain of the gradient. Open ends keep the gradient's own limits.
        """
        return GradientSlice(self, start, end)

    def __len__(self):
        return len(self.colors)

    def __repr__(self):
        return "Gradient({}, domain={})".format(self.color_type.__name__, self.domain)


class GradientSlice:
    """
    A view of a gradient with a narrower domain
    """
    def __init__(self, gradient: Gradient, start: Optional[float] = None, end: Optional[float] = None):
        if start is not None and end is not None and end < start:
            raise ValueError("A gradient slice cannot end before it starts.")
        self.gradient = gradient
        self.start = start
        self.end = end

    def _clamp(self, position: float) -> float:
        if self.start is not None:
            position = max(position, self.start)
        if self.end is not None:
            position = min(position, self.end)
        return position

    @property
    def domain(self) -> tuple[float, float]:
        minimum, maximum = self.gradient.domain
        return (minimum if self.start is None else self.start,
                maximum if self.end is None else self.end)

    def get(self, position: float) -> ColorType:
        return self.gradient.get(self._clamp(position))

    def take(self, count: int) -> list[ColorType]:
        return _take(self, count)

    def slice(self, start: Optional[float] = None, end: Optional[float] = None) -> GradientSlice:
        """
        Restricts the slice further. Limits outside the slice are clamped to it.
        """
        start = self.start if start is None else self._clamp(start)
        end = self.end if end is None else self._clamp(end)
        return GradientSlice(self.gradient, start, end)

    def __repr__(self):
        return "GradientSlice({}, domain={})".format(self.gradient.color_type.__name__, self.domain)


def _take(gradient: Gradient | GradientSlice, count: int) -> list[ColorType]:
    if count < 0:
        raise ValueError("Cannot take {} colors.".format(count))
    minimum, maximum = gradient.domain
    if count == 1:
        return [gradient.get(minimum)]
    return [gradient.get(float(position)) for position in np.linspace(minimum, maximum, count)]
# endregion
