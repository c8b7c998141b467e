from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .spaces import ColorType

import numpy as np

from typing import Callable, Optional, Type

from .component import Channel
from .exceptions import ColorTypeMismatchError, OperandShapeMismatchError, OperationNotFoundError


class ShapeValidationFunctions:
    """
    Container class for operand validation functions
    """
    @staticmethod
    def same_type(left_operand: ColorType, right_operand: ColorType, operation: str):
        """
        Operations between colors are only defined for colors of exactly the same type, parameters included.
        """
        if left_operand.__class__ is not right_operand.__class__:
            raise ColorTypeMismatchError("Cannot {} {} and {}. Convert one of them first.".format(
                operation, left_operand.__class__.__name__, right_operand.__class__.__name__
            ))

    @staticmethod
    def broadcast_shape(*shapes: tuple[int, ...]) -> tuple[int, ...]:
        """
        :returns: The color shape the operands broadcast to
        """
        try:
            return np.broadcast_shapes(*shapes)
        except ValueError as error:
            raise OperandShapeMismatchError("Operands of shapes {} cannot be broadcast together.".format(
                ", ".join(str(shape) for shape in shapes)
            )) from error


PORTER_DUFF_OPERATORS: dict[str, Callable[[np.ndarray, np.ndarray], tuple]] = {
    # (top factor, bottom factor) from (top alpha, bottom alpha)
    "over": lambda top_alpha, bottom_alpha: (1.0, 1 - top_alpha),
    "inside": lambda top_alpha, bottom_alpha: (bottom_alpha, 0.0),
    "outside": lambda top_alpha, bottom_alpha: (1 - bottom_alpha, 0.0),
    "atop": lambda top_alpha, bottom_alpha: (bottom_alpha, 1 - top_alpha),
    "xor": lambda top_alpha, bottom_alpha: (1 - bottom_alpha, 1 - top_alpha),
    "plus": lambda top_alpha, bottom_alpha: (1.0, 1.0),
}


class BlendFunctions:
    """
    Container class for separable blend functions. Both arguments are straight channel values in [0, 1];
    top is the source color and bottom the backdrop.
    """
    @staticmethod
    def multiply(top: np.ndarray, bottom: np.ndarray) -> np.ndarray:
        return top * bottom

    @staticmethod
    def screen(top: np.ndarray, bottom: np.ndarray) -> np.ndarray:
        return top + bottom - top * bottom

    @staticmethod
    def overlay(top: np.ndarray, bottom: np.ndarray) -> np.ndarray:
        """
        Hard light with the roles of the colors swapped
        """
        return BlendFunctions.hard_light(bottom, top)

    @staticmethod
    def darken(top: np.ndarray, bottom: np.ndarray) -> np.ndarray:
        return np.minimum(top, bottom)

    @staticmethod
    def lighten(top: np.ndarray, bottom: np.ndarray) -> np.ndarray:
        return np.maximum(top, bottom)

    @staticmethod
    def color_dodge(top: np.ndarray, bottom: np.ndarray) -> np.ndarray:
        top, bottom = np.broadcast_arrays(top, bottom)
        quotient = np.divide(bottom, 1 - top, out=np.ones(top.shape), where=top < 1)
        return np.where(bottom == 0, 0.0, np.minimum(1.0, quotient))

    @staticmethod
    def color_burn(top: np.ndarray, bottom: np.ndarray) -> np.ndarray:
        top, bottom = np.broadcast_arrays(top, bottom)
        quotient = np.divide(1 - bottom, top, out=np.ones(top.shape), where=top > 0)
        return np.where(bottom == 1, 1.0, 1 - np.minimum(1.0, quotient))

    @staticmethod
    def hard_light(top: np.ndarray, bottom: np.ndarray) -> np.ndarray:
        return np.where(
            top <= 0.5,
            BlendFunctions.multiply(2 * top, bottom),
            BlendFunctions.screen(2 * top - 1, bottom)
        )

    @staticmethod
    def soft_light(top: np.ndarray, bottom: np.ndarray) -> np.ndarray:
        bottom_curve = np.where(
            bottom <= 0.25,
            ((16 * bottom - 12) * bottom + 4) * bottom,
            np.sqrt(np.maximum(bottom, 0.0))
        )
        return np.where(
            top <= 0.5,
            bottom - (1 - 2 * top) * bottom * (1 - bottom),
            bottom + (2 * top - 1) * (bottom_curve - bottom)
        )

    @staticmethod
    def difference(top: np.ndarray, bottom: np.ndarray) -> np.ndarray:
        return np.abs(top - bottom)

    @staticmethod
    def exclusion(top: np.ndarray, bottom: np.ndarray) -> np.ndarray:
        return top + bottom - 2 * top * bottom


BLEND_MODES: tuple[str, ...] = (
    "multiply", "screen", "overlay", "darken", "lighten", "color_dodge", "color_burn", "hard_light",
    "soft_light", "difference", "exclusion",
)


class OperationFunctions:
    """
    Container class for array level operations. Arrays hold channels on their last axis.
    """
    @staticmethod
    def lerp(start: np.ndarray, end: np.ndarray, factor: np.ndarray) -> np.ndarray:
        """
        Linear interpolation that returns the endpoints exactly at factors 0 and 1
        """
        interpolated = start * (1 - factor) + end * factor
        return np.where(factor == 0, start, np.where(factor == 1, end, interpolated))

    @staticmethod
    def lerp_cyclic(start: np.ndarray, end: np.ndarray, factor: np.ndarray, channel: Channel) -> np.ndarray:
        """
        Interpolation along the shorter arc of a cyclic channel
        """
        half = channel.span / 2
        difference = np.mod(end - start + half, channel.span) - half
        interpolated = channel.clamp(start + factor * difference)
        return np.where(factor == 0, start, np.where(factor == 1, end, interpolated))

    @staticmethod
    def mix_channels(
            start: np.ndarray,
            end: np.ndarray,
            factor: np.ndarray,
            channels: tuple[Channel, ...]) -> np.ndarray:
        factor = factor[..., np.newaxis]
        start, end, factor = np.broadcast_arrays(start, end, factor)
        mixed = [
            OperationFunctions.lerp_cyclic(start[..., i], end[..., i], factor[..., i], channel) if channel.cyclic
            else OperationFunctions.lerp(start[..., i], end[..., i], factor[..., i])
            for i, channel in enumerate(channels)
        ]
        return np.stack(mixed, axis=-1)

    @staticmethod
    def porter_duff(
            operator: str,
            top: np.ndarray,
            top_alpha: np.ndarray,
            bottom: np.ndarray,
            bottom_alpha: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """
        Porter-Duff compositing on straight alpha. The premultiplied result is top * Fa + bottom * Fb, with
        the factors of the operator. "plus" saturates at 1.
        :returns: Straight color and alpha of the result. Fully transparent results are zero.
        """
        top_factor, bottom_factor = PORTER_DUFF_OPERATORS[operator](top_alpha, bottom_alpha)
        alpha = top_alpha * top_factor + bottom_alpha * bottom_factor
        premultiplied = top * (top_alpha * top_factor)[..., np.newaxis] + \
            bottom * (bottom_alpha * bottom_factor)[..., np.newaxis]
        if operator == "plus":
            alpha = np.minimum(alpha, 1.0)
            premultiplied = np.minimum(premultiplied, 1.0)
        return OperationFunctions.unpremultiplied(premultiplied, alpha), alpha

    @staticmethod
    def blend(
            mode: Callable[[np.ndarray, np.ndarray], np.ndarray],
            top: np.ndarray,
            top_alpha: np.ndarray,
            bottom: np.ndarray,
            bottom_alpha: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """
        Separable blending on straight alpha. Where both colors are present the blend function decides the
        color, elsewhere each color shows through as with "over".
        :returns: Straight color and alpha of the result. Fully transparent results are zero.
        """
        top_alpha = top_alpha[..., np.newaxis]
        bottom_alpha = bottom_alpha[..., np.newaxis]
        premultiplied = top * top_alpha * (1 - bottom_alpha) + bottom * bottom_alpha * (1 - top_alpha) + \
            top_alpha * bottom_alpha * mode(top, bottom)
        alpha = (top_alpha + bottom_alpha - top_alpha * bottom_alpha)[..., 0]
        return OperationFunctions.unpremultiplied(premultiplied, alpha), alpha

    @staticmethod
    def unpremultiplied(premultiplied: np.ndarray, alpha: np.ndarray) -> np.ndarray:
        premultiplied, divisor = np.broadcast_arrays(premultiplied, np.asarray(alpha)[..., np.newaxis])
        return np.divide(premultiplied, divisor, out=np.zeros(premultiplied.shape), where=divisor != 0)

    @staticmethod
    def adjust(values: np.ndarray, channel: Channel, amount: np.ndarray, relative: bool, increase: bool) -> np.ndarray:
        """
        Moves one channel up or down, additively by a fraction of its span or relatively towards its bound,
        then clamps.
        """
        if not relative:
            delta = amount * channel.span
        elif increase and channel.clamp_maximum:
            delta = (channel.maximum - values) * amount
        else:
            delta = (values - channel.minimum) * amount
        return channel.clamp(values + delta if increase else values - delta)


class OperationHelpers:
    """
    Helpers shared by the user-exposed operations
    """
    @staticmethod
    def require_channel(color: ColorType, attribute: str, operation: str) -> int:
        index = getattr(color, attribute)
        if index is None:
            raise OperationNotFoundError("{} is not defined for {}. Convert to a space such as HSL or LCH first.".format(
                operation, color.__class__.__name__
            ))
        return index

    @staticmethod
    def adjusted(color: ColorType, attribute: str, operation: str, amount, relative: bool, increase: bool) -> ColorType:
        index = OperationHelpers.require_channel(color, attribute, operation)
        channel = color.channels[index]
        amount = np.asarray(amount, dtype=np.float64)
        ShapeValidationFunctions.broadcast_shape(color.color_shape, amount.shape)

        values = np.array(color.values, dtype=np.float64)
        adjusted = OperationFunctions.adjust(values[..., index], channel, amount, relative, increase)
        values = np.array(np.broadcast_to(values, adjusted.shape + (color.channel_count,)))
        values[..., index] = adjusted
        return color._from_values(values, color.alpha, color.dtype)

    @staticmethod
    def arithmetic(left, right, function: Callable[[np.ndarray, np.ndarray], np.ndarray], operation: str) -> ColorType:
        """
        Component-wise arithmetic between a color and another color of the same type, a scalar or an array
        broadcast against the component array. Cyclic channels wrap back into their range. Alpha is not an
        operand: the result keeps the alpha of the left color, or of the right one if the left has none.
        """
        from .spaces import ColorType

        colors = [operand for operand in (left, right) if isinstance(operand, ColorType)]
        if len(colors) == 2:
            ShapeValidationFunctions.same_type(left, right, operation)
        color = colors[0]

        operands = [
            operand.values.astype(np.float64) if isinstance(operand, ColorType) else np.asarray(operand, dtype=np.float64)
            for operand in (left, right)
        ]
        try:
            left_values, right_values = np.broadcast_arrays(*operands)
        except ValueError as error:
            raise OperandShapeMismatchError("Cannot {} operands of shapes {} and {}.".format(
                operation, operands[0].shape, operands[1].shape
            )) from error
        if left_values.ndim == 0 or left_values.shape[-1] != color.channel_count:
            raise OperandShapeMismatchError("Cannot {} operands of shapes {} and {}.".format(
                operation, operands[0].shape, operands[1].shape
            ))

        values = np.array(function(left_values, right_values))
        for index, channel in enumerate(color.channels):
            if channel.cyclic:
                values[..., index] = channel.clamp(values[..., index])

        alpha = next((operand.alpha for operand in colors if operand.alpha is not None), None)
        return color._from_values(values, alpha, color.dtype)

    @staticmethod
    def layers(top: ColorType, bottom: ColorType, operation: str) -> tuple[np.ndarray, ...]:
        """
        Validates two layers for compositing or blending.
        :returns: Float64 values and opacities of top and bottom
        """
        ShapeValidationFunctions.same_type(top, bottom, operation)
        if any(channel.cyclic for channel in top.channels):
            raise OperationNotFoundError("{} is not defined for {}, which has a hue channel.".format(
                operation.capitalize(), top.__class__.__name__
            ))
        ShapeValidationFunctions.broadcast_shape(top.color_shape, bottom.color_shape)
        return (
            top.values.astype(np.float64),
            top.opacity.astype(np.float64),
            bottom.values.astype(np.float64),
            bottom.opacity.astype(np.float64),
        )

    @staticmethod
    def layered_result(top: ColorType, bottom: ColorType, color: np.ndarray, alpha: np.ndarray) -> ColorType:
        # Opaque inputs stay without alpha as long as the result is opaque
        if top.alpha is None and bottom.alpha is None and np.all(alpha == 1):
            alpha = None
        return top._from_values(color, alpha, top.dtype)

    @staticmethod
    def scalar_or_array(values: np.ndarray):
        values = np.asarray(values)
        if values.ndim == 0:
            return values.item()
        return values


# region User-exposed operation functions
def mix(start: ColorType, end: ColorType, factor: float | np.ndarray) -> ColorType:
    """
    Linear interpolation between two colors of the same type. Hue channels follow the shorter arc.
    Factors outside [0, 1] extrapolate. The endpoints are returned exactly at factors 0 and 1.
    """
    ShapeValidationFunctions.same_type(start, end, "mix")
    factor = np.asarray(factor, dtype=np.float64)
    ShapeValidationFunctions.broadcast_shape(start.color_shape, end.color_shape, factor.shape)

    values = OperationFunctions.mix_channels(
        start.values.astype(np.float64), end.values.astype(np.float64), factor, start.channels
    )

    alpha = None
    if start.alpha is not None or end.alpha is not None:
        alpha = OperationFunctions.lerp(
            start.opacity.astype(np.float64), end.opacity.astype(np.float64), factor
        )
    return start._from_values(values, alpha, start.dtype)


def lighten(color: ColorType, amount: float | np.ndarray, relative: bool = False) -> ColorType:
    """
    Increases the lightness channel by amount times its span, or, when relative, moves it that fraction of
    the way towards its maximum.
    """
    return OperationHelpers.adjusted(color, "lightness_channel", "lighten", amount, relative, increase=True)


def darken(color: ColorType, amount: float | np.ndarray, relative: bool = False) -> ColorType:
    return OperationHelpers.adjusted(color, "lightness_channel", "darken", amount, relative, increase=False)


def saturate(color: ColorType, amount: float | np.ndarray, relative: bool = False) -> ColorType:
    """
    Increases saturation (or chroma). Relative saturation of an unbounded chroma scales it by 1 + amount.
    """
    return OperationHelpers.adjusted(color, "saturation_channel", "saturate", amount, relative, increase=True)


def desaturate(color: ColorType, amount: float | np.ndarray, relative: bool = False) -> ColorType:
    return OperationHelpers.adjusted(color, "saturation_channel", "desaturate", amount, relative, increase=False)


def shift_hue(color: ColorType, degrees: float | np.ndarray) -> ColorType:
    """
    Rotates the hue channel, wrapping into [0, 360)
    """
    index = OperationHelpers.require_channel(color, "hue_channel", "shift_hue")
    degrees = np.asarray(degrees, dtype=np.float64)
    ShapeValidationFunctions.broadcast_shape(color.color_shape, degrees.shape)

    values = np.array(color.values, dtype=np.float64)
    shifted = color.channels[index].clamp(values[..., index] + degrees)
    values = np.array(np.broadcast_to(values, shifted.shape + (color.channel_count,)))
    values[..., index] = shifted
    return color._from_values(values, color.alpha, color.dtype)


def clamp(color: ColorType) -> ColorType:
    """
    Clamps every channel into its range, wrapping hues, and alpha into [0, 1]
    """
    values = np.stack([
        channel.clamp(color.values[..., i]) for i, channel in enumerate(color.channels)
    ], axis=-1)
    alpha = None if color.alpha is None else np.clip(color.alpha, 0, 1)
    return color._from_values(values, alpha, color.dtype)


def is_within_bounds(color: ColorType) -> bool | np.ndarray:
    """
    :returns: Whether each color lies inside the range of its space, as a bool for a single color
    """
    inside = np.ones(color.color_shape, dtype=bool)
    for i, channel in enumerate(color.channels):
        inside &= channel.contains(color.values[..., i])
    if color.alpha is not None:
        inside &= (color.alpha >= 0) & (color.alpha <= 1)
    return OperationHelpers.scalar_or_array(inside)


def composite(top: ColorType, bottom: ColorType, operator: str = "over") -> ColorType:
    """
    Combines top and bottom with a Porter-Duff operator: "over", "inside", "outside", "atop", "xor" or
    "plus". Both colors use straight alpha; the result does too. Two opaque colors give an opaque result
    unless the operator makes it transparent.
    """
    if operator not in PORTER_DUFF_OPERATORS:
        raise OperationNotFoundError("Unknown compositing operator {!r}. Use one of {}.".format(
            operator, ", ".join(PORTER_DUFF_OPERATORS)
        ))
    top_values, top_alpha, bottom_values, bottom_alpha = OperationHelpers.layers(top, bottom, "composite")
    color, alpha = OperationFunctions.porter_duff(operator, top_values, top_alpha, bottom_values, bottom_alpha)
    return OperationHelpers.layered_result(top, bottom, color, alpha)


def composite_over(top: ColorType, bottom: ColorType) -> ColorType:
    """
    Places top over bottom. Compositing over an opaque top returns the top color unchanged.
    """
    return composite(top, bottom, "over")


def blend(top: ColorType, bottom: ColorType, mode: str) -> ColorType:
    """
    Blends top onto bottom with a separable blend mode, one of BLEND_MODES. Colors use straight alpha;
    where top is transparent the bottom color shows through unchanged.
    """
    if mode not in BLEND_MODES:
        raise OperationNotFoundError("Unknown blend mode {!r}. Use one of {}.".format(mode, ", ".join(BLEND_MODES)))
    top_values, top_alpha, bottom_values, bottom_alpha = OperationHelpers.layers(top, bottom, "blend")
    color, alpha = OperationFunctions.blend(
        getattr(BlendFunctions, mode), top_values, top_alpha, bottom_values, bottom_alpha
    )
    return OperationHelpers.layered_result(top, bottom, color, alpha)


def premultiply(color: ColorType) -> np.ndarray:
    """
    :returns: The color channels multiplied by alpha
    """
    return color.values.astype(np.float64) * color.opacity.astype(np.float64)[..., np.newaxis]


def unpremultiply(color_type: Type[ColorType], premultiplied: np.ndarray, alpha: np.ndarray | float,
                  dtype: Optional[type] = None) -> ColorType:
    """
    Builds straight alpha colors from premultiplied channels. Fully transparent colors become zero.
    """
    alpha = np.asarray(alpha, dtype=np.float64)
    values = OperationFunctions.unpremultiplied(np.asarray(premultiplied, dtype=np.float64), alpha)
    return color_type(values, alpha=alpha, dtype=dtype)
# endregion


# region Contrast
def relative_luminance(color: ColorType) -> float | np.ndarray:
    """
    :returns: Relative luminance Y of each color, under the default white point
    """
    from .spaces import LinearGray
    return OperationHelpers.scalar_or_array(LinearGray(color).values[..., 0].astype(np.float64))


def contrast_ratio(first: ColorType, second: ColorType) -> float | np.ndarray:
    """
    WCAG 2 contrast ratio, from 1 (no contrast) to 21 (black on white). Symmetric in its arguments.
    """
    first_luminance = np.asarray(relative_luminance(first))
    second_luminance = np.asarray(relative_luminance(second))
    lighter = np.maximum(first_luminance, second_luminance)
    darker = np.minimum(first_luminance, second_luminance)
    return OperationHelpers.scalar_or_array((lighter + 0.05) / (darker + 0.05))


def is_min_contrast(first: ColorType, second: ColorType) -> bool | np.ndarray:
    """
    WCAG AA for normal text: at least 4.5:1
    """
    return OperationHelpers.scalar_or_array(np.asarray(contrast_ratio(first, second)) >= 4.5)


def is_min_contrast_large(first: ColorType, second: ColorType) -> bool | np.ndarray:
    """
    WCAG AA for large text: at least 3:1
    """
    return OperationHelpers.scalar_or_array(np.asarray(contrast_ratio(first, second)) >= 3.0)


def is_enhanced_contrast(first: ColorType, second: ColorType) -> bool | np.ndarray:
    """
    WCAG AAA for normal text: at least 7:1
    """
    return OperationHelpers.scalar_or_array(np.asarray(contrast_ratio(first, second)) >= 7.0)


def is_enhanced_contrast_large(first: ColorType, second: ColorType) -> bool | np.ndarray:
    """
    WCAG AAA for large text: at least 4.5:1
    """
    return OperationHelpers.scalar_or_array(np.asarray(contrast_ratio(first, second)) >= 4.5)
# endregion
