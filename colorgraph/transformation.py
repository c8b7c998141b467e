from __future__ import annotations

import numpy as np

from typing import Callable

from .hues import normalize_angle_positive, to_radians, from_radians
from .parameters import WhitePoint, adaptation_matrix


CIE_EPSILON = 216 / 24389
"""
Lab and Luv switch between the cube root and the linear segment at this relative luminance
"""
CIE_KAPPA = 24389 / 27
"""
Slope of the linear segment of Lab and Luv lightness
"""

Transformation = Callable[[np.ndarray], np.ndarray]
"""
Transformation functions take a float64 array whose last axis holds the channels of the origin space,
and return the array of the destination space.
"""


def _split(values: np.ndarray) -> list[np.ndarray]:
    return [values[..., i] for i in range(values.shape[-1])]


def _safe_divide(numerator: np.ndarray, denominator: np.ndarray) -> np.ndarray:
    """
    Elementwise division that yields 0 wherever the denominator is 0
    """
    numerator, denominator = np.broadcast_arrays(
        np.asarray(numerator, dtype=np.float64),
        np.asarray(denominator, dtype=np.float64)
    )
    return np.divide(numerator, denominator, out=np.zeros(numerator.shape), where=denominator != 0)


# region Functions
class TransformationFunctions:
    """
    Container class for transformation functions.
    All functions are total: numeric edge cases resolve to documented conventions instead of raising.
    """
    # region Lab and Luv
    @staticmethod
    def xyz_to_lab(xyz: np.ndarray, white_point: WhitePoint) -> np.ndarray:
        """
        CIE XYZ to CIELAB, relative to the given white point
        """
        t = xyz / white_point.xyz
        f = np.where(t > CIE_EPSILON, np.cbrt(t), (CIE_KAPPA * t + 16) / 116)
        fx, fy, fz = _split(f)
        return np.stack([
            116 * fy - 16,
            500 * (fx - fy),
            200 * (fy - fz)
        ], axis=-1)

    @staticmethod
    def lab_to_xyz(lab: np.ndarray, white_point: WhitePoint) -> np.ndarray:
        """
        CIELAB to CIE XYZ, relative to the given white point
        """
        l, a, b = _split(lab)
        fy = (l + 16) / 116
        fx = fy + a / 500
        fz = fy - b / 200

        def f_inverse(f: np.ndarray) -> np.ndarray:
            cubed = f ** 3
            return np.where(cubed > CIE_EPSILON, cubed, (116 * f - 16) / CIE_KAPPA)

        x = f_inverse(fx)
        y = np.where(l > CIE_KAPPA * CIE_EPSILON, fy ** 3, l / CIE_KAPPA)
        z = f_inverse(fz)
        return np.stack([x, y, z], axis=-1) * white_point.xyz

    @staticmethod
    def xyz_to_luv(xyz: np.ndarray, white_point: WhitePoint) -> np.ndarray:
        """
        CIE XYZ to CIELUV. Black (X + 15Y + 3Z = 0) maps to (0, 0, 0).
        """
        x, y, z = _split(xyz)
        denominator = x + 15 * y + 3 * z
        u_prime = _safe_divide(4 * x, denominator)
        v_prime = _safe_divide(9 * y, denominator)
        white_u, white_v = white_point.uv_prime

        y_relative = y / white_point.Y
        l = np.where(y_relative > CIE_EPSILON, 116 * np.cbrt(y_relative) - 16, CIE_KAPPA * y_relative)
        # u' and v' are meaningless for black, where L is already 0
        black = denominator == 0
        u = np.where(black, 0.0, 13 * l * (u_prime - white_u))
        v = np.where(black, 0.0, 13 * l * (v_prime - white_v))
        return np.stack([l, u, v], axis=-1)

    @staticmethod
    def luv_to_xyz(luv: np.ndarray, white_point: WhitePoint) -> np.ndarray:
        """
        CIELUV to CIE XYZ. L = 0 maps to black.
        """
        l, u, v = _split(luv)
        white_u, white_v = white_point.uv_prime

        u_prime = _safe_divide(u, 13 * l) + white_u
        v_prime = _safe_divide(v, 13 * l) + white_v
        y = np.where(l > CIE_KAPPA * CIE_EPSILON, ((l + 16) / 116) ** 3, l / CIE_KAPPA) * white_point.Y
        x = _safe_divide(y * 9 * u_prime, 4 * v_prime)
        z = _safe_divide(y * (12 - 3 * u_prime - 20 * v_prime), 4 * v_prime)

        black = l == 0
        return np.stack([
            np.where(black, 0.0, x),
            np.where(black, 0.0, y),
            np.where(black, 0.0, z)
        ], axis=-1)
    # endregion

    # region Polar forms
    @staticmethod
    def cartesian_to_polar(values: np.ndarray) -> np.ndarray:
        """
        (L, a, b) to (L, chroma, hue). Hue is in [0, 360) and is 0 wherever chroma is 0.
        """
        l, a, b = _split(values)
        chroma = np.hypot(a, b)
        hue = from_radians(np.arctan2(b, a))
        return np.stack([l, chroma, np.where(chroma == 0, 0.0, hue)], axis=-1)

    @staticmethod
    def polar_to_cartesian(values: np.ndarray) -> np.ndarray:
        """
        (L, chroma, hue) to (L, a, b)
        """
        l, chroma, hue = _split(values)
        radians = to_radians(hue)
        return np.stack([l, chroma * np.cos(radians), chroma * np.sin(radians)], axis=-1)
    # endregion

    # region Chromaticity
    @staticmethod
    def xyz_to_yxy(xyz: np.ndarray, white_point: WhitePoint) -> np.ndarray:
        """
        CIE XYZ to (x, y, Y). Black takes the chromaticity of the white point.
        """
        x, y, z = _split(xyz)
        total = x + y + z
        white_x, white_y = white_point.chromaticity
        black = total == 0
        return np.stack([
            np.where(black, white_x, _safe_divide(x, total)),
            np.where(black, white_y, _safe_divide(y, total)),
            y
        ], axis=-1)

    @staticmethod
    def yxy_to_xyz(yxy: np.ndarray) -> np.ndarray:
        """
        (x, y, Y) to CIE XYZ. y = 0 maps to black.
        """
        x, y, luminance = _split(yxy)
        return np.stack([
            _safe_divide(x * luminance, y),
            np.where(y == 0, 0.0, luminance),
            _safe_divide((1 - x - y) * luminance, y)
        ], axis=-1)
    # endregion

    # region Hexcone models
    @staticmethod
    def _hexcone_hue(rgb: np.ndarray, maximum: np.ndarray, delta: np.ndarray) -> np.ndarray:
        """
        Hue of the hexcone models. Achromatic colors (delta = 0) get hue 0.
        """
        r, g, b = _split(rgb)
        safe_delta = np.where(delta == 0, 1.0, delta)
        hue = np.select(
            [delta == 0, maximum == r, maximum == g],
            [0.0, 60 * np.mod((g - b) / safe_delta, 6), 60 * ((b - r) / safe_delta + 2)],
            60 * ((r - g) / safe_delta + 4)
        )
        return normalize_angle_positive(hue)

    @staticmethod
    def _hexcone_rgb(hue: np.ndarray, chroma: np.ndarray, offset: np.ndarray) -> np.ndarray:
        """
        Places a chroma in the sector of the given hue, then adds the achromatic offset
        """
        sector_position = normalize_angle_positive(hue) / 60
        x = chroma * (1 - np.abs(np.mod(sector_position, 2) - 1))
        sector = np.floor(sector_position).astype(int)
        zero = np.zeros_like(chroma)

        conditions = [sector == i for i in range(6)]
        r = np.select(conditions, [chroma, x, zero, zero, x, chroma])
        g = np.select(conditions, [x, chroma, chroma, x, zero, zero])
        b = np.select(conditions, [zero, zero, x, chroma, chroma, x])
        return np.stack([r + offset, g + offset, b + offset], axis=-1)

    @staticmethod
    def rgb_to_hsv(rgb: np.ndarray) -> np.ndarray:
        maximum = rgb.max(axis=-1)
        delta = maximum - rgb.min(axis=-1)
        hue = TransformationFunctions._hexcone_hue(rgb, maximum, delta)
        saturation = _safe_divide(delta, maximum)
        return np.stack([hue, saturation, maximum], axis=-1)

    @staticmethod
    def hsv_to_rgb(hsv: np.ndarray) -> np.ndarray:
        hue, saturation, value = _split(hsv)
        chroma = value * saturation
        return TransformationFunctions._hexcone_rgb(hue, chroma, value - chroma)

    @staticmethod
    def rgb_to_hsl(rgb: np.ndarray) -> np.ndarray:
        maximum = rgb.max(axis=-1)
        minimum = rgb.min(axis=-1)
        delta = maximum - minimum
        hue = TransformationFunctions._hexcone_hue(rgb, maximum, delta)
        lightness = (maximum + minimum) / 2
        # The denominator is 0 only at lightness 0 and 1, where delta is 0 for in-gamut colors
        saturation = _safe_divide(delta, 1 - np.abs(2 * lightness - 1))
        return np.stack([hue, np.where(delta == 0, 0.0, saturation), lightness], axis=-1)

    @staticmethod
    def hsl_to_rgb(hsl: np.ndarray) -> np.ndarray:
        hue, saturation, lightness = _split(hsl)
        chroma = (1 - np.abs(2 * lightness - 1)) * saturation
        return TransformationFunctions._hexcone_rgb(hue, chroma, lightness - chroma / 2)

    @staticmethod
    def hsv_to_hsl(hsv: np.ndarray) -> np.ndarray:
        """
        Direct HSV to HSL, equal to the path through RGB
        """
        hue, saturation, value = _split(hsv)
        lightness = value * (1 - saturation / 2)
        saturation_l = _safe_divide(value - lightness, np.minimum(lightness, 1 - lightness))
        # Same achromatic convention as the hexcone models
        hue = np.where(saturation_l == 0, 0.0, normalize_angle_positive(hue))
        return np.stack([hue, saturation_l, lightness], axis=-1)

    @staticmethod
    def hsl_to_hsv(hsl: np.ndarray) -> np.ndarray:
        """
        Direct HSL to HSV, equal to the path through RGB
        """
        hue, saturation, lightness = _split(hsl)
        value = lightness + saturation * np.minimum(lightness, 1 - lightness)
        saturation_v = np.where(value == 0, 0.0, 2 * (1 - _safe_divide(lightness, value)))
        hue = np.where(saturation_v == 0, 0.0, normalize_angle_positive(hue))
        return np.stack([hue, saturation_v, value], axis=-1)

    @staticmethod
    def hsv_to_hwb(hsv: np.ndarray) -> np.ndarray:
        hue, saturation, value = _split(hsv)
        return np.stack([hue, (1 - saturation) * value, 1 - value], axis=-1)

    @staticmethod
    def hwb_to_hsv(hwb: np.ndarray) -> np.ndarray:
        """
        HWB to HSV. Whiteness and blackness summing to 1 or more describe a gray.
        """
        hue, whiteness, blackness = _split(hwb)
        total = whiteness + blackness
        gray = total >= 1
        value = np.where(gray, _safe_divide(whiteness, total), 1 - blackness)
        saturation = np.where(gray, 0.0, 1 - _safe_divide(whiteness, value))
        saturation = np.where(value == 0, 0.0, saturation)
        return np.stack([hue, saturation, value], axis=-1)
    # endregion

    # region Subtractive
    @staticmethod
    def rgb_to_cmyk(rgb: np.ndarray) -> np.ndarray:
        """
        Textbook subtractive model. Pure black (k = 1) has zero cyan, magenta and yellow.
        """
        key = 1 - rgb.max(axis=-1)
        remaining = 1 - key
        cmy = _safe_divide(remaining[..., None] - rgb, remaining[..., None])
        return np.concatenate([cmy, key[..., None]], axis=-1)

    @staticmethod
    def cmyk_to_rgb(cmyk: np.ndarray) -> np.ndarray:
        cmy = cmyk[..., :3]
        key = cmyk[..., 3:]
        return (1 - cmy) * (1 - key)
    # endregion

    # region Luminance
    @staticmethod
    def luminance_to_xyz(luminance: np.ndarray, white_point: WhitePoint) -> np.ndarray:
        """
        Neutral XYZ of the given relative luminance
        """
        return luminance[..., 0:1] * white_point.xyz

    @staticmethod
    def xyz_to_luminance(xyz: np.ndarray) -> np.ndarray:
        return xyz[..., 1:2].copy()
    # endregion
# endregion


# region Generators
def matrix_transformation_generator(matrix: np.ndarray) -> Transformation:
    """
    Creates a transformation function from a 3x3 matrix that acts on column vectors.
    """
    transposed = np.asarray(matrix, dtype=np.float64).transpose()

    def mtf(values: np.ndarray) -> np.ndarray:
        return values @ transposed

    return mtf


def transfer_transformation_generator(transfer, encode: bool) -> Transformation:
    """
    Creates a transformation function that applies a transfer function to every channel.
    """
    if encode:
        return transfer.encode
    return transfer.decode


def adaptation_transformation_generator(
        source: WhitePoint,
        destination: WhitePoint,
        method: str) -> Transformation:
    """
    Creates a chromatic adaptation transformation between two hub spaces.
    """
    return matrix_transformation_generator(adaptation_matrix(source, destination, method))


def compose(*functions: Transformation) -> Transformation:
    """
    Chains transformation functions, applying them left to right.
    """
    def composed(values: np.ndarray) -> np.ndarray:
        next_input = values
        for function in functions:
            next_input = function(next_input)
        return next_input

    return composed
# endregion
