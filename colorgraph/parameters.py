"""
Static color space parameters: reference white points, transfer functions, RGB standards and
chromatic adaptation. Everything here is immutable once the module is imported.
"""
from __future__ import annotations

import numpy as np

from dataclasses import dataclass
from functools import cached_property, lru_cache


# region White points
@dataclass(frozen=True)
class WhitePoint:
    """
    Reference white as XYZ tristimulus values, normalized so that Y = 1.
    """
    name: str
    X: float
    Y: float
    Z: float

    @property
    def xyz(self) -> np.ndarray:
        return np.asarray([self.X, self.Y, self.Z], dtype=np.float64)

    @property
    def chromaticity(self) -> tuple[float, float]:
        """
        :returns: The (x, y) chromaticity coordinates of the white point
        """
        total = self.X + self.Y + self.Z
        return self.X / total, self.Y / total

    @property
    def uv_prime(self) -> tuple[float, float]:
        """
        :returns: The CIE 1976 (u', v') coordinates of the white point
        """
        denominator = self.X + 15 * self.Y + 3 * self.Z
        return 4 * self.X / denominator, 9 * self.Y / denominator

    @classmethod
    def from_chromaticity(cls, name: str, x: float, y: float) -> WhitePoint:
        return cls(name, x / y, 1.0, (1 - x - y) / y)

    def __str__(self):
        return self.name


# CIE 1931 2 degree standard observer
A = WhitePoint("A", 1.09850, 1.00000, 0.35585)
B = WhitePoint("B", 0.99072, 1.00000, 0.85223)
C = WhitePoint("C", 0.98074, 1.00000, 1.18232)
D50 = WhitePoint("D50", 0.96422, 1.00000, 0.82521)
D55 = WhitePoint("D55", 0.95682, 1.00000, 0.92149)
D65 = WhitePoint("D65", 0.95047, 1.00000, 1.08883)
D75 = WhitePoint("D75", 0.94972, 1.00000, 1.22638)
E = WhitePoint("E", 1.00000, 1.00000, 1.00000)
F2 = WhitePoint("F2", 0.99186, 1.00000, 0.67393)
F7 = WhitePoint("F7", 0.95041, 1.00000, 1.08747)
F11 = WhitePoint("F11", 1.00962, 1.00000, 0.64350)

WHITE_POINTS: dict[str, WhitePoint] = {
    white_point.name: white_point for white_point in (A, B, C, D50, D55, D65, D75, E, F2, F7, F11)
}
# endregion


# region Transfer functions
@dataclass(frozen=True)
class LinearTransfer:
    """
    Identity transfer function, used by linear encodings
    """
    name: str = "linear"

    def encode(self, linear: np.ndarray) -> np.ndarray:
        return np.asarray(linear, dtype=np.float64)

    def decode(self, encoded: np.ndarray) -> np.ndarray:
        return np.asarray(encoded, dtype=np.float64)


@dataclass(frozen=True)
class GammaTransfer:
    """
    Pure power law transfer function. Extended to negative values by symmetry.
    """
    gamma: float
    name: str = "gamma"

    def encode(self, linear: np.ndarray) -> np.ndarray:
        linear = np.asarray(linear, dtype=np.float64)
        return np.sign(linear) * np.abs(linear) ** (1 / self.gamma)

    def decode(self, encoded: np.ndarray) -> np.ndarray:
        encoded = np.asarray(encoded, dtype=np.float64)
        return np.sign(encoded) * np.abs(encoded) ** self.gamma


@dataclass(frozen=True)
class PiecewiseTransfer:
    """
    Power law with a linear toe near zero, as used by sRGB, Rec. 709 and ProPhoto RGB:

        encoded = slope * linear                                   for linear <= threshold
        encoded = (1 + offset) * linear ** (1 / gamma) - offset    otherwise

    Extended to negative values by symmetry, so out-of-gamut values round trip.
    """
    gamma: float
    slope: float
    threshold: float
    offset: float = 0.0
    name: str = "piecewise"

    @property
    def encoded_threshold(self) -> float:
        return self.slope * self.threshold

    def encode(self, linear: np.ndarray) -> np.ndarray:
        linear = np.asarray(linear, dtype=np.float64)
        magnitude = np.abs(linear)
        curve = (1 + self.offset) * magnitude ** (1 / self.gamma) - self.offset
        encoded = np.where(magnitude <= self.threshold, self.slope * magnitude, curve)
        return np.sign(linear) * encoded

    def decode(self, encoded: np.ndarray) -> np.ndarray:
        encoded = np.asarray(encoded, dtype=np.float64)
        magnitude = np.abs(encoded)
        curve = ((magnitude + self.offset) / (1 + self.offset)) ** self.gamma
        linear = np.where(magnitude <= self.encoded_threshold, magnitude / self.slope, curve)
        return np.sign(encoded) * linear


SRGB_TRANSFER = PiecewiseTransfer(gamma=2.4, slope=12.92, threshold=0.0031308, offset=0.055, name="sRGB")
REC_709_TRANSFER = PiecewiseTransfer(gamma=1 / 0.45, slope=4.5, threshold=0.018, offset=0.099, name="Rec. 709")
PROPHOTO_TRANSFER = PiecewiseTransfer(gamma=1.8, slope=16.0, threshold=1 / 512, name="ProPhoto")
ADOBE_TRANSFER = GammaTransfer(gamma=563 / 256, name="Adobe RGB")
LINEAR_TRANSFER = LinearTransfer()
# endregion


# region RGB standards
def rgb_to_xyz_matrix(
        red: tuple[float, float],
        green: tuple[float, float],
        blue: tuple[float, float],
        white_point: WhitePoint) -> np.ndarray:
    """
    Derives the linear RGB to XYZ matrix from primary chromaticities and a reference white.
    The matrix acts on column vectors: xyz = M @ rgb.
    """
    # Each primary as XYZ with Y = 1
    primaries = np.asarray([
        [x / y, 1.0, (1 - x - y) / y]
        for x, y in (red, green, blue)
    ]).transpose()

    # Scale the primaries so that RGB (1, 1, 1) maps to the white point
    scale = np.linalg.solve(primaries, white_point.xyz)
    return primaries * scale


@dataclass(frozen=True)
class RgbStandard:
    """
    An RGB color standard: primaries, reference white and transfer function.
    """
    name: str
    red: tuple[float, float]
    green: tuple[float, float]
    blue: tuple[float, float]
    white_point: WhitePoint
    transfer: LinearTransfer | GammaTransfer | PiecewiseTransfer

    @cached_property
    def to_xyz_matrix(self) -> np.ndarray:
        """
        Linear RGB to XYZ, for column vectors
        """
        matrix = rgb_to_xyz_matrix(self.red, self.green, self.blue, self.white_point)
        matrix.flags.writeable = False
        return matrix

    @cached_property
    def from_xyz_matrix(self) -> np.ndarray:
        """
        XYZ to linear RGB, for column vectors. The exact numeric inverse of to_xyz_matrix.
        """
        matrix = np.linalg.inv(self.to_xyz_matrix)
        matrix.flags.writeable = False
        return matrix

    def __str__(self):
        return self.name


SRGB = RgbStandard("sRGB", (0.64, 0.33), (0.30, 0.60), (0.15, 0.06), D65, SRGB_TRANSFER)
ADOBE_RGB = RgbStandard("opRGB", (0.64, 0.33), (0.21, 0.71), (0.15, 0.06), D65, ADOBE_TRANSFER)
DISPLAY_P3 = RgbStandard("Display P3", (0.680, 0.320), (0.265, 0.690), (0.150, 0.060), D65, SRGB_TRANSFER)
REC_709 = RgbStandard("Rec. 709", (0.64, 0.33), (0.30, 0.60), (0.15, 0.06), D65, REC_709_TRANSFER)
REC_2020 = RgbStandard("Rec. 2020", (0.708, 0.292), (0.170, 0.797), (0.131, 0.046), D65, REC_709_TRANSFER)
PROPHOTO_RGB = RgbStandard("ProPhoto RGB", (0.7347, 0.2653), (0.1596, 0.8404), (0.0366, 0.0001), D50,
                           PROPHOTO_TRANSFER)

# opRGB is the ISO name of Adobe RGB (1998)
OP_RGB = ADOBE_RGB

RGB_STANDARDS: dict[str, RgbStandard] = {
    standard.name: standard for standard in (SRGB, ADOBE_RGB, DISPLAY_P3, REC_709, REC_2020, PROPHOTO_RGB)
}
# endregion


# region Chromatic adaptation
ADAPTATION_MATRICES: dict[str, np.ndarray] = {
    # http://brucelindbloom.com/Eqn_ChromAdapt.html, column vector form
    "xyz_scaling": np.identity(3),
    "bradford": np.asarray([
        [0.8951, 0.2664, -0.1614],
        [-0.7502, 1.7135, 0.0367],
        [0.0389, -0.0685, 1.0296]
    ]),
    "von_kries": np.asarray([
        [0.40024, 0.70760, -0.08081],
        [-0.22630, 1.16532, 0.04570],
        [0.00000, 0.00000, 0.91822]
    ])
}


@lru_cache(maxsize=None)
def adaptation_matrix(source: WhitePoint, destination: WhitePoint, method: str = "bradford") -> np.ndarray:
    """
    Computes the linear transform that maps XYZ under the source white to XYZ under the destination
    white. The matrix acts on column vectors.
    """
    cone_response = ADAPTATION_MATRICES[method.lower()]
    source_cone = cone_response @ source.xyz
    destination_cone = cone_response @ destination.xyz
    matrix = np.linalg.inv(cone_response) @ np.diag(destination_cone / source_cone) @ cone_response
    matrix.flags.writeable = False
    return matrix
# endregion


class Defaults:
    """
    Read-only library defaults
    """
    dtype = np.float64
    """
    Component type of colors constructed without an explicit dtype
    """
    white_point = D65
    """
    White point of the unparameterized XYZ, Lab, Lch, Luv, Lchuv, Yxy and LinearGray types
    """
    rgb_standard = SRGB
    """
    Standard of the unparameterized RGB, HSL, HSV, HWB, CMYK and Gray types
    """
    adaptation = "bradford"
    """
    Chromatic adaptation method used between hub spaces of different white points
    """
    tolerance = 1e-5
    """
    Absolute tolerance of Color.isclose
    """
