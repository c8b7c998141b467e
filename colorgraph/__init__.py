import logging

# Color spaces
from .spaces import ColorType, XYZ, LinearRGB, RGB, sRGB, LinearSRGB, opRGB, LinearOpRGB, CMYK, LMS
# Hue based spaces
from .spaces import HSL, HSV, HWB
# Perceptual color spaces
from .spaces import LAB, LCH, LUV, LCHUV, Yxy
# Gray
from .spaces import LinearGray, Gray
# Conversion functions
from .spaces import convert, convert_through_hub, define_space
from .graph import ConversionGraph
from .component import Channel
from .hues import normalize_angle, normalize_angle_positive, hue_difference
# Parameters
from .parameters import (
    Defaults,
    WhitePoint,
    RgbStandard,
    A, B, C, D50, D55, D65, D75, E, F2, F7, F11,
    SRGB, ADOBE_RGB, OP_RGB, DISPLAY_P3, REC_709, REC_2020, PROPHOTO_RGB,
    WHITE_POINTS,
    RGB_STANDARDS,
    SRGB_TRANSFER, REC_709_TRANSFER, PROPHOTO_TRANSFER, ADOBE_TRANSFER, LINEAR_TRANSFER,
)
# Parsing functions
from .parsing import parse, parse_hex, parse_named, parse_functional
# Operation functions
from .operation import (
    mix,
    lighten,
    darken,
    saturate,
    desaturate,
    shift_hue,
    clamp,
    is_within_bounds,
    composite,
    composite_over,
    blend,
    BLEND_MODES,
    premultiply,
    unpremultiply,
    relative_luminance,
    contrast_ratio,
    is_min_contrast,
    is_min_contrast_large,
    is_enhanced_contrast,
    is_enhanced_contrast_large,
)
from .gradient import Gradient, GradientSlice
from .exceptions import *

logging.getLogger(__name__).addHandler(logging.NullHandler())
