from __future__ import annotations

import numpy as np
import webcolors

from typing import Type, Optional, Callable, Iterable
from abc import ABC

from .component import Channel, resolve_component_type, cast_components
from .graph import ConversionGraph
from .operation import OperationHelpers
from .parameters import (
    Defaults,
    WhitePoint,
    RgbStandard,
    OP_RGB,
)
from .transformation import TransformationFunctions, matrix_transformation_generator, transfer_transformation_generator
from .exceptions import *


# region ColorType
class ColorType(ABC):
    """
    Base class of every color space. A color value holds one or many colors: the last axis of its
    values holds the channels, the leading axes form its color shape.

    Subclasses join the conversion graph when they are defined. A subclass declares:
        channels: the component layout, as Channel objects
        pivot: the registered color type (or its registered name) it converts through
        to_pivot / from_pivot: the two primitive conversions, on float64 arrays
    Conversions to and from every other registered color type are then available.
    """
    channels: tuple[Channel, ...] = ()
    """
    Component layout of the color type
    """
    channel_count: int = 0
    """
    Number of channels. Derived from channels when the class is defined.
    """
    pivot: Optional[Type[ColorType] | str] = None
    """
    The color type this type converts through. None only for hub spaces.
    """
    is_hub: bool = False
    """
    Hub spaces terminate pivot chains. XYZ is the only built-in hub.
    """
    white_point: WhitePoint = Defaults.white_point
    """
    Reference white of the color type
    """
    lightness_channel: Optional[int] = None
    """
    Index of the channel adjusted by lighten and darken
    """
    saturation_channel: Optional[int] = None
    """
    Index of the channel adjusted by saturate and desaturate
    """
    hue_channel: Optional[int] = None
    """
    Index of the cyclic hue channel
    """

    _parameter: Optional[str] = None
    """
    Name of the class attribute that distinguishes variants of a parameterized family
    """
    _parameter_type: Optional[type] = None

    def __init_subclass__(cls, abstract: bool = False, **kwargs):
        super().__init_subclass__(**kwargs)

        # Each family root keeps its own variant cache
        if "_variant_of" not in cls.__dict__:
            cls._variants = dict()

        if abstract:
            return

        cls._configure()
        cls.channel_count = len(cls.channels)
        cls._validate_declaration()
        cls._generate_channel_accessors()
        ConversionGraph.register(cls)
        cls._register_direct_transformations()

    # region Declaration hooks
    @classmethod
    def _configure(cls):
        """
        Derives class attributes from the family parameter. Called before registration.
        """
        pass

    @classmethod
    def _register_direct_transformations(cls):
        """
        Registers specialized transformations once the class is part of the graph.
        """
        pass

    @classmethod
    def declared_pivot(cls) -> Optional[Type[ColorType] | str]:
        """
        :returns: The pivot of the color type. Parameterized families override this to pick the variant
        of the pivot that matches their own parameter.
        """
        return cls.pivot

    @classmethod
    def to_pivot(cls, values: np.ndarray) -> np.ndarray:
        """
        Converts float64 component values of this type into its pivot type
        """
        raise NotImplementedError

    @classmethod
    def from_pivot(cls, values: np.ndarray) -> np.ndarray:
        """
        Converts float64 component values of the pivot type into this type
        """
        raise NotImplementedError

    @classmethod
    def _validate_declaration(cls):
        if not cls.channels:
            raise GraphConfigurationError("{} declares no channels.".format(cls.__name__))

        for channel in cls.channels:
            if not isinstance(channel, Channel):
                raise GraphConfigurationError("The channels of {} must be Channel objects.".format(cls.__name__))
            if channel.name in ColorType.__dict__:
                raise GraphConfigurationError("{} cannot name a channel {!r}.".format(cls.__name__, channel.name))

        if cls.is_hub:
            return

        # The pivot functions must be provided by the color type or one of its built-in parents
        for function_name in ("to_pivot", "from_pivot"):
            owner = next(klass for klass in cls.__mro__ if function_name in klass.__dict__)
            if owner is ColorType:
                raise MissingPivotError("{} does not define {}.".format(cls.__name__, function_name))

    @classmethod
    def _generate_channel_accessors(cls):
        for index, channel in enumerate(cls.channels):
            if channel.name in cls.__dict__:
                continue
            setattr(cls, channel.name, property(
                lambda self, index=index: self._get_channel_by_number(index),
                doc="The {} channel".format(channel.name)
            ))
    # endregion

    # region Parameterized families
    def __class_getitem__(cls, parameter):
        """
        Returns the variant of a parameterized family, for example LAB[D50] or RGB[ADOBE_RGB].
        Variants are created and registered on first use.
        """
        family = cls.__dict__.get("_variant_of", cls)
        if family._parameter is None:
            raise TypeError("{} is not parameterized.".format(family.__name__))
        if not isinstance(parameter, family._parameter_type):
            raise TypeError("{} is parameterized by {}, not {!r}.".format(
                family.__name__, family._parameter_type.__name__, parameter
            ))

        if getattr(family, family._parameter) == parameter:
            return family

        variant = family._variants.get(parameter)
        if variant is not None:
            return variant

        # Creation registers the variant, so concurrent first uses must agree on one class
        with ConversionGraph.lock:
            if parameter not in family._variants:
                name = "{}[{}]".format(family.__name__, parameter.name)
                variant = type(family)(name, (family,), {
                    family._parameter: parameter,
                    "_variant_of": family,
                    "__module__": family.__module__,
                    "__qualname__": name,
                })
                family._variants[parameter] = variant
            return family._variants[parameter]

    @classmethod
    def family(cls) -> Type[ColorType]:
        """
        :returns: The unparameterized root of the color type's family
        """
        return cls.__dict__.get("_variant_of", cls)
    # endregion

    # region Construction
    def __init__(
            self,
            *value,
            alpha: Optional[np.ndarray | float] = None,
            dtype: Optional[type | np.dtype | str] = None
    ):
        # Case 1: Casting
        if len(value) == 1 and isinstance(value[0], ColorType):
            self._init_transform(value[0], alpha, dtype)
            return

        # Case 2: Array of components
        if len(value) == 1:
            values = np.asarray(value[0])
            if self.channel_count == 1 and (values.ndim == 0 or values.shape[-1] != 1):
                values = values[..., np.newaxis]

        # Case 3: One argument per channel
        elif len(value) == self.channel_count:
            values = np.stack(np.broadcast_arrays(*[np.asarray(component) for component in value]), axis=-1)

        # Case 4: Value is not valid
        else:
            raise InvalidComponentShapeError("{} takes {} components, got {}.".format(
                self.__class__.__name__, self.channel_count, len(value)
            ))

        if values.ndim == 0 or values.shape[-1] != self.channel_count:
            raise InvalidComponentShapeError(
                "The value provided for initializing the type {} was invalid. Expected {} channels.".format(
                    self.__class__.__name__,
                    self.channel_count
                )
            )

        if dtype is None and np.issubdtype(values.dtype, np.floating):
            dtype = values.dtype if values.dtype.type in (np.float32, np.float64) else None
        self._init_values(values, alpha, resolve_component_type(dtype))

    def _init_values(self, values: np.ndarray, alpha, dtype: np.dtype):
        values = np.array(values, dtype=dtype)
        values.flags.writeable = False
        self._values = values
        """
        Component values. The last axis holds the channels.
        """

        if alpha is not None:
            try:
                alpha = np.array(np.broadcast_to(alpha, values.shape[:-1]), dtype=dtype)
            except ValueError as error:
                raise InvalidComponentShapeError("Alpha of shape {} does not match colors of shape {}.".format(
                    np.shape(alpha), values.shape[:-1]
                )) from error
            alpha.flags.writeable = False
        self._alpha = alpha
        """
        Straight alpha, or None for fully opaque colors
        """

    def _init_transform(self, original: ColorType, alpha, dtype):
        """
        Initializes a color by converting another one
        """
        destination_class = self.__class__
        dtype = original.dtype if dtype is None else resolve_component_type(dtype)

        # Check if a transformation path exists
        if not ConversionGraph.check_transformation_validity(original.__class__, destination_class):
            raise InvalidTransformationError("The casting from {} to {} is impossible.".format(
                original.__class__.__name__, destination_class.__name__
            ))

        transformation = ConversionGraph.transformation(original.__class__, destination_class)
        values = transformation(original._values.astype(np.float64))
        self._init_values(values, original._alpha if alpha is None else alpha, dtype)

    @classmethod
    def _from_values(cls, values: np.ndarray, alpha: Optional[np.ndarray], dtype: np.dtype) -> ColorType:
        """
        Developer construction from already validated arrays
        """
        color = cls.__new__(cls)
        color._init_values(values, alpha, dtype)
        return color

    @classmethod
    def from_format(cls, values: np.ndarray, dtype: Optional[type | np.dtype | str] = None,
                    alpha: Optional[np.ndarray] = None) -> ColorType:
        """
        Constructs colors from normalized integer data, for example 8 bit RGB. Plain Python integers are read
        as 8 bit components.
        """
        dtype = resolve_component_type(dtype)
        if not isinstance(values, np.ndarray):
            values = np.asarray(values)
            if np.issubdtype(values.dtype, np.integer):
                if np.any((values < 0) | (values > 255)):
                    raise UnsupportedComponentTypeError(
                        "Integer components outside [0, 255] need an explicit uint16 or uint32 array."
                    )
                values = values.astype(np.uint8)
        return cls(cast_components(values, dtype), alpha=alpha, dtype=dtype)
    # endregion

    # region Properties
    @property
    def values(self) -> np.ndarray:
        """
        The read-only component array
        """
        return self._values

    @property
    def alpha(self) -> Optional[np.ndarray]:
        return self._alpha

    @property
    def opacity(self) -> np.ndarray:
        """
        Alpha with missing alpha read as fully opaque
        """
        if self._alpha is None:
            return np.ones(self.color_shape, dtype=self.dtype)
        return self._alpha

    @property
    def dtype(self) -> np.dtype:
        return self._values.dtype

    @property
    def color_shape(self) -> tuple[int, ...]:
        """
        Shape of the color value without the channel axis. A single color has shape ().
        """
        return self._values.shape[:-1]

    def _get_channel_by_number(self, channel: int):
        return self._values[..., channel]

    def components(self) -> tuple:
        """
        :returns: The channel values as a tuple. Python floats for a single color, arrays otherwise.
        """
        if self.color_shape == ():
            return tuple(float(component) for component in self._values)
        return tuple(self._values[..., i] for i in range(self.channel_count))
    # endregion

    # region Conversion and copies
    def convert(self, destination_class: Type[ColorType]) -> ColorType:
        return convert(self, destination_class)

    def astype(self, dtype: type | np.dtype | str) -> ColorType:
        """
        Returns the same colors stored with another component type
        """
        dtype = resolve_component_type(dtype)
        return self._from_values(cast_components(self._values, dtype), self._alpha, dtype)

    def into_format(self, dtype: type | np.dtype | str) -> np.ndarray:
        """
        Casts the component values to another component type, preserving relative magnitude.
        Integer formats map [0, 1] to the full integer range.
        """
        return cast_components(self._values, dtype)

    def replace(self, **channels) -> ColorType:
        """
        Returns a copy with the named channels replaced
        """
        values = self._values.copy()
        names = [channel.name for channel in self.channels]
        for name, value in channels.items():
            if name not in names:
                raise ValueError("{} has no channel {!r}.".format(self.__class__.__name__, name))
            values[..., names.index(name)] = value
        return self._from_values(values, self._alpha, self.dtype)

    def with_alpha(self, alpha: Optional[np.ndarray | float]) -> ColorType:
        return self._from_values(self._values, alpha, self.dtype)

    def without_alpha(self) -> ColorType:
        return self._from_values(self._values, None, self.dtype)
    # endregion

    # region Comparison
    def isclose(self, other: ColorType, tolerance: Optional[float] = None) -> bool:
        """
        Compares two colors of the same type channel by channel. Cyclic channels are compared along the
        shorter arc.
        """
        if other.__class__ is not self.__class__:
            raise ColorTypeMismatchError("Cannot compare {} with {}.".format(
                self.__class__.__name__, other.__class__.__name__
            ))
        tolerance = Defaults.tolerance if tolerance is None else tolerance

        difference = self._values.astype(np.float64) - other._values.astype(np.float64)
        for index, channel in enumerate(self.channels):
            if channel.cyclic:
                half = channel.span / 2
                difference[..., index] = np.mod(difference[..., index] + half, channel.span) - half

        alpha_difference = self.opacity.astype(np.float64) - other.opacity.astype(np.float64)
        return bool(np.all(np.abs(difference) <= tolerance) and np.all(np.abs(alpha_difference) <= tolerance))

    def __eq__(self, other):
        if not isinstance(other, ColorType):
            return NotImplemented
        if other.__class__ is not self.__class__ or self._values.shape != other._values.shape:
            return False
        if (self._alpha is None) != (other._alpha is None):
            return False
        return bool(np.array_equal(self._values, other._values) and
                    (self._alpha is None or np.array_equal(self._alpha, other._alpha)))

    __hash__ = None
    # endregion

    # region Operation catchers
    # Lets numpy arrays and scalars on the left defer to the reflected operators
    __array_ufunc__ = None

    def _arithmetic(self, other, function, operation: str, reflected: bool = False) -> ColorType:
        # Ensure that other is of a valid type
        if not isinstance(other, (ColorType, np.ndarray, np.number, int, float)):
            return NotImplemented
        if reflected:
            return OperationHelpers.arithmetic(other, self, function, operation)
        return OperationHelpers.arithmetic(self, other, function, operation)

    def __add__(self, other: ColorType | np.ndarray | int | float) -> ColorType:
        return self._arithmetic(other, np.add, "add")

    def __radd__(self, other: ColorType | np.ndarray | int | float) -> ColorType:
        return self._arithmetic(other, np.add, "add", reflected=True)

    def __sub__(self, other: ColorType | np.ndarray | int | float) -> ColorType:
        return self._arithmetic(other, np.subtract, "subtract")

    def __rsub__(self, other: ColorType | np.ndarray | int | float) -> ColorType:
        return self._arithmetic(other, np.subtract, "subtract", reflected=True)

    def __mul__(self, other: ColorType | np.ndarray | int | float) -> ColorType:
        return self._arithmetic(other, np.multiply, "multiply")

    def __rmul__(self, other: ColorType | np.ndarray | int | float) -> ColorType:
        return self._arithmetic(other, np.multiply, "multiply", reflected=True)

    def __truediv__(self, other: ColorType | np.ndarray | int | float) -> ColorType:
        return self._arithmetic(other, np.true_divide, "divide")

    def __rtruediv__(self, other: ColorType | np.ndarray | int | float) -> ColorType:
        return self._arithmetic(other, np.true_divide, "divide", reflected=True)
    # endregion

    # region Bulk access
    def __len__(self):
        if self.color_shape == ():
            raise TypeError("A single {} color has no length.".format(self.__class__.__name__))
        return self.color_shape[0]

    def __getitem__(self, index) -> ColorType:
        if self.color_shape == ():
            raise TypeError("A single {} color cannot be indexed.".format(self.__class__.__name__))
        key = index if isinstance(index, tuple) else (index,)
        # The trailing full slice keeps the channel axis out of reach of the index
        if any(item is Ellipsis for item in key):
            key = key + (slice(None),)
        else:
            key = key + (Ellipsis, slice(None))
        try:
            values = self._values[key]
        except IndexError as error:
            raise IndexError("Invalid index {!r} for {} colors of shape {}. The channel axis cannot be indexed.".format(
                index, self.__class__.__name__, self.color_shape
            )) from error
        alpha = None if self._alpha is None else self._alpha[index]
        return self._from_values(values, alpha, self.dtype)

    def __iter__(self):
        for index in range(len(self)):
            yield self[index]
    # endregion

    def __repr__(self):
        if self.color_shape == ():
            body = ", ".join(
                "{}={:.6g}".format(channel.name, float(value)) for channel, value in zip(self.channels, self._values)
            )
            if self._alpha is not None:
                body += ", alpha={:.6g}".format(float(self._alpha))
            return "{}({})".format(self.__class__.__name__, body)
        return "{}(shape={}, dtype={})".format(self.__class__.__name__, self.color_shape, self.dtype.name)
# endregion


# region Hub space
class XYZ(ColorType):
    """
    CIE 1931 XYZ, relative to a reference white with Y = 1. The hub of the conversion graph.
    """
    is_hub = True
    white_point = Defaults.white_point
    lightness_channel = 1

    _parameter = "white_point"
    _parameter_type = WhitePoint

    @classmethod
    def _configure(cls):
        cls.channels = (
            Channel("X", 0.0, cls.white_point.X),
            Channel("Y", 0.0, cls.white_point.Y),
            Channel("Z", 0.0, cls.white_point.Z),
        )
# endregion


# region RGB spaces
class LinearRGB(ColorType):
    """
    Linear RGB of an RGB standard. Converts to XYZ with the matrix derived from the standard's primaries.
    """
    standard = Defaults.rgb_standard
    channels = (Channel("R", 0.0, 1.0), Channel("G", 0.0, 1.0), Channel("B", 0.0, 1.0))

    _parameter = "standard"
    _parameter_type = RgbStandard

    @classmethod
    def _configure(cls):
        cls.white_point = cls.standard.white_point
        cls._to_xyz = staticmethod(matrix_transformation_generator(cls.standard.to_xyz_matrix))
        cls._from_xyz = staticmethod(matrix_transformation_generator(cls.standard.from_xyz_matrix))

    @classmethod
    def declared_pivot(cls):
        return XYZ[cls.standard.white_point]

    @classmethod
    def to_pivot(cls, values):
        return cls._to_xyz(values)

    @classmethod
    def from_pivot(cls, values):
        return cls._from_xyz(values)


class RGB(ColorType):
    """
    Gamma encoded RGB of an RGB standard. The unparameterized type is sRGB.
    """
    standard = Defaults.rgb_standard
    channels = (Channel("R", 0.0, 1.0), Channel("G", 0.0, 1.0), Channel("B", 0.0, 1.0))

    _parameter = "standard"
    _parameter_type = RgbStandard

    @classmethod
    def _configure(cls):
        cls.white_point = cls.standard.white_point
        cls._decode = staticmethod(transfer_transformation_generator(cls.standard.transfer, encode=False))
        cls._encode = staticmethod(transfer_transformation_generator(cls.standard.transfer, encode=True))

    @classmethod
    def declared_pivot(cls):
        return LinearRGB[cls.standard]

    @classmethod
    def to_pivot(cls, values):
        return cls._decode(values)

    @classmethod
    def from_pivot(cls, values):
        return cls._encode(values)

    # region Text
    @classmethod
    def from_hex(cls, text: str) -> RGB:
        from .parsing import parse_hex
        return parse_hex(text).convert(cls)

    @classmethod
    def from_name(cls, name: str) -> RGB:
        from .parsing import parse_named
        return parse_named(name).convert(cls)

    def to_hex(self) -> str:
        """
        Formats a single color as #rrggbb, or #rrggbbaa if it has alpha. Components are clamped first.
        """
        if self.color_shape != ():
            raise OperandShapeMismatchError("to_hex formats a single color, not colors of shape {}.".format(
                self.color_shape
            ))
        components = cast_components(np.clip(self._values, 0, 1), np.uint8)
        text = webcolors.rgb_to_hex(tuple(int(component) for component in components))
        if self._alpha is not None:
            text += "{:02x}".format(int(cast_components(np.clip(self._alpha, 0, 1), np.uint8)))
        return text
    # endregion


class HSL(ColorType):
    """
    Hue, saturation, lightness over the encoded RGB of a standard. Achromatic colors have hue 0.
    """
    standard = Defaults.rgb_standard
    channels = (Channel("H", 0.0, 360.0, cyclic=True), Channel("S", 0.0, 1.0), Channel("L", 0.0, 1.0))
    hue_channel = 0
    saturation_channel = 1
    lightness_channel = 2

    _parameter = "standard"
    _parameter_type = RgbStandard

    @classmethod
    def _configure(cls):
        cls.white_point = cls.standard.white_point

    @classmethod
    def declared_pivot(cls):
        return RGB[cls.standard]

    @classmethod
    def to_pivot(cls, values):
        return TransformationFunctions.hsl_to_rgb(values)

    @classmethod
    def from_pivot(cls, values):
        return TransformationFunctions.rgb_to_hsl(values)


class HSV(ColorType):
    """
    Hue, saturation, value over the encoded RGB of a standard. Achromatic colors have hue 0.
    """
    standard = Defaults.rgb_standard
    channels = (Channel("H", 0.0, 360.0, cyclic=True), Channel("S", 0.0, 1.0), Channel("V", 0.0, 1.0))
    hue_channel = 0
    saturation_channel = 1
    lightness_channel = 2

    _parameter = "standard"
    _parameter_type = RgbStandard

    @classmethod
    def _configure(cls):
        cls.white_point = cls.standard.white_point

    @classmethod
    def declared_pivot(cls):
        return RGB[cls.standard]

    @classmethod
    def to_pivot(cls, values):
        return TransformationFunctions.hsv_to_rgb(values)

    @classmethod
    def from_pivot(cls, values):
        return TransformationFunctions.rgb_to_hsv(values)

    @classmethod
    def _register_direct_transformations(cls):
        hsl = HSL[cls.standard]
        ConversionGraph.add_direct_transformation(cls, hsl, TransformationFunctions.hsv_to_hsl)
        ConversionGraph.add_direct_transformation(hsl, cls, TransformationFunctions.hsl_to_hsv)


class HWB(ColorType):
    """
    Hue, whiteness, blackness. Whiteness and blackness summing to 1 or more describe a gray.
    """
    standard = Defaults.rgb_standard
    channels = (Channel("H", 0.0, 360.0, cyclic=True), Channel("W", 0.0, 1.0), Channel("B", 0.0, 1.0))
    hue_channel = 0

    _parameter = "standard"
    _parameter_type = RgbStandard

    @classmethod
    def _configure(cls):
        cls.white_point = cls.standard.white_point

    @classmethod
    def declared_pivot(cls):
        return HSV[cls.standard]

    @classmethod
    def to_pivot(cls, values):
        return TransformationFunctions.hwb_to_hsv(values)

    @classmethod
    def from_pivot(cls, values):
        return TransformationFunctions.hsv_to_hwb(values)


class CMYK(ColorType):
    """
    Subtractive cyan, magenta, yellow, key over the encoded RGB of a standard
    """
    standard = Defaults.rgb_standard
    channels = (
        Channel("C", 0.0, 1.0),
        Channel("M", 0.0, 1.0),
        Channel("Y", 0.0, 1.0),
        Channel("K", 0.0, 1.0),
    )

    _parameter = "standard"
    _parameter_type = RgbStandard

    @classmethod
    def _configure(cls):
        cls.white_point = cls.standard.white_point

    @classmethod
    def declared_pivot(cls):
        return RGB[cls.standard]

    @classmethod
    def to_pivot(cls, values):
        return TransformationFunctions.cmyk_to_rgb(values)

    @classmethod
    def from_pivot(cls, values):
        return TransformationFunctions.rgb_to_cmyk(values)
# endregion


# region Gray
class LinearGray(ColorType):
    """
    Relative luminance under a white point
    """
    channels = (Channel("Y", 0.0, 1.0),)
    lightness_channel = 0

    _parameter = "white_point"
    _parameter_type = WhitePoint

    @classmethod
    def declared_pivot(cls):
        return XYZ[cls.white_point]

    @classmethod
    def to_pivot(cls, values):
        return TransformationFunctions.luminance_to_xyz(values, cls.white_point)

    @classmethod
    def from_pivot(cls, values):
        return TransformationFunctions.xyz_to_luminance(values)


class Gray(ColorType):
    """
    Luminance encoded with the transfer function of an RGB standard
    """
    standard = Defaults.rgb_standard
    channels = (Channel("Y", 0.0, 1.0),)
    lightness_channel = 0

    _parameter = "standard"
    _parameter_type = RgbStandard

    @classmethod
    def _configure(cls):
        cls.white_point = cls.standard.white_point

    @classmethod
    def declared_pivot(cls):
        return LinearGray[cls.standard.white_point]

    @classmethod
    def to_pivot(cls, values):
        return cls.standard.transfer.decode(values)

    @classmethod
    def from_pivot(cls, values):
        return cls.standard.transfer.encode(values)
# endregion


# region Perceptual color spaces
class LAB(ColorType):
    """
    CIELAB color space. The unparameterized type uses the D65 white point.
    """
    channels = (Channel("L", 0.0, 100.0), Channel("A", -128.0, 127.0), Channel("B", -128.0, 127.0))
    lightness_channel = 0

    _parameter = "white_point"
    _parameter_type = WhitePoint

    @classmethod
    def declared_pivot(cls):
        return XYZ[cls.white_point]

    @classmethod
    def to_pivot(cls, values):
        return TransformationFunctions.lab_to_xyz(values, cls.white_point)

    @classmethod
    def from_pivot(cls, values):
        return TransformationFunctions.xyz_to_lab(values, cls.white_point)


class LCH(ColorType):
    """
    Cylindrical CIELAB: lightness, chroma, hue. Chroma 0 has hue 0.
    """
    channels = (
        Channel("L", 0.0, 100.0),
        Channel("C", 0.0, 128.0, clamp_maximum=False),
        Channel("H", 0.0, 360.0, cyclic=True),
    )
    lightness_channel = 0
    saturation_channel = 1
    hue_channel = 2

    _parameter = "white_point"
    _parameter_type = WhitePoint

    @classmethod
    def declared_pivot(cls):
        return LAB[cls.white_point]

    @classmethod
    def to_pivot(cls, values):
        return TransformationFunctions.polar_to_cartesian(values)

    @classmethod
    def from_pivot(cls, values):
        return TransformationFunctions.cartesian_to_polar(values)


class LUV(ColorType):
    """
    CIELUV color space
    """
    channels = (Channel("L", 0.0, 100.0), Channel("U", -84.0, 176.0), Channel("V", -135.0, 108.0))
    lightness_channel = 0

    _parameter = "white_point"
    _parameter_type = WhitePoint

    @classmethod
    def declared_pivot(cls):
        return XYZ[cls.white_point]

    @classmethod
    def to_pivot(cls, values):
        return TransformationFunctions.luv_to_xyz(values, cls.white_point)

    @classmethod
    def from_pivot(cls, values):
        return TransformationFunctions.xyz_to_luv(values, cls.white_point)


class LCHUV(ColorType):
    """
    Cylindrical CIELUV: lightness, chroma, hue. Chroma 0 has hue 0.
    """
    channels = (
        Channel("L", 0.0, 100.0),
        Channel("C", 0.0, 180.0, clamp_maximum=False),
        Channel("H", 0.0, 360.0, cyclic=True),
    )
    lightness_channel = 0
    saturation_channel = 1
    hue_channel = 2

    _parameter = "white_point"
    _parameter_type = WhitePoint

    @classmethod
    def declared_pivot(cls):
        return LUV[cls.white_point]

    @classmethod
    def to_pivot(cls, values):
        return TransformationFunctions.polar_to_cartesian(values)

    @classmethod
    def from_pivot(cls, values):
        return TransformationFunctions.cartesian_to_polar(values)


class Yxy(ColorType):
    """
    Chromaticity coordinates x, y and luminance Y. Black takes the chromaticity of the white point.
    """
    channels = (Channel("x", 0.0, 1.0), Channel("y", 0.0, 1.0), Channel("Y", 0.0, 1.0))
    lightness_channel = 2

    _parameter = "white_point"
    _parameter_type = WhitePoint

    @classmethod
    def declared_pivot(cls):
        return XYZ[cls.white_point]

    @classmethod
    def to_pivot(cls, values):
        return TransformationFunctions.yxy_to_xyz(values)

    @classmethod
    def from_pivot(cls, values):
        return TransformationFunctions.xyz_to_yxy(values, cls.white_point)


class LMS(ColorType):
    """
    Based on Stockman & Sharpe 2000 2 degree cone fundamentals
    """
    channels = (
        Channel("L", 0.0, 1.0, clamp_maximum=False),
        Channel("M", 0.0, 1.0, clamp_maximum=False),
        Channel("S", 0.0, 1.0, clamp_maximum=False),
    )
    pivot = XYZ

    _to_xyz_matrix = np.asarray([
        [1.94735469, -1.41445123, 0.36476327],
        [0.68990272, 0.34832189, 0],
        [0, 0, 1.93485343]
    ])
    """
    LMS to XYZ, for column vectors
    """

    to_pivot = staticmethod(matrix_transformation_generator(_to_xyz_matrix))
    from_pivot = staticmethod(matrix_transformation_generator(np.linalg.inv(_to_xyz_matrix)))
# endregion


# region Aliases
sRGB = RGB
LinearSRGB = LinearRGB
opRGB = RGB[OP_RGB]
LinearOpRGB = LinearRGB[OP_RGB]
# endregion


# region User-exposed conversion functions
def convert(color: ColorType, destination_class: Type[ColorType]) -> ColorType:
    """
    Converts a color into another registered color type, keeping its component type and alpha.
    """
    if not (isinstance(destination_class, type) and issubclass(destination_class, ColorType)):
        raise InvalidTransformationError("{!r} is not a color type.".format(destination_class))
    if color.__class__ is destination_class:
        return color
    return destination_class(color)


def convert_through_hub(color: ColorType, destination_class: Type[ColorType]) -> ColorType:
    """
    Converts a color by composing its pivot chain into the hub with the chain out of the hub, ignoring
    specialized direct transformations. Agrees with convert within tolerance.
    """
    if not ConversionGraph.check_transformation_validity(color.__class__, destination_class):
        raise InvalidTransformationError("The casting from {} to {} is impossible.".format(
            color.__class__.__name__, getattr(destination_class, "__name__", destination_class)
        ))
    transformation = ConversionGraph.hub_transformation(color.__class__, destination_class)
    values = transformation(color.values.astype(np.float64))
    return destination_class._from_values(values, color.alpha, color.dtype)


def define_space(
        name: str,
        channels: Iterable[Channel],
        pivot: Type[ColorType] | str,
        to_pivot: Callable[[np.ndarray], np.ndarray],
        from_pivot: Callable[[np.ndarray], np.ndarray],
        **attributes) -> Type[ColorType]:
    """
    Declares a new color type from its channels, its pivot and the two pivot conversions. The type joins
    the conversion graph immediately.
    """
    namespace = {
        "channels": tuple(channels),
        "pivot": pivot,
        "to_pivot": staticmethod(to_pivot),
        "from_pivot": staticmethod(from_pivot),
        "__module__": attributes.pop("module", __name__),
    }
    namespace.update(attributes)
    return type(ColorType)(name, (ColorType,), namespace)
# endregion
