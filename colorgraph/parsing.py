"""
Construction of colors from text: hexadecimal strings, CSS named colors and the CSS rgb() and hsl()
functional notations. Parsing is the one fallible way of constructing a color; every failure raises a
ParseError subclass.
"""
from __future__ import annotations

import logging
import re

import numpy as np
import webcolors

from typing import Optional

from .exceptions import (
    ComponentOutOfRangeError,
    InvalidColorSyntaxError,
    InvalidHexStringError,
    UnknownColorNameError,
)
from .spaces import RGB, HSL


logger = logging.getLogger(__name__)

_HEX_PATTERN = re.compile(r"^#?([0-9a-fA-F]+)$")
_FUNCTION_PATTERN = re.compile(r"^(rgba?|hsla?)\(\s*(.*?)\s*\)$", re.IGNORECASE)
_NUMBER_PATTERN = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?(%|deg)?$")


# region Hexadecimal
def parse_hex(text: str) -> RGB:
    """
    Parses #rgb, #rgba, #rrggbb and #rrggbbaa, with or without the leading #.
    """
    match = _HEX_PATTERN.match(text.strip())
    if match is None:
        raise InvalidHexStringError("{!r} is not a hexadecimal color.".format(text))

    digits = match.group(1)
    if len(digits) not in (3, 4, 6, 8):
        raise InvalidHexStringError("{!r} must have 3, 4, 6 or 8 hexadecimal digits, not {}.".format(
            text, len(digits)
        ))

    # webcolors reads the color digits, the alpha digits are read here
    color_length = 3 if len(digits) in (3, 4) else 6
    color_digits, alpha_digits = digits[:color_length], digits[color_length:]
    try:
        components = webcolors.hex_to_rgb("#" + color_digits)
    except ValueError as error:
        raise InvalidHexStringError("{!r} is not a hexadecimal color.".format(text)) from error

    alpha = None
    if alpha_digits:
        if len(alpha_digits) == 1:
            alpha_digits *= 2
        alpha = int(alpha_digits, 16) / 255.0
    return RGB.from_format(np.asarray(tuple(components), dtype=np.uint8), alpha=alpha)
# endregion


# region Named colors
_TRANSPARENT = "transparent"


def _named_key(name: str) -> str:
    return re.sub(r"[\s_]", "", name).lower()


def _is_color_name(name: str) -> bool:
    key = _named_key(name)
    if key == _TRANSPARENT:
        return True
    try:
        webcolors.name_to_hex(key)
    except ValueError:
        return False
    return True


def parse_named(name: str) -> RGB:
    """
    Looks up a CSS named color, ignoring case, spaces and underscores. "transparent" is transparent black.
    """
    key = _named_key(name)
    if key == _TRANSPARENT:
        return parse_hex("#00000000")
    try:
        hex_value = webcolors.name_to_hex(key)
    except ValueError as error:
        raise UnknownColorNameError("{!r} is not a known color name.".format(name)) from error
    return parse_hex(hex_value)
# endregion


# region Functional notation
def _parse_number(text: str, what: str) -> tuple[float, Optional[str]]:
    match = _NUMBER_PATTERN.match(text)
    if match is None:
        raise InvalidColorSyntaxError("{!r} is not a valid {}.".format(text, what))
    unit = match.group(3)
    number = float(text[:-len(unit)] if unit else text)
    return number, unit


def _check_range(value: float, minimum: float, maximum: float, text: str, what: str):
    if not minimum <= value <= maximum:
        raise ComponentOutOfRangeError("The {} {!r} is outside [{:g}, {:g}].".format(what, text, minimum, maximum))


def _parse_alpha(text: str) -> float:
    number, unit = _parse_number(text, "alpha")
    if unit == "deg":
        raise InvalidColorSyntaxError("{!r} is not a valid alpha.".format(text))
    if unit == "%":
        _check_range(number, 0, 100, text, "alpha")
        return number / 100
    _check_range(number, 0, 1, text, "alpha")
    return number


def _split_arguments(body: str) -> tuple[list[str], Optional[str]]:
    """
    Splits the arguments of a functional notation, accepting both the comma separated and the space
    separated syntax with a slash before alpha.
    """
    alpha = None
    if "/" in body:
        body, alpha = body.split("/", 1)
        alpha = alpha.strip()
        if "," in body:
            raise InvalidColorSyntaxError("Commas and a slash cannot be mixed in {!r}.".format(body))

    if "," in body:
        arguments = [argument.strip() for argument in body.split(",")]
    else:
        arguments = body.split()

    if len(arguments) == 4 and alpha is None:
        alpha = arguments.pop()
    return arguments, alpha


def _parse_rgb_arguments(arguments: list[str]) -> list[float]:
    """
    Reads rgb() components as fractions. Percentage triplets are rounded to 8 bits by webcolors.
    """
    parsed = []
    for argument in arguments:
        number, unit = _parse_number(argument, "rgb component")
        if unit == "deg":
            raise InvalidColorSyntaxError("{!r} is not a valid rgb component.".format(argument))
        _check_range(number, 0, 100 if unit == "%" else 255, argument, "rgb component")
        parsed.append((number, unit))

    if all(unit == "%" for _, unit in parsed):
        triplet = webcolors.rgb_percent_to_rgb(tuple("{:f}%".format(number) for number, _ in parsed))
        return [component / 255 for component in triplet]
    return [number / 100 if unit == "%" else number / 255 for number, unit in parsed]


def _parse_hsl_arguments(arguments: list[str]) -> list[float]:
    hue, unit = _parse_number(arguments[0], "hue")
    if unit == "%":
        raise InvalidColorSyntaxError("{!r} is not a valid hue.".format(arguments[0]))

    components = [hue]
    for argument, what in zip(arguments[1:], ("saturation", "lightness")):
        number, unit = _parse_number(argument, what)
        if unit != "%":
            raise InvalidColorSyntaxError("The {} {!r} must be a percentage.".format(what, argument))
        _check_range(number, 0, 100, argument, what)
        components.append(number / 100)
    return components


def parse_functional(text: str) -> RGB:
    """
    Parses the CSS rgb(), rgba(), hsl() and hsla() notations. hsl() colors are converted to sRGB.
    """
    match = _FUNCTION_PATTERN.match(text.strip())
    if match is None:
        raise InvalidColorSyntaxError("{!r} is not a functional color notation.".format(text))

    function = match.group(1).lower()
    arguments, alpha_text = _split_arguments(match.group(2))
    if len(arguments) != 3:
        raise InvalidColorSyntaxError("{}() takes 3 components and an optional alpha, got {!r}.".format(
            function, match.group(2)
        ))
    alpha = None if alpha_text is None else _parse_alpha(alpha_text)

    if function.startswith("rgb"):
        return RGB(_parse_rgb_arguments(arguments), alpha=alpha)
    return HSL(_parse_hsl_arguments(arguments), alpha=alpha).convert(RGB)
# endregion


def parse(text: str) -> RGB:
    """
    Parses any supported textual color into sRGB.
    """
    stripped = text.strip()
    if stripped.startswith("#"):
        logger.debug("Parsing %r as a hexadecimal color", text)
        return parse_hex(stripped)
    if _FUNCTION_PATTERN.match(stripped):
        logger.debug("Parsing %r as a functional color", text)
        return parse_functional(stripped)
    # Words that are both hexadecimal and not a color name, like "fade", are read as hexadecimal
    if re.fullmatch(r"[A-Za-z][A-Za-z\s_]*", stripped) and (
            _is_color_name(stripped) or not _HEX_PATTERN.match(stripped)):
        logger.debug("Parsing %r as a named color", text)
        return parse_named(stripped)
    if _HEX_PATTERN.match(stripped):
        logger.debug("Parsing %r as a hexadecimal color without #", text)
        return parse_hex(stripped)
    raise InvalidColorSyntaxError("{!r} is not a recognized color.".format(text))
