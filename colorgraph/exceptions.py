# region Usage errors
class OperandShapeMismatchError(Exception):
    """
    Thrown when the shapes of bulk operands cannot be broadcast together for a given operation
    """
    pass


class InvalidComponentShapeError(Exception):
    """
    Thrown when the values used to construct a color do not have the channel count of its space
    """
    pass


class UnsupportedComponentTypeError(TypeError):
    """
    Thrown when a color is constructed with a component type that is not a supported floating point type
    """
    pass


class ColorTypeMismatchError(Exception):
    """
    Thrown when an operation occurs between two colors of different color types
    """
    pass


class OperationNotFoundError(Exception):
    """
    Thrown when a requested operation is not defined for a color type
    """
    pass


class InvalidTransformationError(Exception):
    """
    Thrown when the user-specified transformation is impossible
    """
    pass
# endregion


# region Graph configuration errors
class GraphConfigurationError(Exception):
    """
    Thrown at class definition time when a color type cannot join the conversion graph
    """
    pass


class MissingPivotError(GraphConfigurationError):
    """
    Thrown when a color type declares no pivot space or no pivot conversion functions
    """
    pass


class PivotCycleError(GraphConfigurationError):
    """
    Thrown when following pivot declarations loops without reaching the hub space
    """
    pass


class DisconnectedGraphError(GraphConfigurationError):
    """
    Thrown when a registered color type cannot reach, or be reached from, the hub space
    """
    pass
# endregion


# region Parse errors
class ParseError(ValueError):
    """
    Base class of errors raised while constructing a color from text
    """
    pass


class InvalidHexStringError(ParseError):
    """
    Thrown when a hexadecimal color string is malformed
    """
    pass


class UnknownColorNameError(ParseError):
    """
    Thrown when a named color is not known
    """
    pass


class ComponentOutOfRangeError(ParseError):
    """
    Thrown when a literal component of a textual color lies outside its valid range
    """
    pass


class InvalidColorSyntaxError(ParseError):
    """
    Thrown when a textual color matches none of the supported notations
    """
    pass
# endregion
