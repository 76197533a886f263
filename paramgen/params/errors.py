"""
Errors and Consistent Error Message Formatting.

Two families of errors live here:

Generator-time errors (all ParamgenException subclasses) abort a run:
- LoadError: the parameter package could not be loaded or is malformed
- ExtractionError: a field cannot be turned into a ParameterDesc
- AnnotationError: a metadata annotation is malformed
- RenderError: the generated module could not be rendered
- DescriptorParseError: a serialized descriptor could not be parsed back

Runtime errors are raised by generated modules to their callers:
- DecodeError: an untyped mapping does not match the Params shape
- ParamsValidationError: a decoded Params instance failed validation

Message Format
--------------
Messages that name a parameter quote it: 'param_name'.
"""

from typing import Any, List, Optional

from ..common import ParamgenException


class LoadError(ParamgenException):
    """Raised when the parameter package cannot be loaded."""


class ExtractionError(ParamgenException):
    """Raised when a Params field cannot be described."""


class AnnotationError(ExtractionError):
    """Raised when a metadata annotation is malformed."""


class RenderError(ParamgenException):
    """Raised when the generated module cannot be rendered."""


class DescriptorParseError(ParamgenException):
    """Raised when a serialized descriptor is not valid."""


class ParamsValidationError(ValueError):
    """Raised by generated validate() functions."""


class DecodeError(ValueError):
    """
    Raised when a mapping cannot be decoded into a Params instance.

    Attributes:
        errors: Every problem found, one message each.
    """

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__(format_decode_errors(self.errors))


def format_param(name: str) -> str:
    """Format a parameter name for error messages."""
    return f"'{name}'"


def format_value(value: Any) -> str:
    """Format a value for error messages."""
    if isinstance(value, str):
        return f"'{value}'"
    return str(value)


def type_error(param: str, expected_type: str, got: Any) -> str:
    """
    Create a type mismatch error message.

    Args:
        param: Parameter name (dotted for nested parameters)
        expected_type: Expected type description
        got: Actual value received

    Returns:
        Formatted error message.
    """
    return f"{format_param(param)} must be {expected_type}, got {type(got).__name__} {format_value(got)}"


def unknown_param_error(param: str, suggestions: Optional[List[str]] = None) -> str:
    """
    Create an error message for an unknown parameter with suggestions.

    Args:
        param: The unknown parameter name.
        suggestions: Optional list of similar valid parameter names.

    Returns:
        Formatted error message with "Did you mean?" if suggestions available.
    """
    base_msg = f"Unknown parameter {format_param(param)}"
    if suggestions:
        if len(suggestions) == 1:
            return f"{base_msg}. Did you mean {format_param(suggestions[0])}?"
        quoted = [format_param(s) for s in suggestions]
        return f"{base_msg}. Did you mean one of: {', '.join(quoted)}?"
    return base_msg


def format_decode_errors(errors: List[str]) -> str:
    """Join decode problems into a single multi-line message."""
    lines = [f"{len(errors)} error(s) decoding:", ""]
    lines.extend(f"* {err}" for err in errors)
    return "\n".join(lines)
