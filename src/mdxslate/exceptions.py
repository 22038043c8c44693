#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the mdxslate library.

This module defines specialized exception classes for the error conditions
that can occur while parsing MDX text, converting between the mdast and Slate
trees, and printing mdast back to text.

Exception Hierarchy
-------------------
- MdxSlateError (base exception)

  - ValidationError (parameter/option validation)
    - InvalidOptionsError (wrong options class for a component)

  - ParsingError (input document parsing failures)
    - MarkupSyntaxError (malformed JSX tag fragment)

  - RenderingError (mdast to text failures)

  - ConversionError (tree conversion failures)
    - UnknownNodeError (no rule matches a node)

  - DependencyError (missing/incompatible packages)

"""

from typing import Any


class MdxSlateError(Exception):
    """Base exception class for all mdxslate-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(MdxSlateError):
    """Exception raised for invalid input parameters or options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class InvalidOptionsError(ValidationError):
    """Exception raised when an incorrect options class is provided to a component.

    Parameters
    ----------
    component_name : str
        Name of the component that received invalid options
    expected_type : type
        The expected options class type
    received_type : type
        The actual options class type that was received
    message : str, optional
        Custom error message. If not provided, generates a helpful message

    """

    def __init__(
        self,
        component_name: str,
        expected_type: type,
        received_type: type,
        message: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the invalid options error."""
        if message is None:
            message = (
                f"{component_name} expected options of type '{expected_type.__name__}' "
                f"but received '{received_type.__name__}'."
            )
        super().__init__(
            message, parameter_name="options", parameter_value=received_type, original_error=original_error
        )
        self.component_name = component_name
        self.expected_type = expected_type
        self.received_type = received_type


class ParsingError(MdxSlateError):
    """Exception raised when parsing input text fails.

    Parameters
    ----------
    message : str
        Description of the parsing failure
    parsing_stage : str, optional
        The stage of parsing where the error occurred
    original_error : Exception, optional
        The underlying exception that caused the parsing failure

    """

    def __init__(self, message: str, parsing_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the parsing error."""
        super().__init__(message, original_error)
        self.parsing_stage = parsing_stage


class MarkupSyntaxError(ParsingError):
    """Exception raised when a JSX tag fragment cannot be scanned.

    The public tag helpers catch this error and fall back to an opaque
    result, so callers of :func:`mdxslate.jsx.parse_tag` and
    :func:`mdxslate.jsx.apply_props` never see it.

    Parameters
    ----------
    message : str
        Description of the syntax problem
    position : int, optional
        Offset in the fragment where scanning failed

    """

    def __init__(self, message: str, position: int | None = None):
        """Initialize the markup syntax error."""
        if position is not None:
            message = f"{message} (at offset {position})"
        super().__init__(message, parsing_stage="jsx")
        self.position = position


class RenderingError(MdxSlateError):
    """Exception raised when printing an mdast tree to text fails.

    Parameters
    ----------
    message : str
        Description of the rendering failure
    rendering_stage : str, optional
        The stage of rendering where the error occurred
    original_error : Exception, optional
        The underlying exception that caused the rendering failure

    """

    def __init__(self, message: str, rendering_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the rendering error."""
        super().__init__(message, original_error)
        self.rendering_stage = rendering_stage


class ConversionError(MdxSlateError):
    """Exception raised when converting a tree in either direction fails.

    A failing rule aborts the whole conversion; the error names the node
    type and direction of the innermost node whose rule failed.

    Parameters
    ----------
    message : str
        Description of the conversion failure
    node_type : str, optional
        Type of the node being converted
    direction : str, optional
        ``"deserialize"`` (mdast to Slate) or ``"serialize"`` (Slate to mdast)
    original_error : Exception, optional
        The underlying exception raised by the rule

    """

    def __init__(
        self,
        message: str,
        node_type: str | None = None,
        direction: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the conversion error."""
        super().__init__(message, original_error)
        self.node_type = node_type
        self.direction = direction


class UnknownNodeError(ConversionError):
    """Exception raised when no rule converts a node and the policy is ``"raise"``.

    Parameters
    ----------
    node_type : str
        Type of the unmatched node
    direction : str
        Conversion direction

    """

    def __init__(self, node_type: str, direction: str):
        """Initialize the unknown node error."""
        super().__init__(
            f"No rule converts node of type '{node_type}' ({direction})", node_type=node_type, direction=direction
        )


class DependencyError(MdxSlateError):
    """Exception raised when a component's optional packages are unusable.

    The message lists every missing package and version mismatch and ends
    with a ``pip install --upgrade`` line covering all of them.

    Parameters
    ----------
    converter_name : str
        Name of the component requiring dependencies (e.g., ``"mdx"``)
    missing_packages : list[tuple[str, str]]
        ``(package_name, version_spec)`` for packages that failed to import
    version_mismatches : list[tuple[str, str, str]], optional
        ``(package_name, required_version, installed_version)`` for packages
        that imported but are too old or too new
    original_import_error : ImportError, optional
        First ImportError raised while checking

    """

    def __init__(
        self,
        converter_name: str,
        missing_packages: list[tuple[str, str]],
        version_mismatches: list[tuple[str, str, str]] | None = None,
        original_import_error: ImportError | None = None,
    ):
        """Initialize the dependency error with package details."""
        version_mismatches = version_mismatches or []
        component = converter_name.upper()
        lines = []
        if missing_packages:
            names = ", ".join(f"'{name}{spec}'" for name, spec in missing_packages)
            lines.append(f"{component} support requires the following packages: {names}")
        for name, required, installed in version_mismatches:
            lines.append(f"{component} support requires '{name}{required}', but {installed} is installed")

        wanted = missing_packages + [(name, required) for name, required, _ in version_mismatches]
        if wanted:
            lines.append("Install with: pip install --upgrade " + " ".join(f'"{name}{spec}"' for name, spec in wanted))

        super().__init__("\n".join(lines), original_error=original_import_error)
        self.converter_name = converter_name
        self.missing_packages = missing_packages
        self.version_mismatches = version_mismatches
        self.original_import_error = original_import_error
