#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the html2gmi library.

Conversion itself degrades locally: malformed URLs, attributes and odd
document shapes never raise. The exceptions below cover contract violations
and environment problems only.

Exception Hierarchy
-------------------
- Html2GmiError (base exception)

  - ValidationError (parameter/option validation)
    - InvalidOptionsError (wrong options class for the converter)

  - ParsingError (raw HTML could not be turned into a tree)

  - DependencyError (missing tree builder or package)

"""

from __future__ import annotations

from typing import Any


class Html2GmiError(Exception):
    """Base exception class for all html2gmi-specific errors.

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


class ValidationError(Html2GmiError):
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
    """Exception raised when a converter receives the wrong options class.

    Parameters
    ----------
    converter_name : str
        Name of the converter that received the options
    expected_type : type
        The options class the converter expects
    received_type : type
        The class that was actually passed

    """

    def __init__(self, converter_name: str, expected_type: type, received_type: type):
        """Initialize the error with the expected and received option types."""
        message = (
            f"{converter_name} expects options of type {expected_type.__name__}, "
            f"but received {received_type.__name__}"
        )
        super().__init__(message, parameter_name="options", parameter_value=received_type)
        self.converter_name = converter_name
        self.expected_type = expected_type
        self.received_type = received_type


class ParsingError(Html2GmiError):
    """Exception raised when raw HTML cannot be parsed into a tree.

    Parameters
    ----------
    message : str
        Description of the parsing failure
    parsing_stage : str, optional
        Stage of parsing where the error occurred
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, parsing_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the parsing error with stage information."""
        super().__init__(message, original_error=original_error)
        self.parsing_stage = parsing_stage


class DependencyError(Html2GmiError):
    """Exception raised when a required package or tree builder is not available.

    Parameters
    ----------
    converter_name : str
        Name of the component requiring dependencies
    missing_packages : list[tuple[str, str]]
        List of (package_name, version_spec) tuples for missing packages
    message : str, optional
        Custom error message. If not provided, generates a helpful message
    original_import_error : Exception, optional
        The import or lookup failure that triggered this error

    """

    def __init__(
        self,
        converter_name: str,
        missing_packages: list[tuple[str, str]],
        message: str | None = None,
        original_import_error: Exception | None = None,
    ):
        """Initialize the dependency error with package details."""
        if message is None:
            if missing_packages:
                pkg_list = ", ".join(f"'{name}{spec}'" if spec else f"'{name}'" for name, spec in missing_packages)
                packages_str = " ".join(f'"{name}{spec}"' if spec else name for name, spec in missing_packages)
                message = (
                    f"{converter_name.upper()} conversion requires the following packages: {pkg_list}"
                    f"\nInstall with: pip install --upgrade {packages_str}"
                )
            else:
                message = f"{converter_name.upper()} conversion is missing a required dependency"

        super().__init__(message, original_error=original_import_error)
        self.converter_name = converter_name
        self.missing_packages = missing_packages


__all__ = [
    "Html2GmiError",
    "ValidationError",
    "InvalidOptionsError",
    "ParsingError",
    "DependencyError",
]
