#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the llmdocs library.

The converter itself is total over any tree the HTML parser can build:
malformed markup never raises. The exceptions below cover the remaining
surface: invalid options, unreadable files and a missing parser backend.
Any other exception raised by the parser itself propagates unchanged.

Exception Hierarchy
-------------------
- LlmDocsError (base exception)

  - ValidationError (parameter/option validation)

  - FileError (CLI input/output failures)

  - DependencyError (missing parser backend packages)

"""

from typing import Any


class LlmDocsError(Exception):
    """Base exception class for all llmdocs-specific errors.

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


class ValidationError(LlmDocsError):
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


class FileError(LlmDocsError):
    """Exception raised when an input or output file cannot be used.

    Parameters
    ----------
    message : str
        Description of the file error
    file_path : str, optional
        Path to the problematic file
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, file_path: str | None = None, original_error: Exception | None = None):
        """Initialize the file error with path and message."""
        super().__init__(message, original_error=original_error)
        self.file_path = file_path


class DependencyError(LlmDocsError):
    """Exception raised when a selected parser backend is not installed.

    Parameters
    ----------
    converter_name : str
        Name of the component requiring the dependency
    missing_packages : list[tuple[str, str]]
        List of (package_name, version_spec) tuples for missing packages
    message : str, optional
        Custom error message. If not provided, generates a helpful message
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        converter_name: str,
        missing_packages: list[tuple[str, str]],
        message: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the dependency error with package details."""
        if message is None:
            if missing_packages:
                pkg_list = ", ".join(f"'{name}{spec}'" if spec else f"'{name}'" for name, spec in missing_packages)
                message = f"{converter_name} requires the following packages: {pkg_list}"
                packages_str = " ".join(f'"{name}{spec}"' if spec else name for name, spec in missing_packages)
                message += f"\nInstall with: pip install --upgrade {packages_str}"
            else:
                message = f"{converter_name} is missing a required dependency"

        super().__init__(message, original_error=original_error)
        self.converter_name = converter_name
        self.missing_packages = missing_packages


__all__ = [
    "LlmDocsError",
    "ValidationError",
    "FileError",
    "DependencyError",
]
