"""
Exception types raised by docx-codegen.

Only argument-contract violations and configuration problems are raised.
Document data anomalies are never raised; they are turned into comment
statements inside the generated code instead.
"""

from __future__ import annotations


class DocxCodegenError(Exception):
    """Base class for all docx-codegen errors."""


class ArgumentContractError(DocxCodegenError, ValueError):
    """A required argument was missing, empty or of the wrong kind."""

    def __init__(self, argument: str, message: str = ""):
        self.argument = argument
        super().__init__(message or f"'{argument}' is required")


class DuplicateBlueprintError(DocxCodegenError, KeyError):
    """A blueprint was inserted for a part identity that already has one."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"A blueprint already exists for part '{key}'")


class ConfigurationError(DocxCodegenError):
    """Invalid configuration value or handler reference."""


def require(value, argument: str):
    """Raise ArgumentContractError if value is None or a blank string."""
    if value is None:
        raise ArgumentContractError(argument)
    if isinstance(value, str) and not value.strip():
        raise ArgumentContractError(argument, f"'{argument}' must not be empty")
    return value
