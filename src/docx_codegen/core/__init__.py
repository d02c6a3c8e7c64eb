"""
Core model, schema registry and traversal state.
"""

from .blueprints import Blueprint, BlueprintCollection
from .code_model import CompileUnit, StatementCollection
from .context import TraversalContext
from .document_graph import DocumentGraph, OwnedPart, PartKey, PartNode
from .handlers import (
    USE_DEFAULT,
    ElementHandler,
    ElementOverride,
    MethodOverride,
    OpenXmlHandler,
    PartHandler,
    PartOverride,
)
from .naming import generate_variable_name

__all__ = [
    "Blueprint",
    "BlueprintCollection",
    "CompileUnit",
    "StatementCollection",
    "TraversalContext",
    "DocumentGraph",
    "OwnedPart",
    "PartKey",
    "PartNode",
    "USE_DEFAULT",
    "ElementHandler",
    "ElementOverride",
    "MethodOverride",
    "OpenXmlHandler",
    "PartHandler",
    "PartOverride",
    "generate_variable_name",
]
