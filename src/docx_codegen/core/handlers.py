"""
Per-type override hooks.

A handler is registered in ``SerializeSettings.handlers`` under the full type
name it applies to (``DocumentFormat.OpenXml.Wordprocessing.Paragraph``,
``DocumentFormat.OpenXml.Packaging.ImagePart``).  Every hook returns either an
override result or ``USE_DEFAULT``; the default algorithm also runs when an
override carries no statements.
"""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional, Union

from .code_model import MethodDeclaration, StatementCollection

if TYPE_CHECKING:
    from lxml import etree

    from .blueprints import Blueprint
    from .context import TraversalContext
    from .document_graph import OwnedPart, PartNode


class UseDefault:
    """The hook declines; the default algorithm runs for this node."""

    _instance: Optional[UseDefault] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "USE_DEFAULT"

    def __bool__(self) -> bool:
        return False


USE_DEFAULT = UseDefault()


@dataclass
class ElementOverride:
    """Replacement output for one element and the variable that holds it."""

    statements: StatementCollection
    variable_name: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.statements


@dataclass
class PartOverride:
    """
    Replacement output for one owned part, children included.

    ``relationship_id_assigned`` tells the part builder that the statements
    already give the part its relationship id; otherwise a ``ChangeIdOfPart``
    call for ``variable_name`` is appended.
    """

    statements: StatementCollection
    variable_name: Optional[str] = None
    relationship_id_assigned: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.statements


@dataclass
class MethodOverride:
    """Replacement helper routine for a part."""

    method: Optional[MethodDeclaration] = None
    extra_namespaces: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.method is None


ElementResult = Union[ElementOverride, UseDefault]
PartResult = Union[PartOverride, UseDefault]
MethodResult = Union[MethodOverride, UseDefault]


class OpenXmlHandler(ABC):
    """Base class of all handlers; subclasses override the hooks they need."""


class ElementHandler(OpenXmlHandler):
    """Override hook for element statement generation."""

    def build_element_statements(
        self, element: etree._Element, context: TraversalContext
    ) -> ElementResult:
        return USE_DEFAULT


class PartHandler(OpenXmlHandler):
    """Override hooks for part statement and helper routine generation."""

    def build_entry_method_statements(
        self,
        owned_part: OwnedPart,
        node: PartNode,
        context: TraversalContext,
        owner_variable: str,
    ) -> PartResult:
        return USE_DEFAULT

    def build_helper_method(self, blueprint: Blueprint, context: TraversalContext) -> MethodResult:
        return USE_DEFAULT


def is_override(result) -> bool:
    """True when a hook result should replace the default output."""
    if result is None or isinstance(result, UseDefault):
        return False
    return not result.is_empty
