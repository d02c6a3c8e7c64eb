"""
Request-scoped traversal state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Optional, Set

from ..exceptions import require
from .blueprints import BlueprintCollection
from .code_model import TypeReference
from .document_graph import DocumentGraph
from .naming import generate_variable_name

if TYPE_CHECKING:
    from ..config import SerializeSettings
    from .handlers import OpenXmlHandler

logger = logging.getLogger(__name__)


@dataclass
class TraversalContext:
    """
    Mutable state of one generation request.

    Every builder receives the same context: the type occurrence counter used
    for naming, the set of namespaces the generated code refers to, and the
    blueprint cache.  Nothing here is shared between requests.
    """

    settings: SerializeSettings
    graph: Optional[DocumentGraph] = None
    type_counts: Dict[str, int] = field(default_factory=dict)
    namespaces: Set[str] = field(default_factory=set)
    blueprints: BlueprintCollection = field(default_factory=BlueprintCollection)

    def __post_init__(self):
        require(self.settings, "settings")

    def new_variable_name(self, type_name: str) -> str:
        return generate_variable_name(type_name, self.type_counts)

    def use_namespace(self, namespace: str) -> None:
        self.namespaces.add(namespace)

    def type_name(self, type_name: str, namespace: str) -> str:
        """Register ``namespace`` and return ``type_name`` as generated code spells it."""
        self.use_namespace(namespace)
        return self.settings.namespace_alias_options.qualify(type_name, namespace)

    def type_ref(self, type_name: str, namespace: str, *type_arguments: str) -> TypeReference:
        return TypeReference(
            name=self.type_name(type_name, namespace),
            type_arguments=[
                TypeReference(name=self.type_name(arg, namespace)) for arg in type_arguments
            ],
        )

    def handler_for(self, type_name: str) -> Optional[OpenXmlHandler]:
        handler = self.settings.handler_for(type_name)
        if handler is not None:
            logger.debug(f"Handler {type(handler).__name__} registered for {type_name}")
        return handler
