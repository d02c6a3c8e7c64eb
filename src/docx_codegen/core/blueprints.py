"""
Create-once registry of the parts already emitted during one request.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, Optional

from ..exceptions import DuplicateBlueprintError, require
from .document_graph import PartKey, PartNode
from .naming import helper_method_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Blueprint:
    """What was emitted for one part: the variable holding it and its helper routine."""

    key: PartKey
    variable_name: str
    method_name: str
    node: PartNode

    @property
    def type_name(self) -> str:
        return self.node.type_name

    @classmethod
    def create(cls, node: PartNode, variable_name: str, method_name: Optional[str] = None) -> Blueprint:
        """
        Blueprint for ``node`` held in ``variable_name``.

        The helper routine is named after the variable unless ``method_name``
        is given (the root part is held in the entry routine's parameter).
        """
        require(node, "node")
        require(variable_name, "variable_name")
        return cls(
            key=node.key,
            variable_name=variable_name,
            method_name=method_name or helper_method_name(variable_name),
            node=node,
        )


class BlueprintCollection:
    """
    Blueprints keyed by ``PartKey``, kept in creation order.

    Entries are never replaced: adding a second blueprint for the same key is
    a caller bug and raises ``DuplicateBlueprintError``.
    """

    def __init__(self):
        self._items: Dict[PartKey, Blueprint] = {}

    def lookup(self, key: PartKey) -> Optional[Blueprint]:
        return self._items.get(key)

    def add(self, blueprint: Blueprint) -> None:
        require(blueprint, "blueprint")
        if blueprint.key in self._items:
            raise DuplicateBlueprintError(str(blueprint.key))
        self._items[blueprint.key] = blueprint
        logger.debug(f"Blueprint {blueprint.variable_name} -> {blueprint.key}")

    def __contains__(self, key: PartKey) -> bool:
        return key in self._items

    def __iter__(self) -> Iterator[Blueprint]:
        return iter(list(self._items.values()))

    def __len__(self) -> int:
        return len(self._items)
