"""
Arena view of a python-docx package.

python-docx hands out live ``Part`` objects that reference each other through
``Relationships`` dictionaries; the same part object can be reached from many
owners.  ``DocumentGraph`` stores each part exactly once, under a ``PartKey``
derived from its part name, and describes ownership as ``OwnedPart`` edges
(relationship id plus key).  Builders work with keys and never depend on
object identity.
"""

from __future__ import annotations

import io
import logging
import posixpath
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional
from urllib.parse import urlsplit

from docx.opc.constants import RELATIONSHIP_TYPE as RT
from docx.opc.package import OpcPackage
from docx.opc.part import Part, XmlPart
from docx.oxml.parser import parse_xml
from lxml import etree

from ..exceptions import require
from .schema import PartSchema, part_schema_for, qn

logger = logging.getLogger(__name__)


@dataclass(frozen=True, order=True)
class PartKey:
    """Canonical, case-folded part name; equality ignores object identity."""

    path: str

    @classmethod
    def from_partname(cls, partname: str) -> PartKey:
        require(partname, "partname")
        path = posixpath.normpath("/" + str(partname).lstrip("/"))
        return cls(path.casefold())

    @classmethod
    def for_part(cls, part: Part) -> PartKey:
        require(part, "part")
        return cls.from_partname(part.partname)

    def __str__(self) -> str:
        return self.path


@dataclass(frozen=True)
class ExternalRelationship:
    """A relationship whose target lives outside the package."""

    relationship_id: str
    relationship_type: str
    target: str

    @property
    def is_relative(self) -> bool:
        # single-letter schemes are Windows drive letters
        return len(urlsplit(self.target).scheme) <= 1


@dataclass(frozen=True)
class OwnedPart:
    """Edge from an owner (part or package) to one of its parts."""

    relationship_id: str
    relationship_type: str
    key: PartKey


@dataclass
class PartNode:
    """One part in the arena plus its outgoing edges."""

    key: PartKey
    part: Part
    schema: PartSchema
    children: List[OwnedPart] = field(default_factory=list)
    hyperlinks: List[ExternalRelationship] = field(default_factory=list)
    external_relationships: List[ExternalRelationship] = field(default_factory=list)
    _root_resolved: bool = field(default=False, repr=False)
    _root: Optional[etree._Element] = field(default=None, repr=False)

    @property
    def partname(self) -> str:
        return str(self.part.partname)

    @property
    def content_type(self) -> str:
        return self.part.content_type

    @property
    def type_name(self) -> str:
        return self.schema.type_name

    def read_payload(self) -> bytes:
        """Read the part's serialized bytes once."""
        with io.BytesIO(self.part.blob or b"") as stream:
            return stream.read()

    def root_element(self, parse_xml_parts: bool = True) -> Optional[etree._Element]:
        """
        Structured root content of the part, or None when the part has to be
        re-fed from its raw bytes.

        A root exists only when the part schema declares one.  Parts loaded by
        python-docx as ``XmlPart`` already carry their element; other XML parts
        are parsed from their blob when ``parse_xml_parts`` is set.
        """
        if self._root_resolved:
            return self._root

        self._root = self._resolve_root(parse_xml_parts)
        self._root_resolved = True
        return self._root

    def _resolve_root(self, parse_xml_parts: bool) -> Optional[etree._Element]:
        if not self.schema.has_root:
            return None

        root_tag = qn(self.schema.root_tag)
        if isinstance(self.part, XmlPart):
            element = self.part.element
            if element is not None and element.tag == root_tag:
                return element
            logger.debug(f"{self.partname}: loaded root {element.tag} does not match {root_tag}")
            return None

        if not parse_xml_parts:
            return None

        try:
            element = parse_xml(self.part.blob)
        except etree.XMLSyntaxError as e:
            logger.warning(f"{self.partname}: XML payload could not be parsed, using raw bytes ({e})")
            return None

        if element.tag != root_tag:
            logger.debug(f"{self.partname}: parsed root {element.tag} does not match {root_tag}")
            return None
        return element


class DocumentGraph:
    """
    Part arena for one package (or one part and everything it reaches).

    Nodes are created lazily the first time a key is requested and are cached
    for the lifetime of the graph, which is one generation request.
    """

    def __init__(self, package: Optional[OpcPackage] = None):
        self.package = package
        self.logger = logging.getLogger(__name__)
        self._nodes: Dict[PartKey, PartNode] = {}

    @classmethod
    def from_package(cls, package: OpcPackage) -> DocumentGraph:
        require(package, "package")
        return cls(package)

    @classmethod
    def from_part(cls, part: Part) -> DocumentGraph:
        require(part, "part")
        graph = cls(getattr(part, "package", None))
        graph.add_part(part)
        return graph

    def __contains__(self, key: PartKey) -> bool:
        return key in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[PartNode]:
        return iter(self._nodes.values())

    def add_part(self, part: Part) -> PartNode:
        """Store ``part`` (once) and return its node."""
        key = PartKey.for_part(part)
        node = self._nodes.get(key)
        if node is not None:
            return node

        node = PartNode(key=key, part=part, schema=part_schema_for(part.content_type))
        self._nodes[key] = node

        for rel in part.rels.values():
            if rel.is_external:
                external = ExternalRelationship(
                    relationship_id=rel.rId,
                    relationship_type=rel.reltype,
                    target=rel.target_ref,
                )
                if rel.reltype == RT.HYPERLINK:
                    node.hyperlinks.append(external)
                else:
                    node.external_relationships.append(external)
            else:
                node.children.append(self._own(rel))

        self.logger.debug(
            f"Added {node.type_name} {node.partname} "
            f"({len(node.children)} children, {len(node.hyperlinks)} hyperlinks)"
        )
        return node

    def node(self, key: PartKey) -> PartNode:
        return self._nodes[key]

    def package_children(self) -> List[OwnedPart]:
        """Internal relationships of the package itself, in relationship order."""
        if self.package is None:
            return []
        return [self._own(rel) for rel in self.package.rels.values() if not rel.is_external]

    def _own(self, rel) -> OwnedPart:
        child = self.add_part(rel.target_part)
        return OwnedPart(
            relationship_id=rel.rId,
            relationship_type=rel.reltype,
            key=child.key,
        )
