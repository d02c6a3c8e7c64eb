"""
Element statement builder.

Turns one lxml element (and its subtree) into the statements that rebuild it,
returning the name of the variable that holds the finished element.  The
element's registered schema decides how it is constructed and which of its
attributes become typed property assignments.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from lxml import etree

from ..core.code_model import (
    StatementCollection,
    assign,
    call,
    declare,
    new,
    prim,
    prop,
    static_field,
    var,
)
from ..core.context import TraversalContext
from ..core.handlers import ElementHandler, is_override
from ..core.schema import (
    ATTRIBUTE_TYPE,
    MC_ATTRIBUTES,
    MC_ATTRIBUTES_TYPE,
    MISC_NODE_TYPE,
    OPENXML,
    SYSTEM_XML,
    UNKNOWN_ELEMENT_TYPE,
    XML_NODE_TYPE,
    ElementKind,
    ElementSchema,
    element_schema_for,
)
from ..exceptions import require
from .simple_values import encode_enum, scalar_statement

logger = logging.getLogger(__name__)

XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"

_MC_CLARK_NAMES = {clark: name for name, clark in MC_ATTRIBUTES}


def misc_node_kind(node) -> Optional[str]:
    """'Comment' or 'ProcessingInstruction' for non-element lxml nodes, else None."""
    if node.tag is etree.Comment:
        return "Comment"
    if node.tag is etree.ProcessingInstruction:
        return "ProcessingInstruction"
    if not isinstance(node.tag, str):
        return "EntityReference"
    return None


def _schema_of(element: etree._Element) -> Optional[ElementSchema]:
    parent = element.getparent()
    parent_tag = parent.tag if parent is not None else None
    return element_schema_for(element.tag, parent_tag)


def full_type_name(element: etree._Element) -> str:
    """Full type name the element is generated as; handlers are keyed by it."""
    kind = misc_node_kind(element)
    if kind is not None:
        return f"{OPENXML}.{MISC_NODE_TYPE}"
    schema = _schema_of(element)
    if schema is None:
        return f"{OPENXML}.{UNKNOWN_ELEMENT_TYPE}"
    return schema.full_name


def _prefix_for(element: etree._Element, namespace: Optional[str]) -> str:
    if not namespace:
        return ""
    if namespace == XML_NAMESPACE:
        return "xml"
    for prefix, uri in element.nsmap.items():
        if uri == namespace and prefix:
            return prefix
    return ""


def owned_namespace_declarations(element: etree._Element) -> List[Tuple[str, str]]:
    """Prefixed namespace declarations made on this element itself, not inherited."""
    parent = element.getparent()
    inherited = parent.nsmap if parent is not None else {}
    declarations = []
    for prefix, uri in element.nsmap.items():
        if inherited.get(prefix) == uri:
            continue
        if not prefix:
            logger.debug(f"Default namespace {uri} on {element.tag} is not declared in generated code")
            continue
        declarations.append((prefix, uri))
    return declarations


def build_element_statements(
    element: etree._Element, context: TraversalContext
) -> Tuple[StatementCollection, str]:
    """
    Build the statements that recreate ``element``.

    Returns the statements and the name of the variable holding the element.
    An empty name means the element was ignored and must not be appended.
    """
    require(element, "element")
    require(context, "context")
    settings = context.settings

    kind = misc_node_kind(element)
    if kind is not None:
        if settings.ignores_misc_node(kind):
            logger.debug(f"Ignoring {kind} node")
            return StatementCollection(), ""
        return _build_misc_node(element, kind, context)

    schema = _schema_of(element)
    if schema is None and settings.ignore_unknown_elements:
        logger.debug(f"Ignoring unknown element {element.tag}")
        return StatementCollection(), ""

    type_name = schema.full_name if schema is not None else f"{OPENXML}.{UNKNOWN_ELEMENT_TYPE}"
    handler = context.handler_for(type_name)
    if isinstance(handler, ElementHandler):
        result = handler.build_element_statements(element, context)
        if is_override(result):
            return result.statements, result.variable_name

    return _ElementStatements(element, schema, context).build()


class _ElementStatements:
    """Default statement generation for one element node."""

    def __init__(self, element: etree._Element, schema: Optional[ElementSchema], context: TraversalContext):
        self.element = element
        self.schema = schema
        self.context = context
        self.statements = StatementCollection()
        # property name -> variable built ahead of the element
        self.property_variables: Dict[str, str] = {}

    @property
    def is_unknown(self) -> bool:
        return self.schema is None

    def build(self) -> Tuple[StatementCollection, str]:
        self._build_complex_properties()
        self._build_mc_attributes()
        name = self._build_construction()
        self._build_namespace_declarations(name)
        self._build_scalar_properties(name)
        self._attach_property_variables(name)
        self._build_enum_properties(name)
        self._build_undeclared_attributes(name)
        self._build_inner_text(name)
        self.statements.add_blank_line()
        self._build_children(name)
        return self.statements, name

    def _build_complex_properties(self) -> None:
        if self.is_unknown:
            return
        for schema in self.schema.complex_properties:
            raw = self.element.get(schema.clark_name)
            if raw is None:
                continue
            type_name, type_arguments = schema.complex_type
            type_ref = self.context.type_ref(type_name, OPENXML, *type_arguments)
            name = self.context.new_variable_name(type_name)
            self.statements.add(declare(type_ref, name, new(type_ref)))
            self.statements.add(assign(prop(var(name), "InnerText"), prim(raw)))
            self.statements.add_blank_line()
            self.property_variables[schema.name] = name

    def _build_mc_attributes(self) -> None:
        present = [
            (name, self.element.get(clark))
            for name, clark in MC_ATTRIBUTES
            if self.element.get(clark) is not None
        ]
        if not present:
            return

        type_name = self.context.type_name(MC_ATTRIBUTES_TYPE, OPENXML)
        name = self.context.new_variable_name(MC_ATTRIBUTES_TYPE)
        self.statements.add(declare(type_name, name, new(type_name)))
        for property_name, value in present:
            self.statements.add(assign(prop(var(name), property_name), prim(value)))
        self.statements.add_blank_line()
        self.property_variables["MCAttributes"] = name

    def _build_construction(self) -> str:
        element = self.element
        if self.is_unknown:
            qname = etree.QName(element)
            type_name = self.context.type_name(UNKNOWN_ELEMENT_TYPE, OPENXML)
            name = self.context.new_variable_name(UNKNOWN_ELEMENT_TYPE)
            creation = new(
                type_name,
                prim(element.prefix or ""),
                prim(qname.localname),
                prim(qname.namespace or ""),
            )
        else:
            type_name = self.context.type_name(self.schema.type_name, self.schema.namespace)
            name = self.context.new_variable_name(self.schema.type_name)
            if self.schema.kind is ElementKind.LEAF_TEXT:
                creation = new(type_name, prim(element.text or ""))
            else:
                creation = new(type_name)

        self.statements.add(declare(type_name, name, creation))
        return name

    def _build_namespace_declarations(self, name: str) -> None:
        declarations = owned_namespace_declarations(self.element)
        if not declarations:
            return

        self.statements.add_blank_line()
        for prefix, uri in declarations:
            self.statements.add(call(var(name), "AddNamespaceDeclaration", prim(prefix), prim(uri)))
        if self.element.attrib or self.property_variables:
            self.statements.add_blank_line()

    def _build_scalar_properties(self, name: str) -> None:
        if self.is_unknown:
            return
        for schema in self.schema.scalar_properties:
            raw = self.element.get(schema.clark_name)
            if raw is None:
                continue
            self.statements.add(scalar_statement(name, schema, raw))

    def _attach_property_variables(self, name: str) -> None:
        for property_name, variable in self.property_variables.items():
            self.statements.add(assign(prop(var(name), property_name), var(variable)))

    def _build_enum_properties(self, name: str) -> None:
        if self.is_unknown:
            return
        for schema in self.schema.enum_properties:
            raw = self.element.get(schema.clark_name)
            if raw is None:
                continue
            self.statements.add(encode_enum(schema, raw, name, self.context))

    def _build_undeclared_attributes(self, name: str) -> None:
        declared = self.schema.declared_attributes if self.schema is not None else frozenset()
        for clark, value in self.element.attrib.items():
            if clark in declared or clark in _MC_CLARK_NAMES:
                continue
            qname = etree.QName(clark)
            attribute_type = self.context.type_name(ATTRIBUTE_TYPE, OPENXML)
            attribute = new(
                attribute_type,
                prim(_prefix_for(self.element, qname.namespace)),
                prim(qname.localname),
                prim(qname.namespace or ""),
                prim(value),
            )
            self.statements.add(call(var(name), "SetAttribute", attribute))

    def _build_inner_text(self, name: str) -> None:
        if not self.is_unknown or not self.element.text:
            return
        if len(self.element):
            logger.debug(f"Dropping mixed-content text of unknown element {self.element.tag}")
            return
        self.statements.add(assign(prop(var(name), "InnerText"), prim(self.element.text)))

    def _build_children(self, name: str) -> None:
        for child in self.element:
            child_statements, child_name = build_element_statements(child, self.context)
            self.statements.extend(child_statements)
            if not child_name:
                continue
            self.statements.add(call(var(name), "Append", var(child_name)))
            self.statements.add_blank_line()


def _build_misc_node(element, kind: str, context: TraversalContext) -> Tuple[StatementCollection, str]:
    type_name = context.type_name(MISC_NODE_TYPE, OPENXML)
    node_type = context.type_name(XML_NODE_TYPE, SYSTEM_XML)
    name = context.new_variable_name(MISC_NODE_TYPE)

    statements = StatementCollection()
    statements.add(
        declare(
            type_name,
            name,
            new(
                type_name,
                static_field(node_type, kind),
                prim(etree.tostring(element, encoding="unicode", with_tail=False)),
            ),
        )
    )
    statements.add_blank_line()
    return statements, name
