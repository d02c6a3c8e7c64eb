"""
Part statement builder and helper routine synthesis.

The entry routine creates every part reachable from the root, in relationship
order, and calls one generated helper routine per part to fill it.  Parts
reached a second time are only attached to their new owner, so each part is
constructed once and has exactly one helper routine.
"""

from __future__ import annotations

import logging
from typing import List, NamedTuple

from ..core.blueprints import Blueprint
from ..core.code_model import (
    MethodDeclaration,
    ParameterDeclaration,
    StatementCollection,
    ThisReference,
    arg,
    assign,
    by_ref,
    call,
    declare,
    invoke,
    new,
    prim,
    prop,
    static_field,
    type_ref,
    var,
)
from ..core.context import TraversalContext
from ..core.document_graph import ExternalRelationship, OwnedPart, PartNode
from ..core.handlers import PartHandler, is_override
from ..core.schema import SYSTEM, PartSchema
from ..exceptions import require
from .element_builder import build_element_statements
from .simple_values import encode_feed_data

logger = logging.getLogger(__name__)

PART_PARAMETER = "part"


class PartOwner(NamedTuple):
    """The variable a part is added to and the schema of its type."""

    variable_name: str
    schema: PartSchema


def build_entry_method_statements(
    owned_part: OwnedPart, context: TraversalContext, owner: PartOwner
) -> StatementCollection:
    """
    Statements that add ``owned_part`` (and, recursively, its children) to ``owner``.

    A part already in the blueprint cache produces a single ``AddPart`` call.
    """
    require(owned_part, "owned_part")
    require(context, "context")
    require(context.graph, "context.graph")
    require(owner.variable_name, "owner.variable_name")

    node = context.graph.node(owned_part.key)
    type_name = context.type_name(node.type_name, node.schema.namespace)

    handler = context.handler_for(node.schema.full_name)
    if isinstance(handler, PartHandler):
        result = handler.build_entry_method_statements(owned_part, node, context, owner.variable_name)
        if is_override(result):
            logger.debug(f"Part override for {node.partname}")
            statements = StatementCollection(result.statements)
            if result.variable_name and not result.relationship_id_assigned:
                statements.add(
                    call(
                        var(owner.variable_name),
                        "ChangeIdOfPart",
                        var(result.variable_name),
                        prim(owned_part.relationship_id),
                    )
                )
            return statements

    statements = StatementCollection()

    existing = context.blueprints.lookup(node.key)
    if existing is not None:
        logger.debug(f"Reusing {existing.variable_name} for {node.partname}")
        statements.add_blank_line()
        statements.add(_attach_existing(owner.variable_name, type_name, existing, owned_part))
        statements.add_blank_line()
        return statements

    variable_name = context.new_variable_name(node.type_name)
    blueprint = Blueprint.create(node, variable_name)

    add_routine = owner.schema.custom_add_routine(node.type_name)
    if add_routine is not None:
        creation = invoke(var(owner.variable_name), add_routine, prim(node.content_type))
    elif node.schema.opaque_payload:
        creation = invoke(
            var(owner.variable_name), "AddNewPart", prim(node.content_type), type_arguments=(type_name,)
        )
    else:
        creation = invoke(
            var(owner.variable_name),
            "AddNewPart",
            prim(owned_part.relationship_id),
            type_arguments=(type_name,),
        )
    statements.add(declare(type_name, variable_name, creation))

    if add_routine is not None:
        statements.add(
            call(
                var(owner.variable_name),
                "ChangeIdOfPart",
                var(variable_name),
                prim(owned_part.relationship_id),
            )
        )

    statements.add(call(ThisReference(), blueprint.method_name, by_ref(var(variable_name))))

    if node.hyperlinks:
        statements.add_blank_line()
        statements.extend(build_hyperlink_relationship_statements(node.hyperlinks, variable_name, context))

    if node.external_relationships:
        statements.add_blank_line()
        statements.extend(
            build_external_relationship_statements(node.external_relationships, variable_name, context)
        )

    statements.add_blank_line()
    context.blueprints.add(blueprint)

    statements.extend(build_child_part_statements(node, context, PartOwner(variable_name, node.schema)))
    return statements


def build_child_part_statements(
    node: PartNode, context: TraversalContext, owner: PartOwner
) -> StatementCollection:
    """Statements for every child part of ``node``, in relationship order."""
    statements = StatementCollection()
    for child in node.children:
        existing = context.blueprints.lookup(child.key)
        if existing is not None:
            child_node = context.graph.node(child.key)
            child_type = context.type_name(child_node.type_name, child_node.schema.namespace)
            statements.add(_attach_existing(owner.variable_name, child_type, existing, child))
            continue
        statements.extend(build_entry_method_statements(child, context, owner))
    return statements


def _attach_existing(owner_variable: str, type_name: str, blueprint: Blueprint, owned_part: OwnedPart):
    return call(
        var(owner_variable),
        "AddPart",
        var(blueprint.variable_name),
        prim(owned_part.relationship_id),
        type_arguments=(type_name,),
    )


def _uri(relationship: ExternalRelationship, context: TraversalContext):
    uri_type = context.type_name("Uri", SYSTEM)
    if relationship.is_relative:
        uri_kind = context.type_name("UriKind", SYSTEM)
        return new(uri_type, prim(relationship.target), static_field(uri_kind, "Relative"))
    return new(uri_type, prim(relationship.target))


def build_hyperlink_relationship_statements(
    hyperlinks: List[ExternalRelationship], parent_variable: str, context: TraversalContext
) -> StatementCollection:
    require(parent_variable, "parent_variable")
    statements = StatementCollection()
    for hyperlink in hyperlinks:
        statements.add(
            call(
                var(parent_variable),
                "AddHyperlinkRelationship",
                _uri(hyperlink, context),
                prim(True),
                prim(hyperlink.relationship_id),
            )
        )
    return statements


def build_external_relationship_statements(
    relationships: List[ExternalRelationship], parent_variable: str, context: TraversalContext
) -> StatementCollection:
    require(parent_variable, "parent_variable")
    statements = StatementCollection()
    for relationship in relationships:
        statements.add(
            call(
                var(parent_variable),
                "AddExternalRelationship",
                prim(relationship.relationship_type),
                _uri(relationship, context),
                prim(relationship.relationship_id),
            )
        )
    return statements


def build_part_feed_data(node: PartNode, context: TraversalContext) -> StatementCollection:
    """Helper body that re-feeds a part from its captured bytes."""
    require(node, "node")
    return encode_feed_data(node.read_payload(), context, PART_PARAMETER)


def build_helper_methods(context: TraversalContext) -> List[MethodDeclaration]:
    """One private helper routine per blueprint, in creation order."""
    require(context, "context")
    methods: List[MethodDeclaration] = []

    for blueprint in context.blueprints:
        node = blueprint.node

        handler = context.handler_for(node.schema.full_name)
        if isinstance(handler, PartHandler):
            result = handler.build_helper_method(blueprint, context)
            if is_override(result):
                for namespace in result.extra_namespaces:
                    context.use_namespace(namespace)
                methods.append(result.method)
                continue

        part_type = context.type_name(node.type_name, node.schema.namespace)
        method = MethodDeclaration(
            name=blueprint.method_name,
            public=False,
            parameters=[ParameterDeclaration(type_ref=type_ref(part_type), name=PART_PARAMETER, direction="ref")],
        )

        root = node.root_element(context.settings.parse_xml_parts)
        if root is None:
            method.statements.extend(build_part_feed_data(node, context))
        else:
            statements, root_variable = build_element_statements(root, context)
            method.statements.extend(statements)
            if root_variable:
                method.statements.append(
                    assign(prop(arg(PART_PARAMETER), node.schema.root_property), var(root_variable))
                )

        methods.append(method)

    return methods
