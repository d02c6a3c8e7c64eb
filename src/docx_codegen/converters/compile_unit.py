"""
Compilation-unit assembly: the public entry points of the generator.

Each entry point seeds a fresh traversal context, runs the element or part
builders, wraps the statements into one generated class and resolves the
namespaces the statements used into sorted imports.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from docx.opc.package import OpcPackage
from docx.opc.part import Part
from lxml import etree

from ..config import SerializeSettings
from ..core.blueprints import Blueprint
from ..core.code_model import (
    CompileUnit,
    MethodDeclaration,
    NamespaceImport,
    ParameterDeclaration,
    ReturnStatement,
    StatementCollection,
    ThisReference,
    TypeDeclaration,
    arg,
    by_ref,
    call,
    type_ref,
    var,
)
from ..core.context import TraversalContext
from ..core.document_graph import DocumentGraph
from ..core.naming import helper_method_name
from ..core.schema import PACKAGE_SCHEMA, PACKAGING
from ..exceptions import require
from .element_builder import build_element_statements, full_type_name
from .part_builder import (
    PART_PARAMETER,
    PartOwner,
    build_child_part_statements,
    build_entry_method_statements,
    build_helper_methods,
)

logger = logging.getLogger(__name__)

PACKAGE_PARAMETER = "package"


def build_imports(context: TraversalContext) -> List[NamespaceImport]:
    """Imports for every namespace used, sorted by how they read once rendered."""
    options = context.settings.namespace_alias_options
    imports = [options.build_import(namespace) for namespace in sorted(context.namespaces)]
    imports.sort(key=lambda item: item.sort_key)
    return imports


def _compile_unit(context: TraversalContext, type_name: str, members: List[MethodDeclaration]) -> CompileUnit:
    unit = CompileUnit(
        namespace=context.settings.namespace_name,
        imports=build_imports(context),
        types=[TypeDeclaration(name=f"{type_name}BuilderClass", members=members)],
    )
    logger.info(
        f"Generated {unit.types[0].name}: {len(members)} methods, "
        f"{len(context.blueprints)} parts, {len(unit.imports)} imports"
    )
    return unit


def generate_element_source(
    element: etree._Element, settings: Optional[SerializeSettings] = None
) -> CompileUnit:
    """Compile unit whose ``Build<Type>()`` routine returns a copy of ``element``."""
    require(element, "element")
    context = TraversalContext(settings=settings or SerializeSettings())

    statements, variable_name = build_element_statements(element, context)
    namespace, type_name = full_type_name(element).rsplit(".", 1)
    return_type = context.type_name(type_name, namespace)

    method = MethodDeclaration(
        name=f"Build{type_name}",
        public=True,
        return_type=type_ref(return_type),
        statements=list(statements),
    )
    if variable_name:
        method.statements.append(ReturnStatement(expression=var(variable_name)))

    return _compile_unit(context, type_name, [method])


def generate_part_source(part: Part, settings: Optional[SerializeSettings] = None) -> CompileUnit:
    """
    Compile unit whose ``Create<PartType>(ref part)`` routine rebuilds ``part``.

    Child parts are added to the entry parameter; the root part's own content
    is filled by its helper routine like every other part.
    """
    require(part, "part")
    graph = DocumentGraph.from_part(part)
    context = TraversalContext(settings=settings or SerializeSettings(), graph=graph)

    node = graph.add_part(part)
    part_type = context.type_name(node.type_name, node.schema.namespace)

    root_blueprint = Blueprint.create(
        node,
        PART_PARAMETER,
        method_name=helper_method_name(context.new_variable_name(node.type_name)),
    )
    context.blueprints.add(root_blueprint)

    statements = build_child_part_statements(node, context, PartOwner(PART_PARAMETER, node.schema))
    statements.add(call(ThisReference(), root_blueprint.method_name, by_ref(arg(PART_PARAMETER))))

    entry = MethodDeclaration(
        name=f"Create{node.type_name}",
        public=True,
        parameters=[ParameterDeclaration(type_ref=type_ref(part_type), name=PART_PARAMETER, direction="ref")],
        statements=list(statements),
    )
    members = [entry] + build_helper_methods(context)
    return _compile_unit(context, node.type_name, members)


def generate_package_source(
    package: OpcPackage, settings: Optional[SerializeSettings] = None
) -> CompileUnit:
    """Compile unit whose ``CreatePackage(package)`` routine rebuilds every part."""
    require(package, "package")
    graph = DocumentGraph.from_package(package)
    context = TraversalContext(settings=settings or SerializeSettings(), graph=graph)
    package_type = context.type_name(PACKAGE_SCHEMA.type_name, PACKAGING)

    owner = PartOwner(PACKAGE_PARAMETER, PACKAGE_SCHEMA)
    statements = StatementCollection()
    for owned_part in graph.package_children():
        statements.extend(build_entry_method_statements(owned_part, context, owner))

    entry = MethodDeclaration(
        name="CreatePackage",
        public=True,
        parameters=[ParameterDeclaration(type_ref=type_ref(package_type), name=PACKAGE_PARAMETER)],
        statements=list(statements),
    )
    members = [entry] + build_helper_methods(context)
    return _compile_unit(context, PACKAGE_SCHEMA.type_name, members)
