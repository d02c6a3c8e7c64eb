"""
Intermediate code model produced by the generators.

Every node is a pydantic model carrying a ``kind`` discriminator so a whole
compile unit can be dumped to JSON and validated back.  The model only
describes program structure (declarations, assignments, calls, comments and
try/finally blocks); it has no knowledge of any target language syntax.
"""

from __future__ import annotations

from typing import Annotated, Iterator, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class CodeObject(BaseModel):
    """Base class for all intermediate code nodes."""

    model_config = ConfigDict(extra="forbid")


class TypeReference(CodeObject):
    """Reference to a (possibly alias-qualified, possibly generic) type."""

    name: str
    type_arguments: List[TypeReference] = Field(default_factory=list)


# Expressions


class PrimitiveExpression(CodeObject):
    kind: Literal["primitive"] = "primitive"
    value: Union[None, bool, int, float, str] = None


class VariableReference(CodeObject):
    kind: Literal["variable"] = "variable"
    name: str


class ArgumentReference(CodeObject):
    kind: Literal["argument"] = "argument"
    name: str


class ThisReference(CodeObject):
    """The generated type itself, used to call generated helper methods."""

    kind: Literal["this"] = "this"


class TypeReferenceExpression(CodeObject):
    """A type used in expression position (static members, enum fields)."""

    kind: Literal["type"] = "type"
    type_ref: TypeReference


class PropertyReference(CodeObject):
    kind: Literal["property"] = "property"
    target: Expression
    name: str


class FieldReference(CodeObject):
    kind: Literal["field"] = "field"
    target: Expression
    name: str


class ObjectCreateExpression(CodeObject):
    kind: Literal["object_create"] = "object_create"
    type_ref: TypeReference
    arguments: List[Expression] = Field(default_factory=list)


class MethodReference(CodeObject):
    target: Expression
    name: str
    type_arguments: List[TypeReference] = Field(default_factory=list)


class MethodInvokeExpression(CodeObject):
    kind: Literal["method_invoke"] = "method_invoke"
    method: MethodReference
    arguments: List[Expression] = Field(default_factory=list)


class DirectionExpression(CodeObject):
    """An argument passed by reference (``ref``) or as an output (``out``)."""

    kind: Literal["direction"] = "direction"
    direction: Literal["ref", "out"] = "ref"
    expression: Expression


Expression = Annotated[
    Union[
        PrimitiveExpression,
        VariableReference,
        ArgumentReference,
        ThisReference,
        TypeReferenceExpression,
        PropertyReference,
        FieldReference,
        ObjectCreateExpression,
        MethodInvokeExpression,
        DirectionExpression,
    ],
    Field(discriminator="kind"),
]


# Statements


class BlankLine(CodeObject):
    """Marker used by renderers to separate logical groups of statements."""

    kind: Literal["blank_line"] = "blank_line"


class VariableDeclaration(CodeObject):
    kind: Literal["variable_declaration"] = "variable_declaration"
    type_ref: TypeReference
    name: str
    initializer: Optional[Expression] = None


class AssignStatement(CodeObject):
    kind: Literal["assign"] = "assign"
    target: Expression
    value: Expression


class ExpressionStatement(CodeObject):
    kind: Literal["expression"] = "expression"
    expression: Expression


class CommentStatement(CodeObject):
    kind: Literal["comment"] = "comment"
    text: str


class TryFinallyStatement(CodeObject):
    kind: Literal["try_finally"] = "try_finally"
    try_statements: List[Statement] = Field(default_factory=list)
    finally_statements: List[Statement] = Field(default_factory=list)


class ReturnStatement(CodeObject):
    kind: Literal["return"] = "return"
    expression: Optional[Expression] = None


Statement = Annotated[
    Union[
        BlankLine,
        VariableDeclaration,
        AssignStatement,
        ExpressionStatement,
        CommentStatement,
        TryFinallyStatement,
        ReturnStatement,
    ],
    Field(discriminator="kind"),
]


# Members and containers


class ParameterDeclaration(CodeObject):
    type_ref: TypeReference
    name: str
    direction: Optional[Literal["ref", "out"]] = None


class MethodDeclaration(CodeObject):
    kind: Literal["method"] = "method"
    name: str
    public: bool = False
    parameters: List[ParameterDeclaration] = Field(default_factory=list)
    return_type: Optional[TypeReference] = None
    statements: List[Statement] = Field(default_factory=list)


class TypeDeclaration(CodeObject):
    kind: Literal["type_declaration"] = "type_declaration"
    name: str
    is_class: bool = True
    public: bool = True
    members: List[MethodDeclaration] = Field(default_factory=list)


class NamespaceImport(CodeObject):
    """An import of a symbolic namespace, optionally under an alias."""

    kind: Literal["namespace_import"] = "namespace_import"
    namespace: str
    alias: Optional[str] = None
    alias_first: bool = True
    assignment_operator: str = "="

    @property
    def sort_key(self) -> str:
        """Key used to order imports the way they read once rendered."""
        if not self.alias:
            return self.namespace
        if self.alias_first:
            return f"{self.alias} {self.assignment_operator} {self.namespace}"
        return f"{self.namespace} {self.assignment_operator} {self.alias}"


class CompileUnit(CodeObject):
    """The finished, renderer-agnostic program."""

    kind: Literal["compile_unit"] = "compile_unit"
    namespace: str
    imports: List[NamespaceImport] = Field(default_factory=list)
    types: List[TypeDeclaration] = Field(default_factory=list)

    def iter_statements(self) -> Iterator[Statement]:
        """Yield every statement of every method, including nested blocks."""
        for type_decl in self.types:
            for member in type_decl.members:
                yield from _walk_statements(member.statements)

    def find_comments(self) -> List[CommentStatement]:
        """
        Return all comment statements.

        Recovered data anomalies (unparsable enumeration or scalar values) only
        surface as comments, so this is how callers discover them.
        """
        return [s for s in self.iter_statements() if isinstance(s, CommentStatement)]

    def get_method(self, name: str) -> Optional[MethodDeclaration]:
        for type_decl in self.types:
            for member in type_decl.members:
                if member.name == name:
                    return member
        return None


def _walk_statements(statements: List[Statement]) -> Iterator[Statement]:
    for statement in statements:
        yield statement
        if isinstance(statement, TryFinallyStatement):
            yield from _walk_statements(statement.try_statements)
            yield from _walk_statements(statement.finally_statements)


for _model in (
    TypeReference,
    TypeReferenceExpression,
    PropertyReference,
    FieldReference,
    ObjectCreateExpression,
    MethodReference,
    MethodInvokeExpression,
    DirectionExpression,
    VariableDeclaration,
    AssignStatement,
    ExpressionStatement,
    TryFinallyStatement,
    ReturnStatement,
    ParameterDeclaration,
    MethodDeclaration,
    TypeDeclaration,
    CompileUnit,
):
    _model.model_rebuild()
del _model


class StatementCollection(list):
    """Ordered list of statements with a helper for blank-line markers."""

    def add(self, statement) -> None:
        self.append(statement)

    def add_blank_line(self) -> None:
        self.append(BlankLine())


# Construction shortcuts used throughout the generators


def type_ref(name: str, *type_arguments: str) -> TypeReference:
    return TypeReference(
        name=name,
        type_arguments=[TypeReference(name=arg) for arg in type_arguments],
    )


def var(name: str) -> VariableReference:
    return VariableReference(name=name)


def arg(name: str) -> ArgumentReference:
    return ArgumentReference(name=name)


def prim(value) -> PrimitiveExpression:
    return PrimitiveExpression(value=value)


def prop(target, name: str) -> PropertyReference:
    return PropertyReference(target=target, name=name)


def type_expr(type_name: str) -> TypeReferenceExpression:
    return TypeReferenceExpression(type_ref=TypeReference(name=type_name))


def static_field(type_name: str, name: str) -> FieldReference:
    return FieldReference(target=type_expr(type_name), name=name)


def new(type_reference, *arguments) -> ObjectCreateExpression:
    if isinstance(type_reference, str):
        type_reference = TypeReference(name=type_reference)
    return ObjectCreateExpression(type_ref=type_reference, arguments=list(arguments))


def invoke(target, method: str, *arguments, type_arguments=()) -> MethodInvokeExpression:
    return MethodInvokeExpression(
        method=MethodReference(
            target=target,
            name=method,
            type_arguments=[TypeReference(name=t) for t in type_arguments],
        ),
        arguments=list(arguments),
    )


def call(target, method: str, *arguments, type_arguments=()) -> ExpressionStatement:
    """Method invocation used as a statement."""
    return ExpressionStatement(
        expression=invoke(target, method, *arguments, type_arguments=type_arguments)
    )


def assign(target, value) -> AssignStatement:
    return AssignStatement(target=target, value=value)


def declare(type_reference, name: str, initializer=None) -> VariableDeclaration:
    if isinstance(type_reference, str):
        type_reference = TypeReference(name=type_reference)
    return VariableDeclaration(type_ref=type_reference, name=name, initializer=initializer)


def comment(text: str) -> CommentStatement:
    return CommentStatement(text=text)


def by_ref(expression) -> DirectionExpression:
    return DirectionExpression(direction="ref", expression=expression)
