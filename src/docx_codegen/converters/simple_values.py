"""
Encoding of leaf values: scalar attributes, enumeration members and raw part
payloads.

Values that cannot be parsed are never raised as errors.  They are turned into
comment statements so generation of the rest of the document continues.
"""

from __future__ import annotations

import base64
import logging
import math
from dataclasses import dataclass
from typing import Optional

from ..core.code_model import (
    PrimitiveExpression,
    Statement,
    StatementCollection,
    TryFinallyStatement,
    arg,
    assign,
    call,
    comment,
    declare,
    invoke,
    new,
    prim,
    prop,
    static_field,
    type_expr,
    var,
)
from ..core.context import TraversalContext
from ..core.schema import SYSTEM, SYSTEM_IO, PropertySchema, ValueType

logger = logging.getLogger(__name__)

_INT_RANGES = {
    ValueType.INT: (-(2 ** 31), 2 ** 31 - 1),
    ValueType.UINT: (0, 2 ** 32 - 1),
    ValueType.LONG: (-(2 ** 63), 2 ** 63 - 1),
}

_TRUE_VALUES = ("true", "on", "1")
_FALSE_VALUES = ("false", "off", "0")


@dataclass(frozen=True)
class ScalarEncoding:
    """Either a literal for the value or the reason it could not be encoded."""

    expression: Optional[PrimitiveExpression] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.expression is not None


def invalid_value_comment(raw: str, property_name: str) -> str:
    return f"'{raw}' is not a valid value for the {property_name} property"


def encode_scalar(schema: PropertySchema, raw: str) -> ScalarEncoding:
    """Convert a raw attribute string into a typed literal."""
    value_type = schema.value_type

    if value_type is ValueType.STRING:
        return ScalarEncoding(prim(raw))

    if value_type in _INT_RANGES:
        low, high = _INT_RANGES[value_type]
        try:
            number = int(raw.strip())
        except ValueError:
            return ScalarEncoding(error=invalid_value_comment(raw, schema.name))
        if not low <= number <= high:
            return ScalarEncoding(error=invalid_value_comment(raw, schema.name))
        return ScalarEncoding(prim(number))

    if value_type is ValueType.DOUBLE:
        try:
            number = float(raw)
        except ValueError:
            return ScalarEncoding(error=invalid_value_comment(raw, schema.name))
        if math.isnan(number) or math.isinf(number):
            return ScalarEncoding(error=invalid_value_comment(raw, schema.name))
        return ScalarEncoding(prim(number))

    if value_type is ValueType.BOOL:
        lowered = raw.strip().lower()
        if lowered in _TRUE_VALUES:
            return ScalarEncoding(prim(True))
        if lowered in _FALSE_VALUES:
            return ScalarEncoding(prim(False))
        return ScalarEncoding(error=invalid_value_comment(raw, schema.name))

    # complex values are rebuilt from their inner text
    return ScalarEncoding(prim(raw))


def scalar_statement(variable_name: str, schema: PropertySchema, raw: str) -> Statement:
    """Assignment of one scalar property, or a comment when the value is invalid."""
    encoding = encode_scalar(schema, raw)
    if not encoding.ok:
        logger.warning(f"{variable_name}.{schema.name}: {encoding.error}")
        return comment(encoding.error)
    return assign(prop(var(variable_name), schema.name), encoding.expression)


def encode_enum(
    schema: PropertySchema, raw: str, variable_name: str, context: TraversalContext
) -> Statement:
    """
    Assignment of an enumeration member to ``variable_name.<Property>``.

    The raw XML value is checked against the enumeration's known values; an
    unknown value becomes a comment naming the property and the variable.
    """
    enum = schema.enum
    member = enum.member_name(raw)
    if member is None:
        text = (
            f"Could not parse value of '{schema.name}' property for variable "
            f"`{variable_name}` - {enum.type_name} enum does not contain '{raw}' field"
        )
        logger.warning(text)
        return comment(text)

    enum_type = context.type_name(enum.type_name, enum.namespace)
    return assign(prop(var(variable_name), schema.name), static_field(enum_type, member))


def encode_feed_data(payload: bytes, context: TraversalContext, part_argument: str = "part"):
    """
    Statements that re-feed a part from a base64 literal of ``payload``.

    The decoded stream is disposed in a finally block.
    """
    string_type = context.type_name("String", SYSTEM)
    stream_type = context.type_name("Stream", SYSTEM_IO)
    memory_stream_type = context.type_name("MemoryStream", SYSTEM_IO)
    convert_type = context.type_name("Convert", SYSTEM)

    payload_var = context.new_variable_name("Base64Payload")
    stream_var = context.new_variable_name("MemoryStream")

    statements = StatementCollection()
    statements.add(declare(string_type, payload_var, prim(base64.b64encode(payload).decode("ascii"))))
    statements.add_blank_line()
    statements.add(
        declare(
            stream_type,
            stream_var,
            new(
                memory_stream_type,
                invoke(type_expr(convert_type), "FromBase64String", var(payload_var)),
                prim(False),
            ),
        )
    )
    statements.add(
        TryFinallyStatement(
            try_statements=[call(arg(part_argument), "FeedData", var(stream_var))],
            finally_statements=[call(var(stream_var), "Dispose")],
        )
    )
    return statements
