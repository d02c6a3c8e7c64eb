"""
Variable naming for generated code.
"""

from __future__ import annotations

import re
from typing import Dict

from ..exceptions import require

_GENERIC_SUFFIX = re.compile(r"[<`\[].*$")
_WORD_SPLIT = re.compile(r"[^0-9A-Za-z]+")


def short_type_name(type_name: str) -> str:
    """'W.Paragraph' -> 'Paragraph', 'ListValue<StringValue>' -> 'ListValue'."""
    name = _GENERIC_SUFFIX.sub("", type_name)
    return name.rsplit(".", 1)[-1]


def to_camel_case(name: str) -> str:
    """Lower the first letter of an identifier ('RunProperties' -> 'runProperties')."""
    parts = [p for p in _WORD_SPLIT.split(name) if p]
    if not parts:
        return ""
    head, rest = parts[0], parts[1:]
    return head[0].lower() + head[1:] + "".join(p[0].upper() + p[1:] for p in rest)


def to_pascal_case(name: str) -> str:
    """Upper the first letter of every word ('thaiDistribute' -> 'ThaiDistribute')."""
    parts = [p for p in _WORD_SPLIT.split(name) if p]
    return "".join(p[0].upper() + p[1:] for p in parts)


def generate_variable_name(type_name: str, type_counts: Dict[str, int]) -> str:
    """
    Return a new variable name for a value of ``type_name``.

    The first variable of a type gets the bare lower-camel name; later ones get
    the current count appended (``paragraph``, ``paragraph1``, ``paragraph2``).
    Counts are keyed by the naming stem, so types that share a short name in
    different namespaces still never produce the same variable.
    """
    require(type_name, "type_name")
    require(type_counts, "type_counts")

    base = to_camel_case(short_type_name(type_name))
    if base in type_counts:
        name = f"{base}{type_counts[base]}"
        type_counts[base] += 1
        return name

    type_counts[base] = 1
    return base


def helper_method_name(variable_name: str) -> str:
    """Name of the generated routine that populates the part held in ``variable_name``."""
    return f"Generate{variable_name[0].upper()}{variable_name[1:]}Content"
