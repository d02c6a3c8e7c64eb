"""
docx-codegen: generate code that rebuilds OpenXML (Word) documents.

The generator walks a python-docx package, part or element and produces a
renderer-agnostic compile unit (see ``docx_codegen.core.code_model``).
"""

from .config import AliasOrder, NamespaceAliasOptions, SerializeSettings
from .converters import generate_element_source, generate_package_source, generate_part_source
from .exceptions import ArgumentContractError, DocxCodegenError, DuplicateBlueprintError

__version__ = "0.1.0"

__all__ = [
    "AliasOrder",
    "NamespaceAliasOptions",
    "SerializeSettings",
    "generate_element_source",
    "generate_package_source",
    "generate_part_source",
    "ArgumentContractError",
    "DocxCodegenError",
    "DuplicateBlueprintError",
]
