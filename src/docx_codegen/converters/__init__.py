"""
Generation of the intermediate code model from python-docx packages, parts
and elements.
"""

from .compile_unit import generate_element_source, generate_package_source, generate_part_source
from .element_builder import build_element_statements
from .part_builder import build_entry_method_statements, build_helper_methods

__all__ = [
    "generate_element_source",
    "generate_package_source",
    "generate_part_source",
    "build_element_statements",
    "build_entry_method_statements",
    "build_helper_methods",
]
