"""Go source scanning: tree-sitter parsing and package model extraction."""

from .extractor import PackageExtractor
from .models import Field, Interface, Method, Package, Parameter, Struct, normalize_type
from .treesitter_parser import TREE_SITTER_AVAILABLE, GoParser

__all__ = [
    "TREE_SITTER_AVAILABLE",
    "GoParser",
    "PackageExtractor",
    "Package",
    "Struct",
    "Interface",
    "Method",
    "Parameter",
    "Field",
    "normalize_type",
]
