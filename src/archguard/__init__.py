"""
archguard - architecture rules for Go codebases.

Extracts packages, imports, structs, interfaces and methods from Go source
with tree-sitter and checks them against dependency, layering, interface
implementation and method parameter rules.
"""

__version__ = "0.3.0"

from .architecture import (
    Architecture,
    DependencyRule,
    InterfaceImplementationRule,
    Layer,
    LayeredArchitecture,
    ParameterRule,
)
from .config import ArchitectureConfig, CheckResult, load_config

__all__ = [
    "Architecture",
    "ArchitectureConfig",
    "CheckResult",
    "DependencyRule",
    "InterfaceImplementationRule",
    "Layer",
    "LayeredArchitecture",
    "ParameterRule",
    "load_config",
]
