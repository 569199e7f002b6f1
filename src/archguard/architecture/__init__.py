"""Architecture model and rule engines: dependencies, interfaces, parameters, layers."""

from .dependencies import DependencyRule, check_dependencies
from .interfaces import InterfaceImplementationRule, check_interface_implementations, implements
from .layers import Layer, LayeredArchitecture
from .model import Architecture
from .parameters import ParameterRule, TypeKind, check_method_parameters
from .patterns import (
    Pattern,
    scoped_struct_pattern,
    segment_suffix_pattern,
    split_inline_flags,
    strip_anchors,
)

__all__ = [
    "Architecture",
    "DependencyRule",
    "InterfaceImplementationRule",
    "ParameterRule",
    "Layer",
    "LayeredArchitecture",
    "Pattern",
    "TypeKind",
    "check_dependencies",
    "check_interface_implementations",
    "check_method_parameters",
    "implements",
    "scoped_struct_pattern",
    "segment_suffix_pattern",
    "split_inline_flags",
    "strip_anchors",
]
