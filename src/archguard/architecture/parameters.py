"""Parameter shape rules: should matching method parameters be interfaces or structs?

Parameter types are classified by looking the type text up among every
declared interface and struct, by bare name (``Logger``) and by
package-qualified name (``utils.Logger``). One leading ``*`` is ignored.
Built-in scalar types are never checked, and types that resolve to
neither kind are skipped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Iterable

from ..scanning.models import Struct
from .patterns import Pattern

if TYPE_CHECKING:
    from .model import Architecture

BUILTIN_TYPES = frozenset(
    {
        "bool",
        "int",
        "int8",
        "int16",
        "int32",
        "int64",
        "uint",
        "uint8",
        "uint16",
        "uint32",
        "uint64",
        "uintptr",
        "float32",
        "float64",
        "complex64",
        "complex128",
        "string",
        "byte",
        "rune",
        "error",
    }
)


class TypeKind(Enum):
    """What a parameter type resolves to in the analyzed code."""

    INTERFACE = "interface"
    STRUCT = "struct"
    UNKNOWN = "unknown"


def is_builtin_type(type_name: str) -> bool:
    return type_name in BUILTIN_TYPES


class TypeIndex:
    """Lookup of every declared type name across the whole architecture."""

    def __init__(self, architecture: Architecture) -> None:
        self.interfaces: set[str] = set()
        self.structs: set[str] = set()
        for package in architecture.packages.values():
            prefix = f"{package.name}."
            for name in package.interfaces:
                self.interfaces.add(name)
                self.interfaces.add(prefix + name)
            for name in package.structs:
                self.structs.add(name)
                self.structs.add(prefix + name)

    def classify(self, type_name: str) -> TypeKind:
        # Interfaces win when a name is declared as both kinds
        if type_name in self.interfaces:
            return TypeKind.INTERFACE
        if type_name in self.structs:
            return TypeKind.STRUCT
        return TypeKind.UNKNOWN


@dataclass(frozen=True)
class ParameterRule:
    """Methods matching ``method_pattern`` on structs matching ``struct_pattern``
    must take interface (or struct) types for parameters whose type matches
    ``parameter_type_pattern``.
    """

    struct_pattern: str
    method_pattern: str
    parameter_type_pattern: str
    should_use_interface: bool = True
    qualified: bool = False
    struct_matcher: Pattern = field(init=False, repr=False, compare=False)
    method_matcher: Pattern = field(init=False, repr=False, compare=False)
    type_matcher: Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "struct_matcher", Pattern(self.struct_pattern, role="struct"))
        object.__setattr__(self, "method_matcher", Pattern(self.method_pattern, role="method"))
        object.__setattr__(
            self, "type_matcher", Pattern(self.parameter_type_pattern, role="parameter type")
        )

    @property
    def expected_kind(self) -> TypeKind:
        return TypeKind.INTERFACE if self.should_use_interface else TypeKind.STRUCT

    def matches_struct(self, struct: Struct) -> bool:
        if self.struct_matcher.matches(struct.name):
            return True
        return self.qualified and self.struct_matcher.matches(struct.qualified_name)


def check_method_parameters(
    architecture: Architecture, rules: Iterable[ParameterRule]
) -> list[str]:
    """Report parameters whose resolved kind contradicts the rule."""
    index = TypeIndex(architecture)
    violations: list[str] = []

    for rule in rules:
        for package in architecture.packages.values():
            for struct in package.structs.values():
                if not rule.matches_struct(struct):
                    continue
                for method in struct.methods:
                    if not rule.method_matcher.matches(method.name):
                        continue
                    for param in method.parameters:
                        param_type = param.normalized_type
                        if not param_type or is_builtin_type(param_type):
                            continue
                        if not rule.type_matcher.matches(param_type):
                            continue

                        kind = index.classify(param_type)
                        if kind is TypeKind.UNKNOWN or kind is rule.expected_kind:
                            continue

                        if rule.should_use_interface:
                            violations.append(
                                f'Method "{method.name}" of struct "{struct.name}" in package '
                                f'"{package.path}" uses struct type "{param_type}" as parameter, '
                                "but should use an interface"
                            )
                        else:
                            violations.append(
                                f'Method "{method.name}" of struct "{struct.name}" in package '
                                f'"{package.path}" uses interface type "{param_type}" as '
                                "parameter, but should use a struct"
                            )

    return violations


def validate_method_parameters(
    architecture: Architecture, rules: Iterable[ParameterRule]
) -> tuple[bool, list[str]]:
    violations = check_method_parameters(architecture, rules)
    return len(violations) == 0, violations
