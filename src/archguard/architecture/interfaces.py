"""Interface implementation rules.

Satisfaction is structural and approximate: every interface method needs a
struct method with the same name, the same parameter count and the same
return presence. Parameter names and types are not compared.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable

from ..scanning.models import Interface, Struct
from .patterns import Pattern

if TYPE_CHECKING:
    from .model import Architecture


def implements(struct: Struct, interface: Interface) -> bool:
    """True if ``struct`` structurally satisfies ``interface``.

    An interface without methods is satisfied by every struct.
    """
    for required in interface.methods:
        if not any(m.signature_matches(required) for m in struct.find_methods(required.name)):
            return False
    return True


@dataclass(frozen=True)
class InterfaceImplementationRule:
    """Structs matching ``struct_pattern`` must implement at least one
    interface matching ``interface_pattern``.

    Attributes:
        qualified: Also match ``struct_pattern`` against ``<package path>.<Name>``
            (set for layer-scoped rules)
    """

    struct_pattern: str
    interface_pattern: str
    qualified: bool = False
    struct_matcher: Pattern = field(init=False, repr=False, compare=False)
    interface_matcher: Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "struct_matcher", Pattern(self.struct_pattern, role="struct"))
        object.__setattr__(
            self, "interface_matcher", Pattern(self.interface_pattern, role="interface")
        )

    def matches_struct(self, struct: Struct) -> bool:
        if self.struct_matcher.matches(struct.name):
            return True
        return self.qualified and self.struct_matcher.matches(struct.qualified_name)

    def matches_interface(self, interface: Interface) -> bool:
        return self.interface_matcher.matches(interface.name)


def check_interface_implementations(
    architecture: Architecture, rules: Iterable[InterfaceImplementationRule]
) -> list[str]:
    """Report matched structs that satisfy none of the matched interfaces.

    A rule whose interface pattern matches nothing reports nothing.
    """
    violations: list[str] = []

    for rule in rules:
        structs: list[Struct] = []
        interfaces: list[Interface] = []
        for package in architecture.packages.values():
            structs.extend(s for s in package.structs.values() if rule.matches_struct(s))
            interfaces.extend(i for i in package.interfaces.values() if rule.matches_interface(i))

        if not interfaces:
            continue

        for struct in structs:
            if any(implements(struct, interface) for interface in interfaces):
                continue
            package_path = struct.package.path if struct.package is not None else ""
            violations.append(
                f'Struct "{struct.name}" in package "{package_path}" does not implement '
                f'any interface matching "{rule.interface_pattern}"'
            )

    return violations


def validate_interface_implementations(
    architecture: Architecture, rules: Iterable[InterfaceImplementationRule]
) -> tuple[bool, list[str]]:
    violations = check_interface_implementations(architecture, rules)
    return len(violations) == 0, violations


def find_all_implementations(architecture: Architecture, interface: Interface) -> list[Struct]:
    """Every struct in the architecture that structurally satisfies ``interface``."""
    return [
        struct
        for package in architecture.packages.values()
        for struct in package.structs.values()
        if implements(struct, interface)
    ]
