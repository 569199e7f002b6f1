"""Dependency rules: which packages may or may not import which.

Only disallow rules produce violations here. Allow rules exist to seed the
allow-list a LayeredArchitecture consults during its whole-architecture
check.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable

from ..exceptions import PatternError
from .patterns import Pattern

if TYPE_CHECKING:
    from .model import Architecture


@dataclass(frozen=True)
class DependencyRule:
    """Package-path rule: sources matching ``source_pattern`` may (or may not)
    import paths matching ``target_pattern``.

    Both patterns must be non-empty valid regexes.
    """

    source_pattern: str
    target_pattern: str
    allowed: bool = False
    source: Pattern = field(init=False, repr=False, compare=False)
    target: Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.source_pattern:
            raise PatternError(self.source_pattern, "pattern cannot be empty", role="source")
        if not self.target_pattern:
            raise PatternError(self.target_pattern, "pattern cannot be empty", role="target")
        object.__setattr__(self, "source", Pattern(self.source_pattern, role="source"))
        object.__setattr__(self, "target", Pattern(self.target_pattern, role="target"))

    def applies_to(self, package_path: str, import_path: str) -> bool:
        return self.source.matches(package_path) and self.target.matches(import_path)

    def describe(self) -> str:
        verb = "may import" if self.allowed else "cannot import"
        return f"{self.source_pattern} {verb} {self.target_pattern}"


def check_dependencies(architecture: Architecture, rules: Iterable[DependencyRule]) -> list[str]:
    """Report every (package, import, disallow rule) triple that matches.

    Several matching disallow rules for the same import each report
    separately.
    """
    rules = list(rules)
    violations: list[str] = []

    for package_path, package in architecture.packages.items():
        for import_path in package.imports:
            for rule in rules:
                if rule.allowed or not rule.applies_to(package_path, import_path):
                    continue
                violations.append(
                    f'Package "{package_path}" imports "{import_path}", but this is not '
                    f"allowed by rule: {rule.source_pattern} cannot import {rule.target_pattern}"
                )

    return violations


def validate_dependencies(
    architecture: Architecture, rules: Iterable[DependencyRule]
) -> tuple[bool, list[str]]:
    violations = check_dependencies(architecture, rules)
    return len(violations) == 0, violations
