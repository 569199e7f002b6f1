"""Named layers and the layered-architecture check.

A Layer groups packages by one or more path patterns. Membership is
segment-boundary and suffix-aware, so a layer declared as ``^domain$``
also owns ``domain/entities`` and the import path
``example.com/shop/domain``.

LayeredArchitecture collects allow rules synthesized from layer-to-layer
permissions and checks every cross-layer import against them:
1. Find the layer owning each package (first declared layer wins)
2. Skip imports without a dot or slash (standard library)
3. Find the layer owning each import; skip imports outside every layer
4. Same-layer imports are always fine
5. Anything else needs a matching allow rule
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from ..exceptions import ConfigurationReferenceError, UnboundLayerError
from ..logging_config import get_logger
from .dependencies import DependencyRule
from .interfaces import InterfaceImplementationRule
from .parameters import ParameterRule
from .patterns import Pattern, layer_path_pattern, scoped_struct_pattern, segment_suffix_pattern

if TYPE_CHECKING:
    from .model import Architecture

logger = get_logger(__name__)


def is_standard_library(import_path: str) -> bool:
    """Heuristic: standard library import paths contain neither a dot nor a slash."""
    return "." not in import_path and "/" not in import_path


class Layer:
    """A named group of packages.

    Attributes:
        name: Layer name; lookups by name return the first match
        patterns: Raw pattern strings as declared
        architecture: Bound Architecture, required by rule constructors
        layered: Owning LayeredArchitecture, if the layer was added to one
    """

    def __init__(self, name: str, *patterns: str) -> None:
        self.name = name
        self.patterns: tuple[str, ...] = patterns
        # Compile raw patterns first so errors name what the user wrote
        self.matchers = [Pattern(p, role=f"layer {name}") for p in patterns]
        self._containment = [
            Pattern(segment_suffix_pattern(p), role=f"layer {name}") for p in patterns
        ]
        self.architecture: Optional[Architecture] = None
        self.layered: Optional[LayeredArchitecture] = None

    def __repr__(self) -> str:
        return f"Layer({self.name!r}, patterns={list(self.patterns)!r})"

    def contains(self, path: str) -> bool:
        """True if ``path`` (package path or import path) belongs to this layer."""
        return any(p.matches(path) for p in self._containment)

    def bind(self, architecture: Architecture) -> None:
        self.architecture = architecture

    @property
    def is_bound(self) -> bool:
        return self.architecture is not None

    def _require_bound(self, operation: str) -> None:
        if self.architecture is None:
            raise UnboundLayerError(self.name, operation)

    def _layered(
        self, layered: Optional[LayeredArchitecture], operation: str
    ) -> LayeredArchitecture:
        owner = layered if layered is not None else self.layered
        if owner is None:
            raise UnboundLayerError(self.name, operation)
        return owner

    # Layer-to-layer permissions

    def depends_on(self, target_name: str, layered: Optional[LayeredArchitecture] = None) -> None:
        """Allow this layer to import the layer called ``target_name``."""
        self._layered(layered, "depends_on").add_rule(self.name, target_name)

    def depends_on_layer(
        self, target: Layer, layered: Optional[LayeredArchitecture] = None
    ) -> None:
        """Allow this layer to import ``target``."""
        self._layered(layered, "depends_on_layer").add_rule(self.name, target.name)

    # Layer-scoped rule constructors

    def does_not_depend_on(self, target_pattern: str) -> DependencyRule:
        """Disallow imports matching ``target_pattern`` from any package of this layer."""
        self._require_bound("does_not_depend_on")
        return DependencyRule(layer_path_pattern(self.patterns), target_pattern, allowed=False)

    def does_not_depend_on_layer(self, target: Layer) -> DependencyRule:
        """Disallow imports from any package of this layer into any package of ``target``."""
        self._require_bound("does_not_depend_on_layer")
        return DependencyRule(
            layer_path_pattern(self.patterns), layer_path_pattern(target.patterns), allowed=False
        )

    def structs_implement_interfaces(
        self, struct_pattern: str, interface_pattern: str
    ) -> InterfaceImplementationRule:
        self._require_bound("structs_implement_interfaces")
        return InterfaceImplementationRule(
            scoped_struct_pattern(self.patterns, struct_pattern), interface_pattern, qualified=True
        )

    def methods_should_use_interface_parameters(
        self, struct_pattern: str, method_pattern: str, parameter_type_pattern: str
    ) -> ParameterRule:
        self._require_bound("methods_should_use_interface_parameters")
        return ParameterRule(
            scoped_struct_pattern(self.patterns, struct_pattern),
            method_pattern,
            parameter_type_pattern,
            should_use_interface=True,
            qualified=True,
        )

    def methods_should_use_struct_parameters(
        self, struct_pattern: str, method_pattern: str, parameter_type_pattern: str
    ) -> ParameterRule:
        self._require_bound("methods_should_use_struct_parameters")
        return ParameterRule(
            scoped_struct_pattern(self.patterns, struct_pattern),
            method_pattern,
            parameter_type_pattern,
            should_use_interface=False,
            qualified=True,
        )


class LayeredArchitecture:
    """Ordered layers plus the dependency rules declared between them."""

    def __init__(self, *layers: Layer, architecture: Optional[Architecture] = None) -> None:
        self.layers: list[Layer] = list(layers)
        self._rules: list[DependencyRule] = []
        self.architecture: Optional[Architecture] = None
        for layer in self.layers:
            layer.layered = self
        if architecture is not None:
            self.bind(architecture)

    @property
    def rules(self) -> tuple[DependencyRule, ...]:
        return tuple(self._rules)

    def bind(self, architecture: Architecture) -> None:
        """Associate this layered architecture and all of its layers with ``architecture``."""
        self.architecture = architecture
        for layer in self.layers:
            layer.bind(architecture)

    def where_layer(self, name: str) -> Optional[Layer]:
        for layer in self.layers:
            if layer.name == name:
                return layer
        return None

    def add_rule(self, source_name: str, target_name: str) -> None:
        """Allow layer ``source_name`` to import layer ``target_name``.

        One allow rule is added per (source pattern, target pattern) pair,
        each matching the pattern's fragment at a segment boundary.
        """
        source = self.where_layer(source_name)
        if source is None:
            raise ConfigurationReferenceError(
                "layer rule", f"source layer {source_name!r} not found"
            )
        target = self.where_layer(target_name)
        if target is None:
            raise ConfigurationReferenceError(
                "layer rule", f"target layer {target_name!r} not found"
            )

        for source_pattern in source.patterns:
            for target_pattern in target.patterns:
                self._rules.append(
                    DependencyRule(
                        segment_suffix_pattern(source_pattern),
                        segment_suffix_pattern(target_pattern),
                        allowed=True,
                    )
                )

    def add_dependency_constraint(self, rule: DependencyRule) -> None:
        self._rules.append(rule)

    def layer_of(self, path: str) -> Optional[Layer]:
        """First declared layer containing ``path``."""
        for layer in self.layers:
            if layer.contains(path):
                return layer
        return None

    def is_allowed(self, package_path: str, import_path: str) -> bool:
        return any(
            rule.allowed and rule.applies_to(package_path, import_path) for rule in self._rules
        )

    def check(self, architecture: Optional[Architecture] = None) -> list[str]:
        """Report every cross-layer import that no allow rule permits."""
        if architecture is not None:
            self.bind(architecture)
        if self.architecture is None:
            raise UnboundLayerError("<layered architecture>", "check")

        violations: list[str] = []
        for package_path, package in self.architecture.packages.items():
            source = self.layer_of(package_path)
            if source is None:
                continue

            for import_path in package.imports:
                if is_standard_library(import_path):
                    continue
                target = self.layer_of(import_path)
                if target is None or target is source:
                    continue
                if self.is_allowed(package_path, import_path):
                    continue
                violations.append(
                    f'Package "{package_path}" in layer "{source.name}" imports "{import_path}" '
                    f'in layer "{target.name}", but no rule allows this dependency'
                )

        logger.debug(
            f"Layered check: {len(violations)} violations across {len(self.layers)} layers"
        )
        return violations

    def validate(self, architecture: Optional[Architecture] = None) -> tuple[bool, list[str]]:
        violations = self.check(architecture)
        return len(violations) == 0, violations
