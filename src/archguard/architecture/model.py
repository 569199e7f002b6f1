"""Architecture: the aggregate root holding every extracted package.

Packages are keyed by their slash-separated path relative to the root.
Once extraction is done the model is only read: every rule engine walks
``packages`` in registration order, which follows the sorted directory
walk, so repeated checks produce identical violation lists.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Mapping, Optional

from ..exceptions import InvalidPathError, ModelLookupError
from ..logging_config import get_logger
from ..scanning.extractor import PackageExtractor
from ..scanning.models import Package, Struct
from .dependencies import DependencyRule, check_dependencies, validate_dependencies
from .interfaces import (
    InterfaceImplementationRule,
    check_interface_implementations,
    find_all_implementations,
    validate_interface_implementations,
)
from .layers import Layer, LayeredArchitecture
from .parameters import ParameterRule, check_method_parameters, validate_method_parameters

logger = get_logger(__name__)


class Architecture:
    """Packages of one Go source tree plus rule factories and checks.

    Usage:
        arch = Architecture("./service")
        arch.parse_packages()
        rule = arch.does_not_depend_on("^domain", "infrastructure")
        passed, violations = arch.validate_dependencies([rule])
    """

    def __init__(self, base_path: Path | str = ".") -> None:
        path = Path(base_path).resolve()
        if not path.exists():
            raise InvalidPathError(path, "does not exist")
        if not path.is_dir():
            raise InvalidPathError(path, "not a directory")
        self.base_path = path
        self._packages: dict[str, Package] = {}

    def __repr__(self) -> str:
        return f"Architecture({str(self.base_path)!r}, packages={len(self._packages)})"

    @property
    def packages(self) -> Mapping[str, Package]:
        return self._packages

    def add_package(self, package: Package) -> Package:
        """Register a package built elsewhere (in-memory models, tests)."""
        self._packages[package.path] = package
        return package

    def get_package(self, path: str) -> Optional[Package]:
        return self._packages.get(path)

    # Extraction

    def parse_packages(self, *paths: str, workers: Optional[int] = None) -> list[Package]:
        """Extract packages below the given relative paths (the whole tree if none).

        Each path is walked recursively. Directories are extracted before
        anything is registered, so a failure leaves no package from the
        failing directory behind.

        Returns:
            The newly registered packages, in registration order
        """
        extractor = PackageExtractor(self.base_path, max_workers=workers)
        registered: list[Package] = []
        for path in paths or (".",):
            rel_paths = [p for p in extractor.discover(path) if p not in self._packages]
            for package in extractor.extract_all(rel_paths):
                registered.append(self.add_package(package))
        logger.info(f"Architecture at {self.base_path}: {len(self._packages)} packages")
        return registered

    def parse_package(self, path: str) -> list[Package]:
        """Extract one package directory and every package beneath it."""
        return self.parse_packages(path)

    # Rule factories

    def depends_on(self, source_pattern: str, target_pattern: str) -> DependencyRule:
        return DependencyRule(source_pattern, target_pattern, allowed=True)

    def does_not_depend_on(self, source_pattern: str, target_pattern: str) -> DependencyRule:
        return DependencyRule(source_pattern, target_pattern, allowed=False)

    def structs_implement_interfaces(
        self, struct_pattern: str, interface_pattern: str
    ) -> InterfaceImplementationRule:
        return InterfaceImplementationRule(struct_pattern, interface_pattern)

    def methods_should_use_interface_parameters(
        self, struct_pattern: str, method_pattern: str, parameter_type_pattern: str
    ) -> ParameterRule:
        return ParameterRule(struct_pattern, method_pattern, parameter_type_pattern, True)

    def methods_should_use_struct_parameters(
        self, struct_pattern: str, method_pattern: str, parameter_type_pattern: str
    ) -> ParameterRule:
        return ParameterRule(struct_pattern, method_pattern, parameter_type_pattern, False)

    def layered_architecture(self, *layers: Layer) -> LayeredArchitecture:
        """A LayeredArchitecture over ``layers``, already bound to this architecture."""
        return LayeredArchitecture(*layers, architecture=self)

    # Checks

    def check_dependencies(self, rules: Iterable[DependencyRule]) -> list[str]:
        return check_dependencies(self, rules)

    def validate_dependencies(self, rules: Iterable[DependencyRule]) -> tuple[bool, list[str]]:
        return validate_dependencies(self, rules)

    def check_interface_implementations(
        self, rules: Iterable[InterfaceImplementationRule]
    ) -> list[str]:
        return check_interface_implementations(self, rules)

    def validate_interface_implementations(
        self, rules: Iterable[InterfaceImplementationRule]
    ) -> tuple[bool, list[str]]:
        return validate_interface_implementations(self, rules)

    def check_method_parameters(self, rules: Iterable[ParameterRule]) -> list[str]:
        return check_method_parameters(self, rules)

    def validate_method_parameters(
        self, rules: Iterable[ParameterRule]
    ) -> tuple[bool, list[str]]:
        return validate_method_parameters(self, rules)

    def find_all_implementations(self, interface_name: str, package_path: str) -> list[Struct]:
        """Every struct satisfying the interface ``interface_name`` of ``package_path``.

        Raises:
            ModelLookupError: Package or interface not found
        """
        package = self.get_package(package_path)
        if package is None:
            raise ModelLookupError("package", package_path)
        interface = package.interfaces.get(interface_name)
        if interface is None:
            raise ModelLookupError("interface", interface_name, package_path)
        return find_all_implementations(self, interface)
