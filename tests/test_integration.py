"""End-to-end checks against the Go example project."""

import pytest

from archguard import Architecture, Layer
from archguard.scanning import TREE_SITTER_AVAILABLE

pytestmark = pytest.mark.skipif(not TREE_SITTER_AVAILABLE, reason="tree-sitter not installed")


@pytest.fixture
def shop(example_project):
    arch = Architecture(example_project)
    arch.parse_packages()
    return arch


class TestExtractedModel:
    """What extraction sees in the example project."""

    def test_vendor_and_tests_excluded(self, shop):
        """Vendored code and test files are not extracted."""
        assert not any(path.startswith("vendor") for path in shop.packages)
        application = shop.get_package("application")
        assert list(application.structs) == ["OrderService"]
        assert "example.com/shop/infrastructure" not in application.imports

    def test_domain(self, shop):
        """The domain package is extracted in source order."""
        domain = shop.get_package("domain")
        assert domain.name == "domain"
        assert domain.imports == ["time", "example.com/shop/utils"]
        assert list(domain.interfaces) == ["OrderRepositoryInterface", "Logger"]
        assert list(domain.structs) == ["AuditService", "Order"]

    def test_nested_package_name(self, shop):
        """Nested packages take their own package name."""
        assert shop.get_package("domain/entities").name == "entities"

    def test_implementations(self, shop):
        """Implementations are found across packages."""
        loggers = shop.find_all_implementations("Logger", "domain")
        repositories = shop.find_all_implementations("OrderRepositoryInterface", "domain")
        assert [s.qualified_name for s in loggers] == ["utils.FileLogger"]
        assert [s.qualified_name for s in repositories] == ["infrastructure.OrderRepository"]


class TestRules:
    """Rules built through the Python API."""

    def test_layer_violation(self, shop):
        """A layered check reports the domain to utils import."""
        layered = shop.layered_architecture(
            Layer("Domain", "^domain$"),
            Layer("Application", "^application$"),
            Layer("Utils", "^utils$"),
        )
        layered.where_layer("Application").depends_on("Domain")

        violations = layered.check()

        assert len(violations) == 1
        assert '"domain"' in violations[0] and "utils" in violations[0]

    def test_interface_rule(self, shop):
        """The incomplete repository is reported."""
        rule = shop.structs_implement_interfaces(".*Repository$", ".*RepositoryInterface$")
        passed, violations = shop.validate_interface_implementations([rule])
        assert not passed
        assert violations == [
            'Struct "ArchiveRepository" in package "infrastructure" does not implement any '
            'interface matching ".*RepositoryInterface$"'
        ]

    def test_parameter_rule_both_directions(self, shop):
        """Interface and struct parameter rules report opposite methods."""
        wants_interface = shop.methods_should_use_interface_parameters(
            ".*Service.*", "Update.*", ".*Logger"
        )
        wants_struct = shop.methods_should_use_struct_parameters(
            ".*Service.*", "Update.*", ".*Logger"
        )

        interface_violations = shop.check_method_parameters([wants_interface])
        struct_violations = shop.check_method_parameters([wants_struct])

        assert interface_violations == [
            'Method "UpdateTrail" of struct "AuditService" in package "domain" uses struct '
            'type "utils.FileLogger" as parameter, but should use an interface'
        ]
        assert not any("UpdateTrail" in v for v in struct_violations)
        assert any("UpdateStatus" in v for v in struct_violations)

    def test_layer_scoped_dependency_rule(self, shop):
        """A layer-to-layer deny rule reports the import."""
        presentation = Layer("Presentation", "^presentation$")
        application = Layer("Application", "^application$")
        shop.layered_architecture(presentation, application)

        violations = shop.check_dependencies([presentation.does_not_depend_on_layer(application)])

        assert len(violations) == 1
        assert violations[0].startswith(
            'Package "presentation" imports "example.com/shop/application"'
        )
