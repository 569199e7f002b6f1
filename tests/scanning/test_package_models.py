"""Tests for the extracted Go source model."""

from archguard.scanning.models import (
    Interface,
    Method,
    Package,
    Parameter,
    Struct,
    normalize_type,
)


class TestNormalizeType:
    """Test indirection stripping."""

    def test_pointer(self):
        """One pointer level is removed."""
        assert normalize_type("*utils.Logger") == "utils.Logger"

    def test_value_unchanged(self):
        """Value types pass through."""
        assert normalize_type("Logger") == "Logger"

    def test_single_level_only(self):
        """Only the outer pointer is removed."""
        assert normalize_type("**Logger") == "*Logger"

    def test_parameter_property(self):
        """Parameters expose their normalized type."""
        assert Parameter(name="l", type="*Logger").normalized_type == "Logger"


class TestMethod:
    """Test signature comparison."""

    def test_signature_matches(self):
        """Same name, arity and return presence match."""
        a = Method("Save", [Parameter("u", "*User")], has_return=True)
        b = Method("Save", [Parameter("x", "User")], has_return=True)
        assert a.signature_matches(b)

    def test_signature_differs(self):
        """Any difference in name, arity or returns breaks the match."""
        base = Method("Save", [Parameter("u", "User")], has_return=True)
        assert not base.signature_matches(Method("Store", [Parameter("u", "User")], True))
        assert not base.signature_matches(Method("Save", [], True))
        assert not base.signature_matches(Method("Save", [Parameter("u", "User")], False))


class TestPackage:
    """Test package registration helpers."""

    def test_add_import_records_alias(self):
        """Imports are recorded with their aliases."""
        package = Package(name="app", path="app")
        package.add_import("example.com/shop/domain")
        package.add_import("example.com/shop/log", alias="lg")
        assert package.imports == ["example.com/shop/domain", "example.com/shop/log"]
        assert package.imported_packages == {
            "domain": "example.com/shop/domain",
            "lg": "example.com/shop/log",
        }

    def test_duplicate_imports_kept(self):
        """Repeated imports stay in the list."""
        package = Package(name="app", path="app")
        package.add_import("fmt")
        package.add_import("fmt")
        assert package.imports == ["fmt", "fmt"]

    def test_back_references(self):
        """Types point back to their package."""
        package = Package(name="entities", path="domain/entities")
        struct = package.add_struct(Struct(name="Customer"))
        interface = package.add_interface(Interface(name="Named"))
        assert struct.package is package
        assert interface.package is package
        assert struct.qualified_name == "domain/entities.Customer"
        assert interface.qualified_name == "domain/entities.Named"

    def test_unattached_struct_name(self):
        """A struct without a package has a bare qualified name."""
        assert Struct(name="Loose").qualified_name == "Loose"

    def test_find_methods(self):
        """Methods are found by name."""
        struct = Struct(name="S", methods=[Method("A"), Method("B"), Method("A")])
        assert len(struct.find_methods("A")) == 2
