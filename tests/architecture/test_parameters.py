"""Tests for method parameter type rules."""

import pytest

from archguard.architecture.parameters import (
    ParameterRule,
    TypeIndex,
    TypeKind,
    check_method_parameters,
    is_builtin_type,
    validate_method_parameters,
)


@pytest.fixture
def logging_architecture(architecture, make_package, make_struct, make_interface, make_method):
    """utils.Logger is a struct, domain.LoggerInterface an interface, and
    application.UserService takes both."""
    architecture.add_package(
        make_package(
            "utils",
            structs=[make_struct("Logger", make_method("Log", "string"))],
        )
    )
    architecture.add_package(
        make_package(
            "domain",
            interfaces=[make_interface("LoggerInterface", make_method("Log", "string"))],
        )
    )
    architecture.add_package(
        make_package(
            "application",
            structs=[
                make_struct(
                    "UserService",
                    make_method("UpdateProfile", "string", "*utils.Logger", returns=True),
                    make_method("UpdateEmail", "string", "domain.LoggerInterface", returns=True),
                    make_method("Delete", "*utils.Logger"),
                )
            ],
        )
    )
    return architecture


class TestTypeIndex:
    """Test type classification."""

    def test_bare_and_qualified_names(self, logging_architecture):
        """Types resolve by bare and package-qualified name."""
        index = TypeIndex(logging_architecture)
        assert index.classify("Logger") is TypeKind.STRUCT
        assert index.classify("utils.Logger") is TypeKind.STRUCT
        assert index.classify("domain.LoggerInterface") is TypeKind.INTERFACE
        assert index.classify("http.Request") is TypeKind.UNKNOWN

    def test_interface_wins_on_collision(self, architecture, make_package, make_struct, make_interface):
        """A name declared as both kinds classifies as interface."""
        architecture.add_package(make_package("a", structs=[make_struct("Store")]))
        architecture.add_package(make_package("b", interfaces=[make_interface("Store")]))
        assert TypeIndex(architecture).classify("Store") is TypeKind.INTERFACE

    def test_builtins(self):
        """Builtin type names are recognised."""
        assert is_builtin_type("string")
        assert is_builtin_type("error")
        assert not is_builtin_type("Logger")


class TestCheckMethodParameters:
    """Test parameter rule checking."""

    def test_struct_parameter_reported_when_interface_required(self, logging_architecture):
        """Struct parameters violate interface-only rules."""
        rule = ParameterRule(".*Service.*", "Update.*", ".*Logger", should_use_interface=True)

        violations = check_method_parameters(logging_architecture, [rule])

        assert violations == [
            'Method "UpdateProfile" of struct "UserService" in package "application" uses '
            'struct type "utils.Logger" as parameter, but should use an interface'
        ]

    def test_same_method_passes_when_struct_required(self, logging_architecture):
        """The same parameter satisfies a struct rule."""
        rule = ParameterRule(".*Service.*", "UpdateProfile", ".*Logger", should_use_interface=False)
        assert check_method_parameters(logging_architecture, [rule]) == []

    def test_interface_parameter_reported_when_struct_required(self, logging_architecture):
        """Interface parameters violate struct-only rules."""
        rule = ParameterRule(".*Service.*", "UpdateEmail", ".*Logger.*", should_use_interface=False)
        passed, violations = validate_method_parameters(logging_architecture, [rule])
        assert not passed
        assert violations == [
            'Method "UpdateEmail" of struct "UserService" in package "application" uses '
            'interface type "domain.LoggerInterface" as parameter, but should use a struct'
        ]

    def test_method_pattern_filters(self, logging_architecture):
        """Only methods matching the method pattern are checked."""
        rule = ParameterRule(".*Service.*", "^Update", ".*Logger$")
        violations = check_method_parameters(logging_architecture, [rule])
        assert all("Delete" not in v for v in violations)

    def test_builtin_types_skipped(self, logging_architecture):
        """Builtin parameter types are never reported."""
        rule = ParameterRule(".*", ".*", ".*", should_use_interface=False)
        violations = check_method_parameters(logging_architecture, [rule])
        assert all('"string"' not in v for v in violations)

    def test_unknown_types_skipped(self, architecture, make_package, make_struct, make_method):
        """Types declared nowhere are never reported."""
        architecture.add_package(
            make_package(
                "presentation",
                structs=[make_struct("Handler", make_method("Serve", "*http.Request"))],
            )
        )
        rule = ParameterRule(".*", ".*", ".*Request")
        assert check_method_parameters(architecture, [rule]) == []

    def test_empty_types_skipped(self, architecture, make_package, make_struct, make_method):
        """Parameters without a type are never reported."""
        architecture.add_package(
            make_package("a", structs=[make_struct("Svc", make_method("Many", ""))])
        )
        assert check_method_parameters(architecture, [ParameterRule(".*", ".*", ".*")]) == []

    def test_pointer_and_value_classified_alike(
        self, architecture, make_package, make_struct, make_method
    ):
        """Pointer and value parameters classify the same."""
        architecture.add_package(make_package("utils", structs=[make_struct("Logger")]))
        architecture.add_package(
            make_package(
                "app",
                structs=[
                    make_struct(
                        "Service",
                        make_method("ByPointer", "*utils.Logger"),
                        make_method("ByValue", "utils.Logger"),
                    )
                ],
            )
        )
        violations = check_method_parameters(architecture, [ParameterRule(".*", ".*", "Logger")])
        assert len(violations) == 2
        assert all('"utils.Logger"' in v for v in violations)

    def test_qualified_rule(self, logging_architecture):
        """Qualified rules match package path plus struct name."""
        rule = ParameterRule(
            "^application\\.UserService$", "UpdateProfile", ".*Logger", qualified=True
        )
        assert len(check_method_parameters(logging_architecture, [rule])) == 1
        unqualified = ParameterRule("^application\\.UserService$", "UpdateProfile", ".*Logger")
        assert check_method_parameters(logging_architecture, [unqualified]) == []

    def test_expected_kind(self):
        """The rule flag picks the expected kind."""
        assert ParameterRule("a", "b", "c").expected_kind is TypeKind.INTERFACE
        assert ParameterRule("a", "b", "c", False).expected_kind is TypeKind.STRUCT
