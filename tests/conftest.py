"""Shared test fixtures for archguard tests."""

from pathlib import Path

import pytest

from archguard.architecture import Architecture
from archguard.scanning.models import Interface, Method, Package, Parameter, Struct

FIXTURES_DIR = Path(__file__).parent / "fixtures"
EXAMPLE_PROJECT = FIXTURES_DIR / "example_project"


def _method(name, *param_types, returns=False):
    return Method(
        name=name,
        parameters=[Parameter(name=f"p{i}", type=t) for i, t in enumerate(param_types)],
        has_return=returns,
    )


def _struct(name, *methods):
    return Struct(name=name, methods=list(methods))


def _interface(name, *methods):
    return Interface(name=name, methods=list(methods))


def _package(path, imports=(), structs=(), interfaces=(), name=None):
    package = Package(name=name or path.rsplit("/", 1)[-1], path=path)
    for import_path in imports:
        package.add_import(import_path)
    for struct in structs:
        package.add_struct(struct)
    for interface in interfaces:
        package.add_interface(interface)
    return package


@pytest.fixture
def make_method():
    """Factory: make_method("Save", "*Order", returns=True)."""
    return _method


@pytest.fixture
def make_struct():
    return _struct


@pytest.fixture
def make_interface():
    return _interface


@pytest.fixture
def make_package():
    """Factory for in-memory packages; the name defaults to the last path segment."""
    return _package


@pytest.fixture
def architecture(tmp_path):
    """Empty Architecture rooted at a temporary directory."""
    return Architecture(tmp_path)


@pytest.fixture
def example_project():
    """Path to the Go example project (module example.com/shop)."""
    return EXAMPLE_PROJECT


@pytest.fixture
def go_tree(tmp_path):
    """Write a tree of Go files: go_tree({"domain/user.go": "package domain\\n"})."""

    def write(files):
        for rel_path, content in files.items():
            target = tmp_path / rel_path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)
        return tmp_path

    return write
