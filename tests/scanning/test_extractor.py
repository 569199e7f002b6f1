"""Tests for Go package extraction."""

import pytest

from archguard.exceptions import ExtractionError, FileAccessError, ParsingError
from archguard.scanning.extractor import PackageExtractor, is_go_source, is_skipped_dir
from archguard.scanning.treesitter_parser import TREE_SITTER_AVAILABLE

SERVICE_GO = """package application

import (
\t"errors"

\tlg "example.com/shop/log"
\t"example.com/shop/domain"
)

// Greeter is implemented elsewhere.
type Greeter interface {
\tGreet(name string) string
\tReset()
}

type OrderService struct {
\trepo, backup domain.OrderRepository
\tlogger       *lg.Logger
\tdomain.Auditor
\tcount        int
}

type Box[T any] struct {
\tvalue T
}

func (s *OrderService) Place(order *domain.Order, notify bool) error {
\tif order == nil {
\t\treturn errors.New("nil order")
\t}
\ttype local struct{ x int }
\t_ = local{}
\treturn nil
}

func (b *Box[T]) Get() T { return b.value }

func helper() {}
"""

METHODS_GO = """package application

import "fmt"

func (s OrderService) Describe(prefix string, parts ...string) {
\tfmt.Println(prefix, parts)
}

func (s *OrderService) Raw(int, string) (n int, err error) { return 0, nil }

func (u Unknown) Lost() {}
"""


class TestFileFilters:
    """Test file and directory filters."""

    def test_go_source(self):
        """Only non-test .go files are sources."""
        assert is_go_source("service.go")
        assert not is_go_source("service_test.go")
        assert not is_go_source("README.md")

    @pytest.mark.parametrize("name", [".git", "_build", "vendor", "testdata"])
    def test_skipped_dirs(self, name):
        """Hidden, underscore, vendor and testdata dirs are skipped."""
        assert is_skipped_dir(name)

    def test_regular_dir(self):
        """Ordinary directories are walked."""
        assert not is_skipped_dir("domain")


@pytest.mark.skipif(not TREE_SITTER_AVAILABLE, reason="tree-sitter not installed")
class TestExtract:
    """Test single-directory extraction."""

    @pytest.fixture
    def package(self, go_tree):
        root = go_tree(
            {
                "application/service.go": SERVICE_GO,
                "application/methods.go": METHODS_GO,
                "application/service_test.go": 'package application\n\nimport "testing"\n\ntype fake struct{}\n',
            }
        )
        return PackageExtractor(root).extract("application")

    def test_package_identity(self, package):
        """Name comes from the package clause, path from the directory."""
        assert package.name == "application"
        assert package.path == "application"

    def test_imports_in_file_order(self, package):
        """Imports follow sorted file order and record aliases."""
        # methods.go sorts before service.go
        assert package.imports == [
            "fmt",
            "errors",
            "example.com/shop/log",
            "example.com/shop/domain",
        ]
        assert package.imported_packages["lg"] == "example.com/shop/log"
        assert package.imported_packages["domain"] == "example.com/shop/domain"

    def test_test_files_ignored(self, package):
        """_test.go files contribute nothing."""
        assert "testing" not in package.imports
        assert "fake" not in package.structs

    def test_types(self, package):
        """Structs and interfaces are registered in source order."""
        assert list(package.structs) == ["OrderService", "Box"]
        assert list(package.interfaces) == ["Greeter"]
        assert package.structs["OrderService"].package is package

    def test_function_local_types_ignored(self, package):
        """Types declared inside functions are ignored."""
        assert "local" not in package.structs

    def test_fields(self, package):
        """Named fields are kept and embedded fields dropped."""
        fields = [(f.name, f.type) for f in package.structs["OrderService"].fields]
        assert fields == [
            ("repo", "domain.OrderRepository"),
            ("backup", "domain.OrderRepository"),
            ("logger", "*lg.Logger"),
            ("count", "int"),
        ]

    def test_interface_methods(self, package):
        """Interface methods record arity and returns."""
        greet, reset = package.interfaces["Greeter"].methods
        assert (greet.name, greet.arity, greet.has_return) == ("Greet", 1, True)
        assert (reset.name, reset.arity, reset.has_return) == ("Reset", 0, False)

    def test_methods_from_every_file(self, package):
        """Methods attach to structs across files."""
        names = sorted(m.name for m in package.structs["OrderService"].methods)
        assert names == ["Describe", "Place", "Raw"]

    def test_parameters(self, package):
        """Method parameters keep names and types."""
        (place,) = package.structs["OrderService"].find_methods("Place")
        assert [(p.name, p.type) for p in place.parameters] == [
            ("order", "*domain.Order"),
            ("notify", "bool"),
        ]
        assert place.has_return

    def test_variadic_and_unnamed_parameters(self, package):
        """Variadic parameters have no type and unnamed ones no name."""
        (describe,) = package.structs["OrderService"].find_methods("Describe")
        assert [(p.name, p.type) for p in describe.parameters] == [
            ("prefix", "string"),
            ("parts", ""),
        ]
        assert not describe.has_return
        (raw,) = package.structs["OrderService"].find_methods("Raw")
        assert [(p.name, p.type) for p in raw.parameters] == [("", "int"), ("", "string")]
        assert raw.has_return

    def test_generic_receiver(self, package):
        """Methods on generic receivers attach to the base type."""
        assert [m.name for m in package.structs["Box"].methods] == ["Get"]


@pytest.mark.skipif(not TREE_SITTER_AVAILABLE, reason="tree-sitter not installed")
class TestExtractFailures:
    """Test extraction failure modes."""

    def test_syntax_error(self, go_tree):
        """Syntax errors raise ParsingError for the package."""
        root = go_tree({"broken/bad.go": "package broken\n\nfunc (x {\n"})
        with pytest.raises(ParsingError) as exc_info:
            PackageExtractor(root).extract("broken")
        assert "syntax error" in exc_info.value.reason
        assert exc_info.value.package_path == "broken"
        assert isinstance(exc_info.value, ExtractionError)

    def test_no_go_files(self, go_tree):
        """A directory without Go sources yields no package."""
        root = go_tree({"docs/README.md": "# docs\n"})
        assert PackageExtractor(root).extract("docs") is None

    def test_missing_directory(self, tmp_path):
        """Discovering a missing directory raises FileAccessError."""
        with pytest.raises(FileAccessError):
            PackageExtractor(tmp_path).discover("missing")


class TestDiscover:
    """Test package discovery (no parsing involved)."""

    def test_sorted_walk(self, go_tree):
        """Discovery walks sorted and skips excluded directories."""
        root = go_tree(
            {
                "main.go": "package main\n",
                "utils/strings.go": "package utils\n",
                "domain/user.go": "package domain\n",
                "domain/entities/customer.go": "package entities\n",
                "internal/none/README.md": "\n",
                "internal/store/sql/db.go": "package sql\n",
                "vendor/x/x.go": "package x\n",
                "testdata/y/y.go": "package y\n",
                ".cache/z.go": "package z\n",
                "_old/w.go": "package w\n",
                "tests/only_test.go": "package tests\n",
            }
        )
        assert PackageExtractor(root).discover() == [
            ".",
            "domain",
            "domain/entities",
            "internal/store/sql",
            "utils",
        ]

    def test_subtree(self, go_tree):
        """Discovery can start below the root."""
        root = go_tree({"domain/user.go": "package domain\n", "domain/sub/a.go": "package sub\n"})
        assert PackageExtractor(root).discover("domain") == ["domain", "domain/sub"]

    def test_file_selects_directory(self, go_tree):
        """A file path selects its directory."""
        root = go_tree({"domain/user.go": "package domain\n", "domain/sub/a.go": "package sub\n"})
        assert PackageExtractor(root).discover("domain/user.go") == ["domain"]


@pytest.mark.skipif(not TREE_SITTER_AVAILABLE, reason="tree-sitter not installed")
class TestExtractAll:
    """Test multi-directory extraction."""

    def test_sequential_and_parallel_agree(self, example_project):
        """Threaded extraction matches sequential extraction."""
        sequential = PackageExtractor(example_project)
        parallel = PackageExtractor(example_project, max_workers=4)
        paths = sequential.discover()
        first = [(p.path, p.imports) for p in sequential.extract_all(paths)]
        second = [(p.path, p.imports) for p in parallel.extract_all(paths)]
        assert first == second
