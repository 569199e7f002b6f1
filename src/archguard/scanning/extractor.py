"""PackageExtractor: turns Go package directories into Package models.

One directory is one package. Every non-test ``.go`` file in the directory
is parsed with tree-sitter; imports and type declarations are collected
first, then receiver methods are attached to the struct they belong to.

Usage:
    extractor = PackageExtractor(root_dir)
    paths = extractor.discover()          # ["domain", "domain/entities", ...]
    packages = extractor.extract_all(paths)

Failure behavior:
    Any unreadable directory/file or any file with a syntax error aborts
    extraction of that directory with an ExtractionError. Nothing is
    returned for it, so callers never register a partial package.
"""

from __future__ import annotations

import os
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from ..exceptions import FileAccessError, ParsingError
from ..logging_config import get_logger
from .models import Field, Interface, Method, Package, Parameter, Struct
from .queries import IMPORT_QUERY, METHOD_QUERY, PACKAGE_QUERY, TYPE_QUERY
from .treesitter_parser import GoParser, node_text

if TYPE_CHECKING:
    from .treesitter_parser import Node

logger = get_logger(__name__)

GO_SUFFIX = ".go"
TEST_SUFFIX = "_test.go"
SKIP_DIRS = ("vendor", "testdata")

# Interface body elements that declare a method (name differs across grammar versions)
_METHOD_ELEMENTS = ("method_elem", "method_spec")


def is_go_source(name: str) -> bool:
    """True for ``.go`` files that are not tests."""
    return name.endswith(GO_SUFFIX) and not name.endswith(TEST_SUFFIX)


def is_skipped_dir(name: str) -> bool:
    """Directories the go tool ignores: hidden, underscore-prefixed, vendor, testdata."""
    return name.startswith((".", "_")) or name in SKIP_DIRS


def type_text(node: Optional[Node]) -> str:
    """Render a type node as text, or an empty string for unsupported shapes.

    Supported: ``T``, ``pkg.T``, ``*T``, ``*pkg.T``. Generic instantiations
    collapse to their base type (``Box[int]`` -> ``Box``).
    """
    if node is None:
        return ""
    if node.type == "pointer_type":
        inner = node.named_children[0] if node.named_children else None
        inner_text = _named_type_text(inner)
        return f"*{inner_text}" if inner_text else ""
    if node.type == "parenthesized_type" and node.named_children:
        return type_text(node.named_children[0])
    return _named_type_text(node)


def _named_type_text(node: Optional[Node]) -> str:
    if node is None:
        return ""
    if node.type == "type_identifier":
        return node_text(node)
    if node.type == "qualified_type":
        package = node_text(node.child_by_field_name("package"))
        name = node_text(node.child_by_field_name("name"))
        if package and name:
            return f"{package}.{name}"
        return ""
    if node.type == "generic_type":
        return _named_type_text(node.child_by_field_name("type"))
    return ""


def receiver_type_name(receiver: Optional[Node]) -> str:
    """Bare type name of a method receiver, value or pointer, generic or not."""
    if receiver is None:
        return ""
    for decl in receiver.named_children:
        if decl.type != "parameter_declaration":
            continue
        text = type_text(decl.child_by_field_name("type"))
        return text.lstrip("*")
    return ""


def extract_parameters(parameter_list: Optional[Node]) -> list[Parameter]:
    """One Parameter per declared name; unnamed parameters get an empty name."""
    params: list[Parameter] = []
    if parameter_list is None:
        return params

    for decl in parameter_list.named_children:
        if decl.type == "parameter_declaration":
            param_type = type_text(decl.child_by_field_name("type"))
        elif decl.type == "variadic_parameter_declaration":
            # ...T is not one of the captured type shapes
            param_type = ""
        else:
            continue

        names = decl.children_by_field_name("name")
        if not names:
            params.append(Parameter(name="", type=param_type))
            continue
        for name_node in names:
            params.append(Parameter(name=node_text(name_node), type=param_type))

    return params


def _has_result(result: Optional[Node]) -> bool:
    if result is None:
        return False
    if result.type == "parameter_list":
        return any(
            child.type in ("parameter_declaration", "variadic_parameter_declaration")
            for child in result.named_children
        )
    return True


def _method_from(node: Node) -> Method:
    return Method(
        name=node_text(node.child_by_field_name("name")),
        parameters=extract_parameters(node.child_by_field_name("parameters")),
        has_return=_has_result(node.child_by_field_name("result")),
    )


def _first_error(root: Node) -> Optional[Node]:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        if node.has_error:
            stack.extend(reversed(node.children))
    return None


def _is_top_level(type_spec: Node) -> bool:
    declaration = type_spec.parent
    return (
        declaration is not None
        and declaration.parent is not None
        and declaration.parent.type == "source_file"
    )


class PackageExtractor:
    """Extracts Package models from directories below a root.

    Attributes:
        root: Absolute root directory; package paths are relative to it
        max_workers: Worker count for extract_all(); 1 means sequential
    """

    def __init__(self, root: Path, max_workers: Optional[int] = None) -> None:
        self.root = Path(root).resolve()
        self.max_workers = max_workers or 1
        self._local = threading.local()

    def _parser(self) -> GoParser:
        """Per-thread parser; tree-sitter parsers must not be shared."""
        parser = getattr(self._local, "parser", None)
        if parser is None:
            parser = GoParser()
            self._local.parser = parser
        return parser

    def package_key(self, directory: Path) -> str:
        """Slash-separated path of ``directory`` relative to the root (``.`` for the root)."""
        return directory.relative_to(self.root).as_posix()

    def discover(self, rel_path: str = ".") -> list[str]:
        """List package paths at or below ``rel_path`` in sorted walk order.

        A directory is a package if it holds at least one non-test Go file.
        Every subdirectory is searched, including ones without Go files.
        A path naming a file selects that file's directory only.
        """
        start = (self.root / rel_path).resolve()
        if start.is_file():
            start = start.parent
            return [self.package_key(start)] if self._go_files(start) else []
        if not start.is_dir():
            raise FileAccessError(start, "no such directory", package_path=rel_path)

        found: list[str] = []
        self._walk(start, found)
        return found

    def _walk(self, directory: Path, found: list[str]) -> None:
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            raise FileAccessError(directory, str(e), package_path=self.package_key(directory))

        if any(entry.is_file() and is_go_source(entry.name) for entry in entries):
            found.append(self.package_key(directory))

        for entry in entries:
            if entry.is_dir(follow_symlinks=False) and not is_skipped_dir(entry.name):
                self._walk(Path(entry.path), found)

    def _go_files(self, directory: Path) -> list[Path]:
        try:
            return sorted(
                p for p in directory.iterdir() if p.is_file() and is_go_source(p.name)
            )
        except OSError as e:
            raise FileAccessError(directory, str(e), package_path=self.package_key(directory))

    def extract(self, rel_path: str) -> Optional[Package]:
        """Extract the package in one directory (not its subdirectories).

        Returns:
            Package, or None if the directory holds no Go source

        Raises:
            FileAccessError: Directory or file cannot be read
            ParsingError: A file has syntax errors
        """
        directory = (self.root / rel_path).resolve()
        key = self.package_key(directory)
        files = self._go_files(directory)
        if not files:
            return None

        parser = self._parser()
        trees = []
        for file_path in files:
            try:
                code = file_path.read_bytes()
            except OSError as e:
                raise FileAccessError(file_path, str(e), package_path=key)

            tree = parser.parse(code)
            error = _first_error(tree.root_node)
            if error is not None:
                line = error.start_point[0] + 1
                raise ParsingError(file_path, f"syntax error at line {line}", package_path=key)
            trees.append(tree)

        package = Package(name=self._package_name(parser, trees), path=key)

        # Pass 1: imports and type declarations from every file
        for tree in trees:
            self._collect_imports(parser, tree.root_node, package)
            self._collect_types(parser, tree.root_node, package)

        # Pass 2: receiver methods, which may live in a different file than their struct
        for tree in trees:
            self._collect_methods(parser, tree.root_node, package)

        logger.debug(
            f"Extracted package {key}: {len(package.imports)} imports, "
            f"{len(package.structs)} structs, {len(package.interfaces)} interfaces"
        )
        return package

    def extract_all(self, rel_paths: list[str]) -> list[Package]:
        """Extract many directories, preserving the order of ``rel_paths``.

        With max_workers > 1 directories are parsed on a thread pool; the
        results are still returned in input order and the first failure is
        raised to the caller.
        """
        if self.max_workers <= 1 or len(rel_paths) < 2:
            results = [self.extract(path) for path in rel_paths]
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                results = list(executor.map(self.extract, rel_paths))

        packages = [pkg for pkg in results if pkg is not None]
        logger.info(f"Extracted {len(packages)} packages from {self.root}")
        return packages

    def _package_name(self, parser: GoParser, trees: list) -> str:
        for tree in trees:
            for node, capture_name in parser.query(tree.root_node, PACKAGE_QUERY):
                if capture_name == "package.name":
                    return node_text(node)
        return ""

    def _collect_imports(self, parser: GoParser, root: Node, package: Package) -> None:
        for node, capture_name in parser.query(root, IMPORT_QUERY):
            if capture_name != "import":
                continue
            import_path = node_text(node.child_by_field_name("path")).strip('"`')
            if not import_path:
                continue
            alias = node_text(node.child_by_field_name("name")) or None
            logger.debug(f"Found import in {package.path}: {import_path}")
            package.add_import(import_path, alias)

    def _collect_types(self, parser: GoParser, root: Node, package: Package) -> None:
        for node, capture_name in parser.query(root, TYPE_QUERY):
            if capture_name != "type" or not _is_top_level(node):
                continue
            name = node_text(node.child_by_field_name("name"))
            body = node.child_by_field_name("type")
            if body is None:
                continue
            if body.type == "struct_type":
                package.add_struct(Struct(name=name, fields=self._struct_fields(body)))
            elif body.type == "interface_type":
                package.add_interface(Interface(name=name, methods=self._interface_methods(body)))

    def _struct_fields(self, struct_type: Node) -> list[Field]:
        fields: list[Field] = []
        for field_list in struct_type.named_children:
            if field_list.type != "field_declaration_list":
                continue
            for decl in field_list.named_children:
                if decl.type != "field_declaration":
                    continue
                field_type = type_text(decl.child_by_field_name("type"))
                # Embedded fields have no names and are not recorded
                for name_node in decl.children_by_field_name("name"):
                    fields.append(Field(name=node_text(name_node), type=field_type))
        return fields

    def _interface_methods(self, interface_type: Node) -> list[Method]:
        return [
            _method_from(element)
            for element in interface_type.named_children
            if element.type in _METHOD_ELEMENTS
        ]

    def _collect_methods(self, parser: GoParser, root: Node, package: Package) -> None:
        for node, capture_name in parser.query(root, METHOD_QUERY):
            if capture_name != "method":
                continue
            receiver = receiver_type_name(node.child_by_field_name("receiver"))
            struct = package.structs.get(receiver)
            if struct is not None:
                struct.methods.append(_method_from(node))
