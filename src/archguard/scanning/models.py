"""Source model for extracted Go packages.

One Package per directory. Structs and interfaces keep a non-owning
back-reference to their Package so violations can name where a type lives.

Type text is captured the way it is written, limited to the shapes the
rule engines understand:
    - bare name           Logger
    - qualified name      utils.Logger
    - one indirection     *Logger, *utils.Logger
Anything else is stored as an empty string and ignored by matching.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


def normalize_type(type_text: str) -> str:
    """Strip a single leading indirection marker: ``*utils.Logger`` -> ``utils.Logger``."""
    if type_text.startswith("*"):
        return type_text[1:]
    return type_text


@dataclass
class Parameter:
    """A method parameter. ``name`` is empty for unnamed parameters."""

    name: str
    type: str

    @property
    def normalized_type(self) -> str:
        return normalize_type(self.type)


@dataclass
class Field:
    """A named struct field."""

    name: str
    type: str


@dataclass
class Method:
    """A method signature.

    Attributes:
        name: Method name
        parameters: One entry per declared parameter name
        has_return: True if the signature declares any result
    """

    name: str
    parameters: list[Parameter] = field(default_factory=list)
    has_return: bool = False

    @property
    def arity(self) -> int:
        return len(self.parameters)

    def signature_matches(self, other: Method) -> bool:
        """Approximate signature equivalence: name, parameter count, return presence."""
        return (
            self.name == other.name
            and self.arity == other.arity
            and self.has_return == other.has_return
        )


@dataclass
class Struct:
    """A struct type with its named fields and receiver methods."""

    name: str
    fields: list[Field] = field(default_factory=list)
    methods: list[Method] = field(default_factory=list)
    package: Optional[Package] = field(default=None, repr=False, compare=False)

    @property
    def qualified_name(self) -> str:
        """``<package path>.<name>``, used by layer-scoped struct patterns."""
        if self.package is None:
            return self.name
        return f"{self.package.path}.{self.name}"

    def find_methods(self, name: str) -> list[Method]:
        return [m for m in self.methods if m.name == name]


@dataclass
class Interface:
    """An interface type and the method signatures it requires."""

    name: str
    methods: list[Method] = field(default_factory=list)
    package: Optional[Package] = field(default=None, repr=False, compare=False)

    @property
    def qualified_name(self) -> str:
        if self.package is None:
            return self.name
        return f"{self.package.path}.{self.name}"


@dataclass
class Package:
    """A Go package: one directory of non-test source files.

    Attributes:
        name: Package name from the ``package`` clause
        path: Slash-separated directory path relative to the analyzed root
        imports: Every import path in file-encounter order, duplicates kept
        structs: Struct name -> Struct, in declaration order
        interfaces: Interface name -> Interface, in declaration order
        imported_packages: Import alias -> import path
    """

    name: str
    path: str
    imports: list[str] = field(default_factory=list)
    structs: dict[str, Struct] = field(default_factory=dict)
    interfaces: dict[str, Interface] = field(default_factory=dict)
    imported_packages: dict[str, str] = field(default_factory=dict)

    def add_import(self, import_path: str, alias: Optional[str] = None) -> None:
        self.imports.append(import_path)
        if alias is None:
            alias = import_path.rsplit("/", 1)[-1]
        self.imported_packages[alias] = import_path

    def add_struct(self, struct: Struct) -> Struct:
        struct.package = self
        self.structs[struct.name] = struct
        return struct

    def add_interface(self, interface: Interface) -> Interface:
        interface.package = self
        self.interfaces[interface.name] = interface
        return interface
