"""Tree-sitter queries for Go.

Extracts:
    - The package clause
    - Import specs (single and grouped)
    - Type specs (structs, interfaces and everything else)
    - Method declarations with receivers
"""

# Query for the package clause
PACKAGE_QUERY = """
(package_clause
    (package_identifier) @package.name
)
"""

# Query for imports; the alias is read from the import_spec ``name`` field
IMPORT_QUERY = """
(import_spec
    path: (_) @import.path
) @import
"""

# Query for type declarations (struct/interface bodies are told apart later)
TYPE_QUERY = """
(type_declaration
    (type_spec
        name: (type_identifier) @type.name
        type: (_) @type.body
    ) @type
)
"""

# Query for methods bound to a receiver
METHOD_QUERY = """
(method_declaration
    receiver: (parameter_list) @method.receiver
    name: (field_identifier) @method.name
    parameters: (parameter_list) @method.params
) @method
"""


def get_all_queries() -> dict[str, str]:
    """Return all Go queries as a dict."""
    return {
        "package": PACKAGE_QUERY,
        "import": IMPORT_QUERY,
        "type": TYPE_QUERY,
        "method": METHOD_QUERY,
    }
