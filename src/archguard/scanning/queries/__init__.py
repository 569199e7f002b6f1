"""Tree-sitter query strings used by the Go extractor."""

from .go import IMPORT_QUERY, METHOD_QUERY, PACKAGE_QUERY, TYPE_QUERY, get_all_queries

__all__ = ["PACKAGE_QUERY", "IMPORT_QUERY", "TYPE_QUERY", "METHOD_QUERY", "get_all_queries"]
