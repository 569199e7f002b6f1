"""Analysis-related exceptions: directory access, Go parsing, model lookups."""

from pathlib import Path

from .base import ArchGuardError


class AnalysisError(ArchGuardError):
    """Base class for analysis-related errors."""
    pass


class ExtractionError(AnalysisError):
    """Raised when a package directory cannot be turned into a Package.

    Extraction of the affected directory is aborted and nothing is
    registered for it.
    """

    def __init__(self, package_path: str, reason: str):
        super().__init__(
            f"Failed to extract package {package_path}",
            details={"package": package_path, "reason": reason},
        )
        self.package_path = package_path
        self.reason = reason


class FileAccessError(ExtractionError):
    """Raised when a directory or source file cannot be read."""

    def __init__(self, filepath: Path, reason: str, package_path: str = ""):
        super().__init__(package_path or str(filepath), reason)
        self.message = f"Cannot access {filepath}"
        self.details["filepath"] = str(filepath)
        self.filepath = filepath


class ParsingError(ExtractionError):
    """Raised when a Go source file does not parse cleanly."""

    def __init__(self, filepath: Path, reason: str, package_path: str = ""):
        super().__init__(package_path or str(filepath), reason)
        self.message = f"Failed to parse go file: {filepath}"
        self.details["filepath"] = str(filepath)
        self.filepath = filepath


class ParserUnavailableError(AnalysisError):
    """Raised when tree-sitter or the Go grammar cannot be loaded."""

    def __init__(self, reason: str):
        super().__init__(
            "Go parser unavailable",
            details={"reason": reason, "hint": "pip install tree-sitter tree-sitter-go"},
        )
        self.reason = reason


class ModelLookupError(AnalysisError, LookupError):
    """Raised when a package or type is not present in the model."""

    def __init__(self, kind: str, name: str, package_path: str = ""):
        details = {"kind": kind, "name": name}
        if package_path:
            details["package"] = package_path
            message = f"{kind} {name!r} not found in package {package_path!r}"
        else:
            message = f"{kind} {name!r} not found"
        super().__init__(message, details=details)
        self.kind = kind
        self.name = name
        self.package_path = package_path
