"""Configuration exceptions: patterns, layer references, settings, paths."""

from pathlib import Path
from typing import Any, Optional

from .base import ArchGuardError


class ConfigurationError(ArchGuardError):
    """Base class for configuration-related errors."""

    pass


class PatternError(ConfigurationError):
    """Raised when a rule or layer pattern is empty or not a valid regex."""

    def __init__(self, pattern: str, reason: str, role: Optional[str] = None):
        details = {"pattern": pattern, "reason": reason}
        if role:
            details["role"] = role
        super().__init__(f"Invalid pattern {pattern!r}", details=details)
        self.pattern = pattern
        self.reason = reason
        self.role = role


class ConfigurationReferenceError(ConfigurationError):
    """Raised when a rule names an undefined layer or lacks a required key."""

    def __init__(self, rule: str, reason: str, index: Optional[int] = None):
        where = f"{rule} {index}" if index is not None else rule
        details = {"rule": rule, "reason": reason}
        if index is not None:
            details["index"] = str(index)
        super().__init__(f"{where}: {reason}", details=details)
        self.rule = rule
        self.reason = reason
        self.index = index


class InvalidPathError(ConfigurationError):
    """Raised when a provided path is invalid."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Invalid path: {path}", details={"path": str(path), "reason": reason})
        self.path = path
        self.reason = reason


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason


class UnboundLayerError(ConfigurationError):
    """Raised when a layer or layered architecture is used before bind()."""

    def __init__(self, name: str, operation: str):
        super().__init__(
            f"Layer {name!r} is not associated with an architecture",
            details={"layer": name, "operation": operation},
        )
        self.name = name
        self.operation = operation
