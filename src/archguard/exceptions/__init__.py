"""Exception hierarchy for archguard."""

from .analysis import (
    AnalysisError,
    ExtractionError,
    FileAccessError,
    ModelLookupError,
    ParserUnavailableError,
    ParsingError,
)
from .base import ArchGuardError
from .config import (
    ConfigurationError,
    ConfigurationReferenceError,
    InvalidConfigError,
    InvalidPathError,
    PatternError,
    UnboundLayerError,
)

__all__ = [
    "ArchGuardError",
    "AnalysisError",
    "ExtractionError",
    "FileAccessError",
    "ParsingError",
    "ParserUnavailableError",
    "ModelLookupError",
    "ConfigurationError",
    "ConfigurationReferenceError",
    "InvalidConfigError",
    "InvalidPathError",
    "PatternError",
    "UnboundLayerError",
]
