"""Exception hierarchy for openapi-analyzer.

All custom exceptions inherit from AnalyzerError, so callers can catch
every analyzer failure in a single except clause.
"""


class AnalyzerError(Exception):
    """Base exception for all analyzer errors."""


class InvalidSpecificationError(AnalyzerError):
    """The API description document is structurally unusable.

    Raised when the top-level document is not a mapping, or when it has
    no ``paths`` section at all. Missing optional sections never raise.
    """


class DocumentLoadError(AnalyzerError):
    """A document could not be read, fetched, or decoded."""


class ConfigError(AnalyzerError):
    """An analyzer settings file is missing or invalid."""
