"""
Exceptions raised while building, running and reading threat intelligence queries
"""


class ThreatIntelError(Exception):
    """Base class for all threat intel blocklist errors."""


class ConfigurationError(ThreatIntelError):
    """Configuration is missing or only partially set."""


class QueryExecutionError(ThreatIntelError):
    """The log analytics service reported a non-success status."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class SchemaError(ThreatIntelError):
    """The result table does not have the column the query projects."""
