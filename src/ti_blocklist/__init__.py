"""
Threat Intel Blocklist - public threat intelligence IPs from a Log Analytics workspace
"""

from ti_blocklist.exceptions import (
    ThreatIntelError,
    ConfigurationError,
    QueryExecutionError,
    SchemaError,
)
from ti_blocklist.query_builder import build_query, KqlQueryBuilder
from ti_blocklist.result_extractor import extract_ips, QueryResult, QueryStatus
from ti_blocklist.threat_intel import ThreatIntelLogAnalytics

__version__ = "1.0.0"

__all__ = [
    "ThreatIntelError",
    "ConfigurationError",
    "QueryExecutionError",
    "SchemaError",
    "build_query",
    "KqlQueryBuilder",
    "extract_ips",
    "QueryResult",
    "QueryStatus",
    "ThreatIntelLogAnalytics",
]
