"""
KQL query construction for public threat intelligence IPs.

Two variants are produced from a ThreatIntelConfig:

* base: every non-expired ``ThreatIntelligenceIndicator`` row whose confidence is at
  least the configured threshold and whose ``NetworkIP`` is a public dotted-quad IPv4
  address, reduced to distinct IPs.
* exclusion: the same, minus any IP found in a watchlist column.

Configuration values are placed into the query text as-is. They are operator input,
not user input; if that ever changes they need escaping before interpolation.
"""

from typing import List, Optional, Tuple

from ti_blocklist.exceptions import ConfigurationError

INDICATOR_TABLE = "ThreatIntelligenceIndicator"
NETWORK_IP_COLUMN = "NetworkIP"
EXCLUSIONS_NAME = "exclusions"

IPV4_PATTERN = r"^(?:[1-2]?[0-9]?[0-9]\.){3}(?:[1-2]?[0-9]?[0-9])$"
# 10.0.0.0/8, 172.16.0.0/12, 192.168.0.0/16
PRIVATE_RANGE_PATTERN = r"^(?:192\.168\.|10\.|172\.(?:1[6-9]|2[0-9]|3[0-1])\.)"

NOT_EXPIRED_CLAUSE = "ExpirationDateTime > now()"
IPV4_CLAUSE = f'{NETWORK_IP_COLUMN} matches regex @"{IPV4_PATTERN}"'
PUBLIC_IP_CLAUSE = f'not({NETWORK_IP_COLUMN} matches regex @"{PRIVATE_RANGE_PATTERN}")'
EXCLUSION_CLAUSE = f"{NETWORK_IP_COLUMN} !in~ ({EXCLUSIONS_NAME})"


class KqlQueryBuilder:
    """Compose a tabular KQL statement from named parts.

    Rendered as ``let`` statements, the source table, one ``where`` with all
    predicates joined by ``and``, then an optional ``summarize by``.
    """

    def __init__(self, source: str):
        self.source = source
        self._lets: List[Tuple[str, str]] = []
        self._predicates: List[str] = []
        self._summarize_by: Optional[str] = None

    def let(self, name: str, expression: str) -> "KqlQueryBuilder":
        self._lets.append((name, expression))
        return self

    def where(self, predicate: str) -> "KqlQueryBuilder":
        self._predicates.append(predicate)
        return self

    def summarize_by(self, column: str) -> "KqlQueryBuilder":
        self._summarize_by = column
        return self

    def build(self) -> str:
        lines = [f"let {name} = {expression};" for name, expression in self._lets]
        lines.append(self.source)
        if self._predicates:
            lines.append("| where " + " and ".join(self._predicates))
        if self._summarize_by:
            lines.append(f"| summarize by {self._summarize_by}")
        return "\n".join(lines)


def confidence_clause(min_confidence: int) -> str:
    return f"ConfidenceScore >= {min_confidence}"


def watchlist_expression(alias: str, column: str) -> str:
    return f'_GetWatchlist("{alias}") | project {column}'


def _check_config(config) -> None:
    min_confidence = config.min_confidence
    if min_confidence is None:
        raise ConfigurationError("Minimum confidence score is not configured.")
    if isinstance(min_confidence, bool) or not isinstance(min_confidence, int):
        raise ConfigurationError(f"Minimum confidence score must be an integer, got {min_confidence!r}.")
    if config.has_partial_exclusion_list:
        raise ConfigurationError(
            "Invalid threat intel configuration: exclusion list alias and IPv4 column name must be set together."
        )


def build_query(config) -> str:
    """
    Build the threat intelligence IP query for a configuration.

    Args:
        config: ThreatIntelConfig

    Returns:
        str: KQL query text, exclusion variant when both watchlist fields are set

    Raises:
        ConfigurationError: threshold missing, or only one watchlist field set
    """
    _check_config(config)

    builder = KqlQueryBuilder(INDICATOR_TABLE)
    with_exclusions = config.has_exclusion_list
    if with_exclusions:
        builder.let(EXCLUSIONS_NAME, watchlist_expression(config.exclusion_list_alias, config.ipv4_column_name))

    builder.where(NOT_EXPIRED_CLAUSE)
    builder.where(confidence_clause(config.min_confidence))
    if with_exclusions:
        builder.where(EXCLUSION_CLAUSE)
    builder.where(IPV4_CLAUSE)
    builder.where(PUBLIC_IP_CLAUSE)

    return builder.summarize_by(NETWORK_IP_COLUMN).build()
