"""
Result extraction - turn a tabular query result into a flat list of IPs
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ti_blocklist.exceptions import QueryExecutionError, SchemaError
from ti_blocklist.query_builder import NETWORK_IP_COLUMN


class QueryStatus(Enum):
    SUCCESS = "Success"
    FAILURE = "Failure"


@dataclass
class QueryResult:
    """Outcome of one workspace query, as returned by a query client."""

    status: QueryStatus
    table: List[Dict[str, Any]] = field(default_factory=list)
    error_message: Optional[str] = None

    @classmethod
    def success(cls, rows):
        return cls(status=QueryStatus.SUCCESS, table=list(rows))

    @classmethod
    def failure(cls, error_message):
        return cls(status=QueryStatus.FAILURE, error_message=error_message)


def extract_ips(result: Optional[QueryResult], column: str = NETWORK_IP_COLUMN) -> List[str]:
    """
    Project one column of a successful query result into a list of strings.

    A missing result yields an empty list. Rows are kept in order and are not
    deduplicated or filtered here; the query is responsible for both.

    Raises:
        QueryExecutionError: the result status is not SUCCESS
        SchemaError: a row has no value for ``column``
    """
    if result is None:
        return []

    if result.status != QueryStatus.SUCCESS:
        raise QueryExecutionError(result.error_message)

    ips = []
    for index, row in enumerate(result.table):
        try:
            value = row[column]
        except KeyError:
            raise SchemaError(f"Column '{column}' missing from result row {index}") from None
        ips.append(str(value))
    return ips
