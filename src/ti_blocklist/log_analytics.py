"""
Log Analytics query client - runs KQL against a workspace with a service principal
"""

import logging
from typing import Optional, Protocol

import aiohttp
from azure.core.exceptions import HttpResponseError
from azure.core.pipeline.transport import AioHttpTransport
from azure.identity import AzureAuthorityHosts
from azure.identity.aio import ClientSecretCredential
from azure.monitor.query import LogsQueryStatus
from azure.monitor.query.aio import LogsQueryClient

from ti_blocklist.result_extractor import QueryResult

# No time bound on the query
ALL_TIME = None


class QueryClient(Protocol):
    """Anything able to run a query against a workspace."""

    async def query_workspace(self, workspace_id: str, query: str, timespan=ALL_TIME) -> Optional[QueryResult]:
        ...


def to_query_result(response) -> Optional[QueryResult]:
    """Convert an azure-monitor-query response into a QueryResult."""
    if response is None:
        return None

    if response.status != LogsQueryStatus.SUCCESS:
        error = getattr(response, 'partial_error', None)
        message = getattr(error, 'message', None) or f"Query finished with status {response.status}"
        return QueryResult.failure(message)

    if not response.tables:
        return QueryResult.success([])

    # Primary result table
    table = response.tables[0]
    return QueryResult.success(dict(zip(table.columns, row)) for row in table.rows)


class LogAnalyticsQueryClient:
    """
    Query client authenticating with a client secret.

    A fresh credential, transport and LogsQueryClient are created for every query,
    so each call authenticates again.
    """

    def __init__(self, tenant_id, client_id, client_secret, authority=AzureAuthorityHosts.AZURE_PUBLIC_CLOUD,
                 logger=None):
        self.logger = logger or logging.getLogger('ThreatIntelBlocklist')
        self.tenant_id = tenant_id
        self.client_id = client_id
        self.client_secret = client_secret
        self.authority = authority

    @classmethod
    def from_config(cls, config, logger=None):
        return cls(config.tenant_id, config.client_id, config.client_secret,
                   authority=config.authority_host, logger=logger)

    async def query_workspace(self, workspace_id, query, timespan=ALL_TIME):
        """
        Run a query against a Log Analytics workspace.

        Args:
            workspace_id: Workspace (customer) ID
            query: KQL query text, sent verbatim
            timespan: Time window, ALL_TIME for no bound

        Returns:
            QueryResult: SUCCESS with the primary table rows, or FAILURE with the
            service error message
        """
        async with aiohttp.ClientSession() as session:
            transport = AioHttpTransport(session=session, session_owner=False)
            credential = ClientSecretCredential(
                self.tenant_id, self.client_id, self.client_secret, authority=self.authority
            )
            client = LogsQueryClient(credential, transport=transport)

            async with credential, client:
                try:
                    response = await client.query_workspace(workspace_id, query, timespan=timespan)
                except HttpResponseError as e:
                    self.logger.debug(f"Workspace query rejected: {e.message}")
                    return QueryResult.failure(e.message)

        return to_query_result(response)
