"""
Threat Intelligence Module - current public threat intel IPs from a Log Analytics workspace
"""

import asyncio

from ti_blocklist.config.settings import get_threat_intel_config
from ti_blocklist.log_analytics import ALL_TIME, LogAnalyticsQueryClient
from ti_blocklist.query_builder import build_query
from ti_blocklist.result_extractor import extract_ips


class ThreatIntelLogAnalytics:
    """Threat intel IP source backed by ThreatIntelligenceIndicator in Log Analytics."""

    def __init__(self, logger, config, client):
        self.logger = logger
        self.config = config
        self.client = client

    @classmethod
    def from_settings(cls, logger, config=None):
        """Build the source and its Log Analytics client from loaded settings."""
        config = config or get_threat_intel_config()
        return cls(logger, config, LogAnalyticsQueryClient.from_config(config, logger))

    def get_query(self):
        return build_query(self.config)

    async def get_current_threat_intel_ips(self):
        """Query the workspace and return the current threat intel IPs, in result order."""
        query = self.get_query()
        variant = 'with exclusion list' if self.config.has_exclusion_list else 'without exclusion list'
        self.logger.debug(f"Querying workspace {self.config.workspace_id} {variant}")

        result = await self.client.query_workspace(self.config.workspace_id, query, timespan=ALL_TIME)
        if result is None:
            self.logger.debug("Workspace query returned no result")

        ips = extract_ips(result)
        self.logger.info(f"Retrieved {len(ips)} threat intelligence IPs")
        return ips

    def get_current_threat_intel_ips_sync(self):
        """Synchronous wrapper for get_current_threat_intel_ips."""
        return asyncio.run(self.get_current_threat_intel_ips())
