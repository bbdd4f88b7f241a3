"""
Threat Intel Blocklist - Main function
"""

import argparse
import sys

from ti_blocklist.config.settings import export_config, get_log_level, get_threat_intel_config
from ti_blocklist.exceptions import ConfigurationError, QueryExecutionError, SchemaError
from ti_blocklist.query_builder import build_query
from ti_blocklist.threat_intel import ThreatIntelLogAnalytics
from ti_blocklist.utils import setup_logging, save_results, display_results


def build_parser():
    parser = argparse.ArgumentParser(
        description='Fetch current public threat intelligence IPs from a Log Analytics workspace'
    )
    parser.add_argument('--output', '-o', help='Output file for the IP list')
    parser.add_argument('--format', '-f', choices=['txt', 'json'], default='txt',
                        help='Output file format (default: txt)')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable verbose output')
    parser.add_argument('--quiet', '-q', action='store_true',
                        help='Print bare IPs, one per line')
    parser.add_argument('--show-query', action='store_true',
                        help='Print the KQL query without running it')
    parser.add_argument('--show-config', action='store_true',
                        help='Print the current configuration (secrets masked)')
    return parser


def main(argv=None):
    """ Main entry point """
    args = build_parser().parse_args(argv)

    if args.show_config:
        print(export_config())
        return 0

    logger = setup_logging(args.verbose, get_log_level())

    try:
        if args.show_query:
            print(build_query(get_threat_intel_config(require_credentials=False)))
            return 0

        config = get_threat_intel_config()
        threat_intel = ThreatIntelLogAnalytics.from_settings(logger, config)
        logger.info("Fetching current threat intelligence IPs")
        ips = threat_intel.get_current_threat_intel_ips_sync()
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 2
    except QueryExecutionError as e:
        logger.error(f"Threat intel query failed: {e.message}")
        return 1
    except SchemaError as e:
        logger.error(f"Unexpected query result: {e}")
        return 1

    if args.quiet:
        for ip in ips:
            print(ip)
    else:
        display_results(ips)

    if args.output:
        if not save_results(ips, args.output, args.format):
            return 1
        logger.info(f"Results saved to {args.output}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
