"""
Utility functions for Threat Intel Blocklist
"""

import logging
import json
import sys
from datetime import datetime

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

console = Console()


def setup_logging(verbose=False, level='INFO'):
    """Setup logging configuration with Rich support.

    Logs always go to stderr so stdout stays usable for the IP list.
    """
    logger = logging.getLogger('ThreatIntelBlocklist')
    log_level = logging.DEBUG if verbose else getattr(logging, str(level).upper(), logging.INFO)
    logger.setLevel(log_level)

    # Clear any existing handlers
    logger.handlers.clear()

    if verbose:
        handler = RichHandler(console=Console(stderr=True), rich_tracebacks=True, markup=True)
    else:
        handler = logging.StreamHandler(sys.stderr)
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        handler.setFormatter(formatter)
    handler.setLevel(log_level)
    logger.addHandler(handler)

    return logger


def save_results(ips, filename=None, formats='txt'):
    """Save threat intel IPs to a text (one per line) or JSON file."""
    try:
        if filename is None:
            filename = f"threat_intel_ips_{datetime.now().strftime('%Y%m%d_%H%M%S')}.{formats}"

        if formats == 'json':
            output = {
                'timestamp': datetime.now().isoformat(),
                'summary': {
                    'total_ips': len(ips),
                },
                'ips': list(ips)
            }
            with open(filename, 'w') as f:
                json.dump(output, f, indent=2)
        else:
            with open(filename, 'w') as f:
                f.writelines(f"{ip}\n" for ip in ips)

        return True
    except (OSError, TypeError, ValueError) as e:
        print(f"Failed to save results: {str(e)}", file=sys.stderr)
        return False


def display_results(ips, limit=50):
    """Display threat intel IPs in a table with a summary panel."""
    summary_table = Table(show_header=False, box=box.ROUNDED, style="blue")
    summary_table.add_column("Metric", style="cyan")
    summary_table.add_column("Value", style="white")
    summary_table.add_row("Threat intel IPs",
                          f"[red]{len(ips)}[/red]" if ips else f"[green]{len(ips)}[/green]")

    console.print()
    console.print(Panel(summary_table, title="Threat Intel Summary", title_align="left", style="blue"))

    if not ips:
        console.print()
        console.print(Panel(
            "[bold green]No active threat intelligence IPs[/bold green]",
            title="Status",
            style="green"
        ))
        return

    ip_table = Table(title="Threat Intel IPs", box=box.ROUNDED, style="red")
    ip_table.add_column("#", style="cyan")
    ip_table.add_column("IP Address", style="bold red")

    for index, ip in enumerate(ips[:limit], start=1):
        ip_table.add_row(str(index), ip)

    if len(ips) > limit:
        ip_table.add_row("", f"... and {len(ips) - limit} more")

    console.print()
    console.print(ip_table)
