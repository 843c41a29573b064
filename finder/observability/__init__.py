"""
Observability module: structured logging and run IDs.

Usage:
    from finder.observability import configure_logging, RunContext

    configure_logging("INFO")

    with RunContext(kind="team-sync") as ctx:
        logger.info("Sync started")  # log lines carry ctx.run_id
"""

from .context import RunContext, generate_run_id, get_run_id
from .logging import HumanFormatter, JSONFormatter, configure_logging

__all__ = [
    # Logging
    "configure_logging",
    "JSONFormatter",
    "HumanFormatter",
    # Context
    "RunContext",
    "generate_run_id",
    "get_run_id",
]
