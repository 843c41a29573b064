"""
Centralized configuration for freelancer-finder.

All values that vary by deployment belong here.
Override via environment variables where marked.
"""

import os

# ============================================================
# Streamtime
# ============================================================

STREAMTIME_API_KEY: str = os.environ.get("STREAMTIME_API_KEY", "")
"""Bearer token for the Streamtime REST API. Empty disables job history and team sync."""

STREAMTIME_API_BASE: str = os.environ.get(
    "STREAMTIME_API_BASE", "https://api.streamtime.net/v1"
)
"""Streamtime API root."""

STREAMTIME_TIMEOUT: float = float(os.environ.get("STREAMTIME_TIMEOUT", "30"))
"""Per-request timeout in seconds, enforced by the HTTP transport."""

# ============================================================
# Google Sheets
# ============================================================

GOOGLE_SPREADSHEET_ID: str = os.environ.get("GOOGLE_SPREADSHEET_ID", "")
"""Freelancer roster spreadsheet (one tab per discipline)."""

GOOGLE_TEAM_SPREADSHEET_ID: str = os.environ.get("GOOGLE_TEAM_SPREADSHEET_ID", "")
"""Internal studio team spreadsheet. Empty disables team reads and sync."""

GOOGLE_SERVICE_ACCOUNT_FILE: str = os.environ.get(
    "GOOGLE_SERVICE_ACCOUNT_FILE", "config/service-account.json"
)
"""Service account JSON used for Sheets access."""

# ============================================================
# Cache
# ============================================================

WORK_HISTORY_TTL_SECONDS: int = int(os.environ.get("FINDER_WORK_HISTORY_TTL", str(30 * 60)))
"""Job history changes slowly; 30 minutes keeps Streamtime traffic low."""

SHEET_TTL_SECONDS: int = int(os.environ.get("FINDER_SHEET_TTL", "60"))
"""Roster and team sheets are edited live; one minute is fresh enough."""

# ============================================================
# Runtime
# ============================================================

LOG_LEVEL: str = os.environ.get("FINDER_LOG_LEVEL", "INFO")
"""Root log level passed to configure_logging()."""

SOURCES_CONFIG_PATH: str = os.environ.get("FINDER_SOURCES_CONFIG", "")
"""Path to sources.yaml. Empty uses config/sources.yaml next to the package."""
