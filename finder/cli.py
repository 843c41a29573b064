"""
freelancer-finder CLI

Usage:
    python -m finder history                 # Work history prompt text
    python -m finder history --name "Jane"   # One person's history
    python -m finder sync-team [--dry-run]   # Streamtime -> team sheet
    python -m finder roster                  # Roster and team counts
    python -m finder cache                   # Cache slot statistics
"""

import argparse
import sys

from . import config
from .errors import ConfigError
from .observability import configure_logging
from .service import FinderService


def print_header(text: str):
    """Print a section header."""
    print(f"\n{'═' * 50}")
    print(f"  {text}")
    print(f"{'═' * 50}")


def cmd_history(service: FinderService, args) -> int:
    """Print work history."""
    index = service.work_history()
    if index is None:
        print("No Streamtime data available. Check STREAMTIME_API_KEY and try again.")
        return 1

    if args.name:
        person = index.get(args.name)
        if person is None:
            print(f"No work history for '{args.name}'")
            return 1
        print_header(f"{person.full_name} ({person.role or 'no role'})")
        for job in person.engagement_list:
            tasks = ", ".join(job.tasks) or "-"
            print(f"  {job.label} [{job.company_name}] {job.total_hours}h  {tasks}")
        if person.current_bookings:
            print("\n  Currently booked:")
            for b in person.current_bookings:
                print(f"    {b.engagement_label}: {b.task_name} ({b.status}, until {b.end_date or 'open'})")
        return 0

    text = service.work_history_prompt()
    print(text or "Nobody on the roster or team sheet has Streamtime history.")
    if index.skipped:
        print(f"\n({len(index.skipped)} record(s) skipped during aggregation)")
    return 0


def cmd_sync_team(service: FinderService, args) -> int:
    """Reconcile the team sheet with Streamtime."""
    result = service.sync_team(dry_run=args.dry_run)
    if result is None:
        print("Team sync needs STREAMTIME_API_KEY and GOOGLE_TEAM_SPREADSHEET_ID.")
        return 1
    if result.error:
        print(f"❌ Team sync failed: {result.error}")
        return 1

    plan = result.plan
    print_header("Team sync" + (" (dry run)" if result.dry_run else ""))
    print(f"  {plan.summary()}")
    for a in plan.additions:
        print(f"  + {a.name} ({a.role or 'no role'})")
    for p in plan.patches:
        print(f"  ~ {p.name}: {p.kind} '{p.old_value}' -> '{p.new_value}'")

    if result.failures:
        print(f"\n❌ {len(result.failures)} write(s) failed:")
        for failure in result.failures:
            print(f"  - {failure}")
        return 1
    return 0


def cmd_roster(service: FinderService, args) -> int:
    """Roster and team counts."""
    service.fix_tab_names()
    roster = service.roster()
    team = service.team()

    print_header("Directories")
    by_tab: dict[str, int] = {}
    for person in roster:
        by_tab[person["Category"]] = by_tab.get(person["Category"], 0) + 1
    for tab in service.tabs:
        print(f"  {tab:30} {by_tab.get(tab, 0):4}")
    print(f"  {'Internal team (active)':30} {len(team):4}")
    return 0


def cmd_cache(service: FinderService, args) -> int:
    """Show cache statistics after a warm-up."""
    service.refresh()
    print_header("Cache")
    for name, stats in service.cache.stats().items():
        age = f"{stats.age:.0f}s" if stats.age is not None else "empty"
        print(f"  {name:14} hits={stats.hits} misses={stats.misses} age={age}")
    return 0


COMMANDS = {
    "history": cmd_history,
    "sync-team": cmd_sync_team,
    "roster": cmd_roster,
    "cache": cmd_cache,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="finder", description="freelancer-finder")
    parser.add_argument("--log-level", default=config.LOG_LEVEL)
    parser.add_argument("--json-logs", action="store_true", default=None)
    sub = parser.add_subparsers(dest="command", required=True)

    history = sub.add_parser("history", help="Show Streamtime work history")
    history.add_argument("--name", help="Show one person")

    sync = sub.add_parser("sync-team", help="Sync Streamtime users to the team sheet")
    sync.add_argument("--dry-run", action="store_true", help="Plan only, write nothing")

    sub.add_parser("roster", help="Count roster and team entries")
    sub.add_parser("cache", help="Warm caches and show statistics")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, json_format=args.json_logs)

    try:
        service = FinderService.from_config()
    except (ConfigError, ValueError) as e:
        print(f"❌ {e}")
        return 1

    return COMMANDS[args.command](service, args)


if __name__ == "__main__":
    sys.exit(main())
