"""Tests for the command-line entry point."""

from argparse import Namespace
from unittest.mock import patch

import pytest

from finder import cli
from finder.cache import ROSTER, TEAM, WORK_HISTORY, SlotCache
from finder.errors import ConfigError
from finder.service import FinderService
from finder.sources import SourcesConfig
from tests.fixtures import FakeStreamtimeClient, st_item, st_item_user, st_job, st_user

TEAM_ID = "team-sheet"


@pytest.fixture
def service(sheets, clock):
    sheets.set_sheet(TEAM_ID, "A1:Z", [["Name", "Role", "Status"], ["Jane Doe", "Designer", "Active"]])
    client = FakeStreamtimeClient(
        users=[st_user(1, "Jane", "Doe", role="Designer"), st_user(2, "Ana", "Ng")],
        jobs=[st_job(10, "J100", "Rebrand")],
        job_items=[st_item(20, 10, "Storyboard")],
        job_item_users=[st_item_user(20, 1, minutes=120, status="Scheduled")],
    )
    return FinderService(
        client,
        sheets,
        cache=SlotCache(ttls={WORK_HISTORY: 1800, ROSTER: 60, TEAM: 60}, clock=clock),
        sources=SourcesConfig(freelancer_tabs=[]),
        team_spreadsheet_id=TEAM_ID,
    )


class TestCommands:
    """Test cmd_* handlers against a wired service."""

    def test_history_prompt(self, service, capsys):
        assert cli.cmd_history(service, Namespace(name=None)) == 0
        out = capsys.readouterr().out
        assert "STREAMTIME PROJECT HISTORY" in out
        assert "• Jane Doe [⚠️ CURRENTLY BOOKED: J100 Rebrand]" in out

    def test_history_one_person(self, service, capsys):
        assert cli.cmd_history(service, Namespace(name="jane doe")) == 0
        out = capsys.readouterr().out
        assert "Jane Doe (Designer)" in out
        assert "Currently booked" in out

    def test_history_unknown_person(self, service, capsys):
        assert cli.cmd_history(service, Namespace(name="Nobody")) == 1

    def test_history_unconfigured(self, sheets, capsys):
        assert cli.cmd_history(FinderService(None, sheets), Namespace(name=None)) == 1
        assert "STREAMTIME_API_KEY" in capsys.readouterr().out

    def test_sync_team_dry_run(self, service, sheets, capsys):
        assert cli.cmd_sync_team(service, Namespace(dry_run=True)) == 0
        out = capsys.readouterr().out
        assert "(dry run)" in out
        assert "+ Ana Ng" in out
        assert sheets.appends == []

    def test_sync_team_write_failure(self, service, sheets, capsys):
        sheets.fail_append = True
        assert cli.cmd_sync_team(service, Namespace(dry_run=False)) == 1
        assert "write(s) failed" in capsys.readouterr().out

    def test_cache_stats(self, service, capsys):
        assert cli.cmd_cache(service, Namespace()) == 0
        out = capsys.readouterr().out
        assert "work_history" in out
        assert "misses=1" in out


class TestMain:
    """Test main() argument handling."""

    def test_dispatch(self, service):
        with patch("finder.cli.FinderService.from_config", return_value=service), patch(
            "finder.cli.configure_logging"
        ) as mock_logging:
            assert cli.main(["--log-level", "DEBUG", "roster"]) == 0
        mock_logging.assert_called_once_with("DEBUG", json_format=None)

    def test_bad_config(self, capsys):
        with patch("finder.cli.FinderService.from_config", side_effect=ConfigError("bad yaml")), patch(
            "finder.cli.configure_logging"
        ):
            assert cli.main(["history"]) == 1
        assert "bad yaml" in capsys.readouterr().out

    def test_command_required(self):
        with pytest.raises(SystemExit):
            cli.main([])
