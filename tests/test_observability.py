"""Tests for run context propagation and log formatting."""

import json
import logging

from finder.observability import (
    HumanFormatter,
    JSONFormatter,
    RunContext,
    configure_logging,
    generate_run_id,
    get_run_id,
)


def make_record(msg="hello", **extra):
    record = logging.LogRecord("finder.test", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestRunContext:
    """Test RunContext."""

    def test_sets_and_resets(self):
        assert get_run_id() is None
        with RunContext(kind="team-sync") as ctx:
            assert get_run_id() == ctx.run_id
            assert ctx.run_id.startswith("team-sync-")
        assert get_run_id() is None

    def test_nested(self):
        with RunContext(run_id="outer"):
            with RunContext(run_id="inner"):
                assert get_run_id() == "inner"
            assert get_run_id() == "outer"

    def test_generate_run_id_unique(self):
        assert generate_run_id("x") != generate_run_id("x")


class TestFormatters:
    """Test JSONFormatter and HumanFormatter."""

    def test_json_includes_run_id_and_extras(self):
        with RunContext(run_id="work-history-abc"):
            line = JSONFormatter().format(make_record("fetched", records=250))

        data = json.loads(line)
        assert data["message"] == "fetched"
        assert data["level"] == "INFO"
        assert data["run_id"] == "work-history-abc"
        assert data["records"] == 250

    def test_human(self):
        with RunContext(run_id="team-sync-1"):
            line = HumanFormatter().format(make_record("synced"))
        assert "[INFO] finder.test: [team-sync-1] synced" in line

    def test_configure_logging_replaces_handlers(self):
        root = logging.getLogger()
        saved = root.handlers[:], root.level
        try:
            configure_logging("DEBUG", json_format=True)
            assert root.level == logging.DEBUG
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, JSONFormatter)
        finally:
            root.handlers[:] = saved[0]
            root.setLevel(saved[1])


class TestRunLifecycle:
    """RunContext logs how each run ended."""

    def test_failure_logged_with_run_id(self, caplog):
        caplog.set_level(logging.DEBUG, logger="finder.observability.context")
        seen = []

        class RecordRunId(logging.Handler):
            def emit(self, record):
                seen.append(get_run_id())

        handler = RecordRunId()
        logging.getLogger("finder.observability.context").addHandler(handler)
        try:
            try:
                with RunContext(run_id="team-sync-x", kind="team-sync"):
                    raise RuntimeError("sheet gone")
            except RuntimeError:
                pass
        finally:
            logging.getLogger("finder.observability.context").removeHandler(handler)

        assert "team-sync failed after" in caplog.text
        assert "sheet gone" in caplog.text
        assert seen == ["team-sync-x"]
        assert get_run_id() is None

    def test_elapsed(self):
        run = RunContext(kind="work-history")
        assert run.elapsed == 0.0
        with run:
            assert run.elapsed >= 0.0
        assert run.run_id.startswith("work-history-")
