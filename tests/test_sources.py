"""Tests for sources.yaml loading."""

from unittest.mock import patch

import pytest

from finder.errors import ConfigError
from finder.sources import DEFAULT_SOURCES_PATH, SourcesConfig, load_sources


class TestLoadSources:
    """Test load_sources()."""

    def test_shipped_file_matches_defaults(self):
        assert load_sources(str(DEFAULT_SOURCES_PATH)) == SourcesConfig()

    def test_missing_file_uses_defaults(self, tmp_path):
        sources = load_sources(str(tmp_path / "absent.yaml"))
        assert sources.relations["jobs"].search_view == 7
        assert sources.relations["job_items"].max_total == 5000
        assert len(sources.freelancer_tabs) == 11

    def test_env_path(self, tmp_path):
        path = tmp_path / "sources.yaml"
        path.write_text("freelancer_tabs: [Editors]\n")
        with patch("finder.sources.config.SOURCES_CONFIG_PATH", str(path)):
            assert load_sources().freelancer_tabs == ["Editors"]

    def test_partial_file_keeps_other_defaults(self, tmp_path):
        path = tmp_path / "sources.yaml"
        path.write_text("team_range: \"Team!A1:Z\"\n")
        sources = load_sources(str(path))
        assert sources.team_range == "Team!A1:Z"
        assert set(sources.relations) == {"jobs", "job_items", "job_item_users"}

    def test_empty_file_uses_defaults(self, tmp_path):
        path = tmp_path / "sources.yaml"
        path.write_text("")
        assert load_sources(str(path)) == SourcesConfig()

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "sources.yaml"
        path.write_text("relations: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_sources(str(path))

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "sources.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_sources(str(path))

    def test_cap_below_page_size(self, tmp_path):
        path = tmp_path / "sources.yaml"
        path.write_text(
            "relations:\n"
            "  jobs: {search_view: 7, page_size: 200, max_total: 100}\n"
            "  job_items: {search_view: 16}\n"
            "  job_item_users: {search_view: 17}\n"
        )
        with pytest.raises(ConfigError):
            load_sources(str(path))

    def test_missing_relation(self, tmp_path):
        path = tmp_path / "sources.yaml"
        path.write_text("relations:\n  jobs: {search_view: 7}\n")
        with pytest.raises(ConfigError, match="job_item"):
            load_sources(str(path))
