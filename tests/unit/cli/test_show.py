from unittest.mock import MagicMock, patch

import pytest
import typer

from tagflow.access import TrackingMatcher
from tagflow.cli.constants import MASKED_VALUE
from tagflow.cli.entrypoint import app
from tagflow.cli.show import (
    format_value,
    render_contributors_table_data,
    render_matchers_table_data,
    render_settings_table_data,
    show,
)
from tagflow.settings import TagFlowSettings
from tagflow.vars import VariableContributor


class TestShowCommand:
    """Tests for the 'show' CLI command."""

    @patch("tagflow.cli.show.TagFlowSettings")
    @patch("tagflow.cli.show.show_contributors")
    @patch("tagflow.cli.show.show_matchers")
    @patch("tagflow.cli.show.show_settings")
    def test_show_all_flag(self, mock_show_settings, mock_show_matchers, mock_show_contributors, mock_settings):
        """Test 'show' with --all flag displays everything."""
        mock_ctx = MagicMock()
        mock_ctx.obj = {"settings": "custom.yaml"}
        loaded = mock_settings.load.return_value

        show(mock_ctx, config=False, matchers=False, contributors=False, all=True)

        mock_settings.load.assert_called_once_with("custom.yaml")
        mock_show_settings.assert_called_once_with(loaded)
        mock_show_matchers.assert_called_once_with(loaded)
        mock_show_contributors.assert_called_once_with(loaded)

    @patch("tagflow.cli.show.TagFlowSettings")
    @patch("tagflow.cli.show.show_contributors")
    @patch("tagflow.cli.show.show_matchers")
    @patch("tagflow.cli.show.show_settings")
    def test_show_matchers_flag(self, mock_show_settings, mock_show_matchers, mock_show_contributors, mock_settings):
        mock_ctx = MagicMock()
        mock_ctx.obj = {}

        show(mock_ctx, config=False, matchers=True, contributors=False, all=False)

        mock_settings.load.assert_called_once_with(None)
        mock_show_settings.assert_not_called()
        mock_show_matchers.assert_called_once()
        mock_show_contributors.assert_not_called()

    def test_show_without_options(self):
        with pytest.raises(typer.BadParameter, match="at least one option"):
            show(MagicMock(), config=False, matchers=False, contributors=False, all=False)

    def test_show_config_via_cli(self, runner, cli_settings_file):
        result = runner.invoke(app, ["-s", str(cli_settings_file), "show", "--config"])

        assert result.exit_code == 0
        assert "TAGFLOW SETTINGS" in result.stdout
        assert "js_file_location" in result.stdout
        assert "https://cdn.example.com/s_code.js" in result.stdout

    def test_show_all_via_cli(self, runner, cli_settings_file):
        result = runner.invoke(app, ["-s", str(cli_settings_file), "show", "-a"])

        assert result.exit_code == 0
        assert "TRACKING MATCHERS" in result.stdout
        assert "tagflow.access.matchers.RoleMatcher" in result.stdout

    def test_show_missing_settings_file(self, runner, tmp_path):
        result = runner.invoke(app, ["-s", str(tmp_path / "missing.yaml"), "show", "-c"])

        assert result.exit_code == 2


class TestTableData:
    def test_settings_rows(self):
        rows = render_settings_table_data(TagFlowSettings(version="H.25"))

        assert len(rows) == len(TagFlowSettings.model_fields)
        assert any("H.25" in value for _, value in rows)

    @pytest.mark.parametrize("key", ["api_key", "smtp_password", "client_secret"])
    def test_protected_values_are_masked(self, key):
        assert MASKED_VALUE in format_value(key, "abc123")
        assert "abc123" not in format_value(key, "abc123")

    def test_structured_values_are_json(self):
        assert '"administrator"' in format_value("track_roles", ["administrator"])

    def test_matcher_rows(self):
        class PreviewMatcher(TrackingMatcher):
            matcher_name = "preview"

        rows = render_matchers_table_data(TagFlowSettings(matchers=["role"]))
        by_name = {row[0]: row for row in rows}

        assert by_name["role"][1] == "yes"
        assert by_name["admin_route"][1] == "no"
        assert by_name["preview"][2].endswith(".PreviewMatcher")

    def test_contributor_rows(self):
        class ChannelContributor(VariableContributor):
            contributor_name = "channel"

        rows = render_contributors_table_data(TagFlowSettings())

        assert ["channel", f"{__name__}.ChannelContributor"] in rows
