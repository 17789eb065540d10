from datetime import datetime, timedelta, timezone
from unittest.mock import patch

from typer.testing import CliRunner

from expiry_tracker.cli.main import app
from expiry_tracker.config import Config
from expiry_tracker.domain.settings import SortKey

runner = CliRunner()


@patch("expiry_tracker.cli.main.ConfigProvider")
def test_dashboard_on_empty_store(mock_config_provider, tmp_path):
    mock_config_provider.return_value.load.return_value = Config(
        tracker_dir=tmp_path / ".expiry_tracker"
    )
    result = runner.invoke(app, ["dashboard"])
    assert result.exit_code == 0
    assert "Dashboard" in result.stdout
    mock_config_provider.return_value.load.assert_called()


@patch("expiry_tracker.cli.main.ConfigProvider")
def test_analytics_on_empty_store(mock_config_provider, tmp_path):
    mock_config_provider.return_value.load.return_value = Config(
        tracker_dir=tmp_path / ".expiry_tracker"
    )
    result = runner.invoke(app, ["analytics"])
    assert result.exit_code == 0
    assert "Most active category" in result.stdout
    assert "0 days" in result.stdout


@patch("expiry_tracker.cli.main.ConfigProvider")
@patch("expiry_tracker.cli.main.KnowledgeTracker")
def test_settings_updates(mock_tracker, mock_config_provider, tmp_path):
    mock_config_provider.return_value.load.return_value = Config(
        tracker_dir=tmp_path / ".expiry_tracker"
    )
    mock_tracker.return_value.state.settings.model_dump.return_value = {}
    result = runner.invoke(
        app, ["settings", "--items-per-page", "10", "--default-sort", "name"]
    )
    assert result.exit_code == 0
    mock_tracker.return_value.update_settings.assert_called_with(
        {"items_per_page": 10, "default_sort": SortKey.NAME}
    )
    mock_tracker.return_value.reset_settings.assert_not_called()


@patch("expiry_tracker.cli.main.ConfigProvider")
@patch("expiry_tracker.cli.main.KnowledgeTracker")
def test_settings_reset(mock_tracker, mock_config_provider, tmp_path):
    mock_config_provider.return_value.load.return_value = Config(
        tracker_dir=tmp_path / ".expiry_tracker"
    )
    mock_tracker.return_value.state.settings.model_dump.return_value = {}
    result = runner.invoke(app, ["settings", "--reset"])
    assert result.exit_code == 0
    mock_tracker.return_value.reset_settings.assert_called_once()
    mock_tracker.return_value.update_settings.assert_not_called()


@patch("expiry_tracker.cli.main.ConfigProvider")
@patch("expiry_tracker.cli.main.KnowledgeTracker")
def test_clear_requires_confirmation(mock_tracker, mock_config_provider, tmp_path):
    mock_config_provider.return_value.load.return_value = Config(
        tracker_dir=tmp_path / ".expiry_tracker"
    )
    result = runner.invoke(app, ["clear"], input="n\n")
    assert result.exit_code == 0
    mock_tracker.return_value.clear_all.assert_not_called()

    result = runner.invoke(app, ["clear"], input="y\n")
    assert result.exit_code == 0
    mock_tracker.return_value.clear_all.assert_called_once()


def test_tracker_dir_option_relocates_store(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    expiry = (datetime.now(timezone.utc).date() + timedelta(days=90)).isoformat()
    result = runner.invoke(
        app,
        [
            "--tracker-dir",
            str(tmp_path / "team"),
            "add",
            "CPR",
            "--category",
            "training",
            "--expiry",
            expiry,
        ],
    )
    assert result.exit_code == 0
    assert (tmp_path / "team" / "store" / "knowledge-items.json").exists()
    assert not (tmp_path / ".expiry_tracker").exists()
