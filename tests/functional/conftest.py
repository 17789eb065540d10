import pytest
from typer.testing import CliRunner

from expiry_tracker.config import Config
from expiry_tracker.config_provider import ConfigProvider


@pytest.fixture
def cli_runner():
    return CliRunner()


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    """
    Creates an isolated tracker directory for functional tests.
    """
    config = Config(tracker_dir=tmp_path / ".expiry_tracker")
    monkeypatch.setattr(ConfigProvider, "load", lambda self: config)

    # Change CWD to tmp_path
    monkeypatch.chdir(tmp_path)

    return config
