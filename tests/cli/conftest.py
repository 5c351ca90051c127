"""Pytest configuration and fixtures for CLI tests."""

import msgspec
import pytest
from click.testing import CliRunner

from recordquery.cli.main import cli


class Runner:
    """CliRunner bound to the recordquery command group."""

    def __init__(self):
        self.runner = CliRunner()

    def invoke(self, args, **kwargs):
        return self.runner.invoke(cli, args, **kwargs)


@pytest.fixture
def cli_runner():
    """CLI runner for testing commands."""
    return Runner()


@pytest.fixture
def history_dir(tmp_path, monkeypatch):
    """Temporary search history location."""
    path = tmp_path / "history"
    monkeypatch.setenv("RECORDQUERY_HISTORY_DIR", str(path))
    return path


@pytest.fixture
def drivers_file(tmp_path, driver_records, history_dir):
    """Driver records written as JSON."""
    path = tmp_path / "drivers.json"
    path.write_bytes(msgspec.json.encode(driver_records))
    return path


@pytest.fixture
def complaints_file(tmp_path, complaint_records, history_dir):
    """Complaint records written as YAML under a ``records`` key."""
    import yaml

    path = tmp_path / "complaints.yaml"
    path.write_text(yaml.safe_dump({"records": complaint_records}, allow_unicode=True))
    return path
