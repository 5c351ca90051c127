"""Tests for the main CLI entry point."""

from recordquery.cli.main import Context, get_history_dir


class TestCLIEntryPoint:
    """Test the main CLI entry point."""

    def test_cli_no_command_shows_help(self, cli_runner):
        """Running without a command shows help."""
        result = cli_runner.invoke([])

        assert result.exit_code in (0, 2)
        assert "Query tabular record collections" in result.output
        assert "Commands:" in result.output

    def test_cli_version_flag(self, cli_runner):
        """--version prints the version."""
        result = cli_runner.invoke(["--version"])

        assert result.exit_code == 0
        assert "recordquery version 0.1.0" in result.output

    def test_commands_registered(self, cli_runner):
        """Every command is listed in help."""
        result = cli_runner.invoke(["--help"])

        for command in ("query", "export", "profiles", "history"):
            assert command in result.output


class TestConfiguration:
    """Test configuration handling at startup."""

    def test_config_file_applies(self, cli_runner, tmp_path, drivers_file):
        """Settings from --config reach the engine."""
        config = tmp_path / "config.yaml"
        config.write_text("default_page_size: 1\n")

        result = cli_runner.invoke(
            ["--config", str(config), "query", str(drivers_file), "--format", "json"]
        )

        assert result.exit_code == 0
        assert '"total_pages": 4' in result.output

    def test_invalid_config(self, cli_runner, tmp_path, drivers_file):
        """An invalid config file stops with an error."""
        config = tmp_path / "config.yaml"
        config.write_text("fuzzy_threshold: 7\n")

        result = cli_runner.invoke(["--config", str(config), "query", str(drivers_file)])

        assert result.exit_code == 1
        assert "Error loading configuration" in result.output

    def test_environment_config(self, cli_runner, drivers_file, monkeypatch):
        """Environment variables override defaults."""
        monkeypatch.setenv("RECORDQUERY_PAGE_SIZE", "3")

        result = cli_runner.invoke(["query", str(drivers_file), "--format", "json"])

        assert result.exit_code == 0
        assert '"page_size": 3' in result.output


class TestHistoryDir:
    """Test search history location."""

    def test_environment(self, tmp_path, monkeypatch):
        """RECORDQUERY_HISTORY_DIR wins."""
        monkeypatch.setenv("RECORDQUERY_HISTORY_DIR", str(tmp_path / "h"))

        assert get_history_dir() == tmp_path / "h"

    def test_xdg_cache(self, tmp_path, monkeypatch):
        """The XDG cache directory is the default."""
        monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path))

        assert get_history_dir() == tmp_path / "recordquery" / "history"


class TestErrorHandling:
    """Test top-level error reporting."""

    def test_errors_without_traceback(self, cli_runner, tmp_path, history_dir):
        """Load errors are reported briefly."""
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        result = cli_runner.invoke(["query", str(path)])

        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "Cannot parse" in result.output

    def test_debug_reraises(self, cli_runner, tmp_path, history_dir):
        """--debug lets the exception propagate."""
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        result = cli_runner.invoke(["--debug", "query", str(path)])

        assert result.exit_code == 1
        assert result.exception is not None
        assert type(result.exception).__name__ == "RecordLoadError"

    def test_context_dataclass(self, tmp_path):
        """Context carries shared resources."""
        from rich.console import Console

        from recordquery.config import EngineConfig

        context = Context(console=Console(), config=EngineConfig(), history_dir=tmp_path)

        assert context.debug is False
