"""Tests for the command-line interface."""

from unittest.mock import MagicMock, patch

from click.testing import CliRunner

from collabportal.cli import cli


def sqlite_settings() -> MagicMock:
    settings = MagicMock()
    settings.database_url = "sqlite+aiosqlite:///./data/collabportal.db"
    settings.host = "0.0.0.0"
    settings.port = 8000
    settings.workers = 1
    settings.is_development = True
    settings.log_level = "INFO"
    settings.environment = "development"
    return settings


def test_serve_rejects_multiple_workers_with_sqlite():
    """The CLI refuses --workers > 1 on SQLite."""
    runner = CliRunner()

    with patch("collabportal.cli.get_settings", return_value=sqlite_settings()):
        result = runner.invoke(cli, ["serve", "--workers", "2"])

    assert result.exit_code == 1
    assert "SQLite does not support multiple worker processes" in result.output


def test_serve_starts_uvicorn():
    runner = CliRunner()

    with patch("collabportal.cli.get_settings", return_value=sqlite_settings()), patch(
        "collabportal.cli.configure_logging"
    ), patch("uvicorn.run") as mock_run:
        result = runner.invoke(cli, ["serve", "--no-reload", "--port", "9000"])

    assert result.exit_code == 0, result.output
    mock_run.assert_called_once()
    args, kwargs = mock_run.call_args
    assert args[0] == "collabportal.infrastructure.api.app:app"
    assert kwargs["port"] == 9000
    assert kwargs["reload"] is False


def test_create_admin_rejects_bad_email():
    runner = CliRunner()

    with patch("collabportal.cli.configure_logging"):
        result = runner.invoke(cli, ["create-admin", "--email", "not-an-email", "--password", "x"])

    assert result.exit_code == 1
    assert "Invalid email format" in result.output


def test_info_shows_configuration():
    result = CliRunner().invoke(cli, ["info"])

    assert result.exit_code == 0
    assert "CollabPortal v" in result.output
    assert "Storage:" in result.output
