from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from typer.testing import CliRunner

from notice_tracker.cli import app
from notice_tracker.exceptions import DownloadFailed, NoticeRenderError
from notice_tracker.models import AcquisitionMode

runner = CliRunner()

NOTICE_TOML = """
[[unit]]
name = "plugin"

[[unit.dependency]]
name = "Acme.Widget"
version = "1.0.0"
"""


@pytest.fixture
def notice_toml(tmp_path: Path) -> Path:
    """Write a minimal notice.toml."""
    path = tmp_path / "notice.toml"
    path.write_text(NOTICE_TOML)
    return path


@pytest.fixture
def mock_generate_notices(mocker, tmp_path: Path):
    """Mock the generate_notices function."""
    return mocker.patch(
        "notice_tracker.cli.generate_notices",
        AsyncMock(return_value=[tmp_path / "THIRD-PARTY-NOTICES.md"]),
    )


def test_generate_command(notice_toml, mock_generate_notices):
    """Test the generate command with a mocked pipeline."""
    result = runner.invoke(app, ["generate", "--config", str(notice_toml)])

    assert result.exit_code == 0
    assert "Found 1 workspace units" in result.stdout
    assert "Generated:" in result.stdout

    workspace, settings = mock_generate_notices.call_args.args
    assert workspace.units[0].name == "plugin"
    assert mock_generate_notices.call_args.kwargs["output"] is None


def test_generate_command_options(notice_toml, mock_generate_notices, tmp_path):
    """Test that CLI options override settings."""
    output = tmp_path / "out" / "NOTICE.md"

    result = runner.invoke(
        app,
        [
            "generate",
            "-c",
            str(notice_toml),
            "-o",
            str(output),
            "--mode",
            "fallback-only",
            "--target",
            "x86_64-pc-windows-msvc",
        ],
    )

    assert result.exit_code == 0
    _, settings = mock_generate_notices.call_args.args
    assert settings.acquisition_mode is AcquisitionMode.FALLBACK_ONLY
    assert settings.target == "x86_64-pc-windows-msvc"
    assert mock_generate_notices.call_args.kwargs["output"] == output


def test_generate_command_invalid_config(tmp_path, mock_generate_notices):
    """Test that an invalid configuration exits with code 1."""
    config = tmp_path / "notice.toml"
    config.write_text("[[unit]]\nversion = 1\n")

    result = runner.invoke(app, ["generate", "--config", str(config)])

    assert result.exit_code == 1
    mock_generate_notices.assert_not_called()


def test_generate_command_unsupported_file(tmp_path, mock_generate_notices):
    """Test that an unsupported configuration file exits with code 1."""
    config = tmp_path / "poetry.lock"
    config.write_text("")

    result = runner.invoke(app, ["generate", "--config", str(config)])

    assert result.exit_code == 1


def test_generate_command_render_failure(notice_toml, mock_generate_notices):
    """Test that a rendering failure exits with code 1."""
    mock_generate_notices.side_effect = NoticeRenderError("missing file")

    result = runner.invoke(app, ["generate", "--config", str(notice_toml)])

    assert result.exit_code == 1


def test_acquire_command(mocker, tmp_path):
    """Test the acquire command with a mocked acquisition."""
    artifact = tmp_path / "Acme.Widget.1.0.0"
    mock_acquire = mocker.patch(
        "notice_tracker.cli._run_acquire", AsyncMock(return_value=artifact)
    )

    result = runner.invoke(
        app, ["acquire", "Acme.Widget", "1.0.0", "--dest", str(tmp_path), "--mode", "primary-only"]
    )

    assert result.exit_code == 0
    assert "Acme.Widget.1.0.0" in result.stdout
    name, version, dest, settings = mock_acquire.call_args.args
    assert (name, version, dest) == ("Acme.Widget", "1.0.0", tmp_path)
    assert settings.acquisition_mode is AcquisitionMode.PRIMARY_ONLY


def test_acquire_command_failure(mocker, tmp_path):
    """Test that an acquisition failure exits with code 1."""
    mocker.patch(
        "notice_tracker.cli._run_acquire",
        AsyncMock(side_effect=DownloadFailed("HTTP 404", status=404)),
    )

    result = runner.invoke(app, ["acquire", "Acme.Widget", "1.0.0", "--dest", str(tmp_path)])

    assert result.exit_code == 1


def test_license_command():
    """Test printing a generated license text."""
    result = runner.invoke(app, ["license", "MIT", "--year", "2021", "--holders", "Acme"])

    assert result.exit_code == 0
    assert "MIT License" in result.stdout
    assert "Copyright (c) 2021 Acme" in result.stdout


def test_license_command_invalid_expression():
    """Test that an invalid expression exits with code 1."""
    result = runner.invoke(app, ["license", "MIT OR"])

    assert result.exit_code == 1
