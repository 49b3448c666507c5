"""
Basic tests to verify the application structure and command-line entry point.
"""
import argparse

import pytest

from spendsim import __main__ as cli


def test_app_import():
    """Test that the app can be imported."""
    from spendsim.api.main import app
    assert app is not None


def test_docs_endpoint(client):
    """Docs are available in development and hidden otherwise."""
    response = client.get("/docs")
    assert response.status_code in [200, 404]


@pytest.fixture
def quiet_cli(monkeypatch):
    levels = []
    monkeypatch.setattr(cli, "setup_logging", levels.append)
    monkeypatch.setattr(cli.settings.simulation, "channels_file", None)
    return levels


def test_simulate_reference_allocation(quiet_cli, capsys):
    assert cli.main(["simulate"]) == 0

    out = capsys.readouterr().out
    assert "Total spend:   100,000.00" in out
    assert "search" in out


def test_simulate_custom_allocation(quiet_cli, capsys):
    assert cli.main(["simulate", "--spend", "fb=1000", "--spend", "tv=2000"]) == 0

    assert "Total spend:   3,000.00" in capsys.readouterr().out


def test_simulate_with_channels_file(quiet_cli, capsys, channels_file):
    assert cli.main(["--channels-file", channels_file, "simulate", "--spend", "radio=500"]) == 0

    out = capsys.readouterr().out
    assert "radio" in out
    assert "Total spend:   500.00" in out


def test_curve(quiet_cli, capsys):
    assert cli.main(["curve", "--channel", "fb", "--max-spend", "1000", "--steps", "4", "--overshoot", "1"]) == 0

    lines = capsys.readouterr().out.strip().splitlines()
    assert lines[0].split() == ["spend", "revenue"]
    assert len(lines) == 1 + 6


def test_curve_unknown_channel(quiet_cli, capsys):
    assert cli.main(["curve", "--channel", "radio"]) == 2
    assert "Unknown channel" in capsys.readouterr().err


def test_curve_invalid_domain(quiet_cli):
    assert cli.main(["curve", "--channel", "fb", "--max-spend", "0"]) == 2


def test_invalid_channels_file(quiet_cli, tmp_path, capsys):
    missing = tmp_path / "missing.json"
    assert cli.main(["--channels-file", str(missing), "simulate"]) == 1
    assert "Error" in capsys.readouterr().err


@pytest.mark.parametrize("value", ["fb", "=100", "fb=abc", "fb=-5"])
def test_parse_spend_rejects(value):
    with pytest.raises(argparse.ArgumentTypeError):
        cli.parse_spend(value)


def test_parse_spend():
    assert cli.parse_spend("search=15000") == ("search", 15000.0)


def test_log_level_option(quiet_cli):
    assert cli.main(["--log-level", "DEBUG", "simulate"]) == 0
    assert cli.main(["simulate"]) == 0

    assert quiet_cli == ["DEBUG", cli.settings.logging.level.upper()]


def test_setup_logging_applies_level(monkeypatch, tmp_path):
    import logging

    from spendsim.utils.logging import setup_logging

    root = logging.getLogger()
    previous = root.level
    monkeypatch.setattr(cli.settings.logging, "log_dir", str(tmp_path))
    try:
        setup_logging("warning")
        assert root.level == logging.WARNING
    finally:
        root.setLevel(previous)
