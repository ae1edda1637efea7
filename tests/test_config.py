"""Unit tests for settings loading and startup validation."""
from traffic_mcp.config import DEFAULT_DIRECTIONS_URL, load_settings
from traffic_mcp.server import main, parse_args


def test_settings_loaded_from_env(monkeypatch):
    monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "abc123")
    check = load_settings(_env_file=None)
    assert check.ok
    assert check.settings.google_maps_api_key == "abc123"
    assert check.settings.google_maps_directions_url == DEFAULT_DIRECTIONS_URL
    assert check.settings.http_port == 3000


def test_missing_api_key_reported_not_raised(monkeypatch):
    monkeypatch.delenv("GOOGLE_MAPS_API_KEY", raising=False)
    check = load_settings(_env_file=None)
    assert not check.ok
    assert check.error == "GOOGLE_MAPS_API_KEY environment variable is required"


def test_main_exits_non_zero_without_key(monkeypatch, tmp_path, capsys):
    monkeypatch.delenv("GOOGLE_MAPS_API_KEY", raising=False)
    monkeypatch.chdir(tmp_path)
    assert main(["http", "3001"]) == 1
    assert "GOOGLE_MAPS_API_KEY" in capsys.readouterr().err


def test_parse_args_defaults():
    args = parse_args([])
    assert (args.mode, args.port) == ("stdio", None)
    args = parse_args(["http", "8080"])
    assert (args.mode, args.port) == ("http", 8080)


def test_configure_logging_quiets_http_client():
    import logging
    from traffic_mcp.logging_config import configure_logging

    configure_logging("debug")
    assert logging.getLogger("httpx").level == logging.WARNING
