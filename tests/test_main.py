"""Tests for the command-line entry point."""

from unittest.mock import AsyncMock, patch

import pytest

from gemini_mcp import __version__
from gemini_mcp.__main__ import main, parse_args
from gemini_mcp.transport import FramingMode


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "GEMINI_API_KEY",
        "GEMINI_MCP_FRAMING",
        "GEMINI_MCP_DEFAULT_MODEL",
        "GEMINI_API_BASE_URL",
        "GEMINI_MCP_TIMEOUT",
        "GEMINI_MCP_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestParseArgs:
    def test_defaults_defer_to_environment(self):
        args = parse_args([])
        assert args.framing is None
        assert args.log_level is None

    def test_framing_choices(self):
        assert parse_args(["--framing", "content-length"]).framing == "content-length"
        with pytest.raises(SystemExit):
            parse_args(["--framing", "xml"])

    def test_version(self, capsys):
        with pytest.raises(SystemExit):
            parse_args(["--version"])
        assert __version__ in capsys.readouterr().out


class TestMain:
    def test_missing_api_key_exits_nonzero(self, clean_env, capsys):
        with patch("gemini_mcp.__main__.run", new_callable=AsyncMock) as run:
            assert main([]) == 1

        run.assert_not_awaited()
        captured = capsys.readouterr()
        assert "GEMINI_API_KEY" in captured.err
        assert captured.out == ""

    def test_invalid_log_level_exits_nonzero(self, clean_env, capsys):
        clean_env.setenv("GEMINI_API_KEY", "secret")
        assert main(["--log-level", "chatty"]) == 1
        assert "log_level" in capsys.readouterr().err

    def test_runs_server_with_cli_overrides(self, clean_env):
        clean_env.setenv("GEMINI_API_KEY", "secret")
        clean_env.setenv("GEMINI_MCP_FRAMING", "line")

        with patch("gemini_mcp.__main__.run", new_callable=AsyncMock) as run:
            assert main(["--framing", "content-length", "--log-level", "debug"]) == 0

        run.assert_awaited_once()
        config = run.await_args.args[0]
        assert config.api_key == "secret"
        assert config.framing is FramingMode.CONTENT_LENGTH
        assert config.log_level == "DEBUG"
