"""Tests for the command-line entry point."""

from __future__ import annotations

import json
import os
from unittest.mock import patch

import pytest

from conftest import TEST_API_KEY, TEST_LICENSE_KEY
from smartlead_mcp.__main__ import create_parser, main


@pytest.fixture
def runners():
    """Patch the transport runners so main() never starts a server."""
    with (
        patch("smartlead_mcp.__main__.run_stdio_server") as stdio,
        patch("smartlead_mcp.__main__.run_sse_server") as sse,
        patch("smartlead_mcp.__main__.run_rest_server") as rest,
    ):
        yield {"stdio": stdio, "sse": sse, "rest": rest}


# =============================================================================
# Argument Parsing
# =============================================================================


class TestParser:
    """Tests for create_parser."""

    def test_options_after_command(self):
        args = create_parser().parse_args(["sse", "-p", "3100", "--api-key", "k"])

        assert args.command == "sse"
        assert args.port == 3100
        assert args.api_key == "k"

    def test_options_before_command_survive(self):
        args = create_parser().parse_args(["--license-key", "lic", "rest"])

        assert args.command == "rest"
        assert args.license_key == "lic"

    def test_unknown_command_exits_with_usage_error(self):
        with pytest.raises(SystemExit) as exc_info:
            create_parser().parse_args(["serve"])
        assert exc_info.value.code == 2

    def test_port_must_be_an_integer(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["sse", "--port", "abc"])


# =============================================================================
# Mode Dispatch
# =============================================================================


class TestMain:
    """Tests for main()."""

    def test_no_command_runs_stdio(self, isolated, runners):
        with patch.dict(os.environ, {"SMARTLEAD_API_KEY": TEST_API_KEY}):
            assert main([]) == 0

        runners["stdio"].assert_called_once()
        runners["sse"].assert_not_called()

    def test_start_alias_with_keys(self, isolated, runners):
        assert main(["start", "--api-key", TEST_API_KEY, "--license-key", TEST_LICENSE_KEY]) == 0

        config = runners["stdio"].call_args.args[0]
        assert config.api.api_key == TEST_API_KEY
        assert config.license.license_key == TEST_LICENSE_KEY

    def test_sse_port_option(self, isolated, runners):
        assert main(["sse", "--api-key", TEST_API_KEY, "-p", "3100"]) == 0

        config = runners["sse"].call_args.args[0]
        assert config.server.sse_port == 3100
        assert config.server.rest_port == 8100

    def test_rest_port_option(self, isolated, runners):
        assert main(["rest", "--api-key", TEST_API_KEY, "--port", "9000"]) == 0

        config = runners["rest"].call_args.args[0]
        assert config.server.rest_port == 9000

    def test_missing_api_key_exits_1(self, isolated, runners):
        assert main(["sse"]) == 1
        runners["sse"].assert_not_called()

    def test_malformed_config_file_exits_1(self, isolated, runners):
        (isolated / "mcp_config.json").write_text(json.dumps({"api": None}))

        assert main(["--api-key", TEST_API_KEY]) == 1
        runners["stdio"].assert_not_called()

    def test_explicit_config_path(self, isolated, runners):
        path = isolated / "custom.json"
        path.write_text(json.dumps({"modes": {"sse": {"port": 3300}}}))

        assert main(["sse", "--config", str(path), "--api-key", TEST_API_KEY]) == 0
        assert runners["sse"].call_args.args[0].server.sse_port == 3300


class TestConfigCommand:
    """Tests for the config command."""

    def test_prints_summary(self, isolated, runners, capsys):
        exit_code = main(["config", "--api-key", TEST_API_KEY, "--license-key", TEST_LICENSE_KEY])

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "Smartlead MCP Server Configuration:" in out
        assert "API Key: Configured" in out
        assert "License Status: Configured" in out
        assert TEST_API_KEY not in out
        for runner in runners.values():
            runner.assert_not_called()

    def test_reports_problems(self, isolated, runners, capsys):
        exit_code = main(["config"])

        out = capsys.readouterr().out
        assert exit_code == 1
        assert "API Key: Not Configured" in out
        assert "SMARTLEAD_API_KEY is required" in out
