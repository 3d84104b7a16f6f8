"""
Tests du démarrage (main.py): codes de sortie et arguments
"""
from unittest.mock import AsyncMock, patch

import pytest
import yaml

import main
from core.exceptions import AuthenticationFailed, TransportError


@pytest.fixture
def config_file(tmp_path, raw_config):
    raw_config["logging"] = {"level": "DEBUG", "dir": str(tmp_path / "logs")}
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(raw_config), encoding="utf-8")
    return path


@pytest.fixture
def no_logging_setup():
    with patch("main.setup_logging", return_value={}) as mock_setup:
        yield mock_setup


@pytest.mark.unit
class TestArgs:

    def test_defaults(self):
        args = main.parse_args([])
        assert args.config == "config/config.yaml"
        assert args.log_level is None

    def test_overrides(self):
        args = main.parse_args(["--config", "other.yaml", "--log-level", "WARNING"])
        assert args.config == "other.yaml"
        assert args.log_level == "WARNING"


@pytest.mark.integration
class TestExitCodes:

    def test_missing_config_exits_1(self, tmp_path):
        with patch("main.logging.basicConfig"):
            assert main.main(["--config", str(tmp_path / "missing.yaml")]) == 1

    def test_normal_close_exits_0(self, config_file, no_logging_setup):
        with patch("main.run_bot", AsyncMock(return_value=None)) as run_bot:
            assert main.main(["--config", str(config_file)]) == 0

        run_bot.assert_awaited_once()
        no_logging_setup.assert_called_once_with("DEBUG", str(config_file.parent / "logs"))

    def test_cli_log_level_wins(self, config_file, no_logging_setup):
        with patch("main.run_bot", AsyncMock(return_value=None)):
            main.main(["--config", str(config_file), "--log-level", "ERROR"])

        assert no_logging_setup.call_args[0][0] == "ERROR"

    @pytest.mark.parametrize("error", [AuthenticationFailed(), TransportError("refused")])
    def test_fatal_errors_exit_1(self, config_file, no_logging_setup, error):
        with patch("main.run_bot", AsyncMock(side_effect=error)):
            assert main.main(["--config", str(config_file)]) == 1
