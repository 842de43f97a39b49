"""Unit tests for functions defined in src/chat_endpoint_stack.py."""

import os
from pathlib import Path

import pytest
from pytest_mock import MockerFixture

import constants
from chat_endpoint_stack import create_argument_parser, main
from tests.unit import config_dict
from configuration import configuration


@pytest.fixture(autouse=True)
def _restore_configuration():
    yield
    configuration.init_from_dict(config_dict)


def test_create_argument_parser() -> None:
    """Test for create_argument_parser function."""
    arg_parser = create_argument_parser()
    args = arg_parser.parse_args([])

    assert args.verbose is False
    assert args.dump_configuration is False
    assert args.config_file == "chat-endpoint-stack.yaml"


def test_create_argument_parser_flags() -> None:
    """Test short and long CLI flags."""
    arg_parser = create_argument_parser()

    args = arg_parser.parse_args(["-v", "-d", "-c", "my.yaml"])
    assert args.verbose is True
    assert args.dump_configuration is True
    assert args.config_file == "my.yaml"

    args = arg_parser.parse_args(["--verbose", "--config", "other.yaml"])
    assert args.verbose is True
    assert args.config_file == "other.yaml"


@pytest.fixture(name="config_file")
def config_file_fixture(tmp_path: Path) -> Path:
    """Minimal configuration file."""
    path = tmp_path / "config.yaml"
    path.write_text(
        """
name: test
llama_stack:
  url: http://localhost:8321
endpoints:
  - name: assistant
""",
        encoding="utf-8",
    )
    return path


def test_main_starts_service(mocker: MockerFixture, config_file: Path) -> None:
    """Test that service is started with the loaded configuration."""
    mocker.patch("sys.argv", ["chat_endpoint_stack", "-c", str(config_file)])
    mocker.patch.dict(os.environ, {}, clear=False)
    mock_start = mocker.patch("chat_endpoint_stack.start_uvicorn")

    main()

    mock_start.assert_called_once_with(configuration.service_configuration)
    assert os.environ[constants.CONFIG_PATH_ENV_VAR] == str(config_file)


def test_main_dump_configuration(
    mocker: MockerFixture, config_file: Path, tmp_path: Path, monkeypatch
) -> None:
    """Test that configuration is dumped without starting the service."""
    monkeypatch.chdir(tmp_path)
    mocker.patch("sys.argv", ["chat_endpoint_stack", "-d", "-c", str(config_file)])
    mock_start = mocker.patch("chat_endpoint_stack.start_uvicorn")

    main()

    mock_start.assert_not_called()
    assert (tmp_path / "configuration.json").exists()
