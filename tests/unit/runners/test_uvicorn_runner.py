"""Unit tests for the Uvicorn runner implementation."""

from pathlib import Path

import pytest
from pytest_mock import MockerFixture

from models.config import ServiceConfiguration, TLSConfiguration
from runners.uvicorn import start_uvicorn


@pytest.fixture(name="tls_files")
def tls_files_fixture(tmp_path: Path) -> dict[str, Path]:
    """Create certificate, key and password files."""
    files = {}
    for name in ["server.crt", "server.key", "password"]:
        files[name] = tmp_path / name
        files[name].write_text(name, encoding="utf-8")
    return files


def test_start_uvicorn(mocker: MockerFixture) -> None:
    """Test the function to start Uvicorn server using de-facto default configuration."""
    configuration = ServiceConfiguration(host="localhost", port=8080, workers=1)

    # don't start real Uvicorn server
    mocked_run = mocker.patch("uvicorn.run")
    start_uvicorn(configuration)
    mocked_run.assert_called_once_with(
        "app.main:app",
        host="localhost",
        port=8080,
        workers=1,
        log_level=20,
        ssl_certfile=None,
        ssl_keyfile=None,
        ssl_keyfile_password="",
        use_colors=True,
        access_log=True,
    )


def test_start_uvicorn_different_host_port(mocker: MockerFixture) -> None:
    """Test the function to start Uvicorn server using custom configuration."""
    configuration = ServiceConfiguration(
        host="x.y.com", port=1234, workers=10, color_log=False, access_log=False
    )

    # don't start real Uvicorn server
    mocked_run = mocker.patch("uvicorn.run")
    start_uvicorn(configuration)
    mocked_run.assert_called_once_with(
        "app.main:app",
        host="x.y.com",
        port=1234,
        workers=10,
        log_level=20,
        ssl_certfile=None,
        ssl_keyfile=None,
        ssl_keyfile_password="",
        use_colors=False,
        access_log=False,
    )


def test_start_uvicorn_tls_configuration(
    mocker: MockerFixture, tls_files: dict[str, Path]
) -> None:
    """Test the function to start Uvicorn server using custom TLS configuration."""
    tls_config = TLSConfiguration(
        tls_certificate_path=tls_files["server.crt"],
        tls_key_path=tls_files["server.key"],
        tls_key_password=tls_files["password"],
    )
    configuration = ServiceConfiguration(
        host="x.y.com", port=1234, workers=10, tls_config=tls_config
    )

    # don't start real Uvicorn server
    mocked_run = mocker.patch("uvicorn.run")
    start_uvicorn(configuration)
    mocked_run.assert_called_once_with(
        "app.main:app",
        host="x.y.com",
        port=1234,
        workers=10,
        log_level=20,
        ssl_certfile=tls_files["server.crt"],
        ssl_keyfile=tls_files["server.key"],
        ssl_keyfile_password=str(tls_files["password"]),
        use_colors=True,
        access_log=True,
    )
