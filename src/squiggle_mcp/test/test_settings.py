"""Tests for the settings module."""

import re

import pytest

from squiggle_mcp.settings import Settings, get_package_version, settings


def test_version_in_settings() -> None:
    """Test that the version is properly set in settings."""
    assert settings.version, "Version is not set in settings"
    assert isinstance(settings.version, str), "Version should be a string"

    direct_version = get_package_version()
    assert settings.version == direct_version, (
        "Version in settings doesn't match get_package_version()"
    )


def test_get_package_version() -> None:
    """Test that the package version can be retrieved."""
    version = get_package_version()
    assert version, "Failed to get package version"
    assert isinstance(version, str), "Version should be a string"

    if version != "dev-version":
        assert re.match(r"^\d+\.\d+\.\d+", version), f"Version format is unexpected: {version}"


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("HOST", "PORT", "LOG_LEVEL", "DEBUG", "JSON_RESPONSE", "EXPOSE_EXAMPLE_RESOURCE"):
        monkeypatch.delenv(name, raising=False)

    config = Settings(_env_file=None)  # type: ignore[call-arg]

    assert config.host == "localhost"
    assert config.port == 3000
    assert config.log_level == "info"
    assert config.json_response is False
    assert config.expose_example_resource is False


def test_host_and_port_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOST", "0.0.0.0")
    monkeypatch.setenv("PORT", "8123")
    monkeypatch.setenv("NODE_EXECUTABLE", "/usr/local/bin/node")

    config = Settings(_env_file=None)  # type: ignore[call-arg]

    assert config.host == "0.0.0.0"
    assert config.port == 8123
    assert config.node_executable == "/usr/local/bin/node"


def test_invalid_port_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "not-a-port")

    with pytest.raises(ValueError):
        Settings(_env_file=None)  # type: ignore[call-arg]
