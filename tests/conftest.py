from __future__ import annotations

from pathlib import Path

import pytest

import ideo.config as config_module

_ENV_VARS = (
    config_module.API_KEY_VAR,
    config_module.API_URL_VAR,
    config_module.TIMEOUT_VAR,
)


def _clear_env(monkeypatch) -> None:
    # setenv first so monkeypatch also removes values load_dotenv adds later.
    for name in _ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


@pytest.fixture()
def test_env_file(tmp_path, monkeypatch) -> Path:
    """Provide an isolated .env file for each test that loads configuration."""

    _clear_env(monkeypatch)
    env_path = tmp_path / ".env"
    env_path.write_text(
        "\n".join(
            [
                "IDEOGRAM_API_KEY=test-key",
                "IDEOGRAM_API_URL=https://api.example.com/generate",
            ]
        )
    )
    monkeypatch.setattr(config_module, "_DOTENV_FILE", env_path)
    monkeypatch.chdir(tmp_path)
    return env_path


@pytest.fixture()
def missing_env_file(tmp_path, monkeypatch) -> Path:
    """Point dotenv at a file that does not exist, with no API key set."""

    _clear_env(monkeypatch)
    env_path = tmp_path / "missing.env"
    monkeypatch.setattr(config_module, "_DOTENV_FILE", env_path)
    monkeypatch.chdir(tmp_path)
    return env_path
