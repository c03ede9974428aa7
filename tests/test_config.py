"""
tests/test_config.py

Verifies:
✔ .env is picked up from the working directory the client runs in
✔ Variables already set in the environment are not overridden by .env
"""

import importlib

import replicate_client.config as config


def reload_in(tmp_path, monkeypatch, env_text):
    (tmp_path / ".env").write_text(env_text, encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    return importlib.reload(config)


def test_dotenv_found_from_working_directory(tmp_path, monkeypatch):
    monkeypatch.setenv("REPLICATE_API_TOKEN", "placeholder")
    monkeypatch.delenv("REPLICATE_API_TOKEN")
    try:
        reloaded = reload_in(tmp_path, monkeypatch, "REPLICATE_API_TOKEN=r8_from_dotenv\n")

        assert reloaded.env_token() == "r8_from_dotenv"
    finally:
        monkeypatch.undo()
        importlib.reload(config)


def test_existing_environment_wins(tmp_path, monkeypatch):
    monkeypatch.setenv("REPLICATE_API_TOKEN", "r8_from_shell")
    try:
        reloaded = reload_in(tmp_path, monkeypatch, "REPLICATE_API_TOKEN=r8_from_dotenv\n")

        assert reloaded.env_token() == "r8_from_shell"
    finally:
        monkeypatch.undo()
        importlib.reload(config)
