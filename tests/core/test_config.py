"""Settings tests — PORT defaulting and env overrides."""

import pytest

from coda_mcp.config import DEFAULT_PORT, Settings


def test_port_defaults_to_3000(monkeypatch):
    monkeypatch.delenv("PORT", raising=False)
    assert Settings(_env_file=None).port == DEFAULT_PORT == 3000


def test_port_read_from_env(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    assert Settings(_env_file=None).port == 8080


@pytest.mark.parametrize("raw", ["0", "not-a-port", "", "70000"])
def test_invalid_port_falls_back_to_default(monkeypatch, raw):
    monkeypatch.setenv("PORT", raw)
    assert Settings(_env_file=None).port == DEFAULT_PORT


def test_welcome_message_can_be_disabled(monkeypatch):
    monkeypatch.setenv("WS_WELCOME_MESSAGE", "")
    assert Settings(_env_file=None).ws_welcome_message == ""


def test_example_packs_toggle(monkeypatch):
    monkeypatch.setenv("LOAD_EXAMPLE_PACKS", "false")
    assert Settings(_env_file=None).load_example_packs is False
