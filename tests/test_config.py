from __future__ import annotations

from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP
from pathlib import Path

import pytest

from pos_core.config import ConfigError, load_config

POS_VARS = (
    "POS_ENV",
    "POS_API_BASE_URL",
    "POS_API_BASE_URL_DEV",
    "POS_API_BASE_URL_STAGING",
    "POS_CURRENCY",
    "POS_ROUNDING",
    "POS_OPERATOR",
    "POS_CONNECT_TIMEOUT_SECONDS",
    "POS_READ_TIMEOUT_SECONDS",
    "POS_RETRIES",
    "POS_RETRY_BACKOFF_SECONDS",
    "POS_VERIFY_SSL",
    "POS_TELEMETRY_ENABLED",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # setenv first so values loaded from a .env file are removed on teardown
    for key in POS_VARS:
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)


def test_load_config_defaults() -> None:
    cfg = load_config()

    assert cfg.env_name == "dev"
    assert cfg.currency == "MXN"
    assert cfg.rounding == ROUND_HALF_UP
    assert cfg.operator == "cashier"
    assert cfg.retries == 3
    assert cfg.verify_ssl is True
    assert cfg.telemetry_enabled is False
    assert cfg.api_base_url is None
    with pytest.raises(ConfigError, match="POS_API_BASE_URL"):
        cfg.require_api_base_url()


def test_load_config_profile(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POS_ENV", "Staging")
    monkeypatch.setenv("POS_API_BASE_URL", "https://default.example.com")
    monkeypatch.setenv("POS_API_BASE_URL_STAGING", "https://staging.example.com/")

    cfg = load_config()

    assert cfg.api_base_url == "https://staging.example.com"
    assert cfg.normalized_env == "staging"


def test_load_config_reads_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POS_CURRENCY", "usd")
    monkeypatch.setenv("POS_ROUNDING", "half_even")
    monkeypatch.setenv("POS_VERIFY_SSL", "false")
    monkeypatch.setenv("POS_TELEMETRY_ENABLED", "1")
    monkeypatch.setenv("POS_RETRIES", "0")

    cfg = load_config()

    assert cfg.currency == "USD"
    assert cfg.rounding == ROUND_HALF_EVEN
    assert cfg.verify_ssl is False
    assert cfg.telemetry_enabled is True
    assert cfg.retries == 0


def test_load_config_from_env_file(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("POS_OPERATOR=turno-b\nPOS_API_BASE_URL=https://pos.example.com\n", encoding="utf-8")

    cfg = load_config(str(env_file))

    assert cfg.operator == "turno-b"
    assert cfg.require_api_base_url() == "https://pos.example.com"


@pytest.mark.parametrize(
    ("key", "value", "snippet"),
    [
        ("POS_CONNECT_TIMEOUT_SECONDS", "0", "POS_CONNECT_TIMEOUT_SECONDS"),
        ("POS_READ_TIMEOUT_SECONDS", "0", "POS_READ_TIMEOUT_SECONDS"),
        ("POS_RETRIES", "-1", "POS_RETRIES"),
        ("POS_RETRY_BACKOFF_SECONDS", "-0.1", "POS_RETRY_BACKOFF_SECONDS"),
        ("POS_CURRENCY", "pesos", "POS_CURRENCY"),
        ("POS_ROUNDING", "bankers", "POS_ROUNDING"),
        ("POS_OPERATOR", "   ", "POS_OPERATOR"),
    ],
)
def test_load_config_rejects_invalid_values(
    monkeypatch: pytest.MonkeyPatch,
    key: str,
    value: str,
    snippet: str,
) -> None:
    monkeypatch.setenv(key, value)

    with pytest.raises(ConfigError, match=snippet):
        load_config()


@pytest.mark.parametrize(
    "key",
    ["POS_CONNECT_TIMEOUT_SECONDS", "POS_READ_TIMEOUT_SECONDS", "POS_RETRIES", "POS_RETRY_BACKOFF_SECONDS"],
)
def test_load_config_rejects_invalid_types(monkeypatch: pytest.MonkeyPatch, key: str) -> None:
    monkeypatch.setenv(key, "abc")

    with pytest.raises(ConfigError, match=key):
        load_config()
