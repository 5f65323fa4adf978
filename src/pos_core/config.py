from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .money import resolve_rounding


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class PosConfig:
    env_name: str = "dev"
    api_base_url: str | None = None
    currency: str = "MXN"
    rounding: str = resolve_rounding("half_up")
    operator: str = "cashier"
    connect_timeout_seconds: float = 5.0
    read_timeout_seconds: float = 15.0
    retries: int = 3
    retry_backoff_seconds: float = 0.3
    verify_ssl: bool = True
    telemetry_enabled: bool = False

    @property
    def normalized_env(self) -> str:
        return self.env_name.lower().strip()

    def require_api_base_url(self) -> str:
        if not self.api_base_url:
            raise ConfigError("Missing required config values: POS_API_BASE_URL")
        return self.api_base_url


def _coerce_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _read_float(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected a number, got {raw!r}") from exc


def _read_int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected an integer, got {raw!r}") from exc


def _validate(condition: bool, message: str) -> None:
    if not condition:
        raise ConfigError(message)


def load_config(env_file: str | None = None) -> PosConfig:
    """Load config from environment with optional .env override."""
    load_dotenv(env_file)

    env_name = (os.getenv("POS_ENV") or "dev").strip()
    env_key = env_name.upper()

    api_base_url = (
        (os.getenv(f"POS_API_BASE_URL_{env_key}") or "").strip()
        or (os.getenv("POS_API_BASE_URL") or "").strip()
    )

    currency = (os.getenv("POS_CURRENCY") or "MXN").strip().upper()
    _validate(len(currency) == 3 and currency.isalpha(), f"Invalid POS_CURRENCY: expected ISO code, got {currency!r}")

    try:
        rounding = resolve_rounding(os.getenv("POS_ROUNDING"))
    except ValueError as exc:
        raise ConfigError(f"Invalid POS_ROUNDING: {exc}") from exc

    operator = (os.getenv("POS_OPERATOR") or "cashier").strip()
    _validate(bool(operator), "Invalid POS_OPERATOR: must not be blank")

    connect_timeout_seconds = _read_float("POS_CONNECT_TIMEOUT_SECONDS", "5")
    _validate(
        connect_timeout_seconds > 0,
        f"Invalid POS_CONNECT_TIMEOUT_SECONDS: expected > 0, got {connect_timeout_seconds}",
    )

    read_timeout_seconds = _read_float("POS_READ_TIMEOUT_SECONDS", str(max(15.0, connect_timeout_seconds)))
    _validate(
        read_timeout_seconds > 0,
        f"Invalid POS_READ_TIMEOUT_SECONDS: expected > 0, got {read_timeout_seconds}",
    )

    retries = _read_int("POS_RETRIES", "3")
    _validate(retries >= 0, f"Invalid POS_RETRIES: expected >= 0, got {retries}")

    retry_backoff_seconds = _read_float("POS_RETRY_BACKOFF_SECONDS", "0.3")
    _validate(
        retry_backoff_seconds >= 0,
        f"Invalid POS_RETRY_BACKOFF_SECONDS: expected >= 0, got {retry_backoff_seconds}",
    )

    return PosConfig(
        env_name=env_name,
        api_base_url=api_base_url.rstrip("/") or None,
        currency=currency,
        rounding=rounding,
        operator=operator,
        connect_timeout_seconds=connect_timeout_seconds,
        read_timeout_seconds=read_timeout_seconds,
        retries=retries,
        retry_backoff_seconds=retry_backoff_seconds,
        verify_ssl=_coerce_bool(os.getenv("POS_VERIFY_SSL"), True),
        telemetry_enabled=_coerce_bool(os.getenv("POS_TELEMETRY_ENABLED"), False),
    )
