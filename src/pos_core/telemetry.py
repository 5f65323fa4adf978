"""Structured point-of-sale events, appended one JSON object per line."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Any

from .logging import log_json

logger = logging.getLogger(__name__)

EVENT_CATEGORIES = frozenset({"cart", "payment", "settlement", "error"})
# Customer-identifying fields stay on the terminal.
PII_KEYS = frozenset({"email", "phone", "customer_name", "full_name", "address", "token", "card_number"})
TELEMETRY_DIR = Path("artifacts") / "telemetry"


@dataclass(frozen=True)
class TelemetryEvent:
    category: str
    name: str
    action: str
    timestamp_utc: str
    session_id: str | None = None
    sale_id: str | None = None
    amount: Decimal | None = None
    success: bool | None = None
    error_code: str | None = None
    context: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        record: dict[str, Any] = {
            "category": self.category,
            "name": self.name,
            "action": self.action,
            "timestamp_utc": self.timestamp_utc,
        }
        optional = {
            "session_id": self.session_id,
            "sale_id": self.sale_id,
            "amount": None if self.amount is None else f"{self.amount:.2f}",
            "success": self.success,
            "error_code": self.error_code,
        }
        record.update({key: value for key, value in optional.items() if value is not None})
        if self.context:
            record["context"] = dict(self.context)
        return record


def build_event(
    *,
    category: str,
    name: str,
    action: str,
    session_id: str | None = None,
    sale_id: str | None = None,
    amount: Decimal | None = None,
    success: bool | None = None,
    error_code: str | None = None,
    context: dict[str, Any] | None = None,
    now: datetime | None = None,
) -> TelemetryEvent:
    if category not in EVENT_CATEGORIES:
        raise ValueError(f"Unsupported telemetry category: {category}")
    leaked = sorted(key for key in (context or {}) if key.lower() in PII_KEYS)
    if leaked:
        raise ValueError(f"PII-like keys are forbidden in telemetry context: {leaked}")
    return TelemetryEvent(
        category=category,
        name=name,
        action=action,
        timestamp_utc=(now or datetime.now(timezone.utc)).isoformat(),
        session_id=session_id,
        sale_id=sale_id,
        amount=amount,
        success=success,
        error_code=error_code,
        context=dict(context or {}),
    )


class TelemetryLogger:
    """Appends events to ``artifacts/telemetry/<app_name>.jsonl``.

    Disabled unless ``enabled`` is passed or POS_TELEMETRY_ENABLED is set.
    With ``mirror_to_log`` every event is also written to this module's logger.
    """

    def __init__(
        self,
        *,
        app_name: str = "pos",
        enabled: bool | None = None,
        log_file: str | Path | None = None,
        mirror_to_log: bool = False,
    ) -> None:
        self.app_name = app_name
        self.enabled = telemetry_enabled_from_env() if enabled is None else enabled
        self.log_file = Path(log_file) if log_file else TELEMETRY_DIR / f"{app_name}.jsonl"
        self.mirror_to_log = mirror_to_log

    def emit(self, event: TelemetryEvent) -> bool:
        if not self.enabled:
            return False
        record = {"app_name": self.app_name, **event.to_dict()}
        self.log_file.parent.mkdir(parents=True, exist_ok=True)
        with self.log_file.open("a", encoding="utf-8") as fp:
            fp.write(json.dumps(record, sort_keys=True, ensure_ascii=False) + "\n")
        if self.mirror_to_log:
            log_json(logger, record)
        return True


def telemetry_enabled_from_env() -> bool:
    return os.getenv("POS_TELEMETRY_ENABLED", "0").strip().lower() in {"1", "true", "yes", "on"}
