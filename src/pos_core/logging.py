from __future__ import annotations

import json
import logging

PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: int | str = logging.INFO, *, json_lines: bool = True) -> None:
    """Set up root logging; with ``json_lines`` each record is the bare JSON emitted by ``log_json``."""
    logging.basicConfig(level=level, format="%(message)s" if json_lines else PLAIN_FORMAT)


def log_json(logger: logging.Logger, payload: dict, *, level: int = logging.INFO) -> None:
    if not logger.isEnabledFor(level):
        return
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str, sort_keys=True))
