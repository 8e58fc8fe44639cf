"""
JSON loaders for snapshots, ledger rows and week history.

Accepted file shapes:

  - snapshot: a single object (``GameWeekState``);
  - ledger:   an array of ledger rows;
  - history:  an array of snapshots.

Any of them may also be wrapped in an envelope ``{"_meta": {...}, "data": ...}``,
the format used when payloads are archived to disk. The envelope is
unwrapped before validation.

Field names may be camelCase (backend export) or snake_case.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from retail_sim.models.ledger import LedgerEntry
from retail_sim.models.state import GameWeekState

logger = logging.getLogger(__name__)


def read_json_payload(path: Path) -> Any:
    """Read ``path`` and unwrap a ``{"_meta", "data"}`` envelope if present.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
    """
    with open(path, encoding="utf-8") as f:
        payload = json.load(f)
    if isinstance(payload, dict) and "data" in payload and "_meta" in payload:
        return payload["data"]
    return payload


def load_state(path: Path) -> GameWeekState:
    """Load one ``GameWeekState`` from ``path``.

    Raises:
        ValueError: If the file does not hold a JSON object.
        pydantic.ValidationError: If the object fails validation.
    """
    payload = read_json_payload(path)
    if not isinstance(payload, dict):
        raise ValueError(f"{path}: snapshot file must contain a JSON object.")
    state = GameWeekState.model_validate(payload)
    logger.debug("Loaded snapshot week %d from %s", state.week_number, path)
    return state


def load_ledger(path: Path) -> list[LedgerEntry]:
    """Load ledger rows from ``path``.

    Raises:
        ValueError: If the file does not hold a JSON array.
        pydantic.ValidationError: If any row fails validation.
    """
    payload = read_json_payload(path)
    if not isinstance(payload, list):
        raise ValueError(f"{path}: ledger file must contain a JSON array.")
    rows = [LedgerEntry.model_validate(item) for item in payload]
    logger.debug("Loaded %d ledger row(s) from %s", len(rows), path)
    return rows


def load_history(path: Path) -> list[GameWeekState]:
    """Load a list of snapshots from ``path``, sorted by week.

    Raises:
        ValueError: If the file does not hold a JSON array.
        pydantic.ValidationError: If any snapshot fails validation.
    """
    payload = read_json_payload(path)
    if not isinstance(payload, list):
        raise ValueError(f"{path}: history file must contain a JSON array.")
    states = sorted(
        (GameWeekState.model_validate(item) for item in payload),
        key=lambda s: s.week_number,
    )
    logger.debug("Loaded %d historical snapshot(s) from %s", len(states), path)
    return states
