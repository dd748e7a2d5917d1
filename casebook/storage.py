from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Tuple

from casebook.models import (
    AirportStat,
    IncidentRecord,
    SafetyGoal,
    YearStat,
    airport_stat_from_dict,
    record_from_dict,
    safety_goal_from_dict,
    year_stat_from_dict,
)

logger = logging.getLogger(__name__)


class DatasetError(RuntimeError):
    """A dataset file is missing or is not valid JSON."""


@dataclass(frozen=True)
class StatsDataset:
    yearly: Tuple[YearStat, ...]
    airports: Tuple[AirportStat, ...]
    goals: Tuple[SafetyGoal, ...]
    accident_types: Tuple[dict, ...]
    key_causes: Tuple[str, ...]


def _read_json(path: Path) -> Any:
    if not path.exists():
        raise DatasetError(f"Dataset not found: {path}")
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise DatasetError(f"Dataset is not valid JSON: {path} ({e})") from e


def _rows(payload: Any, key: str) -> List[dict]:
    rows = payload.get(key) if isinstance(payload, dict) else payload
    if not isinstance(rows, list):
        return []
    return [r for r in rows if isinstance(r, dict)]


def load_cases(path: Path) -> List[IncidentRecord]:
    records = [record_from_dict(row) for row in _rows(_read_json(path), "cases")]
    logger.info("loaded %d cases from %s", len(records), path)
    return records


def load_stats(path: Path) -> StatsDataset:
    payload = _read_json(path)
    data = StatsDataset(
        yearly=tuple(year_stat_from_dict(r) for r in _rows(payload, "yearly")),
        airports=tuple(airport_stat_from_dict(r) for r in _rows(payload, "airports")),
        goals=tuple(safety_goal_from_dict(r) for r in _rows(payload, "safetyGoals")),
        accident_types=tuple(_rows(payload, "accidentTypes")),
        key_causes=tuple(str(x) for x in (payload.get("keyCauses") or []) if str(x).strip())
        if isinstance(payload, dict)
        else (),
    )
    logger.info(
        "loaded stats from %s: %d years, %d airports, %d goals",
        path, len(data.yearly), len(data.airports), len(data.goals),
    )
    return data
