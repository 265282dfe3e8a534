from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

import yaml

from shiftboard.domain.models import ShiftType
from shiftboard.timeutils import is_valid_hhmm

DEFAULT_STORAGE_KEY = "shiftboard.schedule.shifts"
DEFAULT_DB_URL = "sqlite:///shiftboard.db"


def _load_yaml(path: Path) -> Optional[dict]:
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def _load_json(path: Path) -> dict:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


@dataclass
class DefaultHours:
    start: str = ""
    end: str = ""


def _default_hours_table() -> Dict[ShiftType, DefaultHours]:
    return {
        ShiftType.DAY_SHIFT: DefaultHours("09:00", "17:00"),
        ShiftType.ON_CALL: DefaultHours("20:00", "08:00"),
        ShiftType.MEETING: DefaultHours("10:00", "11:00"),
        ShiftType.POST_CALL_REST: DefaultHours("", ""),
    }


@dataclass
class ShiftboardConfig:
    default_hours: Dict[ShiftType, DefaultHours] = field(default_factory=_default_hours_table)
    storage_key: str = DEFAULT_STORAGE_KEY
    db_url: str = DEFAULT_DB_URL
    weekly_hours_threshold: float = 60.0

    def hours_for(self, shift_type: ShiftType) -> DefaultHours:
        return self.default_hours.get(shift_type, DefaultHours())


def load_config(path: str | Path | None = None) -> ShiftboardConfig:
    """
    Load configuration from a YAML or JSON file.

    Args:
        path: Config file path; None returns the built-in defaults

    Returns:
        Validated ShiftboardConfig
    """
    if path is None:
        cfg = ShiftboardConfig()
        _validate_config(cfg)
        return cfg

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    if path.suffix.lower() in {".yaml", ".yml"}:
        raw = _load_yaml(path)
    elif path.suffix.lower() == ".json":
        raw = _load_json(path)
    else:
        raise ValueError("Unsupported config extension. Use .yaml/.yml or .json")
    raw = raw or {}

    default_hours = _default_hours_table()
    for type_name, window in (raw.get("default_hours") or {}).items():
        try:
            shift_type = ShiftType(str(type_name).upper())
        except ValueError:
            raise ValueError(f"default_hours has unknown shift type {type_name!r}") from None
        window = window or {}
        default_hours[shift_type] = DefaultHours(
            start=str(window.get("start") or ""),
            end=str(window.get("end") or ""),
        )

    cfg = ShiftboardConfig(
        default_hours=default_hours,
        storage_key=str(raw.get("storage_key", DEFAULT_STORAGE_KEY)),
        db_url=str(raw.get("db_url", DEFAULT_DB_URL)),
        weekly_hours_threshold=float(raw.get("weekly_hours_threshold", 60.0)),
    )
    _validate_config(cfg)
    return cfg


def _validate_config(cfg: ShiftboardConfig) -> None:
    for shift_type, window in cfg.default_hours.items():
        if shift_type is ShiftType.POST_CALL_REST:
            if window.start or window.end:
                raise ValueError("default_hours for POST_CALL_REST must be empty")
            continue
        for name in ("start", "end"):
            if not is_valid_hhmm(getattr(window, name)):
                raise ValueError(
                    f"default_hours {shift_type.value}.{name} must be HH:MM, got {getattr(window, name)!r}"
                )
    if not cfg.storage_key:
        raise ValueError("storage_key must not be empty")
    if cfg.weekly_hours_threshold <= 0:
        raise ValueError("weekly_hours_threshold must be positive")
