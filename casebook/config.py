from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

ROOT_DIR = Path(__file__).resolve().parents[1]


def _parse_path(name: str, default: Path) -> Path:
    raw = os.getenv(name, "").strip()
    return Path(raw) if raw else default


def _parse_timeout(name: str) -> Optional[float]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if value > 0 else None


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    asset_dir: Path
    image_timeout: Optional[float]
    log_level: str
    json_logs: bool

    @property
    def cases_path(self) -> Path:
        return self.data_dir / "cases.json"

    @property
    def stats_path(self) -> Path:
        return self.data_dir / "stats.json"


def load_settings() -> Settings:
    return Settings(
        data_dir=_parse_path("CASEBOOK_DATA_DIR", ROOT_DIR / "data"),
        asset_dir=_parse_path("CASEBOOK_ASSET_DIR", ROOT_DIR / "public"),
        image_timeout=_parse_timeout("CASEBOOK_IMAGE_TIMEOUT"),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO",
        json_logs=os.getenv("LOG_FORMAT", "").strip().lower() == "json",
    )
