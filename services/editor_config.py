from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

from services.modes import QuantityMode

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass(frozen=True)
class EditorConfig:
    db_path: str = "loot_tables.db"
    default_rows: int = 4
    default_quantity: str = QuantityMode.ONE.name
    log_level: str = "INFO"

    @property
    def quantity(self) -> QuantityMode:
        return QuantityMode[self.default_quantity]

    @property
    def level(self) -> int:
        return getattr(logging, self.log_level)


def config_path(base_dir: Path, filename: str = "editor_config.json") -> Path:
    return base_dir / filename


def load_editor_config(path: Path) -> EditorConfig:
    defaults = EditorConfig()
    try:
        raw = json.loads(path.read_text())
    except Exception:
        return defaults
    if not isinstance(raw, dict):
        return defaults

    db_path = raw.get("db_path", defaults.db_path)
    if not isinstance(db_path, str) or not db_path.strip():
        db_path = defaults.db_path

    rows = raw.get("default_rows", defaults.default_rows)
    if not isinstance(rows, int) or isinstance(rows, bool) or rows < 2:
        rows = defaults.default_rows

    quantity = str(raw.get("default_quantity", defaults.default_quantity)).upper()
    if quantity not in QuantityMode.__members__:
        quantity = defaults.default_quantity

    log_level = str(raw.get("log_level", defaults.log_level)).upper()
    if log_level not in LOG_LEVELS:
        log_level = defaults.log_level

    return EditorConfig(
        db_path=db_path.strip(),
        default_rows=rows,
        default_quantity=quantity,
        log_level=log_level,
    )


def save_editor_config(path: Path, config: EditorConfig) -> None:
    path.write_text(json.dumps(asdict(config), indent=2))
