"""
Periodization Configuration Service

Loads the week-by-week periodization table from YAML.
Allows tuning the program (e.g. a distinct normal-set rep target) without
code changes. Falls back to the built-in table in constants.py.

The table is process-wide immutable configuration: it is loaded once,
cached on the class, and never stored on a Workout.

Usage:
    table = PeriodizationConfig.table()
    params = table[5]

    # Reload after changing the file or settings (tests)
    PeriodizationConfig.reload()
"""

import logging
from decimal import Decimal
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

import yaml

from core.config import settings
from core.exceptions import ValidationError

from .constants import WEEKLY_PROGRAM
from .periodization import WeekParameters

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[4] / "config" / "periodization.yaml"


class PeriodizationConfig:
    """
    Load and cache the periodization table.
    """

    _table: Optional[Mapping[int, WeekParameters]] = None
    _source: str = "defaults"

    @classmethod
    def table(cls) -> Mapping[int, WeekParameters]:
        if cls._table is None:
            cls._load()
        return cls._table

    @classmethod
    def source(cls) -> str:
        """Where the active table came from ('defaults' or a file path)."""
        if cls._table is None:
            cls._load()
        return cls._source

    @classmethod
    def reload(cls):
        """Reload configuration from file."""
        cls._table = None
        cls._load()
        logger.info("Periodization configuration reloaded")

    @classmethod
    def reset(cls):
        """Forget the cached table; the next access loads it again."""
        cls._table = None
        cls._source = "defaults"

    @classmethod
    def config_path(cls) -> Path:
        if settings.PERIODIZATION_CONFIG_PATH:
            return Path(settings.PERIODIZATION_CONFIG_PATH)
        return DEFAULT_CONFIG_PATH

    @classmethod
    def _load(cls):
        table = cls._default_table()
        source = "defaults"

        filepath = cls.config_path()
        if filepath.exists():
            try:
                with open(filepath, 'r', encoding='utf-8') as f:
                    data = yaml.safe_load(f) or {}
                table = cls._merge(table, data.get("weeks") or {})
                source = str(filepath)
                logger.debug(f"Loaded periodization config: {filepath}")
            except (yaml.YAMLError, ValidationError, TypeError, ValueError, AttributeError) as e:
                logger.error(f"Error loading {filepath}, using built-in table: {e}")
                table = cls._default_table()
        else:
            logger.debug(f"Periodization config not found: {filepath}")

        cls._table = MappingProxyType(table)
        cls._source = source

    @staticmethod
    def _default_table() -> Dict[int, WeekParameters]:
        return {
            week: WeekParameters(
                intensity=Decimal(intensity),
                sets=sets,
                target_reps=reps,
                is_deload=is_deload,
            )
            for week, (intensity, sets, reps, is_deload) in WEEKLY_PROGRAM.items()
        }

    @staticmethod
    def _merge(
        table: Dict[int, WeekParameters],
        overrides: Dict[Any, Dict[str, Any]],
    ) -> Dict[int, WeekParameters]:
        """Apply per-week overrides; unspecified fields keep their defaults."""
        merged = dict(table)
        for raw_week, values in overrides.items():
            week = int(raw_week)
            if week not in merged:
                raise ValidationError(f"Week {week} is not part of the program", field="week")
            base = merged[week]
            values = values or {}
            target_reps = int(values.get("target_reps", base.target_reps))
            normal_reps = values.get("normal_reps")
            merged[week] = WeekParameters(
                intensity=Decimal(str(values.get("intensity", base.intensity))),
                sets=int(values.get("sets", base.sets)),
                target_reps=target_reps,
                is_deload=bool(values.get("is_deload", base.is_deload)),
                normal_reps=int(normal_reps) if normal_reps is not None else None,
            )
        return merged
