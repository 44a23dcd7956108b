"""
Periodization Table

21 weeks grouped into 3 blocks of 7. Within a block intensity ramps up over
weeks 1-6 while sets and reps taper down; week 7 of each block is a deload
(65% for 5x10, not taken to failure).

Usage:
    params = week_parameters(9)
    params.intensity      # Decimal("0.90")
    block_for_week(9)     # 2
    is_deload_week(14)    # True
"""

import logging
import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from core.exceptions import ValidationError

from .constants import WEEKS_PER_BLOCK, MAX_INTENSITY

logger = logging.getLogger(__name__)

FALLBACK_WEEK = 1


@dataclass(frozen=True)
class WeekParameters:
    """Prescription for one week of the program."""
    intensity: Decimal      # Fraction of Training Max
    sets: int
    target_reps: int        # Rep-out target for the AMRAP set
    is_deload: bool
    normal_reps: Optional[int] = None  # Reps for non-AMRAP sets (defaults to target_reps)

    def __post_init__(self):
        if not (0 < self.intensity <= MAX_INTENSITY):
            raise ValidationError("Week intensity must be within (0, 1.5]", field="intensity")
        if self.sets <= 0:
            raise ValidationError("Week sets must be greater than zero", field="sets")
        if self.target_reps <= 0:
            raise ValidationError("Week target reps must be greater than zero", field="target_reps")
        if self.normal_reps is None:
            object.__setattr__(self, "normal_reps", self.target_reps)
        elif self.normal_reps <= 0:
            raise ValidationError("Week normal reps must be greater than zero", field="normal_reps")


def week_parameters(week: int) -> WeekParameters:
    """
    Look up the prescription for a program week.

    Week numbers outside the table fall back to week 1's row rather than
    failing, so a mis-numbered caller still gets a sane, conservative plan.
    """
    from .config import PeriodizationConfig

    table = PeriodizationConfig.table()
    params = table.get(week)
    if params is None:
        logger.debug(f"Week {week} outside periodization table, using week {FALLBACK_WEEK}")
        return table[FALLBACK_WEEK]
    return params


def block_for_week(week: int) -> int:
    """Block 1: weeks 1-7, Block 2: weeks 8-14, Block 3: weeks 15-21."""
    if week < 1:
        raise ValidationError("Week number must be at least 1", field="week")
    return math.ceil(week / WEEKS_PER_BLOCK)


def week_in_block(week: int) -> int:
    return ((week - 1) % WEEKS_PER_BLOCK) + 1


def is_deload_week(week: int) -> bool:
    """Weeks 7, 14 and 21."""
    return week % WEEKS_PER_BLOCK == 0
