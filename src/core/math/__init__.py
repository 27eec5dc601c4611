"""
Core math modules

Точное округление денежных величин.
"""

from src.core.math.rounding import (
    RoundingMode,
    apply_rounding,
    extract_inclusive_base,
    percent_of,
    round_down,
    round_half_up,
    round_up,
    to_fraction,
)

__all__ = [
    "RoundingMode",
    "apply_rounding",
    "extract_inclusive_base",
    "percent_of",
    "round_down",
    "round_half_up",
    "round_up",
    "to_fraction",
]
