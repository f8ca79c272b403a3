"""
Level ladder: purchasable tiers that widen a user's give/take caps.
"""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class Level:
    id: int
    name: str
    cost: Decimal
    color: int  # RGB value, matches discord.Color presets
    upper_limit: Decimal
    lower_limit: Decimal


def _level(id: int, name: str, cost: int, color: int, upper: int, lower: int) -> Level:
    return Level(id, name, Decimal(cost), color, Decimal(upper), Decimal(lower))


LEVELS: tuple[Level, ...] = (
    _level(1, "Neanderthal Brain", 75, 0x992D22, 15, -10),
    _level(2, "Extremely Smooth Brain", 100, 0xE74C3C, 15, -10),
    _level(3, "Very Smooth Brain", 125, 0xE67E22, 16, -11),
    _level(4, "Smooth Brain", 150, 0xF1C40F, 16, -11),
    _level(5, "Unwrinkled Brain", 175, 0x2ECC71, 17, -12),
    _level(6, "Has-One-Wrinkle Brain", 200, 0x1F8B4C, 17, -12),
    _level(7, "Kinda Wrinkle Brain", 200, 0x3498DB, 18, -13),
    _level(8, "Wrinkle Brain", 200, 0x206694, 18, -13),
    _level(9, "Very Wrinkle Brain", 200, 0x9B59B6, 19, -14),
    _level(10, "Extremely Wrinkle Brain", 200, 0x71368A, 19, -14),
    _level(11, "Galaxy Brain", 250, 0xE91E63, 20, -15),
)

MAX_LEVEL = len(LEVELS)


def get_level(level_id: int) -> Level | None:
    if 1 <= level_id <= MAX_LEVEL:
        return LEVELS[level_id - 1]
    return None


def next_level(current: int) -> Level | None:
    return get_level(current + 1)


def transfer_caps(level_id: int, base_upper: Decimal, base_lower: Decimal) -> tuple[Decimal, Decimal]:
    """(upper, lower) transfer caps for a purchased level; level 0 uses the base pair."""
    level = get_level(level_id)
    if level is None:
        return base_upper, base_lower
    return level.upper_limit, level.lower_limit
