"""
Reward and pricing tables for the progression economy.
"""
from typing import Union

from yoruba.models.enums import LevelColor

# Diamonds granted when a level is completed, by colour tier
DIAMONDS_PER_LEVEL = {
    LevelColor.AMARELO: 1,
    LevelColor.AZUL: 2,
    LevelColor.VERDE: 3,
    LevelColor.DOURADO: 5,
}
DEFAULT_DIAMONDS_PER_LEVEL = 1

# XP a level of each tier is worth by default (seed data and admin forms)
DEFAULT_LEVEL_XP = {
    LevelColor.AMARELO: 10,
    LevelColor.AZUL: 15,
    LevelColor.VERDE: 20,
    LevelColor.DOURADO: 30,
}

# Diamond packages sold for real money: (max price, diamonds)
DIAMOND_PACKAGES = [
    (15, 100),
    (30, 250),
    (50, 500),
]
LARGEST_DIAMOND_PACKAGE = 1000


def diamonds_for_level(color: Union[LevelColor, str]) -> int:
    """Diamonds granted for completing a level of the given tier (1 for unknown tiers)."""
    try:
        tier = LevelColor(color)
    except ValueError:
        return DEFAULT_DIAMONDS_PER_LEVEL
    return DIAMONDS_PER_LEVEL.get(tier, DEFAULT_DIAMONDS_PER_LEVEL)


def diamonds_for_purchase(amount: float) -> int:
    """Diamonds bought with a real-money amount."""
    for max_price, diamonds in DIAMOND_PACKAGES:
        if amount <= max_price:
            return diamonds
    return LARGEST_DIAMOND_PACKAGE
