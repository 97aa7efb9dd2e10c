"""Confidence tiers and their display colors.

All colors are stored as normalized RGBA tuples (0.0-1.0).
"""

from collections.abc import Iterable
from enum import Enum

from pyktree.model.node import Principle

HIGH_CONFIDENCE = 0.8
MEDIUM_CONFIDENCE = 0.6


class ConfidenceTier(Enum):
    """Discrete confidence bucket driving color encoding."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def hex_to_rgba(hex_color: str) -> tuple[float, float, float, float]:
    """Convert hex color string to normalized RGBA tuple.

    Args:
        hex_color: Hex color string (e.g., "#FF5500" or "FF5500")

    Returns:
        RGBA tuple with values in [0.0, 1.0]
    """
    hex_color = hex_color.lstrip("#")
    if len(hex_color) == 6:
        r = int(hex_color[0:2], 16) / 255.0
        g = int(hex_color[2:4], 16) / 255.0
        b = int(hex_color[4:6], 16) / 255.0
        return (r, g, b, 1.0)
    elif len(hex_color) == 8:
        r = int(hex_color[0:2], 16) / 255.0
        g = int(hex_color[2:4], 16) / 255.0
        b = int(hex_color[4:6], 16) / 255.0
        a = int(hex_color[6:8], 16) / 255.0
        return (r, g, b, a)
    else:
        raise ValueError(f"Invalid hex color: {hex_color}")


TIER_COLORS: dict[ConfidenceTier, tuple[float, float, float, float]] = {
    ConfidenceTier.HIGH: hex_to_rgba("#4caf50"),    # Green
    ConfidenceTier.MEDIUM: hex_to_rgba("#ff9800"),  # Amber
    ConfidenceTier.LOW: hex_to_rgba("#f44336"),     # Red
}


def average_confidence(principles: Iterable[Principle]) -> float:
    """Mean confidence over principles, 0.0 for an empty list."""
    values = [p.confidence for p in principles]
    if not values:
        return 0.0
    return sum(values) / len(values)


def tier_for_average(avg: float) -> ConfidenceTier:
    """Map an average confidence to its tier.

    ``avg >= 0.8`` is high, ``0.6 <= avg < 0.8`` is medium, anything
    else (including NaN) is low.
    """
    if avg >= HIGH_CONFIDENCE:
        return ConfidenceTier.HIGH
    if avg >= MEDIUM_CONFIDENCE:
        return ConfidenceTier.MEDIUM
    return ConfidenceTier.LOW


def confidence_tier(principles: Iterable[Principle]) -> ConfidenceTier:
    """Get the confidence tier for a node's principles."""
    return tier_for_average(average_confidence(principles))


def tier_color(tier: ConfidenceTier) -> tuple[float, float, float, float]:
    """Get the display color for a tier."""
    return TIER_COLORS[tier]
