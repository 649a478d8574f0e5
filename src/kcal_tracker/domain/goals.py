"""Goal percentages, unit-cost ratios and ratio coloring."""

import math
import re
from dataclasses import dataclass
from typing import NamedTuple

from kcal_tracker.domain.models import Goals, Totals

MAX_PERCENT = 999
ON_TARGET_TOLERANCE = 0.03
FULLY_FAVORABLE_RATIO = 0.5
FULLY_UNFAVORABLE_RATIO = 2.0

_RGB_PATTERN = re.compile(r"(\d+)\s*,\s*(\d+)\s*,\s*(\d+)")


class RGB(NamedTuple):
    """An opaque color with 0-255 channels."""

    r: int
    g: int
    b: int

    def css(self) -> str:
        return f"rgb({self.r},{self.g},{self.b})"


FALLBACK_COLOR = RGB(11, 19, 32)


def parse_color(value: str) -> RGB:
    """Parse ``rgb()``/``rgba()`` or ``#rrggbb``/``#rgb`` color strings."""
    text = str(value).strip()
    match = _RGB_PATTERN.search(text)
    if match:
        return RGB(int(match[1]), int(match[2]), int(match[3]))
    if text.startswith("#"):
        hex_digits = text[1:]
        if len(hex_digits) == 3:
            hex_digits = "".join(ch * 2 for ch in hex_digits)
        if len(hex_digits) == 6:
            try:
                packed = int(hex_digits, 16)
            except ValueError:
                return FALLBACK_COLOR
            return RGB((packed >> 16) & 255, (packed >> 8) & 255, packed & 255)
    return FALLBACK_COLOR


@dataclass(frozen=True)
class RatioPalette:
    """Anchor colors for ratio coloring."""

    base: RGB = RGB(242, 244, 248)
    green: RGB = RGB(60, 185, 120)
    red: RGB = RGB(255, 90, 90)

    @classmethod
    def from_strings(cls, base: str, green: str, red: str) -> "RatioPalette":
        return cls(
            base=parse_color(base), green=parse_color(green), red=parse_color(red)
        )


DEFAULT_PALETTE = RatioPalette()


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def percent_of_goal(value: float, goal: float) -> int:
    """Return ``value`` as a whole percentage of ``goal``, clamped to 0..999."""
    if not math.isfinite(value) or not math.isfinite(goal) or goal <= 0:
        return 0
    ratio = value / goal * 100
    if not math.isfinite(ratio):
        return 0
    return max(0, min(MAX_PERCENT, _round_half_up(ratio)))


def price_per_100_protein(totals: Totals) -> float:
    if totals.protein <= 0:
        return math.nan
    return totals.price / totals.protein * 100


def price_per_100_kcal(totals: Totals) -> float:
    if totals.kcal <= 0:
        return math.nan
    return totals.price / totals.kcal * 100


def protein_per_100_kcal(totals: Totals) -> float:
    if totals.kcal <= 0:
        return math.nan
    return totals.protein / totals.kcal * 100


def reference_price_per_100_protein(goals: Goals) -> float:
    """Price per 100 g protein implied by the daily goals."""
    return price_per_100_protein(Totals(protein=goals.protein, price=goals.price))


def reference_price_per_100_kcal(goals: Goals) -> float:
    """Price per 100 kcal implied by the daily goals."""
    return price_per_100_kcal(Totals(kcal=goals.kcal, price=goals.price))


def lerp_color(start: RGB, end: RGB, t: float) -> RGB:
    """Interpolate channel-wise between two colors."""
    return RGB(
        _round_half_up(start.r + (end.r - start.r) * t),
        _round_half_up(start.g + (end.g - start.g) * t),
        _round_half_up(start.b + (end.b - start.b) * t),
    )


def _clamp_unit(value: float) -> float:
    return max(0.0, min(1.0, value))


def ratio_color(
    value: float, reference: float, palette: RatioPalette = DEFAULT_PALETTE
) -> RGB:
    """Color a ratio by how favorable it is against a reference ratio.

    Cheaper than the reference fades towards green (fully green at half the
    reference), more expensive fades towards red (fully red at double).
    Within 3% of the reference the base color is returned unchanged.
    """
    if not math.isfinite(value) or not math.isfinite(reference) or reference <= 0:
        return palette.base
    ratio = value / reference
    if abs(ratio - 1) <= ON_TARGET_TOLERANCE:
        return palette.base
    if ratio < 1:
        t = _clamp_unit(
            (ratio - FULLY_FAVORABLE_RATIO) / (1 - FULLY_FAVORABLE_RATIO)
        )
        return lerp_color(palette.green, palette.base, t)
    t = _clamp_unit((ratio - 1) / (FULLY_UNFAVORABLE_RATIO - 1))
    return lerp_color(palette.base, palette.red, t)
