"""Technical analysis defaults.

This module defines the engine's tunables as constants, making them
explicit and testable. None of the scoring constants are law: they are
starting points that AnalysisConfig and the environment can override.
"""

from decimal import Decimal
from typing import Final

# =============================================================================
# MOVING AVERAGES
# =============================================================================

# Periods overlaid on the chart (short, medium, long)
MA_PERIODS: Final[tuple[int, ...]] = (20, 50, 200)

# Presentation rounding (applied only at the chart boundary)
DISPLAY_PRECISION: Final[Decimal] = Decimal("0.01")


# =============================================================================
# SWING POINTS
# =============================================================================

# Neighbours on each side that a swing point must dominate
SWING_WINDOW: Final[int] = 5


# =============================================================================
# SUPPORT / RESISTANCE - RANGE SCAN
# =============================================================================

# Trailing observations scanned for the max/min
RANGE_WINDOW: Final[int] = 60

# Level must sit at least this far from price to be reported
RANGE_MARGIN_PCT: Final[Decimal] = Decimal("0.01")  # 1%


# =============================================================================
# SUPPORT / RESISTANCE - SWING SCORED
# =============================================================================

# Trailing observations scanned for swing candidates (current regime)
SCAN_WINDOW: Final[int] = 180

# Swing lookback used inside the scan window
LEVEL_SWING_WINDOW: Final[int] = 8

# Candidates further than this from price are discarded
PROXIMITY_PCT: Final[Decimal] = Decimal("0.10")  # 10%

# Candidates within this fraction of price of an accepted level collapse
DEDUP_TOLERANCE_PCT: Final[Decimal] = Decimal("0.015")  # 1.5%

# Observation counts as a touch when within this fraction of the level
TOUCH_TOLERANCE_PCT: Final[Decimal] = Decimal("0.01")  # 1%

# Volume confirmation: volume > multiplier x mean volume earns the bonus
VOLUME_MULTIPLIER: Final[Decimal] = Decimal("1.5")
VOLUME_BONUS: Final[Decimal] = Decimal("2")

# Maximum recency bonus (latest candidate in the window earns all of it)
RECENCY_WEIGHT: Final[Decimal] = Decimal("5")

# Base strength every level starts with
BASE_STRENGTH: Final[Decimal] = Decimal("1")

# Levels kept per side after sorting by distance from price
MAX_LEVELS_PER_SIDE: Final[int] = 4


# =============================================================================
# MOVING AVERAGES AS LEVELS
# =============================================================================

MA_LEVEL_PERIODS: Final[tuple[int, ...]] = (50, 200)

# Only MAs within this distance of price are reported as levels
MA_LEVEL_BAND_PCT: Final[Decimal] = Decimal("0.05")  # 5%


# =============================================================================
# TREND LINES
# =============================================================================

# Most recent swing points considered per line
TREND_POINTS: Final[int] = 3


# =============================================================================
# DATA & REFRESH
# =============================================================================

HISTORY_DAYS: Final[int] = 365
REFRESH_INTERVAL_SECONDS: Final[float] = 60.0
