"""Domain enumerations for the price chart analyzer."""

from enum import Enum


class SwingKind(str, Enum):
    """Type of local extremum."""

    HIGH = "high"
    LOW = "low"


class LevelKind(str, Enum):
    """Side of the current price a level or trend line sits on."""

    SUPPORT = "support"  # Floor below price
    RESISTANCE = "resistance"  # Ceiling above price


class LevelSource(str, Enum):
    """Where a support/resistance level came from."""

    RANGE = "range"  # Max/min of a trailing window
    SWING = "swing"  # Scored swing point
    MOVING_AVERAGE = "moving_average"  # Latest MA value near price


class ResolverStrategy(str, Enum):
    """Support/resistance resolution variant."""

    RANGE_SCAN = "range_scan"
    SWING_SCORED = "swing_scored"
