"""Support and resistance resolution.

Two variants share one resolver, selected by AnalysisConfig.level_strategy:

- RANGE_SCAN: max/min of a trailing window, reported only when they sit
  at least `range_margin_pct` away from the current price.
- SWING_SCORED: swing points from a trailing window, kept when they sit
  within `proximity_pct` of price, deduplicated, then scored by touches,
  volume confirmation and recency.

A level's kind depends only on where it sits relative to the current
(most recent) price. The same input always yields the same ordered list.
"""

from collections.abc import Mapping, Sequence
from decimal import Decimal

from src.domain.models.analysis import AnalysisConfig, Level, SwingPoint
from src.domain.models.enums import LevelKind, LevelSource, ResolverStrategy, SwingKind
from src.domain.models.market import Series
from src.domain.rules import BASE_STRENGTH
from src.domain.services.moving_average import compute_ma, latest_value
from src.domain.services.swings import find_swing_points_in_prices


def mean_volume(series: Series) -> Decimal | None:
    """Average volume over observations that report one."""
    volumes = [v for v in series.volumes if v is not None]
    if not volumes:
        return None
    return Decimal(sum(volumes)) / len(volumes)


def count_touches(
    prices: Sequence[Decimal],
    level_price: Decimal,
    tolerance_pct: Decimal,
    exclude_index: int | None = None,
) -> int:
    """Count observations within +/- tolerance_pct of a level price.

    Args:
        prices: Full price series
        level_price: Level being scored
        tolerance_pct: Relative band around the level (0.01 = 1%)
        exclude_index: Observation that defined the level, not counted

    Returns:
        Number of touching observations
    """
    band = level_price * tolerance_pct
    return sum(
        1
        for i, price in enumerate(prices)
        if i != exclude_index and abs(price - level_price) <= band
    )


def score_level(
    series: Series,
    level_price: Decimal,
    config: AnalysisConfig,
    index: int | None = None,
    recency: Decimal = Decimal("0"),
    avg_volume: Decimal | None = None,
) -> Decimal:
    """Score a level's strength.

    strength = base + touches + volume bonus + recency

    The volume bonus applies when the defining observation's volume exceeds
    `volume_multiplier` times the mean volume.
    It is a single flat bonus keyed on that observation; high volume on
    touching observations adds nothing.

    Args:
        series: Full price series (touches are counted over all of it)
        level_price: Level being scored
        config: Scoring tunables
        index: Observation that defined the level, if any
        recency: Precomputed recency bonus
        avg_volume: Mean volume (computed if omitted)

    Returns:
        Non-negative strength
    """
    strength = BASE_STRENGTH + count_touches(
        series.prices, level_price, config.touch_tolerance_pct, exclude_index=index
    )

    if index is not None:
        if avg_volume is None:
            avg_volume = mean_volume(series)
        volume = series[index].volume
        if (
            volume is not None
            and avg_volume is not None
            and avg_volume > 0
            and volume > avg_volume * config.volume_multiplier
        ):
            strength += config.volume_bonus

    return strength + recency


def deduplicate_levels(levels: Sequence[Level], tolerance: Decimal) -> list[Level]:
    """Drop levels within `tolerance` (absolute price) of an accepted one.

    The first level encountered wins.
    """
    accepted: list[Level] = []
    for level in levels:
        if any(abs(level.price - kept.price) <= tolerance for kept in accepted):
            continue
        accepted.append(level)
    return accepted


def rank_levels(levels: Sequence[Level]) -> tuple[Level, ...]:
    """Order levels by descending strength (stable for ties)."""
    return tuple(sorted(levels, key=lambda lv: lv.strength, reverse=True))


def cap_levels(levels: Sequence[Level], max_per_side: int) -> list[Level]:
    """Keep the nearest levels on each side of price.

    Resistances ascend by price (nearest above first), supports descend
    (nearest below first).
    """
    resistances = sorted(
        (lv for lv in levels if lv.kind == LevelKind.RESISTANCE), key=lambda lv: lv.price
    )
    supports = sorted(
        (lv for lv in levels if lv.kind == LevelKind.SUPPORT),
        key=lambda lv: lv.price,
        reverse=True,
    )
    return resistances[:max_per_side] + supports[:max_per_side]


def _extreme_index(prices: Sequence[Decimal], start: int, highest: bool) -> int:
    """Index of the most recent max (or min) of prices[start:]."""
    best = start
    for i in range(start, len(prices)):
        if (prices[i] >= prices[best]) if highest else (prices[i] <= prices[best]):
            best = i
    return best


def resolve_range_levels(series: Series, config: AnalysisConfig) -> list[Level]:
    """Resolve at most one resistance and one support from a trailing window.

    Args:
        series: Full price series
        config: Uses range_window and range_margin_pct

    Returns:
        Zero, one or two levels (resistance first)
    """
    current = series.current_price
    if current is None:
        return []

    prices = series.prices
    start = max(0, len(prices) - config.range_window)
    avg_volume = mean_volume(series)
    levels: list[Level] = []

    high_idx = _extreme_index(prices, start, highest=True)
    if prices[high_idx] >= current * (1 + config.range_margin_pct):
        levels.append(
            Level(
                price=prices[high_idx],
                date=series[high_idx].date,
                kind=LevelKind.RESISTANCE,
                strength=score_level(
                    series, prices[high_idx], config, index=high_idx, avg_volume=avg_volume
                ),
                source=LevelSource.RANGE,
            )
        )

    low_idx = _extreme_index(prices, start, highest=False)
    if prices[low_idx] <= current * (1 - config.range_margin_pct):
        levels.append(
            Level(
                price=prices[low_idx],
                date=series[low_idx].date,
                kind=LevelKind.SUPPORT,
                strength=score_level(
                    series, prices[low_idx], config, index=low_idx, avg_volume=avg_volume
                ),
                source=LevelSource.RANGE,
            )
        )

    return levels


def _swing_candidates(
    series: Series,
    config: AnalysisConfig,
    start: int,
) -> list[SwingPoint]:
    """Swing points of the scan window that sit near the current price."""
    current = series.current_price
    swings = find_swing_points_in_prices(
        series.prices[start:],
        series.dates[start:],
        config.level_swing_window,
        offset=start,
    )

    upper = current * (1 + config.proximity_pct)
    lower = current * (1 - config.proximity_pct)

    candidates = [h for h in swings.highs if current < h.price <= upper]
    candidates += [lw for lw in swings.lows if lower <= lw.price < current]

    # Chronological encounter order; highs before lows on the same index
    candidates.sort(key=lambda sp: (sp.index, sp.kind != SwingKind.HIGH))
    return candidates


def resolve_swing_levels(series: Series, config: AnalysisConfig) -> list[Level]:
    """Resolve scored levels from swing points of the recent window.

    Args:
        series: Full price series
        config: Scan window, proximity, dedup and scoring tunables

    Returns:
        Capped resistances (ascending) followed by capped supports
        (descending)
    """
    current = series.current_price
    if current is None:
        return []

    n = len(series)
    start = max(0, n - config.scan_window)
    window_len = n - start
    avg_volume = mean_volume(series)

    levels: list[Level] = []
    for candidate in _swing_candidates(series, config, start):
        # A candidate exists only if window_len > 2 * level_swing_window
        recency = config.recency_weight * Decimal(candidate.index - start) / (window_len - 1)
        kind = LevelKind.RESISTANCE if candidate.kind == SwingKind.HIGH else LevelKind.SUPPORT
        levels.append(
            Level(
                price=candidate.price,
                date=candidate.date,
                kind=kind,
                strength=score_level(
                    series,
                    candidate.price,
                    config,
                    index=candidate.index,
                    recency=recency,
                    avg_volume=avg_volume,
                ),
                source=LevelSource.SWING,
            )
        )

    levels = deduplicate_levels(levels, current * config.dedup_tolerance_pct)
    return cap_levels(levels, config.max_levels_per_side)


def moving_average_levels(
    series: Series,
    config: AnalysisConfig,
    moving_averages: Mapping[int, Sequence[Decimal | None]] | None = None,
) -> list[Level]:
    """Report the latest value of nearby moving averages as levels.

    MAs further than `ma_level_band_pct` from price are skipped, as is an
    MA sitting exactly at price.

    Args:
        series: Full price series
        config: Uses ma_level_periods and ma_level_band_pct
        moving_averages: Precomputed MA values by period (computed if absent)

    Returns:
        One level per qualifying period, in period order
    """
    current = series.current_price
    if current is None:
        return []

    levels: list[Level] = []
    for period in config.ma_level_periods:
        values = (moving_averages or {}).get(period)
        if values is None:
            values = compute_ma(series.prices, period)
        value = latest_value(values)
        if value is None or value == current:
            continue
        if abs(value - current) / current > config.ma_level_band_pct:
            continue
        levels.append(
            Level(
                price=value,
                date=series.last_date,
                kind=LevelKind.RESISTANCE if value > current else LevelKind.SUPPORT,
                source=LevelSource.MOVING_AVERAGE,
            )
        )
    return levels


class SupportResistanceResolver:
    """Resolves ranked support/resistance levels for a series.

    Stateless: the configured strategy and tunables are the only inputs
    besides the series itself.
    """

    def __init__(self, config: AnalysisConfig | None = None) -> None:
        """Initialize the resolver.

        Args:
            config: Analysis tunables (defaults if omitted)
        """
        self._config = config or AnalysisConfig()

    @property
    def strategy(self) -> ResolverStrategy:
        return self._config.level_strategy

    def resolve(
        self,
        series: Series,
        moving_averages: Mapping[int, Sequence[Decimal | None]] | None = None,
    ) -> tuple[Level, ...]:
        """Resolve levels ranked by descending strength.

        Args:
            series: Full price series
            moving_averages: Precomputed MA values for MA levels

        Returns:
            Tuple of levels, strongest first
        """
        if series.is_empty:
            return ()

        if self._config.level_strategy == ResolverStrategy.RANGE_SCAN:
            levels = resolve_range_levels(series, self._config)
        else:
            levels = resolve_swing_levels(series, self._config)

        if self._config.include_ma_levels:
            levels += moving_average_levels(series, self._config, moving_averages)

        return rank_levels(levels)
