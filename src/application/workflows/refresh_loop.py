"""Periodic refresh for a charted symbol.

Refreshes can overlap: a timer cycle may still be fetching when the user
changes symbol or asks for a manual refresh. Every refresh takes a new
generation number before fetching, and its result is applied only if no
newer refresh has been issued since (last-issued-wins). A stale result is
dropped even if it resolves last.

The applied SymbolAnalysis is swapped in with a single assignment, so a
reader always sees indicators, levels and trend lines from one series.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable

from src.application.queries.analyze_symbol import SymbolAnalysis, SymbolAnalyzer
from src.domain.rules import REFRESH_INTERVAL_SECONDS
from src.infrastructure.logging import get_logger

logger = get_logger(__name__)


class RefreshStatus(str, Enum):
    """Status of the refresh loop."""

    RUNNING = "running"
    STOPPED = "stopped"
    ERROR = "error"


class AnalysisSession:
    """Holds the current analysis for one charted symbol.

    Recomputation is triggered only by explicit refresh() or
    change_symbol() calls.
    """

    def __init__(
        self,
        analyzer: SymbolAnalyzer,
        symbol: str,
        on_update: Callable[[SymbolAnalysis], None] | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            analyzer: Fetch + analysis use case
            symbol: Initial ticker
            on_update: Called with each applied analysis (failures are logged, not raised)
        """
        self._analyzer = analyzer
        self._symbol = symbol.strip().upper()
        self._on_update = on_update
        self._generation = 0
        self._current: SymbolAnalysis | None = None

    @property
    def symbol(self) -> str:
        return self._symbol

    @property
    def current(self) -> SymbolAnalysis | None:
        """Most recently applied analysis (None before the first one)."""
        return self._current

    @property
    def generation(self) -> int:
        """Latest issued request generation."""
        return self._generation

    def _issue(self) -> int:
        self._generation += 1
        return self._generation

    def _apply(self, analysis: SymbolAnalysis) -> bool:
        if analysis.generation != self._generation:
            logger.info(
                "refresh.stale_discarded",
                symbol=analysis.symbol,
                generation=analysis.generation,
                latest=self._generation,
            )
            return False

        self._current = analysis
        if self._on_update:
            try:
                self._on_update(analysis)
            except Exception:
                logger.exception(
                    "refresh.on_update_failed",
                    symbol=analysis.symbol,
                    generation=analysis.generation,
                )
        return True

    async def refresh(self) -> SymbolAnalysis | None:
        """Fetch and analyze the current symbol.

        Returns:
            The applied analysis, or None if a newer refresh superseded it
        """
        generation = self._issue()
        analysis = await self._analyzer.analyze(self._symbol, generation=generation)
        return analysis if self._apply(analysis) else None

    async def change_symbol(self, symbol: str) -> SymbolAnalysis | None:
        """Switch to a new symbol and analyze it.

        Any in-flight refresh for the old symbol becomes stale.
        """
        self._symbol = symbol.strip().upper()
        return await self.refresh()


@dataclass
class RefreshCycleResult:
    """Result of a single refresh cycle."""

    cycle_number: int
    started_at: datetime
    completed_at: datetime
    applied: bool
    error: str | None = None


@dataclass
class RefreshLoopResult:
    """Result of refresh loop execution."""

    status: RefreshStatus
    started_at: datetime
    stopped_at: datetime | None = None
    cycles_completed: int = 0
    cycle_results: list[RefreshCycleResult] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


class RefreshLoop:
    """Re-runs a session's refresh on a fixed interval."""

    def __init__(
        self,
        session: AnalysisSession,
        interval_seconds: float = REFRESH_INTERVAL_SECONDS,
    ):
        """Initialize the refresh loop.

        Args:
            session: Session to refresh
            interval_seconds: Time between refresh cycles
        """
        self._session = session
        self._interval = interval_seconds
        self._status = RefreshStatus.STOPPED
        self._cycle_count = 0
        self._stop_requested = False

    @property
    def status(self) -> RefreshStatus:
        """Current loop status."""
        return self._status

    @property
    def is_running(self) -> bool:
        return self._status == RefreshStatus.RUNNING

    async def start(
        self,
        max_cycles: int | None = None,
        on_cycle_complete: Callable[[RefreshCycleResult], None] | None = None,
    ) -> RefreshLoopResult:
        """Start refreshing.

        Args:
            max_cycles: Optional maximum cycles (None = run until stopped)
            on_cycle_complete: Optional callback after each cycle

        Returns:
            RefreshLoopResult when the loop ends
        """
        self._status = RefreshStatus.RUNNING
        self._stop_requested = False
        self._cycle_count = 0

        started_at = datetime.now()
        cycle_results: list[RefreshCycleResult] = []
        errors: list[str] = []

        try:
            while not self._stop_requested:
                if max_cycles is not None and self._cycle_count >= max_cycles:
                    break

                cycle_result = await self.run_cycle()
                cycle_results.append(cycle_result)
                if cycle_result.error:
                    errors.append(cycle_result.error)

                if on_cycle_complete:
                    on_cycle_complete(cycle_result)

                self._cycle_count += 1

                if not self._stop_requested and (
                    max_cycles is None or self._cycle_count < max_cycles
                ):
                    await asyncio.sleep(self._interval)

        except Exception as e:
            self._status = RefreshStatus.ERROR
            errors.append(f"Refresh loop error: {e}")
            logger.exception("refresh.loop_error", symbol=self._session.symbol)
            return RefreshLoopResult(
                status=self._status,
                started_at=started_at,
                stopped_at=datetime.now(),
                cycles_completed=self._cycle_count,
                cycle_results=cycle_results,
                errors=errors,
            )

        self._status = RefreshStatus.STOPPED

        return RefreshLoopResult(
            status=self._status,
            started_at=started_at,
            stopped_at=datetime.now(),
            cycles_completed=self._cycle_count,
            cycle_results=cycle_results,
            errors=errors,
        )

    def stop(self) -> None:
        """Request the loop to stop after the current cycle."""
        self._stop_requested = True

    async def run_cycle(self) -> RefreshCycleResult:
        """Run a single refresh cycle."""
        started_at = datetime.now()
        analysis = await self._session.refresh()

        return RefreshCycleResult(
            cycle_number=self._cycle_count + 1,
            started_at=started_at,
            completed_at=datetime.now(),
            applied=analysis is not None,
            error=analysis.error if analysis is not None else None,
        )
