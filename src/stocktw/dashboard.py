"""Acquisition-cycle state machine backing the dashboard."""

from __future__ import annotations

import asyncio
import logging
import random
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Awaitable, Callable, Deque, Dict, List, Optional

from .config import AppSettings
from .data.errors import MarketDataError
from .data.live import fetch_live_market_data
from .data.providers.base import PriceExtractor
from .data.providers.proxy import ProxyRotationFetcher
from .data.providers.yahoo import YahooPriceExtractor
from .data.schemas import LiveQuoteResult, MarketObservation, ObservationFrame, is_usable_price
from .data.seed import initial_series
from .series import merge_observation
from .simulation import simulate_next

logger = logging.getLogger(__name__)

STATUS_CONNECTING = "Connecting to proxy servers..."
STATUS_SYNCING = "Syncing market data..."
STATUS_INTEGRATING = "Integrating data..."
STATUS_SUCCESS = "Update successful!"
STATUS_SIMULATED = "Network restricted - showing simulated data"


class AcquisitionState(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    SIMULATING = "simulating"


class RefreshTrigger(str, Enum):
    EXPLICIT = "explicit"
    SILENT = "silent"


class CyclePhase(str, Enum):
    CONNECTING = "connecting"
    SYNCING = "syncing"
    INTEGRATING = "integrating"
    SUCCESS = "success"
    SIMULATED = "simulated"
    SKIPPED = "skipped"


class CycleResult(str, Enum):
    SUCCESS = "success"
    DEGRADED = "degraded"
    SIMULATED = "simulated"
    SKIPPED = "skipped"


@dataclass(slots=True)
class StatusEvent:
    phase: CyclePhase
    trigger: RefreshTrigger
    message: str
    at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "phase": self.phase.value,
            "trigger": self.trigger.value,
            "message": self.message,
            "at": self.at.isoformat(),
        }


@dataclass(slots=True)
class RefreshOutcome:
    """What one refresh trigger did to the series."""

    trigger: RefreshTrigger
    result: CycleResult
    observation: MarketObservation | None = None
    live: LiveQuoteResult | None = None
    error: str | None = None
    events: List[StatusEvent] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "trigger": self.trigger.value,
            "result": self.result.value,
            "observation": self.observation.to_row() if self.observation else None,
            "live": self.live.as_dict() if self.live else None,
            "error": self.error,
            "events": [event.to_dict() for event in self.events],
        }


QuoteFetcher = Callable[[], Awaitable[LiveQuoteResult]]


class DashboardController:
    """Owns the rolling series and decides how each refresh trigger updates it.

    A refresh that cannot obtain either primary price commits a simulated row
    and turns on sticky simulation: later silent refreshes skip the network
    and keep advancing the simulator until an explicit refresh succeeds.
    Triggers arriving while a cycle is in flight are skipped.
    """

    def __init__(
            self,
            *,
            settings: AppSettings | None = None,
            series: Optional[List[MarketObservation]] = None,
            fetch_quotes: QuoteFetcher | None = None,
            extractor: PriceExtractor | None = None,
            rng: random.Random | None = None,
            clock: Callable[[], datetime] = datetime.now,
            max_events: int = 50,
    ) -> None:
        self.settings = settings or AppSettings()
        self._series: List[MarketObservation] = list(series) if series else initial_series()
        self._clock = clock
        self._rng = rng or random.Random()
        self._extractor = extractor or YahooPriceExtractor()
        self._fetcher: ProxyRotationFetcher | None = None
        self._fetch_quotes = fetch_quotes or self._fetch_live
        self._state = AcquisitionState.IDLE
        self._loading = False
        self._simulating = False
        self._auto_refresh = self.settings.auto_refresh
        self._status_message = ""
        self._status_expires_at: datetime | None = None
        self._last_updated = self._clock()
        self._events: Deque[StatusEvent] = deque(maxlen=max_events)

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def series(self) -> tuple[MarketObservation, ...]:
        return tuple(self._series)

    @property
    def latest(self) -> MarketObservation:
        return self._series[-1]

    @property
    def state(self) -> AcquisitionState:
        return self._state

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def simulating(self) -> bool:
        return self._simulating

    @property
    def auto_refresh(self) -> bool:
        return self._auto_refresh

    @property
    def last_updated(self) -> datetime:
        return self._last_updated

    @property
    def status_message(self) -> str:
        if self._status_expires_at is not None and self._clock() >= self._status_expires_at:
            self._status_message = ""
            self._status_expires_at = None
        return self._status_message

    def recent_events(self) -> List[StatusEvent]:
        return list(self._events)

    def status(self) -> Dict[str, Any]:
        return {
            "state": self._state.value,
            "status_message": self.status_message,
            "loading": self._loading,
            "simulating": self._simulating,
            "auto_refresh": self._auto_refresh,
            "auto_refresh_seconds": self.settings.auto_refresh_seconds,
            "last_updated": self._last_updated.isoformat(),
            "series_length": len(self._series),
            "events": [event.to_dict() for event in self._events],
        }

    def series_payload(self) -> Dict[str, Any]:
        return {
            "series": [obs.to_row() for obs in self._series],
            "latest": ObservationFrame.latest_summary(self._series),
            "simulating": self._simulating,
            "last_updated": self._last_updated.isoformat(),
        }

    def set_auto_refresh(self, enabled: bool) -> bool:
        self._auto_refresh = bool(enabled)
        logger.info("Auto refresh %s", "enabled" if self._auto_refresh else "paused")
        return self._auto_refresh

    # ------------------------------------------------------------------
    # Refresh cycle
    # ------------------------------------------------------------------

    async def refresh(self, trigger: RefreshTrigger = RefreshTrigger.EXPLICIT) -> RefreshOutcome:
        """Run one acquisition cycle for ``trigger``."""

        outcome = RefreshOutcome(trigger=trigger, result=CycleResult.SKIPPED)
        if self._loading:
            self._emit(outcome, CyclePhase.SKIPPED, "Refresh already in progress", show=False)
            return outcome

        self._loading = True
        try:
            if trigger is RefreshTrigger.SILENT and self._simulating:
                self._commit_simulated(outcome, show=False)
                return outcome

            explicit = trigger is RefreshTrigger.EXPLICIT
            if explicit:
                self._simulating = False
            self._state = AcquisitionState.FETCHING
            self._emit(outcome, CyclePhase.CONNECTING, STATUS_CONNECTING, show=explicit)
            self._emit(outcome, CyclePhase.SYNCING, STATUS_SYNCING, show=explicit)

            try:
                live = await self._fetch_quotes()
            except MarketDataError as exc:
                logger.warning("Live fetch failed (%s); switching to simulation mode: %s",
                               trigger.value, exc)
                outcome.error = str(exc)
                self._simulating = True
                self._commit_simulated(outcome)
                return outcome

            self._emit(outcome, CyclePhase.INTEGRATING, STATUS_INTEGRATING, show=explicit)
            outcome.live = live
            outcome.observation = self._commit(live)
            self._simulating = False
            outcome.result = (
                CycleResult.SUCCESS
                if is_usable_price(live.index_price)
                and is_usable_price(live.futures_price)
                and is_usable_price(live.volatility_index)
                else CycleResult.DEGRADED
            )
            self._emit(outcome, CyclePhase.SUCCESS, STATUS_SUCCESS, show=explicit, transient=True)
            logger.info("Refresh %s committed %s", outcome.result.value, outcome.observation.date)
            return outcome
        finally:
            self._loading = False
            self._state = AcquisitionState.SIMULATING if self._simulating else AcquisitionState.IDLE

    async def auto_refresh_tick(self) -> RefreshOutcome | None:
        """Timer entry point; ``None`` when auto refresh is paused."""

        if not self._auto_refresh:
            return None
        return await self.refresh(RefreshTrigger.SILENT)

    async def run_auto_refresh(self, stop_event: asyncio.Event) -> None:
        """Fire a silent refresh every ``auto_refresh_seconds`` until ``stop_event`` is set."""

        interval = self.settings.auto_refresh_seconds
        while not stop_event.is_set():
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=interval)
            except asyncio.TimeoutError:
                try:
                    await self.auto_refresh_tick()
                except Exception:
                    logger.exception("Auto refresh tick failed; will retry in %ss", interval)

    def close(self) -> None:
        if self._fetcher is not None:
            self._fetcher.close()
            self._fetcher = None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _fetch_live(self) -> LiveQuoteResult:
        if self._fetcher is None:
            # No shared session: the three symbol fetches run on separate worker threads.
            self._fetcher = ProxyRotationFetcher(
                timeout=self.settings.request_timeout_seconds,
                backoff=self.settings.proxy_backoff_seconds,
            )
        return await fetch_live_market_data(
            self._fetcher, self._extractor, self.settings.symbol_urls())

    def _commit(self, update: LiveQuoteResult | MarketObservation) -> MarketObservation:
        self._series = merge_observation(
            self._series, update, today=self._clock().date())
        self._last_updated = self._clock()
        return self._series[-1]

    def _commit_simulated(self, outcome: RefreshOutcome, *, show: bool = True) -> None:
        simulated = simulate_next(
            self.latest,
            rng=self._rng,
            today=self._clock().date(),
            price_bound=self.settings.simulation_price_bound,
            vix_bound=self.settings.simulation_vix_bound,
        )
        outcome.observation = self._commit(simulated)
        outcome.result = CycleResult.SIMULATED
        self._emit(outcome, CyclePhase.SIMULATED, STATUS_SIMULATED, show=show, transient=True)

    def _emit(
            self,
            outcome: RefreshOutcome,
            phase: CyclePhase,
            message: str,
            *,
            show: bool = True,
            transient: bool = False,
    ) -> None:
        event = StatusEvent(phase=phase, trigger=outcome.trigger, message=message, at=self._clock())
        outcome.events.append(event)
        self._events.append(event)
        if not show:
            return
        self._status_message = message
        self._status_expires_at = (
            self._clock() + timedelta(seconds=self.settings.status_clear_seconds)
            if transient
            else None
        )
