"""Sampling driver for pysysmon."""

import logging
import threading
import time
from collections.abc import Callable
from datetime import datetime
from enum import Enum
from typing import Protocol

from pysysmon.errors import SampleError
from pysysmon.models import CpuRateState, NetworkRateState, NetworkRates, SystemSnapshot
from pysysmon.rates import compute_cpu_usage_percent, compute_network_rates
from pysysmon.sources import CounterSource

logger = logging.getLogger(__name__)

MIN_INTERVAL = 0.1


class MonitorState(Enum):
    """Lifecycle of the sampling loop."""

    UNINITIALIZED = "uninitialized"
    STEADY = "steady"


class Ticker(Protocol):
    """Paces the sampling loop."""

    def wait(self, seconds: float) -> bool:
        """Block for ``seconds``; return True if the loop should stop."""
        ...

    def stop(self) -> None: ...


class EventTicker:
    """Ticker that sleeps on a threading.Event so stop() ends the wait early."""

    def __init__(self) -> None:
        self._stop_event = threading.Event()

    def wait(self, seconds: float) -> bool:
        return self._stop_event.wait(timeout=seconds)

    def stop(self) -> None:
        self._stop_event.set()

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()


class SystemMonitor:
    """
    Sequential sampler for CPU, memory, disk and network statistics.

    Owns one rate state per counter family. The first pass (``prime``) only
    seeds those states; every later pass produces a SystemSnapshot. Failures
    to read a family are logged and reported as missing data for that cycle.
    """

    def __init__(
        self,
        source: CounterSource,
        interval: float = 1.0,
        disk_path: str = "/",
        clock: Callable[[], float] = time.monotonic,
        ticker: Ticker | None = None,
    ) -> None:
        """
        Initialize the SystemMonitor.

        Args:
            source: Where raw counters come from.
            interval: Seconds between samples. Default 1.0s.
            disk_path: Mount point whose capacity is reported.
            clock: Monotonic clock used to measure the network interval.
            ticker: Paces ``run``. Defaults to an EventTicker.
        """
        self._source = source
        self._interval = max(MIN_INTERVAL, interval)
        self._disk_path = disk_path
        self._clock = clock
        self._ticker = ticker if ticker is not None else EventTicker()
        self._cpu_state = CpuRateState()
        self._net_state = NetworkRateState()
        self._last_net_time: float | None = None
        self._state = MonitorState.UNINITIALIZED

    @property
    def interval(self) -> float:
        """Get the sampling interval."""
        return self._interval

    @interval.setter
    def interval(self, value: float) -> None:
        """Set the sampling interval."""
        self._interval = max(MIN_INTERVAL, value)

    @property
    def disk_path(self) -> str:
        return self._disk_path

    @property
    def state(self) -> MonitorState:
        return self._state

    def prime(self) -> None:
        """Seed both rate states with a baseline sample."""
        self._sample_cpu([])
        self._sample_network([])
        self._state = MonitorState.STEADY
        logger.info("Monitor primed, sampling every %.2fs", self._interval)

    def sample(self) -> SystemSnapshot:
        """Run one full sampling pass and return the computed snapshot."""
        if self._state is MonitorState.UNINITIALIZED:
            self.prime()

        errors: list[str] = []
        cpu_percent = self._sample_cpu(errors)

        try:
            memory = self._source.read_memory()
        except SampleError as exc:
            logger.warning("Memory sample failed: %s", exc)
            errors.append(str(exc))
            memory = None

        try:
            disk = self._source.read_disk(self._disk_path)
        except SampleError as exc:
            logger.warning("Disk sample failed: %s", exc)
            errors.append(str(exc))
            disk = None

        network = self._sample_network(errors)

        return SystemSnapshot(
            timestamp=datetime.now(),
            cpu_percent=cpu_percent,
            memory=memory,
            disk=disk,
            network=network,
            errors=errors,
        )

    def _sample_cpu(self, errors: list[str]) -> float | None:
        try:
            sample = self._source.read_cpu()
        except SampleError as exc:
            logger.warning("CPU sample failed: %s", exc)
            errors.append(str(exc))
            return None
        return compute_cpu_usage_percent(sample, self._cpu_state)

    def _sample_network(self, errors: list[str]) -> NetworkRates | None:
        try:
            sample = self._source.read_network()
        except SampleError as exc:
            logger.warning("Network sample failed: %s", exc)
            errors.append(str(exc))
            return None

        now = self._clock()
        elapsed = 0.0 if self._last_net_time is None else now - self._last_net_time
        self._last_net_time = now
        return compute_network_rates(sample, self._net_state, elapsed)

    def run(
        self,
        on_snapshot: Callable[[SystemSnapshot], None],
        max_iterations: int | None = None,
    ) -> None:
        """
        Sample forever (or ``max_iterations`` times), handing each snapshot on.

        Args:
            on_snapshot: Receives every steady-state snapshot.
            max_iterations: Stop after this many snapshots. None runs until
                ``stop()`` is called or the process is interrupted.
        """
        self.prime()
        if self._ticker.wait(self._interval):
            return

        count = 0
        while max_iterations is None or count < max_iterations:
            on_snapshot(self.sample())
            count += 1
            if count == max_iterations or self._ticker.wait(self._interval):
                break
        logger.info("Monitor stopped after %d snapshots", count)

    def stop(self) -> None:
        """Ask ``run`` to return at its next wait."""
        self._ticker.stop()
