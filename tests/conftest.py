"""Shared fakes for pysysmon tests."""

import pytest

from pysysmon.app import MonitorApp
from pysysmon.errors import SampleError
from pysysmon.models import CpuSample, DiskSnapshot, MemorySnapshot, NetworkSample
from pysysmon.monitor import SystemMonitor


def _cpu_sample(
    user=0, nice=0, system=0, idle=0, iowait=0, irq=0, softirq=0, steal=0
) -> CpuSample:
    return CpuSample(user, nice, system, idle, iowait, irq, softirq, steal)


class FakeSource:
    """Counter source replaying scripted samples; the last one repeats."""

    def __init__(self, cpu_samples=None, net_samples=None) -> None:
        self.cpu_samples = list(cpu_samples or [_cpu_sample(idle=100)])
        self.net_samples = list(net_samples or [NetworkSample(0, 0)])
        self.memory = MemorySnapshot(total=8 * 1024**3, available=6 * 1024**3)
        self.disk_total = 100 * 1024**3
        self.disk_available = 40 * 1024**3
        self.failing: set[str] = set()
        self.calls: list[str] = []

    def _next(self, samples):
        return samples.pop(0) if len(samples) > 1 else samples[0]

    def _check(self, family: str) -> None:
        self.calls.append(family)
        if family in self.failing:
            raise SampleError(family, "unreadable")

    def read_cpu(self) -> CpuSample:
        self._check("cpu")
        return self._next(self.cpu_samples)

    def read_network(self) -> NetworkSample:
        self._check("network")
        return self._next(self.net_samples)

    def read_memory(self) -> MemorySnapshot:
        self._check("memory")
        return self.memory

    def read_disk(self, path: str) -> DiskSnapshot:
        self._check("disk")
        return DiskSnapshot(path=path, total=self.disk_total, available=self.disk_available)


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeTicker:
    """Ticker that advances a FakeClock instead of sleeping."""

    def __init__(self, clock: FakeClock | None = None, stop_after: int | None = None) -> None:
        self.clock = clock
        self.stop_after = stop_after
        self.waits: list[float] = []
        self.stopped = False

    def wait(self, seconds: float) -> bool:
        self.waits.append(seconds)
        if self.clock is not None:
            self.clock.advance(seconds)
        if self.stop_after is not None and len(self.waits) >= self.stop_after:
            self.stopped = True
        return self.stopped

    def stop(self) -> None:
        self.stopped = True


@pytest.fixture
def source() -> FakeSource:
    return FakeSource()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cpu():
    """Build a CpuSample from keyword tick counts, defaulting the rest to zero."""
    return _cpu_sample


@pytest.fixture
def make_source():
    """Factory for FakeSource with scripted samples."""
    return FakeSource


@pytest.fixture
def make_ticker(clock):
    """Factory for a FakeTicker driving the shared fake clock."""

    def factory(stop_after: int | None = None) -> FakeTicker:
        return FakeTicker(clock, stop_after=stop_after)

    return factory


@pytest.fixture
def make_app(make_source):
    """Factory for a MonitorApp over a fake source."""

    def factory(source: FakeSource | None = None, interval: float = 1.0) -> MonitorApp:
        return MonitorApp(SystemMonitor(source or make_source(), interval=interval))

    return factory
