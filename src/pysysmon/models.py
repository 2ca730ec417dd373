"""Data models for pysysmon."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(slots=True, frozen=True)
class CpuSample:
    """Cumulative CPU tick counters since boot, in kernel clock ticks."""

    user: int
    nice: int
    system: int
    idle: int
    iowait: int
    irq: int
    softirq: int
    steal: int

    @property
    def total(self) -> int:
        """Sum of all eight tick counters."""
        return (
            self.user
            + self.nice
            + self.system
            + self.idle
            + self.iowait
            + self.irq
            + self.softirq
            + self.steal
        )


@dataclass(slots=True, frozen=True)
class NetworkSample:
    """Byte totals summed over every non-loopback interface."""

    recv_bytes: int
    sent_bytes: int


@dataclass(slots=True, frozen=True)
class MemorySnapshot:
    """Point-in-time memory figures, in bytes."""

    total: int
    available: int

    @property
    def used(self) -> int:
        return self.total - self.available

    @property
    def percent(self) -> float:
        if self.total <= 0:
            return 0.0
        return self.used / self.total * 100.0


@dataclass(slots=True, frozen=True)
class DiskSnapshot:
    """Capacity of the filesystem mounted at ``path``, in bytes."""

    path: str
    total: int
    available: int

    @property
    def used(self) -> int:
        return self.total - self.available

    @property
    def percent(self) -> float:
        if self.total <= 0:
            return 0.0
        return self.used / self.total * 100.0


@dataclass(slots=True)
class CpuRateState:
    """Previous CPU totals carried between samples."""

    prev_total: int = 0
    prev_idle: int = 0
    baselined: bool = False


@dataclass(slots=True)
class NetworkRateState:
    """Previous network byte totals carried between samples."""

    prev_recv: int = 0
    prev_sent: int = 0
    baselined: bool = False


@dataclass(slots=True, frozen=True)
class NetworkRates:
    """Throughput over the last interval, in KB/s."""

    download_kbs: float
    upload_kbs: float


@dataclass(slots=True)
class SystemSnapshot:
    """One refresh worth of computed values.

    A family whose counters could not be read is ``None`` for this cycle and
    the reason is appended to ``errors``.
    """

    timestamp: datetime
    cpu_percent: float | None
    memory: MemorySnapshot | None
    disk: DiskSnapshot | None
    network: NetworkRates | None
    errors: list[str] = field(default_factory=list)
