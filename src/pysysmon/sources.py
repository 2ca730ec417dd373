"""Counter sources that read raw statistics from the operating system."""

import logging
import os
from pathlib import Path
from typing import Protocol

import psutil

from pysysmon.errors import SampleError
from pysysmon.models import CpuSample, DiskSnapshot, MemorySnapshot, NetworkSample

logger = logging.getLogger(__name__)

LOOPBACK_IDENTIFIER = "lo"

CPU_FIELDS = ("user", "nice", "system", "idle", "iowait", "irq", "softirq", "steal")

# Kernel clock ticks per second; psutil reports CPU times in seconds.
CLOCK_TICKS = os.sysconf("SC_CLK_TCK") if hasattr(os, "sysconf") else 100


class CounterSource(Protocol):
    """Anything that can produce raw samples for the monitor."""

    def read_cpu(self) -> CpuSample: ...

    def read_network(self) -> NetworkSample: ...

    def read_memory(self) -> MemorySnapshot: ...

    def read_disk(self, path: str) -> DiskSnapshot: ...


def is_loopback(interface: str) -> bool:
    """Return True if the interface name contains the loopback identifier."""
    return LOOPBACK_IDENTIFIER in interface


def parse_proc_stat(text: str) -> CpuSample:
    """
    Parse the aggregate ``cpu`` line of ``/proc/stat``.

    Kernels that report fewer than eight columns get zeros for the missing
    trailing counters. Guest columns are ignored since they are already
    accounted for in ``user`` and ``nice``.
    """
    first_line = text.split("\n", 1)[0]
    parts = first_line.split()
    if not parts or parts[0] != "cpu":
        raise ValueError(f"unexpected first line in /proc/stat: {first_line!r}")

    values = [int(v) for v in parts[1 : 1 + len(CPU_FIELDS)]]
    if len(values) < 4:
        raise ValueError("aggregate cpu line has fewer than 4 counters")
    values.extend([0] * (len(CPU_FIELDS) - len(values)))
    return CpuSample(*values)


def parse_net_dev(text: str) -> NetworkSample:
    """Sum received/transmitted bytes from ``/proc/net/dev``, skipping loopback."""
    recv = sent = 0
    # The first two lines are column headers
    for line in text.splitlines()[2:]:
        if not line.strip():
            continue
        interface, data = line.split(":", 1)
        interface = interface.strip()
        if is_loopback(interface):
            continue
        fields = data.split()
        recv += int(fields[0])
        sent += int(fields[8])
    return NetworkSample(recv_bytes=recv, sent_bytes=sent)


def parse_meminfo(text: str) -> MemorySnapshot:
    """
    Parse ``/proc/meminfo`` into a MemorySnapshot.

    Available memory is ``MemAvailable`` when the kernel reports a positive
    value, otherwise ``MemFree``.
    """
    values: dict[str, int] = {}
    for line in text.splitlines():
        key, _, rest = line.partition(":")
        if key in ("MemTotal", "MemFree", "MemAvailable"):
            values[key] = int(rest.split()[0]) * 1024

    if "MemTotal" not in values:
        raise ValueError("MemTotal missing from /proc/meminfo")

    available = values.get("MemAvailable", 0)
    if available <= 0:
        available = values.get("MemFree", 0)
    return MemorySnapshot(total=values["MemTotal"], available=available)


def statvfs_disk(path: str) -> DiskSnapshot:
    """Read filesystem capacity for ``path`` via statvfs."""
    try:
        stats = os.statvfs(path)
    except OSError as exc:
        raise SampleError("disk", f"statvfs({path}) failed: {exc}") from exc
    return DiskSnapshot(
        path=path,
        total=stats.f_blocks * stats.f_frsize,
        available=stats.f_bavail * stats.f_frsize,
    )


class ProcfsSource:
    """
    Counter source that parses the Linux procfs text files directly.

    Every read opens, reads and closes its file; nothing is held open between
    calls.
    """

    def __init__(self, root: str | Path = "/proc") -> None:
        self._root = Path(root)

    def _read(self, family: str, relative: str) -> str:
        path = self._root / relative
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SampleError(family, f"cannot read {path}: {exc}") from exc

    def read_cpu(self) -> CpuSample:
        text = self._read("cpu", "stat")
        try:
            return parse_proc_stat(text)
        except (ValueError, IndexError) as exc:
            raise SampleError("cpu", f"malformed stat: {exc}") from exc

    def read_network(self) -> NetworkSample:
        text = self._read("network", "net/dev")
        try:
            return parse_net_dev(text)
        except (ValueError, IndexError) as exc:
            raise SampleError("network", f"malformed net/dev: {exc}") from exc

    def read_memory(self) -> MemorySnapshot:
        text = self._read("memory", "meminfo")
        try:
            return parse_meminfo(text)
        except (ValueError, IndexError) as exc:
            raise SampleError("memory", f"malformed meminfo: {exc}") from exc

    def read_disk(self, path: str) -> DiskSnapshot:
        return statvfs_disk(path)


class PsutilSource:
    """Counter source backed by psutil, usable on any platform psutil supports."""

    def read_cpu(self) -> CpuSample:
        try:
            times = psutil.cpu_times()
        except (OSError, psutil.Error) as exc:
            raise SampleError("cpu", str(exc)) from exc
        # Fields a platform does not report count as zero ticks
        ticks = [round(getattr(times, name, 0.0) * CLOCK_TICKS) for name in CPU_FIELDS]
        return CpuSample(*ticks)

    def read_network(self) -> NetworkSample:
        try:
            counters = psutil.net_io_counters(pernic=True)
        except (OSError, psutil.Error) as exc:
            raise SampleError("network", str(exc)) from exc

        recv = sent = 0
        for interface, stats in counters.items():
            if is_loopback(interface):
                continue
            recv += stats.bytes_recv
            sent += stats.bytes_sent
        return NetworkSample(recv_bytes=recv, sent_bytes=sent)

    def read_memory(self) -> MemorySnapshot:
        try:
            mem = psutil.virtual_memory()
        except (OSError, psutil.Error) as exc:
            raise SampleError("memory", str(exc)) from exc
        return MemorySnapshot(total=mem.total, available=mem.available)

    def read_disk(self, path: str) -> DiskSnapshot:
        try:
            usage = psutil.disk_usage(path)
        except (OSError, psutil.Error) as exc:
            raise SampleError("disk", f"disk_usage({path}) failed: {exc}") from exc
        return DiskSnapshot(path=path, total=usage.total, available=usage.free)


SOURCES = {
    "psutil": PsutilSource,
    "procfs": ProcfsSource,
}


def create_source(name: str) -> CounterSource:
    """Instantiate a counter source by its CLI name."""
    try:
        factory = SOURCES[name]
    except KeyError:
        raise ValueError(f"unknown counter source: {name}") from None
    logger.debug("Using %s counter source", name)
    return factory()
