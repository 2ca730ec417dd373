"""Delta-based rate computation for monotonic counters.

Both functions mutate the given state in place. A fresh (unbaselined) state
is only seeded by the first sample and the functions return zero for it, so
no figure is ever derived from the implicit zero baseline. Counter
regressions (wraparound, reboot, interface reset) never produce negative
values.
"""

import logging

from pysysmon.models import CpuRateState, CpuSample, NetworkRates, NetworkRateState, NetworkSample

logger = logging.getLogger(__name__)

BYTES_PER_KB = 1024


def compute_cpu_usage_percent(sample: CpuSample, state: CpuRateState) -> float:
    """
    Compute the CPU busy percentage since the previous sample.

    Args:
        sample: Freshly read CPU tick counters.
        state: Previous totals, updated in place with this sample.

    Returns:
        Busy percentage in [0, 100]. 0.0 for the seeding sample, for a
        zero-length interval and after a counter regression.
    """
    total = sample.total
    idle = sample.idle

    if not state.baselined:
        logger.debug("Seeding CPU baseline: total=%d idle=%d", total, idle)
        state.prev_total = total
        state.prev_idle = idle
        state.baselined = True
        return 0.0

    delta_total = total - state.prev_total
    delta_idle = idle - state.prev_idle

    state.prev_total = total
    state.prev_idle = idle

    if delta_total < 0 or delta_idle < 0:
        logger.debug("CPU counters went backwards, re-baselining")
        return 0.0
    if delta_total == 0:
        return 0.0

    usage = (1.0 - delta_idle / delta_total) * 100.0
    return min(max(usage, 0.0), 100.0)


def _rate(current: int, previous: int, interval_seconds: float) -> float:
    delta = current - previous
    if delta <= 0:
        return 0.0
    return delta / (BYTES_PER_KB * interval_seconds)


def compute_network_rates(
    sample: NetworkSample,
    state: NetworkRateState,
    interval_seconds: float,
) -> NetworkRates:
    """
    Compute download and upload throughput in KB/s.

    Args:
        sample: Aggregate byte totals across non-loopback interfaces.
        state: Previous totals, updated in place with this sample.
        interval_seconds: Wall-clock time elapsed since the previous sample.

    Returns:
        NetworkRates. Both directions are 0.0 for the seeding sample and for
        a non-positive interval; a direction whose counter regressed is 0.0.
    """
    if not state.baselined:
        logger.debug(
            "Seeding network baseline: recv=%d sent=%d",
            sample.recv_bytes,
            sample.sent_bytes,
        )
        state.prev_recv = sample.recv_bytes
        state.prev_sent = sample.sent_bytes
        state.baselined = True
        return NetworkRates(download_kbs=0.0, upload_kbs=0.0)

    if interval_seconds <= 0:
        download = upload = 0.0
    else:
        download = _rate(sample.recv_bytes, state.prev_recv, interval_seconds)
        upload = _rate(sample.sent_bytes, state.prev_sent, interval_seconds)

    if sample.recv_bytes < state.prev_recv or sample.sent_bytes < state.prev_sent:
        logger.debug("Network counters went backwards, re-baselining")

    state.prev_recv = sample.recv_bytes
    state.prev_sent = sample.sent_bytes
    return NetworkRates(download_kbs=download, upload_kbs=upload)
