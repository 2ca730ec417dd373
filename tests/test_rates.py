"""Tests for the CPU and network rate computations."""

import math

import pytest

from pysysmon.models import CpuRateState, NetworkRates, NetworkRateState, NetworkSample
from pysysmon.rates import compute_cpu_usage_percent, compute_network_rates


class TestCpuUsage:
    """Tests for compute_cpu_usage_percent."""

    def test_first_sample_seeds_and_reports_zero(self, cpu):
        """A fresh state never reports usage against the implicit zero baseline."""
        state = CpuRateState()
        usage = compute_cpu_usage_percent(cpu(user=900, idle=100), state)

        assert usage == 0.0
        assert state.baselined is True
        assert state.prev_total == 1000
        assert state.prev_idle == 100

    def test_two_sample_scenario(self, cpu):
        """Sample A seeds, sample B yields 87.5% busy."""
        state = CpuRateState()
        sample_a = cpu(user=100, system=50, idle=850)
        sample_b = cpu(user=150, system=70, idle=860)

        assert sample_a.total == 1000
        assert sample_b.total == 1080

        compute_cpu_usage_percent(sample_a, state)
        usage = compute_cpu_usage_percent(sample_b, state)

        assert usage == pytest.approx(87.5)

    def test_state_updated_after_delta(self, cpu):
        """State holds the newest totals after each call."""
        state = CpuRateState()
        compute_cpu_usage_percent(cpu(user=100, idle=900), state)
        compute_cpu_usage_percent(cpu(user=150, idle=950), state)

        assert state.prev_total == 1100
        assert state.prev_idle == 950

    def test_identical_totals_report_exactly_zero(self, cpu):
        """No elapsed ticks gives 0.0, not NaN or a division error."""
        state = CpuRateState()
        sample = cpu(user=10, system=5, idle=85)
        compute_cpu_usage_percent(sample, state)
        usage = compute_cpu_usage_percent(sample, state)

        assert usage == 0.0
        assert not math.isnan(usage)

    def test_all_zero_counters(self, cpu):
        """Zero total ticks is handled without dividing by zero."""
        state = CpuRateState()
        compute_cpu_usage_percent(cpu(), state)
        assert compute_cpu_usage_percent(cpu(), state) == 0.0

    def test_fully_idle_interval(self, cpu):
        """An interval spent entirely idle is 0%."""
        state = CpuRateState()
        compute_cpu_usage_percent(cpu(user=100, idle=100), state)
        assert compute_cpu_usage_percent(cpu(user=100, idle=200), state) == 0.0

    def test_fully_busy_interval(self, cpu):
        """An interval with no idle ticks is 100%."""
        state = CpuRateState()
        compute_cpu_usage_percent(cpu(user=100, idle=100), state)
        assert compute_cpu_usage_percent(cpu(user=200, idle=100), state) == 100.0

    def test_every_counter_contributes_to_total(self, cpu):
        """iowait, irq, softirq and steal count as busy time."""
        state = CpuRateState()
        compute_cpu_usage_percent(cpu(idle=100), state)
        usage = compute_cpu_usage_percent(
            cpu(nice=10, iowait=10, irq=10, softirq=10, steal=10, idle=150), state
        )

        assert usage == pytest.approx(50.0)

    def test_usage_bounded_for_valid_samples(self, cpu):
        """Usage stays within [0, 100] over a run of increasing samples."""
        state = CpuRateState()
        user = idle = 0
        steps = [(0, 10), (10, 0), (3, 7), (50, 50), (1, 99), (99, 1)]
        compute_cpu_usage_percent(cpu(user=user, idle=idle), state)
        for busy, rest in steps:
            user += busy
            idle += rest
            usage = compute_cpu_usage_percent(cpu(user=user, idle=idle), state)
            assert 0.0 <= usage <= 100.0

    def test_counter_regression_clamps_and_rebaselines(self, cpu):
        """A reset counter reports 0.0 and the next interval measures from it."""
        state = CpuRateState()
        compute_cpu_usage_percent(cpu(user=5000, idle=5000), state)

        usage = compute_cpu_usage_percent(cpu(user=10, idle=90), state)
        assert usage == 0.0
        assert state.prev_total == 100
        assert state.prev_idle == 90

        usage = compute_cpu_usage_percent(cpu(user=60, idle=140), state)
        assert usage == pytest.approx(50.0)

    def test_idle_regression_reports_zero(self, cpu):
        """Idle going backwards while the total grows is treated as a reset."""
        state = CpuRateState()
        compute_cpu_usage_percent(cpu(user=100, idle=500), state)
        assert compute_cpu_usage_percent(cpu(user=700, idle=400), state) == 0.0


class TestNetworkRates:
    """Tests for compute_network_rates."""

    def test_first_sample_seeds_and_reports_zero(self):
        """A fresh state returns zero rates instead of a spurious spike."""
        state = NetworkRateState()
        rates = compute_network_rates(NetworkSample(10_000_000, 5_000_000), state, 1.0)

        assert rates == NetworkRates(download_kbs=0.0, upload_kbs=0.0)
        assert state.baselined is True
        assert state.prev_recv == 10_000_000
        assert state.prev_sent == 5_000_000

    def test_one_second_scenario(self):
        """1 MiB down and 512 KiB up over one second."""
        state = NetworkRateState(prev_recv=1_048_576, prev_sent=524_288, baselined=True)
        rates = compute_network_rates(NetworkSample(2_097_152, 1_048_576), state, 1.0)

        assert rates.download_kbs == 1024.0
        assert rates.upload_kbs == 512.0
        assert state.prev_recv == 2_097_152
        assert state.prev_sent == 1_048_576

    def test_rate_averaged_over_interval(self):
        """The delta is divided by the elapsed seconds."""
        state = NetworkRateState(prev_recv=0, prev_sent=0, baselined=True)
        rates = compute_network_rates(NetworkSample(4096, 2048), state, 2.0)

        assert rates.download_kbs == 2.0
        assert rates.upload_kbs == 1.0

    def test_unchanged_totals_report_exactly_zero(self):
        """Equal totals give 0.0 in both directions."""
        state = NetworkRateState(prev_recv=500, prev_sent=700, baselined=True)
        rates = compute_network_rates(NetworkSample(500, 700), state, 1.0)

        assert rates.download_kbs == 0.0
        assert rates.upload_kbs == 0.0

    def test_counter_regression_clamped(self):
        """A counter reset never shows up as a negative speed."""
        state = NetworkRateState(prev_recv=1_000_000, prev_sent=1_000_000, baselined=True)
        rates = compute_network_rates(NetworkSample(100, 2_024_000), state, 1.0)

        assert rates.download_kbs == 0.0
        assert rates.upload_kbs == pytest.approx(1000.0)
        assert state.prev_recv == 100

    def test_zero_interval_reports_zero(self):
        """A zero elapsed interval never divides by zero."""
        state = NetworkRateState(prev_recv=0, prev_sent=0, baselined=True)
        rates = compute_network_rates(NetworkSample(1024, 1024), state, 0.0)

        assert rates == NetworkRates(download_kbs=0.0, upload_kbs=0.0)
        assert state.prev_recv == 1024

    def test_negative_interval_reports_zero(self):
        """A clock going backwards yields zero rates."""
        state = NetworkRateState(prev_recv=0, prev_sent=0, baselined=True)
        rates = compute_network_rates(NetworkSample(1024, 1024), state, -1.0)

        assert rates == NetworkRates(download_kbs=0.0, upload_kbs=0.0)
