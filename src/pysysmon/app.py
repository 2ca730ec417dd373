"""pysysmon - Main Textual application."""

import logging
import sys

from rich.markup import escape
from textual.app import App, ComposeResult
from textual.containers import Horizontal
from textual.widgets import Footer, Static

from pysysmon.config import MonitorConfig, configure_logging, parse_args
from pysysmon.console import ConsolePrinter, bytes_to_gb
from pysysmon.models import SystemSnapshot
from pysysmon.monitor import SystemMonitor
from pysysmon.sources import create_source

logger = logging.getLogger(__name__)

BAR_WIDTH = 20


def render_bar(percent: float, color: str) -> str:
    """Render a percentage as a fixed-width markup bar."""
    bar_len = int(percent / (100 / BAR_WIDTH))
    bar_len = min(max(bar_len, 0), BAR_WIDTH)
    bar = f"[{color}]█[/{color}]" * bar_len + "[dim]░[/dim]" * (BAR_WIDTH - bar_len)
    # Escaped bracket for the bar container
    return f"\\[{bar}]"


class StatsPanel(Static):
    """Panel showing CPU, memory, storage and network statistics."""

    DEFAULT_CSS = """
    StatsPanel {
        height: auto;
        min-height: 8;
        padding: 1;
        background: $surface;
    }
    """

    def __init__(self, *args, **kwargs) -> None:
        """Initialize StatsPanel."""
        super().__init__(*args, **kwargs)
        self._snapshot: SystemSnapshot | None = None

    @property
    def snapshot(self) -> SystemSnapshot | None:
        return self._snapshot

    def compose(self) -> ComposeResult:
        """Compose the stats layout."""
        yield Horizontal(
            Static(self._get_usage_info(), id="usage-info"),
            Static(self._get_network_info(), id="network-info"),
        )

    def update_stats(self, snapshot: SystemSnapshot) -> None:
        """Update the statistics from a system snapshot."""
        self._snapshot = snapshot
        self.query_one("#usage-info", Static).update(self._get_usage_info())
        self.query_one("#network-info", Static).update(self._get_network_info())

    def _get_usage_info(self) -> str:
        """Get CPU, memory and storage display."""
        snapshot = self._snapshot
        if snapshot is None:
            return "Waiting for first sample..."

        lines = []
        if snapshot.cpu_percent is None:
            lines.append("CPU  no data")
        else:
            cpu = snapshot.cpu_percent
            lines.append(f"CPU  {render_bar(cpu, 'green')} {cpu:6.2f}%")

        mem = snapshot.memory
        if mem is None:
            lines.append("Mem  no data")
        else:
            lines.append(
                f"Mem  {render_bar(mem.percent, 'cyan')} {mem.percent:6.2f}% "
                f"{bytes_to_gb(mem.used):.2f}G/{bytes_to_gb(mem.total):.2f}G"
            )

        disk = snapshot.disk
        if disk is None:
            lines.append("Disk no data")
        else:
            lines.append(
                f"Disk {render_bar(disk.percent, 'yellow')} {disk.percent:6.2f}% "
                f"{bytes_to_gb(disk.used):.2f}G/{bytes_to_gb(disk.total):.2f}G ({escape(disk.path)})"
            )
        return "\n".join(lines)

    def _get_network_info(self) -> str:
        """Get network throughput display."""
        snapshot = self._snapshot
        if snapshot is None:
            return ""
        net = snapshot.network
        if net is None:
            lines = ["Network: no data"]
        else:
            lines = [
                "Network Activity (Total)",
                f"Download: {net.download_kbs:10.2f} KB/s",
                f"Upload:   {net.upload_kbs:10.2f} KB/s",
            ]
        for error in snapshot.errors:
            lines.append(f"[red]{escape(error)}[/red]")
        return "\n".join(lines)


class MonitorApp(App):
    """Main pysysmon dashboard."""

    TITLE = "pysysmon"
    SUB_TITLE = "System Performance Monitor"

    CSS = """
    Screen {
        layout: vertical;
    }

    #stats {
        height: auto;
    }

    Horizontal {
        height: auto;
    }

    #usage-info {
        width: 2fr;
        padding-right: 2;
    }

    #network-info {
        width: 1fr;
        padding-left: 2;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("r", "refresh_now", "Refresh"),
    ]

    def __init__(self, monitor: SystemMonitor) -> None:
        """Initialize the MonitorApp."""
        super().__init__()
        self._monitor = monitor

    @property
    def monitor(self) -> SystemMonitor:
        return self._monitor

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield StatsPanel(id="stats")
        yield Footer()

    def on_mount(self) -> None:
        """Seed the rate baselines and start the refresh timer."""
        self._monitor.prime()
        self.set_interval(self._monitor.interval, self._refresh_snapshot)

    def _refresh_snapshot(self) -> None:
        """Take a sample and push it into the UI."""
        snapshot = self._monitor.sample()
        self.sub_title = f"{snapshot.timestamp:%Y-%m-%d %H:%M:%S}"
        self.query_one("#stats", StatsPanel).update_stats(snapshot)

    def action_refresh_now(self) -> None:
        """Handle refresh action - sample immediately."""
        self._refresh_snapshot()

    def action_quit(self) -> None:
        """Handle quit action."""
        self._monitor.stop()
        self.exit()


def build_monitor(config: MonitorConfig) -> SystemMonitor:
    """Create a SystemMonitor from the parsed configuration."""
    return SystemMonitor(
        create_source(config.source),
        interval=config.interval,
        disk_path=config.disk_path,
    )


def run_console(monitor: SystemMonitor) -> int:
    """Run the plain clear-and-print loop until interrupted."""
    printer = ConsolePrinter(disk_path=monitor.disk_path)
    try:
        monitor.run(printer)
    except KeyboardInterrupt:
        logger.info("Interrupted, exiting")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for pysysmon."""
    config = parse_args(argv)
    configure_logging(config.log_level, config.log_file)
    monitor = build_monitor(config)

    if config.plain:
        return run_console(monitor)

    app = MonitorApp(monitor)
    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
