"""Plain console presentation: clear the screen and print a text report."""

from rich.console import Console

from pysysmon.models import SystemSnapshot

TITLE = "--- Linux System Performance Monitor ---"
NO_DATA = "N/A"


def bytes_to_gb(size: int) -> float:
    """Convert bytes to gigabytes (GiB)."""
    return size / (1024**3)


def format_report(snapshot: SystemSnapshot, disk_path: str = "/") -> str:
    """Render a snapshot as the multi-line text report."""
    lines = [
        TITLE,
        f"Timestamp: {snapshot.timestamp:%a %b %d %H:%M:%S %Y}",
        "",
    ]

    if snapshot.cpu_percent is None:
        lines.append(f"CPU Usage: {NO_DATA}")
    else:
        lines.append(f"CPU Usage: {snapshot.cpu_percent:.2f}%")

    mem = snapshot.memory
    if mem is None:
        lines.append(f"Memory Usage: {NO_DATA}")
    else:
        lines.extend(
            [
                f"Memory Usage: {mem.percent:.2f}%",
                f" - Total: {bytes_to_gb(mem.total):.2f} GB",
                f" - Used: {bytes_to_gb(mem.used):.2f} GB",
                f" - Free: {bytes_to_gb(mem.available):.2f} GB",
            ]
        )

    lines.append("")
    disk = snapshot.disk
    if disk is None:
        lines.append(f"Storage Space ({disk_path}): {NO_DATA}")
    else:
        lines.extend(
            [
                f"Storage Space ({disk.path}): {disk.percent:.2f}%",
                f" - Total: {bytes_to_gb(disk.total):.2f} GB",
                f" - Used: {bytes_to_gb(disk.used):.2f} GB",
                f" - Free: {bytes_to_gb(disk.available):.2f} GB",
            ]
        )

    lines.append("")
    lines.append("Network Activity (Total):")
    net = snapshot.network
    if net is None:
        lines.append(f" - {NO_DATA}")
    else:
        lines.extend(
            [
                f" - Download Speed: {net.download_kbs:.2f} KB/s",
                f" - Upload Speed: {net.upload_kbs:.2f} KB/s",
            ]
        )

    for error in snapshot.errors:
        lines.append(f"! {error}")

    lines.append("")
    lines.append("Press Ctrl+C to exit...")
    return "\n".join(lines)


class ConsolePrinter:
    """Redraws the whole terminal with each new snapshot."""

    def __init__(self, disk_path: str = "/", console: Console | None = None) -> None:
        self._disk_path = disk_path
        self._console = console if console is not None else Console()

    def __call__(self, snapshot: SystemSnapshot) -> None:
        self._console.clear()
        self._console.print(
            format_report(snapshot, self._disk_path),
            markup=False,
            highlight=False,
        )
