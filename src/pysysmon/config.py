"""Command-line configuration and logging setup."""

import argparse
import logging
from dataclasses import dataclass

from pysysmon.monitor import MIN_INTERVAL
from pysysmon.sources import SOURCES

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass(slots=True, frozen=True)
class MonitorConfig:
    """Settings for one pysysmon run."""

    interval: float = 1.0
    disk_path: str = "/"
    source: str = "psutil"
    plain: bool = False
    log_level: str = "WARNING"
    log_file: str | None = None


def _interval(value: str) -> float:
    try:
        seconds = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid interval: {value!r}") from None
    if seconds < MIN_INTERVAL:
        raise argparse.ArgumentTypeError(f"interval must be at least {MIN_INTERVAL}s")
    return seconds


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pysysmon",
        description="Terminal monitor for CPU, memory, disk and network usage.",
    )
    parser.add_argument(
        "-i",
        "--interval",
        type=_interval,
        default=1.0,
        help="seconds between refreshes (default: %(default)s)",
    )
    parser.add_argument(
        "-p",
        "--path",
        dest="disk_path",
        default="/",
        help="mount point to report storage for (default: %(default)s)",
    )
    parser.add_argument(
        "--source",
        choices=sorted(SOURCES),
        default="psutil",
        help="where raw counters are read from (default: %(default)s)",
    )
    parser.add_argument(
        "--plain",
        action="store_true",
        help="print a plain text report instead of the dashboard",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default="WARNING",
        type=str.upper,
        help="logging threshold (default: %(default)s)",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="write logs to this file; logging is discarded otherwise",
    )
    return parser


def parse_args(argv: list[str] | None = None) -> MonitorConfig:
    """Parse command-line arguments into a MonitorConfig."""
    args = build_parser().parse_args(argv)
    return MonitorConfig(
        interval=args.interval,
        disk_path=args.disk_path,
        source=args.source,
        plain=args.plain,
        log_level=args.log_level,
        log_file=args.log_file,
    )


def configure_logging(level: str = "WARNING", log_file: str | None = None) -> logging.Handler:
    """
    Attach a handler to the ``pysysmon`` logger.

    Log records go to ``log_file`` when given. Otherwise they are discarded,
    since both presentations own the whole terminal.
    """
    handler: logging.Handler
    if log_file:
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    else:
        handler = logging.NullHandler()

    package_logger = logging.getLogger("pysysmon")
    package_logger.setLevel(level)
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
    package_logger.propagate = False
    return handler
