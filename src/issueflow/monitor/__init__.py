"""Monitor - Board status polling and the workspace keep-alive."""

from issueflow.monitor.keepalive import KeepAlive, truncate_log
from issueflow.monitor.monitor import DEFAULT_INTERVAL, StatusMonitor

__all__ = [
    "DEFAULT_INTERVAL",
    "KeepAlive",
    "StatusMonitor",
    "truncate_log",
]
