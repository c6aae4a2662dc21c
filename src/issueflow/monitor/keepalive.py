"""KeepAlive - heartbeat and watchdog threads that keep a workspace session busy."""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from pathlib import Path

logger = logging.getLogger("issueflow.monitor")

HEARTBEAT_INTERVAL = 180
WATCHDOG_INTERVAL = 60
MAX_LOG_LINES = 1000
KEEP_LOG_LINES = 100

HEARTBEAT_MESSAGE = "Hello world, hello boss! I'm waiting for the next instruction."


def truncate_log(path: Path, max_lines: int = MAX_LOG_LINES, keep_lines: int = KEEP_LOG_LINES) -> bool:
    """Keep only the last ``keep_lines`` lines once a log exceeds ``max_lines``.

    Returns:
        True if the file was truncated
    """
    if not path.is_file():
        return False
    lines = path.read_text(encoding="utf-8").splitlines(keepends=True)
    if len(lines) <= max_lines:
        return False
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    tmp_path.write_text("".join(lines[-keep_lines:]), encoding="utf-8")
    tmp_path.replace(path)
    return True


def _stamp() -> str:
    return datetime.now().strftime("%a %b %d %H:%M:%S %Y")


class KeepAlive:
    """Two daemon threads: a heartbeat writer and a watchdog that restarts it."""

    def __init__(
        self,
        log_dir: str | Path,
        heartbeat_interval: float = HEARTBEAT_INTERVAL,
        watchdog_interval: float = WATCHDOG_INTERVAL,
    ) -> None:
        self.log_dir = Path(log_dir)
        self.heartbeat_log = self.log_dir / "keepalive.log"
        self.monitor_log = self.log_dir / "monitor.log"
        self.heartbeat_interval = heartbeat_interval
        self.watchdog_interval = watchdog_interval
        self._stop = threading.Event()
        self._heartbeat: threading.Thread | None = None
        self._watchdog: threading.Thread | None = None
        self._lock = threading.Lock()

    def _append(self, path: Path, line: str) -> None:
        with self._lock:
            truncate_log(path)
            with open(path, "a", encoding="utf-8") as f:
                f.write(line + "\n")

    def _heartbeat_loop(self) -> None:
        while not self._stop.is_set():
            self._append(self.heartbeat_log, f"[{_stamp()}] {HEARTBEAT_MESSAGE}")
            self._stop.wait(self.heartbeat_interval)

    def _watchdog_loop(self) -> None:
        while not self._stop.wait(self.watchdog_interval):
            self.check()

    def _start_heartbeat(self) -> None:
        self._heartbeat = threading.Thread(
            target=self._heartbeat_loop, name="issueflow-heartbeat", daemon=True
        )
        self._heartbeat.start()

    @property
    def heartbeat_alive(self) -> bool:
        return self._heartbeat is not None and self._heartbeat.is_alive()

    def check(self) -> bool:
        """One watchdog pass; restarts the heartbeat if it died.

        Returns:
            True if the heartbeat had to be restarted
        """
        if self.heartbeat_alive:
            self._append(self.monitor_log, f"[{_stamp()}] Keep-alive process is running")
            return False
        logger.warning("Keep-alive heartbeat not running, restarting")
        self._append(
            self.monitor_log, f"[{_stamp()}] WARNING: Keep-alive process not found! Restarting..."
        )
        if not self._stop.is_set():
            self._start_heartbeat()
        return True

    def start(self) -> None:
        """Start both threads."""
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self._stop.clear()
        self._start_heartbeat()
        self._watchdog = threading.Thread(
            target=self._watchdog_loop, name="issueflow-watchdog", daemon=True
        )
        self._watchdog.start()
        logger.info("Keep-alive started, logs in %s", self.log_dir)

    def stop(self, timeout: float | None = 5.0) -> None:
        """Stop both threads and wait for them to exit."""
        self._stop.set()
        for thread in (self._heartbeat, self._watchdog):
            if thread is not None:
                thread.join(timeout)
        logger.info("Keep-alive stopped")

    def wait(self) -> None:
        """Block until :meth:`stop` is called from another thread."""
        self._stop.wait()
