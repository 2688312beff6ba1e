from __future__ import annotations

import logging
import os
import sys
import threading
from typing import Optional, TextIO

from colorama import Fore, Style

from .models import ScanResult

DEFAULT_LOG_PATH = "scan_results.txt"


def decode_banner(banner: bytes) -> str:
    # keep text banners verbatim; undecodable bytes become \xNN instead of vanishing
    return banner.decode("utf-8", errors="backslashreplace")


def format_record(r: ScanResult, highlight: bool = False) -> str:
    head = f"[Thread {r.worker_id}] Port {r.port} OPEN"
    if highlight:
        head = f"{Fore.GREEN}{head}{Style.RESET_ALL}"

    line = head
    if r.banner:
        line += f" - banner: {decode_banner(r.banner)}"
    if r.service:
        line += f" ({r.service})"
    return line


class _ConsoleFormatter(logging.Formatter):
    def __init__(self, encoding: Optional[str] = None):
        super().__init__()
        self.encoding = encoding

    def format(self, record: logging.LogRecord) -> str:
        line = format_record(record.scan_result, highlight=True)
        if self.encoding:
            # characters the console can't show become escapes rather than a dropped record
            line = line.encode(self.encoding, errors="backslashreplace").decode(self.encoding)
        return line


class _PlainFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        return format_record(record.scan_result)


class ResultSink:
    """
    Writes each open-port record to the console and to the results log.

    Both writes happen under one lock, so a record is never split or
    interleaved with another, and the log is flushed before the lock is
    released. Records are written as they arrive; nothing is batched.
    """

    def __init__(
        self,
        log_path: str = DEFAULT_LOG_PATH,
        console: Optional[TextIO] = None,
        name: str = "connscan.results",
    ):
        self.log_path = log_path
        self.console = console
        self.emitted = 0
        self._lock = threading.Lock()
        self._logger = logging.getLogger(name)
        self._logger.setLevel(logging.INFO)
        # scan records are not diagnostics; keep them out of the root handlers
        self._logger.propagate = False

    def open(self) -> "ResultSink":
        # Drop handlers left over from an earlier sink with the same name
        self._remove_handlers()

        parent = os.path.dirname(self.log_path)
        if parent:
            os.makedirs(parent, exist_ok=True)

        fh = logging.FileHandler(self.log_path, mode="w", encoding="utf-8")
        fh.setFormatter(_PlainFormatter())
        stream = self.console if self.console is not None else sys.stdout
        sh = logging.StreamHandler(stream)
        sh.setFormatter(_ConsoleFormatter(getattr(stream, "encoding", None)))

        self._logger.addHandler(sh)
        self._logger.addHandler(fh)
        return self

    def emit(self, result: ScanResult) -> None:
        with self._lock:
            # both handlers flush inside emit()
            self._logger.info("port %d open", result.port, extra={"scan_result": result})
            self.emitted += 1

    def close(self) -> None:
        with self._lock:
            self._remove_handlers()

    def _remove_handlers(self) -> None:
        for h in list(self._logger.handlers):
            self._logger.removeHandler(h)
            h.close()

    def __enter__(self) -> "ResultSink":
        return self.open()

    def __exit__(self, *exc) -> None:
        self.close()
