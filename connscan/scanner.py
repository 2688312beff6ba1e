from __future__ import annotations

import logging
import threading
import time
from typing import List

from .jobs import JobQueue
from .models import PortRange, ScanConfig, ScanSummary
from .output import ResultSink
from .prober import probe_port

logger = logging.getLogger(__name__)


class ScanAborted(RuntimeError):
    """The worker pool could not be brought up to its requested size."""


def run_worker(
    worker_id: int,
    queue: JobQueue,
    config: ScanConfig,
    sink: ResultSink,
    stop: threading.Event,
) -> None:
    while not stop.is_set():
        port = queue.take_next()
        if port is None:
            break
        r = probe_port(port, config, worker_id)
        if r.is_open:
            sink.emit(r)
    logger.debug("worker %d done", worker_id)


class WorkerPool:
    """
    Fixed set of worker threads pulling from one shared JobQueue.
    """

    def __init__(self, size: int):
        if size < 1:
            raise ValueError("Pool size must be >= 1")
        self.size = size
        self._threads: List[threading.Thread] = []
        self._stop = threading.Event()

    def start(self, queue: JobQueue, config: ScanConfig, sink: ResultSink) -> None:
        for i in range(self.size):
            t = threading.Thread(
                target=run_worker,
                args=(i, queue, config, sink, self._stop),
                name=f"scan-worker-{i}",
                daemon=True,
            )
            try:
                t.start()
            except RuntimeError as e:
                # Out of threads: let the running workers finish their
                # current probe, wait for them, then give up on the scan.
                logger.error("could not start worker %d of %d: %s", i, self.size, e)
                self._stop.set()
                self.join_all()
                raise ScanAborted(f"could only start {i} of {self.size} workers: {e}") from e
            self._threads.append(t)

    def join_all(self) -> None:
        for t in self._threads:
            t.join()


def scan(config: ScanConfig, port_range: PortRange, threads: int, sink: ResultSink) -> ScanSummary:
    """
    Scan every port in port_range with a pool of `threads` workers.

    Open ports are written to `sink` as they are found; this returns once
    every worker has exited.
    """
    queue = JobQueue(port_range)
    pool = WorkerPool(threads)
    emitted_before = sink.emitted

    logger.info(
        "scan start: target=%s ports=%d-%d threads=%d mode=%s timeout=%dms",
        config.target, port_range.start, port_range.end, threads,
        config.mode.value, config.timeout_ms,
    )
    start_all = time.perf_counter()

    pool.start(queue, config, sink)
    pool.join_all()

    elapsed = time.perf_counter() - start_all
    summary = ScanSummary(
        ports_scanned=len(queue),
        open_ports=sink.emitted - emitted_before,
        elapsed_s=elapsed,
    )
    logger.info("scan done: %d open of %d ports in %.2fs", summary.open_ports, summary.ports_scanned, elapsed)
    return summary
