from __future__ import annotations

import logging
import socket
import time
from typing import Optional

from . import services
from .banner import grab_banner
from .models import PortStatus, ScanConfig, ScanResult

logger = logging.getLogger(__name__)


def probe_port(port: int, config: ScanConfig, worker_id: int = 0) -> ScanResult:
    """
    Connect scan of a single port.

    Never raises for per-port failures: refused, unreachable, timed-out
    connects and socket allocation errors all come back as
    CLOSED_OR_FILTERED. The socket is closed on every path.
    """
    start = time.perf_counter()
    sock: Optional[socket.socket] = None
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        # settimeout bounds connect, send and recv alike
        sock.settimeout(config.timeout_s)
        sock.connect((config.target, port))

        banner = grab_banner(sock, config.timeout_s) if config.reads_banner else None
        return ScanResult(
            worker_id=worker_id,
            port=port,
            status=PortStatus.OPEN,
            banner=banner,
            service=services.lookup(port) or None,
            elapsed_s=round(time.perf_counter() - start, 4),
        )
    except OSError as e:
        logger.debug("port %d closed/filtered: %s", port, e)
        return ScanResult(
            worker_id=worker_id,
            port=port,
            status=PortStatus.CLOSED_OR_FILTERED,
            elapsed_s=round(time.perf_counter() - start, 4),
        )
    finally:
        if sock is not None:
            sock.close()
