from __future__ import annotations

import logging
import socket
from typing import Optional

# One byte short of the classic 512-byte receive buffer.
MAX_BANNER_BYTES = 511

logger = logging.getLogger(__name__)


def grab_banner(sock: socket.socket, timeout: float, n: int = MAX_BANNER_BYTES) -> Optional[bytes]:
    """
    Single bounded read of whatever the service sends right after connect.

    Returns the bytes exactly as received (no stripping), or None when the
    peer sends nothing before the timeout or closes without data.
    """
    sock.settimeout(timeout)
    try:
        data = sock.recv(n)
    except OSError as e:
        logger.debug("banner read failed: %s", e)
        return None
    return data or None
