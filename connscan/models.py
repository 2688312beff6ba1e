from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from enum import Enum
from typing import Optional

MIN_PORT = 1
MAX_PORT = 65535


class ScanMode(Enum):
    FAST = "fast"
    FULL = "full"


class PortStatus(Enum):
    OPEN = "open"
    CLOSED_OR_FILTERED = "closed-or-filtered"


@dataclass(frozen=True)
class PortRange:
    start: int
    end: int

    def __post_init__(self):
        if not (MIN_PORT <= self.start <= MAX_PORT and MIN_PORT <= self.end <= MAX_PORT):
            raise ValueError(f"Ports must be within {MIN_PORT}-{MAX_PORT}: {self.start}-{self.end}")
        if self.start > self.end:
            raise ValueError(f"Invalid port range: {self.start}-{self.end}")

    def __len__(self) -> int:
        return self.end - self.start + 1


@dataclass(frozen=True)
class ScanConfig:
    """
    Read-only settings shared by every worker for the whole scan.
    """
    target: str
    mode: ScanMode = ScanMode.FULL
    timeout_ms: int = 200

    def __post_init__(self):
        try:
            # accept "fast"/"full" as well as ScanMode members
            object.__setattr__(self, "mode", ScanMode(self.mode))
        except ValueError as e:
            raise ValueError(f"Invalid scan mode: {self.mode!r}") from e
        try:
            ipaddress.IPv4Address(self.target)
        except ValueError as e:
            raise ValueError(f"Invalid IPv4 address: {self.target}") from e
        if self.timeout_ms < 1:
            raise ValueError(f"Timeout must be a positive number of ms: {self.timeout_ms}")

    @property
    def timeout_s(self) -> float:
        return self.timeout_ms / 1000.0

    @property
    def reads_banner(self) -> bool:
        return self.mode is ScanMode.FULL


@dataclass(frozen=True)
class ScanResult:
    worker_id: int
    port: int
    status: PortStatus
    banner: Optional[bytes] = None
    service: Optional[str] = None
    elapsed_s: float = 0.0

    @property
    def is_open(self) -> bool:
        return self.status is PortStatus.OPEN


@dataclass(frozen=True)
class ScanSummary:
    ports_scanned: int
    open_ports: int
    elapsed_s: float

    @property
    def ports_per_second(self) -> float:
        return self.ports_scanned / self.elapsed_s if self.elapsed_s > 0 else 0.0
