"""System metrics sampler for the status display."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import socket
import time
from typing import Generic, TypeVar

import psutil

from connectcheck_oled.config import SamplerConfig

logger = logging.getLogger(__name__)

NO_NETWORK = "No Network"
BYTES_PER_GB = 1024**3

T = TypeVar("T")


@dataclass(frozen=True)
class ReadOutcome(Generic[T]):
    """Result of one metric read: the value to show and why it is a fallback, if it is."""

    value: T
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class SystemSnapshot:
    """One reading of every monitored metric."""

    ip_address: str
    cpu_temp_celsius: float
    cpu_load_percent: float
    disk_used_bytes: int
    disk_total_bytes: int
    sampled_at: float = field(default_factory=time.time)

    @property
    def disk_used_gb(self) -> float:
        return self.disk_used_bytes / BYTES_PER_GB

    @property
    def disk_total_gb(self) -> float:
        return self.disk_total_bytes / BYTES_PER_GB


def read_ip_address(host: str, port: int, timeout: float) -> ReadOutcome[str]:
    """Resolve the local source address of the default route via a UDP connect."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.settimeout(timeout)
            sock.connect((host, port))
            address = sock.getsockname()[0]
    except OSError as exc:
        return ReadOutcome(NO_NETWORK, f"probe failed: {exc}")
    if not address or address == "0.0.0.0":
        return ReadOutcome(NO_NETWORK, "no local address bound")
    return ReadOutcome(address)


def read_cpu_temp(path: str) -> ReadOutcome[float]:
    """Read a thermal zone file reported in millidegrees Celsius."""
    try:
        with open(path, "r", encoding="ascii") as handle:
            raw = handle.read().strip()
    except (OSError, UnicodeDecodeError) as exc:
        return ReadOutcome(0.0, f"thermal zone unreadable: {exc}")
    try:
        return ReadOutcome(int(raw) / 1000.0)
    except ValueError:
        return ReadOutcome(0.0, f"thermal zone value not an integer: {raw!r}")


def read_cpu_load(interval: float) -> ReadOutcome[float]:
    """Sample CPU utilisation; blocks for ``interval`` seconds."""
    percent = psutil.cpu_percent(interval=interval)
    return ReadOutcome(max(0.0, min(100.0, float(percent))))


def read_disk_usage(path: str) -> ReadOutcome[tuple[int, int]]:
    """Return (used, total) bytes for the filesystem holding ``path``."""
    try:
        usage = psutil.disk_usage(path)
    except OSError as exc:
        return ReadOutcome((0, 0), f"disk usage unavailable: {exc}")
    return ReadOutcome((int(usage.used), int(usage.total)))


class MetricsSampler:
    """Reads system metrics, substituting a fallback for any field that fails."""

    def __init__(self, config: SamplerConfig) -> None:
        self._config = config
        self._network_up: bool | None = None

    def sample(self) -> SystemSnapshot:
        """Take one snapshot; never raises for an unavailable metric."""
        config = self._config
        ip = read_ip_address(config.probe_host, config.probe_port, config.probe_timeout_seconds)
        temp = read_cpu_temp(config.thermal_path)
        load = read_cpu_load(config.cpu_interval_seconds)
        disk = read_disk_usage(config.disk_path)

        self._note_network(ip)
        for name, outcome in (("cpu_temp", temp), ("disk", disk)):
            if not outcome.ok:
                logger.debug("metric_fallback %s", {"metric": name, "error": outcome.error})

        used, total = disk.value
        return SystemSnapshot(
            ip_address=ip.value,
            cpu_temp_celsius=temp.value,
            cpu_load_percent=load.value,
            disk_used_bytes=used,
            disk_total_bytes=total,
        )

    def _note_network(self, ip: ReadOutcome[str]) -> None:
        if ip.ok == self._network_up:
            return
        self._network_up = ip.ok
        if ip.ok:
            logger.info("network_up %s", {"ip": ip.value})
        else:
            logger.info("network_down %s", {"error": ip.error})


__all__ = [
    "NO_NETWORK",
    "MetricsSampler",
    "ReadOutcome",
    "SystemSnapshot",
    "read_cpu_load",
    "read_cpu_temp",
    "read_disk_usage",
    "read_ip_address",
]
