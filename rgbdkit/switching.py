"""Choice between shared-memory and network transport for a client."""

from __future__ import annotations

import socket
import threading
from enum import Enum

DEFAULT_FREQUENCY = 20.0


class TransportMode(Enum):
    SHM = "shm"
    RGBD = "rgbd"


class TransportSelector:
    """Decides on shared memory while the server announces this host recently.

    The server counts as online on this host when a host announcement naming
    this host arrived within three check cycles; otherwise the network
    transport is used.
    """

    def __init__(self, hostname: str | None = None, frequency: float = DEFAULT_FREQUENCY) -> None:
        if frequency <= 0:
            raise ValueError(f"frequency must be positive, got {frequency}")
        self.hostname = hostname if hostname is not None else socket.gethostname()
        self.timeout = 3.0 / frequency
        self._last_online: float | None = None
        self._lock = threading.Lock()
        self.mode = TransportMode.RGBD

    def on_host_message(self, hostname: str, now: float) -> bool:
        """Record a host announcement; returns whether it named this host."""
        if hostname != self.hostname:
            return False
        with self._lock:
            self._last_online = now
        return True

    def select(self, now: float) -> TransportMode:
        """The transport to use at time now."""
        with self._lock:
            last = self._last_online
            if last is None or now > last + self.timeout:
                self.mode = TransportMode.RGBD
            else:
                self.mode = TransportMode.SHM
            return self.mode

    def reset(self) -> None:
        """Forget every announcement and fall back to the network transport."""
        with self._lock:
            self._last_online = None
            self.mode = TransportMode.RGBD