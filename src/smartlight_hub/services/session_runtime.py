"""Live connection registry and heartbeat liveness."""

import threading
import time
from collections.abc import Callable
from dataclasses import replace
from datetime import UTC, datetime

from smartlight_hub.domain.sessions import LiveChannel, Session

DEFAULT_LIVE_WINDOW_MS = 30_000


class SessionRuntime:
    """Maps connection ids to the devices they registered as.

    Several connections may claim the same device (for example while a
    device reconnects before the old socket closes). Lookups by device then
    return the most recently bound session. Sessions are only removed by
    `unbind`; `list_live` is a read-only filter over heartbeat age.
    """

    def __init__(
        self,
        live_window_ms: int = DEFAULT_LIVE_WINDOW_MS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.live_window_ms = live_window_ms
        self._clock = clock
        self._sessions: dict[str, Session] = {}
        self._bind_seq = 0
        self._lock = threading.Lock()

    def bind(self, connection_id: str, device_id: str, channel: LiveChannel) -> Session:
        """Create or replace the session for a connection."""
        with self._lock:
            self._bind_seq += 1
            session = Session(
                connection_id=connection_id,
                device_id=device_id,
                channel=channel,
                bind_seq=self._bind_seq,
                last_heartbeat=self._clock(),
                last_seen_at=datetime.now(tz=UTC),
            )
            self._sessions[connection_id] = session
            return session

    def unbind(self, connection_id: str) -> Session | None:
        """Remove the session for a connection, if any."""
        with self._lock:
            return self._sessions.pop(connection_id, None)

    def touch(
        self,
        connection_id: str,
        servo1_angle: int | None = None,
        servo2_angle: int | None = None,
    ) -> Session | None:
        """Record a heartbeat; returns None when the connection never registered."""
        with self._lock:
            session = self._sessions.get(connection_id)
            if session is None:
                return None
            updated = replace(
                session,
                last_heartbeat=max(self._clock(), session.last_heartbeat),
                last_seen_at=datetime.now(tz=UTC),
                servo1_angle=(
                    session.servo1_angle if servo1_angle is None else servo1_angle
                ),
                servo2_angle=(
                    session.servo2_angle if servo2_angle is None else servo2_angle
                ),
            )
            self._sessions[connection_id] = updated
            return updated

    def get(self, connection_id: str) -> Session | None:
        """Return the session for a connection, if bound."""
        with self._lock:
            return self._sessions.get(connection_id)

    def find_by_device(self, device_id: str) -> Session | None:
        """Return the most recently bound session for a device."""
        with self._lock:
            candidates = [
                session
                for session in self._sessions.values()
                if session.device_id == device_id
            ]
        if not candidates:
            return None
        return max(candidates, key=lambda session: session.bind_seq)

    def list_live(self, within_ms: int | None = None) -> list[Session]:
        """Return sessions heard from within the window, oldest binding first."""
        window_ms = self.live_window_ms if within_ms is None else within_ms
        now = self._clock()
        with self._lock:
            sessions = list(self._sessions.values())
        live = [
            session
            for session in sessions
            if (now - session.last_heartbeat) * 1000 <= window_ms
        ]
        return sorted(live, key=lambda session: session.bind_seq)

    def count(self) -> int:
        """Return the number of bound connections."""
        with self._lock:
            return len(self._sessions)
