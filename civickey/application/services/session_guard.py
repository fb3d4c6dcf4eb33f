"""Admin session inactivity enforcement.

InactivityGuard is the client-side state machine (active -> expired after
the idle threshold, with background/foreground reconciliation).
SessionActivityTracker applies the same rule on the server, per
(uid, token auth_time), using the cache to remember last activity.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

from civickey.application.interfaces.services import ICacheService
from civickey.core.cache_keys import session_activity_key
from civickey.domain.enums import SessionState
from civickey.domain.exceptions import SessionExpiredException

logger = logging.getLogger(__name__)

DEFAULT_IDLE_TIMEOUT = 15 * 60
DEFAULT_ACTIVITY_THROTTLE = 1.0
SIGN_OUT_FAILED_MESSAGE = "Failed to sign out."

# Activity records outlive the idle threshold so an idle gap is still visible.
_ACTIVITY_RECORD_TTL = 7 * 24 * 60 * 60
_EXPIRED = "expired"


def is_idle_expired(last_activity: float, now: float, timeout: float) -> bool:
    """True once timeout seconds or more have elapsed since last_activity."""
    return now - last_activity >= timeout


class InactivityGuard:
    """Signs the admin out after timeout seconds without tracked activity.

    Times are wall-clock seconds from clock(). The pending expiry is an
    event-loop timer; when the app is backgrounded that timer may not run,
    so on_foreground() recomputes the idle time from the last activity
    timestamp instead of trusting the timer.
    """

    def __init__(
        self,
        sign_out: Callable[[], Awaitable[None]],
        *,
        timeout: float = DEFAULT_IDLE_TIMEOUT,
        throttle: float = DEFAULT_ACTIVITY_THROTTLE,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._sign_out = sign_out
        self.timeout = timeout
        self.throttle = throttle
        self._clock = clock
        self._last_activity: float | None = None
        self._last_reset: float | None = None
        self._backgrounded_at: float | None = None
        self._expired = False
        self._timer: asyncio.TimerHandle | None = None
        self._expire_task: asyncio.Task | None = None
        self.error: str | None = None

    @property
    def last_activity(self) -> float | None:
        return self._last_activity

    @property
    def backgrounded_at(self) -> float | None:
        return self._backgrounded_at

    def start(self) -> None:
        """Begin tracking a signed-in session (counts as activity)."""
        self._expired = False
        self.error = None
        now = self._clock()
        self._last_reset = now
        self._reset(now)

    def stop(self) -> None:
        """Stop tracking (sign-out or teardown)."""
        self._cancel_timer()
        self._last_activity = None

    def state(self, now: float | None = None) -> SessionState:
        """Session state at now (defaults to clock())."""
        if self._expired or self._last_activity is None:
            return SessionState.EXPIRED
        now = self._clock() if now is None else now
        if is_idle_expired(self._last_activity, now, self.timeout):
            return SessionState.EXPIRED
        return SessionState.ACTIVE

    def record_activity(self) -> bool:
        """Register a pointer/key/scroll/touch event.

        Resets the idle timer at most once per throttle interval; returns
        True when the timer was reset.
        """
        if self._expired or self._last_activity is None:
            return False
        now = self._clock()
        if self._last_reset is not None and now - self._last_reset <= self.throttle:
            return False
        self._last_reset = now
        self._reset(now)
        return True

    def on_background(self) -> None:
        self._backgrounded_at = self._clock()
        self._cancel_timer()

    async def on_foreground(self) -> SessionState:
        """Reconcile after the app/tab becomes visible again."""
        self._backgrounded_at = None
        if self._expired or self._last_activity is None:
            return SessionState.EXPIRED
        elapsed = self._clock() - self._last_activity
        if elapsed >= self.timeout:
            await self.expire()
            return SessionState.EXPIRED
        self._arm(self.timeout - elapsed)
        return SessionState.ACTIVE

    async def expire(self) -> None:
        """Force expiry and sign out. Sign-out failures become self.error."""
        if self._expired:
            return
        self._expired = True
        self._cancel_timer()
        logger.info("Session expired due to inactivity")
        try:
            await self._sign_out()
        except Exception:
            logger.exception("Sign out after inactivity failed")
            self.error = SIGN_OUT_FAILED_MESSAGE

    def _reset(self, now: float) -> None:
        self._last_activity = now
        self._arm(self.timeout)

    def _arm(self, delay: float) -> None:
        self._cancel_timer()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop (synchronous use): state() still answers from timestamps.
            return
        self._timer = loop.call_later(max(0.0, delay), self._on_timer)

    def _on_timer(self) -> None:
        self._timer = None
        self._expire_task = asyncio.ensure_future(self.expire())

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None


class SessionActivityTracker:
    """Server-side idle check for admin API requests.

    Each request touches (uid, auth_time). A request arriving timeout
    seconds or more after the previous one expires the session for good:
    the key is marked expired and later requests with the same token
    family are rejected until the admin signs in again.
    """

    def __init__(
        self,
        cache: ICacheService,
        *,
        timeout: float = DEFAULT_IDLE_TIMEOUT,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.cache = cache
        self.timeout = timeout
        self._clock = clock

    async def touch(self, uid: str, auth_time: int) -> None:
        """Record activity; raise SessionExpiredException if the session went idle."""
        key = session_activity_key(uid, auth_time)
        now = self._clock()
        last = await self.cache.get(key)
        if last == _EXPIRED:
            raise SessionExpiredException()
        if last is not None and is_idle_expired(float(last), now, self.timeout):
            await self.cache.set(key, _EXPIRED, ttl=_ACTIVITY_RECORD_TTL)
            logger.info("Admin session expired due to inactivity: uid=%s", uid)
            raise SessionExpiredException()
        await self.cache.set(key, now, ttl=_ACTIVITY_RECORD_TTL)

    async def end(self, uid: str, auth_time: int) -> None:
        """Mark a session as ended (explicit sign-out)."""
        await self.cache.set(
            session_activity_key(uid, auth_time), _EXPIRED, ttl=_ACTIVITY_RECORD_TTL
        )
