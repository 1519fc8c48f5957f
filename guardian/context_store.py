"""
Interaction Context Storage
============================
Thread-safe in-memory store of pending-feedback contexts, one per sender.

An entry exists exactly while its sender owes us a sí/no answer to an
analysis. The feedback path only ever uses take(), which reads and removes
under the lock, so a context is consumed at most once even when two
replies race.

State is process-lifetime and starts empty. An optional TTL bounds memory
for senders who never answer; expired entries behave as absent and are
dropped lazily (or in bulk via purge_expired).
"""

import time
import logging
from threading import Lock

from guardian.schemas import InteractionContext

logger = logging.getLogger(__name__)


class InteractionContextStore:
    """Maps sender_id → InteractionContext."""

    def __init__(self, ttl_seconds: float = 0, clock=time.monotonic):
        """
        Args:
            ttl_seconds: Lifetime of an entry; 0 or less disables expiry
            clock: Monotonic time source (injectable for tests)
        """
        self._ttl = ttl_seconds if ttl_seconds and ttl_seconds > 0 else None
        self._clock = clock
        self._lock: Lock = Lock()
        self._entries: dict[str, tuple[InteractionContext, float]] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _is_expired(self, stored_at: float) -> bool:
        return self._ttl is not None and self._clock() - stored_at >= self._ttl

    # ---------- WRITE ----------

    def put(self, sender_id: str, context: InteractionContext) -> None:
        """Store context for sender_id, replacing any unanswered one."""
        with self._lock:
            if sender_id in self._entries:
                logger.info(f"[CONTEXT {sender_id}] Replacing unanswered feedback context")
            self._entries[sender_id] = (context, self._clock())

    # ---------- READ ----------

    def get(self, sender_id: str) -> InteractionContext | None:
        """Non-destructive read. Returns None if absent or expired."""
        with self._lock:
            entry = self._entries.get(sender_id)
            if entry is None:
                return None
            context, stored_at = entry
            if self._is_expired(stored_at):
                del self._entries[sender_id]
                return None
            return context

    def take(self, sender_id: str) -> InteractionContext | None:
        """Atomically read and remove. A second call returns None."""
        with self._lock:
            entry = self._entries.pop(sender_id, None)
        if entry is None:
            return None
        context, stored_at = entry
        if self._is_expired(stored_at):
            logger.info(f"[CONTEXT {sender_id}] Dropped expired feedback context")
            return None
        return context

    # ---------- HOUSEKEEPING ----------

    def purge_expired(self) -> int:
        """
        Remove every expired entry.

        Returns:
            Number of entries removed
        """
        if self._ttl is None:
            return 0
        with self._lock:
            expired = [sid for sid, (_, stored_at) in self._entries.items()
                       if self._is_expired(stored_at)]
            for sid in expired:
                del self._entries[sid]
        if expired:
            logger.info(f"[CONTEXT] Purged {len(expired)} expired feedback context(s)")
        return len(expired)
