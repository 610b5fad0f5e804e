# voicequeue/core/event_queue.py
from __future__ import annotations

import logging
import queue
import threading
from typing import Any, Protocol

from voicequeue.core.events import RawVoiceUpdate, VoiceStateEvent, VoiceStateEventType
from voicequeue.core.state import UserVoiceState, VoiceStateCache

log = logging.getLogger(__name__)


class EventSink(Protocol):
    def put(self, item: Any) -> Any: ...


class VoiceStateEventQueue:
    """
    Turns raw voice state updates into JOIN / LEAVE / LEAVE_UNKNOWN_CHANNEL /
    SETTING_UPDATE events.

    The platform only says where a user is now. We remember where each user
    was last seen, which is enough to tell:
    - join (no memory, now in a channel)
    - leave (remembered, now in no channel)
    - setting update (remembered, same channel)
    - move (remembered, other channel) -> LEAVE old channel, then JOIN new one

    handle() may be called from several threads. One lock covers the cache
    and the pushes to `out` for the whole call, so a bounded sink blocks
    handle() until the consumer catches up.

    Cache writes also take a short read lock, which is all the read helpers
    need. They never wait on a handle() stuck behind a full sink, and they
    already see the location the pending events describe.
    """

    def __init__(self, out: EventSink | None = None):
        self.out: EventSink = out if out is not None else queue.Queue()
        self._cache = VoiceStateCache()
        self._lock = threading.Lock()
        self._read_lock = threading.Lock()

    # ---------------- read helpers ----------------

    def location_of(self, user_id: str) -> UserVoiceState | None:
        with self._read_lock:
            return self._cache.get(user_id)

    def tracked_users(self) -> dict[str, UserVoiceState]:
        with self._read_lock:
            return self._cache.snapshot()

    def __len__(self) -> int:
        with self._read_lock:
            return len(self._cache)

    # ---------------- classification ----------------

    def handle(self, update: RawVoiceUpdate) -> list[VoiceStateEvent]:
        """
        Classify one update, push the resulting event(s) to `out`.
        Returns the pushed events in order.
        """
        with self._lock:
            events = self._classify(update)
            for ev in events:
                log.debug(
                    "%s user=%s guild=%s channel=%s",
                    ev.kind.name, ev.user_id, ev.guild_id, ev.channel_id,
                )
                self.out.put(ev)
            return events

    def _classify(self, update: RawVoiceUpdate) -> list[VoiceStateEvent]:
        user_id = update.user_id
        cached = self._cache.get(user_id)

        # ---------- not in a channel anymore ----------
        if not update.channel_id:
            if cached is None:
                return [self._event(VoiceStateEventType.LEAVE_UNKNOWN_CHANNEL, update)]

            with self._read_lock:
                self._cache.remove(user_id)
            return [self._event(VoiceStateEventType.LEAVE, update, channel_id=cached.channel_id)]

        # ---------- joined, moved, or changed a setting ----------
        if cached is None:
            with self._read_lock:
                self._cache.set(user_id, update.guild_id, update.channel_id)
            return [self._event(VoiceStateEventType.JOIN, update)]

        if cached.channel_id == update.channel_id:
            return [self._event(VoiceStateEventType.SETTING_UPDATE, update)]

        log.debug("move user=%s %s -> %s", user_id, cached.channel_id, update.channel_id)

        # The update only describes the new channel, so the leave half gets
        # a fabricated update built from the cached location.
        left = RawVoiceUpdate(
            user_id=user_id,
            guild_id=cached.guild_id,
            channel_id=cached.channel_id,
            synthetic=True,
        )

        with self._read_lock:
            self._cache.set(user_id, update.guild_id, update.channel_id)
        return [
            self._event(VoiceStateEventType.LEAVE, left),
            self._event(VoiceStateEventType.JOIN, update),
        ]

    @staticmethod
    def _event(
        kind: VoiceStateEventType,
        update: RawVoiceUpdate,
        *,
        channel_id: str | None = None,
    ) -> VoiceStateEvent:
        return VoiceStateEvent(
            kind=kind,
            guild_id=update.guild_id,
            channel_id=update.channel_id if channel_id is None else channel_id,
            user_id=update.user_id,
            original_update=update,
        )
