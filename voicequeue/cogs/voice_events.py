# voicequeue/cogs/voice_events.py
from __future__ import annotations

import asyncio
import logging
import queue
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable

import discord
from discord.ext import commands, tasks

from voicequeue.core.event_queue import VoiceStateEventQueue
from voicequeue.core.events import RawVoiceUpdate, VoiceStateEvent
from voicequeue.ui.formatting import print_event

log = logging.getLogger(__name__)

# discord.VoiceState attributes carried through as opaque extras
VOICE_STATE_FIELDS = (
    "session_id",
    "mute",
    "deaf",
    "self_mute",
    "self_deaf",
    "self_stream",
    "self_video",
    "suppress",
    "afk",
)


def update_from_voice_state(member: discord.Member, after: discord.VoiceState) -> RawVoiceUpdate:
    """
    Build a RawVoiceUpdate from the state discord.py reports after the change.
    The `before` state is deliberately not used: history lives in the queue's cache.
    """
    channel = after.channel
    return RawVoiceUpdate(
        user_id=str(member.id),
        guild_id=str(member.guild.id),
        channel_id=str(channel.id) if channel is not None else "",
        extra={name: getattr(after, name, None) for name in VOICE_STATE_FIELDS},
    )


class VoiceEventsCog(commands.Cog):
    """
    Feeds every voice state update into a VoiceStateEventQueue and drains
    the classified events to `consumer` (prints them by default).

    - updates are handled on a single worker thread, in delivery order
    - the drain loop empties the queue's output every `drain_interval_seconds`
    - a consumer error is logged and draining continues
    """

    def __init__(
        self,
        bot: commands.Bot,
        settings,
        event_queue: VoiceStateEventQueue,
        consumer: Callable[[VoiceStateEvent], None] = print_event,
    ):
        self.bot = bot
        self.event_queue = event_queue
        self.consumer = consumer

        # One worker: updates reach handle() in delivery order, and a full
        # output queue stalls this thread instead of the gateway loop the
        # drain task runs on.
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="voicequeue")
        self._in_flight: set[Future] = set()

        self.drain.change_interval(seconds=settings.drain_interval_seconds)

    async def cog_load(self):
        self.drain.start()

    async def cog_unload(self):
        self.drain.cancel()

        # Drop queued updates, then keep draining until the one being handled
        # finishes, otherwise it can sit forever on a full output queue.
        self._executor.shutdown(wait=False, cancel_futures=True)
        while any(not f.done() for f in list(self._in_flight)):
            self.drain_pending()
            await asyncio.sleep(0.01)
        self.drain_pending()

    # ---------------- voice state updates ----------------

    @commands.Cog.listener()
    async def on_voice_state_update(
        self,
        member: discord.Member,
        before: discord.VoiceState,
        after: discord.VoiceState,
    ):
        update = update_from_voice_state(member, after)
        fut = self._executor.submit(self.event_queue.handle, update)
        self._in_flight.add(fut)
        fut.add_done_callback(self._in_flight.discard)
        await asyncio.wrap_future(fut)

    # ---------------- drain loop ----------------

    def drain_pending(self) -> int:
        """
        Hand every queued event to the consumer. Returns how many were taken.
        """
        out = self.event_queue.out
        count = 0
        while True:
            try:
                ev = out.get_nowait()
            except queue.Empty:
                return count

            count += 1
            try:
                self.consumer(ev)
            except Exception:
                log.exception("consumer failed on %s user=%s", ev.kind.name, ev.user_id)

    @tasks.loop(seconds=0.5)
    async def drain(self):
        self.drain_pending()

    @drain.before_loop
    async def before_drain(self):
        await self.bot.wait_until_ready()

    @drain.after_loop
    async def after_drain(self):
        # flush whatever arrived since the last iteration
        self.drain_pending()
