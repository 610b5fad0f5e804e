# voicequeue/loader.py
from __future__ import annotations

import queue
import traceback

from voicequeue.cogs.voice_events import VoiceEventsCog
from voicequeue.core.event_queue import VoiceStateEventQueue


async def load_all(bot, settings, event_queue: VoiceStateEventQueue | None = None):
    print("[VoiceQueue] Starting loader...")

    # attach shared deps (so anything holding the bot can reach them)
    bot.settings = settings

    if event_queue is None:
        event_queue = VoiceStateEventQueue(queue.Queue(maxsize=settings.out_queue_maxsize))

    bot.event_queue = event_queue

    # ---------------- VOICE EVENTS ----------------
    try:
        await bot.add_cog(VoiceEventsCog(bot, settings, event_queue))
        print("[VoiceQueue] ✅ VoiceEventsCog loaded")
    except Exception:
        print("[VoiceQueue] ❌ VoiceEventsCog FAILED")
        traceback.print_exc()

    print("[VoiceQueue] Loaded cogs:", ", ".join(bot.cogs.keys()))
    return event_queue
