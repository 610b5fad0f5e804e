# voicequeue/main.py
import asyncio
import logging

import discord
from discord.ext import commands

from voicequeue.config import load_settings
from voicequeue.loader import load_all

logging.basicConfig(level=logging.INFO)


async def run():
    settings = load_settings()

    intents = discord.Intents.none()
    intents.guilds = True
    intents.voice_states = True

    # no commands, the prefix is never used
    bot = commands.Bot(command_prefix=commands.when_mentioned, intents=intents)

    @bot.event
    async def setup_hook():
        await load_all(bot, settings)
        print("[VoiceQueue] setup_hook: cogs loaded ✅")

    @bot.event
    async def on_ready():
        print(f"[VoiceQueue] ✅ ONLINE as {bot.user} | guilds={len(bot.guilds)} | env={settings.env}")

    try:
        await bot.start(settings.token)
    finally:
        if not bot.is_closed():
            await bot.close()
        print("[VoiceQueue] Exit")


def main():
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
