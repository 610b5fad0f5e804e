# voicequeue/ui/formatting.py
from voicequeue.core.events import VoiceStateEvent

PREFIX = "[VoiceQueue]"


def fmt_channel(channel_id: str) -> str:
    return channel_id if channel_id else "-"


def format_event(event: VoiceStateEvent) -> str:
    line = (
        f"{PREFIX} {event.kind.name} "
        f"user={event.user_id} guild={event.guild_id} channel={fmt_channel(event.channel_id)}"
    )
    if event.synthetic:
        line += " (synthetic)"
    return line


def print_event(event: VoiceStateEvent) -> None:
    print(format_event(event))
