# voicequeue/core/events.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping


class VoiceStateEventType(Enum):
    # A user has joined a voice channel.
    JOIN = "join"

    # A user has left a tracked voice channel.
    LEAVE = "leave"

    # A user has left a channel we never saw them join.
    # channel_id is not available, guild_id still is.
    LEAVE_UNKNOWN_CHANNEL = "leave_unknown_channel"

    # A user has changed a setting (mute, deafen, stream...) without switching channels.
    SETTING_UPDATE = "setting_update"


@dataclass(frozen=True)
class RawVoiceUpdate:
    """
    A voice state update as delivered by the platform.

    channel_id == "" means the user is not in any channel.
    extra holds the platform's remaining fields (mute flags, session id...),
    carried along but never read by the classifier.
    """

    user_id: str
    guild_id: str
    channel_id: str
    extra: Mapping[str, Any] = field(default_factory=dict)

    # True only for updates fabricated for the leave half of a move
    synthetic: bool = False


@dataclass(frozen=True)
class VoiceStateEvent:
    """
    Classified voice event.

    guild_id/channel_id are resolved, so they may come from the cache rather
    than from original_update (a LEAVE reports the channel being left).
    """

    kind: VoiceStateEventType
    guild_id: str
    channel_id: str
    user_id: str
    original_update: RawVoiceUpdate

    @property
    def synthetic(self) -> bool:
        return self.original_update.synthetic
