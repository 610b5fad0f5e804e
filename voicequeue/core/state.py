# voicequeue/core/state.py
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UserVoiceState:
    guild_id: str
    channel_id: str


class VoiceStateCache:
    """
    Runtime-only memory of where each user is.

    Holds:
    - user_id -> last known (guild_id, channel_id)

    Entries are removed on leave, never stored with an empty channel.
    Not thread-safe: the owning queue serializes access.
    """

    def __init__(self):
        self._users: dict[str, UserVoiceState] = {}

    def get(self, user_id: str) -> UserVoiceState | None:
        return self._users.get(user_id)

    def set(self, user_id: str, guild_id: str, channel_id: str) -> None:
        if not channel_id:
            raise ValueError("cannot cache a user without a channel")
        self._users[user_id] = UserVoiceState(guild_id=guild_id, channel_id=channel_id)

    def remove(self, user_id: str) -> None:
        self._users.pop(user_id, None)

    def snapshot(self) -> dict[str, UserVoiceState]:
        return dict(self._users)

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._users

    def __len__(self) -> int:
        return len(self._users)
