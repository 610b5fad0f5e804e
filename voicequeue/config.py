from __future__ import annotations

from dataclasses import dataclass
import os

from dotenv import load_dotenv


def _normalize_env(v: str | None) -> str:
    """
    Returns 'dev' or 'prod' only.
    Defaults to 'prod' if unset/unknown.
    """
    s = (v or "").strip().lower()
    if s in ("dev", "development", "test", "testing"):
        return "dev"
    if s in ("prod", "production", "main", "live"):
        return "prod"
    return "prod"


@dataclass(frozen=True)
class Settings:
    token: str
    env: str = "prod"  # dev or prod

    # ---------------- Output queue ----------------
    out_queue_maxsize: int = 0             # 0 = unbounded; >0 blocks the gateway loop when full
    drain_interval_seconds: float = 0.5    # how often the consumer drains classified events


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from None
    if value < 0:
        raise RuntimeError(f"{name} must be >= 0, got {value}")
    return value


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise RuntimeError(f"{name} must be > 0, got {value}")
    return value


def load_settings() -> Settings:
    # real env vars win over .env
    load_dotenv(override=False)

    env = _normalize_env(os.getenv("VOICEQUEUE_ENV") or os.getenv("ENV") or os.getenv("APP_ENV"))

    # ---------- Token selection ----------
    # Priority:
    # 1) DISCORD_BOT_TOKEN_DEV / DISCORD_BOT_TOKEN_PROD depending on VOICEQUEUE_ENV
    # 2) DISCORD_BOT_TOKEN / DISCORD_TOKEN
    if env == "dev":
        token = os.getenv("DISCORD_BOT_TOKEN_DEV", "").strip()
    else:
        token = os.getenv("DISCORD_BOT_TOKEN_PROD", "").strip()

    if not token:
        token = (
            os.getenv("DISCORD_BOT_TOKEN", "").strip()
            or os.getenv("DISCORD_TOKEN", "").strip()
        )

    if not token:
        raise RuntimeError(
            "Missing bot token.\n"
            "Set DISCORD_BOT_TOKEN=... (or DISCORD_BOT_TOKEN_DEV / DISCORD_BOT_TOKEN_PROD\n"
            "together with VOICEQUEUE_ENV=dev / prod).\n"
            "Fallback supported: DISCORD_TOKEN."
        )

    return Settings(
        token=token,
        env=env,
        out_queue_maxsize=_env_int("VOICEQUEUE_OUT_MAXSIZE", Settings.out_queue_maxsize),
        drain_interval_seconds=_env_float("VOICEQUEUE_DRAIN_INTERVAL", Settings.drain_interval_seconds),
    )
