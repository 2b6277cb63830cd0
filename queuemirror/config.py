# queuemirror/config.py
import os
from pathlib import Path


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    return int(_env_float(name, default))


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes", "on"}


# Loop timing
TICK_SECONDS = _env_float("QM_TICK_SECONDS", 2.0)
POLL_INTERVAL_SECONDS = _env_float("QM_POLL_INTERVAL", 45.0)
FAILURE_TOLERANCE = _env_int("QM_FAILURE_TOLERANCE", 3)
# Quick re-polls allowed while the API still reports the previous track
LAG_POLL_LIMIT = _env_int("QM_LAG_POLL_LIMIT", 5)

# Spotify bearer tokens live for one hour
TOKEN_TTL_SECONDS = _env_float("QM_TOKEN_TTL", 3600.0)
REAUTH_FRACTION = 0.86
WARNING_TIERS = (
    (1.00, "error", "Token expired, waiting for a new one"),
    (0.90, "warn", "Token expires soon"),
    (0.75, "info", "Token past three quarters of its lifetime"),
)
WARNING_EVERY_TICKS = 10

# Remote API
QUEUE_URL = "https://api.spotify.com/v1/me/player/queue"
TOKEN_PAGE_URL = os.getenv(
    "QM_TOKEN_PAGE_URL",
    "https://developer.spotify.com/documentation/web-api/reference/get-queue",
)
REQUEST_TIMEOUT_SECONDS = _env_float("QM_REQUEST_TIMEOUT", 10.0)
USER_AGENT = "QueueMirror/1.0"

# Local player
PLAYER_PROCESS_NAME = os.getenv("QM_PLAYER_PROCESS", "Spotify.exe")
TITLE_SEPARATOR = " - "
PAUSED_TITLE = os.getenv("QM_PAUSED_TITLE", "Spotify Premium")
PAUSED_MESSAGE = "Playback paused"

# Target window
CAPTURE_COUNTDOWN_SECONDS = _env_int("QM_CAPTURE_COUNTDOWN", 5)
AUTO_REUSE_TARGET = _env_flag("QM_AUTO_REUSE_TARGET")
PASTE_SETTLE_SECONDS = 0.15

# Persistence
DATA_DIR = Path(os.getenv("QM_DATA_DIR", str(Path.home() / ".queuemirror"))).expanduser()

# Rendering: widths are in pixels as the target app lays them out
FONT_FAMILY = os.getenv("QM_FONT_FAMILY", "Segoe UI")
FONT_PIXEL_SIZE = _env_int("QM_FONT_PIXEL_SIZE", 11)
ELLIPSIS = "..."
FIELD_MAX_WIDTHS = {
    "current_title": 300,
    "current_artist": 300,
    "next_title": 220,
    "next_artist": 220,
    "queue1_title": 160,
    "queue1_artist": 160,
    "queue2_title": 160,
    "queue2_artist": 160,
}

TEMPLATE = (
    "Now playing: {current_title}\n"
    "by {current_artist}\n"
    "Up next: {next_title} - {next_artist}\n"
    "Then: {queue1_title} - {queue1_artist}\n"
    "Then: {queue2_title} - {queue2_artist}\n"
    "{reminder}"
)

REMINDERS = (
    "Song info updates automatically",
    "Queue preview refreshes every minute",
    "Ask in chat to add a song",
)
