# queuemirror/music_windows.py
import time
from typing import Optional

import psutil

from . import config, win32
from .debug import debug_log
from .errors import NoLocalProcess
from .models import NA, TrackRef

_last_miss_log = 0.0


def parse_window_title(title: str) -> TrackRef:
    title = (title or "").strip()
    if title == config.PAUSED_TITLE:
        return TrackRef(title, config.PAUSED_MESSAGE)

    artist, sep, name = title.partition(config.TITLE_SEPARATOR)
    if not sep:
        return TrackRef(title or NA, NA)
    return TrackRef(artist.strip(), name.strip())


def _player_pids(process_name: str) -> set:
    wanted = process_name.lower()
    pids = set()
    for proc in psutil.process_iter(["pid", "name"]):
        try:
            name = (proc.info.get("name") or "").lower()
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            continue
        if name == wanted:
            pids.add(proc.info["pid"])
    return pids


def player_window_title(process_name: Optional[str] = None) -> str:
    process_name = process_name or config.PLAYER_PROCESS_NAME
    pids = _player_pids(process_name)
    if not pids:
        raise NoLocalProcess(f"{process_name} is not running")

    # The player spawns several helper processes; only one owns a titled window
    for window in win32.enum_windows():
        if window.pid in pids and window.title and window.visible:
            return window.title

    global _last_miss_log
    now = time.time()
    if now - _last_miss_log > 30:
        _last_miss_log = now
        debug_log(f"{process_name} running as {sorted(pids)} but no titled window found")
    raise NoLocalProcess(f"{process_name} has no titled window")


def get_local_track() -> TrackRef:
    return parse_window_title(player_window_title())
