"""Test the Spotify desktop window-title source"""

from types import SimpleNamespace

import pytest

from queuemirror import music_windows, win32
from queuemirror.errors import NoLocalProcess
from queuemirror.models import TrackRef
from queuemirror.music_windows import parse_window_title


class TestParseWindowTitle:
    def test_paused_sentinel(self):
        assert parse_window_title("Spotify Premium") == TrackRef("Spotify Premium", "Playback paused")

    def test_splits_on_first_separator(self):
        assert parse_window_title("Daft Punk - One More Time") == TrackRef("Daft Punk", "One More Time")
        assert parse_window_title("Artist - Song - Radio Edit") == TrackRef("Artist", "Song - Radio Edit")

    def test_hyphen_without_spaces_is_not_a_separator(self):
        assert parse_window_title("Jay-Z") == TrackRef("Jay-Z", "N/A")

    def test_empty_title(self):
        assert parse_window_title("") == TrackRef("N/A", "N/A")


def _proc(pid, name):
    return SimpleNamespace(info={"pid": pid, "name": name})


@pytest.fixture
def fake_system(monkeypatch):
    procs = [_proc(10, "explorer.exe"), _proc(42, "Spotify.exe"), _proc(43, "Spotify.exe")]
    windows = [
        win32.WindowInfo(hwnd=1, pid=10, title="Downloads", visible=True),
        win32.WindowInfo(hwnd=2, pid=42, title="", visible=False),
        win32.WindowInfo(hwnd=3, pid=43, title="Artist X - Song Y", visible=True),
    ]
    monkeypatch.setattr(music_windows.psutil, "process_iter", lambda attrs=None: list(procs))
    monkeypatch.setattr(music_windows.win32, "enum_windows", lambda: list(windows))
    return SimpleNamespace(procs=procs, windows=windows)


class TestPlayerWindowTitle:
    def test_finds_titled_player_window(self, fake_system):
        assert music_windows.player_window_title("Spotify.exe") == "Artist X - Song Y"
        assert music_windows.get_local_track() == TrackRef("Artist X", "Song Y")

    def test_process_name_is_case_insensitive(self, fake_system):
        assert music_windows.player_window_title("spotify.EXE") == "Artist X - Song Y"

    def test_not_running(self, fake_system):
        fake_system.procs[:] = [_proc(10, "explorer.exe")]
        with pytest.raises(NoLocalProcess):
            music_windows.player_window_title("Spotify.exe")

    def test_running_without_window(self, fake_system):
        fake_system.windows.pop()
        with pytest.raises(NoLocalProcess):
            music_windows.player_window_title("Spotify.exe")
