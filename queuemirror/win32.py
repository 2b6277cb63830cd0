# queuemirror/win32.py
from typing import List, NamedTuple

try:
    import ctypes
    from ctypes import wintypes

    _user32 = ctypes.windll.user32
    _EnumWindowsProc = ctypes.WINFUNCTYPE(wintypes.BOOL, wintypes.HWND, wintypes.LPARAM)

    _user32.GetForegroundWindow.restype = wintypes.HWND
    _user32.IsWindow.argtypes = [wintypes.HWND]
    _user32.IsWindow.restype = wintypes.BOOL
    _user32.GetWindowThreadProcessId.argtypes = [wintypes.HWND, ctypes.POINTER(wintypes.DWORD)]
except Exception:  # not on Windows
    _user32 = None


class WindowInfo(NamedTuple):
    hwnd: int
    pid: int
    title: str
    visible: bool


def available() -> bool:
    return _user32 is not None


def _window_title(hwnd) -> str:
    length = _user32.GetWindowTextLengthW(hwnd)
    if length == 0:
        return ""
    buf = ctypes.create_unicode_buffer(length + 1)
    _user32.GetWindowTextW(hwnd, buf, length + 1)
    return buf.value.strip()


def enum_windows() -> List[WindowInfo]:
    if _user32 is None:
        return []

    windows = []

    def callback(hwnd, _):
        pid = wintypes.DWORD()
        _user32.GetWindowThreadProcessId(hwnd, ctypes.byref(pid))
        windows.append(WindowInfo(
            hwnd=int(hwnd or 0),
            pid=int(pid.value),
            title=_window_title(hwnd),
            visible=bool(_user32.IsWindowVisible(hwnd)),
        ))
        return True

    _user32.EnumWindows(_EnumWindowsProc(callback), 0)
    return windows


def enumerable_handles() -> set:
    # What a normal window listing shows: visible top-level windows with a title
    return {w.hwnd for w in enum_windows() if w.visible and w.title}


def foreground_window() -> int:
    if _user32 is None:
        return 0
    return int(_user32.GetForegroundWindow() or 0)


def window_exists(hwnd: int) -> bool:
    if _user32 is None or not hwnd:
        return False
    return bool(_user32.IsWindow(hwnd))
