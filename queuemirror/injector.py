# queuemirror/injector.py
import time
from typing import Callable

import keyboard
from PySide6.QtCore import QMimeData
from PySide6.QtGui import QGuiApplication

from . import config, win32
from .models import TargetHandle

PASTE_KEYS = ("ctrl+a", "ctrl+v")


def _copy_mime(source) -> QMimeData:
    # The clipboard owns its QMimeData and replaces it on setText, so keep a deep copy
    copy = QMimeData()
    if source is not None:
        for fmt in source.formats():
            copy.setData(fmt, source.data(fmt))
    return copy


class Injector:
    """Pastes text into whatever window has focus. It never moves focus itself."""

    def __init__(
        self,
        foreground: Callable[[], int] = win32.foreground_window,
        send_keys: Callable[[str], None] = keyboard.send,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._foreground = foreground
        self._send = send_keys
        self._sleep = sleep

    def is_foreground(self, handle: TargetHandle) -> bool:
        return self._foreground() == handle.hwnd

    def paste(self, text: str) -> None:
        app = QGuiApplication.instance()
        if app is None:
            raise RuntimeError("QGuiApplication must exist before pasting")
        clipboard = QGuiApplication.clipboard()
        previous = _copy_mime(clipboard.mimeData())

        clipboard.setText(text)
        app.processEvents()
        try:
            for combo in PASTE_KEYS:
                self._send(combo)
            # Let the target read the clipboard before it is restored
            self._sleep(config.PASTE_SETTLE_SECONDS)
        finally:
            clipboard.setMimeData(previous)
            app.processEvents()
