# queuemirror/target.py
import time
from typing import Callable, Optional

from . import config, status, win32
from .errors import TargetInvalid
from .models import TargetHandle
from .storage import TARGET_HANDLE_FILE, BlobStore


def validate_handle(hwnd: int, enumerable: Callable[[], set] = win32.enumerable_handles) -> TargetHandle:
    """The target hides from normal window listings; anything listed is the wrong window."""
    if not hwnd:
        raise TargetInvalid("No window was in the foreground")
    if hwnd in enumerable():
        raise TargetInvalid(f"Window 0x{hwnd:08X} is an ordinary window, not the target")
    return TargetHandle(hwnd)


class TargetResolver:
    def __init__(
        self,
        blobs: BlobStore,
        foreground: Callable[[], int] = win32.foreground_window,
        enumerable: Callable[[], set] = win32.enumerable_handles,
        exists: Callable[[int], bool] = win32.window_exists,
        input_fn: Callable[[str], str] = input,
        sleep: Callable[[float], None] = time.sleep,
        auto_reuse: bool = config.AUTO_REUSE_TARGET,
        countdown: int = config.CAPTURE_COUNTDOWN_SECONDS,
    ):
        self.blobs = blobs
        self._foreground = foreground
        self._enumerable = enumerable
        self._exists = exists
        self._input = input_fn
        self._sleep = sleep
        self.auto_reuse = auto_reuse
        self.countdown = countdown

    def resolve(self) -> TargetHandle:
        handle = self._reuse_stored()
        if handle is None:
            handle = self.capture()
        self.blobs.write(TARGET_HANDLE_FILE, str(handle.hwnd))
        return handle

    def _accepts_reuse(self, hwnd: int) -> bool:
        if self.auto_reuse:
            # Same window still alive means the host app was not restarted
            return self._exists(hwnd)
        answer = self._input(f"Reuse saved target window 0x{hwnd:08X}? [Y/n] ").strip().lower()
        return answer in {"", "y", "yes"}

    def _reuse_stored(self) -> Optional[TargetHandle]:
        hwnd = self.blobs.read_int(TARGET_HANDLE_FILE)
        if not hwnd:
            return None
        if not self._accepts_reuse(hwnd):
            self.blobs.remove(TARGET_HANDLE_FILE)
            return None
        try:
            handle = validate_handle(hwnd, self._enumerable)
        except TargetInvalid as e:
            status.warn("Target", f"Saved window can't be used: {e}")
            self.blobs.remove(TARGET_HANDLE_FILE)
            return None
        status.ok("Target", f"Reusing window {handle}")
        return handle

    def capture(self) -> TargetHandle:
        while True:
            self._input("Click into the target text field after pressing Enter. ")
            for remaining in range(self.countdown, 0, -1):
                status.info("Target", f"Capturing in {remaining}…")
                self._sleep(1)

            hwnd = self._foreground()
            try:
                handle = validate_handle(hwnd, self._enumerable)
            except TargetInvalid as e:
                status.warn("Target", f"{e}. Let's try again.")
                continue
            status.ok("Target", f"Captured window {handle}")
            return handle
