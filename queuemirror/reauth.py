# queuemirror/reauth.py
import subprocess
import sys
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional

from .debug import debug_log

REPROMPT_DELAY_SECONDS = 3.0
DIALOG_COMMAND = [sys.executable, "-m", "ui.token_dialog"]


def prompt_until_entered(
    ask: Callable[[], str],
    delay: float = REPROMPT_DELAY_SECONDS,
    stop: Optional[threading.Event] = None,
) -> str:
    """Ask until a token comes back; returns "" once stop is set."""
    stop = stop or threading.Event()
    while not stop.is_set():
        token = ask()
        if token:
            return token
        if stop.is_set():
            break
        debug_log("Token dialog closed without a token, asking again")
        stop.wait(delay)
    return ""


class BackgroundReauth:
    """At most one token prompt in flight; its result is drained once per tick."""

    def __init__(
        self,
        ask: Optional[Callable[[], str]] = None,
        executor=None,
        popen=subprocess.Popen,
        delay: float = REPROMPT_DELAY_SECONDS,
    ):
        self._ask = ask or self._ask_dialog
        self._executor = executor or ThreadPoolExecutor(max_workers=1)
        self._popen = popen
        self._delay = delay
        self._stop = threading.Event()
        self._lock = threading.Lock()
        self._child = None
        self._future: Optional[Future] = None

    @property
    def in_flight(self) -> bool:
        return self._future is not None

    def _ask_dialog(self) -> str:
        # Qt widgets need their own main thread, so the dialog runs as a child process
        with self._lock:
            if self._stop.is_set():
                return ""
            child = self._popen(DIALOG_COMMAND, stdout=subprocess.PIPE, stderr=subprocess.DEVNULL, text=True)
            self._child = child
        try:
            out, _ = child.communicate()
        finally:
            with self._lock:
                self._child = None
        if child.returncode != 0:
            return ""
        return (out or "").strip()

    def _prompt(self) -> str:
        return prompt_until_entered(self._ask, self._delay, self._stop)

    def dispatch(self) -> bool:
        if self._future is not None or self._stop.is_set():
            return False
        self._future = self._executor.submit(self._prompt)
        return True

    def take_result(self) -> Optional[str]:
        if self._future is None or not self._future.done():
            return None
        future, self._future = self._future, None
        try:
            return (future.result() or "").strip() or None
        except Exception as e:
            debug_log(f"Background token prompt failed: {e}")
            return None

    def shutdown(self) -> None:
        self._stop.set()
        with self._lock:
            child = self._child
        if child is not None and child.poll() is None:
            child.terminate()
        self._executor.shutdown(wait=False, cancel_futures=True)
