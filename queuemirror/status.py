# queuemirror/status.py
import colorama
from colorama import Fore, Style

from .debug import debug_log

colorama.just_fix_windows_console()

_COLORS = {
    "ok": Fore.GREEN,
    "info": Fore.CYAN,
    "warn": Fore.YELLOW,
    "error": Fore.RED,
}


def status(tag: str, message: str, level: str = "info") -> None:
    color = _COLORS.get(level, "")
    print(f"{color}[{tag}] {message}{Style.RESET_ALL}")
    debug_log(f"{level.upper()} [{tag}] {message}")


def ok(tag: str, message: str) -> None:
    status(tag, message, "ok")


def info(tag: str, message: str) -> None:
    status(tag, message, "info")


def warn(tag: str, message: str) -> None:
    status(tag, message, "warn")


def error(tag: str, message: str) -> None:
    status(tag, message, "error")
