# queuemirror/debug.py
import os
import re
import time
from pathlib import Path

_DEBUG = os.getenv("QM_DEBUG") == "1"
_LOG_PATH = Path(os.getenv("QM_DATA_DIR", str(Path.home() / ".queuemirror"))).expanduser() / "debug.log"

# Tokens end up in error strings from requests; never write them out
_BEARER = re.compile(r"(Bearer\s+)[A-Za-z0-9._\-]+")


def redact(message: str) -> str:
    return _BEARER.sub(r"\1<token>", message)


def debug_log(message: str) -> None:
    if not _DEBUG:
        return

    message = redact(message)
    ts = time.strftime("%Y-%m-%d %H:%M:%S")
    try:
        _LOG_PATH.parent.mkdir(parents=True, exist_ok=True)
        with _LOG_PATH.open("a", encoding="utf-8") as f:
            f.write(f"[{ts}] {message}\n")
    except OSError:
        pass

    print(f"[DEBUG] {message}")
