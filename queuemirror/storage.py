# queuemirror/storage.py
from pathlib import Path
from typing import Optional

from .debug import debug_log

CREDENTIAL_FILE = "credential.txt"
TARGET_HANDLE_FILE = "target_handle.txt"
TOKEN_CREATED_FILE = "token_created.txt"


class BlobStore:
    """Small text values kept as one file each, so any of them can be removed alone."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def _path(self, name: str) -> Path:
        return self.directory / name

    def read(self, name: str) -> Optional[str]:
        path = self._path(name)
        try:
            value = path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        except OSError as e:
            debug_log(f"Could not read {path}: {e}")
            return None
        return value or None

    def write(self, name: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self._path(name).write_text(value, encoding="utf-8")

    def remove(self, name: str) -> None:
        try:
            self._path(name).unlink()
        except FileNotFoundError:
            pass

    def read_float(self, name: str) -> Optional[float]:
        raw = self.read(name)
        if raw is None:
            return None
        try:
            return float(raw)
        except ValueError:
            debug_log(f"Ignoring malformed {name}: {raw!r}")
            return None

    def read_int(self, name: str) -> Optional[int]:
        raw = self.read(name)
        if raw is None:
            return None
        try:
            return int(raw, 0)
        except ValueError:
            debug_log(f"Ignoring malformed {name}: {raw!r}")
            return None
