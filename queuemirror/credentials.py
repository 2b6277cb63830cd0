# queuemirror/credentials.py
import time
import webbrowser
from typing import Callable, Optional

from . import config, status
from .debug import debug_log
from .errors import QueueMirrorError
from .models import Credential
from .spotify_api import PlaybackSource
from .storage import CREDENTIAL_FILE, TOKEN_CREATED_FILE, BlobStore


class CredentialStore:
    def __init__(
        self,
        blobs: BlobStore,
        source: PlaybackSource,
        clock: Callable[[], float] = time.time,
        input_fn: Callable[[str], str] = input,
        open_page: Callable[[str], object] = webbrowser.open,
    ):
        self.blobs = blobs
        self.source = source
        self._clock = clock
        self._input = input_fn
        self._open_page = open_page

    def load(self) -> Optional[Credential]:
        token = self.blobs.read(CREDENTIAL_FILE)
        if not token:
            return None
        created_at = self.blobs.read_float(TOKEN_CREATED_FILE)
        if created_at is None:
            created_at = self._clock()
            self.blobs.write(TOKEN_CREATED_FILE, repr(created_at))
        return Credential(token=token, created_at=created_at)

    def save(self, credential: Credential) -> None:
        self.blobs.write(CREDENTIAL_FILE, credential.token)
        self.blobs.write(TOKEN_CREATED_FILE, repr(credential.created_at))

    def invalidate(self) -> None:
        self.blobs.remove(CREDENTIAL_FILE)
        self.blobs.remove(TOKEN_CREATED_FILE)

    def is_valid(self, credential: Credential) -> bool:
        try:
            self.source.current_and_queue(credential)
        except QueueMirrorError as e:
            debug_log(f"Token validation failed: {e}")
            return False
        return True

    def validate(self, token: str) -> Optional[Credential]:
        """Check a freshly entered token; its TokenClock starts now."""
        token = (token or "").strip()
        if not token:
            return None
        credential = Credential(token=token, created_at=self._clock())
        return credential if self.is_valid(credential) else None

    def load_valid(self) -> Optional[Credential]:
        credential = self.load()
        if credential is None:
            return None
        if self.is_valid(credential):
            return credential
        status.warn("Auth", "Saved token was rejected")
        self.invalidate()
        return None

    def prompt_until_valid(self) -> Credential:
        status.warn("Auth", "A new Spotify token is needed")
        try:
            self._open_page(config.TOKEN_PAGE_URL)
        except Exception as e:
            debug_log(f"Could not open token page: {e}")

        while True:
            token = self._input("Paste Spotify token: ")
            credential = self.validate(token)
            if credential:
                self.save(credential)
                status.ok("Auth", "Token accepted")
                return credential
            status.error("Auth", "Token rejected, try again")
