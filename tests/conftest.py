"""Shared fakes for the sync loop and its collaborators"""

import pytest

from queuemirror.models import Credential, PlaybackSnapshot, TargetHandle, TrackRef
from queuemirror.renderer import TextRenderer
from queuemirror.storage import BlobStore

TARGET_HWND = 0x00120ABC


class FakeClock:
    def __init__(self, start=1_700_000_000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FakeSource:
    """Stands in for PlaybackSource: queued outcomes, local track and request pacing."""

    def __init__(self, clock):
        self.clock = clock
        self.local = TrackRef("Artist A", "Track A")
        self.snapshot = PlaybackSnapshot(
            current=TrackRef("Artist A", "Track A"),
            next=TrackRef("Artist B", "Track B"),
        )
        self.results = []
        self.credentials_seen = []
        self.last_request_at = None

    @property
    def calls(self):
        return len(self.credentials_seen)

    def local_track(self):
        if isinstance(self.local, Exception):
            raise self.local
        return self.local

    def seconds_since_request(self):
        if self.last_request_at is None:
            return float("inf")
        return self.clock() - self.last_request_at

    def current_and_queue(self, credential):
        self.credentials_seen.append(credential)
        self.last_request_at = self.clock()
        outcome = self.results.pop(0) if self.results else self.snapshot
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def play(self, artist, title, next_track=None):
        self.local = TrackRef(artist, title)
        self.snapshot = PlaybackSnapshot(
            current=TrackRef(artist, title),
            next=next_track or TrackRef("Artist B", "Track B"),
        )


class FakeInjector:
    def __init__(self):
        self.focused = True
        self.pasted = []

    def is_foreground(self, handle):
        return self.focused and handle.hwnd == TARGET_HWND

    def paste(self, text):
        self.pasted.append(text)


class FakeCredentials:
    def __init__(self, clock, accepted=("good",)):
        self.clock = clock
        self.accepted = set(accepted)
        self.saved = []
        self.invalidated = 0
        self.prompted = 0

    def validate(self, token):
        if token in self.accepted:
            return Credential(token, self.clock())
        return None

    def save(self, credential):
        self.saved.append(credential)

    def invalidate(self):
        self.invalidated += 1

    def prompt_until_valid(self):
        self.prompted += 1
        credential = Credential(f"fresh-{self.prompted}", self.clock())
        self.saved.append(credential)
        return credential


class FakeReauth:
    def __init__(self):
        self.in_flight = False
        self.dispatched = 0
        self.result = None

    def dispatch(self):
        self.dispatched += 1
        self.in_flight = True
        return True

    def finish(self, token):
        self.result = token

    def take_result(self):
        if not self.in_flight or self.result is None:
            return None
        token, self.result = self.result, None
        self.in_flight = False
        return token

    def shutdown(self):
        pass


def char_measure(text):
    # Monospace stand-in for the Qt font metrics: 7px per character
    return len(text) * 7


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def blobs(tmp_path):
    return BlobStore(tmp_path / "data")


@pytest.fixture
def renderer():
    return TextRenderer(char_measure, reminders=("first reminder", "second reminder", "third reminder"))


@pytest.fixture
def source(clock):
    return FakeSource(clock)


@pytest.fixture
def injector():
    return FakeInjector()


@pytest.fixture
def credentials(clock):
    return FakeCredentials(clock)


@pytest.fixture
def reauth():
    return FakeReauth()


@pytest.fixture
def target():
    return TargetHandle(TARGET_HWND)
