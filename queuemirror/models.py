# queuemirror/models.py
from dataclasses import dataclass

NA = "N/A"


@dataclass(frozen=True)
class TrackRef:
    artist: str
    title: str

    def label(self) -> str:
        return f"{self.artist} - {self.title}"


EMPTY_TRACK = TrackRef(NA, NA)
ERROR_TRACK = TrackRef("Spotify unreachable", "Retrying")


@dataclass(frozen=True)
class PlaybackSnapshot:
    current: TrackRef = EMPTY_TRACK
    next: TrackRef = EMPTY_TRACK
    queue1: TrackRef = EMPTY_TRACK
    queue2: TrackRef = EMPTY_TRACK

    @classmethod
    def error_marker(cls, current: TrackRef) -> "PlaybackSnapshot":
        # Keep what is really audible, flag the outage in the "next" slot
        return cls(current=current or EMPTY_TRACK, next=ERROR_TRACK)

    def fields(self) -> dict:
        return {
            "current_title": self.current.title,
            "current_artist": self.current.artist,
            "next_title": self.next.title,
            "next_artist": self.next.artist,
            "queue1_title": self.queue1.title,
            "queue1_artist": self.queue1.artist,
            "queue2_title": self.queue2.title,
            "queue2_artist": self.queue2.artist,
        }


@dataclass(frozen=True)
class Credential:
    token: str
    created_at: float

    def age(self, now: float) -> float:
        return max(0.0, now - self.created_at)


@dataclass(frozen=True)
class TargetHandle:
    hwnd: int

    def __str__(self) -> str:
        return f"0x{self.hwnd:08X}"
