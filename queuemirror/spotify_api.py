# queuemirror/spotify_api.py
import time
from typing import Callable, List, Optional

import requests

from . import config
from .debug import debug_log
from .errors import AuthorizationFailure, NoLocalProcess, TransientFailure
from .models import EMPTY_TRACK, Credential, PlaybackSnapshot, TrackRef

AUTH_STATUS_CODES = {401, 403}


def _track_from_item(item: Optional[dict]) -> TrackRef:
    if not item:
        return EMPTY_TRACK
    name = item.get("name") or ""
    # Episodes carry a show instead of artists
    artists = item.get("artists") or []
    artist = ", ".join(a.get("name", "") for a in artists if a.get("name"))
    if not artist:
        artist = (item.get("show") or {}).get("name", "")
    return TrackRef(artist or EMPTY_TRACK.artist, name or EMPTY_TRACK.title)


def snapshot_from_payload(data: dict, fallback: Callable[[], TrackRef]) -> PlaybackSnapshot:
    if not isinstance(data, dict):
        raise TransientFailure(f"Unexpected queue payload: {type(data).__name__}")

    current_item = data.get("currently_playing")
    if current_item:
        current = _track_from_item(current_item)
    else:
        try:
            current = fallback()
        except NoLocalProcess:
            current = EMPTY_TRACK

    queue: List[TrackRef] = [_track_from_item(item) for item in (data.get("queue") or [])[:3]]
    queue += [EMPTY_TRACK] * (3 - len(queue))

    return PlaybackSnapshot(current=current, next=queue[0], queue1=queue[1], queue2=queue[2])


class PlaybackSource:
    def __init__(
        self,
        local_track: Callable[[], TrackRef],
        session: Optional[requests.Session] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.local_track = local_track
        self._http = session or requests.Session()
        self._http.headers.setdefault("User-Agent", config.USER_AGENT)
        self._clock = clock
        self.last_request_at: Optional[float] = None

    def seconds_since_request(self) -> float:
        if self.last_request_at is None:
            return float("inf")
        return self._clock() - self.last_request_at

    def current_and_queue(self, credential: Credential) -> PlaybackSnapshot:
        try:
            return self._fetch(credential)
        finally:
            # Paces the next poll whatever the outcome
            self.last_request_at = self._clock()

    def _fetch(self, credential: Credential) -> PlaybackSnapshot:
        headers = {"Authorization": f"Bearer {credential.token}"}
        try:
            r = self._http.get(config.QUEUE_URL, headers=headers, timeout=config.REQUEST_TIMEOUT_SECONDS)
        except requests.RequestException as e:
            raise TransientFailure(f"Request failed: {e}") from e

        if r.status_code in AUTH_STATUS_CODES:
            raise AuthorizationFailure(f"Spotify rejected the token (HTTP {r.status_code})")
        if r.status_code == 429:
            raise TransientFailure(f"Rate limited, retry after {r.headers.get('Retry-After', '?')}s")
        if not 200 <= r.status_code < 300:
            raise TransientFailure(f"Spotify returned HTTP {r.status_code}")

        try:
            data = r.json()
        except ValueError as e:
            raise TransientFailure(f"Malformed response: {e}") from e

        snapshot = snapshot_from_payload(data, self.local_track)
        debug_log(f"Polled queue: now={snapshot.current.label()} next={snapshot.next.label()}")
        return snapshot
