# queuemirror/sync_loop.py
import time
from typing import Callable, Optional

from . import config, status
from .credentials import CredentialStore
from .debug import debug_log
from .errors import AuthorizationFailure, NoLocalProcess, TransientFailure
from .models import EMPTY_TRACK, Credential, PlaybackSnapshot, TargetHandle, TrackRef
from .reauth import BackgroundReauth
from .renderer import TextRenderer
from .spotify_api import PlaybackSource


class SyncLoop:
    """Owns every piece of loop state; collaborators are only called from tick()."""

    def __init__(
        self,
        credential: Credential,
        target: TargetHandle,
        source: PlaybackSource,
        credentials: CredentialStore,
        reauth: BackgroundReauth,
        renderer: TextRenderer,
        injector,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep,
        tick_seconds: float = config.TICK_SECONDS,
        poll_interval: float = config.POLL_INTERVAL_SECONDS,
        failure_tolerance: int = config.FAILURE_TOLERANCE,
        token_ttl: float = config.TOKEN_TTL_SECONDS,
        lag_poll_limit: int = config.LAG_POLL_LIMIT,
    ):
        self.credential = credential
        self.target = target
        self.source = source
        self.credentials = credentials
        self.reauth = reauth
        self.renderer = renderer
        self.injector = injector
        self._clock = clock
        self._sleep = sleep
        self.tick_seconds = tick_seconds
        self.poll_interval = poll_interval
        self.failure_tolerance = failure_tolerance
        self.token_ttl = token_ttl
        self.lag_poll_limit = lag_poll_limit

        self.ticks = 0
        self.failures = 0
        self.reminder_index = 0
        self.last_pushed: Optional[str] = None
        self.last_delivered_track: Optional[TrackRef] = None
        self.waiting = False

        self._pending_text: Optional[str] = None
        self._pending_track: Optional[TrackRef] = None
        self._warning_countdown = 0
        self._force_poll = False
        self._player_missing = False
        self._reminder_track: Optional[TrackRef] = None
        self._lag_track: Optional[TrackRef] = None
        self._lag_polls = 0

    # Background reauth result
    def _drain_reauth(self) -> None:
        token = self.reauth.take_result()
        if token is None:
            return
        credential = self.credentials.validate(token)
        if credential is None:
            status.error("Auth", "New token was rejected, asking again")
            return
        self.credentials.save(credential)
        self.credential = credential
        self._warning_countdown = 0
        status.ok("Auth", "Token refreshed")

    # Token age
    def token_fraction(self) -> float:
        return self.credential.age(self._clock()) / self.token_ttl

    def _check_token_age(self) -> None:
        fraction = self.token_fraction()

        if fraction >= config.REAUTH_FRACTION and not self.reauth.in_flight:
            self.reauth.dispatch()
            status.info("Auth", "Asking for a fresh token in the background")

        tier = next((t for t in config.WARNING_TIERS if fraction >= t[0]), None)
        if tier is None:
            self._warning_countdown = 0
            return

        if self._warning_countdown <= 0:
            _, level, message = tier
            remaining = max(0, int(self.token_ttl - self.credential.age(self._clock())))
            status.status("Token", f"{message} ({remaining}s left)", level)
            self._warning_countdown = config.WARNING_EVERY_TICKS
        self._warning_countdown -= 1

    def _detect_local_track(self) -> Optional[TrackRef]:
        try:
            track = self.source.local_track()
        except NoLocalProcess as e:
            if not self._player_missing:
                status.warn("Spotify", f"{e}, waiting for it")
                self._player_missing = True
            return None

        if self._player_missing:
            status.ok("Spotify", "Player found again")
            self._player_missing = False
        return track

    def _replace_credential_sync(self) -> None:
        self.credentials.invalidate()
        self.credential = self.credentials.prompt_until_valid()
        self._warning_countdown = 0
        self._force_poll = True

    def _poll(self, local: Optional[TrackRef]) -> Optional[PlaybackSnapshot]:
        self._force_poll = False
        try:
            snapshot = self.source.current_and_queue(self.credential)
        except AuthorizationFailure as e:
            status.error("Auth", str(e))
            self._replace_credential_sync()
            return None
        except TransientFailure as e:
            self.failures += 1
            status.warn("Spotify", f"{e} (failure {self.failures})")
            return PlaybackSnapshot.error_marker(local or EMPTY_TRACK)

        if self.failures:
            status.ok("Spotify", "Connection restored")
        self.failures = 0
        return snapshot

    def _remote_caught_up(self, snapshot: PlaybackSnapshot, local: Optional[TrackRef]) -> bool:
        """False while the API still reports an older track than the player window.

        Gives up after lag_poll_limit polls per local track, since some titles
        never match the API's formatting.
        """
        if (
            local is None
            or self.failures
            or snapshot.current == local
            or local.title == config.PAUSED_MESSAGE
        ):
            self._lag_track = None
            self._lag_polls = 0
            return True

        if local != self._lag_track:
            self._lag_track = local
            self._lag_polls = 0
        self._lag_polls += 1
        if self._lag_polls > self.lag_poll_limit:
            debug_log(f"API still reports {snapshot.current.label()}, showing it for {local.label()}")
            return True
        debug_log(f"API behind the player ({snapshot.current.label()}), re-polling")
        return False

    def _suppressed(self) -> bool:
        return 1 <= self.failures <= self.failure_tolerance

    def _deliver_pending(self) -> bool:
        if not self.injector.is_foreground(self.target):
            if not self.waiting:
                status.warn("Target", "Waiting for the target window to be focused")
                self.waiting = True
            return False

        try:
            self.injector.paste(self._pending_text)
        except Exception as e:
            status.error("Inject", f"Paste failed: {e}")
            self.waiting = True
            return False

        self.last_pushed = self._pending_text
        self.last_delivered_track = self._pending_track
        self._pending_text = None
        self._pending_track = None
        self.waiting = False
        label = self.last_delivered_track.label() if self.last_delivered_track else "unknown track"
        status.ok("Sync", f"Updated: {label}")
        return True

    def tick(self) -> None:
        self.ticks += 1
        self._drain_reauth()
        self._check_token_age()

        local = self._detect_local_track()

        if self.waiting:
            # Same text as before; nothing is re-rendered until it lands
            self._deliver_pending()
            return

        update_needed = local is not None and local != self.last_delivered_track

        due = self.source.seconds_since_request() >= self.poll_interval
        if not (update_needed or due or self._force_poll):
            return

        snapshot = self._poll(local)
        if snapshot is None:
            return

        # Reminder moves once per track change, so re-polls render identical text
        if update_needed and local != self._reminder_track:
            self.reminder_index = (self.reminder_index + 1) % len(self.renderer.reminders)
            self._reminder_track = local

        # update_needed stays set, so the next tick polls again
        if update_needed and not self._remote_caught_up(snapshot, local):
            return

        text = self.renderer.render(snapshot, self.reminder_index)

        if text == self.last_pushed:
            if self.failures == 0:
                self.last_delivered_track = local
        elif self._suppressed():
            debug_log(f"Holding display through failure {self.failures}")
        else:
            self._pending_text = text
            self._pending_track = local
            self._deliver_pending()

    def run(self) -> None:
        status.info("Sync", "Mirroring Spotify… (Ctrl+C to stop)")
        try:
            while True:
                try:
                    self.tick()
                except Exception as e:
                    status.error("Sync", f"Tick failed: {e}")
                    debug_log(f"Tick failed: {e!r}")
                self._sleep(self.tick_seconds)
        finally:
            self.reauth.shutdown()
