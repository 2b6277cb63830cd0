# queuemirror/errors.py


class QueueMirrorError(Exception):
    pass


class AuthorizationFailure(QueueMirrorError):
    """Spotify rejected the bearer token (401/403)."""


class TransientFailure(QueueMirrorError):
    """Any other failed poll: network, rate limit, server error, bad payload."""


class TargetInvalid(QueueMirrorError):
    pass


class NoLocalProcess(QueueMirrorError):
    """The Spotify desktop client is not running or has no titled window."""
