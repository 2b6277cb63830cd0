"""Test token persistence and validation"""

import pytest

from conftest import FakeClock
from queuemirror.errors import AuthorizationFailure, TransientFailure
from queuemirror.credentials import CredentialStore
from queuemirror.models import Credential, PlaybackSnapshot
from queuemirror.storage import CREDENTIAL_FILE, TARGET_HANDLE_FILE, TOKEN_CREATED_FILE


class ValidatingSource:
    def __init__(self, good=("good",), transient=()):
        self.good = set(good)
        self.transient = set(transient)
        self.seen = []

    def current_and_queue(self, credential):
        self.seen.append(credential.token)
        if credential.token in self.transient:
            raise TransientFailure("offline")
        if credential.token not in self.good:
            raise AuthorizationFailure("HTTP 401")
        return PlaybackSnapshot()


def make_store(blobs, source=None, inputs=(), clock=None):
    answers = iter(inputs)
    opened = []
    store = CredentialStore(
        blobs,
        source or ValidatingSource(),
        clock=clock or FakeClock(1000.0),
        input_fn=lambda prompt: next(answers),
        open_page=opened.append,
    )
    return store, opened


class TestBlobStore:
    def test_missing_values_read_as_none(self, blobs):
        assert blobs.read(CREDENTIAL_FILE) is None
        assert blobs.read_float(TOKEN_CREATED_FILE) is None
        assert blobs.read_int(TARGET_HANDLE_FILE) is None

    def test_values_are_independent(self, blobs):
        blobs.write(CREDENTIAL_FILE, "tok")
        blobs.write(TARGET_HANDLE_FILE, "0x1F")
        blobs.remove(CREDENTIAL_FILE)

        assert blobs.read(CREDENTIAL_FILE) is None
        assert blobs.read_int(TARGET_HANDLE_FILE) == 0x1F

    def test_malformed_numbers_ignored(self, blobs):
        blobs.write(TOKEN_CREATED_FILE, "yesterday")
        assert blobs.read_float(TOKEN_CREATED_FILE) is None

    def test_remove_missing_is_noop(self, blobs):
        blobs.remove(CREDENTIAL_FILE)


class TestCredentialStore:
    def test_save_and_load_keep_timestamp(self, blobs):
        store, _ = make_store(blobs)
        store.save(Credential("tok", 123.5))

        assert store.load() == Credential("tok", 123.5)

    def test_load_without_timestamp_starts_clock_now(self, blobs):
        store, _ = make_store(blobs)
        blobs.write(CREDENTIAL_FILE, "tok")

        assert store.load() == Credential("tok", 1000.0)
        assert blobs.read_float(TOKEN_CREATED_FILE) == 1000.0

    def test_load_nothing(self, blobs):
        store, _ = make_store(blobs)
        assert store.load() is None

    def test_invalidate_removes_token_and_timestamp(self, blobs):
        store, _ = make_store(blobs)
        store.save(Credential("tok", 1.0))
        store.invalidate()

        assert store.load() is None
        assert blobs.read(TOKEN_CREATED_FILE) is None

    def test_validate_stamps_fresh_token(self, blobs):
        store, _ = make_store(blobs)
        assert store.validate("  good \n") == Credential("good", 1000.0)

    @pytest.mark.parametrize("token", ["bad", "", "   "])
    def test_validate_rejects(self, blobs, token):
        store, _ = make_store(blobs)
        assert store.validate(token) is None

    def test_any_failed_call_means_invalid(self, blobs):
        store, _ = make_store(blobs, ValidatingSource(transient=("flaky",)))
        assert store.validate("flaky") is None

    def test_load_valid_drops_rejected_token(self, blobs):
        store, _ = make_store(blobs)
        store.save(Credential("expired", 5.0))

        assert store.load_valid() is None
        assert blobs.read(CREDENTIAL_FILE) is None

    def test_load_valid_keeps_old_timestamp(self, blobs):
        store, _ = make_store(blobs)
        store.save(Credential("good", 5.0))
        assert store.load_valid() == Credential("good", 5.0)

    def test_prompt_loops_until_accepted(self, blobs):
        source = ValidatingSource()
        store, opened = make_store(blobs, source, inputs=["nope", "", "good"])

        credential = store.prompt_until_valid()

        assert credential == Credential("good", 1000.0)
        assert source.seen == ["nope", "good"]
        assert len(opened) == 1
        assert store.load() == credential
