"""Tests for token storage and refresh."""

import json

import pytest
from spotipy.oauth2 import SpotifyOauthError

from toneprint.errors import AuthExpired
from toneprint.session import CredentialStore, MemoryCredentialStore, TokenSession

NOW = 1_700_000_000


class FakeClock:
    def __init__(self, now=NOW):
        self.now = now

    def __call__(self):
        return self.now


class FakeOAuth:
    def __init__(self, store, refreshed=None, error=None, granted=None):
        self.cache_handler = store
        self.refreshed = refreshed or {"access_token": "fresh", "expires_in": 3600}
        self.error = error
        self.granted = granted
        self.refresh_calls = []

    def refresh_access_token(self, refresh_token):
        self.refresh_calls.append(refresh_token)
        if self.error is not None:
            raise self.error
        return dict(self.refreshed)

    def get_access_token(self, as_dict=True):
        self.cache_handler.save_token_to_cache(self.granted)
        return self.granted["access_token"]


def stored(expires_at=NOW + 3600, refresh_token="r-1"):
    info = {"access_token": "old", "expires_at": expires_at, "token_type": "Bearer"}
    if refresh_token:
        info["refresh_token"] = refresh_token
    return info


def make_session(info=None, clock=None, **oauth_kwargs):
    store = MemoryCredentialStore(info)
    oauth = FakeOAuth(store, **oauth_kwargs)
    return TokenSession(oauth, store, clock=clock or FakeClock()), oauth, store


class TestExpiry:
    def test_expiry_read_from_store(self) -> None:
        session, _, _ = make_session(stored(expires_at=NOW + 100))
        assert session.expires_at == NOW + 100

    def test_expiring_within_margin(self) -> None:
        session, _, _ = make_session(stored(expires_at=NOW + 200))
        assert session.is_expiring()
        assert not session.is_expiring(margin=100)

    def test_fresh_token_is_not_expiring(self) -> None:
        session, _, _ = make_session(stored(expires_at=NOW + 3600))
        assert not session.is_expiring()
        assert session.valid_token() == "old"

    def test_sessions_do_not_share_expiry(self) -> None:
        a, _, _ = make_session(stored(expires_at=NOW + 10))
        b, _, _ = make_session(stored(expires_at=NOW + 9999))
        assert a.is_expiring()
        assert not b.is_expiring()


class TestRefresh:
    def test_refresh_merges_and_persists(self) -> None:
        session, oauth, store = make_session(stored())
        assert session.refresh() == "fresh"

        saved = store.get_cached_token()
        assert oauth.refresh_calls == ["r-1"]
        assert saved["access_token"] == "fresh"
        assert saved["refresh_token"] == "r-1"
        assert saved["token_type"] == "Bearer"
        assert saved["expires_at"] == NOW + 3600
        assert session.expires_at == NOW + 3600

    def test_rotated_refresh_token_is_kept(self) -> None:
        session, _, store = make_session(
            stored(), refreshed={"access_token": "fresh", "refresh_token": "r-2", "expires_at": NOW + 60}
        )
        session.refresh()
        assert store.get_cached_token()["refresh_token"] == "r-2"
        assert session.expires_at == NOW + 60

    def test_no_refresh_token(self) -> None:
        session, oauth, _ = make_session(stored(refresh_token=None))
        with pytest.raises(AuthExpired):
            session.refresh()
        assert oauth.refresh_calls == []

    def test_rejected_refresh_raises_auth_expired(self) -> None:
        session, _, _ = make_session(stored(), error=SpotifyOauthError("invalid_grant"))
        with pytest.raises(AuthExpired):
            session.refresh()

    def test_proactive_refresh_when_expiring(self) -> None:
        session, oauth, _ = make_session(stored(expires_at=NOW + 30))
        assert session.valid_token() == "fresh"
        assert len(oauth.refresh_calls) == 1

    def test_failed_proactive_refresh_falls_back(self) -> None:
        session, _, _ = make_session(stored(expires_at=NOW + 30), error=SpotifyOauthError("boom"))
        assert session.valid_token() == "old"


class TestAuthorize:
    def test_runs_flow_when_nothing_stored(self) -> None:
        granted = {"access_token": "granted", "refresh_token": "r", "expires_at": NOW + 3600}
        session, _, store = make_session(None, granted=granted)
        assert session.authorize() == "granted"
        assert session.expires_at == NOW + 3600
        assert store.get_cached_token() == granted

    def test_reuses_stored_token(self) -> None:
        session, _, _ = make_session(stored(), granted={"access_token": "unused"})
        assert session.authorize() == "old"

    def test_missing_credentials(self) -> None:
        session, _, _ = make_session(None)
        with pytest.raises(AuthExpired):
            session.access_token

    def test_clear(self) -> None:
        session, _, store = make_session(stored())
        session.clear()
        assert store.get_cached_token() is None
        assert session.expires_at is None


class TestCredentialStore:
    def test_persists_and_clears(self, tmp_path) -> None:
        path = tmp_path / "nested" / "token.json"
        store = CredentialStore(path)
        store.save_token_to_cache(stored())

        assert json.loads(path.read_text())["access_token"] == "old"
        assert CredentialStore(path).get_cached_token()["refresh_token"] == "r-1"

        store.clear()
        assert not path.exists()
        assert store.get_cached_token() is None
