"""Token storage and refresh.

The token bundle lives in a spotipy cache handler (the credential store) and
its expiry is tracked on the `TokenSession` that owns it, never in module
state, so two sessions never share an expiry clock.
"""

import time
from pathlib import Path

import requests
from spotipy.cache_handler import CacheFileHandler, MemoryCacheHandler
from spotipy.oauth2 import SpotifyOAuth, SpotifyOauthError

from toneprint.config import SCOPES, TOKEN_EXPIRY_MARGIN, Settings
from toneprint.console import Print
from toneprint.errors import AuthExpired


# =====================================================================
# CREDENTIAL STORES
# =====================================================================

class CredentialStore(CacheFileHandler):
    """Token bundle persisted as JSON on disk."""

    def __init__(self, cache_path):
        Path(cache_path).parent.mkdir(parents=True, exist_ok=True)
        super().__init__(cache_path=str(cache_path))

    def clear(self):
        Path(self.cache_path).unlink(missing_ok=True)


class MemoryCredentialStore(MemoryCacheHandler):

    def clear(self):
        self.token_info = None


# =====================================================================
# SESSION
# =====================================================================

class TokenSession:
    def __init__(self, auth_manager, store=None, clock=time.time):
        self.auth_manager = auth_manager
        self.store = store if store is not None else auth_manager.cache_handler
        self.clock = clock
        self.expires_at = None

        info = self.store.get_cached_token()
        if info:
            self.expires_at = self._expiry_of(info)

    @classmethod
    def from_settings(cls, settings: Settings, open_browser=True) -> "TokenSession":
        store = CredentialStore(settings.token_path)
        oauth = SpotifyOAuth(
            client_id=settings.client_id,
            client_secret=settings.client_secret,
            redirect_uri=settings.redirect_uri,
            scope=SCOPES,
            cache_handler=store,
            open_browser=open_browser,
        )
        return cls(oauth, store)

    def _expiry_of(self, info):
        if info.get("expires_at"):
            return int(info["expires_at"])
        if info.get("expires_in"):
            return int(self.clock()) + int(info["expires_in"])
        return None

    @property
    def token_info(self) -> dict | None:
        return self.store.get_cached_token()

    @property
    def access_token(self) -> str:
        info = self.token_info
        if not info or not info.get("access_token"):
            raise AuthExpired("No Spotify credentials stored")
        return info["access_token"]

    def is_expiring(self, margin=TOKEN_EXPIRY_MARGIN) -> bool:
        return self.expires_at is not None and self.clock() >= self.expires_at - margin

    def authorize(self) -> str:
        """Run the interactive OAuth flow if nothing is stored yet."""
        if self.token_info:
            return self.valid_token()
        token = self.auth_manager.get_access_token(as_dict=False)
        self.expires_at = self._expiry_of(self.token_info or {})
        return token

    def valid_token(self) -> str:
        """Access token, refreshed first when it is about to expire.

        A failed proactive refresh falls back to the stored token; the
        catalog's 401 handling gets the final say.
        """
        if self.is_expiring():
            try:
                return self.refresh()
            except AuthExpired as e:
                Print(f"Token refresh failed, using existing token ({e})", "warn")
        return self.access_token

    def refresh(self) -> str:
        info = self.token_info
        if not info or not info.get("refresh_token"):
            raise AuthExpired("No refresh token available")

        Print("Refreshing access token...")
        try:
            refreshed = self.auth_manager.refresh_access_token(info["refresh_token"])
        except (SpotifyOauthError, requests.exceptions.RequestException) as e:
            raise AuthExpired(f"Token refresh failed: {e}") from e

        merged = {**info, **refreshed}
        # Spotify doesn't always return a new refresh token
        merged["refresh_token"] = refreshed.get("refresh_token") or info["refresh_token"]
        if not refreshed.get("expires_at"):
            merged["expires_at"] = int(self.clock()) + int(refreshed.get("expires_in", 3600))

        self.store.save_token_to_cache(merged)
        self.expires_at = int(merged["expires_at"])
        Print(f"Token refreshed, expires in {int(self.expires_at - self.clock())} sec", "success")
        return merged["access_token"]

    def clear(self):
        self.store.clear()
        self.expires_at = None
