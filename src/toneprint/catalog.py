# The music catalog capability: a Protocol the core depends on, and the
# spotipy-backed implementation used in production.

import time
from typing import Protocol

import requests
import spotipy
import spotipy.exceptions

from toneprint.config import MAX_RATE_LIMIT_RETRIES, PLAYLIST_BATCH_SIZE, TRACK_BATCH_SIZE
from toneprint.console import Print, progress_bar
from toneprint.errors import AuthExpired, ProviderError
from toneprint.models import CatalogArtist, CatalogTrack, Playback, Playlist, SavedAlbum


class Catalog(Protocol):
    def get_current_playback(self) -> Playback | None: ...

    def get_top_tracks(self, time_range: str = "short_term", limit: int = 50) -> list[CatalogTrack]: ...

    def get_recently_played(self, limit: int = 50) -> list[CatalogTrack]: ...

    def get_tracks_with_metadata(self, track_ids: list[str]) -> list[CatalogTrack]: ...

    def get_audio_features(self, track_ids: list[str]) -> list[dict | None]: ...

    def create_playlist(self, name: str, description: str = "", public: bool = False) -> Playlist: ...

    def update_playlist(self, playlist_id: str, name=None, description=None, public=None) -> None: ...

    def delete_playlist(self, playlist_id: str) -> None: ...

    def add_playlist_tracks(self, playlist_id: str, track_ids: list[str], position=None) -> None: ...

    def remove_playlist_tracks(self, playlist_id: str, track_ids: list[str]) -> None: ...

    def reorder_playlist_tracks(self, playlist_id: str, range_start: int, insert_before: int,
                                range_length: int = 1) -> None: ...

    def get_user_playlists(self) -> list[Playlist]: ...

    def get_playlist(self, playlist_id: str) -> Playlist: ...

    def get_artist_top_tracks(self, artist_id: str) -> list[CatalogTrack]: ...

    def get_related_artists(self, artist_id: str) -> list[CatalogArtist]: ...

    def search_tracks(self, query: str = "", genre=None, artist=None, limit: int = 20) -> list[CatalogTrack]: ...

    def get_album_tracks(self, album_id: str) -> list[CatalogTrack]: ...

    def get_saved_albums(self, limit: int = 30) -> list[SavedAlbum]: ...


# =====================================================================
# NORMALIZATION
# =====================================================================

def parse_release_year(release_date):
    if not release_date:
        return None
    try:
        return int(str(release_date).split("-")[0])
    except ValueError:
        return None


def track_from_spotify(t: dict, genres=(), album: dict | None = None) -> CatalogTrack:
    album = t.get("album") or album or {}
    artists = t.get("artists") or []
    first = artists[0] if artists else {}
    images = album.get("images") or []

    return CatalogTrack(
        id=t["id"],
        name=t.get("name", ""),
        artist=first.get("name") or "Unknown Artist",
        artist_id=first.get("id"),
        album=album.get("name", ""),
        album_art=images[0]["url"] if images else None,
        popularity=t.get("popularity"),
        duration_ms=t.get("duration_ms") or 0,
        explicit=bool(t.get("explicit")),
        genres=tuple(genres),
        release_year=parse_release_year(album.get("release_date")),
        uri=t.get("uri"),
    )


def artist_from_spotify(a: dict) -> CatalogArtist:
    return CatalogArtist(
        id=a["id"],
        name=a.get("name", ""),
        genres=tuple(a.get("genres") or ()),
        popularity=a.get("popularity") or 0,
    )


def playlist_from_spotify(p: dict, contained_tracks=None) -> Playlist:
    return Playlist(
        playlist_id=p["id"],
        name=p.get("name", ""),
        description=p.get("description") or "",
        owner=(p.get("owner") or {}).get("display_name") or "",
        contained_tracks=list(contained_tracks or []),
    )


def _chunks(items, size):
    for i in range(0, len(items), size):
        yield items[i:i + size]


# =====================================================================
# SPOTIFY CATALOG
# =====================================================================

class SpotifyCatalog:
    """Catalog backed by the Spotify Web API.

    Every call goes through `_call`, which:
      - sleeps and retries on 429 (bounded),
      - on 401 refreshes the token once and retries; a second 401 raises
        AuthExpired,
      - maps any other failure to ProviderError.
    """

    def __init__(self, session, market="US", client_factory=None, sleep=time.sleep):
        self.session = session
        self.market = market
        self._client_factory = client_factory or (lambda token: spotipy.Spotify(auth=token))
        self._sleep = sleep
        self.sp = self._client_factory(session.valid_token())

    def _call(self, method, *args, **kwargs):
        refreshed = False
        rate_limited = 0

        while True:
            try:
                return getattr(self.sp, method)(*args, **kwargs)
            except spotipy.exceptions.SpotifyException as e:
                if e.http_status == 429 and rate_limited < MAX_RATE_LIMIT_RETRIES:
                    rate_limited += 1
                    retry_after = int((e.headers or {}).get("Retry-After", 2))
                    Print(f"Rate limit hit. Sleeping {retry_after} sec...", "warn")
                    self._sleep(retry_after)
                    continue

                if e.http_status == 401:
                    if refreshed:
                        raise AuthExpired(f"{method}: still unauthorized after token refresh") from e
                    refreshed = True
                    Print("401 Unauthorized - refreshing token and retrying...", "warn")
                    self.sp = self._client_factory(self.session.refresh())
                    continue

                raise ProviderError(f"{method} failed: {e.msg}", e.http_status) from e
            except requests.exceptions.RequestException as e:
                raise ProviderError(f"{method} failed: {e}") from e

    def _paginate(self, page):
        items = list(page["items"])
        while page.get("next"):
            page = self._call("next", page)
            items.extend(page["items"])
        return items

    # -----------------------------------------------------------------
    # Listening
    # -----------------------------------------------------------------

    def get_current_playback(self):
        data = self._call("current_playback")
        if not data or not data.get("item"):
            return None
        return Playback(
            track=track_from_spotify(data["item"]),
            is_playing=bool(data.get("is_playing")),
            progress_ms=data.get("progress_ms") or 0,
        )

    def get_top_tracks(self, time_range="short_term", limit=50):
        data = self._call("current_user_top_tracks", limit=limit, time_range=time_range)
        return [track_from_spotify(t) for t in data["items"] if t]

    def get_recently_played(self, limit=50):
        data = self._call("current_user_recently_played", limit=limit)
        return [track_from_spotify(item["track"]) for item in data["items"] if item.get("track")]

    # -----------------------------------------------------------------
    # Track metadata
    # -----------------------------------------------------------------

    def fetch_genres_for_artists(self, artist_ids, cache: dict):
        """Fetch genres for many artists at once (max 50 per request)."""
        missing = [aid for aid in artist_ids if aid not in cache]

        for batch in _chunks(missing, TRACK_BATCH_SIZE):
            result = self._call("artists", batch)
            for artist in result["artists"]:
                if artist:
                    cache[artist["id"]] = artist.get("genres", [])

    def get_tracks_with_metadata(self, track_ids):
        """Tracks joined with their primary artist's genre tags."""
        track_ids = list(track_ids)
        if not track_ids:
            return []

        Print(f"Fetching metadata for {len(track_ids)} tracks")
        artist_genre_cache = {}
        tracks = []

        for i, batch in enumerate(_chunks(track_ids, TRACK_BATCH_SIZE)):
            data = self._call("tracks", batch)
            raw = [t for t in data["tracks"] if t]

            artist_ids = list(dict.fromkeys(
                t["artists"][0]["id"] for t in raw if t.get("artists")
            ))
            try:
                self.fetch_genres_for_artists(artist_ids, artist_genre_cache)
            except AuthExpired:
                raise
            except ProviderError as e:
                Print(f"Could not fetch artist genres, using empty genres ({e})", "warn")

            for t in raw:
                artist_id = t["artists"][0]["id"] if t.get("artists") else None
                tracks.append(track_from_spotify(t, genres=artist_genre_cache.get(artist_id, [])))

            progress_bar("Metadata", min((i + 1) * TRACK_BATCH_SIZE, len(track_ids)), len(track_ids))

        Print(f"Fetched metadata for {len(tracks)} tracks, {len(artist_genre_cache)} unique artists")
        return tracks

    def get_audio_features(self, track_ids):
        # Real features; inference does not use them.
        features = []
        for batch in _chunks(list(track_ids), 100):
            features.extend(self._call("audio_features", batch) or [])
        return features

    # -----------------------------------------------------------------
    # Playlists
    # -----------------------------------------------------------------

    def create_playlist(self, name, description="", public=False):
        user_id = self._call("current_user")["id"]
        created = self._call(
            "user_playlist_create",
            user=user_id,
            name=name,
            public=public,
            description=description,
        )
        return playlist_from_spotify(created)

    def update_playlist(self, playlist_id, name=None, description=None, public=None):
        self._call("playlist_change_details", playlist_id, name=name, public=public, description=description)

    def delete_playlist(self, playlist_id):
        self._call("current_user_unfollow_playlist", playlist_id)

    def add_playlist_tracks(self, playlist_id, track_ids, position=None):
        for batch in _chunks(list(track_ids), PLAYLIST_BATCH_SIZE):
            self._call("playlist_add_items", playlist_id, batch, position=position)
            if position is not None:
                position += len(batch)

    def remove_playlist_tracks(self, playlist_id, track_ids):
        for batch in _chunks(list(track_ids), PLAYLIST_BATCH_SIZE):
            self._call("playlist_remove_all_occurrences_of_items", playlist_id, batch)

    def reorder_playlist_tracks(self, playlist_id, range_start, insert_before, range_length=1):
        self._call(
            "playlist_reorder_items",
            playlist_id,
            range_start=range_start,
            insert_before=insert_before,
            range_length=range_length,
        )

    def get_user_playlists(self):
        items = self._paginate(self._call("current_user_playlists", limit=50))
        return [playlist_from_spotify(p) for p in items if p]

    def get_playlist(self, playlist_id):
        meta = self._call("playlist", playlist_id, fields="id,name,description,owner(display_name)")
        items = self._paginate(self._call("playlist_items", playlist_id))
        track_ids = [it["track"]["id"] for it in items if it.get("track") and it["track"].get("id")]
        return playlist_from_spotify(meta, contained_tracks=track_ids)

    # -----------------------------------------------------------------
    # Artists / albums / search
    # -----------------------------------------------------------------

    def get_artist_top_tracks(self, artist_id):
        data = self._call("artist_top_tracks", artist_id, country=self.market)
        return [track_from_spotify(t) for t in data["tracks"] if t]

    def get_related_artists(self, artist_id):
        data = self._call("artist_related_artists", artist_id)
        return [artist_from_spotify(a) for a in data["artists"] if a]

    def search_tracks(self, query="", genre=None, artist=None, limit=20):
        parts = [query]
        if genre:
            parts.append(f'genre:"{genre}"')
        if artist:
            parts.append(f'artist:"{artist}"')
        q = " ".join(p for p in parts if p)

        data = self._call("search", q=q, type="track", limit=limit, market=self.market)
        return [track_from_spotify(t) for t in data["tracks"]["items"] if t]

    def get_album_tracks(self, album_id):
        album = self._call("album", album_id)
        items = self._paginate(album["tracks"])
        return [track_from_spotify(t, album=album) for t in items if t and t.get("id")]

    def get_saved_albums(self, limit=30):
        data = self._call("current_user_saved_albums", limit=min(limit, 50))
        albums = []
        for item in data["items"]:
            a = item.get("album")
            if not a:
                continue
            artists = a.get("artists") or []
            albums.append(SavedAlbum(
                id=a["id"],
                name=a.get("name", ""),
                added_at=item.get("added_at") or "",
                artist=artists[0].get("name", "") if artists else "",
            ))
        return albums
