"""Shared fixtures: a scripted catalog and record builders."""

import numpy as np
import pytest

from toneprint import console
from toneprint.errors import ProviderError
from toneprint.models import CatalogTrack, FeatureVector, LibraryTrack


@pytest.fixture(autouse=True)
def quiet_console():
    console.debug = False
    yield
    console.debug = True


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(42)


def make_track(track_id, popularity=50, artist_id="artist-x", genres=(), **kwargs) -> CatalogTrack:
    return CatalogTrack(
        id=track_id,
        name=f"Track {track_id}",
        artist=f"Artist {artist_id}",
        artist_id=artist_id,
        popularity=popularity,
        genres=tuple(genres),
        **kwargs,
    )


def make_vector(**overrides) -> FeatureVector:
    base = dict(
        energy=0.5,
        valence=0.5,
        danceability=0.5,
        acousticness=0.3,
        instrumentalness=0.3,
        speechiness=0.1,
        liveness=0.15,
        tempo=120.0,
        loudness=-8.0,
    )
    base.update(overrides)
    return FeatureVector(**base)


def make_library(count, artist_ids, popularity=40, spread=5, genres=("acoustic folk",)) -> list[LibraryTrack]:
    """Library whose popularities alternate around `popularity` by ±spread."""
    tracks = []
    for i in range(count):
        pop = popularity + (spread if i % 2 == 0 else -spread)
        tracks.append(LibraryTrack(
            id=f"lib-{i}",
            name=f"Library {i}",
            artist=f"Artist {artist_ids[i % len(artist_ids)]}",
            artist_id=artist_ids[i % len(artist_ids)],
            genres=tuple(genres),
            popularity=pop,
        ))
    return tracks


class FakeCatalog:
    """In-memory catalog; ids listed in `failing` raise ProviderError."""

    def __init__(self, top_tracks=None, related=None, saved_albums=None, album_tracks=None,
                 metadata=None, user_top=None, failing=()):
        self.top_tracks = top_tracks or {}
        self.related = related or {}
        self.saved_albums = saved_albums or []
        self.album_tracks = album_tracks or {}
        self.metadata = metadata or {}
        self.user_top = user_top or []
        self.failing = set(failing)
        self.calls = []

    def _maybe_fail(self, key):
        if key in self.failing:
            raise ProviderError(f"lookup failed for {key}", 500)

    def get_artist_top_tracks(self, artist_id):
        self.calls.append(("artist_top_tracks", artist_id))
        self._maybe_fail(artist_id)
        return list(self.top_tracks.get(artist_id, []))

    def get_related_artists(self, artist_id):
        self.calls.append(("related_artists", artist_id))
        self._maybe_fail(f"related:{artist_id}")
        return list(self.related.get(artist_id, []))

    def get_saved_albums(self, limit=30):
        self.calls.append(("saved_albums", limit))
        self._maybe_fail("saved_albums")
        return list(self.saved_albums)[:limit]

    def get_album_tracks(self, album_id):
        self.calls.append(("album_tracks", album_id))
        self._maybe_fail(album_id)
        return list(self.album_tracks.get(album_id, []))

    def get_tracks_with_metadata(self, track_ids):
        self.calls.append(("tracks_with_metadata", tuple(track_ids)))
        self._maybe_fail("metadata")
        return [self.metadata[i] for i in track_ids if i in self.metadata]

    def get_top_tracks(self, time_range="short_term", limit=50):
        self.calls.append(("top_tracks", time_range, limit))
        self._maybe_fail("top_tracks")
        return list(self.user_top)[:limit]

    def get_current_playback(self):
        return None
