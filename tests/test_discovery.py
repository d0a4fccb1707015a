"""Tests for discovery strategies and the feature filter."""

import numpy as np
import pytest

from conftest import FakeCatalog, make_library, make_track
from toneprint.discovery import (
    discover_tracks,
    filter_discovered_tracks_by_features,
    genres_match,
    passes_filters,
    popularity_matches,
)
from toneprint.errors import AuthExpired
from toneprint.models import (
    ArtistCount,
    CatalogArtist,
    DiscoveredTrack,
    DiscoveryOptions,
    FeatureFilters,
    SavedAlbum,
)
from toneprint.taste import build_taste_profile

FAVORITES = ["a1", "a2", "a3"]


@pytest.fixture
def library():
    # popularity 40 ± 5, genre "acoustic folk"
    return make_library(12, FAVORITES)


def _favorite_top_tracks():
    return {
        artist: [
            make_track(f"{artist}-hit", popularity=90, artist_id=artist),
            make_track(f"{artist}-deep", popularity=38, artist_id=artist),
            make_track(f"{artist}-deeper", popularity=42, artist_id=artist),
        ]
        for artist in FAVORITES
    }


def _saved_album_catalog(**kwargs):
    return dict(
        saved_albums=[
            SavedAlbum(id="old", name="Old", added_at="2020-01-01T00:00:00Z"),
            SavedAlbum(id="new", name="New", added_at="2024-05-01T00:00:00Z"),
        ],
        album_tracks={
            "old": [make_track("o1"), make_track("o2")],
            "new": [make_track("n1"), make_track("n2")],
        },
        **kwargs,
    )


def _assert_well_formed(found, library, target):
    ids = [t.id for t in found]
    assert len(ids) == len(set(ids))
    assert not set(ids) & {t.id for t in library}
    assert len(found) <= target


class TestMatchers:
    def test_popularity_window(self, library) -> None:
        profile = build_taste_profile(library)
        assert popularity_matches(47, profile, 1.5)
        assert not popularity_matches(48, profile, 1.5)
        assert not popularity_matches(None, profile, 1.5)

    def test_genres_match_either_direction(self) -> None:
        assert genres_match(["Folk"], ["acoustic folk"])
        assert genres_match(["indie folk rock"], ["FOLK"])
        assert not genres_match(["metal"], ["acoustic folk"])
        assert not genres_match([], ["folk"])

    def test_blank_genres_never_match(self) -> None:
        assert not genres_match(["metal"], [""])
        assert not genres_match(["", "  "], ["acoustic folk"])
        assert genres_match(["", "folk"], ["  ", "acoustic folk"])


class TestFavoriteArtists:
    def test_one_deep_cut_per_artist(self, library) -> None:
        catalog = FakeCatalog(top_tracks=_favorite_top_tracks())
        found = discover_tracks(catalog, library, DiscoveryOptions(target_count=10))

        assert [t.id for t in found] == ["a1-deep", "a2-deep", "a3-deep"]
        assert all(t.is_discovered and not t.is_from_saved_album for t in found)
        _assert_well_formed(found, library, 10)

    def test_popularity_bound_holds(self, library) -> None:
        profile = build_taste_profile(library)
        catalog = FakeCatalog(top_tracks=_favorite_top_tracks())
        for t in discover_tracks(catalog, library, DiscoveryOptions(target_count=10)):
            assert abs(t.popularity - profile.avg_popularity) <= 1.5 * profile.popularity_std_dev

    def test_known_and_excluded_tracks_are_skipped(self, library) -> None:
        top = _favorite_top_tracks()
        top["a1"].insert(0, make_track("lib-0", popularity=40, artist_id="a1"))
        top["a2"].insert(0, make_track("banned", popularity=40, artist_id="a2"))
        catalog = FakeCatalog(top_tracks=top)

        options = DiscoveryOptions(target_count=10, exclude_track_ids=("banned",))
        found = discover_tracks(catalog, library, options)
        ids = [t.id for t in found]
        assert "lib-0" not in ids
        assert "banned" not in ids
        assert ids[:2] == ["a1-deep", "a2-deep"]

    def test_stops_once_target_is_met(self, library) -> None:
        catalog = FakeCatalog(top_tracks=_favorite_top_tracks(), **_saved_album_catalog())
        found = discover_tracks(catalog, library, DiscoveryOptions(target_count=2))

        assert [t.id for t in found] == ["a1-deep", "a2-deep"]
        called = {c[0] for c in catalog.calls}
        assert "related_artists" not in called
        assert "saved_albums" not in called

    def test_caller_artists_override_library(self, library) -> None:
        catalog = FakeCatalog(top_tracks={"a9": [make_track("a9-deep", popularity=40, artist_id="a9")]})
        options = DiscoveryOptions(target_count=5, top_artists=(ArtistCount(id="a9", name="Nine"),))
        found = discover_tracks(catalog, library, options)

        assert [t.id for t in found] == ["a9-deep"]
        queried = {c[1] for c in catalog.calls if c[0] == "artist_top_tracks"}
        assert queried == {"a9"}


class TestRelatedArtists:
    def test_popular_related_tracks_are_excluded(self, library) -> None:
        # acoustic folk listener: related artist fits, but its hit is far too popular
        catalog = FakeCatalog(
            related={"a1": [CatalogArtist(id="r1", name="Rel", genres=("folk",), popularity=40)]},
            top_tracks={"r1": [make_track("r1-hit", popularity=90, artist_id="r1")]},
        )
        found = discover_tracks(catalog, library, DiscoveryOptions(target_count=5))

        assert ("artist_top_tracks", "r1") in catalog.calls
        assert found == []

    def test_matching_related_artist_contributes(self, library) -> None:
        catalog = FakeCatalog(
            related={"a1": [
                CatalogArtist(id="r1", name="Folky", genres=("folk",), popularity=45),
                CatalogArtist(id="r2", name="Loud", genres=("metal",), popularity=40),
                CatalogArtist(id="r3", name="Famous", genres=("folk",), popularity=85),
            ]},
            top_tracks={
                "r1": [make_track("r1-top", popularity=41, artist_id="r1")],
                "r2": [make_track("r2-top", popularity=40, artist_id="r2")],
                "r3": [make_track("r3-top", popularity=40, artist_id="r3")],
            },
        )
        found = discover_tracks(catalog, library, DiscoveryOptions(target_count=5))

        assert [t.id for t in found] == ["r1-top"]
        assert found[0].is_discovered
        queried = {c[1] for c in catalog.calls if c[0] == "artist_top_tracks"}
        assert "r2" not in queried
        assert "r3" not in queried

    def test_requested_genres_replace_library_genres(self, library) -> None:
        catalog = FakeCatalog(
            related={"a1": [CatalogArtist(id="r2", name="Loud", genres=("metal",), popularity=40)]},
            top_tracks={"r2": [make_track("r2-top", popularity=40, artist_id="r2")]},
        )
        options = DiscoveryOptions(target_count=5, top_genres=("metal",))
        assert [t.id for t in discover_tracks(catalog, library, options)] == ["r2-top"]

    def test_blank_requested_genre_falls_back_to_library_genres(self, library) -> None:
        catalog = FakeCatalog(
            related={"a1": [
                CatalogArtist(id="r1", name="Folky", genres=("folk",), popularity=40),
                CatalogArtist(id="r2", name="Loud", genres=("metal",), popularity=40),
            ]},
            top_tracks={
                "r1": [make_track("r1-top", popularity=40, artist_id="r1")],
                "r2": [make_track("r2-top", popularity=40, artist_id="r2")],
            },
        )
        options = DiscoveryOptions(target_count=5, top_genres=("",))
        assert [t.id for t in discover_tracks(catalog, library, options)] == ["r1-top"]

    def test_only_leading_track_is_considered(self, library) -> None:
        catalog = FakeCatalog(
            related={"a1": [CatalogArtist(id="r1", name="Folky", genres=("folk",), popularity=40)]},
            top_tracks={"r1": [
                make_track("r1-hit", popularity=95, artist_id="r1"),
                make_track("r1-b-side", popularity=40, artist_id="r1"),
            ]},
        )
        assert discover_tracks(catalog, library, DiscoveryOptions(target_count=5)) == []


class TestAcousticFolkListener:
    def test_deep_cuts_accepted_and_popular_related_hit_excluded(self) -> None:
        library = make_library(20, FAVORITES)
        top_tracks = {
            artist: [make_track(f"{artist}-cut", popularity=38 + 2 * i, artist_id=artist)]
            for i, artist in enumerate(FAVORITES)
        }
        top_tracks["r1"] = [make_track("r1-hit", popularity=90, artist_id="r1")]
        catalog = FakeCatalog(
            top_tracks=top_tracks,
            related={"a2": [CatalogArtist(id="r1", name="Rel", genres=("acoustic",), popularity=42)]},
        )
        found = discover_tracks(catalog, library, DiscoveryOptions(target_count=10))

        assert [t.id for t in found] == ["a1-cut", "a2-cut", "a3-cut"]
        assert [t.popularity for t in found] == [38, 40, 42]
        assert ("artist_top_tracks", "r1") in catalog.calls
        _assert_well_formed(found, library, 10)


class TestSavedAlbums:
    def test_newest_album_first_and_flagged(self, library) -> None:
        catalog = FakeCatalog(**_saved_album_catalog())
        found = discover_tracks(catalog, library, DiscoveryOptions(target_count=3))

        assert [t.id for t in found] == ["n1", "n2", "o1"]
        assert all(t.is_from_saved_album and not t.is_discovered for t in found)
        assert ("saved_albums", 30) in catalog.calls

    def test_fills_after_other_strategies(self, library) -> None:
        catalog = FakeCatalog(top_tracks=_favorite_top_tracks(), **_saved_album_catalog())
        found = discover_tracks(catalog, library, DiscoveryOptions(target_count=5))

        assert [t.id for t in found] == ["a1-deep", "a2-deep", "a3-deep", "n1", "n2"]
        _assert_well_formed(found, library, 5)


class TestFailures:
    def test_failed_artist_lookup_is_skipped(self, library) -> None:
        catalog = FakeCatalog(top_tracks=_favorite_top_tracks(), failing={"a1"})
        found = discover_tracks(catalog, library, DiscoveryOptions(target_count=10))
        assert [t.id for t in found] == ["a2-deep", "a3-deep"]

    def test_failed_related_and_album_lookups_are_skipped(self, library) -> None:
        catalog = FakeCatalog(failing={"related:a1", "new"}, **_saved_album_catalog())
        found = discover_tracks(catalog, library, DiscoveryOptions(target_count=5))
        assert [t.id for t in found] == ["o1", "o2"]

    def test_failed_saved_albums_returns_partial_result(self, library) -> None:
        catalog = FakeCatalog(top_tracks=_favorite_top_tracks(), failing={"saved_albums"})
        found = discover_tracks(catalog, library, DiscoveryOptions(target_count=10))
        assert len(found) == 3

    def test_auth_expired_propagates(self, library) -> None:
        class ExpiredCatalog(FakeCatalog):
            def get_artist_top_tracks(self, artist_id):
                raise AuthExpired()

        with pytest.raises(AuthExpired):
            discover_tracks(ExpiredCatalog(), library, DiscoveryOptions(target_count=5))


class TestCallIsolation:
    def test_repeated_calls_give_same_result(self, library) -> None:
        catalog = FakeCatalog(top_tracks=_favorite_top_tracks(), **_saved_album_catalog())
        options = DiscoveryOptions(target_count=6)
        assert discover_tracks(catalog, library, options) == discover_tracks(catalog, library, options)

    def test_empty_library_still_uses_saved_albums(self) -> None:
        catalog = FakeCatalog(**_saved_album_catalog())
        found = discover_tracks(catalog, [], DiscoveryOptions(target_count=10))
        assert [t.id for t in found] == ["n1", "n2", "o1", "o2"]

    def test_zero_target(self, library) -> None:
        catalog = FakeCatalog(top_tracks=_favorite_top_tracks())
        assert discover_tracks(catalog, library, DiscoveryOptions(target_count=0)) == []
        assert catalog.calls == []


class TestFeatureFilter:
    def _tracks(self):
        return [
            DiscoveredTrack(id="calm", name="Calm", energy=0.2, valence=0.3, tempo=80.0),
            DiscoveredTrack(id="mid", name="Mid", energy=0.5, valence=0.5, tempo=115.0),
            DiscoveredTrack(id="loud", name="Loud", energy=0.9, valence=0.8, tempo=150.0),
            DiscoveredTrack(id="unknown", name="Unknown"),
        ]

    def test_no_filters_returns_input(self) -> None:
        tracks = self._tracks()
        assert filter_discovered_tracks_by_features(tracks, None) == tracks
        assert filter_discovered_tracks_by_features(tracks, FeatureFilters()) == tracks

    def test_bounds_are_inclusive_and_missing_values_pass(self) -> None:
        filters = FeatureFilters(min_energy=0.5, max_tempo=150.0)
        kept = filter_discovered_tracks_by_features(self._tracks(), filters)
        assert [t.id for t in kept] == ["mid", "loud", "unknown"]

    def test_every_dimension_is_checked(self) -> None:
        track = DiscoveredTrack(id="t", name="T", energy=0.5, valence=0.9, tempo=120.0)
        assert passes_filters(track, FeatureFilters(max_energy=0.6, min_tempo=100.0))
        assert not passes_filters(track, FeatureFilters(max_valence=0.8))

    def test_catalog_metadata_drives_inferred_features(self) -> None:
        catalog = FakeCatalog(metadata={
            "edm-1": make_track("edm-1", popularity=None, genres=("edm",), duration_ms=200_000),
            "folk-1": make_track("folk-1", popularity=None, genres=("folk",), duration_ms=200_000),
        })
        tracks = [
            DiscoveredTrack(id="edm-1", name="Drop"),
            DiscoveredTrack(id="folk-1", name="Porch"),
            DiscoveredTrack(id="gone", name="Missing"),
        ]
        kept = filter_discovered_tracks_by_features(
            tracks, FeatureFilters(max_energy=0.8), catalog, np.random.default_rng(1)
        )

        assert [t.id for t in kept] == ["folk-1", "gone"]
        assert kept[0].energy is not None
        assert kept[1].energy is None

    def test_metadata_failure_returns_unfiltered(self) -> None:
        catalog = FakeCatalog(failing={"metadata"})
        tracks = self._tracks()
        assert filter_discovered_tracks_by_features(tracks, FeatureFilters(max_energy=0.1), catalog) == tracks
