"""Discovery without the recommendations endpoint.

Three strategies run in order, each only while the target is unmet:

1. deep cuts from the user's favourite artists,
2. top tracks of related artists that share the user's genres,
3. unheard tracks from the user's saved albums.

Every call owns its seen-set and taste profile; nothing is shared between
calls. A failed per-artist or per-album lookup is skipped, never fatal.
"""

import numpy as np

from toneprint.catalog import Catalog
from toneprint.console import Print
from toneprint.errors import AuthExpired, ProviderError
from toneprint.inference import infer_features
from toneprint.models import (
    DiscoveredTrack,
    DiscoveryOptions,
    FeatureFilters,
    LibraryTrack,
    TasteProfile,
)
from toneprint.taste import build_taste_profile

FAVORITE_ARTIST_LIMIT = 25
RELATED_SEED_LIMIT = 8
RELATED_PER_SEED_LIMIT = 8
SAVED_ALBUM_LIMIT = 30

TRACK_POPULARITY_SIGMAS = 1.5
ARTIST_POPULARITY_SIGMAS = 2.0


def popularity_matches(popularity, profile: TasteProfile, sigmas: float) -> bool:
    if popularity is None:
        return False
    return abs(popularity - profile.avg_popularity) <= profile.popularity_std_dev * sigmas


def genres_match(artist_genres, target_genres) -> bool:
    """Case-insensitive substring match in either direction. Blank tags never match."""
    targets = [t.strip().lower() for t in target_genres if t and t.strip()]
    for genre in artist_genres:
        g = (genre or "").strip().lower()
        if not g:
            continue
        for t in targets:
            if t in g or g in t:
                return True
    return False


# =====================================================================
# STRATEGIES
# =====================================================================

def discover_from_artist_top_tracks(catalog, artists, wanted, seen, profile):
    discovered = []

    for artist in artists[:FAVORITE_ARTIST_LIMIT]:
        if len(discovered) >= wanted:
            break
        try:
            top_tracks = catalog.get_artist_top_tracks(artist.id)
        except AuthExpired:
            raise
        except ProviderError as e:
            Print(f"Failed to get top tracks for artist {artist.name or artist.id} ({e})", "warn")
            continue

        # at most one track per artist
        for track in top_tracks:
            if track.id in seen:
                continue
            if not popularity_matches(track.popularity, profile, TRACK_POPULARITY_SIGMAS):
                continue
            discovered.append(DiscoveredTrack.from_catalog(track, is_discovered=True))
            seen.add(track.id)
            break

    return discovered


def discover_from_related_artists(catalog, artists, wanted, seen, profile, requested_genres=None):
    discovered = []
    requested = [g for g in (requested_genres or ()) if g and g.strip()]
    genres_to_match = requested or list(profile.top_genres)

    for artist in artists[:RELATED_SEED_LIMIT]:
        if len(discovered) >= wanted:
            break
        try:
            related = catalog.get_related_artists(artist.id)
        except AuthExpired:
            raise
        except ProviderError as e:
            Print(f"Failed to get related artists for {artist.name or artist.id} ({e})", "warn")
            continue

        matching = [
            r for r in related
            if genres_match(r.genres, genres_to_match)
            and popularity_matches(r.popularity, profile, ARTIST_POPULARITY_SIGMAS)
        ]
        Print(f"{len(matching)} matching artists similar to {artist.name or artist.id}")

        for related_artist in matching[:RELATED_PER_SEED_LIMIT]:
            if len(discovered) >= wanted:
                break
            try:
                top_tracks = catalog.get_artist_top_tracks(related_artist.id)
            except AuthExpired:
                raise
            except ProviderError as e:
                Print(f"Failed to get tracks from {related_artist.name} ({e})", "warn")
                continue

            # only the related artist's leading track is a candidate
            for track in top_tracks[:1]:
                if track.id in seen:
                    continue
                if popularity_matches(track.popularity, profile, TRACK_POPULARITY_SIGMAS):
                    discovered.append(DiscoveredTrack.from_catalog(track, is_discovered=True))
                    seen.add(track.id)

    return discovered


def discover_from_saved_albums(catalog, wanted, seen):
    discovered = []

    try:
        albums = catalog.get_saved_albums(SAVED_ALBUM_LIMIT)
    except AuthExpired:
        raise
    except ProviderError as e:
        Print(f"Failed to get saved albums ({e})", "error")
        return discovered

    Print(f"Exploring {len(albums)} saved albums")
    # ISO-8601 timestamps sort chronologically as strings
    albums = sorted(albums, key=lambda a: a.added_at, reverse=True)

    for album in albums:
        if len(discovered) >= wanted:
            break
        try:
            tracks = catalog.get_album_tracks(album.id)
        except AuthExpired:
            raise
        except ProviderError as e:
            Print(f"Failed to get tracks from album {album.name} ({e})", "warn")
            continue

        for track in tracks:
            if len(discovered) >= wanted:
                break
            if track.id in seen:
                continue
            discovered.append(DiscoveredTrack.from_catalog(track, is_from_saved_album=True))
            seen.add(track.id)

    return discovered


# =====================================================================
# ORCHESTRATION
# =====================================================================

def discover_tracks(catalog: Catalog, user_tracks: list[LibraryTrack], options: DiscoveryOptions) -> list[DiscoveredTrack]:
    target = options.target_count
    Print(f"Starting discovery for {target} tracks ({len(user_tracks)} in library)")

    seen = set(options.exclude_track_ids or ())
    seen.update(t.id for t in user_tracks)
    profile = build_taste_profile(user_tracks)
    Print(
        f"Taste profile: popularity {profile.avg_popularity:.1f} ± {profile.popularity_std_dev:.1f}, "
        f"top genres {list(profile.top_genres[:3])}"
    )

    artists = list(options.top_artists) if options.top_artists else list(profile.top_artists)
    discovered: list[DiscoveredTrack] = []

    if len(discovered) < target:
        found = discover_from_artist_top_tracks(catalog, artists, target - len(discovered), seen, profile)
        discovered.extend(found)
        Print(f"Found {len(found)} tracks from favorite artists")

    if len(discovered) < target:
        found = discover_from_related_artists(
            catalog, artists, target - len(discovered), seen, profile, options.top_genres
        )
        discovered.extend(found)
        Print(f"Found {len(found)} tracks from similar artists")

    if len(discovered) < target:
        found = discover_from_saved_albums(catalog, target - len(discovered), seen)
        discovered.extend(found)
        Print(f"Found {len(found)} tracks from saved albums")

    Print(f"Total discovered: {min(len(discovered), target)} tracks", "success")
    return discovered[:target]


# =====================================================================
# FEATURE FILTER
# =====================================================================

def _violates(value, low, high) -> bool:
    if value is None:
        return False
    if low is not None and value < low:
        return True
    if high is not None and value > high:
        return True
    return False


def passes_filters(track: DiscoveredTrack, filters: FeatureFilters) -> bool:
    return not (
        _violates(track.energy, filters.min_energy, filters.max_energy)
        or _violates(track.valence, filters.min_valence, filters.max_valence)
        or _violates(track.tempo, filters.min_tempo, filters.max_tempo)
    )


def filter_discovered_tracks_by_features(
    tracks: list[DiscoveredTrack],
    filters: FeatureFilters | None,
    catalog: Catalog | None = None,
    rng: np.random.Generator | None = None,
) -> list[DiscoveredTrack]:
    """Drop tracks whose known energy/valence/tempo falls outside the bounds.

    With a catalog, features are inferred fresh from re-fetched metadata and
    merged by id first. Tracks lacking a feature pass that dimension.
    """
    tracks = list(tracks)
    if filters is None or filters.is_empty() or not tracks:
        return tracks

    if catalog is not None:
        try:
            metadata = catalog.get_tracks_with_metadata([t.id for t in tracks])
        except AuthExpired:
            raise
        except ProviderError as e:
            Print(f"Error fetching features for filtering, returning unfiltered ({e})", "error")
            return tracks

        if rng is None:
            rng = np.random.default_rng()
        inferred = {m.id: infer_features(m.metadata(), rng) for m in metadata}
        tracks = [t.with_features(inferred[t.id]) if t.id in inferred else t for t in tracks]

    filtered = [t for t in tracks if passes_filters(t, filters)]
    Print(f"Filtered {len(tracks)} tracks to {len(filtered)} by audio features")
    return filtered
