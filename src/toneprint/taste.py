"""Statistical taste signature of a user's library, used to bound discovery."""

from collections import Counter

import numpy as np

from toneprint.models import ArtistCount, LibraryTrack, TasteProfile

TOP_GENRE_LIMIT = 10
TOP_ARTIST_LIMIT = 25

DEFAULT_POPULARITY = 50.0
NEUTRAL_FEATURES = {
    "energy": 0.5,
    "valence": 0.5,
    "tempo": 120.0,
    "acousticness": 0.5,
    "danceability": 0.5,
}


def _feature_mean(tracks, name):
    values = [getattr(t, name) for t in tracks]
    values = [v for v in values if v is not None]
    if not values:
        return NEUTRAL_FEATURES[name]
    return float(np.mean(values))


def build_taste_profile(tracks: list[LibraryTrack]) -> TasteProfile:
    tracks = list(tracks)

    # Popularity: only tracks that carry it
    popularities = [t.popularity for t in tracks if t.popularity is not None]
    if popularities:
        arr = np.array(popularities, dtype=float)
        avg_popularity = float(np.mean(arr))
        popularity_std_dev = float(np.std(arr))
    else:
        avg_popularity, popularity_std_dev = DEFAULT_POPULARITY, 0.0

    # Counters (Counter.most_common keeps first-seen order on ties)
    genre_counts: Counter[str] = Counter()
    artist_counts: Counter[str] = Counter()
    artist_names: dict[str, str | None] = {}

    for t in tracks:
        for g in t.genres or ():
            genre_counts[g] += 1
        if t.artist_id:
            artist_counts[t.artist_id] += 1
            artist_names.setdefault(t.artist_id, t.artist)

    top_genres = tuple(g for g, _ in genre_counts.most_common(TOP_GENRE_LIMIT))
    top_artists = tuple(
        ArtistCount(id=aid, name=artist_names[aid], count=count)
        for aid, count in artist_counts.most_common(TOP_ARTIST_LIMIT)
    )

    # Features: only tracks exposing energy, valence and tempo together
    with_features = [
        t for t in tracks
        if t.energy is not None and t.valence is not None and t.tempo is not None
    ]

    return TasteProfile(
        avg_popularity=avg_popularity,
        popularity_std_dev=popularity_std_dev,
        top_genres=top_genres,
        top_artists=top_artists,
        avg_energy=_feature_mean(with_features, "energy"),
        avg_valence=_feature_mean(with_features, "valence"),
        avg_tempo=_feature_mean(with_features, "tempo"),
        avg_acousticness=_feature_mean(with_features, "acousticness"),
        avg_danceability=_feature_mean(with_features, "danceability"),
    )
