"""Rule-based audio-feature inference from track metadata.

Real per-track audio features are not available from the Spotify API any
more, so every feature here is an estimate built from genre tags,
popularity, duration, release year and the explicit flag. The estimate is
approximate by nature: `mode` and `key` in particular are drawn at random
and carry no information about the recording.

All randomness flows through a ``numpy.random.Generator`` passed by the
caller, so seeded generators give reproducible vectors.
"""

import numpy as np

from toneprint.genre_profiles import (
    HAPPY_GENRE_HINTS,
    NEUTRAL_PROFILE,
    SAD_GENRE_HINTS,
    match_profiles,
)
from toneprint.models import FeatureVector, TrackMetadata

FEATURE_RANGES = {
    "energy": (0.0, 1.0),
    "valence": (0.0, 1.0),
    "danceability": (0.0, 1.0),
    "acousticness": (0.0, 1.0),
    "instrumentalness": (0.0, 1.0),
    "speechiness": (0.0, 1.0),
    "liveness": (0.0, 1.0),
    "tempo": (40.0, 200.0),
    "loudness": (-60.0, 0.0),
}

# Full width of the uniform perturbation applied to each field
VARIANCE_WIDTHS = {
    "energy": 0.10,
    "valence": 0.12,
    "danceability": 0.10,
    "tempo": 10.0,
    "acousticness": 0.08,
    "instrumentalness": 0.08,
    "loudness": 3.0,
    "speechiness": 0.05,
    "liveness": 0.10,
}

MAINSTREAM_TEMPO = 122.0


def _clamp(value, low, high):
    return min(max(value, low), high)


def clamp_features(features: dict) -> dict:
    return {
        name: _clamp(features[name], low, high)
        for name, (low, high) in FEATURE_RANGES.items()
    }


def average_profiles(profiles: list[dict]) -> dict:
    result = dict(NEUTRAL_PROFILE)
    for name in result:
        values = [p[name] for p in profiles if name in p]
        if values:
            result[name] = float(np.mean(values))
    return result


# =====================================================================
# METADATA ADJUSTMENTS
# =====================================================================

def adjust_for_duration(features: dict, duration_ms: int) -> dict:
    minutes = (duration_ms or 0) / 60000
    f = dict(features)

    if minutes > 6:
        # progressive / epic / ambient
        f["tempo"] -= 8
        f["danceability"] *= 0.75
        f["instrumentalness"] = min(f["instrumentalness"] * 1.4, 0.95)
        f["energy"] *= 0.90
        f["valence"] *= 0.95
    elif minutes > 5:
        f["tempo"] -= 5
        f["danceability"] *= 0.85
        f["instrumentalness"] = min(f["instrumentalness"] * 1.3, 0.95)
        f["energy"] *= 0.95
    elif 0 < minutes < 2.5:  # 0 means the duration is unknown
        # radio edits, punk, short pop
        f["tempo"] += 10
        f["energy"] = min(f["energy"] * 1.15, 0.95)
        f["danceability"] = min(f["danceability"] * 1.1, 0.95)
        f["valence"] += 0.05
    return f


def adjust_for_popularity(features: dict, popularity: int | None) -> dict:
    """Mainstream tracks lean slightly more energetic, positive and danceable."""
    if popularity is None:
        return dict(features)

    factor = _clamp(popularity, 0, 100) / 100
    f = dict(features)

    if popularity > 80:
        f["tempo"] -= (f["tempo"] - MAINSTREAM_TEMPO) * 0.15
        dance_boost = 0.15
    else:
        dance_boost = (factor - 0.5) * 0.15

    f["danceability"] = min(f["danceability"] + dance_boost, 0.95)
    f["energy"] += (factor - 0.5) * 0.10
    f["valence"] += (factor - 0.5) * 0.08
    return f


def adjust_for_release_year(features: dict, release_year: int | None) -> dict:
    if not release_year or release_year < 1960 or release_year > 2025:
        return dict(features)

    f = dict(features)
    tempo = valence = energy = 0.0

    if release_year < 1980:
        tempo, valence, energy = -8, 0.08, -0.05
    elif release_year < 1990:
        valence, energy = 0.05, 0.08
    elif release_year < 2000:
        tempo, valence = 5, -0.08
    elif release_year < 2010:
        tempo, energy = 8, 0.05
    elif release_year < 2020:
        tempo = 10
    else:
        valence = 0.10
        f["danceability"] = min(f["danceability"] + 0.08, 0.95)

    f["tempo"] += tempo
    f["valence"] = _clamp(f["valence"] + valence, 0, 1)
    f["energy"] = _clamp(f["energy"] + energy, 0, 1)
    return f


def adjust_for_explicit(features: dict, explicit: bool) -> dict:
    if not explicit:
        return dict(features)
    f = dict(features)
    f["speechiness"] = min(f["speechiness"] * 1.3, 0.66)
    f["energy"] = min(f["energy"] + 0.05, 1.0)
    return f


# =====================================================================
# GENRE-AWARE REFINEMENTS
# =====================================================================

def refine_energy(features: dict) -> dict:
    boost = 0.0
    tempo = features["tempo"]

    if tempo > 160:
        boost += 0.15
    elif tempo > 140:
        boost += 0.08

    if tempo < 80:
        boost -= 0.15
    elif tempo < 95:
        boost -= 0.08

    normalized_loudness = (features["loudness"] + 60) / 60
    if normalized_loudness > 0.8:
        boost += 0.12
    elif normalized_loudness < 0.3:
        boost -= 0.10

    return {**features, "energy": _clamp(features["energy"] + boost, 0, 1)}


def refine_valence(features: dict, genres) -> dict:
    lowered = [g.lower() for g in genres]
    has_sad = any(hint in g for g in lowered for hint in SAD_GENRE_HINTS)
    has_happy = any(hint in g for g in lowered for hint in HAPPY_GENRE_HINTS)

    adjustment = 0.0
    if has_sad:
        adjustment -= 0.20
    if has_happy:
        adjustment += 0.20

    # acoustic material reads as introspective unless tagged upbeat
    if features["acousticness"] > 0.7 and not has_happy:
        adjustment -= 0.10

    # heavily instrumental tracks drift toward neutral
    if features["instrumentalness"] > 0.7:
        adjustment -= (features["valence"] - 0.5) * 0.3

    return {**features, "valence": _clamp(features["valence"] + adjustment, 0, 1)}


def refine_danceability(features: dict) -> dict:
    tempo = features["tempo"]
    adjustment = 0.0
    if 115 <= tempo <= 135:
        adjustment += 0.12
    elif tempo < 90 or tempo > 160:
        adjustment -= 0.15
    return {**features, "danceability": _clamp(features["danceability"] + adjustment, 0, 1)}


# =====================================================================
# PUBLIC API
# =====================================================================

def estimate_features(metadata: TrackMetadata) -> dict:
    """Deterministic baseline estimate, before variance is injected."""
    genres = [g for g in (metadata.genres or ()) if g]
    profiles = match_profiles(genres)
    features = average_profiles(profiles) if profiles else dict(NEUTRAL_PROFILE)

    if genres:
        features = adjust_for_duration(features, metadata.duration_ms)
        features = adjust_for_popularity(features, metadata.popularity)
    else:
        # untagged tracks take the popularity nudge before duration scaling
        features = adjust_for_popularity(features, metadata.popularity)
        features = adjust_for_duration(features, metadata.duration_ms)
    features = adjust_for_release_year(features, metadata.release_year)
    features = adjust_for_explicit(features, metadata.explicit)

    if genres:
        features = refine_energy(features)
        features = refine_valence(features, genres)
        features = refine_danceability(features)

    return clamp_features(features)


def add_realistic_variance(features: dict, rng: np.random.Generator) -> dict:
    """Perturb every bounded field by a small uniform offset, then clamp."""
    varied = dict(features)
    for name, width in VARIANCE_WIDTHS.items():
        varied[name] = features[name] + (rng.random() - 0.5) * width
    return clamp_features(varied)


def infer_features(metadata: TrackMetadata, rng: np.random.Generator | None = None) -> FeatureVector:
    if rng is None:
        rng = np.random.default_rng()

    features = add_realistic_variance(estimate_features(metadata), rng)
    return FeatureVector(
        id=metadata.id,
        mode=int(rng.integers(0, 2)),
        key=int(rng.integers(0, 12)),
        **{name: float(value) for name, value in features.items()},
    )
