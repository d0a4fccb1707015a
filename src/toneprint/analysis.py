# TAKES THE USER'S LISTENING HISTORY FROM THE CATALOG AND TURNS IT INTO
# INFERRED FEATURE VECTORS, A TONEPRINT AND FEATURE DISTRIBUTIONS.

import numpy as np

from toneprint.console import Print
from toneprint.engine import calculate_tone_print
from toneprint.errors import AuthExpired, ProviderError
from toneprint.inference import FEATURE_RANGES, infer_features
from toneprint.models import CatalogTrack, FeatureVector, LibraryTrack, TonePrint, TrackMetadata

TONEPRINT_TTL_MINUTES = 60


# =====================================================================
# SUMMARY HELPERS
# =====================================================================

def summarize(values, digits=None):
    """Spread of one feature: mean, stdev, quartiles and extremes."""
    arr = np.asarray(values, dtype=float)
    low, p25, median, p75, high = np.percentile(arr, [0, 25, 50, 75, 100])
    stats = dict(mean=arr.mean(), stdev=arr.std(), min=low, p25=p25, median=median, p75=p75, max=high)
    if digits is None:
        return {k: float(v) for k, v in stats.items()}
    return {k: round(float(v), digits) for k, v in stats.items()}


def feature_summary(vectors: list[FeatureVector], digits=None) -> dict:
    if not vectors:
        return {}
    return {
        name: summarize([getattr(v, name) for v in vectors], digits)
        for name in FEATURE_RANGES
    }


# =====================================================================
# INFERENCE OVER THE CATALOG
# =====================================================================

def infer_for_tracks(tracks: list[CatalogTrack], rng=None) -> list[FeatureVector]:
    if rng is None:
        rng = np.random.default_rng()
    return [infer_features(t.metadata(), rng) for t in tracks]


def infer_audio_features(catalog, track_ids, rng=None) -> list[FeatureVector]:
    """Inferred features for each id the catalog knows about."""
    track_ids = list(track_ids)
    if not track_ids:
        return []

    Print(f"Analyzing {len(track_ids)} tracks with genre + metadata inference")
    tracks = catalog.get_tracks_with_metadata(track_ids)
    if not tracks:
        Print("No track metadata available", "warn")
        return []

    vectors = infer_for_tracks(tracks, rng)
    Print(f"Analyzed {len(vectors)} tracks", "success")
    return vectors


def infer_single_track(catalog, track_id, rng=None) -> FeatureVector:
    """Features for one track (e.g. now playing); neutral estimate on failure."""
    if rng is None:
        rng = np.random.default_rng()
    try:
        tracks = catalog.get_tracks_with_metadata([track_id])
    except AuthExpired:
        raise
    except ProviderError as e:
        Print(f"Error analyzing track {track_id}, using neutral features ({e})", "warn")
        tracks = []

    metadata = tracks[0].metadata() if tracks else TrackMetadata(id=track_id)
    return infer_features(metadata, rng)


# =====================================================================
# LISTENING ANALYSIS
# =====================================================================

def load_listening_library(catalog, time_range="medium_term", limit=50) -> list[CatalogTrack]:
    """Top tracks joined with artist genres.

    The top-tracks call is the first required lookup, so its failure
    propagates to the caller.
    """
    top = catalog.get_top_tracks(time_range=time_range, limit=limit)
    if not top:
        return []
    try:
        return catalog.get_tracks_with_metadata([t.id for t in top])
    except AuthExpired:
        raise
    except ProviderError as e:
        Print(f"Metadata join failed, analyzing without genres ({e})", "warn")
        return top


def library_tracks(tracks: list[CatalogTrack], vectors: list[FeatureVector]) -> list[LibraryTrack]:
    by_id = {v.id: v for v in vectors}
    return [LibraryTrack.from_catalog(t, by_id.get(t.id)) for t in tracks]


def analyze_listening(catalog, time_range="medium_term", limit=50, rng=None, cache=None) -> TonePrint:
    cache_key = f"toneprint:{time_range}:{limit}"
    if cache is not None:
        cached = cache.get(cache_key)
        if cached is not None:
            return TonePrint.from_dict(cached)

    tracks = load_listening_library(catalog, time_range, limit)
    vectors = infer_for_tracks(tracks, rng)
    tone_print = calculate_tone_print(
        vectors,
        popularities=[t.popularity for t in tracks],
        rng=rng,
    )

    if cache is not None:
        cache.set(cache_key, tone_print.to_dict(), TONEPRINT_TTL_MINUTES)
    return tone_print


def listening_feature_summary(catalog, time_range="medium_term", limit=50, rng=None, digits=3) -> dict:
    """Per-feature distribution over the user's top tracks."""
    tracks = load_listening_library(catalog, time_range, limit)
    return feature_summary(infer_for_tracks(tracks, rng), digits)
