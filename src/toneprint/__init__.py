"""Infer audio features from Spotify metadata, build TonePrints, discover tracks."""

from toneprint.discovery import discover_tracks, filter_discovered_tracks_by_features
from toneprint.engine import (
    calculate_tone_print,
    empty_tone_print,
    energy_label,
    mood_emoji,
    mood_label,
    vibe_emoji,
)
from toneprint.errors import AuthExpired, ProviderError, ToneprintError
from toneprint.inference import add_realistic_variance, infer_features
from toneprint.taste import build_taste_profile

__all__ = [
    "AuthExpired",
    "ProviderError",
    "ToneprintError",
    "add_realistic_variance",
    "build_taste_profile",
    "calculate_tone_print",
    "discover_tracks",
    "empty_tone_print",
    "energy_label",
    "filter_discovered_tracks_by_features",
    "infer_features",
    "mood_emoji",
    "mood_label",
    "vibe_emoji",
]
