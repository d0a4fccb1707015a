"""TonePrint aggregation: turns a list of feature vectors into a taste summary."""

import datetime
import math

import numpy as np

from toneprint.models import (
    AudioCharacteristics,
    EnergyDistribution,
    FeatureVector,
    MoodProfile,
    TonePrint,
    VibeCategories,
)

VIBE_ORDER = ["workout", "party", "chill", "focus", "emotional", "hype"]

PERSONAS = {
    "workout": ["Fitness Fanatic", "Energy Enthusiast", "Gym Warrior"],
    "party": ["Party Animal", "Celebration Curator", "Dance Floor Devotee"],
    "chill": ["Relaxation Expert", "Zen Master", "Peaceful Soul"],
    "focus": ["Concentration King", "Study Sage", "Flow State Finder"],
    "emotional": ["Deep Feeler", "Introspective Explorer", "Emotion Architect"],
    "hype": ["Adrenaline Junkie", "Intensity Seeker", "Hype Machine"],
}

DEFAULT_PERSONA = "Music Lover"
MAINSTREAM_PLACEHOLDER = 50


def _now_iso():
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


def _round(x) -> int:
    # halves round up, -2.5 -> -2
    return int(math.floor(x + 0.5))


def _percent(count, total) -> int:
    return _round(count / total * 100)


# =====================================================================
# CLASSIFIERS
# =====================================================================

def energy_tier(energy: float) -> str:
    if energy >= 0.7:
        return "high"
    if energy >= 0.4:
        return "medium"
    return "low"


def mood_tier(valence: float) -> str:
    if valence >= 0.6:
        return "positive"
    if valence >= 0.4:
        return "neutral"
    return "melancholic"


def matching_vibes(f: FeatureVector) -> list[str]:
    """Vibes whose predicate the track satisfies. Not mutually exclusive."""
    vibes = []
    if f.energy > 0.7 and f.tempo > 120 and f.danceability > 0.6:
        vibes.append("workout")
    if f.danceability > 0.7 and f.valence > 0.6 and f.energy > 0.6:
        vibes.append("party")
    if f.energy < 0.5 and f.acousticness > 0.5:
        vibes.append("chill")
    if f.instrumentalness > 0.6 and 0.3 <= f.energy <= 0.6:
        vibes.append("focus")
    if 0.4 <= f.energy <= 0.7 and f.danceability < 0.5:
        vibes.append("emotional")
    if f.energy > 0.8 and f.tempo > 140 and f.loudness > -6:
        vibes.append("hype")
    return vibes


def vibe_categories(features: list[FeatureVector]) -> VibeCategories:
    counts = dict.fromkeys(VIBE_ORDER, 0)
    for f in features:
        for vibe in matching_vibes(f):
            counts[vibe] += 1
    total = len(features)
    return VibeCategories(**{vibe: _percent(n, total) for vibe, n in counts.items()})


def dominant_vibe(vibes: VibeCategories) -> str:
    best, best_pct = VIBE_ORDER[0], -1
    for vibe, pct in vibes.items():
        if pct > best_pct:
            best, best_pct = vibe, pct
    return best


# =====================================================================
# SCORES
# =====================================================================

def intensity_score(avg_energy, avg_tempo, avg_loudness) -> int:
    normalized_tempo = min(max((avg_tempo - 60) / 120, 0), 1)
    normalized_loudness = min(max((avg_loudness + 60) / 60, 0), 1)
    intensity = avg_energy * 0.4 + normalized_loudness * 0.3 + normalized_tempo * 0.3
    return _round(intensity * 100)


def diversity_score(energy_std, valence_std, tempo_std) -> int:
    # energy/valence stddev tops out near 0.5, tempo near 60 BPM
    spread = (
        min(energy_std / 0.5, 1)
        + min(valence_std / 0.5, 1)
        + min(tempo_std / 60, 1)
    ) / 3
    return _round(spread * 100)


def mainstream_score(popularities) -> int:
    values = [p for p in (popularities or []) if p is not None]
    if not values:
        return MAINSTREAM_PLACEHOLDER
    return _round(min(max(float(np.mean(values)), 0), 100))


def listening_persona(vibe: str, diversity: int, rng: np.random.Generator) -> str:
    options = PERSONAS.get(vibe, [DEFAULT_PERSONA])
    base = options[int(rng.integers(0, len(options)))]

    if diversity > 70:
        return base + " Explorer"
    if diversity < 30:
        return base + " Specialist"
    return base


# =====================================================================
# TONEPRINT
# =====================================================================

def empty_tone_print(now: str | None = None) -> TonePrint:
    return TonePrint(
        energy_distribution=EnergyDistribution(),
        mood_profile=MoodProfile(),
        audio_characteristics=AudioCharacteristics(),
        vibe_categories=VibeCategories(),
        intensity_score=0,
        diversity_score=0,
        consistency_score=0,
        mainstream_score=0,
        vocal_preference=0,
        dominant_mood="neutral",
        dominant_energy="medium",
        dominant_vibe="chill",
        listening_persona=DEFAULT_PERSONA,
        track_count=0,
        last_updated=now or _now_iso(),
    )


def calculate_tone_print(
    features: list[FeatureVector],
    popularities=None,
    rng: np.random.Generator | None = None,
    now: str | None = None,
) -> TonePrint:
    """Aggregate feature vectors into a TonePrint.

    An empty list is valid input and yields `empty_tone_print()`.
    `popularities` (0-100 per track) feeds the mainstream score; without
    it the score stays at the placeholder value of 50.
    """
    features = list(features)
    if not features:
        return empty_tone_print(now)
    if rng is None:
        rng = np.random.default_rng()

    total = len(features)
    energy = np.array([f.energy for f in features], dtype=float)
    valence = np.array([f.valence for f in features], dtype=float)
    tempo = np.array([f.tempo for f in features], dtype=float)
    danceability = np.array([f.danceability for f in features], dtype=float)
    acousticness = np.array([f.acousticness for f in features], dtype=float)
    instrumentalness = np.array([f.instrumentalness for f in features], dtype=float)
    loudness = np.array([f.loudness for f in features], dtype=float)

    avg_energy = float(np.mean(energy))
    avg_valence = float(np.mean(valence))
    avg_tempo = float(np.mean(tempo))
    avg_danceability = float(np.mean(danceability))
    avg_acousticness = float(np.mean(acousticness))
    avg_instrumentalness = float(np.mean(instrumentalness))
    avg_loudness = float(np.mean(loudness))

    # population stddev (ddof=0)
    diversity = diversity_score(
        float(np.std(energy)),
        float(np.std(valence)),
        float(np.std(tempo)),
    )

    energy_tiers = [energy_tier(e) for e in energy]
    mood_tiers = [mood_tier(v) for v in valence]
    vibes = vibe_categories(features)
    top_vibe = dominant_vibe(vibes)

    return TonePrint(
        energy_distribution=EnergyDistribution(
            high=_percent(energy_tiers.count("high"), total),
            medium=_percent(energy_tiers.count("medium"), total),
            low=_percent(energy_tiers.count("low"), total),
        ),
        mood_profile=MoodProfile(
            positive=_percent(mood_tiers.count("positive"), total),
            neutral=_percent(mood_tiers.count("neutral"), total),
            melancholic=_percent(mood_tiers.count("melancholic"), total),
        ),
        audio_characteristics=AudioCharacteristics(
            avg_tempo=_round(avg_tempo),
            avg_acousticness=_round(avg_acousticness * 100),
            avg_instrumentalness=_round(avg_instrumentalness * 100),
            avg_loudness=_round(avg_loudness),
            avg_danceability=_round(avg_danceability * 100),
            avg_energy=_round(avg_energy * 100),
            avg_valence=_round(avg_valence * 100),
        ),
        vibe_categories=vibes,
        intensity_score=intensity_score(avg_energy, avg_tempo, avg_loudness),
        diversity_score=diversity,
        consistency_score=100 - diversity,
        mainstream_score=mainstream_score(popularities),
        vocal_preference=_round((1 - avg_instrumentalness) * 100),
        dominant_mood=mood_tier(avg_valence),
        dominant_energy=energy_tier(avg_energy),
        dominant_vibe=top_vibe,
        listening_persona=listening_persona(top_vibe, diversity, rng),
        track_count=total,
        last_updated=now or _now_iso(),
    )


# =====================================================================
# DISPLAY HELPERS
# =====================================================================

def mood_emoji(valence: float) -> str:
    return {"positive": "😊", "neutral": "😐", "melancholic": "😔"}[mood_tier(valence)]


def mood_label(valence: float) -> str:
    return {"positive": "Positive", "neutral": "Neutral", "melancholic": "Melancholic"}[mood_tier(valence)]


def energy_label(energy: float) -> str:
    return f"{energy_tier(energy).capitalize()} Energy"


def vibe_emoji(vibe: str) -> str:
    return {
        "workout": "💪",
        "party": "🎉",
        "chill": "😌",
        "focus": "🎯",
        "emotional": "💙",
        "hype": "🔥",
    }.get(vibe, "🎵")
