# models.py
# Shared data models for toneprint

from dataclasses import asdict, dataclass, field, replace


# =====================================================================
# INPUT METADATA / FEATURES
# =====================================================================

@dataclass(frozen=True)
class TrackMetadata:
    """Non-acoustic facts about a track that feature inference works from."""

    id: str
    genres: tuple[str, ...] = ()
    popularity: int | None = None
    duration_ms: int = 0
    explicit: bool = False
    release_year: int | None = None


@dataclass(frozen=True)
class FeatureVector:
    """Inferred audio features for a single track.

    mode and key are random placeholders, not derived from metadata.
    """

    energy: float
    valence: float
    danceability: float
    acousticness: float
    instrumentalness: float
    speechiness: float
    liveness: float
    tempo: float
    loudness: float
    mode: int = 0
    key: int = 0
    id: str | None = None

    @classmethod
    def from_dict(cls, d):
        return cls(**d)

    def to_dict(self):
        return asdict(self)


# =====================================================================
# TONEPRINT
# =====================================================================

@dataclass(frozen=True)
class EnergyDistribution:
    high: int = 0
    medium: int = 0
    low: int = 0


@dataclass(frozen=True)
class MoodProfile:
    positive: int = 0
    neutral: int = 0
    melancholic: int = 0


@dataclass(frozen=True)
class AudioCharacteristics:
    avg_tempo: int = 0
    avg_acousticness: int = 0
    avg_instrumentalness: int = 0
    avg_loudness: int = 0
    avg_danceability: int = 0
    avg_energy: int = 0
    avg_valence: int = 0


@dataclass(frozen=True)
class VibeCategories:
    workout: int = 0
    party: int = 0
    chill: int = 0
    focus: int = 0
    emotional: int = 0
    hype: int = 0

    def items(self):
        """(name, percentage) pairs in the fixed tie-break order."""
        return [
            ("workout", self.workout),
            ("party", self.party),
            ("chill", self.chill),
            ("focus", self.focus),
            ("emotional", self.emotional),
            ("hype", self.hype),
        ]


@dataclass(frozen=True)
class TonePrint:
    energy_distribution: EnergyDistribution
    mood_profile: MoodProfile
    audio_characteristics: AudioCharacteristics
    vibe_categories: VibeCategories
    intensity_score: int
    diversity_score: int
    consistency_score: int
    mainstream_score: int
    vocal_preference: int
    dominant_mood: str
    dominant_energy: str
    dominant_vibe: str
    listening_persona: str
    track_count: int
    last_updated: str = field(default="", compare=False)

    @classmethod
    def from_dict(cls, d):
        d = dict(d)
        d["energy_distribution"] = EnergyDistribution(**d["energy_distribution"])
        d["mood_profile"] = MoodProfile(**d["mood_profile"])
        d["audio_characteristics"] = AudioCharacteristics(**d["audio_characteristics"])
        d["vibe_categories"] = VibeCategories(**d["vibe_categories"])
        return cls(**d)

    def to_dict(self):
        return asdict(self)


# =====================================================================
# TASTE PROFILE
# =====================================================================

@dataclass(frozen=True)
class ArtistCount:
    id: str
    name: str | None = None
    count: int = 0


@dataclass(frozen=True)
class TasteProfile:
    avg_popularity: float
    popularity_std_dev: float
    top_genres: tuple[str, ...]
    top_artists: tuple[ArtistCount, ...]
    avg_energy: float
    avg_valence: float
    avg_tempo: float
    avg_acousticness: float
    avg_danceability: float

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class LibraryTrack:
    """A track the user already knows, with whatever metadata/features it has."""

    id: str
    name: str | None = None
    artist: str | None = None
    artist_id: str | None = None
    genres: tuple[str, ...] = ()
    popularity: int | None = None
    energy: float | None = None
    valence: float | None = None
    tempo: float | None = None
    acousticness: float | None = None
    danceability: float | None = None

    @classmethod
    def from_catalog(cls, track: "CatalogTrack", features: FeatureVector | None = None):
        extra = {}
        if features is not None:
            extra = {
                "energy": features.energy,
                "valence": features.valence,
                "tempo": features.tempo,
                "acousticness": features.acousticness,
                "danceability": features.danceability,
            }
        return cls(
            id=track.id,
            name=track.name,
            artist=track.artist,
            artist_id=track.artist_id,
            genres=track.genres,
            popularity=track.popularity,
            **extra,
        )


# =====================================================================
# CATALOG RECORDS
# =====================================================================

@dataclass(frozen=True)
class CatalogTrack:
    id: str
    name: str
    artist: str = "Unknown Artist"
    artist_id: str | None = None
    album: str = ""
    album_art: str | None = None
    popularity: int | None = None
    duration_ms: int = 0
    explicit: bool = False
    genres: tuple[str, ...] = ()
    release_year: int | None = None
    uri: str | None = None

    def metadata(self) -> TrackMetadata:
        return TrackMetadata(
            id=self.id,
            genres=self.genres,
            popularity=self.popularity,
            duration_ms=self.duration_ms,
            explicit=self.explicit,
            release_year=self.release_year,
        )


@dataclass(frozen=True)
class CatalogArtist:
    id: str
    name: str
    genres: tuple[str, ...] = ()
    popularity: int = 0


@dataclass(frozen=True)
class SavedAlbum:
    id: str
    name: str
    added_at: str = ""
    artist: str = ""


@dataclass(frozen=True)
class Playback:
    track: CatalogTrack
    is_playing: bool
    progress_ms: int = 0


@dataclass
class Playlist:
    playlist_id: str
    name: str
    description: str = ""
    owner: str = ""
    contained_tracks: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d):
        return cls(**d)

    def to_dict(self):
        return asdict(self)


# =====================================================================
# DISCOVERY
# =====================================================================

@dataclass(frozen=True)
class DiscoveredTrack:
    id: str
    name: str
    artist: str = "Unknown Artist"
    artist_id: str | None = None
    album: str = ""
    album_art: str | None = None
    popularity: int | None = None
    duration_ms: int = 0
    explicit: bool = False
    genres: tuple[str, ...] = ()
    release_year: int | None = None
    is_discovered: bool = False
    is_from_saved_album: bool = False
    energy: float | None = None
    valence: float | None = None
    tempo: float | None = None

    @classmethod
    def from_catalog(cls, track: CatalogTrack, **flags):
        return cls(
            id=track.id,
            name=track.name,
            artist=track.artist,
            artist_id=track.artist_id,
            album=track.album,
            album_art=track.album_art,
            popularity=track.popularity,
            duration_ms=track.duration_ms,
            explicit=track.explicit,
            genres=track.genres,
            release_year=track.release_year,
            **flags,
        )

    def with_features(self, features: FeatureVector) -> "DiscoveredTrack":
        return replace(self, energy=features.energy, valence=features.valence, tempo=features.tempo)

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class FeatureFilters:
    min_energy: float | None = None
    max_energy: float | None = None
    min_valence: float | None = None
    max_valence: float | None = None
    min_tempo: float | None = None
    max_tempo: float | None = None

    def is_empty(self) -> bool:
        return all(v is None for v in asdict(self).values())


@dataclass(frozen=True)
class DiscoveryOptions:
    target_count: int
    feature_filters: FeatureFilters | None = None
    exclude_track_ids: tuple[str, ...] = ()
    top_artists: tuple[ArtistCount, ...] | None = None
    top_genres: tuple[str, ...] | None = None
