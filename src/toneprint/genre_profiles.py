# Genre → typical audio-feature profile.
# Each profile only sets the fields its genre is known for; unset fields fall
# back to NEUTRAL_PROFILE when profiles are averaged.

NEUTRAL_PROFILE = {
    "energy": 0.50,
    "valence": 0.50,
    "danceability": 0.50,
    "acousticness": 0.50,
    "instrumentalness": 0.50,
    "speechiness": 0.10,
    "liveness": 0.15,
    "tempo": 120.0,
    "loudness": -8.0,
}

GENRE_PROFILES = {
    # Electronic / dance
    "edm": {"energy": 0.85, "valence": 0.75, "danceability": 0.90, "tempo": 128, "acousticness": 0.05, "instrumentalness": 0.70},
    "house": {"energy": 0.80, "valence": 0.70, "danceability": 0.85, "tempo": 125, "acousticness": 0.05, "instrumentalness": 0.75},
    "techno": {"energy": 0.85, "valence": 0.60, "danceability": 0.88, "tempo": 130, "acousticness": 0.03, "instrumentalness": 0.80},
    "dubstep": {"energy": 0.90, "valence": 0.55, "danceability": 0.75, "tempo": 140, "acousticness": 0.05, "instrumentalness": 0.70},
    "trance": {"energy": 0.80, "valence": 0.65, "danceability": 0.80, "tempo": 138, "acousticness": 0.05, "instrumentalness": 0.85},
    "electro": {"energy": 0.85, "valence": 0.70, "danceability": 0.85, "tempo": 128, "acousticness": 0.05, "instrumentalness": 0.75},
    "drum and bass": {"energy": 0.90, "valence": 0.65, "danceability": 0.80, "tempo": 174, "acousticness": 0.05, "instrumentalness": 0.75},
    "dnb": {"energy": 0.90, "valence": 0.65, "danceability": 0.80, "tempo": 174, "acousticness": 0.05, "instrumentalness": 0.75},
    "trap": {"energy": 0.75, "valence": 0.50, "danceability": 0.80, "tempo": 140, "acousticness": 0.10, "instrumentalness": 0.50},
    "future bass": {"energy": 0.75, "valence": 0.70, "danceability": 0.75, "tempo": 150, "acousticness": 0.10, "instrumentalness": 0.60},
    "bass": {"energy": 0.80, "valence": 0.60, "danceability": 0.80, "tempo": 140, "acousticness": 0.10, "instrumentalness": 0.65},
    "progressive house": {"energy": 0.78, "valence": 0.68, "danceability": 0.82, "tempo": 128, "acousticness": 0.05, "instrumentalness": 0.80},
    "deep house": {"energy": 0.65, "valence": 0.65, "danceability": 0.80, "tempo": 122, "acousticness": 0.08, "instrumentalness": 0.70},
    "tech house": {"energy": 0.80, "valence": 0.60, "danceability": 0.85, "tempo": 125, "acousticness": 0.05, "instrumentalness": 0.75},
    "minimal": {"energy": 0.60, "valence": 0.50, "danceability": 0.70, "tempo": 125, "acousticness": 0.05, "instrumentalness": 0.85},
    "hardstyle": {"energy": 0.95, "valence": 0.65, "danceability": 0.80, "tempo": 150, "acousticness": 0.03, "instrumentalness": 0.70},
    "jungle": {"energy": 0.88, "valence": 0.60, "danceability": 0.78, "tempo": 170, "acousticness": 0.05, "instrumentalness": 0.70},
    "breakbeat": {"energy": 0.75, "valence": 0.60, "danceability": 0.75, "tempo": 135, "acousticness": 0.10, "instrumentalness": 0.60},
    "uk garage": {"energy": 0.72, "valence": 0.65, "danceability": 0.82, "tempo": 130, "acousticness": 0.10, "instrumentalness": 0.45},
    "garage": {"energy": 0.70, "valence": 0.65, "danceability": 0.80, "tempo": 130, "acousticness": 0.10, "instrumentalness": 0.50},
    "grime": {"energy": 0.80, "valence": 0.50, "danceability": 0.75, "tempo": 140, "acousticness": 0.08, "instrumentalness": 0.30, "speechiness": 0.35},
    "vaporwave": {"energy": 0.40, "valence": 0.50, "danceability": 0.45, "tempo": 95, "acousticness": 0.15, "instrumentalness": 0.80},
    "synthwave": {"energy": 0.70, "valence": 0.65, "danceability": 0.70, "tempo": 115, "acousticness": 0.05, "instrumentalness": 0.75},
    "glitch": {"energy": 0.65, "valence": 0.50, "danceability": 0.60, "tempo": 130, "acousticness": 0.05, "instrumentalness": 0.85},
    "idm": {"energy": 0.60, "valence": 0.50, "danceability": 0.50, "tempo": 125, "acousticness": 0.10, "instrumentalness": 0.90},
    "trip hop": {"energy": 0.50, "valence": 0.45, "danceability": 0.60, "tempo": 95, "acousticness": 0.20, "instrumentalness": 0.60},
    "big beat": {"energy": 0.85, "valence": 0.70, "danceability": 0.80, "tempo": 135, "acousticness": 0.05, "instrumentalness": 0.50},

    # Hip hop / rap
    "hip hop": {"energy": 0.70, "valence": 0.55, "danceability": 0.75, "tempo": 95, "acousticness": 0.15, "instrumentalness": 0.20, "speechiness": 0.40},
    "rap": {"energy": 0.70, "valence": 0.55, "danceability": 0.75, "tempo": 95, "acousticness": 0.15, "instrumentalness": 0.15, "speechiness": 0.45},
    "drill": {"energy": 0.75, "valence": 0.45, "danceability": 0.70, "tempo": 140, "acousticness": 0.10, "instrumentalness": 0.20, "speechiness": 0.40},
    "boom bap": {"energy": 0.65, "valence": 0.55, "danceability": 0.70, "tempo": 90, "acousticness": 0.15, "instrumentalness": 0.25, "speechiness": 0.40},
    "trap metal": {"energy": 0.90, "valence": 0.40, "danceability": 0.65, "tempo": 145, "acousticness": 0.05, "instrumentalness": 0.20, "speechiness": 0.40},
    "cloud rap": {"energy": 0.55, "valence": 0.50, "danceability": 0.65, "tempo": 70, "acousticness": 0.15, "instrumentalness": 0.30, "speechiness": 0.35},
    "phonk": {"energy": 0.75, "valence": 0.45, "danceability": 0.75, "tempo": 140, "acousticness": 0.10, "instrumentalness": 0.40, "speechiness": 0.25},

    # Pop
    "pop": {"energy": 0.65, "valence": 0.70, "danceability": 0.70, "tempo": 120, "acousticness": 0.20, "instrumentalness": 0.05, "speechiness": 0.10},
    "dance pop": {"energy": 0.75, "valence": 0.75, "danceability": 0.85, "tempo": 125, "acousticness": 0.15, "instrumentalness": 0.10},
    "electropop": {"energy": 0.70, "valence": 0.70, "danceability": 0.80, "tempo": 122, "acousticness": 0.15, "instrumentalness": 0.20},
    "indie pop": {"energy": 0.60, "valence": 0.65, "danceability": 0.60, "tempo": 115, "acousticness": 0.35, "instrumentalness": 0.10},
    "synth-pop": {"energy": 0.65, "valence": 0.68, "danceability": 0.75, "tempo": 118, "acousticness": 0.10, "instrumentalness": 0.30},
    "art pop": {"energy": 0.55, "valence": 0.60, "danceability": 0.55, "tempo": 110, "acousticness": 0.25, "instrumentalness": 0.20},
    "bubblegum pop": {"energy": 0.75, "valence": 0.85, "danceability": 0.80, "tempo": 128, "acousticness": 0.10, "instrumentalness": 0.05},
    "hyperpop": {"energy": 0.85, "valence": 0.75, "danceability": 0.80, "tempo": 150, "acousticness": 0.05, "instrumentalness": 0.15},
    "power pop": {"energy": 0.80, "valence": 0.75, "danceability": 0.70, "tempo": 140, "acousticness": 0.15, "instrumentalness": 0.20},
    "bedroom pop": {"energy": 0.50, "valence": 0.60, "danceability": 0.55, "tempo": 105, "acousticness": 0.40, "instrumentalness": 0.25},
    "dream pop": {"energy": 0.50, "valence": 0.60, "danceability": 0.45, "tempo": 100, "acousticness": 0.30, "instrumentalness": 0.35},
    "k-pop": {"energy": 0.75, "valence": 0.75, "danceability": 0.80, "tempo": 130, "acousticness": 0.15, "instrumentalness": 0.10},
    "j-pop": {"energy": 0.70, "valence": 0.75, "danceability": 0.75, "tempo": 125, "acousticness": 0.20, "instrumentalness": 0.15},

    # Rock
    "rock": {"energy": 0.75, "valence": 0.60, "danceability": 0.50, "tempo": 125, "acousticness": 0.15, "instrumentalness": 0.30, "loudness": -5},
    "alternative": {"energy": 0.70, "valence": 0.55, "danceability": 0.55, "tempo": 120, "acousticness": 0.20, "instrumentalness": 0.25},
    "indie": {"energy": 0.60, "valence": 0.60, "danceability": 0.55, "tempo": 115, "acousticness": 0.35, "instrumentalness": 0.20},
    "indie rock": {"energy": 0.65, "valence": 0.58, "danceability": 0.55, "tempo": 118, "acousticness": 0.30, "instrumentalness": 0.25},
    "indie folk": {"energy": 0.45, "valence": 0.55, "danceability": 0.40, "tempo": 100, "acousticness": 0.75, "instrumentalness": 0.30},
    "indie electronic": {"energy": 0.65, "valence": 0.65, "danceability": 0.70, "tempo": 120, "acousticness": 0.15, "instrumentalness": 0.40},
    "punk": {"energy": 0.85, "valence": 0.55, "danceability": 0.60, "tempo": 160, "acousticness": 0.10, "instrumentalness": 0.20, "loudness": -4},
    "post-punk": {"energy": 0.70, "valence": 0.45, "danceability": 0.55, "tempo": 125, "acousticness": 0.15, "instrumentalness": 0.30},
    "post-rock": {"energy": 0.65, "valence": 0.50, "danceability": 0.40, "tempo": 115, "acousticness": 0.25, "instrumentalness": 0.70},
    "post-hardcore": {"energy": 0.85, "valence": 0.45, "danceability": 0.50, "tempo": 155, "acousticness": 0.10, "instrumentalness": 0.25},
    "shoegaze": {"energy": 0.60, "valence": 0.45, "danceability": 0.40, "tempo": 110, "acousticness": 0.20, "instrumentalness": 0.50},
    "emo": {"energy": 0.75, "valence": 0.35, "danceability": 0.50, "tempo": 140, "acousticness": 0.15, "instrumentalness": 0.20},
    "screamo": {"energy": 0.90, "valence": 0.35, "danceability": 0.45, "tempo": 160, "acousticness": 0.05, "instrumentalness": 0.15, "speechiness": 0.30},
    "grunge": {"energy": 0.75, "valence": 0.40, "danceability": 0.45, "tempo": 115, "acousticness": 0.20, "instrumentalness": 0.30},
    "stoner rock": {"energy": 0.70, "valence": 0.50, "danceability": 0.45, "tempo": 100, "acousticness": 0.15, "instrumentalness": 0.45},
    "hard rock": {"energy": 0.85, "valence": 0.50, "danceability": 0.50, "tempo": 130, "acousticness": 0.10, "instrumentalness": 0.35, "loudness": -4},
    "classic rock": {"energy": 0.70, "valence": 0.60, "danceability": 0.55, "tempo": 120, "acousticness": 0.15, "instrumentalness": 0.35},
    "prog rock": {"energy": 0.65, "valence": 0.55, "danceability": 0.40, "tempo": 120, "acousticness": 0.20, "instrumentalness": 0.55},
    "math rock": {"energy": 0.70, "valence": 0.55, "danceability": 0.40, "tempo": 145, "acousticness": 0.15, "instrumentalness": 0.60},
    "metal": {"energy": 0.90, "valence": 0.45, "danceability": 0.45, "tempo": 140, "acousticness": 0.05, "instrumentalness": 0.40, "loudness": -3},
    "doom metal": {"energy": 0.75, "valence": 0.30, "danceability": 0.35, "tempo": 75, "acousticness": 0.05, "instrumentalness": 0.50, "loudness": -3},
    "black metal": {"energy": 0.95, "valence": 0.25, "danceability": 0.35, "tempo": 180, "acousticness": 0.05, "instrumentalness": 0.45, "loudness": -2},
    "death metal": {"energy": 0.95, "valence": 0.30, "danceability": 0.40, "tempo": 170, "acousticness": 0.05, "instrumentalness": 0.40, "loudness": -2},
    "metalcore": {"energy": 0.90, "valence": 0.40, "danceability": 0.45, "tempo": 160, "acousticness": 0.05, "instrumentalness": 0.30, "loudness": -3},
    "nu metal": {"energy": 0.85, "valence": 0.45, "danceability": 0.55, "tempo": 135, "acousticness": 0.10, "instrumentalness": 0.25},

    # R&B / soul / funk
    "r&b": {"energy": 0.55, "valence": 0.60, "danceability": 0.70, "tempo": 90, "acousticness": 0.25, "instrumentalness": 0.10, "speechiness": 0.15},
    "soul": {"energy": 0.60, "valence": 0.65, "danceability": 0.65, "tempo": 95, "acousticness": 0.30, "instrumentalness": 0.15, "liveness": 0.25},
    "neo soul": {"energy": 0.55, "valence": 0.60, "danceability": 0.65, "tempo": 88, "acousticness": 0.35, "instrumentalness": 0.15},
    "funk": {"energy": 0.75, "valence": 0.75, "danceability": 0.85, "tempo": 110, "acousticness": 0.20, "instrumentalness": 0.30},

    # Jazz / blues
    "jazz": {"energy": 0.45, "valence": 0.55, "danceability": 0.50, "tempo": 120, "acousticness": 0.60, "instrumentalness": 0.70, "liveness": 0.35},
    "smooth jazz": {"energy": 0.40, "valence": 0.60, "danceability": 0.40, "tempo": 100, "acousticness": 0.50, "instrumentalness": 0.75},
    "blues": {"energy": 0.50, "valence": 0.45, "danceability": 0.45, "tempo": 95, "acousticness": 0.55, "instrumentalness": 0.50, "liveness": 0.30},

    # Folk / acoustic / country
    "folk": {"energy": 0.45, "valence": 0.55, "danceability": 0.40, "tempo": 100, "acousticness": 0.80, "instrumentalness": 0.30},
    "acoustic": {"energy": 0.40, "valence": 0.55, "danceability": 0.35, "tempo": 95, "acousticness": 0.85, "instrumentalness": 0.25},
    "singer-songwriter": {"energy": 0.40, "valence": 0.50, "danceability": 0.35, "tempo": 90, "acousticness": 0.75, "instrumentalness": 0.20},
    "americana": {"energy": 0.50, "valence": 0.55, "danceability": 0.45, "tempo": 105, "acousticness": 0.70, "instrumentalness": 0.30},
    "country": {"energy": 0.55, "valence": 0.65, "danceability": 0.55, "tempo": 115, "acousticness": 0.50, "instrumentalness": 0.20},
    "contemporary country": {"energy": 0.60, "valence": 0.70, "danceability": 0.60, "tempo": 120, "acousticness": 0.40, "instrumentalness": 0.15},

    # Latin
    "latin": {"energy": 0.70, "valence": 0.75, "danceability": 0.80, "tempo": 110, "acousticness": 0.25, "instrumentalness": 0.20},
    "latin trap": {"energy": 0.75, "valence": 0.65, "danceability": 0.85, "tempo": 95, "acousticness": 0.10, "instrumentalness": 0.20, "speechiness": 0.35},
    "reggaeton": {"energy": 0.75, "valence": 0.70, "danceability": 0.85, "tempo": 95, "acousticness": 0.15, "instrumentalness": 0.20},
    "salsa": {"energy": 0.75, "valence": 0.80, "danceability": 0.85, "tempo": 180, "acousticness": 0.30, "instrumentalness": 0.40, "liveness": 0.30},
    "bachata": {"energy": 0.60, "valence": 0.65, "danceability": 0.75, "tempo": 125, "acousticness": 0.35, "instrumentalness": 0.30},
    "cumbia": {"energy": 0.70, "valence": 0.75, "danceability": 0.85, "tempo": 100, "acousticness": 0.30, "instrumentalness": 0.40},
    "merengue": {"energy": 0.80, "valence": 0.85, "danceability": 0.90, "tempo": 130, "acousticness": 0.25, "instrumentalness": 0.35},
    "bossa nova": {"energy": 0.40, "valence": 0.70, "danceability": 0.55, "tempo": 85, "acousticness": 0.70, "instrumentalness": 0.40},
    "samba": {"energy": 0.75, "valence": 0.80, "danceability": 0.85, "tempo": 180, "acousticness": 0.35, "instrumentalness": 0.45, "liveness": 0.35},
    "tango": {"energy": 0.60, "valence": 0.50, "danceability": 0.75, "tempo": 120, "acousticness": 0.45, "instrumentalness": 0.50},

    # Classical / instrumental
    "classical": {"energy": 0.35, "valence": 0.50, "danceability": 0.20, "tempo": 100, "acousticness": 0.90, "instrumentalness": 0.95, "liveness": 0.40},
    "orchestra": {"energy": 0.40, "valence": 0.55, "danceability": 0.25, "tempo": 110, "acousticness": 0.85, "instrumentalness": 0.95},
    "piano": {"energy": 0.30, "valence": 0.50, "danceability": 0.20, "tempo": 90, "acousticness": 0.90, "instrumentalness": 0.95},
    "instrumental": {"energy": 0.45, "valence": 0.55, "danceability": 0.35, "tempo": 105, "acousticness": 0.60, "instrumentalness": 0.90},

    # Ambient / chill
    "ambient": {"energy": 0.25, "valence": 0.50, "danceability": 0.25, "tempo": 80, "acousticness": 0.50, "instrumentalness": 0.90},
    "chillout": {"energy": 0.35, "valence": 0.60, "danceability": 0.40, "tempo": 90, "acousticness": 0.40, "instrumentalness": 0.70},
    "lo-fi": {"energy": 0.40, "valence": 0.55, "danceability": 0.45, "tempo": 85, "acousticness": 0.35, "instrumentalness": 0.75},
    "downtempo": {"energy": 0.40, "valence": 0.55, "danceability": 0.50, "tempo": 95, "acousticness": 0.35, "instrumentalness": 0.65},

    # Reggae / ska / world
    "reggae": {"energy": 0.55, "valence": 0.70, "danceability": 0.70, "tempo": 80, "acousticness": 0.35, "instrumentalness": 0.25},
    "ska": {"energy": 0.70, "valence": 0.75, "danceability": 0.75, "tempo": 160, "acousticness": 0.25, "instrumentalness": 0.30},
    "dub": {"energy": 0.50, "valence": 0.60, "danceability": 0.65, "tempo": 75, "acousticness": 0.20, "instrumentalness": 0.60},
    "world": {"energy": 0.55, "valence": 0.60, "danceability": 0.60, "tempo": 110, "acousticness": 0.50, "instrumentalness": 0.40},
    "afrobeat": {"energy": 0.75, "valence": 0.75, "danceability": 0.85, "tempo": 115, "acousticness": 0.30, "instrumentalness": 0.35},

    # Mood / activity tags
    "sad": {"energy": 0.35, "valence": 0.25, "danceability": 0.35, "tempo": 85, "acousticness": 0.55, "instrumentalness": 0.30},
    "chill": {"energy": 0.35, "valence": 0.60, "danceability": 0.45, "tempo": 90, "acousticness": 0.40, "instrumentalness": 0.60},
    "party": {"energy": 0.85, "valence": 0.80, "danceability": 0.90, "tempo": 128, "acousticness": 0.10, "instrumentalness": 0.20},
    "workout": {"energy": 0.90, "valence": 0.70, "danceability": 0.85, "tempo": 135, "acousticness": 0.05, "instrumentalness": 0.30},
    "study": {"energy": 0.30, "valence": 0.55, "danceability": 0.30, "tempo": 90, "acousticness": 0.50, "instrumentalness": 0.85},
    "sleep": {"energy": 0.20, "valence": 0.50, "danceability": 0.20, "tempo": 70, "acousticness": 0.60, "instrumentalness": 0.90},
}

# Substrings hinting at minor-key / major-key material
SAD_GENRE_HINTS = ["emo", "goth", "doom", "sad", "melancholic", "dark", "post-punk", "shoegaze"]
HAPPY_GENRE_HINTS = ["happy", "upbeat", "party", "dance", "funk", "disco", "tropical"]


def match_profiles(genres):
    """Return the profile for each genre tag that matches the table.

    Exact matches win; otherwise the first table genre that contains the tag
    or is contained by it.
    """
    matched = []
    for genre in genres:
        g = genre.lower().strip()
        if not g:
            continue
        if g in GENRE_PROFILES:
            matched.append(GENRE_PROFILES[g])
            continue
        for name, profile in GENRE_PROFILES.items():
            if name in g or g in name:
                matched.append(profile)
                break
    return matched
