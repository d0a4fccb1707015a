# Runtime configuration: credentials and paths come from the environment,
# everything else is a module constant.

import os
from dataclasses import dataclass
from pathlib import Path

# =====================================================================
# SPOTIFY
# =====================================================================

SCOPES = " ".join([
    "user-read-private",
    "user-read-currently-playing",
    "user-read-playback-state",
    "user-read-recently-played",
    "user-top-read",
    "user-library-read",
    "playlist-read-private",
    "playlist-read-collaborative",
    "playlist-modify-public",
    "playlist-modify-private",
])

TRACK_BATCH_SIZE = 50       # /tracks and /artists accept 50 ids per call
PLAYLIST_BATCH_SIZE = 100   # playlist add/remove accept 100 uris per call
MAX_RATE_LIMIT_RETRIES = 5
TOKEN_EXPIRY_MARGIN = 5 * 60  # seconds before expiry a token counts as stale

# =====================================================================
# PATHS
# =====================================================================

DEFAULT_DATA_DIR = Path.home() / ".local" / "share" / "toneprint"


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class Settings:
    client_id: str | None
    client_secret: str | None
    redirect_uri: str
    data_dir: Path
    market: str
    debug: bool

    @property
    def cache_dir(self) -> Path:
        return self.data_dir / "cache"

    @property
    def token_path(self) -> Path:
        return self.data_dir / "token.json"

    @classmethod
    def load(cls) -> "Settings":
        """Read settings at call time, not import time."""
        data_dir = os.getenv("TONEPRINT_DATA_DIR")
        return cls(
            client_id=os.getenv("SPOTIFY_CLIENT_ID"),
            client_secret=os.getenv("SPOTIFY_CLIENT_SECRET"),
            redirect_uri=os.getenv("SPOTIFY_REDIRECT_URI", "http://127.0.0.1:8888/callback"),
            data_dir=Path(data_dir).expanduser() if data_dir else DEFAULT_DATA_DIR,
            market=os.getenv("TONEPRINT_MARKET", "US"),
            debug=_env_flag("TONEPRINT_DEBUG", True),
        )

    def ensure_dirs(self) -> None:
        self.cache_dir.mkdir(parents=True, exist_ok=True)
