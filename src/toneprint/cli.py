"""CLI entrypoint for toneprint."""

import typer

from toneprint import console
from toneprint.config import Settings
from toneprint.errors import AuthExpired, ProviderError

app = typer.Typer(
    name="toneprint",
    help="Spotify taste analysis and discovery",
    no_args_is_help=True,
)


def _settings() -> Settings:
    settings = Settings.load()
    console.configure(settings)
    settings.ensure_dirs()
    return settings


def _connect(settings: Settings):
    from toneprint.catalog import SpotifyCatalog
    from toneprint.session import TokenSession

    session = TokenSession.from_settings(settings)
    session.authorize()
    return SpotifyCatalog(session, market=settings.market)


def _fail(e: Exception) -> None:
    if isinstance(e, AuthExpired):
        typer.echo("Spotify session expired. Run 'toneprint logout' and reconnect.", err=True)
    else:
        typer.echo(f"Error: {e}", err=True)
    raise typer.Exit(1)


@app.command()
def analyze(
    time_range: str = typer.Option("medium_term", "--time-range", "-t", help="short_term, medium_term or long_term"),
    limit: int = typer.Option(50, "-n", help="Number of top tracks to analyze"),
    no_cache: bool = typer.Option(False, "--no-cache", help="Ignore any cached TonePrint"),
    stats: bool = typer.Option(False, "--stats", help="Also show per-feature distributions"),
) -> None:
    """Build a TonePrint from your top tracks."""
    from toneprint.analysis import analyze_listening, listening_feature_summary
    from toneprint.cache import JsonFileCache
    from toneprint.engine import vibe_emoji

    settings = _settings()
    cache = None if no_cache else JsonFileCache(settings.cache_dir)
    try:
        catalog = _connect(settings)
        tp = analyze_listening(catalog, time_range=time_range, limit=limit, cache=cache)
        summary = listening_feature_summary(catalog, time_range, limit) if stats else {}
    except ProviderError as e:
        _fail(e)

    typer.echo(f"\nTonePrint ({tp.track_count} tracks)\n")
    typer.echo(f"  Persona:     {tp.listening_persona}")
    typer.echo(f"  Vibe:        {vibe_emoji(tp.dominant_vibe)} {tp.dominant_vibe}")
    typer.echo(f"  Mood:        {tp.dominant_mood}")
    typer.echo(f"  Energy:      {tp.dominant_energy}")
    typer.echo(f"  Intensity:   {tp.intensity_score}")
    typer.echo(f"  Diversity:   {tp.diversity_score}  (consistency {tp.consistency_score})")
    typer.echo(f"  Mainstream:  {tp.mainstream_score}")
    typer.echo(f"  Vocals:      {tp.vocal_preference}")

    typer.echo("\nVibes:")
    for vibe, pct in tp.vibe_categories.items():
        typer.echo(f"  {vibe:10s} {pct:3d}%")

    if summary:
        typer.echo("\nFeatures:               mean  median   stdev")
        for name, s in summary.items():
            typer.echo(f"  {name:18s} {s['mean']:7.2f} {s['median']:7.2f} {s['stdev']:7.2f}")


@app.command()
def profile(
    time_range: str = typer.Option("medium_term", "--time-range", "-t"),
    limit: int = typer.Option(50, "-n"),
) -> None:
    """Show the taste profile that bounds discovery."""
    from toneprint.analysis import infer_for_tracks, library_tracks, load_listening_library
    from toneprint.taste import build_taste_profile

    settings = _settings()
    try:
        tracks = load_listening_library(_connect(settings), time_range, limit)
    except ProviderError as e:
        _fail(e)

    p = build_taste_profile(library_tracks(tracks, infer_for_tracks(tracks)))
    typer.echo(f"\nPopularity: {p.avg_popularity:.1f} ± {p.popularity_std_dev:.1f}")
    typer.echo(f"Energy {p.avg_energy:.2f}  Valence {p.avg_valence:.2f}  Tempo {p.avg_tempo:.0f}")

    typer.echo("\nTop Genres:")
    for genre in p.top_genres:
        typer.echo(f"  {genre}")

    typer.echo("\nTop Artists:")
    for artist in p.top_artists:
        typer.echo(f"  {artist.name}: {artist.count}")


@app.command()
def discover(
    n: int = typer.Option(25, "-n", help="Number of tracks to discover"),
    min_energy: float = typer.Option(None, "--min-energy"),
    max_energy: float = typer.Option(None, "--max-energy"),
    min_valence: float = typer.Option(None, "--min-valence"),
    max_valence: float = typer.Option(None, "--max-valence"),
    min_tempo: float = typer.Option(None, "--min-tempo"),
    max_tempo: float = typer.Option(None, "--max-tempo"),
    genre: list[str] = typer.Option(None, "--genre", "-g", help="Restrict related artists to these genres"),
) -> None:
    """Find new tracks that match your taste."""
    from toneprint.analysis import infer_for_tracks, library_tracks, load_listening_library
    from toneprint.discovery import discover_tracks, filter_discovered_tracks_by_features
    from toneprint.models import DiscoveryOptions, FeatureFilters

    settings = _settings()
    filters = FeatureFilters(min_energy, max_energy, min_valence, max_valence, min_tempo, max_tempo)
    options = DiscoveryOptions(
        target_count=n,
        feature_filters=filters,
        top_genres=tuple(genre) if genre else None,
    )

    try:
        catalog = _connect(settings)
        tracks = load_listening_library(catalog, "medium_term", 50)
        user_tracks = library_tracks(tracks, infer_for_tracks(tracks))
        found = discover_tracks(catalog, user_tracks, options)
        found = filter_discovered_tracks_by_features(found, options.feature_filters, catalog)
    except ProviderError as e:
        _fail(e)

    typer.echo(f"\nDiscovered {len(found)} tracks\n")
    for i, t in enumerate(found, 1):
        source = "saved album" if t.is_from_saved_album else "discovered"
        typer.echo(f"  {i:2d}. {t.artist} - {t.name} ({t.album}) [{source}]")


@app.command("now-playing")
def now_playing() -> None:
    """Show the current track with its inferred mood and energy."""
    from toneprint.analysis import infer_single_track
    from toneprint.engine import energy_label, mood_emoji, mood_label

    settings = _settings()
    try:
        catalog = _connect(settings)
        playback = catalog.get_current_playback()
        if playback is None:
            typer.echo("Nothing playing")
            return
        features = infer_single_track(catalog, playback.track.id)
    except ProviderError as e:
        _fail(e)

    t = playback.track
    typer.echo(f"{t.artist} - {t.name}")
    typer.echo(f"  {mood_emoji(features.valence)} {mood_label(features.valence)}, {energy_label(features.energy)}")
    typer.echo(f"  ~{features.tempo:.0f} BPM")


@app.command("cache-clear")
def cache_clear() -> None:
    """Delete cached analyses."""
    from toneprint.cache import JsonFileCache

    removed = JsonFileCache(_settings().cache_dir).clear_all()
    typer.echo(f"Removed {removed} cache entries")


@app.command()
def logout() -> None:
    """Forget stored Spotify credentials."""
    from toneprint.session import CredentialStore

    CredentialStore(_settings().token_path).clear()
    typer.echo("Logged out")


if __name__ == "__main__":
    app()
