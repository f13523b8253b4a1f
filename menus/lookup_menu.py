import questionary

from spotify_catalog import (
    Album,
    Artist,
    Playlist,
    SimplifiedAlbum,
    SpotifyClient,
    SpotifyError,
    Track,
    User,
)
from utils.logger import log_error, log_info, log_warning

LOOKUP_KINDS = {
    "Artist": "get_artist",
    "Album": "get_album",
    "Track": "get_track",
    "Playlist": "get_playlist",
    "User": "get_user",
}

SEARCH_KINDS = {
    "Tracks": "search_tracks",
    "Artists": "search_artists",
    "Albums": "search_albums",
    "Playlists": "search_playlists",
}


def _artist_names(artists) -> str:
    return ", ".join(a.name for a in artists if a.name) or "Unknown artist"


def _format_duration(duration_ms: int) -> str:
    minutes, seconds = divmod(int(duration_ms) // 1000, 60)
    return f"{minutes}:{seconds:02d}"


def describe(record) -> str:
    """Return a short, human-readable summary of a decoded catalogue record."""

    if isinstance(record, Artist):
        followers = record.followers.total if record.followers else 0
        genres = ", ".join(record.genres) or "-"
        return f"🎤 {record.name} ({record.id}) | popularity {record.popularity} | {followers:,} followers | genres: {genres}"

    if isinstance(record, Album):
        lines = [
            f"💿 {record.name} by {_artist_names(record.artists)} ({record.release_date or 'unknown date'})",
            f"   {record.total_tracks} tracks | label: {record.label or '-'}",
        ]
        for item in record.get_items():
            lines.append(f"   {item.track_number:>2}. {item.name} [{_format_duration(item.duration_ms)}]")
        return "\n".join(lines)

    if isinstance(record, SimplifiedAlbum):
        return f"💿 {record.name} by {_artist_names(record.artists)} ({record.release_date or 'unknown date'})"

    if isinstance(record, Track):
        album = record.album.name if record.album else "-"
        return f"🎵 {_artist_names(record.artists)} - {record.name} [{_format_duration(record.duration_ms)}] on {album}"

    if isinstance(record, Playlist):
        owner = (record.owner.display_name or record.owner.id) if record.owner else "unknown"
        lines = [f"📜 {record.name} by {owner} | {record.tracks.total} tracks"]
        for item in record.get_items():
            if item.track is None:
                continue
            lines.append(f"   - {_artist_names(item.track.artists)} - {item.track.name}")
        return "\n".join(lines)

    if isinstance(record, User):
        followers = record.followers.total if record.followers else 0
        return f"👤 {record.display_name or record.id} ({record.id}) | {followers:,} followers"

    return repr(record)


def lookup_menu(client: SpotifyClient) -> None:
    """Prompt for a resource kind and id, then print the decoded record."""
    while True:
        kind = questionary.select(
            "🔎 Look up which kind of resource?",
            choices=list(LOOKUP_KINDS.keys()) + ["Back"],
        ).ask()

        if kind is None or kind == "Back":
            return

        resource_id = questionary.text(f"{kind} id:").ask()
        if not resource_id or not resource_id.strip():
            log_warning("No id entered.")
            continue

        accessor = getattr(client, LOOKUP_KINDS[kind])
        try:
            record = accessor(resource_id.strip())
        except SpotifyError as e:
            log_error(f"{kind} lookup failed: {e}")
            continue

        print("\n" + describe(record) + "\n")


def search_menu(client: SpotifyClient, config: dict) -> None:
    """Prompt for a search type and query, then list the matches."""
    limit = int((config or {}).get("search_limit", 10))

    while True:
        kind = questionary.select(
            "🔍 Search the catalog for:",
            choices=list(SEARCH_KINDS.keys()) + ["Back"],
        ).ask()

        if kind is None or kind == "Back":
            return

        query = questionary.text("Search query:").ask()
        if not query or not query.strip():
            log_warning("No query entered.")
            continue

        search = getattr(client, SEARCH_KINDS[kind])
        try:
            page = search(query, limit)
        except (SpotifyError, ValueError) as e:
            log_error(f"Search failed: {e}")
            continue

        if not page.items:
            log_info(f"No {kind.lower()} found for '{query}'.")
            continue

        log_info(f"Showing {len(page.items)} of {page.total} {kind.lower()} for '{query}':")
        for i, record in enumerate(page.items, start=1):
            print(f"{i:>3}. {describe(record)}")
        print()
