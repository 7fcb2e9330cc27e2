"""Thin Spotify Web API wrapper used by playlist_from_file.py.

Application credentials are checked with the client-credentials grant;
playlist and search calls run on the user's access token, which is the one
allowed to modify playlists.
"""

import requests as _requests
import spotipy
from spotipy.exceptions import SpotifyException
from spotipy.oauth2 import SpotifyClientCredentials, SpotifyOauthError

from errors import AuthenticationError, PlaylistCreationError, TrackSyncError

PLAYLIST_DESCRIPTION = "Created by playlist-from-file"

# Errors a single API call can end in.
API_ERRORS = (SpotifyException, _requests.RequestException)


def create_session():
    """requests session shared by spotipy calls. No automatic retries."""
    session = _requests.Session()
    session.mount("https://", _requests.adapters.HTTPAdapter(max_retries=0))
    return session


def authenticate(client_id, client_secret, session=None):
    """Run the client-credentials grant and return the access token.

    Raises AuthenticationError if Spotify rejects the id/secret pair or
    the token endpoint can't be reached.
    """
    manager = SpotifyClientCredentials(
        client_id=client_id,
        client_secret=client_secret,
        requests_session=session or create_session(),
    )
    try:
        token = manager.get_access_token(as_dict=False)
    except (SpotifyOauthError, _requests.RequestException) as e:
        raise AuthenticationError(
            "Invalid Spotify credentials. Please check your Client ID and Client Secret."
        ) from e
    if not token:
        raise AuthenticationError("Spotify returned no access token.")
    return token


def create_client(auth_token, session=None):
    """Create a spotipy.Spotify instance bound to a user access token."""
    return spotipy.Spotify(auth=auth_token, requests_session=session or create_session())


def create_playlist(sp, user_id, name):
    """Create a private playlist for user_id and return its id."""
    try:
        result = sp.user_playlist_create(
            user_id, name, public=False, description=PLAYLIST_DESCRIPTION,
        )
    except API_ERRORS as e:
        raise PlaylistCreationError(f"Failed to create playlist '{name}': {e}") from e

    playlist_id = (result or {}).get("id")
    if not playlist_id:
        raise PlaylistCreationError(f"Failed to create playlist '{name}': no id in response")
    return playlist_id


def fetch_playlist(sp, playlist_id):
    """Look up an existing playlist so it can be reused."""
    try:
        return sp.playlist(playlist_id, fields="id,name")
    except API_ERRORS as e:
        raise PlaylistCreationError(f"Playlist {playlist_id} is not accessible: {e}") from e


def search_track(sp, song, artist):
    """Return the URI of the first track matching "song artist", or None."""
    try:
        results = sp.search(q=f"{song} {artist}", type="track", limit=1)
    except API_ERRORS as e:
        raise TrackSyncError(f"Search failed for '{song}' by '{artist}': {e}") from e

    items = ((results or {}).get("tracks") or {}).get("items") or []
    if not items or not items[0]:
        return None
    return items[0].get("uri")


def add_track_to_playlist(sp, playlist_id, track_uri):
    """Append one track URI to the playlist. Returns the new snapshot id."""
    try:
        result = sp.playlist_add_items(playlist_id, [track_uri])
    except API_ERRORS as e:
        raise TrackSyncError(f"Failed to add {track_uri}: {e}") from e
    return (result or {}).get("snapshot_id")


def remove_track_at(sp, playlist_id, position):
    """Remove the track at a 1-based position. Returns the removed track dict."""
    if position < 1:
        raise TrackSyncError(f"Song index must be 1 or greater, got {position}")

    offset = position - 1
    try:
        page = sp.playlist_items(playlist_id, limit=1, offset=offset)
    except API_ERRORS as e:
        raise TrackSyncError(f"Failed to read playlist {playlist_id}: {e}") from e

    items = (page or {}).get("items") or []
    track = (items[0].get("track") or items[0].get("item")) if items else None
    if not track or not track.get("uri"):
        raise TrackSyncError(f"Playlist {playlist_id} has no track at position {position}")

    try:
        sp.playlist_remove_specific_occurrences_of_items(
            playlist_id, [{"uri": track["uri"], "positions": [offset]}],
        )
    except API_ERRORS as e:
        raise TrackSyncError(f"Failed to remove {track['uri']}: {e}") from e
    return track
