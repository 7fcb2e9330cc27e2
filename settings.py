"""Run configuration: CLI flags layered over environment variables.

resolve_config() is the only place that looks at the environment. Everything
downstream gets the frozen SyncConfig it returns.
"""

import os
from dataclasses import dataclass
from typing import Optional

from errors import MissingCredentialError
from song_format import DEFAULT_SONG_FORMAT

DEFAULT_FILE_PATH = "songs.txt"

# (config field, CLI flag, environment variable)
CREDENTIALS = (
    ("client_id", "--client-id", "SPOTIFY_CLIENT_ID"),
    ("client_secret", "--client-secret", "SPOTIFY_CLIENT_SECRET"),
    ("user_id", "--user-id", "SPOTIFY_USER_ID"),
    ("auth_token", "--auth-token", "SPOTIFY_AUTH_TOKEN"),
)

PLAYLIST_NAME_ENV = "PLAYLIST_NAME"
FILE_PATH_ENV = "FILE_PATH"
PLAYLIST_ID_ENV = "PLAYLIST_ID"


@dataclass(frozen=True)
class SyncConfig:
    client_id: str
    client_secret: str
    user_id: str
    auth_token: str
    file_path: str = DEFAULT_FILE_PATH
    playlist_name: str = ""
    playlist_id: Optional[str] = None
    song_format: str = DEFAULT_SONG_FORMAT
    fail_fast: bool = False
    delete_index: Optional[int] = None

    def __repr__(self):
        # keep secrets out of logs and tracebacks
        return (
            f"SyncConfig(user_id={self.user_id!r}, file_path={self.file_path!r}, "
            f"playlist_name={self.playlist_name!r}, playlist_id={self.playlist_id!r}, "
            f"song_format={self.song_format!r}, fail_fast={self.fail_fast!r}, "
            f"delete_index={self.delete_index!r})"
        )


def _clean(value):
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def first_set(*values):
    """Return the first value that is present and not blank."""
    for value in values:
        value = _clean(value)
        if value is not None:
            return value
    return None


def default_playlist_name(file_path):
    return f"Songs from {os.path.basename(file_path)}"


def resolve_config(args, environ=None):
    """Build a SyncConfig from parsed CLI args and an environment mapping.

    Flags win over environment variables. Raises MissingCredentialError
    naming every credential that is still unset.
    """
    if environ is None:
        environ = os.environ

    values = {}
    missing = []
    for field, flag, env_name in CREDENTIALS:
        value = first_set(getattr(args, field, None), environ.get(env_name))
        if value is None:
            missing.append(f"{flag} / {env_name}")
        values[field] = value

    if missing:
        raise MissingCredentialError(missing)

    file_path = first_set(
        getattr(args, "file", None), environ.get(FILE_PATH_ENV)
    ) or DEFAULT_FILE_PATH
    playlist_id = first_set(
        getattr(args, "playlist_id", None), environ.get(PLAYLIST_ID_ENV)
    )
    playlist_name = first_set(getattr(args, "name", None), environ.get(PLAYLIST_NAME_ENV))
    if playlist_name is None and playlist_id is None:
        playlist_name = default_playlist_name(file_path)

    song_format = getattr(args, "song_format", None) or DEFAULT_SONG_FORMAT

    return SyncConfig(
        file_path=file_path,
        playlist_name=playlist_name or "",
        playlist_id=playlist_id,
        song_format=song_format,
        fail_fast=bool(getattr(args, "fail_fast", False)),
        delete_index=getattr(args, "song_index", None),
        **values,
    )
