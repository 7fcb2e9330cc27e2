"""Tests for settings.py: flag/environment layering and credential checks."""

import os
import sys
from argparse import Namespace

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from errors import MissingCredentialError
from settings import DEFAULT_FILE_PATH, SyncConfig, first_set, resolve_config
from song_format import DEFAULT_SONG_FORMAT


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

FULL_ENV = {
    "SPOTIFY_CLIENT_ID": "env-id",
    "SPOTIFY_CLIENT_SECRET": "env-secret",
    "SPOTIFY_USER_ID": "env-user",
    "SPOTIFY_AUTH_TOKEN": "env-token",
}


def make_args(**kwargs):
    defaults = dict(
        client_id=None, client_secret=None, user_id=None, auth_token=None,
        file=None, name=None, playlist_id=None, song_format=None,
        fail_fast=False, song_index=None,
    )
    defaults.update(kwargs)
    return Namespace(**defaults)


# ---------------------------------------------------------------------------
# first_set()
# ---------------------------------------------------------------------------

class TestFirstSet:
    def test_first_non_blank(self):
        assert first_set(None, "  ", "b", "c") == "b"

    def test_strips(self):
        assert first_set("  a  ") == "a"

    def test_all_missing(self):
        assert first_set(None, "") is None


# ---------------------------------------------------------------------------
# resolve_config()
# ---------------------------------------------------------------------------

class TestResolveConfig:
    def test_credentials_from_env(self):
        config = resolve_config(make_args(), FULL_ENV)
        assert config.client_id == "env-id"
        assert config.client_secret == "env-secret"
        assert config.user_id == "env-user"
        assert config.auth_token == "env-token"

    def test_flags_override_env(self):
        args = make_args(client_id="flag-id", auth_token="flag-token")
        config = resolve_config(args, FULL_ENV)
        assert config.client_id == "flag-id"
        assert config.auth_token == "flag-token"
        assert config.client_secret == "env-secret"

    def test_all_missing_listed(self):
        with pytest.raises(MissingCredentialError) as exc:
            resolve_config(make_args(), {})
        assert len(exc.value.missing) == 4
        assert "--client-id / SPOTIFY_CLIENT_ID" in exc.value.missing
        assert "--auth-token / SPOTIFY_AUTH_TOKEN" in exc.value.missing

    @pytest.mark.parametrize("env_name", sorted(FULL_ENV))
    def test_any_single_missing_fails(self, env_name):
        env = {k: v for k, v in FULL_ENV.items() if k != env_name}
        with pytest.raises(MissingCredentialError) as exc:
            resolve_config(make_args(), env)
        assert len(exc.value.missing) == 1
        assert env_name in exc.value.missing[0]

    def test_blank_value_counts_as_missing(self):
        env = dict(FULL_ENV, SPOTIFY_USER_ID="   ")
        with pytest.raises(MissingCredentialError) as exc:
            resolve_config(make_args(), env)
        assert exc.value.missing == ["--user-id / SPOTIFY_USER_ID"]

    def test_defaults(self):
        config = resolve_config(make_args(), FULL_ENV)
        assert config.file_path == DEFAULT_FILE_PATH
        assert config.song_format == DEFAULT_SONG_FORMAT
        assert config.playlist_name == "Songs from songs.txt"
        assert config.playlist_id is None
        assert config.fail_fast is False
        assert config.delete_index is None

    def test_file_and_name_from_env(self):
        env = dict(FULL_ENV, FILE_PATH="/tmp/list.txt", PLAYLIST_NAME="Road Trip")
        config = resolve_config(make_args(), env)
        assert config.file_path == "/tmp/list.txt"
        assert config.playlist_name == "Road Trip"

    def test_file_and_name_flags_override_env(self):
        env = dict(FULL_ENV, FILE_PATH="/tmp/list.txt", PLAYLIST_NAME="Road Trip")
        config = resolve_config(make_args(file="mine.txt", name="Mine"), env)
        assert config.file_path == "mine.txt"
        assert config.playlist_name == "Mine"

    def test_reused_playlist_has_no_default_name(self):
        env = dict(FULL_ENV, PLAYLIST_ID="pl9")
        config = resolve_config(make_args(), env)
        assert config.playlist_id == "pl9"
        assert config.playlist_name == ""

    def test_song_format_kept_verbatim(self):
        config = resolve_config(make_args(song_format=" by "), FULL_ENV)
        assert config.song_format == " by "

    def test_options_copied(self):
        config = resolve_config(make_args(fail_fast=True, song_index=3), FULL_ENV)
        assert config.fail_fast is True
        assert config.delete_index == 3

    def test_config_is_frozen(self):
        config = resolve_config(make_args(), FULL_ENV)
        with pytest.raises(Exception):
            config.auth_token = "other"

    def test_repr_hides_secrets(self):
        config = SyncConfig("id", "very-secret", "user", "very-token")
        assert "very-secret" not in repr(config)
        assert "very-token" not in repr(config)
