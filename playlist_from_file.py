#!/usr/bin/env python3
"""
Create a Spotify playlist from a plain-text list of songs.

Each line of the input file is matched against a song format template, the
first Spotify search result for "song artist" is looked up, and every match
is appended to a new private playlist (or to an existing one with
--playlist-id). Lines that don't parse or don't match are skipped.

Usage:
  python3 playlist_from_file.py -n "Road Trip" -f songs.txt -x "% by %"
  python3 playlist_from_file.py -p PLAYLIST_ID -f more_songs.txt -x "% - %"
  python3 playlist_from_file.py --delete -i 3 -p PLAYLIST_ID
  python3 playlist_from_file.py --usage      # More examples
"""

import argparse
import os
import sys
from dataclasses import dataclass

from dotenv import load_dotenv

from errors import FileReadError, PlaylistToolError, TrackSyncError
from log_setup import DEFAULT_LOG_DIR, get_logger, start_session
from settings import DEFAULT_FILE_PATH, PLAYLIST_ID_ENV, resolve_config
from song_format import DEFAULT_SONG_FORMAT, parse_entry
from spotify_client import (
    add_track_to_playlist, authenticate, create_client, create_playlist,
    create_session, fetch_playlist, remove_track_at, search_track,
)

log = get_logger("playlist_from_file")

USAGE_EXAMPLES = f"""\
Examples:
  # Credentials from flags (or SPOTIFY_CLIENT_ID, SPOTIFY_CLIENT_SECRET,
  # SPOTIFY_USER_ID, SPOTIFY_AUTH_TOKEN in the environment or a .env file)
  python3 playlist_from_file.py -c ID -s SECRET -u USER -a TOKEN -n "Road Trip"

  # Lines like "Yesterday by The Beatles"
  python3 playlist_from_file.py -n "Road Trip" -x "% by %"

  # Lines like "Yesterday - The Beatles"
  python3 playlist_from_file.py -f tracks.txt -x "% - %"

  # Several formats in one file: delimiters are tried left to right
  python3 playlist_from_file.py -x "% by % - %"

  # Append to an existing playlist instead of creating one
  python3 playlist_from_file.py -p 37i9dQZF1DXcBWIGoYBM5M -f more.txt

  # Remove the 3rd track of a playlist
  python3 playlist_from_file.py --delete -i 3 -p 37i9dQZF1DXcBWIGoYBM5M

Format templates are split on "%"; each piece is a literal delimiter.
The default "{DEFAULT_SONG_FORMAT}" has no "%", so a line only parses
if it contains that whole text exactly once.
"""


@dataclass
class SyncReport:
    added: int = 0
    not_found: int = 0
    skipped: int = 0
    failed: int = 0
    aborted: bool = False

    @property
    def total(self):
        return self.added + self.not_found + self.skipped + self.failed

    def summary(self):
        return (
            f"Done: {self.added} added, {self.not_found} not found, "
            f"{self.skipped} skipped, {self.failed} failed ({self.total} lines)"
        )


# --- File I/O ---

def read_lines(path):
    """Read the whole song list as UTF-8 (BOM tolerated) and return its lines."""
    try:
        with open(path, encoding="utf-8-sig") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise FileReadError(f"Error reading the input file '{path}': {e}") from e
    return text.splitlines()


# --- Sync ---

def prepare_playlist(sp, config):
    """Return the id of the playlist to fill, creating it unless one is reused."""
    if config.playlist_id:
        playlist = fetch_playlist(sp, config.playlist_id)
        log.info(f"Reusing playlist '{playlist.get('name', '?')}' ({config.playlist_id})")
        return config.playlist_id

    log.info(f"Creating playlist '{config.playlist_name}'...")
    playlist_id = create_playlist(sp, config.user_id, config.playlist_name)
    log.info(f"  Created playlist: {playlist_id}")
    return playlist_id


def sync_entries(sp, playlist_id, lines, song_format, fail_fast=False):
    """Parse, search and append every line in order. Returns a SyncReport.

    A failed search or append is counted and the loop moves on, unless
    fail_fast is set, in which case the report is marked aborted and the
    remaining lines are left alone.
    """
    report = SyncReport()

    for i, line in enumerate(lines):
        prefix = f"[{i+1}/{len(lines)}]"
        entry = parse_entry(line, song_format)
        if entry is None:
            report.skipped += 1
            log.debug(f"{prefix} SKIP  {line!r}")
            continue

        try:
            uri = search_track(sp, entry.song, entry.artist)
            if uri is None:
                report.not_found += 1
                log.info(f"{prefix} MISS  {entry.song} by {entry.artist}")
                continue
            add_track_to_playlist(sp, playlist_id, uri)
        except TrackSyncError as e:
            report.failed += 1
            log.error(f"{prefix} FAIL  {entry.song} by {entry.artist}: {e}")
            if fail_fast:
                report.aborted = True
                break
            continue

        report.added += 1
        log.info(f"{prefix} OK    {entry.song} by {entry.artist} → {uri}")

    return report


def delete_track(sp, config):
    track = remove_track_at(sp, config.playlist_id, config.delete_index)
    log.info(
        f"Removed #{config.delete_index} '{track.get('name', track['uri'])}' "
        f"from playlist {config.playlist_id}"
    )
    return 0


def run(config):
    """Authenticate, get the playlist ready and sync the file. Returns an exit code.

    Fatal problems surface as PlaylistToolError subclasses.
    """
    session = create_session()
    authenticate(config.client_id, config.client_secret, session=session)
    log.info("Spotify credentials OK.")
    sp = create_client(config.auth_token, session=session)

    if config.delete_index is not None:
        return delete_track(sp, config)

    playlist_id = prepare_playlist(sp, config)

    lines = read_lines(config.file_path)
    log.info(f"Read {len(lines)} lines from {config.file_path}")

    report = sync_entries(sp, playlist_id, lines, config.song_format, fail_fast=config.fail_fast)
    log.info(report.summary())

    if report.aborted:
        log.error("Stopped at the first failed track (--fail-fast).")
        return 1

    log.info("Playlist creation and song addition complete.")
    return 0


# --- CLI ---

class HelpOnErrorParser(argparse.ArgumentParser):
    def error(self, message):
        self.print_help(sys.stderr)
        sys.stderr.write(f"\nerror: {message}\n")
        sys.exit(2)


def build_parser():
    parser = HelpOnErrorParser(description="Create a Spotify playlist from a text file of songs")
    parser.add_argument("-c", "--client-id", help="Spotify app Client ID (default: $SPOTIFY_CLIENT_ID)")
    parser.add_argument("-s", "--client-secret", help="Spotify app Client Secret (default: $SPOTIFY_CLIENT_SECRET)")
    parser.add_argument("-u", "--user-id", help="Spotify user that will own the playlist (default: $SPOTIFY_USER_ID)")
    parser.add_argument("-a", "--auth-token", help="User access token with playlist-modify scope (default: $SPOTIFY_AUTH_TOKEN)")
    parser.add_argument("-f", "--file", help=f"Input file, one song per line (default: $FILE_PATH or {DEFAULT_FILE_PATH})")
    parser.add_argument("-n", "--name", help="Name of the playlist to create (default: $PLAYLIST_NAME)")
    parser.add_argument("-p", "--playlist-id", help=f"Add to this existing playlist instead (default: ${PLAYLIST_ID_ENV})")
    parser.add_argument("-x", "--song-format", help=f"Song entry format, '%%' separates delimiters (default: '{DEFAULT_SONG_FORMAT}')")
    parser.add_argument("-d", "--delete", action="store_true", help="Delete a song from the playlist (requires --song-index and --playlist-id)")
    parser.add_argument("-i", "--song-index", type=int, metavar="N", help="1-based position of the song to delete (use with --delete)")
    parser.add_argument("--fail-fast", action="store_true", help="Stop at the first song that fails to search or add")
    parser.add_argument("--log-dir", help=f"Where latest.log and playlist.log are written (default: ./{DEFAULT_LOG_DIR})")
    parser.add_argument("-v", "--usage", action="store_true", help="Show usage examples and exit")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.usage:
        print(USAGE_EXAMPLES)
        return 0
    if args.delete and args.song_index is None:
        parser.error("--delete requires --song-index")
    if args.song_index is not None and not args.delete:
        parser.error("--song-index only makes sense with --delete")

    start_session(args.log_dir)
    load_dotenv()

    try:
        config = resolve_config(args, os.environ)
        if config.delete_index is not None and not config.playlist_id:
            parser.error(f"--delete requires --playlist-id (or ${PLAYLIST_ID_ENV})")
        return run(config)
    except PlaylistToolError as e:
        log.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
