"""Parsing of song-list lines against a format template.

A template is split on "%" and every non-empty segment is tried, in order,
as a literal delimiter. The first one that cuts the line into exactly two
pieces decides: left is the song, right is the artist.

    parse_entry("Yesterday by The Beatles", "% by %")
    -> SongEntry(song="Yesterday", artist="The Beatles")
"""

from typing import NamedTuple

FORMAT_DELIMITER = "%"
DEFAULT_SONG_FORMAT = "[song name] by [artist name]"


class SongEntry(NamedTuple):
    song: str
    artist: str


def candidate_delimiters(song_format):
    """Return the literal delimiters a template offers, in order.

    Empty segments (leading/trailing "%" or "%%") can't split anything
    and are left out.
    """
    return [seg for seg in song_format.split(FORMAT_DELIMITER) if seg]


def parse_entry(line, song_format=DEFAULT_SONG_FORMAT):
    """Parse one line into a SongEntry, or None if it should be skipped."""
    for delimiter in candidate_delimiters(song_format):
        parts = line.split(delimiter)
        if len(parts) != 2:
            continue
        song, artist = parts[0].strip(), parts[1].strip()
        if not song or not artist:
            return None
        return SongEntry(song, artist)
    return None
