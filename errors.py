"""Error types shared by the playlist tool.

Everything below PlaylistToolError is fatal to a run except TrackSyncError,
which only costs the line it happened on (unless --fail-fast is set).
"""


class PlaylistToolError(RuntimeError):
    """Base class for errors the CLI turns into a message and exit code."""


class MissingCredentialError(PlaylistToolError):
    """Raised when one or more credentials are absent after resolution."""

    def __init__(self, missing):
        self.missing = list(missing)
        super().__init__(
            "Spotify credentials are missing: " + ", ".join(self.missing)
        )


class AuthenticationError(PlaylistToolError):
    """Raised when the client-credentials grant fails."""


class PlaylistCreationError(PlaylistToolError):
    """Raised when the target playlist cannot be created or reused."""


class FileReadError(PlaylistToolError):
    """Raised when the song list cannot be read."""


class TrackSyncError(PlaylistToolError):
    """Raised when searching or changing a single track fails."""
