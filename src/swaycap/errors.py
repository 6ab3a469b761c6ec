"""Error types raised across swaycap.

All of them are fatal for the current invocation and are reported by the CLI.
"""


class SwaycapError(Exception):
    """Base class for all swaycap failures."""
    pass


class CompositorConnectionError(SwaycapError, ConnectionError):
    """Raised when the compositor IPC socket is unreachable or a query fails."""
    pass


class ProtocolInvariantError(SwaycapError):
    """Raised when the compositor reply breaks its own contract."""
    pass


class ExternalToolError(SwaycapError):
    """Raised when a helper process cannot be spawned or fails."""
    pass


class ClipboardError(SwaycapError):
    """Raised when the clipboard contents cannot be replaced."""
    pass


class NotificationError(SwaycapError):
    """Raised when a desktop notification cannot be shown."""
    pass


class ConfigError(SwaycapError):
    """Raised when a configuration value has the wrong type."""
    pass


class OutputError(SwaycapError):
    """Raised when the output location cannot be prepared."""
    pass
