"""Post-capture output handling.

Handles:
- Output file naming
- Copying to clipboard
- Desktop notifications
"""

import logging
import subprocess
from datetime import datetime
from pathlib import Path
from typing import Optional

from .config import Config
from .errors import ClipboardError, NotificationError, OutputError

log = logging.getLogger(__name__)

_notify_initialized = False


def output_path(extension: str, config: Config, now: Optional[datetime] = None) -> Path:
    """Build ``<output_dir>/<RFC 3339 local timestamp>.<extension>``."""
    now = now or datetime.now().astimezone()
    timestamp = now.isoformat(timespec="seconds")
    try:
        config.output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OutputError(f"Cannot create output directory {config.output_dir}: {e}") from e
    return config.output_dir / f"{timestamp}.{extension}"


def copy_to_clipboard(data: bytes, mime_type: str, config: Config) -> None:
    """Replace the clipboard contents using wl-copy.

    Raises:
        ClipboardError: If wl-copy cannot be run or fails
    """
    try:
        result = subprocess.run(
            [config.wl_copy, "--type", mime_type],
            input=data,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
        )
    except OSError as e:
        raise ClipboardError(f"{config.wl_copy} could not be started: {e}") from e

    if result.returncode != 0:
        message = result.stderr.decode(errors="replace").strip()
        raise ClipboardError(message or f"{config.wl_copy} exited with status {result.returncode}")

    log.debug("Copied %d bytes (%s) to clipboard", len(data), mime_type)


def notify(message: str, config: Config) -> None:
    """Show a transient desktop notification.

    Raises:
        NotificationError: If libnotify cannot show the notification
    """
    global _notify_initialized

    log.info(message)
    if not config.enable_notification:
        return

    try:
        import gi
        gi.require_version("Notify", "0.7")
        from gi.repository import GLib, Notify
    except (ImportError, ValueError) as e:
        raise NotificationError(f"libnotify is unavailable: {e}") from e

    try:
        if not _notify_initialized:
            Notify.init("swaycap")
            _notify_initialized = True
        notification = Notify.Notification.new(config.notification_summary, message, None)
        notification.set_timeout(config.notification_timeout_ms)
        notification.show()
    except GLib.Error as e:
        raise NotificationError(f"Could not show notification: {e.message}") from e
