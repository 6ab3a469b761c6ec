"""Screenshot, recording and kill commands.

Uses grim for stills and wf-recorder for video. Screenshots block until
grim exits; recordings are launched in the background and outlive this
process until stopped with kill_recordings().
"""

import logging
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .config import Config
from .errors import ExternalToolError
from .output import copy_to_clipboard, notify
from .tree import Geometry

log = logging.getLogger(__name__)

PNG_MIME_TYPE = "image/png"


@dataclass(frozen=True)
class FileTarget:
    """Write the capture to a file."""

    path: Path


@dataclass(frozen=True)
class ClipboardTarget:
    """Put the capture on the clipboard."""


CaptureTarget = Union[FileTarget, ClipboardTarget]


def _geometry_args(region: Optional[Geometry]) -> list[str]:
    return ["-g", region] if region else []


def _run_grim(args: list[str]) -> bytes:
    try:
        result = subprocess.run(args, capture_output=True)
    except OSError as e:
        raise ExternalToolError(f"{args[0]} could not be started: {e}") from e

    if result.returncode != 0:
        stderr = result.stderr.decode(errors="replace").strip()
        raise ExternalToolError(f"Screen capture failed: {stderr}")

    return result.stdout


def take_screenshot(region: Optional[Geometry], target: CaptureTarget, config: Config) -> None:
    """Capture the screen (or ``region``) to ``target`` and notify.

    Raises:
        ExternalToolError: If grim fails
        ClipboardError: If the image cannot be copied
        NotificationError: If the notification cannot be shown
    """
    args = [config.grim] + _geometry_args(region)

    if isinstance(target, FileTarget):
        _run_grim(args + [str(target.path)])
        notify(f"saved to {target.path}", config)
    else:
        image = _run_grim(args + ["-"])
        copy_to_clipboard(image, PNG_MIME_TYPE, config)
        notify("copied to clipboard", config)


def recorder_command(region: Optional[Geometry], path: Path, audio: bool, config: Config) -> list[str]:
    args = [config.wf_recorder] + _geometry_args(region) + ["-f", str(path)]
    if audio:
        args.append(config.audio_flag)
    return args


def start_recording(
    region: Optional[Geometry],
    path: Path,
    audio: bool,
    config: Config,
) -> subprocess.Popen:
    """Announce, wait, then launch wf-recorder in the background.

    The returned process is not owned by the caller: it runs in its own
    session, is never waited on, and keeps recording after we exit.

    Raises:
        NotificationError: If the announcement cannot be shown
        ExternalToolError: If wf-recorder cannot be started
    """
    args = recorder_command(region, path, audio, config)

    notify(f"starting recording to be saved at {path}", config)
    # Leave the notification on screen before capture begins
    time.sleep(config.record_delay_s)

    try:
        process = subprocess.Popen(
            args,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as e:
        raise ExternalToolError(f"{config.wf_recorder} could not be started: {e}") from e

    log.debug("Recorder started, PID=%d", process.pid)
    return process


def kill_recordings(config: Config) -> None:
    """Interrupt every running wf-recorder, including other invocations'.

    killall's exit status is ignored: no recorder running is not an error.

    Raises:
        ExternalToolError: If killall cannot be started
    """
    args = [config.killall, "-s", "INT", Path(config.wf_recorder).name]
    try:
        result = subprocess.run(args, capture_output=True)
    except OSError as e:
        raise ExternalToolError(f"{config.killall} could not be started: {e}") from e

    log.debug("%s exited with status %d", config.killall, result.returncode)
