"""Interactive region selection via slurp.

slurp is seeded with the geometry of every visible window on stdin, which
makes those rectangles clickable "snap" targets. A click selects a window,
a drag selects a free region, Escape cancels.
"""

import logging
import subprocess
from typing import Optional

from .config import Config
from .errors import ExternalToolError
from .sway import SwayConnection
from .tree import Geometry, visible_windows

log = logging.getLogger(__name__)


def parse_selection(output: str) -> Optional[Geometry]:
    """Turn slurp's stdout into a geometry, or None if the user cancelled.

    The text is trusted as printed; it is not re-parsed.
    """
    region = output.strip()
    return region or None


def _run_selector(args: list[str], candidates: str) -> str:
    """Spawn the selector, pipe candidates in, wait for exit, return stdout.

    Raises:
        ExternalToolError: If any step fails
    """
    try:
        process = subprocess.Popen(
            args,
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            text=True,
        )
    except OSError as e:
        raise ExternalToolError(f"{args[0]} could not be started: {e}") from e

    try:
        stdout, _ = process.communicate(candidates)
    except OSError as e:
        process.kill()
        process.wait()
        raise ExternalToolError(f"I/O with {args[0]} failed: {e}") from e

    log.debug("%s exited with status %d", args[0], process.returncode)
    return stdout or ""


def selector_command(config: Config) -> list[str]:
    return [
        config.slurp,
        "-b", config.slurp_background,
        "-c", config.slurp_border,
    ]


def select_region(config: Config) -> Optional[Geometry]:
    """Let the user pick a window or drag a region.

    Returns:
        The selected geometry, or None if the selection was cancelled

    Raises:
        CompositorConnectionError: If sway cannot be queried
        ProtocolInvariantError: If the sway tree is malformed
        ExternalToolError: If slurp cannot be run
    """
    sway = SwayConnection()
    windows = visible_windows(sway.get_tree(), sway.get_workspaces())

    output = _run_selector(selector_command(config), "\n".join(windows))
    region = parse_selection(output)

    if region is None:
        log.debug("Selection cancelled")
    else:
        log.debug("Selected region: %s", region)
    return region
