"""Sway IPC queries.

Two read-only requests are needed for region selection: the full
output/workspace/window tree and the workspace list with visibility flags.
Each is a single synchronous round-trip; any failure is fatal.
"""

import logging
from typing import Optional

from i3ipc import Connection

from .errors import CompositorConnectionError
from .tree import WindowNode, Workspace

log = logging.getLogger(__name__)


class SwayConnection:
    """A connection to the running compositor's IPC socket."""

    def __init__(self, socket_path: Optional[str] = None):
        try:
            self._conn = Connection(socket_path=socket_path)
        except Exception as e:
            raise CompositorConnectionError(f"Could not connect to sway IPC: {e}") from e
        log.debug("Connected to sway IPC")

    def get_tree(self) -> WindowNode:
        """Fetch the root of the output/workspace/window hierarchy."""
        try:
            reply = self._conn.get_tree()
        except Exception as e:
            raise CompositorConnectionError(f"GET_TREE failed: {e}") from e
        return WindowNode.from_ipc(reply.ipc_data)

    def get_workspaces(self) -> list[Workspace]:
        """Fetch every workspace with its visibility flag."""
        try:
            replies = self._conn.get_workspaces()
        except Exception as e:
            raise CompositorConnectionError(f"GET_WORKSPACES failed: {e}") from e
        return [Workspace.from_ipc(reply.ipc_data) for reply in replies]
