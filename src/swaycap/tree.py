"""Compositor tree model and visible-window extraction.

The tree is a read-only snapshot built from the compositor's GET_TREE reply:

    root
    └── output
        └── workspace
            ├── con (window when it has a pid, container otherwise)
            └── floating_con ...

Only windows on workspaces that are currently visible are candidates for
region selection.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from .errors import ProtocolInvariantError

log = logging.getLogger(__name__)

Geometry = str


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int

    @classmethod
    def from_ipc(cls, data: dict) -> "Rect":
        return cls(
            x=int(data.get("x", 0)),
            y=int(data.get("y", 0)),
            width=int(data.get("width", 0)),
            height=int(data.get("height", 0)),
        )


@dataclass
class WindowNode:
    """A node of the compositor tree."""

    type: str
    rect: Rect
    name: Optional[str] = None
    pid: Optional[int] = None
    nodes: list["WindowNode"] = field(default_factory=list)
    floating_nodes: list["WindowNode"] = field(default_factory=list)

    @property
    def is_window(self) -> bool:
        """Whether this node is a real window rather than a container."""
        return self.pid is not None

    @classmethod
    def from_ipc(cls, data: dict) -> "WindowNode":
        """Build a node (and its subtree) from a sway IPC tree reply."""
        return cls(
            type=data.get("type", ""),
            rect=Rect.from_ipc(data.get("rect") or {}),
            name=data.get("name"),
            pid=data.get("pid"),
            nodes=[cls.from_ipc(child) for child in data.get("nodes") or []],
            floating_nodes=[cls.from_ipc(child) for child in data.get("floating_nodes") or []],
        )


@dataclass(frozen=True)
class Workspace:
    name: str
    visible: bool

    @classmethod
    def from_ipc(cls, data: dict) -> "Workspace":
        return cls(name=data["name"], visible=bool(data.get("visible", False)))


def format_geometry(rect: Rect) -> Geometry:
    """Encode a rectangle as ``"<x>,<y> <width>x<height>"``.

    This is the format slurp reads on stdin and prints on stdout, and the
    format grim and wf-recorder accept for ``-g``.
    """
    return f"{rect.x},{rect.y} {rect.width}x{rect.height}"


def visible_workspaces(root: WindowNode, workspaces: Iterable[Workspace]) -> list[WindowNode]:
    """Return the workspace nodes of ``root`` that are currently visible.

    Raises:
        ProtocolInvariantError: If a workspace node carries no name
    """
    outputs = [node for node in root.nodes if node.type == "output"]
    workspace_nodes = [
        node
        for output in outputs
        for node in output.nodes
        if node.type == "workspace"
    ]
    visible_names = {ws.name for ws in workspaces if ws.visible}

    visible = []
    for node in workspace_nodes:
        if node.name is None:
            raise ProtocolInvariantError("Workspace should have a name")
        if node.name in visible_names:
            visible.append(node)

    log.debug(
        "Visible workspaces: %s (of %d)",
        [node.name for node in visible],
        len(workspace_nodes),
    )
    return visible


def visible_windows(root: WindowNode, workspaces: Iterable[Workspace]) -> list[Geometry]:
    """Return the geometry of every window on a visible workspace.

    Tiled and floating windows are included at any nesting depth. Pure
    containers (nodes without a pid) are walked but not emitted. The order
    is that of a depth-first walk and carries no meaning.
    """
    worklist = visible_workspaces(root, workspaces)
    geometries: list[Geometry] = []

    while worklist:
        node = worklist.pop()
        if node.is_window:
            geometries.append(format_geometry(node.rect))

        worklist.extend(node.nodes)
        worklist.extend(node.floating_nodes)

    log.debug("Found %d visible windows", len(geometries))
    return geometries
