"""Shared pytest fixtures for swaycap tests."""

import os
import struct
import zlib
from pathlib import Path

import pytest

from swaycap.config import Config


def rect(x: int, y: int, width: int, height: int) -> dict:
    return {"x": x, "y": y, "width": width, "height": height}


def window(x: int, y: int, width: int, height: int, pid: int = 1000, **extra) -> dict:
    node = {"type": "con", "name": "term", "pid": pid, "rect": rect(x, y, width, height)}
    node.update(extra)
    return node


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep the user's config file and SWAYCAP_* variables out of tests."""
    for name in list(os.environ):
        if name.startswith("SWAYCAP_"):
            monkeypatch.delenv(name)
    monkeypatch.setenv("SWAYCAP_CONFIG", str(tmp_path / "no-such-config.yaml"))
    monkeypatch.setenv("SWAYCAP_OUTPUT_DIR", str(tmp_path / "captures"))


@pytest.fixture
def config(tmp_path: Path) -> Config:
    """Config writing into a temp dir, with no delay and no notifications."""
    return Config(
        output_dir=tmp_path / "captures",
        record_delay_s=0,
        enable_notification=False,
    )


@pytest.fixture
def two_output_tree() -> dict:
    """GET_TREE reply: output A shows workspace 1, output B has hidden workspace 2."""
    return {
        "type": "root",
        "name": "root",
        "rect": rect(0, 0, 3840, 1080),
        "nodes": [
            {
                "type": "output",
                "name": "__i3",
                "rect": rect(0, 0, 1920, 1080),
                "nodes": [
                    {
                        "type": "workspace",
                        "name": "__i3_scratch",
                        "rect": rect(0, 0, 1920, 1080),
                        "nodes": [],
                        "floating_nodes": [window(10, 10, 300, 200, pid=999)],
                    }
                ],
            },
            {
                "type": "output",
                "name": "DP-1",
                "rect": rect(0, 0, 1920, 1080),
                "nodes": [
                    {
                        "type": "workspace",
                        "name": "1",
                        "rect": rect(0, 0, 1920, 1080),
                        "nodes": [
                            {
                                "type": "con",
                                "name": None,
                                "rect": rect(0, 0, 150, 100),
                                "nodes": [
                                    window(0, 0, 100, 100, pid=1001),
                                    window(100, 0, 50, 50, pid=1002),
                                ],
                                "floating_nodes": [],
                            }
                        ],
                        "floating_nodes": [],
                    }
                ],
            },
            {
                "type": "output",
                "name": "HDMI-A-1",
                "rect": rect(1920, 0, 1920, 1080),
                "nodes": [
                    {
                        "type": "workspace",
                        "name": "2",
                        "rect": rect(1920, 0, 1920, 1080),
                        "nodes": [window(1920, 0, 1920, 1080, pid=1003)],
                        "floating_nodes": [],
                    }
                ],
            },
        ],
        "floating_nodes": [],
    }


@pytest.fixture
def minimal_png_bytes() -> bytes:
    """A minimal 1x1 transparent PNG, as grim would print it."""
    signature = b"\x89PNG\r\n\x1a\n"

    def chunk(kind: bytes, payload: bytes) -> bytes:
        crc = zlib.crc32(kind + payload) & 0xFFFFFFFF
        return struct.pack(">I", len(payload)) + kind + payload + struct.pack(">I", crc)

    ihdr = struct.pack(">IIBBBBB", 1, 1, 8, 6, 0, 0, 0)
    idat = zlib.compress(b"\x00\x00\x00\x00\x00")
    return signature + chunk(b"IHDR", ihdr) + chunk(b"IDAT", idat) + chunk(b"IEND", b"")
