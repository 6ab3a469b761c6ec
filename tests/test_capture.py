"""Tests for swaycap.capture - grim, wf-recorder and killall orchestration."""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, call, patch

import pytest

from swaycap.capture import (
    ClipboardTarget,
    FileTarget,
    kill_recordings,
    recorder_command,
    start_recording,
    take_screenshot,
)
from swaycap.errors import ClipboardError, ExternalToolError


def completed(returncode=0, stdout=b"", stderr=b""):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


class TestTakeScreenshot:
    """Tests for take_screenshot."""

    def test_to_file(self, config, tmp_path):
        path = tmp_path / "shot.png"
        with patch("swaycap.capture.subprocess.run", return_value=completed()) as run, \
                patch("swaycap.capture.notify") as notify:
            take_screenshot(None, FileTarget(path), config)

        run.assert_called_once_with(["grim", str(path)], capture_output=True)
        notify.assert_called_once_with(f"saved to {path}", config)

    def test_to_file_with_region(self, config, tmp_path):
        path = tmp_path / "shot.png"
        with patch("swaycap.capture.subprocess.run", return_value=completed()) as run, \
                patch("swaycap.capture.notify"):
            take_screenshot("0,0 100x100", FileTarget(path), config)

        assert run.call_args[0][0] == ["grim", "-g", "0,0 100x100", str(path)]

    def test_to_clipboard(self, config, minimal_png_bytes):
        """grim writes to stdout and the bytes go to the clipboard untouched."""
        with patch("swaycap.capture.subprocess.run", return_value=completed(stdout=minimal_png_bytes)) as run, \
                patch("swaycap.capture.copy_to_clipboard") as copy, \
                patch("swaycap.capture.notify") as notify:
            take_screenshot("5,5 10x10", ClipboardTarget(), config)

        assert run.call_args[0][0] == ["grim", "-g", "5,5 10x10", "-"]
        copy.assert_called_once_with(minimal_png_bytes, "image/png", config)
        notify.assert_called_once_with("copied to clipboard", config)

    def test_clipboard_failure_propagates(self, config):
        with patch("swaycap.capture.subprocess.run", return_value=completed(stdout=b"png")), \
                patch("swaycap.capture.copy_to_clipboard", side_effect=ClipboardError("no display")), \
                patch("swaycap.capture.notify") as notify:
            with pytest.raises(ClipboardError, match="no display"):
                take_screenshot(None, ClipboardTarget(), config)

        notify.assert_not_called()

    def test_grim_failure(self, config, tmp_path):
        failed = completed(returncode=1, stderr=b"compositor doesn't support wlr-screencopy\n")
        with patch("swaycap.capture.subprocess.run", return_value=failed), \
                patch("swaycap.capture.notify") as notify:
            with pytest.raises(ExternalToolError, match="wlr-screencopy"):
                take_screenshot(None, FileTarget(tmp_path / "x.png"), config)

        notify.assert_not_called()

    def test_grim_missing(self, config, tmp_path):
        with patch("swaycap.capture.subprocess.run", side_effect=FileNotFoundError("grim")):
            with pytest.raises(ExternalToolError, match="could not be started"):
                take_screenshot(None, FileTarget(tmp_path / "x.png"), config)


class TestRecording:
    """Tests for recorder_command and start_recording."""

    def test_command_minimal(self, config):
        assert recorder_command(None, Path("/tmp/a.mp4"), False, config) == [
            "wf-recorder", "-f", "/tmp/a.mp4",
        ]

    def test_command_full(self, config):
        assert recorder_command("1,2 3x4", Path("/tmp/a.mp4"), True, config) == [
            "wf-recorder", "-g", "1,2 3x4", "-f", "/tmp/a.mp4", "-a",
        ]

    def test_start_recording_detached(self, config):
        """Notifies, waits, then spawns without waiting on the recorder."""
        config.record_delay_s = 2.0
        manager = MagicMock()
        process = MagicMock(pid=4242)
        manager.popen.return_value = process

        with patch("swaycap.capture.notify", manager.notify), \
                patch("swaycap.capture.time.sleep", manager.sleep), \
                patch("swaycap.capture.subprocess.Popen", manager.popen):
            result = start_recording("1,2 3x4", Path("/tmp/rec.mp4"), True, config)

        assert result is process
        assert manager.mock_calls[:2] == [
            call.notify("starting recording to be saved at /tmp/rec.mp4", config),
            call.sleep(2.0),
        ]
        args, kwargs = manager.popen.call_args
        assert args[0] == ["wf-recorder", "-g", "1,2 3x4", "-f", "/tmp/rec.mp4", "-a"]
        assert kwargs["start_new_session"] is True
        process.wait.assert_not_called()
        process.communicate.assert_not_called()

    def test_recorder_missing(self, config):
        with patch("swaycap.capture.notify"), \
                patch("swaycap.capture.subprocess.Popen", side_effect=FileNotFoundError("wf-recorder")):
            with pytest.raises(ExternalToolError):
                start_recording(None, Path("/tmp/rec.mp4"), False, config)


class TestKillRecordings:
    """Tests for kill_recordings."""

    def test_broadcasts_interrupt(self, config):
        with patch("swaycap.capture.subprocess.run", return_value=completed()) as run:
            kill_recordings(config)

        run.assert_called_once_with(["killall", "-s", "INT", "wf-recorder"], capture_output=True)

    def test_nothing_running_is_ok(self, config):
        """killall exits 1 when no process matched; that is not an error."""
        with patch("swaycap.capture.subprocess.run", return_value=completed(returncode=1)):
            kill_recordings(config)

    def test_uses_binary_basename(self, config):
        config.wf_recorder = "/opt/bin/wf-recorder"
        with patch("swaycap.capture.subprocess.run", return_value=completed()) as run:
            kill_recordings(config)
        assert run.call_args[0][0][-1] == "wf-recorder"

    def test_killall_missing(self, config):
        with patch("swaycap.capture.subprocess.run", side_effect=FileNotFoundError("killall")):
            with pytest.raises(ExternalToolError):
                kill_recordings(config)
