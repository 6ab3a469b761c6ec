"""Command-line interface for swaycap.

Entry point flow:
1. Parse arguments; introspection flags print JSON and exit
2. Load config, configure logging and events
3. `kill` stops recordings and returns immediately
4. Optionally run region selection
5. Route to screenshot or record
"""

import argparse
import json
import logging
import sys
import uuid
from pathlib import Path
from typing import Optional

from . import __version__
from .capture import (
    CaptureTarget,
    ClipboardTarget,
    FileTarget,
    kill_recordings,
    start_recording,
    take_screenshot,
)
from .config import (
    Config,
    config_defaults,
    config_schema,
    config_to_dict,
    load_config,
    validate_config_file,
)
from .emit import EVENT_CATALOG, configure, emit
from .errors import ConfigError, SwaycapError
from .output import notify, output_path
from .selection import select_region

log = logging.getLogger(__name__)


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="swaycap",
        description="Screen capture assistant for Wayland.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s screenshot              # Full screen to ~/<timestamp>.png
  %(prog)s -s screenshot --copy    # Selected window/region to clipboard
  %(prog)s -s record --audio       # Record a region with audio
  %(prog)s kill                    # Stop all recordings
""",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"swaycap {__version__}",
    )
    parser.add_argument(
        "-s", "--selection",
        action="store_true",
        help="Select a region or window to be captured",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Path to config file (default: platform config dir)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Do not write structured events to stderr",
    )

    # Introspection
    parser.add_argument(
        "--print-defaults",
        action="store_true",
        help="Print default configuration as JSON and exit",
    )
    parser.add_argument(
        "--print-config-schema",
        action="store_true",
        help="Print configuration schema as JSON and exit",
    )
    parser.add_argument(
        "--validate-config",
        action="store_true",
        help="Validate configuration file and exit",
    )
    parser.add_argument(
        "--print-resolved",
        action="store_true",
        help="Print resolved configuration as JSON and exit",
    )
    parser.add_argument(
        "--print-event-catalog",
        action="store_true",
        help="Print event catalog as JSON and exit",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    screenshot = subparsers.add_parser("screenshot", help="Take a screenshot")
    screenshot.add_argument(
        "-c", "--copy",
        action="store_true",
        help="Copy to clipboard instead of saving to a file",
    )

    record = subparsers.add_parser("record", help="Start a video recording")
    record.add_argument(
        "-a", "--audio",
        action="store_true",
        help="Capture audio when recording video",
    )

    subparsers.add_parser("kill", help="Stop recording by killing all wf-recorder processes")

    return parser


def _emit_json(payload) -> None:
    print(json.dumps(payload, indent=2, sort_keys=True))


def _handle_introspection(args: argparse.Namespace) -> Optional[int]:
    config_path = Path(args.config).expanduser() if args.config else None

    if args.print_defaults:
        _emit_json(config_defaults())
        return 0

    if args.print_config_schema:
        _emit_json(config_schema())
        return 0

    if args.validate_config:
        errors = validate_config_file(config_path)
        for error in errors:
            print(error, file=sys.stderr)
        return 1 if errors else 0

    if args.print_resolved:
        try:
            config = load_config(config_path=config_path)
        except ConfigError as e:
            print(e, file=sys.stderr)
            return 1
        _emit_json(config_to_dict(config))
        return 0

    if args.print_event_catalog:
        _emit_json({"catalog": EVENT_CATALOG})
        return 0

    return None


def _describe_target(target: CaptureTarget) -> str:
    if isinstance(target, FileTarget):
        return str(target.path)
    return "clipboard"


def handle_kill(config: Config) -> int:
    """Stop every recording and notify."""
    kill_recordings(config)
    emit("recording.stopped", {"process_name": config.wf_recorder})
    notify("stopped recording", config)
    return 0


def handle_capture(args: argparse.Namespace, config: Config) -> int:
    """Run the optional selection, then the screenshot or recording."""
    operation_type = f"swaycap.{args.command}"
    operation_id = str(uuid.uuid4())
    emit("operation.started", {
        "operation_type": operation_type,
        "operation_id": operation_id,
        "selection": args.selection,
    })

    try:
        region = None
        if args.selection:
            region = select_region(config)
            if region is None:
                emit("selection.cancelled", {"operation_type": operation_type})
                notify("cancelled selection", config)
                return 0

        if args.command == "record":
            target: CaptureTarget = FileTarget(output_path("mp4", config))
            start_recording(region, target.path, args.audio, config)
        else:
            target = ClipboardTarget() if args.copy else FileTarget(output_path("png", config))
            take_screenshot(region, target, config)

    except SwaycapError as e:
        emit("operation.completed", {
            "operation_type": operation_type,
            "operation_id": operation_id,
            "success": False,
            "error_message": str(e),
        })
        raise

    emit("operation.completed", {
        "operation_type": operation_type,
        "operation_id": operation_id,
        "success": True,
        "target": _describe_target(target),
    })
    return 0


def main(args: Optional[list[str]] = None) -> int:
    """Main entry point.

    Args:
        args: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_argument_parser()
    parsed_args = parser.parse_args(args)

    result = _handle_introspection(parsed_args)
    if result is not None:
        return result

    if parsed_args.command is None:
        parser.print_usage(sys.stderr)
        return 2

    logging.basicConfig(
        level=logging.DEBUG if parsed_args.debug else logging.INFO,
        format="%(levelname)s: %(message)s",
    )
    configure("swaycap", stderr=not parsed_args.quiet)

    try:
        config_path = Path(parsed_args.config).expanduser() if parsed_args.config else None
        config = load_config(config_path=config_path)
        emit("config.resolved", {
            "config_path": str(config_path or "default"),
            "source": "cli" if config_path else "default",
        })

        if parsed_args.command == "kill":
            return handle_kill(config)
        return handle_capture(parsed_args, config)

    except SwaycapError as e:
        emit("error.handled", {
            "error_type": type(e).__name__,
            "message": str(e),
            "operation_type": f"swaycap.{parsed_args.command}",
        })
        log.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
