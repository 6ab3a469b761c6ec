"""Configuration management for swaycap.

Configuration priority (highest to lowest):
1. CLI overrides (passed to load_config)
2. Environment variables (SWAYCAP_*)
3. Config file (~/.config/swaycap/config.yaml)
4. Built-in defaults
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml
from platformdirs import user_config_dir

from .errors import ConfigError

ENV_PREFIX = "SWAYCAP"
CONFIG_DIR = Path(user_config_dir("swaycap"))
DEFAULT_CONFIG_PATH = CONFIG_DIR / "config.yaml"


@dataclass
class Config:
    """swaycap configuration."""

    # Helper binaries
    grim: str = "grim"
    slurp: str = "slurp"
    wf_recorder: str = "wf-recorder"
    killall: str = "killall"
    wl_copy: str = "wl-copy"

    # Output
    output_dir: Path = field(default_factory=Path.home)

    # Selector styling (RRGGBB[AA])
    slurp_background: str = "282a3666"
    slurp_border: str = "ff79c6"

    # Recording
    audio_flag: str = "-a"
    record_delay_s: float = 2.0

    # Notifications
    notification_summary: str = "screenshot"
    notification_timeout_ms: int = 2000
    enable_notification: bool = True

    def __post_init__(self):
        if isinstance(self.output_dir, str):
            self.output_dir = Path(self.output_dir)


STRING_KEYS = {
    "grim",
    "slurp",
    "wf_recorder",
    "killall",
    "wl_copy",
    "slurp_background",
    "slurp_border",
    "audio_flag",
    "notification_summary",
}
PATH_KEYS = {"output_dir"}


def _env(name: str) -> Optional[str]:
    return os.environ.get(f"{ENV_PREFIX}_{name}")


def _config_path_from_env() -> Optional[Path]:
    value = _env("CONFIG")
    if value:
        return Path(value).expanduser()
    return None


def _load_config_file(path: Path, strict: bool = False) -> dict:
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except (OSError, yaml.YAMLError) as exc:
        if strict:
            raise ValueError(f"Failed to parse config file {path}: {exc}")
        return {}

    if not isinstance(data, dict):
        if strict:
            raise ValueError(f"Config file {path} must be a mapping")
        return {}

    return data


def _expand_path(value: Any) -> Any:
    if value is None:
        return value
    return str(Path(value).expanduser())


def config_defaults() -> dict:
    return {
        "grim": "grim",
        "slurp": "slurp",
        "wf_recorder": "wf-recorder",
        "killall": "killall",
        "wl_copy": "wl-copy",
        "output_dir": str(Path.home()),
        "slurp_background": "282a3666",
        "slurp_border": "ff79c6",
        "audio_flag": "-a",
        "record_delay_s": 2.0,
        "notification_summary": "screenshot",
        "notification_timeout_ms": 2000,
        "enable_notification": True,
    }


def _load_env_overrides() -> dict:
    config: dict[str, Any] = {}

    for key in STRING_KEYS | PATH_KEYS:
        value = _env(key.upper())
        if value is None:
            continue
        config[key] = _expand_path(value) if key in PATH_KEYS else value

    value = _env("RECORD_DELAY_S")
    if value is not None:
        try:
            config["record_delay_s"] = float(value)
        except ValueError:
            pass

    value = _env("NOTIFICATION_TIMEOUT_MS")
    if value is not None:
        try:
            config["notification_timeout_ms"] = int(value)
        except ValueError:
            pass

    value = _env("ENABLE_NOTIFICATION")
    if value is not None:
        config["enable_notification"] = value.lower() in ("true", "1", "yes", "on")

    return config


def resolve_config_path(config_path: Optional[Path] = None) -> Path:
    return config_path or _config_path_from_env() or DEFAULT_CONFIG_PATH


def load_config(
    config_path: Optional[Path] = None,
    overrides: Optional[dict] = None,
    strict: bool = False,
) -> Config:
    """Load configuration from all sources.

    Raises:
        ConfigError: If a known key in the config file has the wrong type
    """
    resolved_path = resolve_config_path(config_path)

    config_dict = config_defaults()
    file_config = {
        key: value
        for key, value in _load_config_file(resolved_path, strict=strict).items()
        if key in config_dict
    }
    errors = validate_config_dict(file_config)
    if errors:
        # Unquoted colours like 000000 load as integers
        raise ConfigError(f"Invalid config file {resolved_path}: {'; '.join(errors)}")
    config_dict.update(file_config)
    config_dict.update(_load_env_overrides())

    if overrides:
        for key, value in overrides.items():
            if value is not None:
                config_dict[key] = value

    for key in PATH_KEYS:
        if config_dict.get(key) is not None:
            config_dict[key] = _expand_path(config_dict[key])

    return Config(**config_dict)


def config_schema() -> dict:
    properties: dict[str, Any] = {key: {"type": "string"} for key in sorted(STRING_KEYS | PATH_KEYS)}
    properties.update({
        "record_delay_s": {"type": "number", "minimum": 0},
        "notification_timeout_ms": {"type": "integer", "minimum": 0},
        "enable_notification": {"type": "boolean"},
    })
    return {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "type": "object",
        "properties": properties,
        "additionalProperties": False,
    }


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return _is_int(value) or isinstance(value, float)


def validate_config_dict(data: Any) -> list[str]:
    if not isinstance(data, dict):
        return ["Config must be a mapping/object"]

    errors: list[str] = []
    props = config_schema()["properties"]

    for key, value in data.items():
        if key not in props:
            errors.append(f"Unknown config key: {key}")
            continue

        expected = props[key]["type"]
        if expected == "string" and not isinstance(value, str):
            errors.append(f"{key} must be a string")
        elif expected == "integer" and not _is_int(value):
            errors.append(f"{key} must be an integer")
        elif expected == "number" and not _is_number(value):
            errors.append(f"{key} must be a number")
        elif expected == "boolean" and not isinstance(value, bool):
            errors.append(f"{key} must be a boolean")
        elif "minimum" in props[key] and value < props[key]["minimum"]:
            errors.append(f"{key} must be >= {props[key]['minimum']}")

    return errors


def validate_config_file(config_path: Optional[Path] = None) -> list[str]:
    path = resolve_config_path(config_path)
    if not path.exists():
        return []
    try:
        data = _load_config_file(path, strict=True)
    except ValueError as exc:
        return [str(exc)]
    return validate_config_dict(data)


def config_to_dict(config: Config) -> dict:
    return {
        "grim": config.grim,
        "slurp": config.slurp,
        "wf_recorder": config.wf_recorder,
        "killall": config.killall,
        "wl_copy": config.wl_copy,
        "output_dir": str(config.output_dir),
        "slurp_background": config.slurp_background,
        "slurp_border": config.slurp_border,
        "audio_flag": config.audio_flag,
        "record_delay_s": config.record_delay_s,
        "notification_summary": config.notification_summary,
        "notification_timeout_ms": config.notification_timeout_ms,
        "enable_notification": config.enable_notification,
    }
