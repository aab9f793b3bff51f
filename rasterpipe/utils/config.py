# pylint: disable=too-many-nested-blocks
"""rasterpipe.utils.config – user paths and TOML config loader"""

from __future__ import annotations

import copy
import os
import pathlib
import tomllib
from functools import lru_cache
from typing import Any, Dict, cast

from rasterpipe.exceptions import ConfigurationError

DEFAULT_CONFIG_DIR = pathlib.Path.home() / ".config" / "rasterpipe"
# Allow overriding the config directory at import time via environment variable
CONFIG_DIR = pathlib.Path(os.getenv("RASTERPIPE_CONFIG_DIR", str(DEFAULT_CONFIG_DIR))).expanduser()
CONFIG_FILE = CONFIG_DIR / "config.toml"


def get_config_path() -> pathlib.Path:
    """Return config file path honoring environment variables."""
    env_file = os.getenv("RASTERPIPE_CONFIG_FILE")
    if env_file:
        return pathlib.Path(env_file).expanduser()
    env_dir = os.getenv("RASTERPIPE_CONFIG_DIR")
    if env_dir:
        return pathlib.Path(env_dir).expanduser() / "config.toml"
    return CONFIG_FILE


DEFAULTS: Dict[str, Any] = {
    "logging": {
        "level": "INFO",
    },
    "pipeline": {
        "default_quality": 85,
        "default_format": "jpeg",
        "max_pixels": 50_000_000,
    },
    "encoder": {
        "png_compress_level": 6,
        "jpeg_optimize": False,
    },
    "server": {
        "max_upload_mb": 20,
    },
}

# Expected config schema for validation
EXPECTED_SCHEMA: Dict[str, Dict[str, type]] = {
    "logging": {"level": str},
    "pipeline": {"default_quality": int, "default_format": str, "max_pixels": int},
    "encoder": {"png_compress_level": int, "jpeg_optimize": bool},
    "server": {"max_upload_mb": int},
}


def _validate_config(data: Dict[str, Any]) -> None:
    errors: list[str] = []
    for key, expected in EXPECTED_SCHEMA.items():
        if key not in data:
            data[key] = copy.deepcopy(DEFAULTS[key])
            continue
        value = data[key]
        if not isinstance(value, dict):
            errors.append(f"section '{key}' must be a table")
            data[key] = copy.deepcopy(DEFAULTS[key])
            continue
        for sub, exptype in expected.items():
            if sub not in value:
                value[sub] = DEFAULTS[key][sub]
                continue
            subval = value[sub]
            # bool is an int subclass; don't let `true` pass as a quality
            if exptype is int and isinstance(subval, bool):
                errors.append(f"'{key}.{sub}' must be int")
                value[sub] = DEFAULTS[key][sub]
            elif not isinstance(subval, exptype):
                errors.append(f"'{key}.{sub}' must be {exptype.__name__}")
                value[sub] = DEFAULTS[key][sub]
    if errors:
        raise ConfigurationError("Invalid configuration: " + "; ".join(errors))


@lru_cache(maxsize=1)
def _load_config() -> Dict[str, Any]:
    """Load configuration from TOML and validate."""
    data: Dict[str, Any] = copy.deepcopy(DEFAULTS)

    cfg_path = get_config_path()
    if cfg_path.exists():
        with cfg_path.open("rb") as fp:
            try:
                loaded_data = tomllib.load(fp)
            except tomllib.TOMLDecodeError as exc:
                raise ConfigurationError(f"Invalid TOML in {cfg_path}: {exc}") from exc

        for key, value in loaded_data.items():
            if key in data and isinstance(data[key], dict) and isinstance(value, dict):
                data[key].update(value)
            else:
                data[key] = value

    _validate_config(data)
    return data


def reload_config() -> None:
    """Drop the cached configuration so the next lookup re-reads the file."""
    _load_config.cache_clear()


# public helpers -----------------------------------------------------------


def _get(section: str, key: str) -> Any:
    return _load_config().get(section, {}).get(key, DEFAULTS[section][key])


def get_logging_level() -> str:
    return cast(str, _get("logging", "level"))


def get_default_quality() -> int:
    """Quality used when a request carries none or an out-of-range value."""
    quality = cast(int, _get("pipeline", "default_quality"))
    if not 1 <= quality <= 100:
        quality = DEFAULTS["pipeline"]["default_quality"]
    return quality


def get_default_format() -> str:
    return cast(str, _get("pipeline", "default_format"))


def get_max_pixels() -> int:
    """Largest decoded image (width * height) the pipeline will accept."""
    return cast(int, _get("pipeline", "max_pixels"))


def get_png_compress_level() -> int:
    level = cast(int, _get("encoder", "png_compress_level"))
    # zlib levels
    return min(9, max(0, level))


def get_jpeg_optimize() -> bool:
    return cast(bool, _get("encoder", "jpeg_optimize"))


def get_max_upload_bytes() -> int:
    """Upload limit for the HTTP boundary, in bytes."""
    return cast(int, _get("server", "max_upload_mb")) * 1024 * 1024
