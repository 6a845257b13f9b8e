from __future__ import annotations

import json
import logging
import os
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any

from arc4kit.infra.paths import DEFAULT_CONFIG_FILE, SETTING_PATH

from .adapter import ConfigAdapter

logger = logging.getLogger(__name__)

LOCAL_SETTING_FILES = ["settings.toml", "settings.json"]


def _candidate_paths(config_path: str | Path | None) -> list[Path]:
    """Settings files to try, most specific first.

    An explicit path is the only candidate. Otherwise the working directory
    is searched before the per-user settings file.
    """
    if config_path:
        return [Path(config_path).expanduser()]
    return [Path.cwd() / name for name in LOCAL_SETTING_FILES] + [SETTING_PATH]


def _find_config(config_path: str | Path | None) -> Path | None:
    for path in _candidate_paths(config_path):
        if path.is_file():
            return path.resolve()
    if config_path:
        logger.warning("Specified settings file not found: %s", config_path)
    return None


def _read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def _read_toml(path: Path) -> Any:
    return tomllib.loads(path.read_text(encoding="utf-8"))


_READERS: dict[str, tuple[str, Callable[[Path], Any]]] = {
    ".json": ("JSON", _read_json),
    ".toml": ("TOML", _read_toml),
}


def _load_by_extension(path: Path) -> dict[str, Any]:
    """
    Parse a `.toml` or `.json` settings file.

    Args:
        path: Path to the settings file.

    Returns:
        Parsed settings as a dictionary.

    Raises:
        ValueError: If the extension is unsupported, parsing fails, or the
            root element is not a table.
    """
    ext = path.suffix.lower()
    if ext not in _READERS:
        raise ValueError(f"Unsupported config file extension: {ext}")

    kind, reader = _READERS[ext]
    try:
        data = reader(path)
    except (OSError, ValueError) as e:
        raise ValueError(f"Invalid {kind} in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Config root must be a dict, got {type(data)} in {path}")

    return data


def load_config(
    config_path: str | Path | None = None,
    *,
    required: bool = True,
) -> dict[str, Any]:
    """
    Load settings from a TOML or JSON file.

    Resolution order:
        - Explicit `config_path` (if provided, nothing else is tried)
        - `settings.toml` or `settings.json` in the working directory
        - `SETTING_PATH` in the user config directory

    Args:
        config_path: Optional explicit settings file path.
        required: When False, return an empty mapping instead of raising if
            no file is found, so callers fall back to built-in defaults.

    Returns:
        Parsed settings as a dictionary.

    Raises:
        FileNotFoundError: If an explicit path is missing, or no settings
            file is found and `required` is set.
        ValueError: If the file cannot be parsed or has an invalid structure.
    """
    path = _find_config(config_path)

    if not path:
        if config_path:
            raise FileNotFoundError(f"Settings file not found: {config_path}")
        if required:
            raise FileNotFoundError("No valid config file found.")
        logger.debug("No config file found, using defaults")
        return {}

    logger.debug("Loading configuration from: %s", path)
    return _load_by_extension(path)


def copy_default_config(target: Path) -> None:
    """
    Copy the bundled sample settings to `target`.

    Args:
        target: Destination path for the sample settings file.
    """
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(DEFAULT_CONFIG_FILE.read_bytes())
    logger.info("Sample configuration written to: %s", target)


def save_config(
    config: dict[str, Any],
    output_path: str | Path | None = None,
) -> Path:
    """
    Validate settings and write them as JSON.

    The file is written next to the target first and then moved into place,
    so a failed write never leaves a truncated settings file behind.

    Args:
        config: Settings mapping.
        output_path: Destination JSON file. Defaults to the per-user
            settings file.

    Returns:
        The path that was written.

    Raises:
        ValueError: If a known setting has an invalid value.
        OSError: If the file cannot be written.
    """
    adapter = ConfigAdapter(config)
    adapter.get_key_config()
    adapter.get_stream_config()
    adapter.get_log_level()

    output = Path(output_path or SETTING_PATH).expanduser().resolve()
    output.parent.mkdir(parents=True, exist_ok=True)
    tmp = output.with_name(output.name + ".tmp")
    try:
        tmp.write_text(json.dumps(config, indent=2, ensure_ascii=False), encoding="utf-8")
        os.replace(tmp, output)
    except OSError as e:
        tmp.unlink(missing_ok=True)
        logger.error("Could not write settings to %s: %s", output, e)
        raise

    logger.info("Settings saved to %s", output)
    return output


def save_config_file(
    source_path: str | Path,
    output_path: str | Path | None = None,
) -> Path:
    """
    Install a TOML or JSON settings file as the JSON settings file.

    Raises:
        FileNotFoundError: If the source file does not exist.
        ValueError: If the source cannot be parsed or holds invalid values.
    """
    source = Path(source_path).expanduser()
    if not source.is_file():
        raise FileNotFoundError(f"Source file not found: {source}")
    return save_config(_load_by_extension(source), output_path)
