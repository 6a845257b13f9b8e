from __future__ import annotations

from typing import Any

from arc4kit.schemas import KeyConfig, StreamConfig

_MIN_SALT_SIZE = 4
_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"}


class ConfigAdapter:
    """Typed accessor over a loaded settings mapping.

    Missing sections and keys fall back to built-in defaults.

    Args:
        config (dict[str, Any]): Loaded settings mapping with optional
            ``general``, ``stream`` and ``debug`` tables.
    """

    def __init__(self, config: dict[str, Any]) -> None:
        self._config: dict[str, Any] = dict(config)

    def get_config(self) -> dict[str, Any]:
        """Return the full raw settings mapping."""
        return self._config

    def get_key_config(self) -> KeyConfig:
        """Build the key-material configuration.

        Returns:
            KeyConfig: Password encoding and generated salt size.

        Raises:
            ValueError: If ``salt_size`` is below 4 or ``encoding`` is empty.
        """
        cfg = self._section("general")
        encoding = str(cfg.get("encoding") or "utf-8")
        salt_size = int(cfg.get("salt_size", _MIN_SALT_SIZE))
        if salt_size < _MIN_SALT_SIZE:
            raise ValueError(
                f"salt_size must be at least {_MIN_SALT_SIZE}, got {salt_size}"
            )
        return KeyConfig(encoding=encoding, salt_size=salt_size)

    def get_stream_config(self) -> StreamConfig:
        """Build the file streaming configuration.

        Returns:
            StreamConfig: Stream options.

        Raises:
            ValueError: If ``chunk_size`` is not positive.
        """
        cfg = self._section("stream")
        chunk_size = int(cfg.get("chunk_size", 65536))
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        return StreamConfig(
            leave_open=bool(cfg.get("leave_open", False)),
            chunk_size=chunk_size,
        )

    def get_log_level(self) -> str:
        """Return the configured logging level.

        Returns:
            str: Upper-case level name, ``"INFO"`` if missing.

        Raises:
            ValueError: If the level name is unknown.
        """
        level = str(self._section("debug").get("log_level") or "INFO").upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level: {level}")
        return level

    def _section(self, name: str) -> dict[str, Any]:
        """Return a top-level table or an empty dict."""
        value = self._config.get(name)
        return value if isinstance(value, dict) else {}
