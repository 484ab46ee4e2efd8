"""Configuration management for the AJAX invocation bridge.

This module provides the configuration dataclass and a manager for persisting
settings as a JSON file on disk.
"""

import json
import re
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Literal, Callable, Union

# Parameter names travel in url-encoded bodies, namespaces become JS identifiers
_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_LOG_LEVELS = ("critical", "error", "warning", "info", "debug")


@dataclass
class Config:
    """
    Bridge configuration.

    All fields have sensible defaults - the bridge works without any
    configuration. The wire names default to the values the client runtime
    has always used; change them only together with every deployed page.
    """

    # Request parameter carrying the handler name (presence => callback)
    dispatch_param: str = "AjaxXmlHttp"

    # Request parameter carrying the value for single-value handlers
    payload_param: str = "AjaxParam"

    # Reserved form field skipped by form submissions unless requested
    view_state_field: str = "__VIEWSTATE"

    # Global client-side object holding the runtime and the handler stubs
    client_namespace: str = "AjaxInvocation"

    # What a callback naming an unknown handler does:
    #   "ignore" - nothing is invoked or written, the page renders normally
    #   "error"  - UnknownHandlerError, answered with HTTP 404 by the host
    unmatched_token: Literal["ignore", "error"] = "ignore"

    # HTTP settings for the bundled server
    http_host: str = "127.0.0.1"
    http_port: int = 8080
    log_level: str = "info"

    def is_valid(self) -> tuple[bool, str]:
        """
        Check if config values are usable.

        Returns:
            Tuple of (is_valid, error_message). If valid, error_message is empty string.

        Examples:
            >>> Config(http_port=80).is_valid()
            (True, '')

            >>> Config(http_port=70000).is_valid()
            (False, 'Port must be between 1 and 65535')
        """
        if not (1 <= self.http_port <= 65535):
            return False, "Port must be between 1 and 65535"
        for field_name in ("dispatch_param", "payload_param", "client_namespace"):
            value = getattr(self, field_name)
            if not isinstance(value, str) or not _IDENTIFIER_PATTERN.match(value):
                return False, f"{field_name} must be an identifier, got {value!r}"
        if self.dispatch_param == self.payload_param:
            return False, "dispatch_param and payload_param must differ"
        if not self.view_state_field:
            return False, "view_state_field must not be empty"
        if self.unmatched_token not in ("ignore", "error"):
            return False, f"Unknown unmatched_token policy: {self.unmatched_token}"
        if self.log_level.lower() not in _LOG_LEVELS:
            return False, f"Unknown log level: {self.log_level}"
        return True, ""

    def to_dict(self) -> dict:
        """
        Convert to dict for JSON storage.

        Returns:
            Dictionary representation of config suitable for JSON serialization.
        """
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """
        Create from dict, using defaults for missing keys.

        Only includes keys that are actual dataclass fields, ignoring
        any extra keys in the input dict.

        Examples:
            >>> Config.from_dict({"http_port": 9000}).http_port
            9000

            >>> Config.from_dict({"unknown_field": "ignored"}) == Config()
            True
        """
        return cls(
            **{k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        )


class ConfigManager:
    """
    Manages configuration persistence.

    Settings live in a single JSON file. Keys missing from the file fall back
    to the defaults of :class:`Config`, so a partial file is fine.

    The manager handles loading, saving, and change notifications.
    """

    def __init__(self, path: Union[str, Path]):
        """
        Initialize config manager.

        Args:
            path: Location of the JSON settings file. It does not need to exist.
        """
        self._path = Path(path)
        self._listeners: list[Callable[[Config], None]] = []

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Config:
        """
        Load config, merging defaults with values from disk.

        Returns:
            Config instance with current settings.

        Raises:
            ValueError: If the file exists but does not hold a JSON object.
        """
        if not self._path.exists():
            return Config()

        raw = json.loads(self._path.read_text(encoding="utf-8") or "{}")
        if not isinstance(raw, dict):
            raise ValueError(f"Config file must contain a JSON object: {self._path}")
        return Config.from_dict(raw)

    def save(self, config: Config) -> None:
        """
        Save config and notify listeners.

        Args:
            config: Config instance to persist.
        """
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(
            json.dumps(config.to_dict(), indent=2, sort_keys=True), encoding="utf-8"
        )
        for listener in self._listeners:
            listener(config)

    def on_change(self, callback: Callable[[Config], None]) -> None:
        """
        Register callback for config changes.

        Callback will be invoked after config is saved to disk,
        allowing components to react to configuration updates.

        Args:
            callback: Function that accepts a Config instance.

        Examples:
            >>> manager = ConfigManager("ajax.json")
            >>> manager.on_change(lambda cfg: print(f"Port changed to {cfg.http_port}"))
        """
        self._listeners.append(callback)

    def get_default(self) -> Config:
        """
        Get default config (ignores the file on disk).

        Returns:
            Config instance with all default values.
        """
        return Config()
