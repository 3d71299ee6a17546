"""Static configuration for the network status monitor.

This module provides:
- StatusConfig: Immutable process-wide settings (currency, API, cadence)
- load_config: Loader for the JSON client config file
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from decimal import Decimal
from pathlib import Path
from typing import Any

# Currency defaults (Nano main network)
DEFAULT_MAX_SUPPLY = 133_248_297
DEFAULT_SHORT_NAME = "NANO"
DEFAULT_PRECISION = 30

DEFAULT_API_URL = "http://localhost:3001"
DEFAULT_POLL_INTERVAL = 10.0
DEFAULT_REQUEST_TIMEOUT = 10.0

# Share of circulating supply a representative needs for its votes to be
# rebroadcast by other nodes
REBROADCAST_RATIO = Decimal("0.001")


class ConfigError(ValueError):
    """Raised when a configuration file or value is invalid."""


@dataclass(frozen=True)
class StatusConfig:
    """Immutable configuration shared by the poller, metrics and view.

    Attributes:
        max_supply: Total currency supply in display units
        currency_short_name: Ticker shown next to amounts (e.g. "NANO")
        currency_precision: Power of ten between raw and display units
        api_url: Base URL of the explorer API
        poll_interval: Seconds between the end of one poll and the next
        request_timeout: HTTP timeout for each API request in seconds
        rebroadcast_ratio: Fixed share of circulating supply for rebroadcast
    """

    max_supply: int = DEFAULT_MAX_SUPPLY
    currency_short_name: str = DEFAULT_SHORT_NAME
    currency_precision: int = DEFAULT_PRECISION
    api_url: str = DEFAULT_API_URL
    poll_interval: float = DEFAULT_POLL_INTERVAL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    rebroadcast_ratio: Decimal = field(default=REBROADCAST_RATIO, init=False)

    def __post_init__(self) -> None:
        if self.max_supply <= 0:
            raise ConfigError(f"max_supply must be positive, got {self.max_supply}")
        if self.currency_precision < 0:
            raise ConfigError(
                f"currency_precision must be >= 0, got {self.currency_precision}"
            )
        if self.poll_interval <= 0:
            raise ConfigError(
                f"poll_interval must be positive, got {self.poll_interval}"
            )
        if self.request_timeout <= 0:
            raise ConfigError(
                f"request_timeout must be positive, got {self.request_timeout}"
            )
        if not self.api_url:
            raise ConfigError("api_url must not be empty")

    def with_overrides(self, **overrides: Any) -> StatusConfig:
        """Return a copy with the given non-None fields replaced."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self


def _from_document(document: dict[str, Any]) -> dict[str, Any]:
    """Map the camelCase client config document to StatusConfig fields."""
    values: dict[str, Any] = {}

    currency = document.get("currency", {})
    server = document.get("server", {})
    if not isinstance(currency, dict) or not isinstance(server, dict):
        raise ConfigError("'currency' and 'server' must be JSON objects")

    if "maxSupply" in currency:
        values["max_supply"] = currency["maxSupply"]
    if "shortName" in currency:
        values["currency_short_name"] = currency["shortName"]
    if "precision" in currency:
        values["currency_precision"] = currency["precision"]
    if "apiUrl" in server:
        values["api_url"] = server["apiUrl"]
    if "pollInterval" in document:
        values["poll_interval"] = document["pollInterval"]
    if "requestTimeout" in document:
        values["request_timeout"] = document["requestTimeout"]

    for key in ("max_supply", "currency_precision"):
        if key in values and (
            isinstance(values[key], bool) or not isinstance(values[key], int)
        ):
            raise ConfigError(f"{key} must be an integer, got {values[key]!r}")
    for key in ("poll_interval", "request_timeout"):
        if key in values and (
            isinstance(values[key], bool) or not isinstance(values[key], (int, float))
        ):
            raise ConfigError(f"{key} must be a number, got {values[key]!r}")
        if key in values:
            values[key] = float(values[key])
    for key in ("currency_short_name", "api_url"):
        if key in values and not isinstance(values[key], str):
            raise ConfigError(f"{key} must be a string, got {values[key]!r}")

    return values


def load_config(path: Path | None = None, **overrides: Any) -> StatusConfig:
    """Load configuration from a JSON file, then apply overrides.

    Args:
        path: Path to a client config JSON file, or None for defaults
        **overrides: StatusConfig fields to replace (None values are ignored)

    Returns:
        The resolved, immutable configuration

    Raises:
        ConfigError: If the file cannot be read or holds invalid values
    """
    values: dict[str, Any] = {}

    if path is not None:
        try:
            with open(path) as f:
                document = json.load(f)
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in config file {path}: {e}") from e

        if not isinstance(document, dict):
            raise ConfigError(f"Config file {path} must contain a JSON object")
        values = _from_document(document)

    try:
        return StatusConfig(**values).with_overrides(**overrides)
    except TypeError as e:
        raise ConfigError(str(e)) from e
