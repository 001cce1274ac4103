"""
Configuration for the Smartlead MCP server.

Settings come from the environment (a local .env is loaded first) and may be
overlaid by an optional ``mcp_config.json`` in the working directory, which is
deep-merged over the environment defaults.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import httpx
from dotenv import load_dotenv

from .errors import ConfigurationError
from .registry.models import ToolCategory

DEFAULT_API_URL = "https://server.smartlead.ai/api/v1"
DEFAULT_DELIVERY_API_URL = "https://smartdelivery.smartlead.ai/api/v1"
DEFAULT_SENDERS_API_URL = "https://smart-senders.smartlead.ai/api/v1"
DEFAULT_CONFIG_FILE = "mcp_config.json"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").lower() in ("1", "true", "yes")


@dataclass
class RetrySettings:
    """Retry/backoff for upstream Smartlead calls (delays in milliseconds)."""

    max_attempts: int = field(default_factory=lambda: _env_int("SMARTLEAD_RETRY_MAX_ATTEMPTS", 3))
    initial_delay_ms: int = field(
        default_factory=lambda: _env_int("SMARTLEAD_RETRY_INITIAL_DELAY", 1000)
    )
    max_delay_ms: int = field(default_factory=lambda: _env_int("SMARTLEAD_RETRY_MAX_DELAY", 10000))
    backoff_factor: float = field(
        default_factory=lambda: _env_float("SMARTLEAD_RETRY_BACKOFF_FACTOR", 2.0)
    )


@dataclass
class ApiConfig:
    """Smartlead API endpoints and credentials."""

    api_key: str | None = field(default_factory=lambda: os.getenv("SMARTLEAD_API_KEY"))
    api_url: str = field(default_factory=lambda: os.getenv("SMARTLEAD_API_URL", DEFAULT_API_URL))
    delivery_api_url: str = field(
        default_factory=lambda: os.getenv("SMARTLEAD_DELIVERY_API_URL", DEFAULT_DELIVERY_API_URL)
    )
    senders_api_url: str = field(
        default_factory=lambda: os.getenv("SMARTLEAD_SENDERS_API_URL", DEFAULT_SENDERS_API_URL)
    )
    timeout_seconds: float = field(
        default_factory=lambda: _env_float("SMARTLEAD_TIMEOUT_SECONDS", 30.0)
    )
    retry: RetrySettings = field(default_factory=RetrySettings)


@dataclass
class LicenseConfig:
    """License server connection and cache settings."""

    license_key: str | None = field(default_factory=lambda: os.getenv("SMARTLEAD_LICENSE_KEY"))
    server_url: str | None = field(default_factory=lambda: os.getenv("LICENSE_SERVER_URL"))
    cache_ttl_seconds: float = field(
        default_factory=lambda: _env_float("LICENSE_CACHE_TTL_SECONDS", 3600.0)
    )
    timeout_seconds: float = field(default_factory=lambda: _env_float("LICENSE_TIMEOUT_SECONDS", 5.0))
    usage_report_interval: int = 10

    # Operator-only tier override; honored only with a matching token digest
    operator_tier: str | None = field(
        default_factory=lambda: os.getenv("SMARTLEAD_INTERNAL_TIER_OVERRIDE")
    )
    operator_token: str | None = field(
        default_factory=lambda: os.getenv("SMARTLEAD_INTERNAL_OVERRIDE_TOKEN")
    )
    operator_token_digest: str | None = field(
        default_factory=lambda: os.getenv("SMARTLEAD_INTERNAL_OVERRIDE_DIGEST")
    )


@dataclass
class N8nConfig:
    """Premium n8n workflow API."""

    api_url: str | None = field(default_factory=lambda: os.getenv("N8N_API_URL"))
    timeout_seconds: float = field(default_factory=lambda: _env_float("N8N_TIMEOUT_SECONDS", 30.0))


@dataclass
class FeatureConfig:
    """Operator switches applied on top of the license tier."""

    enabled_categories: dict[str, bool] = field(
        default_factory=lambda: {category: True for category in ToolCategory.values()}
    )
    enabled_tools: dict[str, bool] = field(default_factory=dict)
    extended_logging: bool = field(default_factory=lambda: _env_flag("EXTENDED_LOGGING"))


@dataclass
class ServerConfig:
    """Transport settings."""

    name: str = "smartlead-mcp"
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    sse_port: int = field(default_factory=lambda: _env_int("SSE_PORT", 3001))
    rest_port: int = field(default_factory=lambda: _env_int("REST_PORT", 8100))


@dataclass
class SmartleadConfig:
    """Top-level configuration."""

    api: ApiConfig = field(default_factory=ApiConfig)
    license: LicenseConfig = field(default_factory=LicenseConfig)
    features: FeatureConfig = field(default_factory=FeatureConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    n8n: N8nConfig = field(default_factory=N8nConfig)

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if not self.api.api_key:
            errors.append("SMARTLEAD_API_KEY is required")

        if self.api.retry.max_attempts < 1:
            errors.append("SMARTLEAD_RETRY_MAX_ATTEMPTS must be at least 1")

        unknown = [c for c in self.features.enabled_categories if not ToolCategory.validate(c)]
        if unknown:
            errors.append(f"Unknown categories in enabledCategories: {sorted(unknown)}")

        for section, switches in (
            ("enabledCategories", self.features.enabled_categories),
            ("enabledTools", self.features.enabled_tools),
        ):
            not_bool = sorted(name for name, value in switches.items() if not isinstance(value, bool))
            if not_bool:
                errors.append(f"{section} values must be true or false: {not_bool}")

        if self.license.server_url:
            try:
                url = httpx.URL(self.license.server_url)
            except httpx.InvalidURL as e:
                errors.append(f"LICENSE_SERVER_URL is not a valid URL: {e}")
            else:
                if url.scheme not in ("http", "https") or not url.host:
                    errors.append("LICENSE_SERVER_URL must be an http(s) URL")

        for name, port in (("SSE_PORT", self.server.sse_port), ("REST_PORT", self.server.rest_port)):
            if not 0 < port < 65536:
                errors.append(f"{name} must be between 1 and 65535")

        return errors

    def require_valid(self) -> SmartleadConfig:
        """Raise ConfigurationError if the configuration is unusable."""
        errors = self.validate()
        if errors:
            raise ConfigurationError("; ".join(errors))
        return self


# =============================================================================
# Config File Overlay
# =============================================================================


def _deep_merge(target: dict[str, Any], source: dict[str, Any]) -> dict[str, Any]:
    """Merge ``source`` into a copy of ``target``; lists and scalars replace."""
    merged = dict(target)
    for key, value in source.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        elif value is not None:
            merged[key] = value
    return merged


def _read_config_file(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Could not read {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a JSON object")
    return data


def _section(parent: dict[str, Any], key: str, where: str) -> dict[str, Any]:
    value = parent.get(key, {})
    if not isinstance(value, dict):
        raise ConfigurationError(f"{where}.{key} must be a JSON object")
    return value


def _number(value: Any, where: str, convert: type) -> Any:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ConfigurationError(f"{where} must be a number, got {value!r}")
    try:
        return convert(value)
    except (ValueError, OverflowError) as e:
        raise ConfigurationError(f"{where} must be a number, got {value!r}") from e


def _apply_overlay(config: SmartleadConfig, overlay: dict[str, Any]) -> None:
    api = _section(overlay, "api", "config")
    if "url" in api:
        if not isinstance(api["url"], str):
            raise ConfigurationError("config.api.url must be a string")
        config.api.api_url = api["url"]
    retry = _section(api, "retry", "config.api")
    for source_key, attr, convert in (
        ("maxAttempts", "max_attempts", int),
        ("initialDelay", "initial_delay_ms", int),
        ("maxDelay", "max_delay_ms", int),
        ("backoffFactor", "backoff_factor", float),
    ):
        if source_key in retry:
            value = _number(retry[source_key], f"config.api.retry.{source_key}", convert)
            setattr(config.api.retry, attr, value)

    features = _section(overlay, "features", "config")
    config.features.enabled_categories = _deep_merge(
        config.features.enabled_categories,
        _section(features, "enabledCategories", "config.features"),
    )
    config.features.enabled_tools = _deep_merge(
        config.features.enabled_tools, _section(features, "enabledTools", "config.features")
    )
    if "extendedLogging" in features:
        config.features.extended_logging = bool(features["extendedLogging"])

    sse = _section(_section(overlay, "modes", "config"), "sse", "config.modes")
    if "port" in sse:
        config.server.sse_port = _number(sse["port"], "config.modes.sse.port", int)


def load_config(config_path: str | Path | None = None) -> SmartleadConfig:
    """Load configuration from environment and the optional config file.

    Args:
        config_path: Explicit path to a JSON config file. Defaults to
            ``mcp_config.json`` in the working directory, if it exists.

    Returns:
        SmartleadConfig (not yet validated; call ``require_valid``)

    Raises:
        ConfigurationError: If an env value or the config file is malformed
    """
    load_dotenv()
    config = SmartleadConfig()

    if config_path is not None:
        path = Path(config_path)
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {path}")
    else:
        path = Path.cwd() / DEFAULT_CONFIG_FILE

    if path.exists():
        _apply_overlay(config, _read_config_file(path))

    return config
