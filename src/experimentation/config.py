"""
Provider configuration.

Validated account credentials and polling options. Accepts the camelCase
keys hosts put in connector settings as well as snake_case.
"""

import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .errors import ConfigurationError

DEFAULT_POLL_TIME_MS = 10000

ENV_ACCOUNT_ID = "VWO_ACCOUNT_ID"
ENV_SDK_KEY = "VWO_SDK_KEY"
ENV_POLL_TIME = "VWO_POLL_TIME"


def _lookup(config: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in config and config[key] is not None:
            return config[key]
    return None


def _require_str(value: Any, name: str) -> str:
    if not isinstance(value, str):
        if value is None:
            raise ConfigurationError(f"Missing required setting '{name}'")
        # numeric account ids are common in connector settings
        if isinstance(value, int) and not isinstance(value, bool):
            value = str(value)
        else:
            raise ConfigurationError(
                f"Setting '{name}' must be a string, got {type(value).__name__}"
            )
    value = value.strip()
    if not value:
        raise ConfigurationError(f"Setting '{name}' must not be empty")
    return value


def _parse_poll_time(value: Any) -> int:
    if value is None:
        return DEFAULT_POLL_TIME_MS
    if isinstance(value, bool):
        raise ConfigurationError("Setting 'pollTime' must be an integer")
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            raise ConfigurationError(
                f"Setting 'pollTime' must be an integer, got {value!r}"
            )
    if not isinstance(value, int):
        raise ConfigurationError(
            f"Setting 'pollTime' must be an integer, got {type(value).__name__}"
        )
    if value <= 0:
        raise ConfigurationError(f"Setting 'pollTime' must be positive, got {value}")
    return value


@dataclass(frozen=True)
class ProviderConfig:
    """Credentials and polling options for a provider."""
    account_id: str
    sdk_key: str
    poll_time_ms: int = DEFAULT_POLL_TIME_MS

    def __post_init__(self):
        object.__setattr__(self, "account_id", _require_str(self.account_id, "accountId"))
        object.__setattr__(self, "sdk_key", _require_str(self.sdk_key, "sdkKey"))
        object.__setattr__(self, "poll_time_ms", _parse_poll_time(self.poll_time_ms))

    @property
    def poll_interval(self) -> float:
        """Poll interval in seconds."""
        return self.poll_time_ms / 1000.0

    @classmethod
    def from_mapping(cls, config: Optional[Mapping[str, Any]]) -> "ProviderConfig":
        """
        Build a config from connector settings.

        Args:
            config: Mapping with accountId, sdkKey and optional pollTime
                (milliseconds). snake_case keys are accepted too.

        Raises:
            ConfigurationError: config is empty or a field is invalid
        """
        if not config:
            raise ConfigurationError("Provider configuration is empty")
        if not isinstance(config, Mapping):
            raise ConfigurationError(
                f"Provider configuration must be a mapping, got {type(config).__name__}"
            )
        return cls(
            account_id=_lookup(config, "accountId", "account_id"),
            sdk_key=_lookup(config, "sdkKey", "sdk_key"),
            poll_time_ms=_lookup(config, "pollTime", "poll_time", "poll_time_ms"),
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ProviderConfig":
        """Build a config from VWO_ACCOUNT_ID, VWO_SDK_KEY and VWO_POLL_TIME."""
        env = os.environ if environ is None else environ
        return cls(
            account_id=env.get(ENV_ACCOUNT_ID),
            sdk_key=env.get(ENV_SDK_KEY),
            poll_time_ms=env.get(ENV_POLL_TIME) or None,
        )

    def __repr__(self) -> str:
        return (
            f"ProviderConfig(account_id={self.account_id!r}, "
            f"sdk_key='***', poll_time_ms={self.poll_time_ms})"
        )
