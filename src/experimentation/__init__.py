"""Experimentation connectors: a vendor-neutral A/B testing contract."""

from .schema import (
    State,
    Variation,
    Experiment,
    Variant,
    map_to_state,
)
from .assignment import get_variant_id, build_variant
from .config import ProviderConfig, DEFAULT_POLL_TIME_MS
from .errors import (
    ExperimentationError,
    ConfigurationError,
    SettingsFetchError,
    SettingsNotLoadedError,
)
from .interface import ExperimentationProvider, ExperimentationListener
from .settings_cache import SettingsPoller, SettingsSnapshot

__all__ = [
    "State",
    "Variation",
    "Experiment",
    "Variant",
    "map_to_state",
    "get_variant_id",
    "build_variant",
    "ProviderConfig",
    "DEFAULT_POLL_TIME_MS",
    "ExperimentationError",
    "ConfigurationError",
    "SettingsFetchError",
    "SettingsNotLoadedError",
    "ExperimentationProvider",
    "ExperimentationListener",
    "SettingsPoller",
    "SettingsSnapshot",
]
