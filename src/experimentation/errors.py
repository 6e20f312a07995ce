"""Exceptions raised by experimentation connectors."""


class ExperimentationError(Exception):
    """Base class for connector errors."""


class ConfigurationError(ExperimentationError):
    """Provider configuration is missing or malformed."""


class SettingsFetchError(ExperimentationError):
    """The vendor settings could not be fetched or parsed."""


class SettingsNotLoadedError(ExperimentationError):
    """No settings snapshot has been cached yet."""
