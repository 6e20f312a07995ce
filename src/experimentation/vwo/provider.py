"""
Server-side VWO connector.

Fetches the account's settings file, keeps it cached and current through
a SettingsPoller, and answers experiment, assignment and activation
queries from the cache through a VWO client instance.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

import vwo

from ..assignment import build_variant
from ..config import ProviderConfig
from ..errors import ConfigurationError, SettingsFetchError, SettingsNotLoadedError
from ..interface import ExperimentationProvider
from ..schema import Experiment, Variant
from ..settings_cache import SettingsPoller, SettingsSnapshot
from .campaigns import build_experiments, get_campaigns, launch_client, parse_settings

logger = logging.getLogger(__name__)


def _vendor_options(attributes: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if not attributes:
        return {}
    return {"custom_variables": dict(attributes)}


def _experiment_id(variant: Any) -> Optional[str]:
    # browsers send variants back as dicts, either Variant.to_dict() or camelCase
    if isinstance(variant, Variant):
        return variant.experiment_id
    if isinstance(variant, Mapping):
        return variant.get("experiment_id") or variant.get("experimentId")
    return None


class VwoProvider(ExperimentationProvider):
    """
    Experimentation provider backed by the VWO SDK.

    Construct one per process, ``await initialize(config)`` at startup and
    ``await shutdown()`` on exit.

    Args:
        sdk: Object exposing ``get_settings_file`` and ``launch``; the
            ``vwo`` module by default
    """

    def __init__(self, sdk: Any = None):
        self._sdk = sdk if sdk is not None else vwo
        self._client: Any = None
        self._config: Optional[ProviderConfig] = None
        self._poller = SettingsPoller(
            self._fetch_settings, on_change=self._on_settings_changed
        )

    @property
    def client(self) -> Any:
        return self._client

    @property
    def config(self) -> Optional[ProviderConfig]:
        return self._config

    @property
    def poller(self) -> SettingsPoller:
        return self._poller

    def _fetch_settings(self, account_id: str, sdk_key: str) -> Dict[str, Any]:
        return parse_settings(self._sdk.get_settings_file(account_id, sdk_key))

    def _on_settings_changed(self, snapshot: SettingsSnapshot) -> None:
        try:
            self._client = launch_client(self._sdk, snapshot.settings)
            logger.info("VWO client initialized from new settings")
        except Exception as e:
            logger.error(f"Failed to initialize VWO client instance: {e}", exc_info=True)

    async def initialize(self, config: Any) -> bool:
        if not config:
            logger.error("VWO provider initialization skipped: no configuration")
            return False
        try:
            if not isinstance(config, ProviderConfig):
                config = ProviderConfig.from_mapping(config)
        except ConfigurationError as e:
            logger.error(f"Invalid VWO provider configuration: {e}")
            return False

        logger.info(
            f"Initializing VWO provider for account {config.account_id} "
            f"(poll time {config.poll_time_ms}ms)"
        )
        # nothing is switched over until the new account answered and a
        # client could be built, so a failed re-initialize keeps the old loop
        try:
            latest = await self._poller.fetch(config.account_id, config.sdk_key)
        except Exception as e:
            logger.error(
                f"VWO provider initialization failed: settings unavailable: {e}",
                exc_info=True,
            )
            return False
        client = self._client
        if client is None or not self._poller.is_current(latest):
            try:
                client = launch_client(self._sdk, latest)
            except Exception as e:
                logger.error(
                    f"VWO provider initialization failed: no client instance: {e}",
                    exc_info=True,
                )
                return False

        await self._poller.stop()
        self._config = config
        self._poller.configure(config.account_id, config.sdk_key)
        self._poller.update(latest, notify=False)
        self._client = client
        self._poller.start(config.poll_interval)
        return True

    async def get_config_for_client_side_init(self) -> Dict[str, Any]:
        if self._config is None:
            raise SettingsNotLoadedError("VWO provider has not been initialized")
        try:
            return await self._poller.fetch()
        except SettingsFetchError:
            raise
        except Exception as e:
            raise SettingsFetchError(f"Failed to fetch VWO settings: {e}") from e

    def initialize_client_side(self, config: Any) -> bool:
        if not config:
            logger.error("VWO client side initialization skipped: no configuration")
            return False
        try:
            settings = parse_settings(config)
            self._client = launch_client(self._sdk, settings)
        except Exception as e:
            logger.error(f"Failed to initialize VWO client side: {e}", exc_info=True)
            return False
        self._poller.replace(settings)
        logger.info("VWO client side initialized successfully")
        return True

    async def get_experiments(
        self, page: Optional[str] = None, items: Optional[str] = None
    ) -> List[Experiment]:
        # VWO settings carry every campaign; page and items are not applied
        settings = self._poller.settings
        if settings is None:
            raise SettingsNotLoadedError("No VWO settings cached; call initialize() first")
        return build_experiments(settings)

    def get_variants_for_user(
        self, user_id: str, attributes: Optional[Dict[str, str]] = None
    ) -> List[Variant]:
        client = self._client
        settings = self._poller.settings
        if client is None or settings is None:
            logger.error("get_variants_for_user called before VWO client was initialized")
            return []

        options = _vendor_options(attributes)
        variants = []
        for campaign in get_campaigns(settings):
            campaign_key = None
            try:
                campaign_key = campaign.get("key")
                variation_name = client.get_variation_name(campaign_key, user_id, **options)
                if variation_name:
                    variants.append(
                        build_variant(campaign_key, variation_name, campaign.get("variations"))
                    )
            except Exception as e:
                logger.error(
                    f"Failed to get variation of {campaign_key} for user {user_id}: {e}",
                    exc_info=True,
                )
        logger.debug(f"User {user_id} is in {len(variants)} experiments")
        return variants

    def activate_experiment(
        self,
        user_id: str,
        experiments: List[Variant],
        attributes: Optional[Dict[str, str]] = None,
    ) -> bool:
        client = self._client
        if client is None:
            logger.error("activate_experiment called before VWO client was initialized")
            return False

        options = _vendor_options(attributes)
        for variant in experiments or []:
            experiment_id = _experiment_id(variant)
            if not experiment_id:
                logger.warning(f"Skipping activation of malformed experiment entry {variant!r}")
                continue
            try:
                client.activate(experiment_id, user_id, **options)
                logger.info(f"Activated experiment {experiment_id} for user {user_id}")
            except Exception as e:
                logger.error(
                    f"Failed to activate experiment {experiment_id} for user {user_id}: {e}",
                    exc_info=True,
                )
        return True

    async def shutdown(self) -> None:
        await self._poller.stop()
