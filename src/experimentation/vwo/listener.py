"""Client-side VWO conversion tracking."""

import logging
from numbers import Number
from typing import Any, Dict, Mapping, Optional

import vwo

from ..interface import ExperimentationListener
from .campaigns import launch_client, parse_settings

logger = logging.getLogger(__name__)


class VwoListener(ExperimentationListener):
    """
    Reports conversion events for one user to VWO.

    The event type is used as the VWO goal identifier. A ``campaign_key``
    in the payload limits tracking to that campaign, otherwise the goal is
    tracked across every campaign the user is part of. A numeric
    ``revenue`` in the payload is sent as the goal's revenue value.
    """

    def __init__(self, sdk: Any = None):
        self._sdk = sdk if sdk is not None else vwo
        self._client: Any = None
        self._user_id = ""

    @property
    def client(self) -> Any:
        return self._client

    @property
    def user_id(self) -> str:
        return self._user_id

    def initialize_client_side(self, config: Any, user_id: str) -> bool:
        if not config:
            logger.error("VWO listener initialization skipped: no configuration")
            return False
        self._user_id = user_id
        try:
            self._client = launch_client(self._sdk, parse_settings(config))
        except Exception as e:
            logger.error(f"Failed to initialize VWO listener: {e}", exc_info=True)
            return False
        logger.info(f"VWO listener initialized for user {user_id}")
        return True

    def track_event(
        self, event_type: str, payload: Any, attributes: Optional[Dict[str, Any]] = None
    ) -> None:
        if self._client is None:
            logger.error(f"Cannot track '{event_type}': VWO listener not initialized")
            return
        try:
            campaign_specifier = None
            options: Dict[str, Any] = {}
            if isinstance(payload, Mapping):
                campaign_specifier = payload.get("campaign_key")
                revenue = payload.get("revenue")
                if isinstance(revenue, Number) and not isinstance(revenue, bool):
                    options["revenue_value"] = revenue
            if attributes:
                options["custom_variables"] = dict(attributes)

            self._client.track(campaign_specifier, self._user_id, event_type, **options)
            logger.debug(f"Tracked '{event_type}' for user {self._user_id}")
        except Exception as e:
            logger.error(f"Failed to track '{event_type}' for user {self._user_id}: {e}", exc_info=True)
