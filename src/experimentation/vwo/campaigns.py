"""
VWO settings file handling.

The VWO SDK hands settings around as a JSON string; the connector caches
them parsed so snapshots can be compared structurally, and converts each
campaign into an Experiment on demand.
"""

import copy
import json
import logging
from typing import Any, Dict, List, Mapping

from ..errors import SettingsFetchError
from ..schema import Experiment, State, Variation, map_to_state

logger = logging.getLogger(__name__)


def parse_settings(raw: Any) -> Dict[str, Any]:
    """
    Parse a VWO settings file into a dict.

    Args:
        raw: JSON string (as returned by ``vwo.get_settings_file``) or an
            already parsed mapping

    Raises:
        SettingsFetchError: not JSON, not an object, no campaign list, or a
            campaign or variation entry that is not an object.
            The SDK returns ``"{}"`` when its own fetch fails, which lands here.
    """
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError as e:
            raise SettingsFetchError(f"Settings file is not valid JSON: {e}") from e
    if not isinstance(raw, Mapping):
        raise SettingsFetchError(
            f"Settings file must be a JSON object, got {type(raw).__name__}"
        )
    # callers keep their object; the cache must not share nested data with it
    settings = copy.deepcopy(dict(raw))
    campaigns = settings.get("campaigns")
    if not isinstance(campaigns, list):
        raise SettingsFetchError("Settings file has no campaign list")
    for index, campaign in enumerate(campaigns):
        if not isinstance(campaign, Mapping):
            raise SettingsFetchError(
                f"Campaign #{index} is not an object: {type(campaign).__name__}"
            )
        variations = campaign.get("variations")
        if variations is None:
            continue
        if not isinstance(variations, list) or not all(
            isinstance(v, Mapping) for v in variations
        ):
            raise SettingsFetchError(
                f"Campaign {campaign.get('key')!r} has malformed variations"
            )
    return settings


def to_settings_file(settings: Mapping[str, Any]) -> str:
    """Serialize cached settings back into the form ``vwo.launch`` takes."""
    return json.dumps(settings)


def get_campaigns(settings: Mapping[str, Any]) -> List[Dict[str, Any]]:
    return list(settings.get("campaigns") or [])


def get_variation_list(campaign: Mapping[str, Any]) -> List[Variation]:
    """Variations of a campaign, in settings order."""
    if not campaign:
        return []
    variations = []
    for variation in campaign.get("variations") or []:
        weight = variation.get("weight")
        variations.append(Variation(
            friendly_name=variation.get("name", ""),
            id=str(variation.get("id", "")),
            # VWO does not report per-variation state
            status=State.ENABLED,
            weight=None if weight is None else str(weight),
        ))
    return variations


def campaign_to_experiment(campaign: Mapping[str, Any]) -> Experiment:
    key = campaign.get("key", "")
    return Experiment(
        friendly_name=campaign.get("name") or key,
        id=key,
        status=map_to_state(campaign.get("status")),
        variations=get_variation_list(campaign),
        type=campaign.get("type"),
    )


def build_experiments(settings: Mapping[str, Any]) -> List[Experiment]:
    """Convert every campaign in the settings into an Experiment."""
    experiments = [campaign_to_experiment(c) for c in get_campaigns(settings)]
    logger.debug(f"Built {len(experiments)} experiments from settings")
    return experiments


def launch_client(sdk: Any, settings: Mapping[str, Any]) -> Any:
    """
    Build a VWO client instance from cached settings.

    Raises:
        SettingsFetchError: the SDK rejected the settings and returned no client
    """
    client = sdk.launch(to_settings_file(settings))
    if client is None:
        raise SettingsFetchError("VWO SDK returned no client for these settings")
    return client
