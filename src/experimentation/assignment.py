"""
Resolution of vendor variation names to variation ids.

Vendors report a user's assignment by variation name; the host works
with ids, so each assignment is looked up in the experiment's
variation list.
"""

import logging
from typing import Any, Iterable, Mapping, Optional

from .schema import Variant

logger = logging.getLogger(__name__)

NOT_FOUND = ""


def get_variant_id(variation_name: str, variations: Iterable[Mapping[str, Any]]) -> str:
    """
    Return the id of the first variation named ``variation_name``.

    Names are compared exactly (case-sensitive).

    Args:
        variation_name: Variation name as reported by the vendor
        variations: Raw vendor variations, each with ``name`` and ``id``

    Returns:
        The variation id as a string, or ``NOT_FOUND`` (empty string)
    """
    for variation in variations or ():
        if variation.get("name") == variation_name:
            variation_id = variation.get("id")
            return NOT_FOUND if variation_id is None else str(variation_id)
    return NOT_FOUND


def build_variant(
    experiment_id: str,
    variation_name: str,
    variations: Iterable[Mapping[str, Any]],
    module_id: Optional[str] = None,
) -> Variant:
    """Pair an experiment with the id of the variation the user landed in."""
    variant_id = get_variant_id(variation_name, variations)
    if variant_id == NOT_FOUND:
        logger.warning(
            f"Variation '{variation_name}' not found in experiment {experiment_id}"
        )
    return Variant(
        experiment_id=experiment_id,
        variant_id=variant_id,
        module_id=module_id,
    )
