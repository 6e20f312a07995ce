"""
Experiment data models shared by every connector.

Dataclass schemas for experiments, their variations and user
assignments, plus the vendor status to State mapping.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class State(str, Enum):
    """Lifecycle state of an experiment or variation."""
    DRAFT = "DRAFT"
    TRASHED = "TRASHED"
    RUNNING = "RUNNING"
    PAUSED = "PAUSED"
    ARCHIVED = "ARCHIVED"
    ENABLED = "ENABLED"  # variation level
    DISABLED = "DISABLED"  # variation level


_CAMPAIGN_STATES = {
    state.value: state
    for state in (
        State.DRAFT,
        State.TRASHED,
        State.RUNNING,
        State.PAUSED,
        State.ARCHIVED,
    )
}


def map_to_state(status: Optional[str]) -> State:
    """
    Map a vendor campaign status string to a State.

    Matching is exact and case-sensitive. Anything unrecognised,
    variation-level states included, falls back to DRAFT.
    """
    if not isinstance(status, str):
        return State.DRAFT
    return _CAMPAIGN_STATES.get(status, State.DRAFT)


@dataclass(frozen=True)
class Variation:
    """One arm of an experiment."""
    friendly_name: str
    id: str
    status: State
    weight: Optional[str] = None  # traffic fraction, vendor formatted


@dataclass(frozen=True)
class Experiment:
    """An experiment as listed in the cached settings."""
    friendly_name: str
    id: str  # vendor key
    status: State
    variations: List[Variation] = field(default_factory=list)
    created_date: Optional[str] = None
    last_modified_date: Optional[str] = None
    last_modified_by: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    link: Optional[str] = None
    result_link: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        d = asdict(self)
        d["status"] = self.status.value
        d["variations"] = [
            {
                "friendly_name": v.friendly_name,
                "id": v.id,
                "status": v.status.value,
                "weight": v.weight,
            }
            for v in self.variations
        ]
        return d


@dataclass(frozen=True)
class Variant:
    """A user's assignment to one variation of one experiment."""
    experiment_id: str
    variant_id: str
    module_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return asdict(self)
