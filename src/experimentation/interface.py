"""
Contracts every experimentation connector implements.

A connector is a pair: a provider used by the host server (and again
client-side to activate experiments) and a listener used client-side to
report conversions.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from .schema import Experiment, Variant


class ExperimentationProvider(ABC):
    """Server-side experimentation connector."""

    @abstractmethod
    async def initialize(self, config: Any) -> bool:
        """
        Do startup work using the partner supplied config.

        Called once during server startup. Returns False, without raising,
        when the config is missing or the vendor cannot be reached.
        """

    @abstractmethod
    async def get_config_for_client_side_init(self) -> Any:
        """Return the config ``initialize_client_side`` needs in the browser."""

    @abstractmethod
    def initialize_client_side(self, config: Any) -> bool:
        """
        Initialize the provider client-side so it can activate experiments.

        Args:
            config: Result of ``get_config_for_client_side_init``
        """

    @abstractmethod
    async def get_experiments(
        self, page: Optional[str] = None, items: Optional[str] = None
    ) -> List[Experiment]:
        """
        Return every configured experiment, active or not.

        Args:
            page: Optional page to return
            items: Optional maximum number of experiments per page
        """

    @abstractmethod
    def get_variants_for_user(
        self, user_id: str, attributes: Optional[Dict[str, str]] = None
    ) -> List[Variant]:
        """
        Return the experiments and variants a user is part of.

        Args:
            user_id: Id of a signed-in user, or of the session when anonymous
            attributes: Optional targeting attributes for the user
        """

    @abstractmethod
    def activate_experiment(
        self,
        user_id: str,
        experiments: List[Variant],
        attributes: Optional[Dict[str, str]] = None,
    ) -> bool:
        """Activate the experiments a user is currently being served."""

    async def shutdown(self) -> None:
        """Release background resources. No-op by default."""


class ExperimentationListener(ABC):
    """Client-side conversion tracker."""

    @abstractmethod
    def initialize_client_side(self, config: Any, user_id: str) -> bool:
        """
        Initialize the listener for the user being served experiments.

        Args:
            config: Result of the provider's ``get_config_for_client_side_init``
            user_id: Id of the current user
        """

    @abstractmethod
    def track_event(
        self, event_type: str, payload: Any, attributes: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Track a user conversion event. Never raises.

        Args:
            event_type: Name of the event that occurred
            payload: Additional tags or data about the conversion
            attributes: Optional attributes of the user who converted
        """
