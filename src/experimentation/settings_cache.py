"""
In-memory cache of vendor settings kept current by a background poll.

One poller owns one snapshot. Each poll fetches the vendor settings,
compares them structurally with the cached copy and, only when they
differ, swaps the snapshot and notifies the owner so it can rebuild its
vendor client. Fetch failures leave the cache untouched until the next
tick.
"""

import asyncio
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

FetchSettings = Callable[[str, str], Dict[str, Any]]


@dataclass(frozen=True)
class SettingsSnapshot:
    """Vendor settings plus the credentials they were fetched with."""
    settings: Dict[str, Any]
    account_id: Optional[str] = None
    sdk_key: Optional[str] = field(default=None, repr=False)


class SettingsPoller:
    """
    Polls vendor settings on a fixed interval.

    Args:
        fetch_settings: Blocking callable ``(account_id, sdk_key) -> settings``.
            Runs in a worker thread; raising counts as a failed fetch.
        on_change: Called with the new snapshot whenever it is replaced
            by a poll.
    """

    def __init__(
        self,
        fetch_settings: FetchSettings,
        on_change: Optional[Callable[[SettingsSnapshot], None]] = None,
    ):
        self._fetch_settings = fetch_settings
        self._on_change = on_change
        self._account_id: Optional[str] = None
        self._sdk_key: Optional[str] = None
        self._snapshot: Optional[SettingsSnapshot] = None
        self._task: Optional[asyncio.Task] = None
        self._change_count = 0

    @property
    def snapshot(self) -> Optional[SettingsSnapshot]:
        return self._snapshot

    @property
    def settings(self) -> Optional[Dict[str, Any]]:
        return self._snapshot.settings if self._snapshot is not None else None

    @property
    def change_count(self) -> int:
        """Number of times a poll replaced the snapshot."""
        return self._change_count

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def configure(self, account_id: str, sdk_key: str) -> None:
        """Set the credentials used by subsequent polls."""
        self._account_id = account_id
        self._sdk_key = sdk_key

    def replace(self, settings: Dict[str, Any]) -> SettingsSnapshot:
        """Install a snapshot directly, without notifying the owner."""
        self._snapshot = SettingsSnapshot(
            settings=settings,
            account_id=self._account_id,
            sdk_key=self._sdk_key,
        )
        return self._snapshot

    async def fetch(
        self, account_id: Optional[str] = None, sdk_key: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Fetch vendor settings without touching the cache.

        Uses the configured credentials unless others are given.
        """
        account_id = account_id if account_id is not None else self._account_id
        sdk_key = sdk_key if sdk_key is not None else self._sdk_key
        if account_id is None or sdk_key is None:
            raise RuntimeError("SettingsPoller used before configure()")
        return await asyncio.to_thread(self._fetch_settings, account_id, sdk_key)

    async def poll_once(self) -> bool:
        """
        Fetch settings and refresh the cache if they changed.

        Returns:
            True if the fetch succeeded (changed or not), False otherwise
        """
        logger.debug(f"Polling settings for account {self._account_id}")
        try:
            latest = await self.fetch()
        except Exception as e:
            logger.error(
                f"Failed to fetch settings for account {self._account_id}: {e}",
                exc_info=True,
            )
            return False
        self.update(latest)
        return True

    def update(self, latest: Dict[str, Any], notify: bool = True) -> bool:
        """
        Install fetched settings if they differ from the cached ones.

        Equal settings keep the current snapshot, only taking over the
        configured credentials if those changed.

        Returns:
            True if the snapshot was replaced
        """
        if self.is_current(latest):
            snapshot = self._snapshot
            if (snapshot.account_id, snapshot.sdk_key) != (self._account_id, self._sdk_key):
                self._snapshot = replace(
                    snapshot, account_id=self._account_id, sdk_key=self._sdk_key
                )
            logger.debug("Settings unchanged, keeping current snapshot")
            return False

        snapshot = self.replace(latest)
        self._change_count += 1
        logger.info(f"Settings snapshot replaced (change #{self._change_count})")
        if notify and self._on_change is not None:
            self._on_change(snapshot)
        return True

    def is_current(self, settings: Dict[str, Any]) -> bool:
        """True if ``settings`` equal the cached ones."""
        if self._snapshot is None:
            return False
        try:
            return bool(self._snapshot.settings == settings)
        except Exception:
            # incomparable settings are treated as a change
            return False

    def start(self, interval: float) -> None:
        """
        Start polling every ``interval`` seconds.

        Any loop already running is cancelled first, so a poller never
        has more than one.
        """
        self._cancel()
        self._task = asyncio.create_task(self._poll_loop(interval))
        logger.info(f"Settings polling started (every {interval:g}s)")

    async def stop(self) -> None:
        """Cancel the poll loop and wait for it to finish."""
        task = self._cancel()
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Settings polling stopped")

    def _cancel(self) -> Optional[asyncio.Task]:
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
        return task

    async def _poll_loop(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            try:
                await self.poll_once()
            except Exception as e:
                logger.error(f"Error in settings poll loop: {e}", exc_info=True)
