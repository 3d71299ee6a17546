"""Self-renewing network-counter polling.

This module provides:
- CancellationToken: Cooperative stop signal shared with a running task
- RepeatingTask: Runs an async callable, then waits a fixed delay, forever
- NetworkSnapshot: Immutable bundle of counters from one poll cycle
- StatsPoller: Owns the current snapshot and the polling task
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from netstatus.config import DEFAULT_POLL_INTERVAL
from netstatus.utils.logging import make_logger

if TYPE_CHECKING:
    from netstatus.protocols import NetworkAPI

logger = make_logger(__name__)


class CancellationToken:
    """Stop signal for a RepeatingTask.

    Cancelling wakes a task that is waiting for its next run immediately.
    Work that is already running is not interrupted; it is expected to
    check ``cancelled`` before publishing its result.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    async def wait(self, timeout: float) -> bool:
        """Wait up to ``timeout`` seconds for cancellation.

        Returns:
            True if the token was cancelled, False if the timeout elapsed
        """
        try:
            async with asyncio.timeout(timeout):
                await self._event.wait()
        except TimeoutError:
            return False
        return True


class RepeatingTask:
    """Run an async callable repeatedly with a fixed delay between runs.

    The delay is measured from the end of one run to the start of the
    next, so a slow run postpones the following one instead of overlapping
    it. Exactly one asyncio task exists per started RepeatingTask.

    Attributes:
        interval: Seconds to wait after each run
        name: Task name used in logs
    """

    def __init__(
        self,
        func: Callable[[CancellationToken], Awaitable[Any]],
        interval: float,
        name: str = "repeating-task",
    ) -> None:
        self._func = func
        self.interval = interval
        self.name = name
        self._token: CancellationToken | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> CancellationToken:
        """Schedule the first run immediately on the running event loop.

        Returns:
            The token that stops this task when cancelled

        Raises:
            RuntimeError: If the task was already started
        """
        if self._task is not None:
            raise RuntimeError(f"{self.name} was already started")

        self._token = CancellationToken()
        self._task = asyncio.create_task(self._run(self._token), name=self.name)
        logger.debug(f"{self.name} started (interval {self.interval}s)")
        return self._token

    def stop(self) -> None:
        """Cancel the pending wait; no further runs are started."""
        if self._token is not None and not self._token.cancelled:
            self._token.cancel()
            logger.debug(f"{self.name} stopped")

    async def join(self) -> None:
        """Wait until the loop has exited (after stop())."""
        if self._task is not None:
            await self._task

    async def _run(self, token: CancellationToken) -> None:
        while not token.cancelled:
            try:
                await self._func(token)
            except Exception as e:
                logger.warning(f"{self.name} run failed: {e}")

            if await token.wait(self.interval):
                break


class PollerState(Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    STOPPED = "stopped"


def _frozen(mapping: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class NetworkSnapshot:
    """Network counters fetched together in one poll cycle.

    Attributes:
        blocks_by_type: Block type -> count as reported (decimal string)
        peers: Peer address -> peer metadata
        official_representatives: Address -> raw weight
        fetched_at: Unix time the cycle completed, None for the empty snapshot
        cycle: Number of the successful cycle that produced this snapshot
    """

    blocks_by_type: Mapping[str, Any] = field(default_factory=dict)
    peers: Mapping[str, Any] = field(default_factory=dict)
    official_representatives: Mapping[str, Any] = field(default_factory=dict)
    fetched_at: float | None = None
    cycle: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "blocks_by_type", _frozen(self.blocks_by_type))
        object.__setattr__(self, "peers", _frozen(self.peers))
        object.__setattr__(
            self, "official_representatives", _frozen(self.official_representatives)
        )

    @property
    def is_empty(self) -> bool:
        return self.fetched_at is None


class StatsPoller:
    """Keep a live NetworkSnapshot by polling three counters on a fixed cadence.

    The three fetches of a cycle run concurrently and the cycle waits for
    all of them. The snapshot is replaced only when all three succeed; a
    failed cycle leaves the previous snapshot in place and the next cycle
    runs after the usual interval. After stop(), results of a cycle that is
    still in flight are discarded.

    Attributes:
        api: Source of the three network counters
        completed_cycles: Number of cycles that replaced the snapshot
        failed_cycles: Number of cycles discarded because a fetch failed
        last_error: Error from the most recent failed cycle, if any
    """

    def __init__(
        self,
        api: NetworkAPI,
        interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        """Initialize the poller.

        Args:
            api: Source of the three network counters
            interval: Seconds between the end of a cycle and the next start
        """
        self.api = api
        self._snapshot = NetworkSnapshot()
        self._state = PollerState.IDLE
        self._task = RepeatingTask(self._cycle, interval, name="stats-poller")
        self.completed_cycles = 0
        self.failed_cycles = 0
        self.last_error: BaseException | None = None

    @property
    def snapshot(self) -> NetworkSnapshot:
        """The latest complete snapshot (empty until the first success)."""
        return self._snapshot

    @property
    def state(self) -> PollerState:
        return self._state

    @property
    def interval(self) -> float:
        return self._task.interval

    def age(self, now: float | None = None) -> float | None:
        """Seconds since the snapshot was fetched, None if never fetched."""
        if self._snapshot.fetched_at is None:
            return None
        return (time.time() if now is None else now) - self._snapshot.fetched_at

    def start(self) -> CancellationToken:
        """Start polling; the first cycle begins immediately.

        Raises:
            RuntimeError: If the poller was already started or stopped
        """
        if self._state is PollerState.STOPPED:
            raise RuntimeError("A stopped poller cannot be restarted")
        logger.info(f"Polling network counters every {self.interval:.0f}s")
        return self._task.start()

    def stop(self) -> None:
        """Stop polling. Results of an in-flight cycle will be discarded."""
        self._state = PollerState.STOPPED
        self._task.stop()

    async def join(self) -> None:
        await self._task.join()

    async def poll_once(self) -> bool:
        """Run a single fetch cycle.

        Returns:
            True if the snapshot was replaced, False otherwise
        """
        if self._state is PollerState.STOPPED:
            return False

        self._state = PollerState.FETCHING
        results = await asyncio.gather(
            self.api.fetch_block_counts_by_type(),
            self.api.fetch_peers(),
            self.api.fetch_official_representatives(),
            return_exceptions=True,
        )

        if self._state is PollerState.STOPPED:
            logger.debug("Discarding poll results received after stop")
            return False
        self._state = PollerState.IDLE

        errors = [r for r in results if isinstance(r, BaseException)]
        if errors:
            return self._fail(
                errors[0], f"{len(errors)}/3 fetches raised, keeping previous snapshot"
            )

        malformed = [type(r).__name__ for r in results if not isinstance(r, Mapping)]
        if malformed:
            return self._fail(
                TypeError(f"expected mappings, got {', '.join(malformed)}"),
                "malformed counters, keeping previous snapshot",
            )

        blocks_by_type, peers, official_representatives = results
        try:
            snapshot = NetworkSnapshot(
                blocks_by_type=blocks_by_type,
                peers=peers,
                official_representatives=official_representatives,
                fetched_at=time.time(),
                cycle=self.completed_cycles + 1,
            )
        except (TypeError, ValueError) as e:
            return self._fail(e, "malformed counters, keeping previous snapshot")

        self.completed_cycles += 1
        self.last_error = None
        self._snapshot = snapshot
        logger.debug(
            f"Snapshot {self.completed_cycles}: {len(peers)} peers, "
            f"{len(official_representatives)} official representatives"
        )
        return True

    def _fail(self, error: BaseException, reason: str) -> bool:
        self.failed_cycles += 1
        self.last_error = error
        logger.warning(f"Poll cycle failed ({reason}): {error}")
        return False

    async def _cycle(self, token: CancellationToken) -> None:
        if not token.cancelled:
            await self.poll_once()
