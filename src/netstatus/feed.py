"""Live representative feed.

The online representative set and the genesis balance are pushed into a
NetworkDataFeed by whatever subscription mechanism the host runs; the view
only ever reads ``latest``. ``refresh`` is a ready-made push source that
pulls both values from the explorer API.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from netstatus.utils.logging import make_logger

if TYPE_CHECKING:
    from netstatus.protocols import NetworkDataSource

logger = make_logger(__name__)


@dataclass(frozen=True)
class NetworkData:
    """Latest value of the live feed.

    Attributes:
        representatives_online: Address -> raw weight of online representatives
        genesis_balance: Raw balance of the genesis account
        received_at: Unix time the value was published, None if never
    """

    representatives_online: Mapping[str, Any] = field(default_factory=dict)
    genesis_balance: str = "0"
    received_at: float | None = None

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "representatives_online",
            MappingProxyType(dict(self.representatives_online)),
        )


class NetworkDataFeed:
    """Holder of the most recently pushed NetworkData."""

    def __init__(self, initial: NetworkData | None = None) -> None:
        self._latest = initial or NetworkData()

    @property
    def latest(self) -> NetworkData:
        return self._latest

    def publish(
        self,
        representatives_online: Mapping[str, Any],
        genesis_balance: str,
    ) -> NetworkData:
        """Replace the current value with a newly pushed one."""
        self._latest = NetworkData(
            representatives_online=representatives_online,
            genesis_balance=genesis_balance,
            received_at=time.time(),
        )
        return self._latest

    async def refresh(self, source: NetworkDataSource) -> bool:
        """Fetch both feed values from ``source`` and publish them together.

        Returns:
            True if a new value was published; on failure the previous
            value is kept and False is returned
        """
        try:
            representatives_online, genesis_balance = await asyncio.gather(
                source.fetch_representatives_online(),
                source.fetch_genesis_balance(),
            )
            if not isinstance(representatives_online, Mapping):
                raise TypeError(
                    "expected a mapping of online representatives, got "
                    f"{type(representatives_online).__name__}"
                )
            self.publish(representatives_online, genesis_balance)
        except Exception as e:
            logger.warning(f"Feed refresh failed, keeping previous value: {e}")
            return False

        logger.debug(
            f"Feed updated: {len(representatives_online)} representatives online"
        )
        return True
