"""Derived voting-power metrics.

Every function here is pure: the same inputs always give the same output,
nothing is cached, and malformed numbers are substituted with zero rather
than raising. Percentages whose denominator is zero return ``None``, which
the view renders as ``N/A``.

All displayed percentages are built from three primitives (total weight,
eligible subset, percent_of) so that a change to the threshold formula
reaches every figure at once.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from decimal import Decimal
from typing import TYPE_CHECKING, TypeVar

from netstatus.currency import ZERO, from_raw

if TYPE_CHECKING:
    from netstatus.config import StatusConfig

K = TypeVar("K")

# Mirrors parseInt(value, 10): optional whitespace and sign, then digits
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

HUNDRED = Decimal(100)


def parse_count(value: object) -> int:
    """Parse a block count, giving 0 when there is no leading integer."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    match = _LEADING_INT.match(str(value))
    if match is None:
        return 0
    try:
        return int(match.group(1), 10)
    except ValueError:
        # Past the interpreter's int conversion digit limit
        return 0


def sum_parsed_counts(counts: Mapping[str, object]) -> int:
    """Sum base-10 block counts, counting unparseable entries as 0."""
    return sum(parse_count(value) for value in counts.values())


def percent_of(part: Decimal | int, whole: Decimal | int) -> Decimal | None:
    """Return part as a percentage of whole, or None when whole is zero."""
    if not whole:
        return None
    return Decimal(part) / Decimal(whole) * HUNDRED


class MetricMath:
    """Voting-power calculations bound to a static configuration.

    Attributes:
        config: Currency supply, precision and rebroadcast ratio in use
    """

    def __init__(self, config: StatusConfig) -> None:
        self.config = config

    def weight(self, raw: object) -> Decimal:
        """Convert a single raw weight to display units."""
        return from_raw(raw, self.config.currency_precision)

    @property
    def max_supply(self) -> Decimal:
        return Decimal(self.config.max_supply)

    def circulating_supply(self, genesis_balance: object) -> Decimal:
        """Max supply minus what the genesis account still holds."""
        return self.max_supply - self.weight(genesis_balance)

    def rebroadcast_threshold(self, genesis_balance: object) -> Decimal:
        """Minimum weight for a representative's votes to be rebroadcast."""
        return self.circulating_supply(genesis_balance) * self.config.rebroadcast_ratio

    def rebroadcast_eligible(
        self, reps: Mapping[K, object], threshold: Decimal
    ) -> dict[K, object]:
        """Return the representatives holding at least ``threshold`` weight."""
        return {
            address: raw
            for address, raw in reps.items()
            if self.weight(raw) >= threshold
        }

    def total_weight(self, reps: Mapping[K, object]) -> Decimal:
        """Sum of all weights in display units (0 for an empty map)."""
        return sum((self.weight(raw) for raw in reps.values()), ZERO)

    def rebroadcast_weight(
        self, reps: Mapping[K, object], threshold: Decimal
    ) -> Decimal:
        """Total weight of the rebroadcast-eligible representatives."""
        return self.total_weight(self.rebroadcast_eligible(reps, threshold))

    percent_of = staticmethod(percent_of)
    sum_parsed_counts = staticmethod(sum_parsed_counts)

    # Named (part, whole) compositions

    def online_supply_percent(self, online: Mapping[K, object]) -> Decimal | None:
        """Online voting weight as a share of max supply."""
        return percent_of(self.total_weight(online), self.max_supply)

    def official_supply_percent(
        self, official: Mapping[K, object]
    ) -> Decimal | None:
        """Official representatives' weight as a share of max supply."""
        return percent_of(self.total_weight(official), self.max_supply)

    def official_online_percent(
        self, official: Mapping[K, object], online: Mapping[K, object]
    ) -> Decimal | None:
        """Official representatives' weight relative to online weight."""
        return percent_of(self.total_weight(official), self.total_weight(online))

    def rebroadcast_supply_percent(
        self, online: Mapping[K, object], genesis_balance: object
    ) -> Decimal | None:
        """Rebroadcasting weight as a share of circulating supply."""
        threshold = self.rebroadcast_threshold(genesis_balance)
        return percent_of(
            self.rebroadcast_weight(online, threshold),
            self.circulating_supply(genesis_balance),
        )

    def online_rebroadcast_percent(
        self, online: Mapping[K, object], genesis_balance: object
    ) -> Decimal | None:
        """Rebroadcasting weight relative to all online weight."""
        threshold = self.rebroadcast_threshold(genesis_balance)
        return percent_of(
            self.rebroadcast_weight(online, threshold), self.total_weight(online)
        )
