"""Network status composition and display.

This module provides:
- StatusMetrics: Every figure shown on the status page, computed at once
- StatusView: Combines the live feed with the poller's snapshot
- Rich table display of voting power, rebroadcasting, blocks and peers
"""

from __future__ import annotations

import time
from collections import Counter
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.table import Table

from netstatus.metrics import MetricMath, parse_count, percent_of

if TYPE_CHECKING:
    from netstatus.config import StatusConfig
    from netstatus.feed import NetworkDataFeed
    from netstatus.poller import StatsPoller

console = Console()

DEFAULT_TOP_REPRESENTATIVES = 25


def format_amount(value: Decimal | int) -> str:
    """Format an amount with thousands separators and no fraction digits."""
    return f"{Decimal(value):,.0f}"


def format_percent(value: Decimal | None) -> str:
    """Format a percentage with two fraction digits, N/A for no value."""
    if value is None:
        return "N/A"
    return f"{value:,.2f}%"


def format_age(seconds: float | None) -> str:
    """Format the age of a snapshot as a short human-readable string."""
    if seconds is None:
        return "never"
    if seconds < 60:
        return f"{seconds:.0f}s ago"
    if seconds < 3600:
        return f"{int(seconds // 60)}m {int(seconds % 60)}s ago"
    return f"{int(seconds // 3600)}h {int((seconds % 3600) // 60)}m ago"


def peer_version(meta: Any) -> str:
    """Extract a peer's protocol version from its metadata."""
    if isinstance(meta, Mapping):
        meta = meta.get("protocol_version", meta.get("version"))
    if meta is None or meta == "":
        return "unknown"
    return str(meta)


def peer_versions(peers: Mapping[str, Any]) -> dict[str, int]:
    """Count peers per protocol version, most common first."""
    counts = Counter(peer_version(meta) for meta in peers.values())
    return dict(sorted(counts.items(), key=lambda x: (-x[1], x[0])))


@dataclass(frozen=True)
class StatusMetrics:
    """Derived figures for one render of the status page."""

    currency_short_name: str
    representatives_online: int
    online_weight: Decimal
    online_supply_percent: Decimal | None
    official_weight: Decimal
    official_supply_percent: Decimal | None
    official_online_percent: Decimal | None
    rebroadcast_threshold: Decimal
    rebroadcasting_representatives: int
    rebroadcast_weight: Decimal
    rebroadcast_supply_percent: Decimal | None
    online_rebroadcast_percent: Decimal | None
    total_blocks: int
    blocks_by_type: dict[str, int] = field(default_factory=dict)
    peer_count: int = 0
    peer_versions: dict[str, int] = field(default_factory=dict)
    snapshot_age: float | None = None

    def to_dict(self) -> dict[str, Any]:
        """Plain dict with Decimals as strings, suitable for JSON output."""
        return {
            key: str(value) if isinstance(value, Decimal) else value
            for key, value in asdict(self).items()
        }


class StatusView:
    """Compose the live feed and the polled snapshot into StatusMetrics.

    Holds no state of its own: each compute() reads the latest feed value
    and snapshot and recomputes every figure from scratch.

    Attributes:
        config: Static configuration
        feed: Live representative feed
        poller: Owner of the network counter snapshot
    """

    def __init__(
        self,
        config: StatusConfig,
        feed: NetworkDataFeed,
        poller: StatsPoller,
    ) -> None:
        self.config = config
        self.feed = feed
        self.poller = poller
        self.math = MetricMath(config)

    def compute(self, now: float | None = None) -> StatusMetrics:
        """Compute all displayed metrics from current inputs."""
        math = self.math
        network = self.feed.latest
        snapshot = self.poller.snapshot
        online = network.representatives_online
        official = snapshot.official_representatives

        threshold = math.rebroadcast_threshold(network.genesis_balance)

        return StatusMetrics(
            currency_short_name=self.config.currency_short_name,
            representatives_online=len(online),
            online_weight=math.total_weight(online),
            online_supply_percent=math.online_supply_percent(online),
            official_weight=math.total_weight(official),
            official_supply_percent=math.official_supply_percent(official),
            official_online_percent=math.official_online_percent(official, online),
            rebroadcast_threshold=threshold,
            rebroadcasting_representatives=len(
                math.rebroadcast_eligible(online, threshold)
            ),
            rebroadcast_weight=math.rebroadcast_weight(online, threshold),
            rebroadcast_supply_percent=math.rebroadcast_supply_percent(
                online, network.genesis_balance
            ),
            online_rebroadcast_percent=math.online_rebroadcast_percent(
                online, network.genesis_balance
            ),
            total_blocks=math.sum_parsed_counts(snapshot.blocks_by_type),
            blocks_by_type={
                block_type: parse_count(count)
                for block_type, count in snapshot.blocks_by_type.items()
            },
            peer_count=len(snapshot.peers),
            peer_versions=peer_versions(snapshot.peers),
            snapshot_age=self.poller.age(now),
        )

    def top_representatives(self, limit: int) -> list[tuple[str, Decimal]]:
        """Online representatives sorted by weight, heaviest first."""
        online = self.feed.latest.representatives_online
        ranked = sorted(
            ((address, self.math.weight(raw)) for address, raw in online.items()),
            key=lambda x: (-x[1], x[0]),
        )
        return ranked[:limit]

    def render(
        self,
        out: Console | None = None,
        top: int = DEFAULT_TOP_REPRESENTATIVES,
    ) -> StatusMetrics:
        """Print the status page and return the metrics it was built from."""
        out = out or console
        metrics = self.compute()
        online_weight = metrics.online_weight

        out.print(
            f"\n[bold]Network Status - {time.strftime('%H:%M:%S')}[/bold] "
            f"[dim](counters updated {format_age(metrics.snapshot_age)})[/dim]\n"
        )
        display_voting_power(metrics, out)
        display_rebroadcasting(metrics, out)
        display_blocks(metrics, out)
        display_peer_versions(metrics, out)
        if top > 0:
            display_representatives(
                self.top_representatives(top),
                online_weight,
                metrics.currency_short_name,
                out,
            )
        return metrics


def display_voting_power(metrics: StatusMetrics, out: Console) -> None:
    """Display online and official voting power."""
    unit = metrics.currency_short_name

    table = Table(title=f"{metrics.representatives_online} Representatives Online")
    table.add_column("Metric", style="cyan", no_wrap=True)
    table.add_column("Value", justify="right", style="yellow")

    table.add_row(
        "Online voting power", f"{format_amount(metrics.online_weight)} {unit}"
    )
    table.add_row("  of total supply", format_percent(metrics.online_supply_percent))
    table.add_row(
        "Official representatives", f"{format_amount(metrics.official_weight)} {unit}"
    )
    table.add_row(
        "  of total supply", format_percent(metrics.official_supply_percent)
    )
    table.add_row(
        "  of online voting power", format_percent(metrics.official_online_percent)
    )
    out.print(table)


def display_rebroadcasting(metrics: StatusMetrics, out: Console) -> None:
    """Display representatives whose votes are rebroadcast."""
    unit = metrics.currency_short_name

    table = Table(
        title=f"{metrics.rebroadcasting_representatives} Rebroadcasting Representatives"
    )
    table.add_column("Metric", style="cyan", no_wrap=True)
    table.add_column("Value", justify="right", style="green")

    table.add_row(
        "Minimum weight", f"{format_amount(metrics.rebroadcast_threshold)} {unit}"
    )
    table.add_row(
        "Rebroadcasting voting power",
        f"{format_amount(metrics.rebroadcast_weight)} {unit}",
    )
    table.add_row(
        "  of circulating supply", format_percent(metrics.rebroadcast_supply_percent)
    )
    table.add_row(
        "  of online voting power", format_percent(metrics.online_rebroadcast_percent)
    )
    out.print(table)


def display_blocks(metrics: StatusMetrics, out: Console) -> None:
    """Display block counts by type."""
    table = Table(title=f"Blocks ({format_amount(metrics.total_blocks)} total)")
    table.add_column("Type", style="cyan", no_wrap=True)
    table.add_column("Count", justify="right", style="magenta")

    for block_type, count in sorted(
        metrics.blocks_by_type.items(), key=lambda x: (-x[1], x[0])
    ):
        table.add_row(block_type, format_amount(count))
    out.print(table)


def display_peer_versions(metrics: StatusMetrics, out: Console) -> None:
    """Display peer counts per protocol version."""
    table = Table(title=f"Peers ({metrics.peer_count})")
    table.add_column("Protocol version", style="cyan", no_wrap=True)
    table.add_column("Peers", justify="right", style="blue")
    table.add_column("Share", justify="right", style="white")

    for version, count in metrics.peer_versions.items():
        share = percent_of(count, metrics.peer_count)
        table.add_row(version, str(count), format_percent(share))
    out.print(table)


def display_representatives(
    ranked: list[tuple[str, Decimal]],
    online_weight: Decimal,
    currency_short_name: str,
    out: Console,
) -> None:
    """Display the heaviest online representatives."""
    table = Table(title="Online Representatives")
    table.add_column("Account", style="cyan", no_wrap=True)
    table.add_column("Weight", justify="right", style="yellow")
    table.add_column("Online share", justify="right", style="white")

    for address, weight in ranked:
        share = percent_of(weight, online_weight)
        table.add_row(
            address,
            f"{format_amount(weight)} {currency_short_name}",
            format_percent(share),
        )
    out.print(table)
