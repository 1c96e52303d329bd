"""
Rich console helpers - terminal views of a running vault.

- RichEventPrinter: prints every published vault event
- render_summary: per-parent status table plus fusion totals
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..events import EventBus
from ..types import (
    FRAGMENTS_PER_SET,
    FragmentMintedEvent,
    ParentRetiredEvent,
    SetBurnedEvent,
    SetFusedEvent,
    VaultEvent,
)

if TYPE_CHECKING:
    from ..vault import FragmentVault

_STATE_STYLES = {
    "allocating": "yellow",
    "complete": "cyan",
    "burned": "red",
    "fused": "bold green",
}


class RichEventPrinter:
    """Subscribes to a bus and prints one line per event."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self.counts: dict[str, int] = {}

    def attach(self, bus: EventBus) -> None:
        bus.on_all(self.handle)

    def detach(self, bus: EventBus) -> None:
        bus.off("*", self.handle)

    async def handle(self, event: VaultEvent) -> None:
        self.counts[event.type] = self.counts.get(event.type, 0) + 1
        self.console.print(self._format(event))

    def _format(self, event: VaultEvent) -> Text:
        if isinstance(event, FragmentMintedEvent):
            return Text.assemble(
                ("mint ", "bold yellow"),
                f"fragment #{event.fragment_id} ",
                (f"parent {event.parent_id} [{event.position}/{FRAGMENTS_PER_SET}]", "yellow"),
                f" -> {event.owner}",
            )
        if isinstance(event, ParentRetiredEvent):
            return Text.assemble(
                ("retire ", "bold cyan"), f"parent {event.parent_id} left the pool"
            )
        if isinstance(event, SetBurnedEvent):
            return Text.assemble(
                ("burn ", "bold red"), f"parent {event.parent_id} by {event.burner}"
            )
        if isinstance(event, SetFusedEvent):
            return Text.assemble(
                ("fuse ", "bold green"),
                f"parent {event.parent_id} -> fusion #{event.fusion_id} for {event.fuser}",
            )
        return Text(repr(event))


def build_summary_table(vault: FragmentVault) -> Table:
    table = Table(title="Parent assets", expand=False)
    table.add_column("Parent", justify="right")
    table.add_column("Minted", justify="right")
    table.add_column("State")
    table.add_column("Burner")
    table.add_column("Fusion", justify="right")

    for parent_id in sorted(vault.parent_ids):
        state = vault.parent_state(parent_id)
        fusion_id = vault.fusion_id_of(parent_id)
        table.add_row(
            str(parent_id),
            f"{FRAGMENTS_PER_SET - vault.remaining_fragments(parent_id)}/{FRAGMENTS_PER_SET}",
            Text(state, style=_STATE_STYLES[state]),
            vault.burner_of(parent_id) or "-",
            str(fusion_id) if fusion_id is not None else "-",
        )
    return table


def render_summary(vault: FragmentVault, console: Console | None = None) -> None:
    console = console or Console()
    console.print(build_summary_table(vault))
    console.print(
        Panel(
            f"pool: {len(vault.available_parent_ids())} parent ids open   "
            f"fusions: {vault.fusion_count}/{vault.max_fusions}",
            title="Vault",
        )
    )
