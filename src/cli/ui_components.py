"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from typing import Any

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import BundleState
from core.services.bundle_provider import BundleProvider

_STATE_STYLES = {
    BundleState.UNINITIALIZED: "dim",
    BundleState.FETCHING: "yellow",
    BundleState.AVAILABLE: "green",
    BundleState.UNAVAILABLE: "red",
}


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida (solo en modos interactivos)."""

    title = Text("shelter", style="bold magenta")
    subtitle = Text("Bundle loader • Update branches", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="magenta", padding=(1, 4)))


def build_status_table(provider: BundleProvider) -> Table:
    """Estado del bundle: origen, override, ciclo de vida y tamaño."""

    bundle = provider.bundle
    state = provider.state

    table = Table(title="Bundle status")
    table.add_column("Field", style="magenta", no_wrap=True)
    table.add_column("Value", style="white")

    table.add_row("Source URL", bundle.source_url)
    table.add_row("Local override", str(provider.local_override) if provider.local_override else "-")
    table.add_row("State", Text(state.value, style=_STATE_STYLES[state]))
    table.add_row("Size", f"{bundle.size} chars" if bundle.is_present else "-")
    table.add_row("Source map", "yes" if bundle.has_source_map else "no")
    return table


def build_branches_table(branches: dict[str, dict[str, Any]]) -> Table:
    table = Table(title="Available branches")
    table.add_column("Branch", style="magenta", no_wrap=True)
    table.add_column("Name", style="white")
    table.add_column("Description", style="dim")
    for key in sorted(branches):
        entry = branches[key]
        table.add_row(key, str(entry.get("name", "")), str(entry.get("desc", "")))
    return table
