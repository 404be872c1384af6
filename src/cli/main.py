"""CLI principal (Typer).

Comandos:
- `bundle`: obtiene el bundle y lo imprime o lo guarda.
- `status`: estado del bundle tras un refresh.
- `branches`: ramas publicadas por un servidor de actualizaciones.
- `endpoint`: descompone una URL de endpoint en base + ramas.
- `doctor ...`: diagnósticos y configuración.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from rich.console import Console

from adapters.branches_client import fetch_available_branches
from cli import doctor
from cli.ui_components import build_branches_table, build_status_table, print_banner
from core.config import AppSettings
from core.domain.errors import BundleFetchError, ShelterError
from core.log import configure_logging
from core.services.bundle_provider import BundleProvider
from core.services.update_endpoint import parse_endpoint

app = typer.Typer(no_args_is_help=True, help="shelter bundle loader tooling.")
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)


@app.callback()
def main(
    quiet: bool = typer.Option(False, "--quiet", "-q", help="No imprimir el banner."),
) -> None:
    settings = AppSettings()
    configure_logging(settings.log_level, console=_err_console)
    if not quiet:
        print_banner(_err_console)


async def _load_bundle(provider: BundleProvider, *, refresh: bool) -> str:
    if refresh and provider.local_override is None:
        await provider.refresh()
    return provider.get_current()


@app.command()
def bundle(
    output: Path | None = typer.Option(None, "--output", "-o", help="Escribe el bundle en este fichero."),
    no_refresh: bool = typer.Option(False, "--no-refresh", help="No pedir el bundle a la red."),
) -> None:
    """Obtiene el bundle actual (override local, remoto o fallback)."""

    provider = BundleProvider(AppSettings())
    try:
        text = asyncio.run(_load_bundle(provider, refresh=not no_refresh))
    except ShelterError as exc:
        _err_console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    if output is None:
        typer.echo(text)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    _err_console.print(f"[green]Bundle saved to:[/green] {output} ({provider.state.value})")


@app.command()
def status() -> None:
    """Refresca el bundle y muestra su estado."""

    provider = BundleProvider(AppSettings())
    if provider.local_override is None:
        asyncio.run(provider.refresh())
    _console.print(build_status_table(provider))


@app.command()
def branches(
    endpoint: str = typer.Argument(..., help="Base del servidor de actualizaciones (sin rama)."),
) -> None:
    """Lista las ramas disponibles en un servidor de actualizaciones."""

    try:
        available = asyncio.run(fetch_available_branches(endpoint, AppSettings()))
    except (BundleFetchError, ValueError) as exc:
        _err_console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    _console.print(build_branches_table(available))


@app.command()
def endpoint(
    url: str = typer.Argument(..., help="Valor de UPDATE_ENDPOINT, p.ej. https://host/vencord+shelter"),
) -> None:
    """Descompone un endpoint de actualización en base + ramas."""

    parsed = parse_endpoint(url)
    if parsed is None:
        _err_console.print(f"[red]Not an update endpoint:[/red] {url}")
        raise typer.Exit(code=1)

    base, names = parsed
    _console.print(f"[magenta]Endpoint:[/magenta] {base}")
    _console.print(f"[magenta]Branches:[/magenta] {', '.join(names)}")


def run() -> None:
    app()
