"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from adapters.local_bundle import read_local_bundle
from core.config import AppSettings, get_user_env_file, write_user_env_vars
from core.domain.errors import LocalReadError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get(url)
        return response.status_code == 200, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc) or type(exc).__name__


def _check_override(settings: AppSettings) -> tuple[str, str]:
    if settings.dist_path is None:
        return "OPTIONAL", "Not set -> remote bundle is used"
    try:
        text = read_local_bundle(settings.dist_path)
    except LocalReadError as exc:
        return "FAIL", str(exc)
    return "OK", f"{settings.dist_path} ({len(text)} chars)"


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="shelter Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("Bundle URL", "OK", settings.bundle_url)
    override_status, override_detail = _check_override(settings)
    table.add_row("Local override", override_status, override_detail)
    if settings.http_timeout_seconds is None:
        table.add_row("HTTP timeout", "WARN", "None -> a stalled server blocks navigation")
    else:
        table.add_row("HTTP timeout", "OK", f"{settings.http_timeout_seconds}s")
    table.add_row("DevTools", "OK", "forced" if settings.force_devtools else "host default")

    # Connectivity (best-effort)
    ok_http = True
    if settings.dist_path is None:
        ok_http, detail_http = asyncio.run(_check_http(settings.bundle_url, settings))
        table.add_row("Bundle reachable", "OK" if ok_http else "FAIL", detail_http)

    _console.print(table)

    if not ok_http:
        _console.print(
            "\n[yellow]Note:[/yellow] Without a reachable bundle the host runs the fallback script, "
            "which only logs an error."
        )


@app.command()
def configure() -> None:
    """Interactive setup (stores config in the user config .env)."""

    settings = AppSettings()

    bundle_url = typer.prompt("Bundle URL", default=settings.bundle_url, show_default=True).strip()
    dist_path = typer.prompt(
        "Local dist path (empty = use the network)",
        default=str(settings.dist_path or ""),
        show_default=False,
    ).strip()

    if not bundle_url.startswith(("http://", "https://")):
        raise typer.BadParameter("bundle URL must be http(s)")

    env_path = write_user_env_vars(
        {
            "SHELTER_BUNDLE_URL": bundle_url,
            "SHELTER_DIST_PATH": dist_path,
        },
        env_path=get_user_env_file(),
    )

    _console.print(f"[green]Saved config to:[/green] {env_path}")
