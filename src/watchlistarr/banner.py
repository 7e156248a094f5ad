from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .config import FULL_SYNC_INTERVAL_SECONDS, AppConfig


@dataclass
class BannerInfo:
    version: str
    config_path: str
    radarr_url: Optional[str]
    sonarr_url: Optional[str]
    plex_configured: bool
    refresh_seconds: int
    full_sync_minutes: int
    collaborators_enabled: bool
    removal_enabled: bool
    once: bool = False


def build_banner_info(config: AppConfig, config_path: str, *, once: bool = False) -> BannerInfo:
    """Build a BannerInfo instance from AppConfig and runtime settings."""
    return BannerInfo(
        version=__version__,
        config_path=config_path,
        radarr_url=config.movies.base_url if config.movies else None,
        sonarr_url=config.shows.base_url if config.shows else None,
        plex_configured=config.plex is not None,
        refresh_seconds=config.refresh_interval_seconds,
        full_sync_minutes=FULL_SYNC_INTERVAL_SECONDS // 60,
        collaborators_enabled=config.plex is not None and not config.plex.skip_friend_sync,
        removal_enabled=config.removal.enabled,
        once=once,
    )


def print_startup_banner(info: BannerInfo, console: Console) -> None:
    """Print a styled startup banner showing version and configured targets."""
    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column("Key", style="cyan bold", no_wrap=True)
    table.add_column("Value", style="white")

    table.add_row("Version", f"[bold]{info.version}[/bold]")
    table.add_row("Config", info.config_path)
    if info.once:
        table.add_row("Mode", "[yellow]ONCE[/yellow]")

    table.add_row("Plex", "[green]configured[/green]" if info.plex_configured else "[red]missing[/red]")
    table.add_row("Radarr", info.radarr_url or "[dim]disabled[/dim]")
    table.add_row("Sonarr", info.sonarr_url or "[dim]disabled[/dim]")

    if not info.once:
        table.add_row(
            "Intervals",
            f"watchlist {info.refresh_seconds}s · full {info.full_sync_minutes}m",
        )

    features = []
    if info.collaborators_enabled:
        features.append("[green]Collaborator Sync[/green]")
    if info.removal_enabled:
        features.append("[yellow]Removal Sync[/yellow]")
    if features:
        table.add_row("Features", " · ".join(features))

    panel = Panel(
        table,
        title="[bold white]WATCHLISTARR[/bold white]",
        border_style="blue",
        padding=(1, 2),
    )

    console.print()
    console.print(panel)
    console.print()
