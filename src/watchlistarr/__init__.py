"""Watchlistarr core package.

The package is organized into focused modules:

- **transport**: Shared async HTTP transport with uniform error classification
- **watchlist**: Plex watchlist reader and XML decoding
- **managers**: Radarr/Sonarr adapters (lookup, library listing, placement, add)
- **reconciler**: Per-entry reconciliation of a watchlist snapshot
- **scheduler**: The periodic token-check, sync and removal loops
- **config**: YAML configuration loading and validation

The main entry point is ``watchlistarr.cli.main``.
"""

from .version import __version__

__all__ = ["__version__"]
