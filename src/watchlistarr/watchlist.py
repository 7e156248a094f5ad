"""Plex watchlist reader.

Fetches the account watchlist as an XML ``MediaContainer`` and normalizes it
into :class:`~watchlistarr.models.WatchlistEntry` values. Movies arrive as
``<Video type="movie">`` elements and shows as ``<Directory type="show">``
elements; only ``title``, ``ratingKey``, ``year`` and ``guid`` are read.
"""

from __future__ import annotations

import datetime as dt
import logging
import xml.etree.ElementTree as ET
from typing import List, Optional

from .config import WatchlistSourceSettings
from .errors import ParseFailureError, SourceUnavailableError
from .models import PRIMARY_USER, ItemKind, WatchlistEntry
from .transport import HttpTransport, TransportError

LOGGER = logging.getLogger(__name__)

WATCHLIST_URL = "https://metadata.provider.plex.tv/library/sections/watchlist/all"

# element tag -> (required type attribute, kind)
_ELEMENT_KINDS = {
    "Video": ("movie", ItemKind.MOVIE),
    "Directory": ("show", ItemKind.SHOW),
}


def _parse_year(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return None


def _entry_from_element(
    element: ET.Element,
    *,
    observed_at: dt.datetime,
    user_id: str,
) -> Optional[WatchlistEntry]:
    known = _ELEMENT_KINDS.get(element.tag)
    if known is None:
        return None
    type_marker, kind = known
    if element.get("type") != type_marker:
        return None

    rating_key = (element.get("ratingKey") or "").strip()
    title = (element.get("title") or "").strip()
    if not rating_key or not title:
        LOGGER.debug("Dropping watchlist %s without ratingKey/title: %s", element.tag, element.attrib)
        return None

    return WatchlistEntry(
        id=rating_key,
        title=title,
        kind=kind,
        year=_parse_year(element.get("year")),
        guid=element.get("guid") or None,
        observed_at=observed_at,
        user_id=user_id,
    )


def parse_watchlist(document: str, *, user_id: str = PRIMARY_USER) -> List[WatchlistEntry]:
    """Decode a watchlist document into entries, in document order.

    Records without a rating key, a title or the expected ``type`` marker are
    dropped silently.

    Raises:
        ParseFailureError: If the document is not well-formed XML.
    """
    try:
        root = ET.fromstring(document)
    except ET.ParseError as exc:
        raise ParseFailureError(f"Watchlist response is not valid XML: {exc}", detail=document[:200]) from exc

    observed_at = dt.datetime.now(dt.timezone.utc)
    entries: List[WatchlistEntry] = []
    for element in root.iter():
        entry = _entry_from_element(element, observed_at=observed_at, user_id=user_id)
        if entry is not None:
            entries.append(entry)
    return entries


class WatchlistReader:
    """Reads the primary account's watchlist (and, optionally, collaborators')."""

    def __init__(
        self,
        transport: HttpTransport,
        settings: WatchlistSourceSettings,
        *,
        url: str = WATCHLIST_URL,
    ) -> None:
        self._transport = transport
        self.settings = settings
        self.url = url

    async def fetch_watchlist(self) -> List[WatchlistEntry]:
        # Token goes in the header so it never lands in logged URLs
        headers = {"Accept": "application/xml", "X-Plex-Token": self.settings.token}
        try:
            document = await self._transport.get_text(self.url, headers=headers)
        except TransportError as exc:
            raise SourceUnavailableError(
                f"Failed to fetch Plex watchlist: {exc}",
                status_code=exc.status_code,
                detail=exc.body,
            ) from exc

        entries = parse_watchlist(document)
        LOGGER.debug("Retrieved %d watchlist item(s) from Plex", len(entries))
        return entries

    async def fetch_collaborator_watchlists(self) -> List[WatchlistEntry]:
        if self.settings.skip_friend_sync:
            LOGGER.debug("Skipping collaborator watchlists as configured")
            return []
        # TODO: resolve the account's friends and merge their watchlists once the
        # collaborator endpoint and its ownership rules are specified.
        LOGGER.warning("Collaborator watchlist sync is not implemented yet; only the primary watchlist is used")
        return []

    async def read(self, include_collaborators: bool = False) -> List[WatchlistEntry]:
        """Return the current watchlist in source order.

        Raises:
            SourceUnavailableError: On transport or authentication failure.
            ParseFailureError: If the response cannot be decoded.
        """
        entries = await self.fetch_watchlist()
        if include_collaborators:
            entries.extend(await self.fetch_collaborator_watchlists())
        return entries


__all__ = ["WATCHLIST_URL", "WatchlistReader", "parse_watchlist"]
