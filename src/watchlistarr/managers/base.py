"""Shared adapter logic for the Radarr/Sonarr v3 APIs.

Both managers expose the same operation set (lookup, library listing, quality
profiles, root folders, tags, add) and differ only in the collection name, the
id namespaces used for dedup and the shape of ``addOptions``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..config import ManagerSettings
from ..errors import (
    AddRejectedError,
    KindMismatchError,
    ManagerUnavailableError,
    NotFoundError,
    ParseFailureError,
)
from ..logging_utils import render_fields_block
from ..models import AddOutcome, ItemKind, LibraryRecord, PlacementParams, WatchlistEntry
from ..transport import HttpStatusError, HttpTransport, ResponseDecodeError, TransportError
from .models import LibraryItemResponse, LookupResult, QualityProfile, RootFolder, Tag, TierSnapshot

LOGGER = logging.getLogger(__name__)

API_PREFIX = "api/v3"
# Used when the manager reports no quality profiles at all
FALLBACK_QUALITY_PROFILE_ID = 1

ModelT = TypeVar("ModelT", bound=BaseModel)


def build_search_term(title: str, year: Optional[int]) -> str:
    if year is None:
        return title
    return f"{title} {year}"


def _normalize_path(path: str) -> str:
    return path.rstrip("/") or "/"


class ManagerAdapter(ABC):
    """Long-lived client for one library manager."""

    kind: ClassVar[ItemKind]
    name: ClassVar[str]
    collection: ClassVar[str]
    default_root_folder: ClassVar[str]
    # LookupResult/LibraryRecord attributes compared for dedup; a match on any one suffices
    id_namespaces: ClassVar[Sequence[str]]

    def __init__(self, transport: HttpTransport, settings: ManagerSettings) -> None:
        self._transport = transport
        self.settings = settings

    def _url(self, path: str) -> str:
        return f"{self.settings.base_url}/{API_PREFIX}/{path.lstrip('/')}"

    def _params(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        params: Dict[str, Any] = dict(extra or {})
        params["apikey"] = self.settings.api_key
        return params

    async def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        try:
            return await self._transport.get_json(self._url(path), params=self._params(params))
        except ResponseDecodeError as exc:
            raise ParseFailureError(
                f"{self.name} returned an undecodable response for /{path}",
                status_code=exc.status_code,
                detail=exc.body,
            ) from exc
        except TransportError as exc:
            raise ManagerUnavailableError(
                f"{self.name} request for /{path} failed: {exc}",
                status_code=exc.status_code,
                detail=exc.body,
            ) from exc

    async def _get_list(self, path: str, model: Type[ModelT], params: Optional[Dict[str, Any]] = None) -> List[ModelT]:
        payload = await self._get_json(path, params)
        if not isinstance(payload, list):
            raise ParseFailureError(f"{self.name} /{path} did not return a list", detail=payload)
        try:
            return [model.model_validate(item) for item in payload]
        except ValidationError as exc:
            raise ParseFailureError(f"{self.name} /{path} returned unexpected items: {exc}", detail=payload) from exc

    async def list_library(self) -> List[LibraryRecord]:
        items = await self._get_list(self.collection, LibraryItemResponse)
        return [LibraryRecord(tmdb_id=item.tmdb_id, tvdb_id=item.tvdb_id) for item in items]

    async def lookup(self, title: str, year: Optional[int] = None) -> LookupResult:
        """Resolve a title to the top-ranked record of the manager's metadata index.

        Raises:
            NotFoundError: If the lookup returns no candidates.
        """
        term = build_search_term(title, year)
        LOGGER.debug("Looking up %s in %s", term, self.name)
        results = await self._get_list(f"{self.collection}/lookup", LookupResult, {"term": term})
        if not results:
            raise NotFoundError(f"{self.name} lookup returned no results for '{term}'")
        return results[0]

    async def resolve_tiers_and_roots(self) -> TierSnapshot:
        profiles = await self._get_list("qualityprofile", QualityProfile)
        roots = await self._get_list("rootfolder", RootFolder)
        return TierSnapshot(
            quality_profiles=profiles,
            root_folders=roots,
            tags=await self._fetch_tags(),
        )

    async def _fetch_tags(self) -> Dict[str, int]:
        if not self.settings.tags:
            return {}
        try:
            tags = await self._get_list("tag", Tag)
        except (ManagerUnavailableError, ParseFailureError) as exc:
            LOGGER.warning("%s tags unavailable; adding without tags: %s", self.name, exc)
            return {}
        return {tag.label: tag.id for tag in tags}

    def _resolve_quality_profile(self, profiles: Sequence[QualityProfile]) -> int:
        default_id = profiles[0].id if profiles else FALLBACK_QUALITY_PROFILE_ID
        wanted = self.settings.quality_profile
        if wanted is None:
            return default_id
        for profile in profiles:
            if profile.name == wanted:
                return profile.id
        LOGGER.warning(
            "%s quality profile '%s' not found; using profile id %d",
            self.name,
            wanted,
            default_id,
        )
        return default_id

    def _resolve_root_folder(self, roots: Sequence[RootFolder]) -> str:
        wanted = self.settings.root_folder
        if not roots:
            return wanted or self.default_root_folder
        if wanted is None:
            return roots[0].path
        for root in roots:
            if _normalize_path(root.path) == _normalize_path(wanted):
                return root.path
        LOGGER.warning(
            "%s root folder '%s' not found; using %s",
            self.name,
            wanted,
            roots[0].path,
        )
        return roots[0].path

    def _resolve_tag_ids(self, tags: Dict[str, int]) -> tuple[int, ...]:
        return tuple(tags[label] for label in self.settings.tags if label in tags)

    def resolve_placement(self, snapshot: TierSnapshot) -> PlacementParams:
        return PlacementParams(
            quality_profile_id=self._resolve_quality_profile(snapshot.quality_profiles),
            root_folder_path=self._resolve_root_folder(snapshot.root_folders),
            tag_ids=self._resolve_tag_ids(snapshot.tags),
        )

    def find_existing(self, result: LookupResult, library: Sequence[LibraryRecord]) -> Optional[LibraryRecord]:
        for namespace in self.id_namespaces:
            wanted = getattr(result, namespace)
            if wanted is None:
                continue
            for record in library:
                if getattr(record, namespace) == wanted:
                    return record
        return None

    @abstractmethod
    def build_add_request(self, result: LookupResult, placement: PlacementParams) -> Dict[str, Any]:
        """Return the JSON body for ``POST /<collection>``."""

    def _base_add_request(self, result: LookupResult, placement: PlacementParams) -> Dict[str, Any]:
        body = result.extra_fields
        body.update(
            {
                "title": result.title,
                "sortTitle": result.sort_title or result.title.lower(),
                "year": result.year or 0,
                "tmdbId": result.tmdb_id,
                "imdbId": result.imdb_id,
                "qualityProfileId": placement.quality_profile_id,
                "rootFolderPath": placement.root_folder_path,
                "monitored": True,
                "tags": list(placement.tag_ids),
            }
        )
        return body

    async def add(self, entry: WatchlistEntry) -> AddOutcome:
        """Add a watchlist entry unless the library already holds it.

        Raises:
            KindMismatchError: If ``entry`` is not of this adapter's kind.
            NotFoundError: If the lookup returns no candidates.
            ManagerUnavailableError: On transport failure.
            ParseFailureError: On undecodable manager responses.
            AddRejectedError: If the manager answers the add with a non-2xx status.
        """
        if entry.kind != self.kind:
            raise KindMismatchError(f"{self.name} cannot add {entry.kind.value} '{entry.title}'")

        result = await self.lookup(entry.title, entry.year)
        library = await self.list_library()
        existing = self.find_existing(result, library)
        if existing is not None:
            LOGGER.debug("%s already has '%s' (%s), skipping", self.name, result.title, existing)
            return AddOutcome.ALREADY_EXISTS

        snapshot = await self.resolve_tiers_and_roots()
        placement = self.resolve_placement(snapshot)
        body = self.build_add_request(result, placement)

        try:
            await self._transport.request("POST", self._url(self.collection), params=self._params(), json=body)
        except HttpStatusError as exc:
            raise AddRejectedError(
                f"{self.name} rejected '{result.title}' ({exc.status_code})",
                status_code=exc.status_code,
                detail=exc.body,
            ) from exc
        except TransportError as exc:
            raise ManagerUnavailableError(
                f"{self.name} add request for '{result.title}' failed: {exc}",
                status_code=exc.status_code,
                detail=exc.body,
            ) from exc

        LOGGER.info(
            render_fields_block(
                f"Added to {self.name}",
                {
                    "Title": entry.label,
                    "Quality Profile": placement.quality_profile_id,
                    "Root Folder": placement.root_folder_path,
                    "Tags": list(placement.tag_ids) or None,
                },
            )
        )
        return AddOutcome.ADDED
