"""Shared test doubles for the manager and watchlist HTTP endpoints."""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Optional

import httpx

from watchlistarr.models import ItemKind, WatchlistEntry
from watchlistarr.reconciler import OutcomeStatus, ReconciliationReport
from watchlistarr.transport import HttpTransport

API_KEY = "secret-key"


class FakeManager:
    """In-memory Radarr/Sonarr answering the v3 endpoints the adapters use.

    Added titles are appended to the library, so a second pass sees them.
    """

    def __init__(
        self,
        collection: str,
        *,
        lookup: Optional[List[Dict[str, Any]]] = None,
        library: Optional[List[Dict[str, Any]]] = None,
        profiles: Optional[List[Dict[str, Any]]] = None,
        roots: Optional[List[Dict[str, Any]]] = None,
        tags: Optional[List[Dict[str, Any]]] = None,
        add_status: int = 201,
        tag_status: int = 200,
    ) -> None:
        self.collection = collection
        self.lookup_results = lookup if lookup is not None else []
        self.library = library if library is not None else []
        self.profiles = profiles if profiles is not None else [{"id": 1, "name": "Any"}, {"id": 4, "name": "HD-1080p"}]
        self.roots = roots if roots is not None else [{"id": 1, "path": "/data/media/"}]
        self.tags = tags if tags is not None else [{"id": 7, "label": "watchlist"}]
        self.add_status = add_status
        self.tag_status = tag_status
        self.requests: List[httpx.Request] = []
        self.lookup_terms: List[str] = []
        self.added: List[Dict[str, Any]] = []

    @property
    def writes(self) -> List[httpx.Request]:
        return [request for request in self.requests if request.method != "GET"]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.params.get("apikey") != API_KEY:
            return httpx.Response(401, json={"message": "Unauthorized"})

        path = request.url.path
        prefix = "/api/v3/"
        if not path.startswith(prefix):
            return httpx.Response(404)
        resource = path[len(prefix):]

        if resource == f"{self.collection}/lookup":
            self.lookup_terms.append(request.url.params["term"])
            return httpx.Response(200, json=self.lookup_results)
        if resource == self.collection and request.method == "GET":
            return httpx.Response(200, json=self.library)
        if resource == self.collection and request.method == "POST":
            body = json.loads(request.content)
            self.added.append(body)
            if self.add_status >= 400:
                return httpx.Response(self.add_status, json=[{"errorMessage": "This title has already been added"}])
            record = {"id": len(self.library) + 1, "tmdbId": body.get("tmdbId"), "tvdbId": body.get("tvdbId")}
            self.library.append(record)
            return httpx.Response(self.add_status, json=body)
        if resource == "qualityprofile":
            return httpx.Response(200, json=self.profiles)
        if resource == "rootfolder":
            return httpx.Response(200, json=self.roots)
        if resource == "tag":
            if self.tag_status >= 400:
                return httpx.Response(self.tag_status, text="tag db locked")
            return httpx.Response(200, json=self.tags)
        return httpx.Response(404, json={"message": "NotFound"})


def make_transport(handler: Callable[[httpx.Request], httpx.Response]) -> HttpTransport:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpTransport(client=client, timeout=5.0)


def movie(entry_id: str = "123", title: str = "Dune", year: Optional[int] = 2021) -> WatchlistEntry:
    return WatchlistEntry(id=entry_id, title=title, kind=ItemKind.MOVIE, year=year)


def show(entry_id: str = "456", title: str = "Severance", year: Optional[int] = 2022) -> WatchlistEntry:
    return WatchlistEntry(id=entry_id, title=title, kind=ItemKind.SHOW, year=year)


def status_of(report: ReconciliationReport, entry_id: str, kind: ItemKind) -> Optional[OutcomeStatus]:
    for outcome in report.outcomes:
        if outcome.entry.id == entry_id and outcome.entry.kind is kind:
            return outcome.status
    return None
