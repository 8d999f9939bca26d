"""
tests/fakes.py -- In-memory stand-in for the Synapse REST API.

FakeSynapse quacks like the parts of requests.Session the client uses
(request(), post(), max_redirects) and routes calls to dict-backed stores.
No sockets are opened. Every call is recorded in .calls so tests can assert
on exact paths and headers.

Shapes follow the real API: entity IDs are "syn<N>", team IDs are numeric
strings, userGroupHeaders ownerIds are strings, and ACL principalIds are
numbers -- so string/number principal comparisons get exercised for free.
"""

from __future__ import annotations

import copy
import json
import re
from typing import Any, Optional
from urllib.parse import parse_qs, urlsplit

import requests

ADMIN_ACCESS = [
    "UPDATE",
    "DELETE",
    "CHANGE_PERMISSIONS",
    "CHANGE_SETTINGS",
    "CREATE",
    "DOWNLOAD",
    "READ",
    "MODERATE",
]


class FakeResponse:
    """Just enough of requests.Response for core/transport.py and auth/session.py."""

    def __init__(self, status_code: int = 200, payload: Any = None, text: Optional[str] = None) -> None:
        self.status_code = status_code
        if text is not None:
            self.text = text
        elif payload is not None:
            self.text = json.dumps(payload)
        else:
            self.text = ""
        self.content = self.text.encode("utf-8")
        self.reason = "OK" if status_code < 400 else "Error"

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self) -> Any:
        return json.loads(self.text)

    def raise_for_status(self) -> None:
        if not self.ok:
            raise requests.HTTPError(f"{self.status_code} {self.reason}", response=self)


class FakeSynapse:
    def __init__(self, username: str = "testuser", password: str = "secret", owner_id: str = "273948") -> None:
        self.username = username
        self.password = password
        self.owner_id = owner_id
        self.max_redirects = 30
        self.calls: list[dict[str, Any]] = []
        self.logins = 0
        self.token = "fake-session-token"
        self.entities: dict[str, dict] = {}
        self.acls: dict[str, dict] = {}
        self.teams: dict[str, dict] = {}
        self.users: dict[str, dict] = {owner_id: {"ownerId": owner_id, "userName": username}}
        self._next_entity = 1000
        self._next_team = 3400000

    # ------------------------------------------------------------------
    # requests.Session surface
    # ------------------------------------------------------------------

    def post(self, url: str, json: Any = None, timeout: Optional[float] = None, **kwargs) -> FakeResponse:
        return self.request("POST", url, json=json, timeout=timeout, **kwargs)

    def request(
        self,
        method: str,
        url: str,
        headers: Optional[dict] = None,
        json: Any = None,
        timeout: Optional[float] = None,
        **kwargs,
    ) -> FakeResponse:
        parts = urlsplit(url)
        query = {k: v[0] for k, v in parse_qs(parts.query).items()}
        self.calls.append(
            {"method": method, "path": parts.path, "query": query, "headers": dict(headers or {}), "json": json}
        )

        if parts.path == "/auth/v1/login":
            return self._login(json or {})
        if (headers or {}).get("sessionToken") != self.token:
            return FakeResponse(401, {"reason": "The session token provided was not valid"})
        return self._route(method, parts.path, query, copy.deepcopy(json))

    # ------------------------------------------------------------------
    # Helpers for tests
    # ------------------------------------------------------------------

    def add_user(self, owner_id: str, username: str) -> None:
        self.users[owner_id] = {"ownerId": owner_id, "userName": username}

    def add_team(self, name: str) -> dict:
        team = {"id": str(self._next_team), "name": name}
        self._next_team += 1
        self.teams[team["id"]] = team
        return team

    def add_project(self, name: str) -> dict:
        return self._create_entity({"name": name, "concreteType": "org.sagebionetworks.repo.model.Project"})

    def calls_to(self, method: str, path_prefix: str) -> list[dict]:
        return [c for c in self.calls if c["method"] == method and c["path"].startswith(path_prefix)]

    # ------------------------------------------------------------------
    # Routing
    # ------------------------------------------------------------------

    def _login(self, body: dict) -> FakeResponse:
        if body.get("username") != self.username or body.get("password") != self.password:
            return FakeResponse(401, {"reason": "Invalid username or password"})
        self.logins += 1
        return FakeResponse(201, {"sessionToken": self.token, "acceptsTermsOfUse": True})

    def _route(self, method: str, path: str, query: dict, body: Any) -> FakeResponse:
        if method == "POST" and path == "/repo/v1/entity":
            return FakeResponse(201, self._create_entity(body))

        m = re.fullmatch(r"/repo/v1/entity/([^/]+)/acl", path)
        if m:
            return self._acl(method, m.group(1), body)

        m = re.fullmatch(r"/repo/v1/entity/([^/]+)", path)
        if m:
            return self._by_id(self.entities, method, m.group(1))

        if method == "POST" and path == "/repo/v1/team":
            team = self.add_team(body["name"])
            return FakeResponse(201, team)

        m = re.fullmatch(r"/repo/v1/team/([^/]+)", path)
        if m:
            return self._by_id(self.teams, method, m.group(1))

        if method == "GET" and path == "/repo/v1/teams":
            fragment = query.get("fragment", "").lower()
            results = [t for t in self.teams.values() if fragment in t["name"].lower()]
            return FakeResponse(200, {"results": results, "totalNumberOfResults": len(results)})

        if method == "GET" and path == "/repo/v1/userGroupHeaders":
            prefix = query.get("prefix", "").lower()
            children = [
                {**u, "isIndividual": True} for u in self.users.values() if u["userName"].lower().startswith(prefix)
            ]
            return FakeResponse(200, {"children": children, "prefixFilter": prefix})

        m = re.fullmatch(r"/repo/v1/userProfile/([^/]+)", path)
        if m and method == "GET":
            return self._by_id(self.users, method, m.group(1))

        return FakeResponse(404, {"reason": f"No route for {method} {path}"})

    def _create_entity(self, body: dict) -> dict:
        entity_id = f"syn{self._next_entity}"
        self._next_entity += 1
        entity = {**body, "id": entity_id, "etag": "e0"}
        self.entities[entity_id] = entity
        self.acls[entity_id] = {
            "id": entity_id,
            "etag": "acl-0",
            "resourceAccess": [{"principalId": int(self.owner_id), "accessType": list(ADMIN_ACCESS)}],
        }
        return entity

    def _by_id(self, store: dict, method: str, key: str) -> FakeResponse:
        if key not in store:
            return FakeResponse(404, {"reason": f"{key} does not exist"})
        if method == "GET":
            return FakeResponse(200, store[key])
        if method == "DELETE":
            del store[key]
            self.acls.pop(key, None)
            return FakeResponse(204)
        return FakeResponse(405, {"reason": f"{method} not allowed"})

    def _acl(self, method: str, entity_id: str, body: Any) -> FakeResponse:
        if entity_id not in self.acls:
            return FakeResponse(404, {"reason": f"{entity_id} does not exist"})
        if method == "GET":
            return FakeResponse(200, self.acls[entity_id])
        if method == "PUT":
            stored = dict(body)
            stored["etag"] = f"acl-{int(self.acls[entity_id]['etag'].split('-')[1]) + 1}"
            self.acls[entity_id] = stored
            return FakeResponse(200, stored)
        return FakeResponse(405, {"reason": f"{method} not allowed"})
