"""
core/client.py -- SynapseClient: entity convenience calls and ACL editing.

Each method maps one verb+noun onto a REST call through core/transport.py and
returns its ApiResult unchanged. The only logic of note lives in
get_permissions / set_permissions, which delegate the document rewrite to
core/acl.py.

Known limitation: set_permissions is read-modify-write over the whole ACL.
A change made by someone else between the GET and the PUT is overwritten.
The etag from the GET is sent back unchanged; nothing more is done about it.
"""

import logging
import math
import re
from collections.abc import Iterable
from typing import Any, Optional, Union

from core.acl import PrincipalId, apply_permissions, normalize_principal, permissions_for
from core.models import ApiResult, EntityType, ErrorKind, Permission
from core.transport import Transport

logger = logging.getLogger("synapse.client")

# Leading-integer parse: "123", " -4", "12 Angry Men" all count as IDs.
_INT_PREFIX_RE = re.compile(r"^\s*[+-]?\d")


def is_int(value: Any) -> bool:
    """Return True if value is treated as a numeric ID rather than a name.

    This is the only dispatch rule: a team literally named "123" cannot be
    looked up by name.
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, str):
        return _INT_PREFIX_RE.match(value) is not None
    return False


class SynapseClient:
    def __init__(self, transport: Optional[Transport] = None) -> None:
        self.transport = transport or Transport()

    # ------------------------------------------------------------------
    # Projects / entities
    # ------------------------------------------------------------------

    def create_entity(self, entity_type: EntityType, body: dict) -> ApiResult:
        """POST a new entity of entity_type. body is copied, not modified."""
        return self.transport.post("repo/v1/entity", {**body, "concreteType": entity_type.value})

    def create_project(self, name: str) -> ApiResult:
        return self.create_entity(EntityType.PROJECT, {"name": name})

    def get_project(self, project_id: Union[int, str]) -> ApiResult:
        return self.transport.get(f"repo/v1/entity/{project_id}")

    def delete_project(self, project_id: Union[int, str]) -> ApiResult:
        return self.transport.delete(f"repo/v1/entity/{project_id}")

    # ------------------------------------------------------------------
    # Teams
    # ------------------------------------------------------------------

    def create_team(self, name: str) -> ApiResult:
        return self.transport.post("repo/v1/team", {"name": name})

    def get_team(self, id_or_name: Union[int, str]) -> ApiResult:
        """Get a team by numeric ID, or by exact name via the team search."""
        team_id = id_or_name
        if not is_int(id_or_name):
            found = self._find_team_id(id_or_name)
            if not found.ok:
                return found
            team_id = found.data
        return self.transport.get(f"repo/v1/team/{team_id}")

    def delete_team(self, team_id: Union[int, str]) -> ApiResult:
        return self.transport.delete(f"repo/v1/team/{team_id}")

    def _find_team_id(self, name: str) -> ApiResult:
        teams = self.transport.get("repo/v1/teams", params={"fragment": name})
        if not teams.ok:
            return teams
        for team in (teams.data or {}).get("results") or []:
            if team.get("name") == name:
                return ApiResult(data=team.get("id"))
        logger.info("No team named %r", name)
        return ApiResult.failure(ErrorKind.NOT_FOUND, f"No team named {name!r}")

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def get_user(self, id_or_username: Union[int, str]) -> ApiResult:
        """Get a user profile by owner ID, or by exact username."""
        user_id = id_or_username
        if not is_int(id_or_username):
            found = self._find_user_id(id_or_username)
            if not found.ok:
                return found
            user_id = found.data
        return self.transport.get(f"repo/v1/userProfile/{user_id}")

    def _find_user_id(self, username: str) -> ApiResult:
        users = self.transport.get("repo/v1/userGroupHeaders", params={"prefix": username})
        if not users.ok:
            return users
        for user in (users.data or {}).get("children") or []:
            if user.get("userName") == username:
                return ApiResult(data=user.get("ownerId"))
        logger.info("No user named %r", username)
        return ApiResult.failure(ErrorKind.NOT_FOUND, f"No user named {username!r}")

    # ------------------------------------------------------------------
    # Access control
    # ------------------------------------------------------------------

    def get_entity_acl(self, entity_id: Union[int, str]) -> ApiResult:
        return self.transport.get(f"repo/v1/entity/{entity_id}/acl")

    def get_permissions(self, entity_id: Union[int, str], principal_id: PrincipalId) -> ApiResult:
        """Return the principal's access types on entity_id as result.data.

        data is [] when the principal has no entry -- that is not an error.
        """
        acl = self.get_entity_acl(entity_id)
        if not acl.ok:
            return acl
        return ApiResult(data=permissions_for(acl.data or {}, principal_id))

    def set_permissions(
        self,
        entity_id: Union[int, str],
        principal_id: PrincipalId,
        permissions: Optional[Iterable[Union[Permission, str]]],
    ) -> ApiResult:
        """Replace the principal's access types on entity_id.

        Empty or None permissions remove the principal's entry. Returns the
        result of the ACL PUT; call get_permissions() to read the new state.
        """
        acl = self.get_entity_acl(entity_id)
        if not acl.ok:
            return acl

        updated = apply_permissions(acl.data or {}, principal_id, permissions)
        logger.info(
            "Setting permissions for principal %s on %s: %s",
            normalize_principal(principal_id),
            entity_id,
            permissions_for(updated, principal_id) or "removed",
        )
        return self.transport.put(f"repo/v1/entity/{entity_id}/acl", updated)
