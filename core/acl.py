"""
core/acl.py -- Pure read/rewrite logic for Synapse access-control lists.

An ACL document looks like:

    {"id": "syn123", "etag": "...", "resourceAccess": [
        {"principalId": 273948, "accessType": ["READ", "DOWNLOAD"]},
        ...
    ]}

No I/O here. core/client.py fetches the document, calls apply_permissions(),
and PUTs the whole result back. Fields other than resourceAccess pass through
untouched so the server sees the etag it handed out.
"""

import copy
from collections.abc import Iterable
from typing import Any, Optional, Union

from core.models import Permission

PrincipalId = Union[int, str]


def normalize_principal(principal_id: Any) -> str:
    """Return the canonical string form of a principal ID.

    The API returns principalId as a number, while callers often hold it as
    a string (e.g. from a team lookup). Comparing the normalized forms makes
    273948 and "273948" the same principal.
    """
    if isinstance(principal_id, float) and principal_id.is_integer():
        return str(int(principal_id))
    return str(principal_id).strip()


def _permission_value(permission: Union[Permission, str]) -> str:
    # str() on a str-Enum member gives "Permission.READ" on newer Pythons.
    if isinstance(permission, Permission):
        return permission.value
    return str(permission)


def _resource_access(acl: dict) -> list[dict]:
    return acl.get("resourceAccess") or []


def find_access(acl: dict, principal_id: PrincipalId) -> Optional[dict]:
    """Return the Resource Access entry for principal_id, or None.

    If the list holds several entries for the same principal, the last one
    in scan order wins. Duplicates are left as they are.
    """
    wanted = normalize_principal(principal_id)
    found = None
    for entry in _resource_access(acl):
        if normalize_principal(entry.get("principalId")) == wanted:
            found = entry
    return found


def permissions_for(acl: dict, principal_id: PrincipalId) -> list[str]:
    """Return the principal's access types, or [] when it has no entry."""
    entry = find_access(acl, principal_id)
    if entry is None:
        return []
    return list(entry.get("accessType") or [])


def apply_permissions(
    acl: dict,
    principal_id: PrincipalId,
    permissions: Optional[Iterable[Union[Permission, str]]],
) -> dict:
    """Return a copy of acl with principal_id's entry set to permissions.

    - empty/None permissions: the principal's entry is removed (no-op if absent)
    - existing entry: its accessType is replaced, list order is kept
    - no entry: {"accessType": ..., "principalId": ...} is appended

    The input document is never mutated.
    """
    updated = copy.deepcopy(acl)
    entries = updated.setdefault("resourceAccess", [])
    if entries is None:
        entries = updated["resourceAccess"] = []

    access_type = list(dict.fromkeys(_permission_value(p) for p in permissions or ()))
    existing = find_access(updated, principal_id)

    if not access_type:
        if existing is not None:
            # Identity, not equality: only the tracked entry goes.
            updated["resourceAccess"] = [entry for entry in entries if entry is not existing]
    elif existing is not None:
        existing["accessType"] = access_type
    else:
        entries.append({"accessType": access_type, "principalId": principal_id})

    return updated
