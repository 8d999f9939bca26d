from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

# ---------------------------------------------------------------------------
# Domain constants
# ---------------------------------------------------------------------------


class Permission(str, Enum):
    """Access types that may appear in a Resource Access entry."""

    UPDATE = "UPDATE"
    DELETE = "DELETE"
    CHANGE_PERMISSIONS = "CHANGE_PERMISSIONS"
    CHANGE_SETTINGS = "CHANGE_SETTINGS"
    CREATE = "CREATE"
    DOWNLOAD = "DOWNLOAD"
    READ = "READ"
    MODERATE = "MODERATE"


class PermissionSets:
    """Named permission presets. Tuples, so they cannot be edited in place."""

    ADMIN: tuple[Permission, ...] = (
        Permission.UPDATE,
        Permission.DELETE,
        Permission.CHANGE_PERMISSIONS,
        Permission.CHANGE_SETTINGS,
        Permission.CREATE,
        Permission.DOWNLOAD,
        Permission.READ,
        Permission.MODERATE,
    )

    CAN_EDIT_AND_DELETE: tuple[Permission, ...] = (
        Permission.DOWNLOAD,
        Permission.UPDATE,
        Permission.CREATE,
        Permission.DELETE,
        Permission.READ,
    )

    CAN_EDIT: tuple[Permission, ...] = (
        Permission.DOWNLOAD,
        Permission.UPDATE,
        Permission.CREATE,
        Permission.READ,
    )


# CLI names for the presets.
PERMISSION_SETS: dict[str, tuple[Permission, ...]] = {
    "admin": PermissionSets.ADMIN,
    "can-edit-and-delete": PermissionSets.CAN_EDIT_AND_DELETE,
    "can-edit": PermissionSets.CAN_EDIT,
}


class EntityType(str, Enum):
    """concreteType values sent when creating entities."""

    PROJECT = "org.sagebionetworks.repo.model.Project"
    FOLDER = "org.sagebionetworks.repo.model.Folder"


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class ErrorKind(str, Enum):
    AUTH = "auth"
    NOT_FOUND = "not_found"
    TRANSPORT = "transport"


@dataclass
class ApiError:
    kind: ErrorKind
    message: str
    status_code: Optional[int] = None
    body: Any = None  # decoded JSON or raw text from the remote, if any


@dataclass
class ApiResult:
    """Outcome of one client call: data on success, error on failure.

    Transport failures never raise -- callers check .ok instead.
    """

    data: Any = None
    error: Optional[ApiError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(
        cls, kind: ErrorKind, message: str, status_code: Optional[int] = None, body: Any = None
    ) -> "ApiResult":
        return cls(error=ApiError(kind=kind, message=message, status_code=status_code, body=body))
