"""User roles and the per-operation role policy.

Roles are exclusive rather than hierarchical: admins review and generate
declarations, requesters submit them. An admin cannot submit a request and a
requester cannot review one.

Permission Matrix:
┌────────────────────────┬───────┬───────────┐
│ Operation              │ ADMIN │ REQUESTER │
├────────────────────────┼───────┼───────────┤
│ List all requests      │   ✓   │           │
│ List recent generated  │   ✓   │           │
│ Update request status  │   ✓   │           │
│ Generate documents     │   ✓   │           │
│ Create request         │       │     ✓     │
│ List own requests      │       │     ✓     │
│ List declarations      │   ✓   │     ✓     │
└────────────────────────┴───────┴───────────┘
"""

from enum import Enum
from typing import Dict, FrozenSet, Optional

from domain.requests.errors import PermissionDenied


class UserRole(str, Enum):
    """User roles, derived from the user's is_admin flag."""
    ADMIN = "ADMIN"
    REQUESTER = "REQUESTER"


class Operation(str, Enum):
    """Operations exposed by the request lifecycle."""
    LIST_ALL_REQUESTS = "list_all_requests"
    LIST_RECENT_GENERATED = "list_recent_generated"
    UPDATE_STATUS = "update_status"
    GENERATE_DOCUMENTS = "generate_documents"
    CREATE_REQUEST = "create_request"
    LIST_OWN_REQUESTS = "list_own_requests"
    LIST_DECLARATIONS = "list_declarations"


ADMIN_ONLY: FrozenSet[UserRole] = frozenset({UserRole.ADMIN})
REQUESTER_ONLY: FrozenSet[UserRole] = frozenset({UserRole.REQUESTER})
ANY_ROLE: FrozenSet[UserRole] = frozenset(UserRole)

# Single source of truth for who may call what
OPERATION_ROLES: Dict[Operation, FrozenSet[UserRole]] = {
    Operation.LIST_ALL_REQUESTS: ADMIN_ONLY,
    Operation.LIST_RECENT_GENERATED: ADMIN_ONLY,
    Operation.UPDATE_STATUS: ADMIN_ONLY,
    Operation.GENERATE_DOCUMENTS: ADMIN_ONLY,
    Operation.CREATE_REQUEST: REQUESTER_ONLY,
    Operation.LIST_OWN_REQUESTS: REQUESTER_ONLY,
    Operation.LIST_DECLARATIONS: ANY_ROLE,
}


def role_of(user) -> UserRole:
    """Map a user's is_admin flag to a role."""
    return UserRole.ADMIN if user.is_admin else UserRole.REQUESTER


def has_permission(user_role: UserRole, operation: Operation) -> bool:
    """Check if a role may perform an operation.

    Examples:
        >>> has_permission(UserRole.ADMIN, Operation.GENERATE_DOCUMENTS)
        True
        >>> has_permission(UserRole.ADMIN, Operation.CREATE_REQUEST)
        False
    """
    return user_role in OPERATION_ROLES.get(operation, frozenset())


def authorize(user: Optional[object], operation: Operation) -> None:
    """Raise PermissionDenied unless user may perform operation.

    An unknown caller (None) is always refused.
    """
    if user is None:
        raise PermissionDenied("You do not have permission to perform this action.")

    if not has_permission(role_of(user), operation):
        raise PermissionDenied("You do not have permission to perform this action.")
