"""RequestStatus and the admin status update rule

State flow:
    PENDING → PROCESSING → COMPLETED or REJECTED

PENDING → PROCESSING happens through document generation or an admin update.
PROCESSING → COMPLETED/REJECTED happens through the admin status update.
is_status_update_allowed is the single transition policy. Generation only
picks PENDING requests and moves them to PROCESSING, which it permits.
"""

from enum import Enum


class RequestStatus(str, Enum):
    """Declaration request status enum"""
    PENDING = "PENDING"          # Submitted, waiting for generation
    PROCESSING = "PROCESSING"    # Document generated, waiting for delivery review
    COMPLETED = "COMPLETED"      # Delivered (terminal)
    REJECTED = "REJECTED"        # Refused by an admin (terminal)


TERMINAL_STATUSES = frozenset({RequestStatus.COMPLETED, RequestStatus.REJECTED})


def is_terminal(status: RequestStatus) -> bool:
    """Return True for COMPLETED and REJECTED."""
    return RequestStatus(status) in TERMINAL_STATUSES


def is_status_update_allowed(current: RequestStatus, target: RequestStatus) -> bool:
    """Decide whether a request may move from current to target.

    The update is refused when the request is already terminal, or when the
    target is terminal and the request is not PROCESSING. Moving a request
    back to PENDING is refused as well: a PENDING request must carry no url
    and must stay unique per (user, declaration). Re-applying a non-terminal
    status (PROCESSING to PROCESSING) is allowed and only touches updated_at.

    Example:
        >>> is_status_update_allowed(RequestStatus.PROCESSING, RequestStatus.COMPLETED)
        True
        >>> is_status_update_allowed(RequestStatus.PENDING, RequestStatus.REJECTED)
        False
    """
    current = RequestStatus(current)
    target = RequestStatus(target)
    if is_terminal(current):
        return False
    if is_terminal(target) and current != RequestStatus.PROCESSING:
        return False
    if target == RequestStatus.PENDING:
        return False
    return True
