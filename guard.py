"""
Ownership policy for mutating requests.

A user may change a resource when they own it or hold the admin role. The
`ensure_*` helpers raise `Unauthorized` and are called by every controller
before it writes.
"""

from typing import Any, Dict, Optional

from errors import Unauthorized

ADMIN = "admin"


def is_admin(user: Dict[str, Any]) -> bool:
    return user.get("role") == ADMIN


def can_mutate(resource_owner_id: Optional[str], acting_user: Dict[str, Any]) -> bool:
    if is_admin(acting_user):
        return True
    return resource_owner_id is not None and str(resource_owner_id) == str(acting_user.get("id"))


def can_create_bootcamp(acting_user: Dict[str, Any], already_owns_one: bool) -> bool:
    return is_admin(acting_user) or not already_owns_one


def ensure_can_mutate(resource: Dict[str, Any], acting_user: Dict[str, Any], action: str = "modify") -> None:
    """Raise `Unauthorized` unless `acting_user` may change `resource`.

    Ownership is read from the resource's own `user_id`.
    """
    if not can_mutate(resource.get("user_id"), acting_user):
        raise Unauthorized(f"User {acting_user.get('id')} is not authorized to {action} this resource")


def ensure_can_create_bootcamp(acting_user: Dict[str, Any], already_owns_one: bool) -> None:
    if not can_create_bootcamp(acting_user, already_owns_one):
        raise Unauthorized(f"User {acting_user.get('id')} has already published a bootcamp")
