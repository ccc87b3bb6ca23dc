"""
Authorization Policy

Pure decision functions: who may act on whose account. No I/O, never raises.
An actor/target is anything exposing `id`, `role` and `status` (a User row,
or any stand-in with the same attributes). Routers translate a denial's
`reason` into an HTTP response.
"""
from dataclasses import dataclass, field
from typing import Any, FrozenSet, Iterable, Mapping, Optional

from linkforge.models.enums import Role, Status, STAFF_ROLES

# Denial reasons
NOT_AUTHENTICATED = "NOT_AUTHENTICATED"
ACCOUNT_INACTIVE = "ACCOUNT_INACTIVE"
FORBIDDEN_ROLE_ESCALATION = "FORBIDDEN_ROLE_ESCALATION"
FORBIDDEN_TARGET_ROLE = "FORBIDDEN_TARGET_ROLE"
FORBIDDEN_SELF_ONLY = "FORBIDDEN_SELF_ONLY"

# Account fields any permitted editor may change
PROFILE_FIELDS: FrozenSet[str] = frozenset({"name", "email", "username", "bio"})
# Fields that change what an account is allowed to do
PRIVILEGE_FIELDS: FrozenSet[str] = frozenset({"role", "status"})


@dataclass(frozen=True)
class Decision:
    """Outcome of a policy check"""
    allowed: bool
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.allowed


@dataclass(frozen=True)
class EditDecision(Decision):
    """Outcome of an edit check, with the fields the actor may change"""
    fields: FrozenSet[str] = field(default_factory=frozenset)


ALLOW = Decision(True)


def _deny(reason: str) -> Decision:
    return Decision(False, reason)


def _role(subject: Any) -> Optional[Role]:
    """Coerce a stored role to the enum; unknown values become None (least privilege)."""
    try:
        return Role(getattr(subject, "role", None))
    except (TypeError, ValueError):
        return None


def _status(subject: Any) -> Optional[Status]:
    try:
        return Status(getattr(subject, "status", None))
    except (TypeError, ValueError):
        return None


def _same(actor: Any, target: Any) -> bool:
    """Subjects without an id are never the same account."""
    actor_id = getattr(actor, "id", None)
    target_id = getattr(target, "id", None)
    if actor_id is None or target_id is None:
        return False
    return str(actor_id) == str(target_id)


def require_active_session(actor: Any) -> Decision:
    """An actor must be present and ACTIVE to do anything authenticated."""
    if actor is None:
        return _deny(NOT_AUTHENTICATED)
    if _status(actor) != Status.ACTIVE:
        return _deny(ACCOUNT_INACTIVE)
    return ALLOW


def can_list_users(actor: Any) -> Decision:
    if actor is None:
        return _deny(NOT_AUTHENTICATED)
    if _role(actor) in STAFF_ROLES:
        return ALLOW
    return _deny(FORBIDDEN_ROLE_ESCALATION)


def can_edit_user(actor: Any, target: Any) -> EditDecision:
    """
    Decide whether `actor` may edit `target`, and which fields.

    - Anyone may edit themself.
    - ADMIN may edit USER accounts, never another ADMIN or a FOUNDER.
    - FOUNDER may edit USER and ADMIN accounts; among FOUNDERs only themself.
    - USER may edit nobody else.
    - role/status are only ever mutable by a FOUNDER.
    """
    if actor is None:
        return EditDecision(False, NOT_AUTHENTICATED)
    if target is None:
        return EditDecision(False, FORBIDDEN_TARGET_ROLE)

    actor_role = _role(actor)
    target_role = _role(target)
    is_self = _same(actor, target)

    if actor_role == Role.FOUNDER:
        if target_role == Role.FOUNDER and not is_self:
            return EditDecision(False, FORBIDDEN_SELF_ONLY)
        return EditDecision(True, fields=PROFILE_FIELDS | PRIVILEGE_FIELDS)

    if actor_role == Role.ADMIN:
        if not is_self and target_role != Role.USER:
            return EditDecision(False, FORBIDDEN_TARGET_ROLE)
        return EditDecision(True, fields=PROFILE_FIELDS)

    # USER, or a role this code does not know
    if not is_self:
        return EditDecision(False, FORBIDDEN_SELF_ONLY)
    return EditDecision(True, fields=PROFILE_FIELDS)


def can_delete_user(actor: Any, target: Any) -> Decision:
    """
    FOUNDER accounts are never deletable here. ADMIN accounts only by a FOUNDER.
    Everything else by ADMIN or FOUNDER. Self-service account deletion goes
    through the account endpoint, not this check.
    """
    if actor is None:
        return _deny(NOT_AUTHENTICATED)
    if target is None:
        return _deny(FORBIDDEN_TARGET_ROLE)

    actor_role = _role(actor)
    target_role = _role(target)

    if target_role == Role.FOUNDER:
        return _deny(FORBIDDEN_TARGET_ROLE)
    if target_role == Role.ADMIN and actor_role != Role.FOUNDER:
        return _deny(FORBIDDEN_TARGET_ROLE)
    if actor_role not in STAFF_ROLES:
        return _deny(FORBIDDEN_ROLE_ESCALATION)
    if target_role is None:
        # Unknown target role: only a FOUNDER may clean it up
        return ALLOW if actor_role == Role.FOUNDER else _deny(FORBIDDEN_TARGET_ROLE)
    return ALLOW


def check_field_changes(
    decision: EditDecision,
    requested: Mapping[str, Any],
    current: Any = None,
) -> Decision:
    """
    Reject an edit that touches fields outside `decision.fields`.

    A requested value equal to the current one is not a change, so clients
    may send back full records.
    """
    if not decision.allowed:
        return decision
    for name in _changed(requested, current):
        if name not in decision.fields:
            return _deny(FORBIDDEN_ROLE_ESCALATION)
    return ALLOW


def _changed(requested: Mapping[str, Any], current: Any) -> Iterable[str]:
    for name, value in requested.items():
        if current is not None and getattr(current, name, object()) == value:
            continue
        yield name
