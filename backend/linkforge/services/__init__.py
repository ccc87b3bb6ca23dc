"""
Services Module

Domain logic the routers call into:
- policy: who may act on whose account (pure, no I/O)
- visits: page-view and click accounting
- ordering: link positions within a profile
- profiles / activity: lazy profile creation, activity log
"""
from .policy import (
    Decision,
    EditDecision,
    can_delete_user,
    can_edit_user,
    can_list_users,
    require_active_session,
)
from .visits import VisitResult, record_click, record_visit
from .ordering import OrderResult, append_link, move_link, remove_link, reorder_bulk

__all__ = [
    # Authorization
    "Decision",
    "EditDecision",
    "can_delete_user",
    "can_edit_user",
    "can_list_users",
    "require_active_session",
    # Accounting
    "VisitResult",
    "record_click",
    "record_visit",
    # Ordering
    "OrderResult",
    "append_link",
    "move_link",
    "remove_link",
    "reorder_bulk",
]
