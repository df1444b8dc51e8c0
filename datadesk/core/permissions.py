"""Capability registry: which roles may perform which actions.

Every role check in the API goes through can(role, action). Handlers never
compare role strings directly.
"""

from dataclasses import dataclass
from enum import Enum

from datadesk.db.enums import Role


class Action(str, Enum):
    """Actions that are subject to a role check."""
    REQUEST_CREATE = "request.create"
    REQUEST_DECIDE = "request.decide"
    REQUEST_VIEW_PENDING = "request.view_pending"
    COMMENT_CREATE = "comment.create"
    COMPANY_VIEW = "company.view"
    COMPANY_CREATE = "company.create"
    COMPANY_UPDATE = "company.update"
    COMPANY_DELETE = "company.delete"
    COMPANY_ASSIGN = "company.assign"
    USER_VIEW = "user.view"
    USER_CREATE = "user.create"
    USER_UPDATE = "user.update"
    USER_DELETE = "user.delete"
    HOLIDAY_VIEW = "holiday.view"
    HOLIDAY_MANAGE = "holiday.manage"


@dataclass(frozen=True)
class ActionDef:
    """Action definition with metadata."""
    action: Action
    label: str


ACTION_REGISTRY: dict[Action, ActionDef] = {
    Action.REQUEST_CREATE: ActionDef(Action.REQUEST_CREATE, "Submit data requests"),
    Action.REQUEST_DECIDE: ActionDef(Action.REQUEST_DECIDE, "Approve or reject requests"),
    Action.REQUEST_VIEW_PENDING: ActionDef(Action.REQUEST_VIEW_PENDING, "View pending requests"),
    Action.COMMENT_CREATE: ActionDef(Action.COMMENT_CREATE, "Comment on companies"),
    Action.COMPANY_VIEW: ActionDef(Action.COMPANY_VIEW, "View all companies"),
    Action.COMPANY_CREATE: ActionDef(Action.COMPANY_CREATE, "Add companies"),
    Action.COMPANY_UPDATE: ActionDef(Action.COMPANY_UPDATE, "Edit companies"),
    Action.COMPANY_DELETE: ActionDef(Action.COMPANY_DELETE, "Delete companies"),
    Action.COMPANY_ASSIGN: ActionDef(Action.COMPANY_ASSIGN, "Assign companies to users"),
    Action.USER_VIEW: ActionDef(Action.USER_VIEW, "View users"),
    Action.USER_CREATE: ActionDef(Action.USER_CREATE, "Create users"),
    Action.USER_UPDATE: ActionDef(Action.USER_UPDATE, "Edit users"),
    Action.USER_DELETE: ActionDef(Action.USER_DELETE, "Delete users"),
    Action.HOLIDAY_VIEW: ActionDef(Action.HOLIDAY_VIEW, "View holidays"),
    Action.HOLIDAY_MANAGE: ActionDef(Action.HOLIDAY_MANAGE, "Manage holidays"),
}


# =============================================================================
# Role Capabilities
# =============================================================================

_EMPLOYEE = {
    Action.REQUEST_CREATE,
    Action.COMMENT_CREATE,
    Action.COMPANY_VIEW,
    Action.COMPANY_CREATE,
    Action.COMPANY_UPDATE,
    Action.HOLIDAY_VIEW,
}

_TL = _EMPLOYEE | {
    Action.REQUEST_DECIDE,
    Action.REQUEST_VIEW_PENDING,
    Action.COMPANY_DELETE,
    Action.USER_VIEW,
}

_MANAGER = _TL | {
    Action.COMPANY_ASSIGN,
    Action.USER_CREATE,
    Action.USER_UPDATE,
}

ROLE_CAPABILITIES: dict[Role, frozenset[Action]] = {
    Role.EMPLOYEE: frozenset(_EMPLOYEE),
    Role.TL: frozenset(_TL),
    Role.MANAGER: frozenset(_MANAGER),
    Role.ADMIN: frozenset(ACTION_REGISTRY.keys()),
}


# =============================================================================
# Helper Functions
# =============================================================================

def can(role: Role | str, action: Action) -> bool:
    """Return True if the role may perform the action. Unknown roles may do nothing."""
    if not isinstance(role, Role):
        if not Role.has_value(role):
            return False
        role = Role(role)
    return action in ROLE_CAPABILITIES[role]


def is_admin_only(action: Action) -> bool:
    """True when no role below admin holds the action."""
    return all(
        action not in actions
        for role, actions in ROLE_CAPABILITIES.items()
        if role != Role.ADMIN
    )


def can_grant_role(actor_role: Role, target_role: Role) -> bool:
    """Only admins may hand out the admin role."""
    if target_role == Role.ADMIN:
        return actor_role == Role.ADMIN
    return can(actor_role, Action.USER_UPDATE)
