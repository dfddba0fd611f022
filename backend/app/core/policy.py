from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Literal

from loguru import logger

from .errors import BlockedUser, Forbidden

UserRole = Literal["donor", "volunteer", "admin"]
UserStatus = Literal["active", "blocked"]

ALL_ROLES: FrozenSet[str] = frozenset({"donor", "volunteer", "admin"})
STAFF: FrozenSet[str] = frozenset({"admin", "volunteer"})
ADMIN_ONLY: FrozenSet[str] = frozenset({"admin"})


class Action(str, Enum):
    USER_LIST = "user.list"
    USER_CHANGE_ROLE = "user.change_role"
    USER_CHANGE_STATUS = "user.change_status"
    PROFILE_READ = "profile.read"
    PROFILE_UPDATE = "profile.update"
    REQUEST_CREATE = "request.create"
    REQUEST_LIST_ALL = "request.list_all"
    REQUEST_LIST_OWN = "request.list_own"
    REQUEST_READ = "request.read"
    REQUEST_UPDATE = "request.update"
    REQUEST_CLAIM = "request.claim"
    REQUEST_CHANGE_STATUS = "request.change_status"
    REQUEST_DELETE = "request.delete"
    BLOG_CREATE = "blog.create"
    FUND_CREATE = "fund.create"
    FUND_LIST = "fund.list"
    FUND_TOTAL = "fund.total"
    PAYMENT_START = "payment.start"


@dataclass(frozen=True)
class Rule:
    roles: FrozenSet[str]
    owner: bool = False


PERMISSIONS: Dict[Action, Rule] = {
    Action.USER_LIST: Rule(ADMIN_ONLY),
    Action.USER_CHANGE_ROLE: Rule(ADMIN_ONLY),
    Action.USER_CHANGE_STATUS: Rule(ADMIN_ONLY),
    Action.PROFILE_READ: Rule(ALL_ROLES),
    Action.PROFILE_UPDATE: Rule(ALL_ROLES),
    Action.REQUEST_CREATE: Rule(ALL_ROLES),
    Action.REQUEST_LIST_ALL: Rule(STAFF),
    Action.REQUEST_LIST_OWN: Rule(ALL_ROLES),
    Action.REQUEST_READ: Rule(ALL_ROLES),
    Action.REQUEST_UPDATE: Rule(ADMIN_ONLY, owner=True),
    Action.REQUEST_CLAIM: Rule(ALL_ROLES),
    Action.REQUEST_CHANGE_STATUS: Rule(STAFF, owner=True),
    Action.REQUEST_DELETE: Rule(ADMIN_ONLY, owner=True),
    Action.BLOG_CREATE: Rule(STAFF),
    Action.FUND_CREATE: Rule(ALL_ROLES),
    Action.FUND_LIST: Rule(STAFF),
    Action.FUND_TOTAL: Rule(STAFF),
    Action.PAYMENT_START: Rule(ALL_ROLES),
}


@dataclass(frozen=True)
class Identity:
    email: str
    role: str
    name: str = ""
    status: str = "active"

    @property
    def is_blocked(self) -> bool:
        return self.status == "blocked"


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str


def authorize(identity: Identity, action: Action, owner_email: str | None = None) -> Decision:
    rule = PERMISSIONS.get(action)
    if rule is None:
        return Decision(False, f"no rule for {action.value}")
    if identity.role in rule.roles:
        return Decision(True, f"role {identity.role} may {action.value}")
    if rule.owner and owner_email is not None and owner_email == identity.email:
        return Decision(True, f"owner may {action.value}")
    return Decision(False, f"role {identity.role} may not {action.value}")


def enforce(identity: Identity, action: Action, owner_email: str | None = None) -> None:
    decision = authorize(identity, action, owner_email)
    if not decision.allowed:
        logger.warning("Denied {} for {}: {}", action.value, identity.email, decision.reason)
        raise Forbidden()


def ensure_active(identity: Identity) -> None:
    if identity.is_blocked:
        logger.warning("Blocked user {} attempted a restricted action", identity.email)
        raise BlockedUser()
