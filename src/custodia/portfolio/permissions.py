"""Roles, actions, and the capability table for the maker-checker workflow.

Every authorization decision goes through ``CAPABILITIES``; adding a role or
an action is a single-table edit.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from loguru import logger

from custodia.core.exceptions import AuthorizationError, ValidationError


class Role(StrEnum):
    MAKER = "maker"
    CHECKER = "checker"
    ADMIN = "admin"


class Action(StrEnum):
    SUBMIT = "submit"
    EDIT = "edit"
    REVIEW = "review"
    REMOVE = "remove"


# Action -> roles allowed to perform it
CAPABILITIES: dict[Action, frozenset[Role]] = {
    Action.SUBMIT: frozenset({Role.MAKER, Role.ADMIN}),
    Action.EDIT: frozenset({Role.MAKER, Role.ADMIN}),  # makers additionally must own the holding
    Action.REVIEW: frozenset({Role.CHECKER, Role.ADMIN}),
    Action.REMOVE: frozenset({Role.ADMIN}),
}


@dataclass(frozen=True)
class Actor:
    """An authenticated user acting on the workflow."""

    id: str
    role: Role
    username: str = ""

    def __post_init__(self):
        if not isinstance(self.role, Role):
            object.__setattr__(self, "role", parse_role(self.role))

    @property
    def label(self) -> str:
        return self.username or self.id


def parse_role(raw: object) -> Role:
    """Parse a role name (case-insensitive) into a Role."""
    try:
        return Role(str(raw).strip().lower())
    except ValueError:
        allowed = ", ".join(r.value for r in Role)
        raise ValidationError(f"Unknown role {raw!r}. Allowed: {allowed}") from None


def can(actor: Actor, action: Action) -> bool:
    return actor.role in CAPABILITIES.get(action, frozenset())


def require(actor: Actor, action: Action) -> None:
    """Raise AuthorizationError unless *actor*'s role may perform *action*."""
    if not can(actor, action):
        logger.warning(f"Denied {action.value} for {actor.label} (role={actor.role.value})")
        raise AuthorizationError(f"Role '{actor.role.value}' is not allowed to {action.value} holdings")
