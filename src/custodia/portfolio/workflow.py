"""ApprovalWorkflow — maker-checker control over holding records.

A maker submits a holding (always ``pending``); a checker or admin approves
or rejects it exactly once. Pending holdings can be edited by their owner or
an admin; terminal holdings are immutable here. Admins may delete at any
status.

Every mutation of an existing record goes through the store's
``compare_and_set`` keyed on ``pending``, so a review racing another review
(or an edit) resolves first-committer-wins and the loser gets
InvalidStateError rather than silently overwriting.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from loguru import logger

from custodia.core.config import Config
from custodia.core.events import (
    HOLDING_EDITED,
    HOLDING_REMOVED,
    HOLDING_REVIEWED,
    HOLDING_SUBMITTED,
    EventBus,
)
from custodia.core.exceptions import AuthorizationError, InvalidStateError, NotFoundError, ValidationError

from .models import (
    EDITABLE_FIELDS,
    PROTECTED_FIELDS,
    HoldingRecord,
    HoldingStatus,
    ReviewDecision,
    parse_decision,
    validate_transition,
)
from .permissions import Action, Actor, Role, require
from .store import HoldingStore


class ApprovalWorkflow:
    """State machine and role rules over a HoldingStore."""

    def __init__(
        self,
        store: HoldingStore,
        *,
        bus: EventBus | None = None,
        allow_self_review: bool = False,
    ) -> None:
        self._store = store
        self._bus = bus
        self._allow_self_review = allow_self_review

    @classmethod
    def from_config(cls, store: HoldingStore, config: Config, *, bus: EventBus | None = None) -> ApprovalWorkflow:
        """Build a workflow with ``workflow.*`` settings from *config*."""
        return cls(store, bus=bus, allow_self_review=config.get_bool("workflow.allow_self_review"))

    @property
    def store(self) -> HoldingStore:
        return self._store

    # -- Queries -------------------------------------------------------------

    async def get(self, holding_id: str) -> HoldingRecord:
        holding = await self._store.get(holding_id)
        if holding is None:
            raise NotFoundError(f"Holding not found: {holding_id}")
        return holding

    async def list_holdings(
        self,
        *,
        status: HoldingStatus | str | Iterable[HoldingStatus | str] | None = None,
        owner_id: str | None = None,
    ) -> list[HoldingRecord]:
        """List holdings, optionally restricted to one or more statuses and/or an owner."""
        statuses = None
        if status is not None:
            raw = [status] if isinstance(status, str) else list(status)
            try:
                statuses = [HoldingStatus(s) for s in raw]
            except ValueError:
                raise ValidationError(f"Unknown holding status in {raw!r}") from None
        return await self._store.list_holdings(statuses=statuses, owner_id=owner_id)

    # -- Commands ------------------------------------------------------------

    async def submit(self, actor: Actor, draft: Mapping[str, Any]) -> HoldingRecord:
        """Create a pending holding owned by *actor*.

        Any ``status``, ``owner_id`` or ``id`` in *draft* is ignored: a new
        holding is always pending, owned by its submitter, with a fresh id.
        """
        require(actor, Action.SUBMIT)

        fields = {k: v for k, v in draft.items() if k in EDITABLE_FIELDS}
        for required in ("security_id", "security_name", "quantity", "price"):
            if fields.get(required) in (None, ""):
                raise ValidationError(f"Missing required field: {required}")

        holding = HoldingRecord(
            id=self._store.next_id(),
            owner_id=actor.id,
            status=HoldingStatus.PENDING,
            **fields,
        )
        stored = await self._store.add(holding)

        logger.info(f"Holding {stored.id} submitted by {actor.label}: {stored.quantity} x {stored.security_id}")
        await self._publish(HOLDING_SUBMITTED, actor, stored, {"status": stored.status.value})
        return stored

    async def review(self, actor: Actor, holding_id: str, decision: ReviewDecision | str) -> HoldingRecord:
        """Approve or reject a pending holding (checker/admin, not the submitter)."""
        decision = parse_decision(decision)
        holding = await self.get(holding_id)
        require(actor, Action.REVIEW)
        if holding.owner_id == actor.id and not self._allow_self_review:
            logger.warning(f"Denied self-review of {holding_id} by {actor.label}")
            raise AuthorizationError("A holding cannot be reviewed by the user who submitted it")

        target = decision.target_status
        validate_transition(holding.status, target)

        updated = await self._store.compare_and_set(holding_id, HoldingStatus.PENDING, {"status": target})
        if updated is None:
            # Lost the race: someone else reviewed (or removed) it since our read
            await self._raise_stale(holding_id, "review")

        logger.info(f"Holding {holding_id}: pending -> {target.value} by {actor.label}")
        await self._publish(
            HOLDING_REVIEWED,
            actor,
            updated,
            {"from": HoldingStatus.PENDING.value, "to": target.value, "decision": decision.value},
        )
        return updated

    async def edit(self, actor: Actor, holding_id: str, fields: Mapping[str, Any]) -> HoldingRecord:
        """Change fields of a pending holding (owning maker or admin)."""
        holding = await self.get(holding_id)
        require(actor, Action.EDIT)
        if actor.role is not Role.ADMIN and holding.owner_id != actor.id:
            logger.warning(f"Denied edit of {holding_id} by non-owner {actor.label}")
            raise AuthorizationError("Only the submitting maker or an admin can edit this holding")

        if holding.status is not HoldingStatus.PENDING:
            raise InvalidStateError(
                f"Holding {holding_id} is {holding.status.value}; only pending holdings can be edited"
            )

        protected = sorted(set(fields) & PROTECTED_FIELDS)
        if protected:
            raise ValidationError(f"Fields cannot be edited: {', '.join(protected)}")
        unknown = sorted(set(fields) - EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown holding fields: {', '.join(unknown)}")

        updated = await self._store.compare_and_set(holding_id, HoldingStatus.PENDING, dict(fields))
        if updated is None:
            await self._raise_stale(holding_id, "edit")

        logger.info(f"Holding {holding_id} edited by {actor.label}: {', '.join(sorted(fields)) or 'no changes'}")
        await self._publish(HOLDING_EDITED, actor, updated, {"fields": sorted(fields)})
        return updated

    async def remove(self, actor: Actor, holding_id: str) -> None:
        """Delete a holding at any status (admin only)."""
        require(actor, Action.REMOVE)
        holding = await self.get(holding_id)
        if not await self._store.delete(holding_id):
            raise NotFoundError(f"Holding not found: {holding_id}")

        logger.info(f"Holding {holding_id} ({holding.status.value}) removed by {actor.label}")
        await self._publish(HOLDING_REMOVED, actor, holding, {"status": holding.status.value})

    # -- Internals -----------------------------------------------------------

    async def _raise_stale(self, holding_id: str, action: str) -> None:
        current = await self._store.get(holding_id)
        if current is None:
            raise NotFoundError(f"Holding not found: {holding_id}")
        raise InvalidStateError(
            f"Cannot {action} holding {holding_id}: it is already {current.status.value}"
        )

    async def _publish(self, name: str, actor: Actor, holding: HoldingRecord, extra: dict[str, Any]) -> None:
        if self._bus is None:
            return
        payload = {
            "holding_id": holding.id,
            "security_id": holding.security_id,
            "actor_id": actor.id,
            "actor_role": actor.role.value,
            **extra,
        }
        await self._bus.publish(name, payload, source="workflow")
