"""Security reference data — pre-fills submit drafts from a security id.

Not needed for the workflow's own invariants; submit accepts any
well-formed identifier whether or not the reference data knows it.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from custodia.core.exceptions import NotFoundError, ValidationError
from custodia.portfolio.identifiers import normalize_security_id, validate_security_id


@dataclass(frozen=True)
class SecurityReference:
    security_id: str
    name: str
    asset_class: str = ""
    country: str = ""


@runtime_checkable
class SecurityLookup(Protocol):
    async def lookup_security(self, security_id: str) -> SecurityReference:
        """Return reference data, or raise NotFoundError."""
        ...


class InMemorySecurityMaster:
    """Dict-backed SecurityLookup."""

    def __init__(self, references: Iterable[SecurityReference] = ()) -> None:
        self._lock = threading.Lock()
        self._refs: dict[str, SecurityReference] = {}
        for ref in references:
            self.add(ref)

    def add(self, reference: SecurityReference) -> None:
        security_id = validate_security_id(reference.security_id)
        if not reference.name.strip():
            raise ValidationError(f"Security name is required for {security_id}")
        # Country defaults to the identifier's 2-letter prefix
        country = reference.country or security_id[:2]
        with self._lock:
            self._refs[security_id] = SecurityReference(
                security_id=security_id,
                name=reference.name.strip(),
                asset_class=reference.asset_class,
                country=country,
            )

    async def lookup_security(self, security_id: str) -> SecurityReference:
        sid = normalize_security_id(security_id)
        with self._lock:
            ref = self._refs.get(sid)
        if ref is None:
            raise NotFoundError(f"Unknown security: {sid}")
        return ref


async def prefill_draft(lookup: SecurityLookup, security_id: str, **fields: Any) -> dict[str, Any]:
    """Build a submit draft with name and asset class from reference data.

    Explicit *fields* win over looked-up values.
    """
    sid = validate_security_id(security_id)
    ref = await lookup.lookup_security(sid)
    draft: dict[str, Any] = {"security_id": sid, "security_name": ref.name}
    if ref.asset_class:
        draft["asset_class"] = ref.asset_class
    draft.update(fields)
    return draft
