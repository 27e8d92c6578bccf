"""Holding records and the maker-checker approval workflow."""

from .identifiers import is_valid_security_id, normalize_security_id, validate_security_id
from .models import (
    TERMINAL_STATUSES,
    VALID_TRANSITIONS,
    HoldingRecord,
    HoldingStatus,
    ReviewDecision,
    holding_from_dict,
    holding_to_dict,
    validate_transition,
)
from .permissions import CAPABILITIES, Action, Actor, Role
from .store import HoldingStore, InMemoryHoldingStore
from .workflow import ApprovalWorkflow

__all__ = [
    "CAPABILITIES",
    "TERMINAL_STATUSES",
    "VALID_TRANSITIONS",
    "Action",
    "Actor",
    "ApprovalWorkflow",
    "HoldingRecord",
    "HoldingStatus",
    "HoldingStore",
    "InMemoryHoldingStore",
    "ReviewDecision",
    "Role",
    "holding_from_dict",
    "holding_to_dict",
    "is_valid_security_id",
    "normalize_security_id",
    "validate_security_id",
    "validate_transition",
]
