"""Interfaces to external collaborators: user directory and security reference data."""

from .securities import InMemorySecurityMaster, SecurityLookup, SecurityReference, prefill_draft
from .users import InMemoryUserDirectory, PasswordStrength, UserDirectory, password_strength

__all__ = [
    "InMemorySecurityMaster",
    "InMemoryUserDirectory",
    "PasswordStrength",
    "SecurityLookup",
    "SecurityReference",
    "UserDirectory",
    "password_strength",
    "prefill_draft",
]
