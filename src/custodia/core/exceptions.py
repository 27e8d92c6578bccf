"""
Custodia exception hierarchy.

All custodia exceptions inherit from CustodiaError, making it easy for callers
to catch library-level errors while still distinguishing specific failure modes.
Every error carries a stable ``kind`` string so a transport layer (CLI, HTTP)
can report it without matching on class names.
"""


class CustodiaError(Exception):
    """Base exception class for all custodia errors."""

    kind = "error"


class ValidationError(CustodiaError, ValueError):
    """Raised for malformed input (bad quantity, negative price, bad identifier, missing field)."""

    kind = "validation"


class NotFoundError(CustodiaError, LookupError):
    """Raised when a holding, user, security, or price key does not exist."""

    kind = "not_found"


class PriceNotFoundError(NotFoundError):
    """Raised by exact-date price resolution when no observation exists for that day."""

    def __init__(self, security_id: str, date: object):
        super().__init__(f"No price recorded for {security_id} on {date}")
        self.security_id = security_id
        self.date = date


class AuthorizationError(CustodiaError):
    """Raised when the actor's role does not permit the requested action."""

    kind = "authorization"


class InvalidStateError(CustodiaError):
    """Raised for transitions or edits on a holding that is no longer pending."""

    kind = "invalid_state"


class ConflictError(CustodiaError):
    """Raised for duplicate unique keys (e.g. a username already registered)."""

    kind = "conflict"


class ConfigurationError(CustodiaError):
    """Raised for configuration errors (missing keys, invalid values)."""

    kind = "configuration"
