"""Security identifier (ISIN-style) normalization and format checks.

Format only: two-letter country prefix, nine uppercase alphanumerics, one
numeric check digit. The check digit itself is not verified.
"""

from __future__ import annotations

import re

from custodia.core.exceptions import ValidationError

SECURITY_ID_LENGTH = 12
_SECURITY_ID_RE = re.compile(r"^[A-Z]{2}[A-Z0-9]{9}[0-9]$")


def normalize_security_id(raw: object) -> str:
    """Strip surrounding whitespace and upper-case; ``None`` becomes ``""``."""
    if raw is None:
        return ""
    return str(raw).strip().upper()


def is_valid_security_id(security_id: str | None) -> bool:
    """True when *security_id* (already normalized) matches the 12-character format."""
    if not security_id or len(security_id) != SECURITY_ID_LENGTH:
        return False
    return bool(_SECURITY_ID_RE.match(security_id))


def validate_security_id(raw: object) -> str:
    """Normalize *raw* and return it, or raise ValidationError."""
    security_id = normalize_security_id(raw)
    if not security_id:
        raise ValidationError("Security identifier is required")
    if not is_valid_security_id(security_id):
        raise ValidationError(
            f"Malformed security identifier {security_id!r}: expected {SECURITY_ID_LENGTH} characters, "
            "2-letter country prefix, 9 alphanumerics and a numeric check digit"
        )
    return security_id
