"""Tests for custodia.core.exceptions."""

import pytest

from custodia.core.exceptions import (
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    CustodiaError,
    InvalidStateError,
    NotFoundError,
    PriceNotFoundError,
    ValidationError,
)


def test_hierarchy():
    """All exceptions should inherit from CustodiaError."""
    for exc_cls in [
        ValidationError,
        NotFoundError,
        PriceNotFoundError,
        AuthorizationError,
        InvalidStateError,
        ConflictError,
        ConfigurationError,
    ]:
        assert issubclass(exc_cls, CustodiaError)


def test_builtin_compatibility():
    assert issubclass(ValidationError, ValueError)
    assert issubclass(NotFoundError, LookupError)
    assert issubclass(PriceNotFoundError, NotFoundError)


def test_stable_kinds():
    kinds = {
        ValidationError: "validation",
        NotFoundError: "not_found",
        AuthorizationError: "authorization",
        InvalidStateError: "invalid_state",
        ConflictError: "conflict",
        ConfigurationError: "configuration",
    }
    for exc_cls, kind in kinds.items():
        assert exc_cls("x").kind == kind
    assert PriceNotFoundError("US0378331005", "2025-10-09").kind == "not_found"


def test_price_not_found_message():
    err = PriceNotFoundError("US0378331005", "2025-10-09")
    assert "US0378331005" in str(err)
    assert "2025-10-09" in str(err)
    assert err.security_id == "US0378331005"


def test_catch_base():
    with pytest.raises(CustodiaError):
        raise InvalidStateError("already approved")
