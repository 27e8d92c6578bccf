"""Tests for custodia.portfolio.permissions."""

import pytest

from custodia.core.exceptions import AuthorizationError, ValidationError
from custodia.portfolio.permissions import CAPABILITIES, Action, Actor, Role, can, parse_role, require

pytestmark = pytest.mark.smoke


class TestCapabilityTable:
    def test_every_action_has_an_entry(self):
        assert set(CAPABILITIES) == set(Action)

    def test_maker_capabilities(self):
        maker = Actor(id="u1", role=Role.MAKER)
        assert can(maker, Action.SUBMIT)
        assert can(maker, Action.EDIT)
        assert not can(maker, Action.REVIEW)
        assert not can(maker, Action.REMOVE)

    def test_checker_capabilities(self):
        checker = Actor(id="u2", role=Role.CHECKER)
        assert can(checker, Action.REVIEW)
        assert not can(checker, Action.SUBMIT)
        assert not can(checker, Action.EDIT)
        assert not can(checker, Action.REMOVE)

    def test_admin_can_do_everything(self):
        admin = Actor(id="u3", role=Role.ADMIN)
        assert all(can(admin, action) for action in Action)


class TestRequire:
    def test_allowed_passes(self):
        require(Actor(id="u2", role=Role.CHECKER), Action.REVIEW)

    def test_denied_raises(self):
        with pytest.raises(AuthorizationError, match="maker"):
            require(Actor(id="u1", role=Role.MAKER), Action.REVIEW)


class TestActor:
    def test_role_string_is_parsed(self):
        actor = Actor(id="u1", role="Checker")
        assert actor.role is Role.CHECKER

    def test_unknown_role_rejected(self):
        with pytest.raises(ValidationError, match="Unknown role"):
            Actor(id="u1", role="auditor")

    def test_label_prefers_username(self):
        assert Actor(id="u1", role=Role.MAKER, username="maker1").label == "maker1"
        assert Actor(id="u1", role=Role.MAKER).label == "u1"


def test_parse_role():
    assert parse_role(" ADMIN ") is Role.ADMIN
