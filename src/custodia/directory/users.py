"""User directory — authentication boundary for the workflow.

The engine only needs ``authenticate(username, password) -> Actor``. The
in-memory directory here backs tests, demos and the CLI; production
deployments plug in their own ``UserDirectory``.
"""

from __future__ import annotations

import hashlib
import hmac
import re
import secrets
import threading
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from loguru import logger

from custodia.core.events import USER_REGISTERED, Event, EventBus
from custodia.core.exceptions import ConflictError, NotFoundError, ValidationError
from custodia.portfolio.permissions import Actor, Role, parse_role

_MIN_PASSWORD_SCORE = 3
_PBKDF2_ITERATIONS = 200_000


@runtime_checkable
class UserDirectory(Protocol):
    async def authenticate(self, username: str, password: str) -> Actor:
        """Return the Actor for valid credentials, else raise NotFoundError."""
        ...


@dataclass(frozen=True)
class PasswordStrength:
    checks: dict[str, bool]
    score: int
    label: str

    @property
    def is_valid(self) -> bool:
        return self.score >= _MIN_PASSWORD_SCORE


def password_strength(password: str) -> PasswordStrength:
    """Score a password on length, upper, lower, digit and special characters."""
    checks = {
        "length": len(password) >= 8,
        "uppercase": bool(re.search(r"[A-Z]", password)),
        "lowercase": bool(re.search(r"[a-z]", password)),
        "number": bool(re.search(r"[0-9]", password)),
        "special": bool(re.search(r"[!@#$%^&*]", password)),
    }
    score = sum(checks.values())
    if score <= 2:
        label = "weak"
    elif score == 3:
        label = "medium"
    elif score == 4:
        label = "good"
    else:
        label = "strong"
    return PasswordStrength(checks=checks, score=score, label=label)


@dataclass
class _UserEntry:
    actor: Actor
    salt: bytes
    digest: bytes


def _hash(password: str, salt: bytes) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, _PBKDF2_ITERATIONS)


class InMemoryUserDirectory:
    """Process-local users with salted PBKDF2-SHA256 password digests."""

    def __init__(self, *, bus: EventBus | None = None) -> None:
        self._bus = bus
        self._lock = threading.Lock()
        self._users: dict[str, _UserEntry] = {}
        self._seq = 0

    def register(self, username: str, password: str, role: Role | str) -> Actor:
        """Add a user. Raises ConflictError for a taken username."""
        username = (username or "").strip()
        if not username:
            raise ValidationError("Username is required")
        strength = password_strength(password)
        if not strength.is_valid:
            raise ValidationError(f"Password is too weak ({strength.label})")
        role = parse_role(role)

        salt = secrets.token_bytes(16)
        digest = _hash(password, salt)
        with self._lock:
            if username.lower() in self._users:
                raise ConflictError(f"Username already registered: {username}")
            self._seq += 1
            actor = Actor(id=f"usr-{self._seq:04d}", role=role, username=username)
            self._users[username.lower()] = _UserEntry(actor=actor, salt=salt, digest=digest)

        logger.info(f"Registered {role.value} {username} as {actor.id}")
        if self._bus is not None:
            self._bus.emit_sync(
                Event(
                    name=USER_REGISTERED,
                    payload={"user_id": actor.id, "username": username, "role": role.value},
                    source="directory",
                )
            )
        return actor

    async def authenticate(self, username: str, password: str) -> Actor:
        with self._lock:
            entry = self._users.get((username or "").strip().lower())
        if entry is None or not hmac.compare_digest(entry.digest, _hash(password, entry.salt)):
            logger.warning(f"Failed login for {username!r}")
            raise NotFoundError("Invalid credentials")
        return entry.actor

    async def get_actor(self, user_id: str) -> Actor:
        with self._lock:
            for entry in self._users.values():
                if entry.actor.id == user_id:
                    return entry.actor
        raise NotFoundError(f"User not found: {user_id}")
