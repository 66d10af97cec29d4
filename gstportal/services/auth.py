from __future__ import annotations

import hashlib
import hmac
import logging
import os
from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

from gstportal.config import AppConfig
from gstportal.errors import AuthenticationError

logger = logging.getLogger(__name__)

DEFAULT_USERNAME = "admin"


def hash_password(password: str) -> str:
    return hashlib.sha256((password or "").encode("utf-8")).hexdigest()


def _normalize_username(username: str | None) -> str:
    return (username or "").strip().lower()


@dataclass(frozen=True)
class Identity:
    username: str


@runtime_checkable
class CredentialVerifier(Protocol):
    def verify(self, username: str, password: str) -> Optional[Identity]:
        ...

    def lookup(self, username: str) -> Optional[Identity]:
        ...


class EnvCredentialVerifier:
    """Single operator account configured through the environment.

    ``GP_ADMIN_PASSWORD_HASH`` (sha256 hex) wins over ``GP_ADMIN_PASSWORD``.
    Without either, every login is rejected.
    """

    def __init__(
        self,
        username: str | None = None,
        password_hash: str | None = None,
    ) -> None:
        self._username = _normalize_username(username or os.getenv("GP_ADMIN_USERNAME") or DEFAULT_USERNAME)
        if password_hash is None:
            password_hash = (os.getenv("GP_ADMIN_PASSWORD_HASH") or "").strip().lower()
            if not password_hash and os.getenv("GP_ADMIN_PASSWORD"):
                password_hash = hash_password(os.getenv("GP_ADMIN_PASSWORD", ""))
        self._password_hash = password_hash or ""

    @classmethod
    def from_config(cls, config: AppConfig) -> "EnvCredentialVerifier":
        return cls(username=config.admin_username)

    def verify(self, username: str, password: str) -> Optional[Identity]:
        if not self._password_hash:
            logger.warning("Login attempted but no admin password is configured")
            return None
        name_ok = hmac.compare_digest(_normalize_username(username), self._username)
        password_ok = hmac.compare_digest(hash_password(password), self._password_hash)
        if name_ok and password_ok:
            return Identity(username=self._username)
        return None

    def lookup(self, username: str) -> Optional[Identity]:
        normalized = _normalize_username(username)
        if normalized and normalized == self._username:
            return Identity(username=normalized)
        return None


class AuthContext:
    """Who is logged in for one UI session, passed explicitly to callers."""

    def __init__(self, verifier: CredentialVerifier, identity: Identity | None = None) -> None:
        self._verifier = verifier
        self._identity = identity

    @classmethod
    def restore(cls, verifier: CredentialVerifier, username: str | None) -> "AuthContext":
        identity = verifier.lookup(username) if username else None
        return cls(verifier, identity)

    @property
    def identity(self) -> Identity | None:
        return self._identity

    @property
    def is_authenticated(self) -> bool:
        return self._identity is not None

    def login(self, username: str, password: str) -> Identity:
        identity = self._verifier.verify(username, password)
        if identity is None:
            logger.info("Rejected login for %r", _normalize_username(username))
            raise AuthenticationError("Invalid username or password")
        self._identity = identity
        logger.info("User %s logged in", identity.username)
        return identity

    def logout(self) -> None:
        if self._identity is not None:
            logger.info("User %s logged out", self._identity.username)
        self._identity = None

    def require(self) -> Identity:
        if self._identity is None:
            raise AuthenticationError("Login required")
        return self._identity
