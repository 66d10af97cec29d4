import pytest

from gstportal.config import AppConfig
from gstportal.errors import AuthenticationError
from gstportal.services.auth import (
    AuthContext,
    CredentialVerifier,
    EnvCredentialVerifier,
    Identity,
    hash_password,
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    for name in ("GP_ADMIN_USERNAME", "GP_ADMIN_PASSWORD", "GP_ADMIN_PASSWORD_HASH"):
        monkeypatch.delenv(name, raising=False)


class StaticVerifier:
    def __init__(self, users: dict[str, str]) -> None:
        self.users = users

    def verify(self, username, password):
        return Identity(username) if self.users.get(username) == password else None

    def lookup(self, username):
        return Identity(username) if username in self.users else None


def test_login_and_logout_with_injected_verifier() -> None:
    auth = AuthContext(StaticVerifier({"kim": "s3cret"}))
    assert not auth.is_authenticated

    identity = auth.login("kim", "s3cret")
    assert identity == Identity("kim")
    assert auth.require() == identity

    auth.logout()
    assert auth.identity is None
    with pytest.raises(AuthenticationError):
        auth.require()


def test_wrong_password_is_rejected() -> None:
    auth = AuthContext(StaticVerifier({"kim": "s3cret"}))
    with pytest.raises(AuthenticationError, match="Invalid username or password"):
        auth.login("kim", "nope")
    assert not auth.is_authenticated


def test_restore_from_stored_username() -> None:
    verifier = StaticVerifier({"kim": "s3cret"})
    assert AuthContext.restore(verifier, "kim").is_authenticated
    assert not AuthContext.restore(verifier, "someone-else").is_authenticated
    assert not AuthContext.restore(verifier, None).is_authenticated


def test_env_verifier_with_plain_password(monkeypatch) -> None:
    monkeypatch.setenv("GP_ADMIN_USERNAME", "Owner")
    monkeypatch.setenv("GP_ADMIN_PASSWORD", "hunter2")
    verifier = EnvCredentialVerifier()

    assert isinstance(verifier, CredentialVerifier)
    assert verifier.verify("owner", "hunter2") == Identity("owner")
    assert verifier.verify("owner", "wrong") is None
    assert verifier.lookup("OWNER") == Identity("owner")


def test_env_verifier_prefers_hash(monkeypatch) -> None:
    monkeypatch.setenv("GP_ADMIN_PASSWORD_HASH", hash_password("from-hash"))
    monkeypatch.setenv("GP_ADMIN_PASSWORD", "from-plain")
    verifier = EnvCredentialVerifier()
    assert verifier.verify("admin", "from-hash") == Identity("admin")
    assert verifier.verify("admin", "from-plain") is None


def test_env_verifier_without_password_rejects_everyone() -> None:
    verifier = EnvCredentialVerifier()
    assert verifier.verify("admin", "") is None
    assert verifier.verify("admin", "anything") is None


def test_env_verifier_from_config_uses_configured_username(monkeypatch) -> None:
    monkeypatch.setenv("GP_ADMIN_PASSWORD", "hunter2")
    verifier = EnvCredentialVerifier.from_config(AppConfig(admin_username="Bookkeeper"))

    assert verifier.verify("bookkeeper", "hunter2") == Identity("bookkeeper")
    assert verifier.verify("admin", "hunter2") is None
    auth = AuthContext.restore(verifier, "bookkeeper")
    assert auth.is_authenticated
