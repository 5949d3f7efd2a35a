"""
Shared pytest fixtures for the Citadel Strongbox test suite.

Autouse fixtures below isolate tests from the developer's environment:
  - STRONGBOX_* variables -> cleared       (no real vault home / identity)
  - Settings cache        -> reset         (each test reloads from its env)
  - Event logger          -> fresh         (no state carried between tests)
  - structlog             -> stdlib logging (event output never lands on stdout)
"""

from collections import namedtuple

import pytest
from cryptography.hazmat.primitives.asymmetric import x25519

from citadel_strongbox.core.event_log import configure_logging
from citadel_strongbox.vault.envelope import format_identity, format_recipient

KeyPair = namedtuple("KeyPair", ["recipient", "identity"])


@pytest.fixture(autouse=True, scope="session")
def _configure_structlog():
    """Route structlog through stdlib logging (never stdout) for the whole run."""
    configure_logging("DEBUG")


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch):
    """Clear STRONGBOX_* variables and the cached settings for every test."""
    import citadel_strongbox.core.config as config_mod

    for var in (
        config_mod.ENV_HOME,
        config_mod.ENV_IDENTITY_FILE,
        config_mod.ENV_LOG_LEVEL,
        config_mod.ENV_LOG_JSON,
    ):
        monkeypatch.delenv(var, raising=False)

    config_mod.reset_settings()
    yield
    config_mod.reset_settings()


@pytest.fixture(autouse=True)
def _isolate_event_logger(monkeypatch):
    """Give every test its own EventLogger singleton."""
    import citadel_strongbox.core.event_log as event_mod

    monkeypatch.setattr(event_mod, "_event_logger", None)
    yield


def _generate_keypair() -> KeyPair:
    # Key provisioning is external to the library; tests mint keys directly.
    private = x25519.X25519PrivateKey.generate()
    return KeyPair(
        recipient=format_recipient(private.public_key()),
        identity=format_identity(private),
    )


@pytest.fixture
def keypair():
    """A fresh recipient/identity pair."""
    return _generate_keypair()


@pytest.fixture
def other_keypair():
    """A second, unrelated recipient/identity pair."""
    return _generate_keypair()
