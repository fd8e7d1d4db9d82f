"""Shared test fixtures for tokensmith."""

from pathlib import Path

import pytest

from tokensmith.core.clock import FixedClock
from tokensmith.crypto.keys import generate_rsa_keypair
from tokensmith.crypto.types import SigningKeyData

NOW = 1_700_000_000
SECRET = "s3cr3t-s3cr3t-s3cr3t-s3cr3t-s3cr3t-s3cr3t-s3cr3t-s3cr3t-s3cr3t!"
PASSPHRASE = "correct horse battery staple"


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ambient TOKEN_* variables out of settings tests."""
    for name in ("ALGORITHM", "KEY", "PASSPHRASE", "MAX_AGE", "LEEWAY", "KEYS"):
        monkeypatch.delenv(f"TOKEN_{name}", raising=False)


@pytest.fixture
def clock() -> FixedClock:
    """Clock pinned to NOW."""
    return FixedClock(NOW)


@pytest.fixture(scope="session")
def rsa_keypair() -> SigningKeyData:
    """One RSA keypair shared by the whole session; generation is slow."""
    return generate_rsa_keypair()


@pytest.fixture(scope="session")
def encrypted_keypair() -> SigningKeyData:
    """RSA keypair whose private PEM is encrypted with PASSPHRASE."""
    return generate_rsa_keypair(passphrase=PASSPHRASE)


@pytest.fixture
def private_key_file(tmp_path: Path, rsa_keypair: SigningKeyData) -> Path:
    """Private PEM written to disk."""
    path = tmp_path / "priv.key"
    path.write_text(rsa_keypair.private_key_pem)
    return path


@pytest.fixture
def public_key_file(tmp_path: Path, rsa_keypair: SigningKeyData) -> Path:
    """Public PEM written to disk."""
    path = tmp_path / "pub.key"
    path.write_text(rsa_keypair.public_key_pem)
    return path


@pytest.fixture
def secret() -> str:
    """HMAC secret long enough for HS512."""
    return SECRET
