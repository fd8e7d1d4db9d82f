"""Type definitions for signing algorithms, key material, and JWKs."""

from enum import StrEnum
from typing import Any, ClassVar

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey, RSAPublicKey
from pydantic import BaseModel, ConfigDict

from tokensmith.core.errors import ErrorKind, TokenError


class KeyKind(StrEnum):
    """Kind of key an algorithm signs and verifies with."""

    SYMMETRIC = "symmetric"
    ASYMMETRIC = "asymmetric"


class Algorithm(StrEnum):
    """Supported signing algorithms."""

    HS256 = "HS256"
    HS384 = "HS384"
    HS512 = "HS512"
    RS256 = "RS256"
    RS384 = "RS384"
    RS512 = "RS512"

    @classmethod
    def parse(cls, value: Any) -> "Algorithm":
        """Return the algorithm named by ``value`` or raise AlgoUnsupported."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value in cls.__members__:
            return cls[value]
        raise TokenError(
            ErrorKind.ALGO_UNSUPPORTED,
            f"Unsupported algorithm {value!r}",
            {"alg": value},
        )

    @property
    def key_kind(self) -> KeyKind:
        return _KEY_KINDS[self]

    @property
    def hash_algorithm(self) -> hashes.HashAlgorithm:
        """Fresh hash instance for this algorithm's SHA-2 width."""
        return _HASHES[self]()


_KEY_KINDS: dict[Algorithm, KeyKind] = {
    Algorithm.HS256: KeyKind.SYMMETRIC,
    Algorithm.HS384: KeyKind.SYMMETRIC,
    Algorithm.HS512: KeyKind.SYMMETRIC,
    Algorithm.RS256: KeyKind.ASYMMETRIC,
    Algorithm.RS384: KeyKind.ASYMMETRIC,
    Algorithm.RS512: KeyKind.ASYMMETRIC,
}

_HASHES: dict[Algorithm, type[hashes.HashAlgorithm]] = {
    Algorithm.HS256: hashes.SHA256,
    Algorithm.HS384: hashes.SHA384,
    Algorithm.HS512: hashes.SHA512,
    Algorithm.RS256: hashes.SHA256,
    Algorithm.RS384: hashes.SHA384,
    Algorithm.RS512: hashes.SHA512,
}


class SymmetricKey(BaseModel):
    """Shared secret for HMAC signing and verification."""

    model_config = ConfigDict(frozen=True)

    kind: ClassVar[KeyKind] = KeyKind.SYMMETRIC

    secret: bytes


class AsymmetricKey(BaseModel):
    """RSA key pair; either half may be absent for sign-only or verify-only use."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: ClassVar[KeyKind] = KeyKind.ASYMMETRIC

    private_key: RSAPrivateKey | None = None
    public_key: RSAPublicKey | None = None

    @property
    def verifying_key(self) -> RSAPublicKey | None:
        """Public key, derived from the private key when not given."""
        if self.public_key is not None:
            return self.public_key
        if self.private_key is not None:
            return self.private_key.public_key()
        return None


class UnloadableKey(BaseModel):
    """Key material that could not be parsed when it was configured."""

    model_config = ConfigDict(frozen=True)

    kind: ClassVar[None] = None

    source: str
    reason: str


KeyMaterial = SymmetricKey | AsymmetricKey | UnloadableKey


class SigningKeyData(BaseModel):
    """An RSA keypair in PEM form for JWT signing."""

    kid: str
    private_key_pem: str
    public_key_pem: str


class JWKEntry(BaseModel):
    """Single JWK entry in a JWKS document."""

    kty: str = "RSA"
    use: str = "sig"
    alg: str = "RS256"
    kid: str
    n: str
    e: str


class JWKSResponse(BaseModel):
    """JSON Web Key Set document."""

    keys: list[JWKEntry]
