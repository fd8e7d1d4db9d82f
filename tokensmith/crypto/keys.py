"""RSA key generation, key material loading, and JWK conversion."""

import base64
import logging
from pathlib import Path

import uuid_utils
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey, RSAPublicKey
from cryptography.hazmat.primitives.asymmetric.types import PrivateKeyTypes

from tokensmith.core.errors import ErrorKind, TokenError
from tokensmith.crypto.types import (
    Algorithm,
    AsymmetricKey,
    JWKEntry,
    KeyKind,
    KeyMaterial,
    SigningKeyData,
    SymmetricKey,
    UnloadableKey,
)

logger = logging.getLogger(__name__)

RSA_KEY_SIZE = 2048
RSA_PUBLIC_EXPONENT = 65537
PEM_MARKER = b"-----BEGIN"
FILE_SCHEME = "file://"

RawKey = str | bytes | RSAPrivateKey | RSAPublicKey | KeyMaterial


def generate_rsa_keypair(passphrase: str | None = None) -> SigningKeyData:
    """Generate a new RSA-2048 keypair, optionally encrypting the private PEM."""
    private_key = rsa.generate_private_key(
        public_exponent=RSA_PUBLIC_EXPONENT,
        key_size=RSA_KEY_SIZE,
    )
    encryption: serialization.KeySerializationEncryption = (
        serialization.BestAvailableEncryption(passphrase.encode())
        if passphrase
        else serialization.NoEncryption()
    )
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=encryption,
    ).decode()
    public_pem = (
        private_key.public_key()
        .public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        .decode()
    )
    kid = str(uuid_utils.uuid7())
    return SigningKeyData(
        kid=kid, private_key_pem=private_pem, public_key_pem=public_pem
    )


def is_empty_key(raw: object) -> bool:
    """Return True for missing or zero-length key material."""
    if raw is None:
        return True
    if isinstance(raw, str | bytes):
        return len(raw) == 0
    if isinstance(raw, SymmetricKey):
        return len(raw.secret) == 0
    return False


def load_key_material(
    raw: RawKey, algorithm: Algorithm, passphrase: str | None = None
) -> KeyMaterial:
    """Turn caller-supplied key material into a typed key for ``algorithm``.

    HS* algorithms take the raw bytes as the shared secret. RS* algorithms
    accept parsed RSA keys, PEM text, or a path to a PEM file; the file is
    read here and never again. Material that cannot be parsed is returned
    as an ``UnloadableKey`` and rejected when it is first used.
    """
    if is_empty_key(raw):
        raise TokenError(ErrorKind.KEY_EMPTY, "Signing key cannot be empty")
    if isinstance(raw, SymmetricKey | AsymmetricKey | UnloadableKey):
        return raw
    if isinstance(raw, RSAPrivateKey):
        return AsymmetricKey(private_key=raw)
    if isinstance(raw, RSAPublicKey):
        return AsymmetricKey(public_key=raw)

    data = raw.encode() if isinstance(raw, str) else raw
    if algorithm.key_kind is KeyKind.SYMMETRIC:
        return SymmetricKey(secret=data)

    if PEM_MARKER in data:
        return _load_pem(data, "<pem>", passphrase)
    return _load_pem_file(data.decode(errors="replace"), passphrase)


def _load_pem_file(location: str, passphrase: str | None) -> KeyMaterial:
    path = Path(location.removeprefix(FILE_SCHEME))
    if not path.is_file():
        return _unloadable(location, "Should be a PEM key or the path of one")
    return _load_pem(path.read_bytes(), str(path), passphrase)


def _load_pem(data: bytes, source: str, passphrase: str | None) -> KeyMaterial:
    password = passphrase.encode() if passphrase else None
    try:
        private_key = _load_private_pem(data, password)
    except (ValueError, TypeError, UnsupportedAlgorithm):
        private_key = None
    if private_key is not None:
        if not isinstance(private_key, RSAPrivateKey):
            return _unloadable(source, "Private key is not an RSA key")
        return AsymmetricKey(private_key=private_key)

    try:
        public_key = serialization.load_pem_public_key(data)
    except (ValueError, UnsupportedAlgorithm):
        return _unloadable(source, "Could not parse PEM key material")
    if not isinstance(public_key, RSAPublicKey):
        return _unloadable(source, "Public key is not an RSA key")
    return AsymmetricKey(public_key=public_key)


def _load_private_pem(data: bytes, password: bytes | None) -> PrivateKeyTypes:
    try:
        return serialization.load_pem_private_key(data, password=password)
    except TypeError:
        # A passphrase is configured but this particular key is unencrypted.
        if password is None:
            raise
        return serialization.load_pem_private_key(data, password=None)


def _unloadable(source: str, reason: str) -> UnloadableKey:
    logger.warning("Key material from %s could not be loaded: %s", source, reason)
    return UnloadableKey(source=source, reason=reason)


def _int_to_base64url(value: int) -> str:
    """Encode an integer as base64url without padding."""
    byte_length = (value.bit_length() + 7) // 8
    raw = value.to_bytes(byte_length, byteorder="big")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


def public_jwk(
    key: KeyMaterial, kid: str, algorithm: Algorithm = Algorithm.RS256
) -> JWKEntry:
    """Convert the public half of an RSA key to JWK format."""
    public_key = key.verifying_key if isinstance(key, AsymmetricKey) else None
    if public_key is None:
        raise TokenError(
            ErrorKind.KEY_INVALID,
            "Invalid key: No RSA public key available",
            {"kid": kid},
        )
    numbers = public_key.public_numbers()
    return JWKEntry(
        kid=kid,
        alg=algorithm.value,
        n=_int_to_base64url(numbers.n),
        e=_int_to_base64url(numbers.e),
    )
