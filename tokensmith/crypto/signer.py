"""Algorithm-dispatched signing and verification over raw bytes."""

import hmac

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric import padding

from tokensmith.core.errors import ErrorKind, TokenError
from tokensmith.crypto.types import (
    Algorithm,
    AsymmetricKey,
    KeyKind,
    KeyMaterial,
    SymmetricKey,
    UnloadableKey,
)


def sign(algorithm: Algorithm, key: KeyMaterial, data: bytes) -> bytes:
    """Sign ``data`` with ``key`` using ``algorithm``."""
    if algorithm.key_kind is KeyKind.SYMMETRIC:
        return _hmac_digest(algorithm, require_symmetric(algorithm, key), data)

    private_key = require_asymmetric(algorithm, key).private_key
    if private_key is None:
        raise TokenError(
            ErrorKind.KEY_INVALID,
            "Invalid key: Should be an RSA private key",
            {"alg": algorithm.value},
        )
    return private_key.sign(data, padding.PKCS1v15(), algorithm.hash_algorithm)


def verify(
    algorithm: Algorithm, key: KeyMaterial, data: bytes, signature: bytes
) -> bool:
    """Return True if ``signature`` is valid for ``data`` under ``key``."""
    if algorithm.key_kind is KeyKind.SYMMETRIC:
        expected = _hmac_digest(algorithm, require_symmetric(algorithm, key), data)
        return hmac.compare_digest(expected, signature)

    public_key = require_asymmetric(algorithm, key).verifying_key
    if public_key is None:
        raise TokenError(
            ErrorKind.KEY_INVALID,
            "Invalid key: No RSA public key available",
            {"alg": algorithm.value},
        )
    try:
        public_key.verify(
            signature, data, padding.PKCS1v15(), algorithm.hash_algorithm
        )
    except InvalidSignature:
        return False
    return True


def require_symmetric(algorithm: Algorithm, key: KeyMaterial) -> SymmetricKey:
    """Return ``key`` if it is a usable HMAC secret, else raise."""
    if not isinstance(key, SymmetricKey):
        raise _kind_mismatch(algorithm, key)
    if not key.secret:
        raise TokenError(ErrorKind.KEY_EMPTY, "Signing key cannot be empty")
    return key


def require_asymmetric(algorithm: Algorithm, key: KeyMaterial) -> AsymmetricKey:
    """Return ``key`` if it is an RSA key, else raise."""
    if not isinstance(key, AsymmetricKey):
        raise _kind_mismatch(algorithm, key)
    return key


def _hmac_digest(algorithm: Algorithm, key: SymmetricKey, data: bytes) -> bytes:
    return hmac.new(key.secret, data, algorithm.hash_algorithm.name).digest()


def _kind_mismatch(algorithm: Algorithm, key: KeyMaterial) -> TokenError:
    if isinstance(key, UnloadableKey):
        return TokenError(
            ErrorKind.KEY_INVALID,
            f"Invalid key: {key.reason}",
            {"alg": algorithm.value, "source": key.source},
        )
    return TokenError(
        ErrorKind.KEY_INVALID,
        f"Invalid key: {algorithm.value} requires a {algorithm.key_kind} key",
        {"alg": algorithm.value, "key_kind": key.kind},
    )
