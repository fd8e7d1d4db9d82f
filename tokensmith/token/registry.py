"""Key lookup by key identifier (``kid``)."""

from collections.abc import Iterator, Mapping

from tokensmith.core.errors import ErrorKind, TokenError
from tokensmith.crypto.keys import public_jwk
from tokensmith.crypto.types import (
    Algorithm,
    AsymmetricKey,
    JWKSResponse,
    KeyMaterial,
)


class KeyRegistry:
    """Named keys consulted when a token header carries a ``kid``."""

    def __init__(self, keys: Mapping[str, KeyMaterial] | None = None) -> None:
        self._keys: dict[str, KeyMaterial] = dict(keys or {})

    def register(self, kid: str, key: KeyMaterial) -> None:
        """Add or replace the key stored under ``kid``."""
        self._keys[kid] = key

    def resolve(self, kid: str | None, default_key: KeyMaterial) -> KeyMaterial:
        """Return the key for ``kid``, or ``default_key`` when no kid is given."""
        if kid is None:
            return default_key
        try:
            return self._keys[kid]
        except (KeyError, TypeError):
            raise TokenError(
                ErrorKind.UNKNOWN_KEY_ID,
                "Invalid token: Unknown key ID",
                {"kid": kid},
            ) from None

    def copy(self) -> "KeyRegistry":
        return KeyRegistry(self._keys)

    def public_jwks(self, algorithm: Algorithm = Algorithm.RS256) -> JWKSResponse:
        """Publish the public halves of all registered RSA keys."""
        entries = [
            public_jwk(key, kid, algorithm)
            for kid, key in self._keys.items()
            if isinstance(key, AsymmetricKey) and key.verifying_key is not None
        ]
        return JWKSResponse(keys=entries)

    def __contains__(self, kid: object) -> bool:
        return kid in self._keys

    def __iter__(self) -> Iterator[str]:
        return iter(self._keys)

    def __len__(self) -> int:
        return len(self._keys)
