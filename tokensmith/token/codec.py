"""JWT encoding and decoding with HMAC and RSA signatures."""

import logging
from collections.abc import Mapping
from typing import Any

from tokensmith.core.clock import Clock, system_clock
from tokensmith.core.errors import ErrorKind, TokenError
from tokensmith.crypto import signer
from tokensmith.crypto.keys import RawKey, is_empty_key, load_key_material
from tokensmith.crypto.types import Algorithm
from tokensmith.token.registry import KeyRegistry
from tokensmith.token.segments import encode_segment
from tokensmith.token.types import (
    DEFAULT_LEEWAY,
    DEFAULT_MAX_AGE,
    Claims,
    TokenConfig,
)
from tokensmith.token.validator import ClaimValidator

logger = logging.getLogger(__name__)

TOKEN_TYPE = "JWT"


class TokenCodec:
    """Creates and verifies signed JWT tokens."""

    def __init__(
        self,
        key: RawKey,
        algorithm: Algorithm | str = Algorithm.HS256,
        max_age: int = DEFAULT_MAX_AGE,
        leeway: int = DEFAULT_LEEWAY,
        passphrase: str | None = None,
        keys: Mapping[str, RawKey] | None = None,
        clock: Clock = system_clock,
    ) -> None:
        if is_empty_key(key):
            raise TokenError(ErrorKind.KEY_EMPTY, "Signing key cannot be empty")
        algo = Algorithm.parse(algorithm)
        material = load_key_material(key, algo, passphrase)
        registry = KeyRegistry()
        for kid, raw in (keys or {}).items():
            registry.register(kid, load_key_material(raw, algo, passphrase))
        self._config = TokenConfig(
            algorithm=algo,
            key=material,
            max_age=max_age,
            leeway=leeway,
            clock=clock,
            registry=registry,
        )
        self._validator = ClaimValidator(self._config)

    @classmethod
    def from_config(cls, config: TokenConfig) -> "TokenCodec":
        """Build a codec around an already validated configuration."""
        codec = cls.__new__(cls)
        codec._config = config.model_copy(update={"registry": config.registry.copy()})
        codec._validator = ClaimValidator(codec._config)
        return codec

    @property
    def config(self) -> TokenConfig:
        """Snapshot of the configuration; its registry is a private copy."""
        return self._config.model_copy(
            update={"registry": self._config.registry.copy()}
        )

    def with_clock(self, clock: Clock) -> "TokenCodec":
        """Return a codec with the same keys that reads time from ``clock``."""
        return type(self).from_config(self._config.model_copy(update={"clock": clock}))

    def encode(
        self, claims: Mapping[str, Any], header: Mapping[str, Any] | None = None
    ) -> str:
        """Create a signed token carrying ``claims``.

        ``header`` fields are merged after ``typ`` and ``alg``, which always
        keep their configured values. A ``kid`` in ``header`` selects the
        registered key that signs the token.
        """
        config = self._config
        full_header = {"typ": TOKEN_TYPE, "alg": config.algorithm.value}
        for name, value in (header or {}).items():
            full_header.setdefault(name, value)

        payload = dict(claims)
        if payload.get("exp") is None and payload.get("iat") is None:
            payload["exp"] = int(config.clock()) + config.max_age

        key = config.registry.resolve(full_header.get("kid"), config.key)
        signing_input = f"{encode_segment(full_header)}.{encode_segment(payload)}"
        signature = signer.sign(config.algorithm, key, signing_input.encode("ascii"))
        return f"{signing_input}.{encode_segment(signature)}"

    def decode(self, token: str) -> Claims:
        """Verify ``token`` and return its claims."""
        try:
            return self._validator.validate(token)
        except TokenError as exc:
            logger.warning("Token rejected (%s): %s", exc.kind, exc.message)
            raise

    def read_unverified_header(self, token: str) -> dict[str, Any]:
        """Return the header of ``token`` without verifying anything."""
        return self._validator.read_header(token)

    generate = encode
    parse = decode
