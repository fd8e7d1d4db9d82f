"""Staged validation of a presented token.

Each stage runs only if the previous one succeeded:

1. structure: exactly three non-empty dot-separated segments
2. header JSON
3. ``alg`` present and supported
4. key resolution by ``kid`` and key-kind check
5. signature over the first two raw segments
6. payload JSON
7. ``exp`` / ``iat`` / ``nbf`` against the clock, with leeway

Claims are only looked at once the signature has been verified.
"""

import math
from numbers import Real
from typing import Any

from tokensmith.core.errors import ErrorKind, TokenError
from tokensmith.crypto import signer
from tokensmith.crypto.types import Algorithm, KeyKind, KeyMaterial
from tokensmith.token.segments import b64url_decode, decode_segment
from tokensmith.token.types import Claims, TokenConfig, ValidationContext

SEGMENT_COUNT = 3


def split_token(token: Any) -> tuple[str, str, str]:
    """Split a token into its header, payload and signature segments."""
    if not isinstance(token, str):
        raise TokenError(ErrorKind.TOKEN_INVALID, "Invalid token: Not a string")
    segments = token.split(".")
    if len(segments) != SEGMENT_COUNT or not all(segments):
        raise TokenError(
            ErrorKind.TOKEN_INVALID,
            "Invalid token: Incomplete segments",
            {"segments": len(segments)},
        )
    header, payload, signature = segments
    return header, payload, signature


def decode_header(segment: str) -> dict[str, Any]:
    """Decode the header segment; non-object headers carry no ``alg``."""
    header = decode_segment(segment)
    if not isinstance(header, dict):
        raise TokenError(ErrorKind.ALGO_MISSING, "Invalid token: Missing header algo")
    return header


def check_algorithm(header: dict[str, Any]) -> Algorithm:
    """Return the header's declared algorithm if it is supported."""
    alg = header.get("alg")
    if alg is None or alg == "":
        raise TokenError(ErrorKind.ALGO_MISSING, "Invalid token: Missing header algo")
    try:
        return Algorithm.parse(alg)
    except TokenError as exc:
        raise TokenError(
            ErrorKind.ALGO_UNSUPPORTED,
            "Invalid token: Unsupported header algo",
            exc.context,
        ) from None


def check_key_kind(algorithm: Algorithm, key: KeyMaterial) -> KeyMaterial:
    """Reject keys that cannot serve the declared algorithm."""
    if algorithm.key_kind is KeyKind.SYMMETRIC:
        return signer.require_symmetric(algorithm, key)
    return signer.require_asymmetric(algorithm, key)


def check_signature(context: ValidationContext) -> None:
    try:
        signature = b64url_decode(context.segments[2])
    except ValueError:
        signature = None
    if signature is None or not signer.verify(
        context.algorithm, context.key, context.signing_input, signature
    ):
        raise TokenError(
            ErrorKind.SIGNATURE_FAILED,
            "Invalid token: Signature failed",
            {"alg": context.algorithm.value, "kid": context.header.get("kid")},
        )


def decode_payload(segment: str) -> Claims:
    payload = decode_segment(segment)
    if not isinstance(payload, dict):
        raise TokenError(
            ErrorKind.JSON_ERROR, "JSON failed: Payload is not a claim map"
        )
    return payload


def _numeric_claim(payload: Claims, name: str) -> float | None:
    value = payload.get(name)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, Real):
        raise TokenError(
            ErrorKind.TOKEN_INVALID,
            f"Invalid token: Claim {name} must be a number",
            {"claim": name},
        )
    if not math.isfinite(value):
        raise TokenError(
            ErrorKind.TOKEN_INVALID,
            f"Invalid token: Claim {name} must be finite",
            {"claim": name},
        )
    return value


def check_timestamps(payload: Claims, context: ValidationContext) -> None:
    """Check ``exp``, ``iat`` and ``nbf`` independently against ``now``."""
    now = context.now

    exp = _numeric_claim(payload, "exp")
    if exp is not None and now >= exp + context.leeway:
        raise TokenError(
            ErrorKind.TOKEN_EXPIRED,
            "Invalid token: Expired",
            {"claim": "exp", "boundary": exp + context.leeway, "now": now},
        )

    iat = _numeric_claim(payload, "iat")
    if iat is not None and now >= iat + context.max_age - context.leeway:
        raise TokenError(
            ErrorKind.TOKEN_EXPIRED,
            "Invalid token: Expired",
            {
                "claim": "iat",
                "boundary": iat + context.max_age - context.leeway,
                "now": now,
            },
        )

    nbf = _numeric_claim(payload, "nbf")
    if nbf is not None and now <= nbf - context.leeway:
        raise TokenError(
            ErrorKind.TOKEN_NOT_YET_VALID,
            "Invalid token: Not now",
            {"claim": "nbf", "boundary": nbf - context.leeway, "now": now},
        )


class ClaimValidator:
    """Runs the decode pipeline against one immutable configuration."""

    def __init__(self, config: TokenConfig) -> None:
        self._config = config

    def read_header(self, token: str) -> dict[str, Any]:
        """Run the structural and header stages only; nothing is verified."""
        return decode_header(split_token(token)[0])

    def validate(self, token: str) -> Claims:
        """Return the verified claims of ``token`` or raise ``TokenError``."""
        context = self.build_context(token)
        check_signature(context)
        payload = decode_payload(context.segments[1])
        check_timestamps(payload, context)
        return payload

    def build_context(self, token: str) -> ValidationContext:
        config = self._config
        segments = split_token(token)
        header = decode_header(segments[0])
        algorithm = check_algorithm(header)
        key = config.registry.resolve(header.get("kid"), config.key)
        return ValidationContext(
            segments=segments,
            header=header,
            algorithm=algorithm,
            key=check_key_kind(algorithm, key),
            now=int(config.clock()),
            leeway=config.leeway,
            max_age=config.max_age,
        )
