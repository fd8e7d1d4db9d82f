"""Error taxonomy for token configuration, encoding and decoding."""

from collections.abc import Mapping
from enum import StrEnum
from typing import Any


class ErrorKind(StrEnum):
    """Closed set of failure kinds raised by the library."""

    KEY_EMPTY = "key_empty"
    KEY_INVALID = "key_invalid"
    ALGO_UNSUPPORTED = "algo_unsupported"
    ALGO_MISSING = "algo_missing"
    INVALID_MAX_AGE = "invalid_max_age"
    INVALID_LEEWAY = "invalid_leeway"
    JSON_ERROR = "json_error"
    TOKEN_INVALID = "token_invalid"
    TOKEN_EXPIRED = "token_expired"
    TOKEN_NOT_YET_VALID = "token_not_yet_valid"
    SIGNATURE_FAILED = "signature_failed"
    UNKNOWN_KEY_ID = "unknown_key_id"


class TokenError(Exception):
    """Raised for every configuration or validation failure.

    ``kind`` identifies the failure; ``context`` carries structured details
    such as the offending claim and the boundary it was checked against.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.context = dict(context or {})

    def __repr__(self) -> str:
        return f"TokenError(kind={self.kind!r}, message={self.message!r})"
