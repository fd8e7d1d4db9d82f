"""Type definitions for token configuration and per-call validation state."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tokensmith.core.clock import Clock, system_clock
from tokensmith.core.errors import ErrorKind, TokenError
from tokensmith.crypto.keys import is_empty_key
from tokensmith.crypto.types import Algorithm, KeyMaterial
from tokensmith.token.registry import KeyRegistry

DEFAULT_MAX_AGE = 3600
DEFAULT_LEEWAY = 0
MAX_LEEWAY = 120

Claims = dict[str, Any]


class TokenConfig(BaseModel):
    """Immutable settings shared by every encode and decode call."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    algorithm: Algorithm = Algorithm.HS256
    key: KeyMaterial
    max_age: int = DEFAULT_MAX_AGE
    leeway: int = DEFAULT_LEEWAY
    clock: Clock = system_clock
    registry: KeyRegistry = Field(default_factory=KeyRegistry)

    @field_validator("algorithm", mode="before")
    @classmethod
    def _check_algorithm(cls, value: Any) -> Algorithm:
        return Algorithm.parse(value)

    @field_validator("key")
    @classmethod
    def _check_key(cls, value: KeyMaterial) -> KeyMaterial:
        if is_empty_key(value):
            raise TokenError(ErrorKind.KEY_EMPTY, "Signing key cannot be empty")
        return value

    @field_validator("max_age")
    @classmethod
    def _check_max_age(cls, value: int) -> int:
        if value < 1:
            raise TokenError(
                ErrorKind.INVALID_MAX_AGE,
                "Invalid maxAge: Should be greater than 0",
                {"max_age": value},
            )
        return value

    @field_validator("leeway")
    @classmethod
    def _check_leeway(cls, value: int) -> int:
        if value < 0 or value > MAX_LEEWAY:
            raise TokenError(
                ErrorKind.INVALID_LEEWAY,
                f"Invalid leeway: Should be between 0-{MAX_LEEWAY}",
                {"leeway": value},
            )
        return value


class ValidationContext(BaseModel):
    """State resolved for a single decode call, never shared between calls."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    segments: tuple[str, str, str]
    header: dict[str, Any]
    algorithm: Algorithm
    key: KeyMaterial
    now: int
    leeway: int
    max_age: int

    @property
    def signing_input(self) -> bytes:
        return f"{self.segments[0]}.{self.segments[1]}".encode("ascii")
