"""Token settings loaded from environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from tokensmith.token.codec import TokenCodec
from tokensmith.token.types import DEFAULT_LEEWAY, DEFAULT_MAX_AGE


class TokenSettings(BaseSettings):
    """Signing configuration.

    ``key`` is the HMAC secret for HS* algorithms, and PEM text or the path
    of a PEM file for RS* algorithms. ``keys`` maps key ids to material of
    the same form and is read from a JSON object.
    """

    model_config = SettingsConfigDict(env_prefix="TOKEN_")

    algorithm: str = "HS256"
    key: str = ""
    passphrase: str = ""
    max_age: int = DEFAULT_MAX_AGE
    leeway: int = DEFAULT_LEEWAY
    keys: dict[str, str] = {}

    def build_codec(self) -> TokenCodec:
        """Build a codec, reading any key files once."""
        return TokenCodec(
            self.key,
            algorithm=self.algorithm,
            max_age=self.max_age,
            leeway=self.leeway,
            passphrase=self.passphrase or None,
            keys=self.keys,
        )
