"""Tests for environment-driven token settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from tokensmith.core.errors import ErrorKind, TokenError
from tokensmith.core.settings import TokenSettings
from tokensmith.crypto.types import Algorithm, AsymmetricKey, SymmetricKey


class TestTokenSettings:
    """Tests for TokenSettings."""

    def test_defaults(self) -> None:
        settings = TokenSettings()
        assert settings.algorithm == "HS256"
        assert settings.max_age == 3600
        assert settings.leeway == 0
        assert settings.keys == {}

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TOKEN_ALGORITHM", "HS384")
        monkeypatch.setenv("TOKEN_KEY", "$ecRet")
        monkeypatch.setenv("TOKEN_MAX_AGE", "60")
        monkeypatch.setenv("TOKEN_LEEWAY", "5")
        monkeypatch.setenv("TOKEN_KEYS", '{"k1": "secret-a"}')
        config = TokenSettings().build_codec().config
        assert config.algorithm is Algorithm.HS384
        assert config.key == SymmetricKey(secret=b"$ecRet")
        assert config.max_age == 60
        assert config.leeway == 5
        assert config.registry.resolve("k1", config.key) == SymmetricKey(
            secret=b"secret-a"
        )

    def test_rsa_key_path(
        self, monkeypatch: pytest.MonkeyPatch, private_key_file: Path
    ) -> None:
        monkeypatch.setenv("TOKEN_ALGORITHM", "RS512")
        monkeypatch.setenv("TOKEN_KEY", str(private_key_file))
        codec = TokenSettings().build_codec()
        assert isinstance(codec.config.key, AsymmetricKey)
        assert codec.decode(codec.encode({"sub": "xyz"}))["sub"] == "xyz"

    def test_missing_key(self) -> None:
        with pytest.raises(TokenError) as exc_info:
            TokenSettings().build_codec()
        assert exc_info.value.kind is ErrorKind.KEY_EMPTY

    def test_invalid_leeway(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TOKEN_KEY", "secret")
        monkeypatch.setenv("TOKEN_LEEWAY", "300")
        with pytest.raises(TokenError) as exc_info:
            TokenSettings().build_codec()
        assert exc_info.value.kind is ErrorKind.INVALID_LEEWAY

    def test_non_integer_max_age(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TOKEN_MAX_AGE", "soon")
        with pytest.raises(ValidationError):
            TokenSettings()
