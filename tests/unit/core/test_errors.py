"""Tests for the error taxonomy."""

from tokensmith.core.errors import ErrorKind, TokenError


class TestTokenError:
    """Tests for TokenError."""

    def test_carries_kind_and_context(self) -> None:
        err = TokenError(
            ErrorKind.TOKEN_EXPIRED, "Invalid token: Expired", {"claim": "exp"}
        )
        assert err.kind is ErrorKind.TOKEN_EXPIRED
        assert err.context == {"claim": "exp"}
        assert str(err) == "Invalid token: Expired"

    def test_context_defaults_to_empty(self) -> None:
        assert TokenError(ErrorKind.KEY_EMPTY, "x").context == {}

    def test_kinds_are_distinct(self) -> None:
        assert len({kind.value for kind in ErrorKind}) == 12

