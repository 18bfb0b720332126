"""Unit tests for boundary error types."""

import pytest

from src.boundary.errors import (
    CSRF_ERROR_STATUS,
    CSRF_FAILURE_MESSAGES,
    ConfigurationError,
    CsrfFailure,
    InvalidAuthenticityTokenError,
)


class TestConfigurationError:
    def test_message_includes_setting(self) -> None:
        exc = ConfigurationError("must not be empty", setting="origin")
        assert str(exc) == "origin: must not be empty"
        assert exc.message == "must not be empty"
        assert exc.setting == "origin"

    def test_without_setting(self) -> None:
        assert str(ConfigurationError("bad")) == "bad"

    def test_not_a_value_error(self) -> None:
        assert not issubclass(ConfigurationError, ValueError)


class TestInvalidAuthenticityTokenError:
    @pytest.mark.parametrize("kind", list(CsrfFailure))
    def test_every_kind_has_message(self, kind) -> None:
        exc = InvalidAuthenticityTokenError(kind)
        assert exc.kind is kind
        assert exc.message == CSRF_FAILURE_MESSAGES[kind]
        assert str(exc) == exc.message

    def test_status_is_unprocessable_entity(self) -> None:
        assert CSRF_ERROR_STATUS == 422
        assert InvalidAuthenticityTokenError.status_code == 422

    def test_kinds_are_strings(self) -> None:
        assert CsrfFailure.TOKEN_MISMATCH == "TOKEN_MISMATCH"
