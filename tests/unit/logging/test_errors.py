"""Tests for error classification and serialization."""

import pytest

from obskit.errors import is_error_like, serialize_error


class CodedError(Exception):
    """Exception carrying an extra field."""

    def __init__(self, message: str, code: str) -> None:
        super().__init__(message)
        self.code = code


def _raised(error: BaseException) -> BaseException:
    """Raise and catch error so it carries a traceback."""
    try:
        raise error
    except BaseException as caught:  # noqa: BLE001
        return caught


class TestSerializeError:
    """Tests for serialize_error."""

    def test_serializes_basic_error_properties(self) -> None:
        """Should include type, message and stack for a raised exception."""
        serialized = serialize_error(_raised(ValueError("test error")))

        assert serialized["type"] == "ValueError"
        assert serialized["message"] == "test error"
        assert "ValueError: test error" in serialized["stack"]

    def test_keeps_custom_error_fields(self) -> None:
        """Extra fields set on a custom exception survive serialization."""
        serialized = serialize_error(CodedError("test error", code="CUSTOM_ERROR"))

        assert serialized["type"] == "CodedError"
        assert serialized["message"] == "test error"
        assert serialized["code"] == "CUSTOM_ERROR"

    def test_keeps_underscore_fields_but_not_notes(self) -> None:
        error = CodedError("test error", code="E1")
        error._retry_after = 30
        error.add_note("while syncing")

        serialized = serialize_error(error)

        assert serialized["_retry_after"] == 30
        assert "__notes__" not in serialized

    def test_omits_stack_for_exception_never_raised(self) -> None:
        """An exception without a traceback has no stack."""
        serialized = serialize_error(RuntimeError("not raised"))

        assert "stack" not in serialized

    def test_omits_stack_for_error_like_mapping(self) -> None:
        """A mapping without stack serializes without one."""
        serialized = serialize_error({"name": "Error", "message": "test error"})

        assert serialized == {"type": "Error", "message": "test error"}

    def test_mapping_fields_are_kept(self) -> None:
        """Extra keys of an error-like mapping are copied."""
        serialized = serialize_error(
            {"message": "boom", "stack": "at line 1", "status": 503}
        )

        assert serialized == {
            "type": "Error",
            "message": "boom",
            "stack": "at line 1",
            "status": 503,
        }

    def test_empty_stack_is_omitted(self) -> None:
        """An empty stack string counts as no stack."""
        serialized = serialize_error({"message": "boom", "stack": ""})

        assert "stack" not in serialized

    def test_prefers_message_attribute(self) -> None:
        """Exceptions exposing a message attribute use it."""

        class APIError(Exception):
            def __init__(self, message: str) -> None:
                self.message = message
                super().__init__(f"API: {message}")

        serialized = serialize_error(APIError("quota exceeded"))

        assert serialized["message"] == "quota exceeded"
        assert "name" not in serialized

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("plain string", "plain string"),
            (42, "42"),
            (None, "None"),
            ({"code": 1}, "{'code': 1}"),
        ],
    )
    def test_stringifies_non_error_values(self, value: object, expected: str) -> None:
        """Values that are not error-like become {"error": str(value)}."""
        assert serialize_error(value) == {"error": expected}


class TestIsErrorLike:
    """Tests for is_error_like."""

    def test_true_for_exceptions(self) -> None:
        assert is_error_like(Exception("test"))
        assert is_error_like(TypeError("test"))
        assert is_error_like(KeyboardInterrupt())

    def test_true_for_mapping_with_message(self) -> None:
        """Any mapping with a message key is treated as an error."""
        assert is_error_like({"message": "x"})

    @pytest.mark.parametrize("value", [None, {}, "error", 42, ["message"], object()])
    def test_false_for_non_error_values(self, value: object) -> None:
        assert not is_error_like(value)
