"""
ErrorBag / SessionState のテスト
"""

import pytest
from pydantic import BaseModel, Field, ValidationError, field_validator

from bootstrap_forms import (
    ErrorBag,
    SessionState,
    flash_error,
    flash_errors,
    flash_input,
    flash_success,
    pull_flash,
)


class SignupForm(BaseModel):
    name: str = Field(min_length=3)
    email: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        if "@" not in v:
            raise ValueError("email must contain @")
        return v


class TestErrorBag:
    """ErrorBag のテスト"""

    def test_empty(self):
        bag = ErrorBag()
        assert not bag
        assert bag.all() == []
        assert bag.get("name") == []
        assert bag.first("name") is None

    def test_single_message_is_wrapped(self):
        """単一の文字列はリストとして扱う"""
        bag = ErrorBag(messages={"name": "Required.", "email": ["A", "B"]})

        assert bag.get("name") == ["Required."]
        assert bag.all() == ["Required.", "A", "B"]
        assert len(bag) == 3

    def test_none_message_is_empty(self):
        """None や空文字のメッセージは「エラーなし」"""
        bag = ErrorBag.coerce({"email": None, "name": "", "age": ["Too young."]})

        assert bag.get("email") == []
        assert not bag.has("name")
        assert bag.all() == ["Too young."]

    def test_has_and_contains(self):
        bag = ErrorBag(messages={"name": ["Required."], "email": []})

        assert bag.has("name")
        assert "name" in bag
        assert not bag.has("email")
        assert "email" not in bag

    def test_add(self):
        bag = ErrorBag().add("name", "A").add("name", "B")
        assert bag.get("name") == ["A", "B"]
        assert bag.first("name") == "A"

    def test_coerce(self):
        """セッション値からの変換"""
        assert not ErrorBag.coerce(None)
        assert ErrorBag.coerce({"a": ["x"]}).all() == ["x"]
        assert ErrorBag.coerce({"messages": {"a": ["x"]}}).all() == ["x"]
        bag = ErrorBag(messages={"a": ["x"]})
        assert ErrorBag.coerce(bag) is bag

    def test_from_validation_error(self):
        """pydantic のエラーをフィールドごとに集める"""
        with pytest.raises(ValidationError) as exc_info:
            SignupForm(name="ab", email="invalid")

        bag = ErrorBag.from_validation_error(exc_info.value)

        assert bag.has("name")
        assert bag.has("email")
        assert "email must contain @" in bag.first("email")


class TestSessionState:
    """SessionState のテスト"""

    def test_missing_keys(self):
        """キーがなければメッセージなし"""
        state = SessionState(None)

        assert not state.errors()
        assert state.success() is None
        assert state.error() is None
        assert state.error_messages() == []
        assert not state.has_old_input()
        assert state.old("name", "default") == "default"
        assert state.csrf_token() is None

    def test_reads_values(self):
        state = SessionState(
            {
                "errors": {"name": ["Required."]},
                "success": "Saved!",
                "error": ["A", "B"],
                "_old_input": {"name": "Alice"},
                "_csrf_token": "tok",
            }
        )

        assert state.errors().get("name") == ["Required."]
        assert state.success() == "Saved!"
        assert state.error_messages() == ["A", "B"]
        assert state.error() == "A\nB"
        assert state.old("name") == "Alice"
        assert state.csrf_token() == "tok"


class TestFlash:
    """フラッシュ用ヘルパーのテスト"""

    def test_flash_and_pull(self):
        """保存したメッセージは一度だけ取り出せる"""
        session = {"_csrf_token": "tok"}
        flash_errors(session, ErrorBag(messages={"name": ["Required."]}))
        flash_success(session, "Saved!")
        flash_error(session, "Failed")

        assert session["errors"] == {"name": ["Required."]}

        state = pull_flash(session)

        assert state.errors().get("name") == ["Required."]
        assert state.success() == "Saved!"
        assert state.error() == "Failed"
        assert state.csrf_token() == "tok"
        assert session == {"_csrf_token": "tok"}

        again = pull_flash(session)
        assert not again.errors()
        assert again.success() is None

    def test_flash_input_excludes_secrets(self):
        """パスワードと隠しトークンは保存しない"""
        session = {}
        flash_input(
            session,
            {"name": "Alice", "password": "x", "_token": "t", "_method": "PUT"},
        )
        assert session["_old_input"] == {"name": "Alice"}

    def test_flash_errors_from_validation_error(self):
        session = {}
        with pytest.raises(ValidationError) as exc_info:
            SignupForm(name="ab", email="a@b")

        flash_errors(session, ErrorBag.from_validation_error(exc_info.value))

        assert list(session["errors"]) == ["name"]
        assert SessionState(session).errors().has("name")
