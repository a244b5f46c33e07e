"""
バリデーションエラーの保持
フィールド名ごとにエラーメッセージを順序付きで保持する
"""

from typing import Any, Mapping

from pydantic import BaseModel, ValidationError, field_validator


def _as_list(messages: Any) -> list[Any]:
    if not messages:
        return []
    if isinstance(messages, str):
        return [messages]
    return list(messages)


class ErrorBag(BaseModel):
    """フィールド名 → エラーメッセージ一覧"""

    messages: dict[str, list[str]] = {}

    @field_validator("messages", mode="before")
    @classmethod
    def _wrap_single_messages(cls, value: Any) -> Any:
        # {"email": "必須です"} のような単一メッセージや None も受け付ける
        if isinstance(value, Mapping):
            return {str(key): _as_list(msg) for key, msg in value.items()}
        return value

    @classmethod
    def coerce(cls, value: Any) -> "ErrorBag":
        """セッションに保存された値から ErrorBag を生成

        ErrorBag、辞書、または None（エラーなし）を受け付ける。
        """
        if isinstance(value, ErrorBag):
            return value
        if not value:
            return cls()
        if isinstance(value, Mapping) and isinstance(value.get("messages"), Mapping):
            return cls.model_validate(value)
        return cls(messages=value)

    @classmethod
    def from_validation_error(cls, error: ValidationError) -> "ErrorBag":
        """pydantic の ValidationError からエラーを集める

        同じフィールドに複数のエラーがあれば発生順にすべて保持する。
        フィールドに紐付かないエラーは "__form__" に入る。
        """
        messages: dict[str, list[str]] = {}
        for item in error.errors():
            loc = item.get("loc") or ()
            field_name = str(loc[0]) if loc else "__form__"
            messages.setdefault(field_name, []).append(item.get("msg", ""))
        return cls(messages=messages)

    def has(self, name: str) -> bool:
        return bool(self.messages.get(name))

    def get(self, name: str) -> list[str]:
        return list(self.messages.get(name, []))

    def first(self, name: str) -> str | None:
        messages = self.messages.get(name)
        return messages[0] if messages else None

    def all(self) -> list[str]:
        """全フィールドのメッセージを順番に平坦化"""
        return [msg for messages in self.messages.values() for msg in messages]

    def add(self, name: str, message: str) -> "ErrorBag":
        self.messages.setdefault(name, []).append(message)
        return self

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)

    def __bool__(self) -> bool:
        return any(self.messages.values())

    def __len__(self) -> int:
        return sum(len(messages) for messages in self.messages.values())
