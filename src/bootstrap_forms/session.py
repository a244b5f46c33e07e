"""
セッション状態の読み取り
前リクエストで保存されたバリデーションエラー、フラッシュメッセージ、旧入力を扱う
"""

from typing import Any, Mapping, MutableMapping

from .config import FormsSettings, get_settings
from .errors import ErrorBag


def _flatten_messages(value: Any) -> list[str]:
    """文字列・リスト・エラーバッグ形式のいずれかをメッセージ一覧にする"""
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (ErrorBag, Mapping)):
        return ErrorBag.coerce(value).all()
    return [str(v) for v in value if v]


class SessionState:
    """セッションの読み取り専用ビュー

    キーが存在しない場合は「メッセージなし」として扱い、例外は出さない。

    Args:
        session: フレームワークのセッション（request.session など）。None も可
        settings: セッションキーの設定
    """

    def __init__(
        self,
        session: Mapping[str, Any] | None = None,
        settings: FormsSettings | None = None,
    ):
        self.session: Mapping[str, Any] = session if session is not None else {}
        self.settings = settings or get_settings()

    def errors(self) -> ErrorBag:
        return ErrorBag.coerce(self.session.get(self.settings.errors_key))

    def success(self) -> str | None:
        message = self.session.get(self.settings.success_key)
        return str(message) if message else None

    def error(self) -> str | None:
        """フラッシュエラー（複数あれば改行で連結）"""
        messages = self.error_messages()
        return "\n".join(messages) if messages else None

    def error_messages(self) -> list[str]:
        return _flatten_messages(self.session.get(self.settings.error_key))

    def has_old_input(self) -> bool:
        return bool(self.session.get(self.settings.old_input_key))

    def old(self, name: str, default: Any = None) -> Any:
        old_input = self.session.get(self.settings.old_input_key) or {}
        return old_input.get(name, default)

    def csrf_token(self) -> str | None:
        return self.session.get(self.settings.csrf_session_key)

    @classmethod
    def pull(
        cls,
        session: MutableMapping[str, Any],
        settings: FormsSettings | None = None,
    ) -> "SessionState":
        """フラッシュ済みのキーをセッションから取り出して SessionState を返す

        取り出したキーはセッションから削除されるので、次のリクエストには残らない。
        CSRFトークンは削除せずに引き継ぐ。
        """
        settings = settings or get_settings()
        keys = (
            settings.errors_key,
            settings.success_key,
            settings.error_key,
            settings.old_input_key,
        )
        snapshot = {key: session.pop(key) for key in keys if key in session}
        if settings.csrf_session_key in session:
            snapshot[settings.csrf_session_key] = session[settings.csrf_session_key]
        return cls(snapshot, settings)


def pull_flash(
    session: MutableMapping[str, Any], settings: FormsSettings | None = None
) -> SessionState:
    return SessionState.pull(session, settings)


def flash_errors(
    session: MutableMapping[str, Any],
    errors: ErrorBag | Mapping[str, Any],
    settings: FormsSettings | None = None,
) -> None:
    """次のリクエスト用にバリデーションエラーを保存（JSONで保存できる辞書形式）"""
    settings = settings or get_settings()
    session[settings.errors_key] = ErrorBag.coerce(errors).messages


def flash_success(
    session: MutableMapping[str, Any], message: str, settings: FormsSettings | None = None
) -> None:
    settings = settings or get_settings()
    session[settings.success_key] = message


def flash_error(
    session: MutableMapping[str, Any], message: str, settings: FormsSettings | None = None
) -> None:
    settings = settings or get_settings()
    session[settings.error_key] = message


def flash_input(
    session: MutableMapping[str, Any],
    data: Mapping[str, Any],
    settings: FormsSettings | None = None,
    exclude: tuple[str, ...] = ("password", "password_confirmation"),
) -> None:
    """送信された値を旧入力として保存（パスワードと隠しトークンは除外）"""
    settings = settings or get_settings()
    skip = set(exclude) | {settings.csrf_field, settings.method_field}
    session[settings.old_input_key] = {
        key: value for key, value in data.items() if key not in skip
    }
