"""
bootstrap-forms の使用例
"""

from pydantic import BaseModel, Field, ValidationError

from bootstrap_forms import (
    ErrorBag,
    Forms,
    RouteTable,
    flash_errors,
    flash_input,
    flash_success,
    pull_flash,
    register_forms,
)


# モデル定義
class Role(BaseModel):
    id: int
    name: str


class User(BaseModel):
    """ユーザー"""

    id: int | None = None
    name: str = ""
    email: str = ""
    roles: list[Role] = []


# 入力チェック用のスキーマ（検証は呼び出し側で行う）
class UserInput(BaseModel):
    name: str = Field(min_length=3)
    email: str = Field(pattern=r"^[\w\.-]+@[\w\.-]+\.\w+$")


# ルート定義（フレームワークの url_for をそのまま渡してもよい）
routes = RouteTable()
routes.resource("user", "/users")

ROLES = {1: "admin", 2: "editor", 3: "viewer"}


def render_user_form(session: dict, user: User | None = None) -> str:
    """リクエストごとにセッションを取り出してフォームを描画"""
    register_forms(pull_flash(session), routes)

    parts = [
        Forms.messages(),
        Forms.create("user", user),
        Forms.field("名前", "name"),
        Forms.field("メールアドレス", "email", "email"),
        Forms.checkboxes("権限", "roles", ROLES),
        Forms.field("パスワード", "password", "password"),
        Forms.submit("保存"),
        Forms.end(),
    ]
    return "\n".join(str(part) for part in parts if part is not None)


def store_user(session: dict, form_data: dict) -> None:
    """POST /users の処理（エラーならセッションに保存してリダイレクトする想定）"""
    try:
        UserInput.model_validate(form_data)
    except ValidationError as e:
        flash_errors(session, ErrorBag.from_validation_error(e))
        flash_input(session, form_data)
        return
    flash_success(session, "保存しました")


def main():
    session: dict = {}

    print("=" * 60)
    print("新規作成フォーム")
    print("=" * 60)
    print(render_user_form(session))
    print()

    print("=" * 60)
    print("バリデーションエラー後のフォーム")
    print("=" * 60)
    store_user(session, {"name": "ab", "email": "invalid", "password": "secret"})
    print(render_user_form(session))
    print()

    print("=" * 60)
    print("編集フォーム")
    print("=" * 60)
    store_user(session, {"name": "Alice", "email": "alice@example.com"})
    user = User(id=3, name="Alice", email="alice@example.com", roles=[Role(id=2, name="editor")])
    print(render_user_form(session, user))


if __name__ == "__main__":
    main()
