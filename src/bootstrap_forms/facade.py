"""
ファサード
コンテナに登録されたサービスへクラス属性としてアクセスする

    Forms.field("Email", "email", "email")
    # == container.make("forms").field("Email", "email", "email")
"""

from typing import Any, Mapping

from .config import FormsSettings
from .container import Container, container as default_container
from .form_renderer import FormRenderer
from .routing import UrlResolver
from .session import SessionState

FORMS = "forms"


class FacadeMeta(type):
    def __getattr__(cls, name: str) -> Any:
        # アンダースコアで始まる名前はファサード自身の属性として扱う
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(cls.get_facade_root(), name)


class Facade(metaclass=FacadeMeta):
    """ファサードの基底クラス"""

    container: Container = default_container

    @classmethod
    def get_facade_accessor(cls) -> str:
        """コンテナに登録された名前"""
        raise NotImplementedError("Subclasses must implement get_facade_accessor()")

    @classmethod
    def get_facade_root(cls) -> Any:
        return cls.container.make(cls.get_facade_accessor())

    @classmethod
    def swap(cls, instance: Any) -> Any:
        """現在のコンテキストで解決されるインスタンスを差し替える（テスト用）"""
        return cls.container.scoped(cls.get_facade_accessor(), instance)


class Forms(Facade):
    """FormRenderer のファサード

    See:
        bootstrap_forms.form_renderer.FormRenderer
    """

    @classmethod
    def get_facade_accessor(cls) -> str:
        return FORMS


def register_forms(
    session: SessionState | Mapping[str, Any] | None,
    url_for: UrlResolver,
    settings: FormsSettings | None = None,
    container: Container | None = None,
) -> FormRenderer:
    """リクエストごとの FormRenderer を生成してコンテナに登録

    セッションはリクエスト単位なので、リクエストの開始時（ミドルウェアなど）で呼び出す。
    登録は現在のコンテキストに限られるため、並行して処理される
    別のリクエスト（スレッドや asyncio のタスク）の Forms からは見えない。
    """
    renderer = FormRenderer(session, url_for, settings)
    (container or default_container).scoped(FORMS, renderer)
    return renderer
