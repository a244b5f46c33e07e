"""
サービスコンテナ
名前でサービスを登録・解決する
"""

import logging
from contextvars import ContextVar
from typing import Any, Callable

logger = logging.getLogger(__name__)

Factory = Callable[["Container"], Any]


class BindingResolutionError(LookupError):
    """登録されていないサービスを解決しようとした"""

    def __init__(self, name: str, available: list[str]):
        self.name = name
        listed = ", ".join(sorted(available)) or "(none)"
        super().__init__(f"サービスが登録されていません: {name!r}（登録済み: {listed}）")


class Container:
    """名前付きサービスのコンテナ

    bind / singleton / instance の登録はプロセス全体で共有される。
    scoped で登録したインスタンスは現在のコンテキスト（スレッドや asyncio のタスク）
    からだけ見え、同じ名前の共有登録より優先される。

    Example:
        ```python
        container = Container()
        container.singleton("settings", lambda c: FormsSettings())
        container.scoped("forms", FormRenderer(request.session, url_for))
        renderer = container.make("forms")
        ```
    """

    def __init__(self):
        self._bindings: dict[str, tuple[Factory, bool]] = {}
        self._instances: dict[str, Any] = {}
        self._scoped: ContextVar[dict[str, Any] | None] = ContextVar(
            f"container_scoped_{id(self)}", default=None
        )

    def bind(self, name: str, factory: Factory, shared: bool = False) -> None:
        """ファクトリを登録（shared=True なら初回生成したインスタンスを使い回す）"""
        self._instances.pop(name, None)
        self._bindings[name] = (factory, shared)

    def singleton(self, name: str, factory: Factory) -> None:
        self.bind(name, factory, shared=True)

    def instance(self, name: str, obj: Any) -> Any:
        """生成済みのインスタンスを登録"""
        self._instances[name] = obj
        return obj

    def scoped(self, name: str, obj: Any) -> Any:
        """現在のコンテキストだけで有効なインスタンスを登録

        リクエストごとの状態を持つサービスに使う。並行して処理される他のリクエストからは見えない。
        """
        # 辞書は毎回作り直す（コピーされたコンテキストと共有しない）
        self._scoped.set({**self._current_scope(), name: obj})
        return obj

    def _current_scope(self) -> dict[str, Any]:
        return self._scoped.get() or {}

    def has(self, name: str) -> bool:
        return (
            name in self._current_scope()
            or name in self._instances
            or name in self._bindings
        )

    def make(self, name: str) -> Any:
        """
        サービスを解決

        Raises:
            BindingResolutionError: 登録されていない場合
        """
        scope = self._current_scope()
        if name in scope:
            return scope[name]
        if name in self._instances:
            return self._instances[name]

        try:
            factory, shared = self._bindings[name]
        except KeyError:
            available = set(self._bindings) | set(self._instances) | set(scope)
            raise BindingResolutionError(name, list(available)) from None

        logger.debug("resolving %s", name)
        obj = factory(self)
        if shared:
            self._instances[name] = obj
        return obj

    def forget(self, name: str) -> None:
        """登録とインスタンスを削除（現在のコンテキストの scoped も含む）"""
        self._bindings.pop(name, None)
        self.forget_instance(name)

    def forget_instance(self, name: str) -> None:
        self._instances.pop(name, None)
        scope = self._current_scope()
        if name in scope:
            self._scoped.set({key: obj for key, obj in scope.items() if key != name})


# アプリケーション全体で使うデフォルトのコンテナ
container = Container()
