"""
ルーティング
名前付きルートからURLを解決する

フォームは ``<base>.store`` / ``<base>.update`` という命名規約に従う。
URLの解決は呼び出し可能オブジェクト ``url_for(name, **params)`` に任せるので、
Starlette の ``request.url_for`` や Litestar の ``app.route_reverse`` をそのまま渡せる。
"""

import re
from typing import Any, Callable
from urllib.parse import quote, urlencode

UrlResolver = Callable[..., Any]

RESOURCE_ACTIONS = ("index", "create", "store", "show", "edit", "update", "destroy")

_PARAM_PATTERN = re.compile(r"\{(\w+)(?::\w+)?\}")


class RouteNotFound(LookupError):
    """名前付きルートが登録されていない"""

    def __init__(self, name: str, available: list[str]):
        self.name = name
        listed = ", ".join(sorted(available)) or "(none)"
        super().__init__(f"ルートが見つかりません: {name!r}（登録済み: {listed}）")


class MissingRouteParameter(ValueError):
    """パスパラメータが不足している"""

    def __init__(self, name: str, parameter: str):
        self.name = name
        self.parameter = parameter
        super().__init__(f"ルート {name!r} のパラメータ {parameter!r} が指定されていません")


def resource_route(base: str, action: str) -> str:
    """リソースのルート名を返す（例: user + store → user.store）"""
    return f"{base}.{action}"


class RouteTable:
    """名前付きルートの簡易テーブル

    Example:
        ```python
        routes = RouteTable()
        routes.resource("user", "/users", "user")
        routes.url_for("user.update", user=3)  # "/users/3"
        ```
    """

    def __init__(self, prefix: str = ""):
        self.prefix = prefix.rstrip("/")
        self.routes: dict[str, str] = {}

    def add(self, name: str, path: str) -> "RouteTable":
        self.routes[name] = path
        return self

    def resource(self, base: str, path: str, parameter: str | None = None) -> "RouteTable":
        """index/create/store/show/edit/update/destroy の7ルートを登録"""
        parameter = parameter or base.rsplit(".", 1)[-1]
        path = path.rstrip("/")
        member = f"{path}/{{{parameter}}}"
        paths = {
            "index": path,
            "create": f"{path}/create",
            "store": path,
            "show": member,
            "edit": f"{member}/edit",
            "update": member,
            "destroy": member,
        }
        for action in RESOURCE_ACTIONS:
            self.add(resource_route(base, action), paths[action])
        return self

    def has(self, name: str) -> bool:
        return name in self.routes

    def url_for(self, name: str, **params: Any) -> str:
        """ルート名とパラメータからURLを生成

        パスに含まれないパラメータはクエリ文字列になる。

        Raises:
            RouteNotFound: ルートが登録されていない場合
            MissingRouteParameter: パスパラメータが不足している場合
        """
        try:
            path = self.routes[name]
        except KeyError:
            raise RouteNotFound(name, list(self.routes)) from None

        remaining = dict(params)

        def replace(match: re.Match) -> str:
            key = match.group(1)
            if key not in remaining or remaining[key] is None:
                raise MissingRouteParameter(name, key)
            return quote(str(remaining.pop(key)), safe="")

        url = self.prefix + _PARAM_PATTERN.sub(replace, path)
        if remaining:
            url += "?" + urlencode(remaining, doseq=True)
        return url or "/"

    __call__ = url_for
