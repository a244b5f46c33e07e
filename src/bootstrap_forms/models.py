"""
モデル連携のヘルパー
永続化済みかの判定、識別子、関連コレクションの取得を行う
"""

from typing import Any, Iterable, Mapping


def is_persisted(model: Any) -> bool:
    """モデルが永続化済み（識別子を持つ）かどうか

    ``exists`` 属性があればそれに従い、なければ ``id`` が None でないかで判定する。
    """
    if model is None:
        return False
    exists = getattr(model, "exists", None)
    if exists is not None:
        return bool(exists)
    return model_identifier(model) is not None


def model_identifier(model: Any) -> Any:
    if isinstance(model, Mapping):
        return model.get("id")
    return getattr(model, "id", None)


def route_parameter(model: Any) -> str:
    """ルートパラメータ名（クラス名の小文字）"""
    return type(model).__name__.lower()


def model_value(model: Any, name: str) -> Any:
    if model is None:
        return None
    if isinstance(model, Mapping):
        return model.get(name)
    return getattr(model, name, None)


def related_ids(model: Any, relation: str) -> list[Any]:
    """関連コレクションの識別子一覧

    要素が識別子を持つオブジェクトならその ``id``、そうでなければ要素自体を返す。
    """
    if not is_persisted(model):
        return []
    related: Iterable[Any] | None = model_value(model, relation)
    if not related:
        return []
    ids = []
    for item in related:
        identifier = model_identifier(item) if not isinstance(item, (str, int)) else item
        if identifier is not None:
            ids.append(identifier)
    return ids
