"""
HTML要素の生成モジュール
属性・CSSクラス・子要素を組み立てて Markup として出力する
"""

from typing import Any, Iterable

from markupsafe import Markup, escape

# 終了タグを持たない要素
VOID_TAGS = frozenset({"input", "br", "hr", "img", "meta", "link"})


class Element:
    """HTML要素を表すクラス

    メソッドは self を返すのでチェーンして組み立てられる::

        Element("div").add_class("alert").attribute("role", "alert").add_child("OK")

    ``__html__`` を実装しているため Jinja2 などでそのまま出力できる。
    """

    def __init__(self, tag: str):
        self.tag = tag
        self.attributes: dict[str, Any] = {}
        self.classes: list[str] = []
        self.children: list[Any] = []

    # -- 属性 --

    def attribute(self, name: str, value: Any = True) -> "Element":
        """属性を設定する（True は値なし属性、False/None は属性を出力しない）"""
        self.attributes[name] = value
        return self

    def attribute_if(self, condition: Any, name: str, value: Any = True) -> "Element":
        """条件が真のときだけ属性を設定する"""
        if condition:
            self.attribute(name, value)
        return self

    def get_attribute(self, name: str, default: Any = None) -> Any:
        return self.attributes.get(name, default)

    def forget_attribute(self, name: str) -> "Element":
        self.attributes.pop(name, None)
        return self

    def id(self, value: str) -> "Element":
        return self.attribute("id", value)

    # -- CSSクラス --

    def add_class(self, *classes: str) -> "Element":
        """CSSクラスを追加する（空白区切りの文字列も可、重複は無視）"""
        for value in classes:
            for name in (value or "").split():
                if name not in self.classes:
                    self.classes.append(name)
        return self

    def set_class(self, *classes: str) -> "Element":
        """CSSクラスを置き換える"""
        self.classes = []
        return self.add_class(*classes)

    def has_class(self, name: str) -> bool:
        return name in self.classes

    # -- 子要素 --

    def add_child(self, child: Any) -> "Element":
        """子要素を追加する（None は無視、文字列は描画時にエスケープ）"""
        if child is not None:
            self.children.append(child)
        return self

    def add_children(self, children: Iterable[Any]) -> "Element":
        for child in children:
            self.add_child(child)
        return self

    def html(self, contents: Any) -> "Element":
        """子要素を置き換える"""
        self.children = []
        return self.add_child(contents)

    # -- 描画 --

    def render_attributes(self) -> str:
        parts: list[str] = []
        if self.classes:
            parts.append(f'class="{escape(" ".join(self.classes))}"')
        for name, value in self.attributes.items():
            if value is True:
                parts.append(name)
            elif value is not False and value is not None:
                parts.append(f'{name}="{escape(value)}"')
        return (" " + " ".join(parts)) if parts else ""

    def render_children(self) -> Markup:
        return Markup("").join(escape(child) for child in self.children)

    def open(self) -> Markup:
        """開始タグと子要素を返す（終了タグは含まない）"""
        start = Markup(f"<{self.tag}{self.render_attributes()}>")
        if self.tag in VOID_TAGS:
            return start
        return start + self.render_children()

    def close(self) -> Markup:
        if self.tag in VOID_TAGS:
            return Markup("")
        return Markup(f"</{self.tag}>")

    def render(self) -> Markup:
        return self.open() + self.close()

    def __html__(self) -> str:
        return str(self.render())

    def __str__(self) -> str:
        return str(self.render())

    def __repr__(self) -> str:
        return f"Element({self.tag!r}, classes={self.classes!r}, attributes={self.attributes!r})"


class HtmlBuilder:
    """フォーム部品を生成するファクトリ

    値の解決（旧入力やモデル属性）は呼び出し側で行い、ここでは要素を組み立てるだけ。
    """

    @staticmethod
    def _stringify(value: Any) -> str | None:
        if value is None:
            return None
        if isinstance(value, bool):
            return "1" if value else "0"
        return str(value)

    def element(self, tag: str) -> Element:
        return Element(tag)

    def div(self, contents: Any = None) -> Element:
        return Element("div").add_child(contents)

    def label(self, contents: Any = None, for_: str | None = None) -> Element:
        return Element("label").attribute_if(for_, "for", for_).add_child(contents)

    def input(self, type: str, name: str | None = None, value: Any = None) -> Element:
        """<input> を生成（password は値を出力しない）"""
        has_value = value is not None and type != "password"
        return (
            Element("input")
            .attribute_if(type, "type", type)
            .attribute_if(name, "name", name)
            .attribute_if(name, "id", name)
            .attribute_if(has_value, "value", self._stringify(value))
        )

    def hidden(self, name: str, value: Any = None) -> Element:
        return self.input("hidden", name, value)

    def textarea(self, name: str | None = None, value: Any = None) -> Element:
        return (
            Element("textarea")
            .attribute_if(name, "name", name)
            .attribute_if(name, "id", name)
            .add_child(self._stringify(value))
        )

    def select(
        self,
        name: str | None = None,
        options: Iterable[tuple[Any, Any]] = (),
        value: Any = None,
        multiple: bool = False,
    ) -> Element:
        """<select> を生成（options は (値, 表示名) の組）"""
        if isinstance(value, (list, tuple, set, frozenset)):
            selected = {str(v) for v in value}
        elif value is None:
            selected = set()
        else:
            selected = {self._stringify(value)}

        field_name = f"{name}[]" if (multiple and name) else name
        element = (
            Element("select")
            .attribute_if(field_name, "name", field_name)
            .attribute_if(name, "id", name)
            .attribute_if(multiple, "multiple")
        )
        for option_value, option_label in options:
            option_value = self._stringify(option_value)
            element.add_child(
                Element("option")
                .attribute("value", option_value)
                .attribute_if(option_value in selected, "selected")
                .add_child(option_label)
            )
        return element

    def multiselect(
        self,
        name: str | None = None,
        options: Iterable[tuple[Any, Any]] = (),
        value: Any = None,
    ) -> Element:
        return self.select(name, options, value, multiple=True)

    def checkbox(
        self,
        name: str | None = None,
        checked: bool = False,
        value: Any = "1",
        id: str | None = None,
    ) -> Element:
        element = self.input("checkbox", name, value).attribute_if(checked, "checked")
        if id:
            element.attribute("id", id)
        return element

    def radio(self, name: str | None = None, checked: bool = False, value: Any = "on") -> Element:
        element = self.input("radio", name, value).attribute_if(checked, "checked")
        if name and value is not None:
            element.attribute("id", f"{name}_{self._stringify(value)}")
        return element

    def button(self, contents: Any = None, type: str | None = None, name: str | None = None) -> Element:
        return (
            Element("button")
            .attribute_if(type, "type", type)
            .attribute_if(name, "name", name)
            .add_child(contents)
        )

    def form(self, method: str = "POST", action: str | None = None) -> Element:
        return Element("form").attribute("method", method).attribute_if(action, "action", action)
