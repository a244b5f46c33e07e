"""
メインのフォーム描画クラス
ルーティングとセッション状態（バリデーションエラー、フラッシュメッセージ）に連動した
Bootstrap形式のフォーム部品を生成
"""

import logging
from typing import Any, Literal, Mapping, Sequence

from markupsafe import Markup
from pydantic import BaseModel, ConfigDict

from .config import FormsSettings, get_settings
from .elements import Element, HtmlBuilder
from .field_types import FieldDescriptor, FieldType, SelectOption, UnsupportedFieldType
from .models import (
    is_persisted,
    model_identifier,
    model_value,
    related_ids,
    route_parameter,
)
from .routing import UrlResolver, resource_route
from .session import SessionState

logger = logging.getLogger(__name__)

Options = Mapping[Any, Any] | Sequence[SelectOption | str] | None


class FormContext(BaseModel):
    """create() で開かれたフォームの情報"""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    method: Literal["POST", "PUT"] = "POST"
    url: str
    accepts_files: bool = False
    model: Any = None


def is_empty(value: Any) -> bool:
    """値が空かどうか（None, "", "0", 0, False, 空のコレクション）"""
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value == "" or value == "0"
    if isinstance(value, (int, float)):
        return value == 0
    try:
        return len(value) == 0
    except TypeError:
        return False


class FormRenderer:
    """セッション状態とルーティングに連動したフォーム部品を生成するクラス"""

    def __init__(
        self,
        session: SessionState | Mapping[str, Any] | None = None,
        url_for: UrlResolver | None = None,
        settings: FormsSettings | None = None,
        builder: HtmlBuilder | None = None,
    ):
        """
        Args:
            session: リクエストのセッション、または SessionState
            url_for: 名前付きルートを解決する関数 ``url_for(name, **params)``
            settings: CSSクラスやセッションキーの設定
            builder: HTML要素のファクトリ
        """
        self.settings = settings or get_settings()
        if isinstance(session, SessionState):
            self.state = session
        else:
            self.state = SessionState(session, self.settings)
        self.url_for = url_for
        self.html = builder or HtmlBuilder()
        self.context: FormContext | None = None

    @property
    def bound_model(self) -> Any:
        return self.context.model if self.context is not None else None

    # -- フォームタグ --

    def create(self, base_route: str, model: Any = None, accepts_files: bool = False) -> Markup:
        """
        モデル用のフォーム開始タグを生成

        Args:
            base_route: コントローラのベースルート名。
                例えば user なら、新規作成の送信先は user.store、
                更新の送信先は user.update になる。
                update ルートはモデルのクラス名（小文字）を名前付きパラメータとして受け取る
                （例: "/users/{user}"）
            model: 編集対象のモデル。新規作成なら None
            accepts_files: enctype="multipart/form-data" を付けるか

        Returns:
            開始タグ（CSRFトークンやメソッド指定の隠しフィールドを含む）
        """
        if is_persisted(model):
            method = "PUT"
            url = self._resolve(
                resource_route(base_route, "update"),
                **{route_parameter(model): model_identifier(model)},
            )
        else:
            method = "POST"
            model = None
            url = self._resolve(resource_route(base_route, "store"))

        self.context = FormContext(
            method=method, url=url, accepts_files=accepts_files, model=model
        )
        logger.debug("opening %s form for %s -> %s", method, base_route, url)

        form = self.html.form("POST", url).attribute_if(
            accepts_files, "enctype", "multipart/form-data"
        )
        token = self.state.csrf_token()
        if token:
            form.add_child(self.html.hidden(self.settings.csrf_field, token))
        if method != "POST":
            form.add_child(self.html.hidden(self.settings.method_field, method))

        return form.open()

    def end(self) -> Markup:
        """フォームの終了タグ"""
        self.context = None
        return self.html.form().close()

    def _resolve(self, name: str, **params: Any) -> str:
        if self.url_for is None:
            raise RuntimeError("URLリゾルバ（url_for）が設定されていません")
        return str(self.url_for(name, **params))

    # -- フィールド --

    def field(
        self,
        label: str,
        name: str,
        type: str = "text",
        value: Any = None,
        options: Options = None,
        *,
        model: Any = None,
        relation: str | None = None,
    ) -> Element:
        """
        ラベル・入力要素・エラー表示をまとめたフォームグループを生成

        Args:
            label: 表示用のラベル
            name: モデルのフィールド名
            type: フィールドタイプ（FieldType の値）
            value: フィールドの値
            options: 選択肢。"readonly" と "checked" キーはフラグとして扱う
            model: 値や選択状態を取得するモデル（省略時は create() で渡したモデル）
            relation: checkboxes の選択状態を求める関連コレクション名

        Raises:
            UnsupportedFieldType: 未対応のフィールドタイプが指定された場合
        """
        descriptor = FieldDescriptor.build(label, name, type, value, options)
        if model is None:
            model = self.bound_model

        control = self._render_control(
            descriptor, model, relation or self.settings.default_relation
        )
        if descriptor.type is FieldType.SELECT:
            control.add_class(self.settings.select_class)
        else:
            control.add_class(self.settings.control_class)

        feedback = self.error(name)
        if feedback is not None:
            control.add_class(self.settings.invalid_class)

        label_element = self.html.label(label, name).add_class(self.settings.label_class)

        return (
            self.html.div()
            .add_class(self.settings.group_class)
            .add_child(label_element)
            .add_child(control)
            .add_child(feedback)
        )

    def _render_control(self, field: FieldDescriptor, model: Any, relation: str) -> Element:
        """フィールドタイプに応じた入力要素を生成"""
        field_type = field.type
        choices = [(option.value, option.label) for option in field.options]

        if field_type.is_plain_input:
            return self.html.input(
                field_type.input_type, field.name, self._value(field, model)
            )
        elif field_type is FieldType.TEXTAREA:
            return self.html.textarea(field.name, self._value(field, model))
        elif field_type is FieldType.NUMBER:
            return (
                self.html.input("number", field.name, self._value(field, model))
                .attribute_if(field.readonly, "readonly")
                .attribute("step", "any")
            )
        elif field_type is FieldType.SELECT:
            return self.html.select(
                field.name, choices, self._value(field, model)
            ).attribute_if(field.readonly, "readonly")
        elif field_type is FieldType.MULTISELECT:
            return self.html.multiselect(field.name, choices, self._value(field, model))
        elif field_type is FieldType.CHECKBOX:
            return self.html.checkbox(field.name, not is_empty(field.value), field.value)
        elif field_type is FieldType.CHECKBOXES:
            return self._render_checkboxes(field, model, relation)
        elif field_type is FieldType.RADIO:
            return self.html.radio(field.name, field.checked, field.value)

        raise UnsupportedFieldType(field_type.value)

    def _render_checkboxes(self, field: FieldDescriptor, model: Any, relation: str) -> Element:
        """選択肢ごとのチェックボックス群

        選択状態は旧入力があればそこから、なければモデルの関連コレクションから求める。
        チェックを全部外して送信したフィールドは旧入力に含まれないので、旧入力があれば
        モデルには戻らず未選択とする。
        """
        if self.state.has_old_input():
            selected = {str(value) for value in self._old_choices(field.name)}
        else:
            selected = {str(identifier) for identifier in related_ids(model, relation)}
        container = self.html.div().add_class(self.settings.checks_class)

        for option in field.options:
            checkbox_id = f"{field.name}_{option.value}"
            checkbox = self.html.checkbox(
                f"{field.name}[]", option.value in selected, option.value, id=checkbox_id
            ).add_class(self.settings.check_input_class)
            label = self.html.label(option.label.capitalize(), checkbox_id).add_class(
                self.settings.check_label_class
            )
            container.add_child(
                self.html.div()
                .add_class(self.settings.check_class)
                .add_child(checkbox)
                .add_child(label)
            )

        return container

    def _old_choices(self, name: str) -> list[Any]:
        # フレームワークによっては "name[]" のまま保存される
        old = self.state.old(name)
        if old is None:
            old = self.state.old(f"{name}[]")
        if old is None:
            return []
        if isinstance(old, (str, int)):
            return [old]
        return list(old)

    def _value(self, field: FieldDescriptor, model: Any) -> Any:
        """旧入力 → 指定値 → モデルの属性 の順で値を決める"""
        if self.state.has_old_input():
            old = self.state.old(field.name)
            if old is not None:
                return old
        if field.value is not None:
            return field.value
        return model_value(model, field.name)

    def dropdown(
        self, label: str, name: str, options: Options = None, value: Any = None
    ) -> Element:
        """ドロップダウン（select）のフォームグループ"""
        return self.field(label, name, "select", value, options)

    def checkboxes(
        self,
        label: str,
        name: str,
        options: Options = None,
        value: Any = None,
        *,
        relation: str | None = None,
    ) -> Element:
        return self.field(label, name, "checkboxes", value, options, relation=relation)

    def datepicker(self, label: str, name: str, value: Any = None) -> Element:
        return self.field(label, name, "date", value)

    # -- エラー・メッセージ --

    def error(self, name: str) -> Element | None:
        """
        指定フィールドのバリデーションエラーを表示する要素

        Returns:
            エラーがあれば invalid-feedback の div、なければ None
        """
        messages = self.state.errors().get(name)
        if not messages:
            return None
        return self.html.div(self._join(messages)).add_class(self.settings.feedback_class)

    def errors(self) -> Element | None:
        """全フィールドのバリデーションエラーとフラッシュエラーをまとめた警告"""
        messages = self.state.errors().all() + self.state.error_messages()
        if not messages:
            return None
        return (
            self.html.div(self._join(messages))
            .id(self.settings.error_alert_id)
            .add_class(self.settings.error_alert_class)
        )

    def success(self) -> Element | None:
        """フラッシュされた成功メッセージ"""
        message = self.state.success()
        if not message:
            return None
        return self.html.div(message).add_class(self.settings.success_alert_class)

    def messages(self) -> Element | None:
        """成功メッセージとエラーをひとつの div にまとめる（どちらもなければ None）"""
        success = self.success()
        errors = self.errors()
        if success is None and errors is None:
            return None
        return (
            self.html.div()
            .add_class(self.settings.messages_class)
            .add_child(success)
            .add_child(errors)
        )

    @staticmethod
    def _join(messages: Sequence[str]) -> Markup:
        return Markup("<br>").join(messages)

    # -- ボタン --

    def button(
        self, contents: Any = None, type: str | None = None, name: str | None = None
    ) -> Element:
        """btn クラスのボタン（type と name は指定したときだけ出力）"""
        return self.html.button(contents, type, name).add_class(self.settings.button_class)

    def submit(self, text: Any = None) -> Element:
        return self.button(text, "submit").add_class(self.settings.submit_class)
