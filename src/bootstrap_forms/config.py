"""
設定モジュール
CSSクラス名やセッションキーを環境変数（BOOTSTRAP_FORMS_*）から読み込む
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class FormsSettings(BaseSettings):
    """フォーム描画の設定"""

    model_config = SettingsConfigDict(
        env_prefix="BOOTSTRAP_FORMS_", env_file=".env", extra="ignore"
    )

    # CSSクラス
    control_class: str = "form-control"
    select_class: str = "form-select"
    group_class: str = "form-group mb-3"
    label_class: str = "strong mb-1"
    invalid_class: str = "is-invalid"
    feedback_class: str = "invalid-feedback"
    checks_class: str = "form-checks"
    check_class: str = "form-check"
    check_input_class: str = "form-check-input"
    check_label_class: str = "form-check-label"
    error_alert_class: str = "alert alert-danger"
    error_alert_id: str = "error-messages"
    success_alert_class: str = "alert alert-success"
    messages_class: str = "messages"
    button_class: str = "btn"
    submit_class: str = "btn-primary"

    # セッションキー
    errors_key: str = "errors"
    success_key: str = "success"
    error_key: str = "error"
    old_input_key: str = "_old_input"
    csrf_session_key: str = "_csrf_token"

    # 隠しフィールド名
    csrf_field: str = "_token"
    method_field: str = "_method"

    # checkboxes で選択状態を求める関連コレクション名
    default_relation: str = "roles"


@lru_cache
def get_settings() -> FormsSettings:
    return FormsSettings()
