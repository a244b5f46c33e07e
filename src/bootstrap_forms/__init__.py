"""
bootstrap-forms: ルーティングとセッション状態に連動したBootstrap形式のフォーム部品を生成するライブラリ
"""

from .form_renderer import FormRenderer, FormContext
from .field_types import (
    FieldType,
    FieldDescriptor,
    SelectOption,
    UnsupportedFieldType,
)
from .elements import Element, HtmlBuilder
from .errors import ErrorBag
from .session import (
    SessionState,
    pull_flash,
    flash_errors,
    flash_success,
    flash_error,
    flash_input,
)
from .routing import RouteTable, RouteNotFound, MissingRouteParameter, resource_route
from .container import Container, BindingResolutionError, container
from .facade import Facade, Forms, register_forms
from .config import FormsSettings, get_settings

__all__ = [
    "FormRenderer",
    "FormContext",
    "FieldType",
    "FieldDescriptor",
    "SelectOption",
    "UnsupportedFieldType",
    "Element",
    "HtmlBuilder",
    "ErrorBag",
    "SessionState",
    "pull_flash",
    "flash_errors",
    "flash_success",
    "flash_error",
    "flash_input",
    "RouteTable",
    "RouteNotFound",
    "MissingRouteParameter",
    "resource_route",
    "Container",
    "BindingResolutionError",
    "container",
    "Facade",
    "Forms",
    "register_forms",
    "FormsSettings",
    "get_settings",
]

__version__ = "0.1.0"
