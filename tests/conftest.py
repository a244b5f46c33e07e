"""共通のフィクスチャ"""

import pytest

from bootstrap_forms import FormRenderer, FormsSettings, RouteTable


@pytest.fixture
def settings():
    return FormsSettings()


@pytest.fixture
def routes():
    """user リソースと role リソースを登録したルートテーブル"""
    table = RouteTable()
    table.resource("user", "/users")
    table.resource("admin.role", "/admin/roles", "role")
    return table


@pytest.fixture
def make_renderer(routes, settings):
    """セッション辞書を受け取って FormRenderer を生成するファクトリ"""

    def _make(session=None):
        return FormRenderer(session if session is not None else {}, routes, settings)

    return _make


@pytest.fixture
def renderer(make_renderer):
    return make_renderer()
