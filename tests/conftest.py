from __future__ import annotations

from pathlib import Path

import pytest

from jview import Application, View, ViewRenderer

from tests.infrastructure import make_app, make_renderer, make_view
from tests.infrastructure.widgets import EVENTS

WIDGETS = "tests.infrastructure.widgets"


@pytest.fixture
def app(tmp_path: Path) -> Application:
    """Приложение во временном каталоге: views/ и runtime/ внутри."""
    (tmp_path / "views").mkdir()
    return make_app(tmp_path)


@pytest.fixture
def renderer(app: Application) -> ViewRenderer:
    """Рендерер с тестовыми виджетами в конфигурации."""
    return make_renderer(
        app,
        blocks={"Panel": f"{WIDGETS}.Panel", "Boom": f"{WIDGETS}.Boom"},
        functions={"Badge": f"{WIDGETS}.Badge", "Echoer": f"{WIDGETS}.Echoer", "Partial": f"{WIDGETS}.Partial"},
    )


@pytest.fixture
def view(app: Application, renderer: ViewRenderer) -> View:
    return make_view(app, renderer)


@pytest.fixture(autouse=True)
def _reset_widget_events():
    EVENTS.clear()
    yield
    EVENTS.clear()
