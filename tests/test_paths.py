"""
Соглашение о каталогах представлений: resolve_view_path и include/extends.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from jview import InvalidConfigError
from jview.paths import PathContext, resolve_view_file, resolve_view_path

from tests.infrastructure import make_renderer, make_view, render_view, write


@pytest.fixture
def ctx(app, tmp_path: Path) -> PathContext:
    return PathContext(
        app,
        view_file=app.view_path / "site" / "index.html",
        context_view_path=tmp_path / "modules" / "shop" / "views",
    )


def test_alias_prefix(app, ctx):
    assert resolve_view_path("@app/widgets/views", ctx) == app.base_path / "widgets" / "views"


def test_double_slash_is_app_view_path(app, ctx):
    assert resolve_view_path("//layouts", ctx) == app.view_path / "layouts"


def test_single_slash_is_module_view_path(tmp_path, ctx):
    assert resolve_view_path("/site", ctx) == tmp_path / "modules" / "shop" / "views" / "site"


def test_single_slash_without_controller_fails(app):
    with pytest.raises(InvalidConfigError, match="no controller context"):
        resolve_view_path("/site", PathContext(app))


def test_relative_is_current_file_directory(app, ctx):
    assert resolve_view_path("partials", ctx) == app.view_path / "site" / "partials"


def test_relative_without_view_file_fails(app):
    with pytest.raises(InvalidConfigError, match="no current view file"):
        resolve_view_path("partials", PathContext(app))


def test_unknown_alias_fails(ctx):
    with pytest.raises(InvalidConfigError, match="Invalid path alias"):
        resolve_view_path("@nope/x", ctx)


def test_existing_absolute_file_is_kept(tmp_path, ctx):
    f = write(tmp_path / "abs.html", "x")
    assert resolve_view_file(str(f), ctx) == f
    assert resolve_view_file(f, ctx) == f


def test_path_context_from_view(app, tmp_path):
    view = make_view(app, module_views=tmp_path / "mod")
    ctx = PathContext.from_view(app, view)
    assert ctx.context_view_path == tmp_path / "mod"
    assert ctx.view_file is None


# ========= include / extends в шаблонах =========

def test_include_with_all_prefixes(app, tmp_path):
    module_views = tmp_path / "modules" / "shop"
    write(app.view_path / "site" / "index.html",
          "{% include '_local.html' %}|{% include '//layouts/_nav.html' %}|"
          "{% include '/site/_mod.html' %}|{% include '@views/layouts/_nav.html' %}")
    write(app.view_path / "site" / "_local.html", "local")
    write(app.view_path / "layouts" / "_nav.html", "nav")
    write(module_views / "site" / "_mod.html", "module")

    view = make_view(app, module_views=module_views)
    assert render_view(view, "site/index.html") == "local|nav|module|nav"


def test_extends_layout_from_app_views(app, view):
    write(app.view_path / "layouts" / "main.html", "<title>{% block title %}{% endblock %}</title>")
    write(app.view_path / "site" / "page.html",
          "{% extends '//layouts/main.html' %}{% block title %}Page{% endblock %}")
    assert render_view(view, "site/page.html") == "<title>Page</title>"


def test_unprefixed_include_falls_back_to_search_path(app, view):
    write(app.view_path / "site" / "index.html", "{% include 'common/_footer.html' %}")
    write(app.view_path / "common" / "_footer.html", "footer")
    assert render_view(view, "site/index.html") == "footer"


def test_module_prefix_without_controller_fails_in_template(app, view):
    write(app.view_path / "index.html", "{% include '/site/_mod.html' %}")
    with pytest.raises(InvalidConfigError, match="no controller context"):
        render_view(view, "index.html")


def test_template_dirs_follow_the_convention(app, tmp_path):
    write(tmp_path / "shared" / "_box.html", "box")
    write(app.view_path / "index.html", "{% include '_box.html' %}")
    renderer = make_renderer(app, template_dirs=["@app/shared"])
    view = make_view(app, renderer)
    assert render_view(view, "index.html") == "box"
    assert str(tmp_path / "shared") in renderer.search_path


def test_module_template_dirs_use_the_view_controller(app, tmp_path):
    module_views = tmp_path / "modules" / "shop"
    write(module_views / "shared" / "_box.html", "module box")
    write(app.view_path / "index.html", "{% include '_box.html' %}")
    renderer = make_renderer(app, template_dirs=["/shared"])
    view = make_view(app, renderer, module_views=module_views)
    assert render_view(view, "index.html") == "module box"
    assert str(module_views / "shared") in renderer.search_path
