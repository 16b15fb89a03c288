"""
Теги представления: заголовок, meta, URL, регистрация скриптов и стилей.
"""

from __future__ import annotations

import pytest
from markupsafe import Markup

from jview import Application, JViewWarning, UrlManager, View

from tests.infrastructure import make_app, make_view


def render(view: View, src: str, **params) -> str:
    return view.renderer.render_string(view, src, params)


def test_title_sets_view_title(view: View):
    assert render(view, "{% title %}  Web Site Login {% endtitle %}") == ""
    assert view.title == "Web Site Login"


def test_title_body_is_rendered(view: View):
    render(view, "{% title %}{{ name }} | Shop{% endtitle %}", name="Tea")
    assert view.title == "Tea | Shop"


def test_description_collapses_whitespace(view: View):
    render(view, "{% description %}\n   Fresh   tea\n  daily {% enddescription %}")
    assert view.meta_tags["description"] == Markup('<meta name="description" content="Fresh tea daily">')


def test_meta_is_keyed_by_name(view: View):
    render(view, "{% meta name='keywords' content='tea, cups' %}{% meta name='keywords' content='tea' %}")
    assert view.meta_tags == {"keywords": Markup('<meta name="keywords" content="tea">')}


def test_meta_without_name_is_appended(view: View):
    render(view, "{% meta charset='utf-8' %}")
    assert list(view.meta_tags.values()) == [Markup('<meta charset="utf-8">')]


def test_path_builds_relative_url(view: View):
    assert render(view, "{% path route='blog/view' id=5 tag=none %}") == "/blog/view?id=5"


def test_url_builds_absolute_url(tmp_path):
    app = make_app(tmp_path, url_manager=UrlManager(base_url="/shop", host_info="http://example.com"))
    view = make_view(app)
    assert render(view, "{% url route='site/index' %}") == "http://example.com/shop/site/index"
    assert render(view, "{% url route='site/index' scheme='https' %}") == "https://example.com/shop/site/index"


@pytest.mark.parametrize("tag", ["path", "url"])
def test_missing_route_warns_and_renders_empty(view: View, tag):
    with pytest.warns(JViewWarning, match="route"):
        assert render(view, f"[{{% {tag} id=1 %}}]") == "[]"


def test_register_js_file_with_position(view: View):
    render(view, "{% registerJsFile url='/js/a.js' position='POS_HEAD' %}{% registerJsFile url='/js/b.js' %}")
    assert view.js_files[View.POS_HEAD] == {"/js/a.js": Markup('<script src="/js/a.js"></script>')}
    assert list(view.js_files[View.POS_END]) == ["/js/b.js"]


def test_register_js_file_depends_and_key(view: View):
    render(view, "{% registerJsFile url='/js/a.js' key='app' depends=['jquery'] %}")
    assert "app" in view.js_files[View.POS_END]
    assert view.dependencies == {"app": ["jquery"]}


def test_register_js_file_missing_url_warns(view: View):
    with pytest.warns(JViewWarning, match="url"):
        render(view, "{% registerJsFile key='x' %}")
    assert view.js_files == {}


@pytest.mark.parametrize(
    "position, expected",
    [(None, View.POS_READY), ("POS_LOAD", View.POS_LOAD), ("POS_NOPE", View.POS_READY)],
)
def test_register_js_block_position(view: View, position, expected):
    attrs = f" position='{position}'" if position else ""
    render(view, f"{{% registerJs key='init'{attrs} %}}alert(1);{{% endregisterJs %}}")
    assert view.js == {expected: {"init": "alert(1);"}}


def test_register_js_without_key_deduplicates_by_content(view: View):
    render(view, "{% registerJs %}a();{% endregisterJs %}{% registerJs %}a();{% endregisterJs %}")
    assert len(view.js[View.POS_READY]) == 1


def test_register_css_file_and_block(view: View):
    render(
        view,
        "{% registerCssFile url='/css/a.css' media='print' %}"
        "{% registerCss key='main' %}body{color:red}{% endregisterCss %}",
    )
    assert view.css_files["/css/a.css"] == Markup('<link href="/css/a.css" rel="stylesheet" media="print">')
    assert view.css["main"] == Markup("<style>body{color:red}</style>")


def test_registered_assets_end_up_in_page_html(view: View):
    render(
        view,
        "{% registerCssFile url='/a.css' %}"
        "{% registerJs position='POS_LOAD' %}go();{% endregisterJs %}"
        "{% registerJsFile url='/a.js' %}",
    )
    assert '<link href="/a.css" rel="stylesheet">' in view.render_head_html()
    body_end = view.render_body_end_html()
    assert '<script src="/a.js"></script>' in body_end
    assert "jQuery(window).on('load', function () {\ngo();\n});" in body_end


def test_view_and_app_are_template_variables(app: Application, view: View):
    view.title = "Home"
    assert render(view, "{{ this.title }}|{{ app is not none }}", this="ignored") == "Home|True"
