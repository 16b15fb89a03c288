"""
Жизненный цикл виджета через WidgetBridge без шаблонизатора.
"""

from __future__ import annotations

from typing import List

import pytest

from jview import InvalidConfigError, UnknownPropertyError, Widget, WidgetStackError
from jview.template import WidgetBridge, WidgetTable, render_scope
from jview.types import TagKind, TagPhase, WidgetRegistration

RUNS: List[str] = []


class Result(Widget):
    result = ""

    def run(self):
        return self.result


class Tagged(Widget):
    name = ""

    def init(self):
        self.echo(f"<{self.name}>")

    def run(self):
        RUNS.append(self.name)
        return f"</{self.name}>"


@pytest.fixture
def bridge() -> WidgetBridge:
    RUNS.clear()
    table = WidgetTable()
    table.register(WidgetRegistration("Result", Result, TagKind.BLOCK))
    table.register(WidgetRegistration("Tagged", Tagged, TagKind.BLOCK))
    table.register(WidgetRegistration("Inline", Result, TagKind.FUNCTION))
    return WidgetBridge(table)


@pytest.mark.parametrize("body", ["", "X"])
@pytest.mark.parametrize("result", ["", "Y"])
def test_close_returns_body_then_run_result(bridge, body, result):
    reg = bridge.resolve("Result")
    with render_scope() as scope:
        bridge.open(scope, reg, {"result": result})
        assert bridge.close(scope, body) == body + result
        assert scope.depth == 0


def test_invoke_equals_open_then_close_with_empty_body(bridge):
    reg = bridge.resolve("Inline")
    with render_scope() as scope:
        invoked = bridge.invoke(scope, reg, {"result": "Y"})
        bridge.open(scope, reg, {"result": "Y"})
        manual = bridge.close(scope, "")
    assert invoked == manual == "Y"


def test_nested_frames_close_lifo_with_nested_captures(bridge):
    reg = bridge.resolve("Tagged")
    with render_scope() as scope:
        outer = bridge.open(scope, reg, {"name": "a"})
        inner = bridge.open(scope, reg, {"name": "b"})
        assert scope.widgets == [outer, inner]

        inner_out = bridge.close(scope, "in")
        outer_out = bridge.close(scope, inner_out)

    assert RUNS == ["b", "a"]
    assert inner_out == "<b>in</b>"
    assert outer_out == "<a><b>in</b></a>"


def test_close_without_open_is_fatal(bridge):
    with render_scope() as scope:
        with pytest.raises(WidgetStackError):
            bridge.close(scope, "")


def test_assign_binds_widget_and_is_not_passed_to_constructor(bridge):
    variables = {}
    reg = bridge.resolve("Result")
    with render_scope() as scope:
        widget = bridge.open(scope, reg, {"assign": "w", "result": "Y"}, variables)
        assert variables["w"] is widget
        assert bridge.close(scope) == "Y"


def test_unknown_tag_error_names_the_tag(bridge):
    with render_scope():
        with pytest.raises(InvalidConfigError, match="Foo"):
            bridge.dispatch("Foo", None)


def test_dispatch_routes_by_kind_and_phase(bridge):
    with render_scope():
        widget = bridge.dispatch("Result", TagPhase.OPENING, {"result": "Y"})
        assert isinstance(widget, Result)
        assert bridge.dispatch("Result", TagPhase.CLOSING, body="X") == "XY"
        assert bridge.dispatch("Inline", None, {"result": "Z"}) == "Z"


def test_dispatch_rejects_phase_mismatch(bridge):
    with render_scope():
        with pytest.raises(InvalidConfigError, match="function tag"):
            bridge.dispatch("Inline", TagPhase.OPENING)
        with pytest.raises(InvalidConfigError, match="block tag"):
            bridge.dispatch("Result", None)


def test_failed_construction_leaves_no_open_frame(bridge):
    reg = bridge.resolve("Result")
    with render_scope() as scope:
        with pytest.raises(UnknownPropertyError, match="Result.nope"):
            bridge.open(scope, reg, {"nope": 1})
        assert scope.depth == 0
        assert scope.widgets == []


def test_run_error_still_ends_capture():
    class Failing(Widget):
        def run(self):
            raise ValueError("boom")

    table = WidgetTable()
    table.register(WidgetRegistration("Failing", Failing, TagKind.BLOCK))
    bridge = WidgetBridge(table)

    with render_scope() as scope:
        bridge.open(scope, bridge.resolve("Failing"))
        with pytest.raises(ValueError, match="boom"):
            bridge.close(scope, "body")
        assert scope.depth == 0


def test_abort_discards_frame(bridge):
    with render_scope() as scope:
        bridge.open(scope, bridge.resolve("Tagged"), {"name": "a"})
        bridge.abort(scope)
        assert scope.depth == 0 and scope.widgets == []


def test_widget_table_registration_is_idempotent(caplog):
    table = WidgetTable()
    reg = WidgetRegistration("Nav", "pkg.Nav", TagKind.FUNCTION)
    assert table.register(reg) is True
    assert table.register(reg) is False
    assert len(table) == 1

    with caplog.at_level("WARNING"):
        assert table.register(WidgetRegistration("Nav", "pkg.Other", TagKind.FUNCTION)) is True
    assert "overwritten" in caplog.text
    assert table.get("Nav").widget_class == "pkg.Other"
