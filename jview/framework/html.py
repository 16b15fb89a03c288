"""HTML helpers used by the view to render registered tags."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from markupsafe import Markup, escape

# Void elements never get a closing tag
VOID_ELEMENTS = frozenset({"meta", "link", "br", "hr", "img", "input"})


def render_attributes(options: Optional[Mapping[str, Any]]) -> str:
    parts = []
    for name, value in (options or {}).items():
        if value is None or value is False:
            continue
        if value is True:
            parts.append(f" {escape(name)}")
        else:
            parts.append(f' {escape(name)}="{escape(value)}"')
    return "".join(parts)


def tag(name: str, content: str = "", options: Optional[Mapping[str, Any]] = None) -> Markup:
    html = f"<{name}{render_attributes(options)}>"
    if name in VOID_ELEMENTS:
        return Markup(html)
    return Markup(f"{html}{content}</{name}>")


def meta_tag(options: Mapping[str, Any]) -> Markup:
    return tag("meta", options=options)


def js_file(url: str, options: Optional[Mapping[str, Any]] = None) -> Markup:
    return tag("script", options={"src": url, **dict(options or {})})


def css_file(url: str, options: Optional[Mapping[str, Any]] = None) -> Markup:
    return tag("link", options={"href": url, "rel": "stylesheet", **dict(options or {})})


__all__ = ["render_attributes", "tag", "meta_tag", "js_file", "css_file"]
