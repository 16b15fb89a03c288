"""
Base exceptions for jview.

Expected errors that a template author or an application integrator can fix
(configuration issues, unknown tags, missing templates) inherit from
JViewUserError.

Structural bugs in tag pairing are NOT user errors: WidgetStackError derives
from RuntimeError and always propagates with a full traceback.
"""

from __future__ import annotations

from typing import Optional


class JViewUserError(Exception):
    """
    Base class for all user-facing errors in jview.

    These errors indicate problems that the user can fix:
    configuration issues, unregistered tags, missing templates, etc.
    """
    pass


class InvalidConfigError(JViewUserError):
    """Raised when the renderer, a tag or a widget is misconfigured."""
    pass


class UnknownPropertyError(InvalidConfigError):
    """Raised when a widget is constructed with an attribute it does not declare."""

    def __init__(self, owner: str, name: str):
        self.owner = owner
        self.name = name
        super().__init__(f"Setting unknown property: {owner}.{name}")


class UnknownTagError(InvalidConfigError):
    """Raised when a template uses a tag that no plugin registered."""

    def __init__(self, name: str, template_name: str = "", lineno: Optional[int] = None):
        self.name = name
        self.template_name = template_name
        self.lineno = lineno
        where = ""
        if template_name:
            where = f" (template '{template_name}', line {lineno})" if lineno else f" (template '{template_name}')"
        super().__init__(f"Tag \"{name}\" is not registered{where}")


class TemplateRenderError(JViewUserError):
    """Wraps engine-level failures (syntax errors, missing templates)."""

    def __init__(self, message: str, template_name: str = "", cause: Optional[Exception] = None):
        super().__init__(f"Template render error in '{template_name}': {message}")
        self.template_name = template_name
        self.cause = cause


class WidgetStackError(RuntimeError):
    """
    Mismatched widget open/close or capture begin/end.

    Signals a bug in tag pairing; never recovered from.
    """
    pass


class JViewWarning(UserWarning):
    """Non-fatal problem in a template tag (e.g. a missing required attribute)."""
    pass


__all__ = [
    "JViewUserError",
    "InvalidConfigError",
    "UnknownPropertyError",
    "UnknownTagError",
    "TemplateRenderError",
    "WidgetStackError",
    "JViewWarning",
]
