"""
Слой представлений хост-фреймворка: приложение, view, URL, фабрика объектов.
"""

from .app import Application, Controller, Module
from .factory import create_object, resolve_callable, resolve_class
from .url import UrlManager
from .view import View

__all__ = [
    "Application",
    "Controller",
    "Module",
    "UrlManager",
    "View",
    "create_object",
    "resolve_callable",
    "resolve_class",
]
