"""
Shared test infrastructure for jview.

Modules:
- file_utils: creating view files and configs on disk
- app_builders: application, view and renderer builders
- widgets: small widget classes used by the template tests
"""

from .file_utils import write, write_yaml
from .app_builders import make_app, make_view, make_renderer, render_view

__all__ = [
    # File utilities
    "write", "write_yaml",

    # Builders
    "make_app", "make_view", "make_renderer", "render_view",
]
