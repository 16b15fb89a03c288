from .load import load_renderer_config
from .model import RendererConfig

__all__ = ["RendererConfig", "load_renderer_config"]
