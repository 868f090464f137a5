from .logging import configure_logging, get_logger
from .text import strip_html

__all__ = ["configure_logging", "get_logger", "strip_html"]
