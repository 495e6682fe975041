"""mcp_stirling_pdf package initialization."""

__version__ = "0.1.0"

from .cli import main  # noqa: E402

__all__ = ['main', '__version__']
