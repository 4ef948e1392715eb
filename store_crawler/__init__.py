"""Single-store product crawler: discovery, extraction and media capture."""

from .version import __version__

__all__ = ["__version__"]
