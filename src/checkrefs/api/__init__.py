"""HTTP API for the reference checker."""

from .. import __version__

__all__ = ["__version__"]
