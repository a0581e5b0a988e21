"""customgraphs package initialization.

This module exposes the primary entry point used by presentation layers to
list the custom graphs a user may see and to render them.
"""

from .api import CustomGraphsApp

__all__ = ["CustomGraphsApp"]
