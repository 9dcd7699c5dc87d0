"""stagelist: performance-queue engine for band setlists."""

from stagelist.__version__ import __version__

__all__ = ["__version__"]
