"""Package a Next.js standalone build into a single Bun-compiled executable."""

__version__ = "0.1.0"

__all__ = ["__version__"]
