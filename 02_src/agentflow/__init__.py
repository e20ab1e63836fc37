"""Manufacturing analytics with live, step-by-step agent progress."""

from .app import Application, IApplication

__version__ = "0.1.0"

__all__ = ["Application", "IApplication", "__version__"]
