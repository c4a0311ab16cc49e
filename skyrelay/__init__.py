"""Frame format, event queue and device receive loop for a phone-to-plane TCP relay."""

__version__ = "0.1.0"
__all__ = ["__version__"]