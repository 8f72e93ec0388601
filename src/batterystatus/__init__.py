"""Battery status and low power mode control for macOS."""

__version__ = "0.1.0"
