"""Interactive schema diagram engine for SQL practice tools."""

__version__ = "1.0.0"
