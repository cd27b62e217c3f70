"""Risk Matrix — likelihood × impact charts for risk registers."""

__version__ = "1.0.0"
