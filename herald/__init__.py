"""Herald - release announcement generator."""

__version__ = "0.2.0"
