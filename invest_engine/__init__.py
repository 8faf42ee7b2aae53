"""Investment lifecycle and multi-level distribution engine."""

__version__ = "1.0.0"
