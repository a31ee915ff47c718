"""adrstore: manage a directory of numbered Architecture Decision Records."""

__version__ = "0.1.0"
