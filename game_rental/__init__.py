"""Console client for the game rental store."""

__version__ = "1.0.0"
