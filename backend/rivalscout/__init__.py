"""RivalScout: competitor and keyword discovery backend."""

__version__ = "1.0.0"
