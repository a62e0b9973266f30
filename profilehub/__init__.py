"""profilehub: user profiles and friend lists, server-rendered."""

__version__ = "0.1.0"
