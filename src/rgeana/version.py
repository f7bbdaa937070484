"""Version of the rgeana package."""

__version__ = "0.1.0"
