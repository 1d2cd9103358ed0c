"""Plant Doctor: identify plants and diagnose plant health from a photo."""

__version__ = "1.0.0"
