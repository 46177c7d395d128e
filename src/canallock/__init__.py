"""Real-time canal lock chamber simulation."""

__version__ = "1.0.0"
