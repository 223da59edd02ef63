"""Real-time shocker control and broadcast hub."""

__version__ = "0.1.0"
