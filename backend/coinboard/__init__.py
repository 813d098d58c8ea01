"""coinboard: cryptocurrency price relay and comparison client."""

__version__ = "0.1.0"
