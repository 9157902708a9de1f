"""rumcollector: real user monitoring collector for web-vitals metrics."""

__version__ = "0.1.0"
