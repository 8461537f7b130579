"""AI Computer Controller: natural-language requests to executed file-management scripts."""

__version__ = "0.1.0"
