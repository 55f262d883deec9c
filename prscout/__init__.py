"""Pull request discovery across source-control providers."""

__version__ = "0.1.0"
