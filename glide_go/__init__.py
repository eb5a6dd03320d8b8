"""Go framework detector and command provider for Glide."""

__version__ = "0.3.0"
