"""Release packaging for native editor plugins."""

__version__ = "0.1.0"
