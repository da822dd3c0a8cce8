"""CodeTube: code complexity analysis with tutorial video recommendations."""

__version__ = "1.0.0"
