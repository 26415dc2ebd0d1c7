"""Find resource strings duplicated across generated resx accessor types."""

__version__ = "0.1.0"
