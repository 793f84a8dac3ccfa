"""linkshortener: short-code allocation and resolution engine."""

__version__ = '1.0.0'
