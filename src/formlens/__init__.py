"""Typed, paginated views over schema-less form submissions and CMS collections."""

__version__ = "0.1.0"
