"""docpublish: build the documentation site and publish it to the docs repository."""

__version__ = "1.0.0"
