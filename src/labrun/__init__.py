"""labrun: lab instrument run ingestion service."""

__version__ = "0.1.0"
