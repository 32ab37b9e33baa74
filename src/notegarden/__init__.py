"""Build a static site from a folder of [[wikilinked]] markdown notes."""

__version__ = "0.1.0"
