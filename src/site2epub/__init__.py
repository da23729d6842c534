"""Scrape a list of articles and compile them into EPUB books."""

__version__ = "0.1.0"
