"""
comicshelf: browse the ComicVine catalog with a local cache and favorites.
"""

__version__ = "1.0.0"
