# focus_crawler/__init__.py
"""
FocusCrawler package initializer.
Defines package version; the command line lives in :mod:`focus_crawler.cli`.
"""
__version__ = "0.1.0"

__all__ = ["__version__"]
