"""
TagFlow renders per-page analytics tracking code.

Variables come from settings and registered contributors, placeholders are
resolved against the entities of the current request, and tracking matchers
decide whether a page is tracked at all.
"""

__version__ = "0.3.0"
